# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import json
import os
import sys

import requests

from protocol.config.params import DENOM
from protocol.types.common import ConversionOverflowError, NegativeCurrencyError
from protocol.units import (
    bandwidth_price_to_consensus,
    bandwidth_price_to_human,
    coins_to_hastings,
    hastings_to_coins,
    storage_price_to_consensus,
    storage_price_to_human,
)

DEFAULT_HOST = "http://localhost:8080"

# Settings entered in human units: key -> (to consensus, to human, unit label)
PRICE_SETTINGS = {
    "contractprice": (coins_to_hastings, hastings_to_coins, DENOM),
    "collateral": (storage_price_to_consensus, storage_price_to_human, f"{DENOM}/TB/month"),
    "storageprice": (storage_price_to_consensus, storage_price_to_human, f"{DENOM}/TB/month"),
    "minimumdownloadbandwidthprice": (bandwidth_price_to_consensus, bandwidth_price_to_human, f"{DENOM}/TB"),
    "minimumuploadbandwidthprice": (bandwidth_price_to_consensus, bandwidth_price_to_human, f"{DENOM}/TB"),
    "collateralbudget": (coins_to_hastings, hastings_to_coins, DENOM),
    "maxcollateral": (coins_to_hastings, hastings_to_coins, DENOM),
}

BOOL_SETTINGS = {"acceptingcontracts"}
STRING_SETTINGS = {"netaddress"}

def get_host_url(args):
    return args.host_url or os.environ.get("HOST_API", DEFAULT_HOST)

def parse_setting(key: str, value: str):
    """
    Converts a command-line value into what POST /host expects.
    Prices are given in human units and sent as hastings strings.
    """
    if key in PRICE_SETTINGS:
        to_consensus, _, _ = PRICE_SETTINGS[key]
        return str(to_consensus(int(value)))
    if key in BOOL_SETTINGS:
        lowered = value.lower()
        if lowered not in ("true", "false", "yes", "no", "1", "0"):
            raise ValueError(f"{key} expects true/false, got {value}")
        return lowered in ("true", "yes", "1")
    if key in STRING_SETTINGS:
        return value
    return int(value)

def format_settings(settings: dict) -> str:
    """Renders internal settings with prices in human units."""
    lines = []
    for key in sorted(settings):
        value = settings[key]
        if key in PRICE_SETTINGS:
            _, to_human, unit = PRICE_SETTINGS[key]
            try:
                lines.append(f"{key:<32} {to_human(int(value))} {unit}")
            except ConversionOverflowError:
                lines.append(f"{key:<32} {value} H (too large to display in {unit})")
        else:
            lines.append(f"{key:<32} {value}")
    return "\n".join(lines)

# --- Host Commands ---
def cmd_host_show(args):
    url = get_host_url(args)
    try:
        resp = requests.get(f"{url}/host")
    except requests.RequestException as e:
        print(f"Error: could not reach host at {url}: {e}")
        sys.exit(1)
    if resp.status_code != 200:
        print(f"Error: {resp.text}")
        sys.exit(1)
    data = resp.json()

    print("Internal settings:")
    print(format_settings(data["internalsettings"]))
    print("\nFinancial metrics (hastings):")
    print(json.dumps(data["financialmetrics"], indent=2))
    print("\nNetwork metrics:")
    print(json.dumps(data["networkmetrics"], indent=2))

def cmd_host_config(args):
    url = get_host_url(args)
    try:
        value = parse_setting(args.key, args.value)
    except (ValueError, ConversionOverflowError, NegativeCurrencyError) as e:
        print(f"Error: invalid value for {args.key}: {e}")
        sys.exit(1)

    resp = requests.post(f"{url}/host", json={args.key: value})
    if resp.status_code != 200:
        print(f"Error: {resp.text}")
        sys.exit(1)
    print(f"Host setting {args.key} updated.")

def cmd_host_announce(args):
    url = get_host_url(args)
    body = {"netaddress": args.address} if args.address else None
    resp = requests.post(f"{url}/host/announce", json=body)
    if resp.status_code != 200:
        print(f"Error: {resp.text}")
        sys.exit(1)
    print(f"Host announced at {resp.json()['netaddress']}.")

def main():
    parser = argparse.ArgumentParser(description="Storage host client")
    parser.add_argument("--host-url", help="Host API URL")
    subparsers = parser.add_subparsers(dest="command")

    p_host = subparsers.add_parser("host", help="Inspect and configure the host")
    sp_host = p_host.add_subparsers(dest="subcommand")

    sp_host.add_parser("show", help="Show settings and metrics")

    ph_config = sp_host.add_parser("config", help="Change a host setting")
    ph_config.add_argument("key", help="Setting key (e.g. storageprice, acceptingcontracts)")
    ph_config.add_argument("value", help="New value; prices in SC, SC/TB or SC/TB/month")

    ph_announce = sp_host.add_parser("announce", help="Announce the host on the network")
    ph_announce.add_argument("address", nargs="?", help="Address to announce (defaults to netaddress)")

    args = parser.parse_args()

    if args.command == "host":
        if args.subcommand == "show": cmd_host_show(args)
        elif args.subcommand == "config": cmd_host_config(args)
        elif args.subcommand == "announce": cmd_host_announce(args)
        else: p_host.print_help()
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
