# MIT License
# Copyright (c) 2025 Hashborn

import os
from typing import Dict

# Global Constants
DENOM = "SC"
COIN_PRECISION = 10**24            # Hastings per whole coin

BYTES_PER_TERABYTE = 10**12
BLOCKS_PER_DAY = 144
BLOCKS_PER_MONTH = 4320            # 30 days

# Directory (inside the data dir) holding host persistence
HOST_DIR = "host"
HOST_DB_FILE = "host.db"

# Settings bounds
MIN_WINDOW_SIZE = 36                       # ~6 hours of blocks
MAX_BATCH_SIZE_LIMIT = 1 << 30             # 1 GiB per RPC call
COLLATERAL_FRACTION_PRECISION = 10**4      # max_collateral_fraction is parts per 10,000

class HostNetworkConfig:
    def __init__(self,
                 network_id: str,
                 block_time_sec: int,
                 window_size: int,
                 max_duration: int,
                 max_download_batch_size: int = 17 * (1 << 20),
                 max_revise_batch_size: int = 17 * (1 << 20),
                 # Human prices used to derive default consensus prices
                 storage_price_sc_month_tb: int = 50,       # SC / TB / month
                 collateral_sc_month_tb: int = 75,          # SC / TB / month
                 download_price_sc_tb: int = 10,            # SC / TB
                 upload_price_sc_tb: int = 1,               # SC / TB
                 contract_price_sc: int = 3,                # SC per contract
                 # Collateral policy
                 collateral_budget_sc: int = 100_000,
                 max_collateral_sc: int = 5_000,
                 max_collateral_fraction: int = 1_500,      # 15.00%
                 # Default announce target (chain node RPC)
                 node_url: str = "http://localhost:8000"):
        self.network_id = network_id
        self.block_time_sec = block_time_sec
        self.window_size = window_size
        self.max_duration = max_duration
        self.max_download_batch_size = max_download_batch_size
        self.max_revise_batch_size = max_revise_batch_size
        self.storage_price_sc_month_tb = storage_price_sc_month_tb
        self.collateral_sc_month_tb = collateral_sc_month_tb
        self.download_price_sc_tb = download_price_sc_tb
        self.upload_price_sc_tb = upload_price_sc_tb
        self.contract_price_sc = contract_price_sc
        self.collateral_budget_sc = collateral_budget_sc
        self.max_collateral_sc = max_collateral_sc
        self.max_collateral_fraction = max_collateral_fraction
        self.node_url = node_url

NETWORKS: Dict[str, HostNetworkConfig] = {
    "devnet": HostNetworkConfig(
        network_id="devnet",
        block_time_sec=5,
        window_size=MIN_WINDOW_SIZE,
        max_duration=BLOCKS_PER_DAY * 7,
        collateral_budget_sc=1_000,
        max_collateral_sc=100,
    ),
    "testnet": HostNetworkConfig(
        network_id="testnet",
        block_time_sec=60,
        window_size=BLOCKS_PER_DAY,
        max_duration=BLOCKS_PER_MONTH,
    ),
    "mainnet": HostNetworkConfig(
        network_id="mainnet",
        block_time_sec=600,
        window_size=BLOCKS_PER_DAY,
        max_duration=BLOCKS_PER_MONTH * 5,   # ~5 months
    ),
}

def get_network(network_id: str) -> HostNetworkConfig:
    if network_id not in NETWORKS:
        raise ValueError(f"Unknown network: {network_id} (expected one of {', '.join(NETWORKS)})")
    return NETWORKS[network_id]

# Selected by HOST_NETWORK, overridable from the daemon CLI
CURRENT_NETWORK = get_network(os.environ.get("HOST_NETWORK", "mainnet"))
