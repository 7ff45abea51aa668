# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import logging
import os
import signal
import sys

from protocol.config import params
from protocol.config.params import NETWORKS, get_network
from ..core.host import HostService
from ..core.settings import default_internal_settings
from ..rpc import api
from ..rpc.announcer import NodeAnnouncer
from ..storage.db import HostDB, host_db_path
from ..storage.folders import FolderRegistry

logger = logging.getLogger(__name__)

def select_network(network_id: str):
    """Switches the process-wide network config."""
    params.CURRENT_NETWORK = get_network(network_id)
    return params.CURRENT_NETWORK

def cmd_init(args):
    """Initialize host data dir with default settings for the network."""
    config = select_network(args.network)
    db_path = host_db_path(args.datadir)
    db = HostDB(db_path)
    try:
        if db.get_state("settings") and not args.force:
            print(f"Host already initialized at {db_path} (use --force to reset settings)")
            return
        settings = default_internal_settings(config)
        db.set_state("settings", settings.model_dump_json(by_alias=True))
        print(f"Initialized {config.network_id} host at {db_path}")
        print(f"Window size: {settings.window_size} blocks, max duration: {settings.max_duration} blocks")
    finally:
        db.close()

def cmd_run(args):
    config = select_network(args.network)
    db = HostDB(host_db_path(args.datadir))
    node_url = args.node or os.environ.get("HOST_NODE", config.node_url)

    service = HostService(
        storage=FolderRegistry(db),
        announcer=NodeAnnouncer(node_url),
        db=db,
        config=config,
    )
    logger.info(f"Host running on {config.network_id}, announcing through {node_url}")

    def shutdown(signum, frame):
        logger.info("Shutting down, persisting host state...")
        service.persist()
        sys.exit(0)

    signal.signal(signal.SIGTERM, shutdown)
    try:
        api.start_rpc_server(service, bind_host=args.host, port=args.port)
    finally:
        service.persist()
        db.close()

def main():
    parser = argparse.ArgumentParser(description="Storage host daemon")
    parser.add_argument("--datadir", default="./.hostd", help="Data directory")
    parser.add_argument("--network", default=params.CURRENT_NETWORK.network_id,
                        choices=sorted(NETWORKS), help="Network to host on")
    subparsers = parser.add_subparsers(dest="command")

    init_parser = subparsers.add_parser("init", help="Initialize host data dir")
    init_parser.add_argument("--force", action="store_true", help="Overwrite existing settings")

    run_parser = subparsers.add_parser("run", help="Run the host")
    run_parser.add_argument("--host", default="0.0.0.0", help="RPC Host")
    run_parser.add_argument("--port", type=int, default=8080, help="RPC Port")
    run_parser.add_argument("--node", default=None, help="Chain node URL used for announcements")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    if args.command == "init":
        cmd_init(args)
    elif args.command == "run":
        cmd_run(args)
    else:
        parser.print_help()

if __name__ == "__main__":
    main()
