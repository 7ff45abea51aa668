# MIT License
# Copyright (c) 2025 Hashborn

import logging

import requests

from protocol.types.common import BroadcastError
from protocol.types.currency import NetAddress
from ..core.host import Announcer

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30

class NodeAnnouncer(Announcer):
    """Submits host announcements through a chain node's RPC."""

    def __init__(self, node_url: str, timeout: float = DEFAULT_TIMEOUT):
        self.node_url = node_url.rstrip("/")
        self.timeout = timeout

    def broadcast(self, address: NetAddress) -> None:
        url = f"{self.node_url}/host/announcement"
        try:
            resp = requests.post(url, json={"netaddress": str(address)}, timeout=self.timeout)
        except requests.RequestException as e:
            raise BroadcastError(f"Announcement to {url} failed: {e}") from e

        if resp.status_code // 100 != 2:
            raise BroadcastError(f"Node rejected announcement ({resp.status_code}): {resp.text}")
        logger.debug(f"Node accepted announcement for {address}")
