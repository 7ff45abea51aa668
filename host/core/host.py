# MIT License
# Copyright (c) 2025 Hashborn

"""
Host capability contracts and the service that owns host economic state.

Host            economic surface: announcements, settings, metrics snapshots
StorageManager  storage folder management (implemented elsewhere)
Announcer       submits host announcements to the chain (implemented elsewhere)

HostService implements Host and StorageManager side by side. Storage calls are
delegated to the StorageManager it is given; it owns only the economic state.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from pydantic import BaseModel

from protocol.config.params import HostNetworkConfig
from protocol.types.common import RPCCall, ValidationError
from protocol.types.currency import NetAddress, UINT64_MAX
from ..observability import metrics as host_metrics
from ..storage.db import HostDB
from . import ledger
from .ledger import StorageObligation
from .metrics import FinancialMetrics, NetworkMetrics
from .settings import InternalSettings, default_internal_settings, validate_internal_settings

logger = logging.getLogger(__name__)

# RPCCall -> NetworkMetrics counter
CALL_COUNTERS = {
    RPCCall.DOWNLOAD: "download_calls",
    RPCCall.FORM_CONTRACT: "form_contract_calls",
    RPCCall.RENEW: "renew_calls",
    RPCCall.REVISE: "revise_calls",
    RPCCall.SETTINGS: "settings_calls",
    RPCCall.ERROR: "error_calls",
    RPCCall.UNRECOGNIZED: "unrecognized_calls",
}


class StorageFolder(BaseModel):
    index: int
    path: str
    capacity: int               # Bytes
    capacity_remaining: int     # Bytes


class StorageManager(ABC):
    """Adding, resizing and removing the folders a host stores sectors in."""

    @abstractmethod
    def add_storage_folder(self, path: str, size: int) -> None:
        pass

    @abstractmethod
    def remove_storage_folder(self, index: int, force: bool = False) -> None:
        pass

    @abstractmethod
    def resize_storage_folder(self, index: int, new_size: int) -> None:
        pass

    @abstractmethod
    def storage_folders(self) -> List[StorageFolder]:
        pass


class Announcer(ABC):
    """Submits a host announcement to the chain."""

    @abstractmethod
    def broadcast(self, address: NetAddress) -> None:
        """Raises BroadcastError if the announcement could not be submitted."""
        pass


class Host(ABC):
    """
    A host offers storage to the network. It manages announcements and
    settings and reports the financial and network statistics of hosting.
    """

    @abstractmethod
    def announce(self) -> None:
        """Submits a host announcement using the configured net address."""
        pass

    @abstractmethod
    def announce_address(self, address: NetAddress) -> None:
        """Submits a host announcement using the given address."""
        pass

    @abstractmethod
    def financial_metrics(self) -> FinancialMetrics:
        pass

    @abstractmethod
    def internal_settings(self) -> InternalSettings:
        pass

    @abstractmethod
    def network_metrics(self) -> NetworkMetrics:
        pass

    @abstractmethod
    def set_internal_settings(self, settings: InternalSettings) -> None:
        """Replaces all settings at once. Raises ValidationError and keeps the old settings if invalid."""
        pass


class HostService(Host, StorageManager):
    """
    Concrete host. All state lives on the instance and is guarded by one lock:
    writers replace records under the lock, readers get deep copies taken under
    the lock, so no caller ever sees a half-applied update.
    """

    def __init__(self,
                 storage: StorageManager,
                 announcer: Announcer,
                 db: Optional[HostDB] = None,
                 config: Optional[HostNetworkConfig] = None):
        self.storage = storage
        self.announcer = announcer
        self.db = db
        self.config = config
        self._lock = threading.RLock()

        self._financial = FinancialMetrics()
        self._settings = default_internal_settings(config)
        self._network = NetworkMetrics()

        if self.db:
            self.load()

    # --- Persistence ---

    def load(self):
        """Restores records from the database; missing records keep their current values."""
        with self._lock:
            raw = self.db.get_state("settings")
            if raw:
                stored = InternalSettings.model_validate_json(raw)
                try:
                    validate_internal_settings(stored)
                    self._settings = stored
                except ValidationError as e:
                    logger.error(f"Stored settings rejected, using network defaults: {e}")
                    self._settings = default_internal_settings(self.config)
            raw = self.db.get_state("financial")
            if raw:
                self._financial = FinancialMetrics.model_validate_json(raw)
            raw = self.db.get_state("network")
            if raw:
                self._network = NetworkMetrics.model_validate_json(raw)
        logger.info(f"Loaded host state (accepting contracts: {self._settings.accepting_contracts})")

    def persist(self):
        """Writes a consistent snapshot of all three records."""
        if not self.db:
            return
        with self._lock:
            self.db.set_states({
                "settings": self._settings.model_dump_json(by_alias=True),
                "financial": self._financial.model_dump_json(by_alias=True),
                "network": self._network.model_dump_json(by_alias=True),
            })

    def _save(self, key: str, record: BaseModel):
        if self.db:
            self.db.set_state(key, record.model_dump_json(by_alias=True))

    # --- Announcements ---

    def announce(self) -> None:
        address = self.internal_settings().net_address
        if not address:
            raise ValidationError("No net address configured; set netaddress or announce a specific address")
        self._broadcast(address)

    def announce_address(self, address: NetAddress) -> None:
        address = NetAddress(address)
        if not address.is_valid():
            raise ValidationError(f"Invalid announce address: {address!r}")
        self._broadcast(address)

    def _broadcast(self, address: NetAddress):
        logger.info(f"Announcing host at {address}")
        # Blocking; the lock is not held while the announcer works
        self.announcer.broadcast(address)
        with self._lock:
            self._network.net_address = address
        logger.info(f"Host announcement for {address} submitted")

    # --- Snapshots ---

    def financial_metrics(self) -> FinancialMetrics:
        with self._lock:
            return self._financial.model_copy(deep=True)

    def internal_settings(self) -> InternalSettings:
        with self._lock:
            return self._settings.model_copy(deep=True)

    def network_metrics(self) -> NetworkMetrics:
        with self._lock:
            return self._network.model_copy(deep=True)

    def set_internal_settings(self, settings: InternalSettings) -> None:
        candidate = settings.model_copy(deep=True)
        validate_internal_settings(candidate)
        with self._lock:
            # Persist first so a failed write leaves the old settings live
            self._save("settings", candidate)
            self._settings = candidate
        host_metrics.accepting_contracts.set(1 if candidate.accepting_contracts else 0)
        logger.info("Internal settings updated")

    # --- Ledger transitions (driven by contract settlement) ---

    def _transition(self, apply: Callable[[FinancialMetrics, StorageObligation], FinancialMetrics],
                    ob: StorageObligation) -> FinancialMetrics:
        with self._lock:
            updated = apply(self._financial, ob)
            self._save("financial", updated)
            self._financial = updated
            return updated.model_copy(deep=True)

    def add_storage_obligation(self, ob: StorageObligation) -> FinancialMetrics:
        logger.debug(f"Adding storage obligation {ob.obligation_id}")
        return self._transition(ledger.add_obligation, ob)

    def succeed_storage_obligation(self, ob: StorageObligation) -> FinancialMetrics:
        logger.debug(f"Storage obligation {ob.obligation_id} succeeded")
        return self._transition(ledger.succeed_obligation, ob)

    def fail_storage_obligation(self, ob: StorageObligation) -> FinancialMetrics:
        logger.warning(f"Storage obligation {ob.obligation_id} failed; revenue and collateral lost")
        return self._transition(ledger.fail_obligation, ob)

    def collateral_budget_remaining(self):
        with self._lock:
            return ledger.collateral_budget_remaining(self._financial, self._settings)

    # --- Call accounting ---

    def record_call(self, call: RPCCall) -> None:
        call = RPCCall(call)
        counter = CALL_COUNTERS[call]
        with self._lock:
            setattr(self._network, counter, min(getattr(self._network, counter) + 1, UINT64_MAX))
        host_metrics.rpc_calls_total.labels(call=call.value).inc()

    def record_bandwidth(self, download: int = 0, upload: int = 0) -> None:
        if download < 0 or upload < 0:
            raise ValidationError(f"Bandwidth must be non-negative (download={download}, upload={upload})")
        with self._lock:
            n = self._network
            n.download_bandwidth_consumed = min(n.download_bandwidth_consumed + download, UINT64_MAX)
            n.upload_bandwidth_consumed = min(n.upload_bandwidth_consumed + upload, UINT64_MAX)
        host_metrics.bandwidth_bytes_total.labels(direction="download").inc(download)
        host_metrics.bandwidth_bytes_total.labels(direction="upload").inc(upload)

    # --- StorageManager (delegated) ---

    def add_storage_folder(self, path: str, size: int) -> None:
        logger.info(f"Adding storage folder {path} ({size} bytes)")
        self.storage.add_storage_folder(path, size)

    def remove_storage_folder(self, index: int, force: bool = False) -> None:
        logger.info(f"Removing storage folder {index} (force={force})")
        self.storage.remove_storage_folder(index, force)

    def resize_storage_folder(self, index: int, new_size: int) -> None:
        self.storage.resize_storage_folder(index, new_size)

    def storage_folders(self) -> List[StorageFolder]:
        return self.storage.storage_folders()
