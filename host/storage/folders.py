# MIT License
# Copyright (c) 2025 Hashborn

import json
import logging
import os
import threading
from typing import List, Optional

from protocol.types.common import ValidationError
from ..core.host import StorageFolder, StorageManager
from .db import HostDB

logger = logging.getLogger(__name__)

MIN_FOLDER_SIZE = 1 << 26   # 64 MiB

class FolderRegistry(StorageManager):
    """
    Bookkeeping for storage folders: which directories the host offers and how
    large they are. Sector placement inside the folders is not handled here.
    """

    def __init__(self, db: Optional[HostDB] = None):
        self.db = db
        self._lock = threading.Lock()
        self._folders: List[StorageFolder] = []
        if self.db:
            raw = self.db.get_state("folders")
            if raw:
                self._folders = [StorageFolder.model_validate(f) for f in json.loads(raw)]

    def _persist(self):
        if self.db:
            self.db.set_state("folders", json.dumps([f.model_dump() for f in self._folders]))

    def _find(self, index: int) -> StorageFolder:
        for f in self._folders:
            if f.index == index:
                return f
        raise ValidationError(f"Storage folder {index} not found")

    def add_storage_folder(self, path: str, size: int) -> None:
        if size < MIN_FOLDER_SIZE:
            raise ValidationError(f"Storage folder size {size} below minimum {MIN_FOLDER_SIZE}")
        if not os.path.isdir(path):
            raise ValidationError(f"Storage folder path {path} is not a directory")

        with self._lock:
            path = os.path.abspath(path)
            if any(f.path == path for f in self._folders):
                raise ValidationError(f"Storage folder {path} already added")
            index = max((f.index for f in self._folders), default=-1) + 1
            self._folders.append(StorageFolder(index=index, path=path, capacity=size, capacity_remaining=size))
            self._persist()
        logger.info(f"Storage folder {index} added at {path}")

    def remove_storage_folder(self, index: int, force: bool = False) -> None:
        with self._lock:
            folder = self._find(index)
            if folder.capacity_remaining != folder.capacity and not force:
                raise ValidationError(f"Storage folder {index} still holds data; use force to remove it")
            self._folders.remove(folder)
            self._persist()

    def resize_storage_folder(self, index: int, new_size: int) -> None:
        with self._lock:
            folder = self._find(index)
            used = folder.capacity - folder.capacity_remaining
            if new_size < MIN_FOLDER_SIZE or new_size < used:
                raise ValidationError(f"Cannot resize storage folder {index} to {new_size} bytes ({used} in use)")
            folder.capacity = new_size
            folder.capacity_remaining = new_size - used
            self._persist()

    def storage_folders(self) -> List[StorageFolder]:
        with self._lock:
            return [f.model_copy() for f in self._folders]
