# MIT License
# Copyright (c) 2025 Hashborn

import pytest

from host.storage.db import HostDB, host_db_path
from host.storage.folders import MIN_FOLDER_SIZE, FolderRegistry
from protocol.types.common import ValidationError


@pytest.fixture
def db(tmp_path):
    database = HostDB(host_db_path(str(tmp_path / "datadir")))
    yield database
    database.close()


def test_db_path_lives_in_host_dir(tmp_path):
    path = host_db_path(str(tmp_path))
    assert path == str(tmp_path / "host" / "host.db")
    assert (tmp_path / "host").is_dir()


def test_state_round_trip(db):
    assert db.get_state("settings") is None
    db.set_state("settings", "{}")
    db.set_states({"financial": "a", "network": "b"})
    assert db.get_state("settings") == "{}"
    assert db.get_state("financial") == "a"
    assert db.get_state("network") == "b"

    db.clear_state()
    assert db.get_state("financial") is None


def test_add_and_list_folders(tmp_path, db):
    registry = FolderRegistry(db)
    registry.add_storage_folder(str(tmp_path), MIN_FOLDER_SIZE)

    folders = registry.storage_folders()
    assert len(folders) == 1
    assert folders[0].index == 0
    assert folders[0].capacity == folders[0].capacity_remaining == MIN_FOLDER_SIZE


def test_folder_validation(tmp_path):
    registry = FolderRegistry()
    with pytest.raises(ValidationError, match="below minimum"):
        registry.add_storage_folder(str(tmp_path), 1)
    with pytest.raises(ValidationError, match="not a directory"):
        registry.add_storage_folder(str(tmp_path / "missing"), MIN_FOLDER_SIZE)

    registry.add_storage_folder(str(tmp_path), MIN_FOLDER_SIZE)
    with pytest.raises(ValidationError, match="already added"):
        registry.add_storage_folder(str(tmp_path), MIN_FOLDER_SIZE)


def test_resize_and_remove(tmp_path):
    registry = FolderRegistry()
    registry.add_storage_folder(str(tmp_path), MIN_FOLDER_SIZE)

    registry.resize_storage_folder(0, MIN_FOLDER_SIZE * 2)
    assert registry.storage_folders()[0].capacity == MIN_FOLDER_SIZE * 2

    with pytest.raises(ValidationError):
        registry.resize_storage_folder(0, 10)

    registry.remove_storage_folder(0)
    assert registry.storage_folders() == []

    with pytest.raises(ValidationError, match="not found"):
        registry.remove_storage_folder(0)


def test_folders_persist(tmp_path, db):
    FolderRegistry(db).add_storage_folder(str(tmp_path), MIN_FOLDER_SIZE)
    reloaded = FolderRegistry(db)
    assert [f.path for f in reloaded.storage_folders()] == [str(tmp_path)]
