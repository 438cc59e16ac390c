from pathlib import Path

import pytest

from symstore.exceptions import StorageError
from symstore.objects.types import ObjectFormat, ObjectIdentity, ResourceType
from symstore.storage.local import LocalStorage


@pytest.fixture
def identity(tmp_path: Path) -> ObjectIdentity:
    source = tmp_path / "src" / "app.pdb"
    source.parent.mkdir()
    source.write_bytes(b"pdb-bytes")
    return ObjectIdentity(source, ObjectFormat.PDB, ResourceType.DEBUG_INFO, "ABC1", 9)


def test_put_file_creates_layout(tmp_path: Path, identity: ObjectIdentity) -> None:
    storage = LocalStorage(tmp_path / "store")
    destination = storage.put_file("app.pdb/ABC1/app.pdb", identity)

    target = tmp_path / "store" / "app.pdb" / "ABC1" / "app.pdb"
    assert destination == str(target)
    assert target.read_bytes() == b"pdb-bytes"
    assert storage.exists("app.pdb/ABC1/app.pdb")


def test_put_file_overwrites(tmp_path: Path, identity: ObjectIdentity) -> None:
    storage = LocalStorage(tmp_path / "store")
    target = tmp_path / "store" / "k" / "app.pdb"
    target.parent.mkdir(parents=True)
    target.write_bytes(b"old")

    storage.put_file("k/app.pdb", identity)
    assert target.read_bytes() == b"pdb-bytes"


def test_no_existence_check_and_lazy_root(tmp_path: Path) -> None:
    storage = LocalStorage(tmp_path / "store")
    assert storage.supports_exists is False
    assert not (tmp_path / "store").exists()
    assert storage.destination("a/b/c") == str(tmp_path / "store" / "a" / "b" / "c")


def test_copy_failure_raises_storage_error(tmp_path: Path) -> None:
    missing = ObjectIdentity(tmp_path / "gone.pdb", ObjectFormat.PDB, ResourceType.DEBUG_INFO, "A1", 1)
    with pytest.raises(StorageError):
        LocalStorage(tmp_path / "store").put_file("gone.pdb/A1/gone.pdb", missing)
