"""Tests for SqlPermissionStore — persisted grants in SQLite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from grantfs.fs.exceptions import GrantFSError, GrantNotFoundError, NotATreeError
from grantfs.fs.grant_store import GRANT_SCHEME, SqlPermissionStore, mint_grant_id
from grantfs.fs.protocol import PermissionStore
from grantfs.fs.types import GrantId

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine


class TestMintGrantId:
    def test_format(self, tmp_path: Path):
        grant = mint_grant_id(tmp_path / "My Docs")
        assert grant.value.startswith(f"{GRANT_SCHEME}://local/")
        assert grant.value.endswith("/My%20Docs")

    def test_unique(self, tmp_path: Path):
        assert mint_grant_id(tmp_path) != mint_grant_id(tmp_path)


class TestTakePersistable:
    def test_is_a_permission_store(self, store: SqlPermissionStore):
        assert isinstance(store, PermissionStore)

    def test_persists_flags(self, store: SqlPermissionStore, tree_dir: Path):
        grant = store.take_persistable(str(tree_dir), read=True, write=False)
        record = store.lookup(grant)
        assert record is not None
        assert record.host_path == str(tree_dir.resolve())
        assert record.can_read is True
        assert record.can_write is False

    def test_regrant_keeps_identifier(self, store: SqlPermissionStore, tree_dir: Path):
        first = store.take_persistable(str(tree_dir), read=True, write=False)
        second = store.take_persistable(str(tree_dir), read=True, write=True)
        assert first == second
        assert store.lookup(first).can_write is True
        assert len(store.persisted_permissions()) == 1

    def test_same_tree_different_spelling(
        self, store: SqlPermissionStore, tree_dir: Path
    ):
        first = store.take_persistable(str(tree_dir))
        second = store.take_persistable(f"{tree_dir}/sub/..")
        assert first == second

    @pytest.mark.parametrize(
        "name",
        [pytest.param("plain.txt", id="regular-file"), pytest.param("missing", id="missing")],
    )
    def test_refuses_non_directory(
        self, store: SqlPermissionStore, tmp_path: Path, name: str
    ):
        (tmp_path / "plain.txt").write_bytes(b"x")
        with pytest.raises(NotATreeError):
            store.take_persistable(str(tmp_path / name))
        assert store.persisted_permissions() == []

    def test_survives_new_store(self, engine: Engine, tree_dir: Path):
        grant = SqlPermissionStore(engine).take_persistable(str(tree_dir))
        assert SqlPermissionStore(engine).lookup(grant) is not None


class TestPersistedPermissions:
    def test_empty(self, store: SqlPermissionStore):
        assert store.persisted_permissions() == []

    def test_oldest_first(self, store: SqlPermissionStore, tmp_path: Path):
        grants = []
        for name in ("b", "a", "c"):
            (tmp_path / name).mkdir()
            grants.append(store.take_persistable(str(tmp_path / name)))
        assert [p.grant_id for p in store.persisted_permissions()] == grants

    def test_flags(self, store: SqlPermissionStore, tree_dir: Path):
        store.take_persistable(str(tree_dir), read=True, write=False)
        (perm,) = store.persisted_permissions()
        assert perm.read is True
        assert perm.write is False


class TestReleasePersistable:
    def test_release(self, store: SqlPermissionStore, grant):
        store.release_persistable(grant)
        assert store.lookup(grant) is None
        assert store.persisted_permissions() == []

    def test_release_unknown(self, store: SqlPermissionStore):
        with pytest.raises(GrantNotFoundError):
            store.release_persistable(GrantId("tree://local/none/x"))

    def test_release_twice(self, store: SqlPermissionStore, grant):
        store.release_persistable(grant)
        with pytest.raises(GrantFSError):
            store.release_persistable(grant)
