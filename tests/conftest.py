"""Shared fixtures for grantfs tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine

from grantfs.fs.grant_store import SqlPermissionStore
from grantfs.fs.local_tree import LocalTreeProvider
from grantfs.fs.operations import TreeOperations

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy import Engine

    from grantfs.fs.types import GrantId


@pytest.fixture
def engine() -> Engine:
    """In-memory SQLite engine shared across threads, with all tables created."""
    eng = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(eng)
    return eng


@pytest.fixture
def store(engine: Engine) -> SqlPermissionStore:
    return SqlPermissionStore(engine)


@pytest.fixture
def provider(store: SqlPermissionStore) -> LocalTreeProvider:
    return LocalTreeProvider(store)


@pytest.fixture
def ops(provider: LocalTreeProvider) -> TreeOperations:
    return TreeOperations(provider)


@pytest.fixture
def tree_dir(tmp_path: Path) -> Path:
    """Host directory standing in for a user-picked tree."""
    d = tmp_path / "Documents"
    d.mkdir()
    return d


@pytest.fixture
def grant(store: SqlPermissionStore, tree_dir: Path) -> GrantId:
    """Read-write grant on ``tree_dir``."""
    return store.take_persistable(str(tree_dir), read=True, write=True)
