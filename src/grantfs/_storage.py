"""ScopedStorage — the synchronous boundary facade.

Wires the permission store, tree provider, tree operations, grant
registry, directory picker, volume enumerator and share inbox together,
then narrows every internal result to the plain sentinel callers expect:
``False``, ``None``, ``[]``, ``-1`` or ``0`` for "did not happen".
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy import create_engine

from grantfs.events import EventBus
from grantfs.fs.grant_store import SqlPermissionStore
from grantfs.fs.grants import DirectoryPicker, GrantRegistry
from grantfs.fs.local_tree import LocalTreeProvider
from grantfs.fs.operations import TreeOperations
from grantfs.fs.types import GrantId
from grantfs.share_inbox import SharedFileInbox
from grantfs.volumes.enumerator import VolumeEnumerator
from grantfs.volumes.sources import PartitionVolumeSource

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from grantfs.fs.protocol import ConsentPrompt, PermissionStore, TreeProvider
    from grantfs.fs.types import EntryInfo, GrantInfo, PickedTree
    from grantfs.volumes.locators import VolumeRootLocator
    from grantfs.volumes.sources import VolumeSource
    from grantfs.volumes.types import StorageRoot

logger = logging.getLogger(__name__)

_DEFAULT_DATA_DIR = Path.home() / ".grantfs"
_GRANT_DB_NAME = "grants.db"
_CACHE_DIR_NAME = "cache"


class ScopedStorage:
    """Access to user-granted directory trees, storage volumes and shares.

    Usage::

        with ScopedStorage(prompt=my_prompt) as storage:
            tree = storage.pick_directory_tree()
            if tree is not None:
                storage.write_file(tree.grant_id, "notes/today.txt", b"hi")

    Pass ``store`` and ``provider`` together to back grants with something
    other than host directories; the default provider reads host paths
    from the built-in SQLite store.

    Every method is a blocking call.  Only ``pick_directory_tree`` raises,
    with ``PickInProgressError`` when a picker is already open.
    """

    def __init__(
        self,
        *,
        data_dir: str | Path | None = None,
        engine: Engine | None = None,
        store: PermissionStore | None = None,
        provider: TreeProvider | None = None,
        prompt: ConsentPrompt | None = None,
        volume_source: VolumeSource | None = None,
        locator: VolumeRootLocator | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        self._closed = False
        self._data_dir = Path(data_dir) if data_dir else _DEFAULT_DATA_DIR

        self._owns_engine = engine is None
        if engine is None:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            engine = create_engine(
                f"sqlite:///{self._data_dir / _GRANT_DB_NAME}",
                connect_args={"check_same_thread": False},
            )
        self._engine = engine

        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._store = store if store is not None else SqlPermissionStore(engine)
        if provider is None:
            if not isinstance(self._store, SqlPermissionStore):
                raise ValueError("A custom store needs a matching provider")
            provider = LocalTreeProvider(self._store)

        self._ops = TreeOperations(provider)
        self._registry = GrantRegistry(self._store, provider, self._event_bus)
        self._picker = DirectoryPicker(
            prompt, self._store, self._registry, self._event_bus
        )
        self._volumes = VolumeEnumerator(
            volume_source if volume_source is not None else PartitionVolumeSource(),
            locator,
        )
        self._inbox = SharedFileInbox(self._data_dir / _CACHE_DIR_NAME, self._event_bus)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the grant database connection pool."""
        if self._closed:
            return
        self._closed = True
        if self._owns_engine:
            self._engine.dispose()
        logger.debug("Closed scoped storage at %s", self._data_dir)

    def __enter__(self) -> ScopedStorage:
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()

    @staticmethod
    def _grant(grant_id: str | GrantId | None) -> GrantId | None:
        if grant_id is None:
            return None
        parsed = GrantId.parse(grant_id)
        return parsed if parsed.value else None

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    def pick_directory_tree(self) -> PickedTree | None:
        """Ask the user for a tree.  ``None`` if cancelled."""
        result = self._picker.pick()
        return result.tree if result.success else None

    def list_grants(self) -> list[GrantInfo]:
        return self._registry.list_grants()

    def revoke_grant(self, grant_id: str | GrantId) -> bool:
        grant = self._grant(grant_id)
        if grant is None:
            return False
        return self._registry.revoke(grant).success

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------

    def list_entries(self, grant_id: str | GrantId, path: str = "") -> list[EntryInfo]:
        grant = self._grant(grant_id)
        if grant is None:
            return []
        result = self._ops.list_entries(grant, path)
        return result.entries if result.success else []

    def exists(self, grant_id: str | GrantId, path: str) -> bool:
        grant = self._grant(grant_id)
        if grant is None:
            return False
        return self._ops.stat(grant, path).success

    def file_size(self, grant_id: str | GrantId, path: str) -> int:
        """Byte length, or ``-1`` if absent."""
        grant = self._grant(grant_id)
        if grant is None:
            return -1
        result = self._ops.stat(grant, path)
        return result.size if result.success else -1

    def modified_at(self, grant_id: str | GrantId, path: str) -> int:
        """Milliseconds since epoch, or ``0`` if absent."""
        grant = self._grant(grant_id)
        if grant is None:
            return 0
        result = self._ops.stat(grant, path)
        return result.modified_at if result.success else 0

    def read_file(self, grant_id: str | GrantId, path: str) -> bytes | None:
        grant = self._grant(grant_id)
        if grant is None:
            return None
        result = self._ops.read_bytes(grant, path)
        return result.content if result.success else None

    def write_file(self, grant_id: str | GrantId, path: str, data: bytes | None) -> bool:
        grant = self._grant(grant_id)
        if grant is None or data is None:
            return False
        return self._ops.write_bytes(grant, path, data).success

    def create_directory(self, grant_id: str | GrantId, path: str) -> bool:
        grant = self._grant(grant_id)
        if grant is None:
            return False
        return self._ops.create_directory(grant, path).success

    def delete(self, grant_id: str | GrantId, path: str) -> bool:
        grant = self._grant(grant_id)
        if grant is None:
            return False
        return self._ops.delete(grant, path).success

    def rename(self, grant_id: str | GrantId, from_path: str, new_name: str) -> bool:
        grant = self._grant(grant_id)
        if grant is None:
            return False
        return self._ops.rename(grant, from_path, new_name).success

    # ------------------------------------------------------------------
    # Volumes and shares
    # ------------------------------------------------------------------

    def list_storage_roots(self) -> list[StorageRoot]:
        return self._volumes.list_roots()

    def consume_shared_files(self) -> list[str]:
        return self._inbox.consume()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def ops(self) -> TreeOperations:
        """The underlying ``TreeOperations`` (full results, for diagnostics)."""
        return self._ops

    @property
    def registry(self) -> GrantRegistry:
        return self._registry

    @property
    def inbox(self) -> SharedFileInbox:
        return self._inbox

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def store(self) -> PermissionStore:
        return self._store

