"""ScopedStorageAsync — the same boundary, off the event loop.

Storage I/O is blocking.  Each call runs the synchronous facade in a
worker thread so enumeration and large reads or writes never stall the
caller's loop.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from grantfs._storage import ScopedStorage

if TYPE_CHECKING:
    from grantfs.fs.types import EntryInfo, GrantId, GrantInfo, PickedTree
    from grantfs.volumes.types import StorageRoot


class ScopedStorageAsync:
    """Async facade over ``ScopedStorage``.

    Usage::

        async with ScopedStorageAsync(data_dir="/myapp/.grantfs") as storage:
            entries = await storage.list_entries(grant_id, "photos")

    Keyword arguments are forwarded to ``ScopedStorage`` unless an existing
    instance is passed.
    """

    def __init__(self, storage: ScopedStorage | None = None, **kwargs: Any) -> None:
        self._storage = storage if storage is not None else ScopedStorage(**kwargs)

    @property
    def sync(self) -> ScopedStorage:
        """The wrapped synchronous facade."""
        return self._storage

    async def close(self) -> None:
        await asyncio.to_thread(self._storage.close)

    async def __aenter__(self) -> ScopedStorageAsync:
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Grants
    # ------------------------------------------------------------------

    async def pick_directory_tree(self) -> PickedTree | None:
        return await asyncio.to_thread(self._storage.pick_directory_tree)

    async def list_grants(self) -> list[GrantInfo]:
        return await asyncio.to_thread(self._storage.list_grants)

    async def revoke_grant(self, grant_id: str | GrantId) -> bool:
        return await asyncio.to_thread(self._storage.revoke_grant, grant_id)

    # ------------------------------------------------------------------
    # Tree operations
    # ------------------------------------------------------------------

    async def list_entries(self, grant_id: str | GrantId, path: str = "") -> list[EntryInfo]:
        return await asyncio.to_thread(self._storage.list_entries, grant_id, path)

    async def exists(self, grant_id: str | GrantId, path: str) -> bool:
        return await asyncio.to_thread(self._storage.exists, grant_id, path)

    async def file_size(self, grant_id: str | GrantId, path: str) -> int:
        return await asyncio.to_thread(self._storage.file_size, grant_id, path)

    async def modified_at(self, grant_id: str | GrantId, path: str) -> int:
        return await asyncio.to_thread(self._storage.modified_at, grant_id, path)

    async def read_file(self, grant_id: str | GrantId, path: str) -> bytes | None:
        return await asyncio.to_thread(self._storage.read_file, grant_id, path)

    async def write_file(
        self, grant_id: str | GrantId, path: str, data: bytes | None
    ) -> bool:
        return await asyncio.to_thread(self._storage.write_file, grant_id, path, data)

    async def create_directory(self, grant_id: str | GrantId, path: str) -> bool:
        return await asyncio.to_thread(self._storage.create_directory, grant_id, path)

    async def delete(self, grant_id: str | GrantId, path: str) -> bool:
        return await asyncio.to_thread(self._storage.delete, grant_id, path)

    async def rename(
        self, grant_id: str | GrantId, from_path: str, new_name: str
    ) -> bool:
        return await asyncio.to_thread(
            self._storage.rename, grant_id, from_path, new_name
        )

    # ------------------------------------------------------------------
    # Volumes and shares
    # ------------------------------------------------------------------

    async def list_storage_roots(self) -> list[StorageRoot]:
        return await asyncio.to_thread(self._storage.list_storage_roots)

    async def consume_shared_files(self) -> list[str]:
        return await asyncio.to_thread(self._storage.consume_shared_files)
