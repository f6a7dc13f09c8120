"""Platform protocols — runtime-checkable interfaces.

The adapter never touches storage or permission state directly.  A
platform supplies a ``TreeProvider`` (grant to root handle), a
``PermissionStore`` (what the user has granted) and optionally a
``ConsentPrompt``.  Every ``DocumentHandle`` method may raise on a lost
grant or unmounted volume; ``resolver.py`` and ``operations.py`` catch it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .types import ConsentResponse, GrantId, PersistedPermission


@runtime_checkable
class DocumentHandle(Protocol):
    """A resolved file or directory inside a granted tree."""

    @property
    def name(self) -> str | None: ...

    @property
    def is_directory(self) -> bool: ...

    def length(self) -> int:
        """Byte length for files, ``0`` for directories."""
        ...

    def last_modified(self) -> int:
        """Milliseconds since epoch, ``0`` if unknown."""
        ...

    def find_file(self, name: str) -> DocumentHandle | None: ...

    def list_files(self) -> list[DocumentHandle]: ...

    def create_directory(self, name: str) -> DocumentHandle | None: ...

    def create_file(self, mime_type: str, name: str) -> DocumentHandle | None: ...

    def delete(self) -> bool: ...

    def rename_to(self, name: str) -> bool: ...

    def read_bytes(self) -> bytes: ...

    def write_bytes(self, data: bytes) -> int:
        """Truncate and replace the whole content.  Returns bytes written."""
        ...


@runtime_checkable
class TreeProvider(Protocol):
    """Maps a grant to the root handle of its tree."""

    def tree_root(self, grant_id: GrantId) -> DocumentHandle | None: ...


@runtime_checkable
class PermissionStore(Protocol):
    """The platform's persisted-grant bookkeeping."""

    def persisted_permissions(self) -> list[PersistedPermission]: ...

    def take_persistable(
        self,
        location: str,
        *,
        read: bool = True,
        write: bool = True,
    ) -> GrantId: ...

    def release_persistable(self, grant_id: GrantId) -> None: ...


@runtime_checkable
class ConsentPrompt(Protocol):
    """Out-of-band user consent: returns the approved tree or ``None``."""

    def request_tree(self) -> ConsentResponse | None: ...
