"""Result types: ReadResult, WriteResult, ListResult, etc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocol import DocumentHandle


@dataclass(frozen=True, slots=True)
class GrantId:
    """Opaque identifier for a user-approved directory tree.

    Only equality and ``str()`` round-tripping are guaranteed.  Never build
    one from parts; take it from the permission store or the picker.
    """

    value: str

    @classmethod
    def parse(cls, raw: str | GrantId) -> GrantId:
        if isinstance(raw, GrantId):
            return raw
        return cls(raw.strip())

    def __str__(self) -> str:
        return self.value


class ErrorKind(str, Enum):
    """Why an operation did not happen."""

    NOT_FOUND = "not_found"
    KIND_MISMATCH = "kind_mismatch"
    PERMISSION_DENIED = "permission_denied"
    NAME_COLLISION = "name_collision"
    CANCELLED = "cancelled"
    INVALID_ARGUMENT = "invalid_argument"


@dataclass
class EntryInfo:
    """One child of a listed directory."""

    name: str
    is_directory: bool
    size: int = 0
    modified_at: int = 0  # milliseconds since epoch


@dataclass
class GrantInfo:
    """A persisted grant as reported by the registry."""

    grant_id: GrantId
    name: str
    read: bool
    write: bool


@dataclass
class PersistedPermission:
    """Raw (identifier, capabilities) pair held by a permission store."""

    grant_id: GrantId
    read: bool
    write: bool


@dataclass
class PickedTree:
    """Outcome of an approved directory pick."""

    grant_id: GrantId
    name: str


@dataclass
class ResolveResult:
    """Result of resolving a relative path inside a grant."""

    success: bool
    message: str
    handle: DocumentHandle | None = None
    error: ErrorKind | None = None
    created_dirs: list[str] = field(default_factory=list)


@dataclass
class StatResult:
    """Result of a stat operation."""

    success: bool
    message: str
    is_directory: bool = False
    size: int = -1
    modified_at: int = 0
    error: ErrorKind | None = None


@dataclass
class ListResult:
    """Result of a list directory operation."""

    success: bool
    message: str
    entries: list[EntryInfo] = field(default_factory=list)
    path: str = ""
    error: ErrorKind | None = None


@dataclass
class ReadResult:
    """Result of a read operation."""

    success: bool
    message: str
    content: bytes | None = None
    path: str | None = None
    error: ErrorKind | None = None


@dataclass
class WriteResult:
    """Result of a write operation."""

    success: bool
    message: str
    path: str | None = None
    created: bool = False
    bytes_written: int = 0
    error: ErrorKind | None = None


@dataclass
class MkdirResult:
    """Result of a mkdir operation."""

    success: bool
    message: str
    path: str | None = None
    created_dirs: list[str] = field(default_factory=list)
    error: ErrorKind | None = None


@dataclass
class DeleteResult:
    """Result of a delete operation."""

    success: bool
    message: str
    path: str | None = None
    error: ErrorKind | None = None


@dataclass
class RenameResult:
    """Result of a rename operation."""

    success: bool
    message: str
    old_path: str | None = None
    new_name: str | None = None
    error: ErrorKind | None = None


@dataclass
class RevokeResult:
    """Result of releasing a persisted grant."""

    success: bool
    message: str
    grant_id: GrantId | None = None
    error: ErrorKind | None = None


@dataclass
class PickResult:
    """Result of a directory picker request."""

    success: bool
    message: str
    tree: PickedTree | None = None
    error: ErrorKind | None = None


@dataclass
class ConsentResponse:
    """What a consent prompt hands back when the user approves a tree."""

    location: str
    read: bool = True
    write: bool = True
