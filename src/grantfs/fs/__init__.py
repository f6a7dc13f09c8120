"""Filesystem layer — path resolution, tree operations, grants, local platform."""

from grantfs.fs.exceptions import (
    GrantFSError,
    GrantNotFoundError,
    NotATreeError,
    PickInProgressError,
    StorageError,
)
from grantfs.fs.grant_store import SqlPermissionStore
from grantfs.fs.grants import DirectoryPicker, GrantRegistry, PendingPick
from grantfs.fs.local_tree import LocalDocument, LocalTreeProvider
from grantfs.fs.operations import TreeOperations
from grantfs.fs.permissions import Permission
from grantfs.fs.protocol import (
    ConsentPrompt,
    DocumentHandle,
    PermissionStore,
    TreeProvider,
)
from grantfs.fs.resolver import TreeResolver
from grantfs.fs.types import (
    ConsentResponse,
    DeleteResult,
    EntryInfo,
    ErrorKind,
    GrantId,
    GrantInfo,
    ListResult,
    MkdirResult,
    PersistedPermission,
    PickedTree,
    PickResult,
    ReadResult,
    RenameResult,
    ResolveResult,
    RevokeResult,
    StatResult,
    WriteResult,
)
from grantfs.fs.utils import normalize_segments

__all__ = [
    "ConsentPrompt",
    "ConsentResponse",
    "DeleteResult",
    "DirectoryPicker",
    "DocumentHandle",
    "EntryInfo",
    "ErrorKind",
    "GrantFSError",
    "GrantId",
    "GrantInfo",
    "GrantNotFoundError",
    "NotATreeError",
    "GrantRegistry",
    "ListResult",
    "LocalDocument",
    "LocalTreeProvider",
    "MkdirResult",
    "PendingPick",
    "Permission",
    "PermissionStore",
    "PersistedPermission",
    "PickInProgressError",
    "PickResult",
    "PickedTree",
    "ReadResult",
    "RenameResult",
    "ResolveResult",
    "RevokeResult",
    "SqlPermissionStore",
    "StatResult",
    "StorageError",
    "TreeOperations",
    "TreeProvider",
    "TreeResolver",
    "WriteResult",
    "normalize_segments",
]
