"""grantfs: scoped access to user-granted directory trees.

Path resolution, tree operations, persisted grants and storage volumes —
behind one synchronous or asynchronous facade.
"""

__version__ = "0.1.0"

from grantfs._storage import ScopedStorage
from grantfs._storage_async import ScopedStorageAsync
from grantfs.events import EventBus, EventType, GrantEvent
from grantfs.fs.exceptions import (
    GrantFSError,
    GrantNotFoundError,
    NotATreeError,
    PickInProgressError,
    StorageError,
)
from grantfs.fs.types import (
    ConsentResponse,
    EntryInfo,
    ErrorKind,
    GrantId,
    GrantInfo,
    PickedTree,
)
from grantfs.fs.utils import normalize_segments
from grantfs.share_inbox import SharedFileInbox
from grantfs.volumes.types import StorageRoot, StorageVolume

__all__ = [
    "ConsentResponse",
    "EntryInfo",
    "ErrorKind",
    "EventBus",
    "EventType",
    "GrantEvent",
    "GrantFSError",
    "GrantId",
    "GrantInfo",
    "GrantNotFoundError",
    "NotATreeError",
    "PickInProgressError",
    "PickedTree",
    "ScopedStorage",
    "ScopedStorageAsync",
    "SharedFileInbox",
    "StorageError",
    "StorageRoot",
    "StorageVolume",
    "__version__",
    "normalize_segments",
]
