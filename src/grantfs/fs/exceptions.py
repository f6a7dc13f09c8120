"""Custom exception hierarchy for the grantfs filesystem layer."""


class GrantFSError(Exception):
    """Base exception for all grantfs errors."""


class GrantNotFoundError(GrantFSError):
    """Raised when a grant identifier is not held by the permission store."""


class PickInProgressError(GrantFSError):
    """Raised when a directory picker is requested while another is still open."""


class StorageError(GrantFSError):
    """Raised on permission store failures (DB connection, disk I/O, etc.)."""


class NotATreeError(GrantFSError):
    """Raised when a grant is requested for something other than a directory."""
