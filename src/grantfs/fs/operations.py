"""TreeOperations — list, stat, read, write, mkdir, delete, rename.

Every operation normalizes its path, resolves it through ``TreeResolver``
and acts on the resulting handle.  Platform exceptions are caught here and
reported as failed results; nothing raises past these methods.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .resolver import TreeResolver
from .types import (
    DeleteResult,
    EntryInfo,
    ErrorKind,
    ListResult,
    MkdirResult,
    ReadResult,
    RenameResult,
    StatResult,
    WriteResult,
)
from .utils import (
    guess_mime_type,
    join_segments,
    normalize_segments,
    split_leaf,
    validate_name,
)

if TYPE_CHECKING:
    from .protocol import DocumentHandle, TreeProvider
    from .types import GrantId

logger = logging.getLogger(__name__)


def _failure_kind(exc: Exception) -> ErrorKind:
    if isinstance(exc, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(exc, FileExistsError):
        return ErrorKind.NAME_COLLISION
    return ErrorKind.NOT_FOUND


class TreeOperations:
    """Operations on entries inside granted trees.

    Stateless: every call recomputes its handle from ``(grant, path)``, so
    one instance can be shared across threads.
    """

    def __init__(self, provider: TreeProvider) -> None:
        self.resolver = TreeResolver(provider)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def list_entries(self, grant_id: GrantId, path: str = "") -> ListResult:
        """List the children of a directory, in platform order.

        A path that resolves to a file lists as empty.
        """
        segments = normalize_segments(path)
        display = join_segments(segments)
        resolved = self.resolver.resolve(grant_id, segments)
        if resolved.handle is None:
            return ListResult(
                success=False,
                message=resolved.message,
                path=display,
                error=resolved.error,
            )

        doc = resolved.handle
        try:
            if not doc.is_directory:
                return ListResult(
                    success=True,
                    message=f"Not a directory: {display}",
                    path=display,
                )
            entries = [_entry_info(child) for child in doc.list_files()]
        except Exception as e:
            logger.debug("Cannot list %r in %s", display, grant_id, exc_info=True)
            return ListResult(
                success=False,
                message=f"Cannot list directory: {e}",
                path=display,
                error=_failure_kind(e),
            )

        return ListResult(
            success=True,
            message=f"Listed {len(entries)} items in {display or '/'}",
            entries=entries,
            path=display,
        )

    def stat(self, grant_id: GrantId, path: str) -> StatResult:
        """Size and modification time of an entry."""
        segments = normalize_segments(path)
        resolved = self.resolver.resolve(grant_id, segments)
        if resolved.handle is None:
            return StatResult(
                success=False, message=resolved.message, error=resolved.error
            )

        doc = resolved.handle
        try:
            return StatResult(
                success=True,
                message=f"Found: {join_segments(segments)}",
                is_directory=doc.is_directory,
                size=doc.length(),
                modified_at=doc.last_modified(),
            )
        except Exception as e:
            logger.debug("Cannot stat %r in %s", path, grant_id, exc_info=True)
            return StatResult(
                success=False,
                message=f"Cannot access entry: {e}",
                error=_failure_kind(e),
            )

    def read_bytes(self, grant_id: GrantId, path: str) -> ReadResult:
        """Read a whole file."""
        segments = normalize_segments(path)
        display = join_segments(segments)
        resolved = self.resolver.resolve(grant_id, segments)
        if resolved.handle is None:
            return ReadResult(
                success=False,
                message=f"File not found: {display}",
                error=resolved.error,
            )

        doc = resolved.handle
        try:
            if doc.is_directory:
                return ReadResult(
                    success=False,
                    message=f"Path is a directory, not a file: {display}",
                    error=ErrorKind.KIND_MISMATCH,
                )
            content = doc.read_bytes()
        except Exception as e:
            logger.debug("Cannot read %r in %s", display, grant_id, exc_info=True)
            return ReadResult(
                success=False,
                message=f"Cannot read file: {e}",
                error=_failure_kind(e),
            )

        return ReadResult(
            success=True,
            message=f"Read {len(content)} bytes from {display}",
            content=content,
            path=display,
        )

    # =========================================================================
    # Write Operations
    # =========================================================================

    def write_bytes(self, grant_id: GrantId, path: str, data: bytes) -> WriteResult:
        """Create or replace a file, creating parent directories as needed."""
        segments = normalize_segments(path)
        if not segments:
            return WriteResult(
                success=False,
                message="Cannot write to the tree root",
                error=ErrorKind.INVALID_ARGUMENT,
            )

        display = join_segments(segments)
        parent_segments, name = split_leaf(segments)
        valid, error = validate_name(name)
        if not valid:
            return WriteResult(
                success=False, message=error, error=ErrorKind.INVALID_ARGUMENT
            )

        resolved = self.resolver.resolve(
            grant_id, parent_segments, create_missing=True, final_is_directory=True
        )
        if resolved.handle is None:
            return WriteResult(
                success=False,
                message=f"Parent not available: {join_segments(parent_segments)}",
                error=resolved.error,
            )

        parent = resolved.handle
        try:
            if not parent.is_directory:
                return WriteResult(
                    success=False,
                    message=f"Parent is not a directory: {join_segments(parent_segments)}",
                    error=ErrorKind.KIND_MISMATCH,
                )

            target = parent.find_file(name)
            if target is not None and target.is_directory:
                return WriteResult(
                    success=False,
                    message=f"A directory already exists at: {display}",
                    error=ErrorKind.KIND_MISMATCH,
                )

            created = target is None
            if target is None:
                target = parent.create_file(guess_mime_type(name), name)
            if target is None:
                return WriteResult(
                    success=False,
                    message=f"Cannot create file: {display}",
                    error=ErrorKind.NOT_FOUND,
                )

            written = target.write_bytes(bytes(data))
        except Exception as e:
            logger.debug("Cannot write %r in %s", display, grant_id, exc_info=True)
            return WriteResult(
                success=False,
                message=f"Failed to write file: {e}",
                error=_failure_kind(e),
            )

        return WriteResult(
            success=True,
            message=f"{'Created' if created else 'Updated'}: {display}",
            path=display,
            created=created,
            bytes_written=written,
        )

    def create_directory(self, grant_id: GrantId, path: str) -> MkdirResult:
        """Create a directory and any missing parents.  Idempotent."""
        segments = normalize_segments(path)
        display = join_segments(segments)
        resolved = self.resolver.resolve(
            grant_id, segments, create_missing=True, final_is_directory=True
        )
        if resolved.handle is None:
            return MkdirResult(
                success=False,
                message=resolved.message,
                created_dirs=resolved.created_dirs,
                error=resolved.error,
            )

        try:
            is_directory = resolved.handle.is_directory
        except Exception as e:
            logger.debug("Cannot inspect %r in %s", display, grant_id, exc_info=True)
            return MkdirResult(
                success=False,
                message=f"Cannot access entry: {e}",
                error=_failure_kind(e),
            )

        if not is_directory:
            return MkdirResult(
                success=False,
                message=f"Path exists as file: {display}",
                error=ErrorKind.KIND_MISMATCH,
            )

        if not resolved.created_dirs:
            return MkdirResult(
                success=True,
                message=f"Directory already exists: {display or '/'}",
                path=display,
            )

        return MkdirResult(
            success=True,
            message=f"Created directory: {display}",
            path=display,
            created_dirs=resolved.created_dirs,
        )

    def delete(self, grant_id: GrantId, path: str) -> DeleteResult:
        """Delete an entry using the platform's own delete semantics."""
        segments = normalize_segments(path)
        display = join_segments(segments)
        resolved = self.resolver.resolve(grant_id, segments)
        if resolved.handle is None:
            return DeleteResult(
                success=False,
                message=f"File not found: {display}",
                error=resolved.error,
            )

        try:
            deleted = resolved.handle.delete()
        except Exception as e:
            logger.debug("Cannot delete %r in %s", display, grant_id, exc_info=True)
            return DeleteResult(
                success=False,
                message=f"Failed to delete: {e}",
                error=_failure_kind(e),
            )

        if not deleted:
            return DeleteResult(
                success=False,
                message=f"Delete rejected: {display or '/'}",
                path=display,
            )
        return DeleteResult(success=True, message=f"Deleted: {display}", path=display)

    def rename(self, grant_id: GrantId, path: str, new_name: str) -> RenameResult:
        """Rename an entry in place (same parent, same grant)."""
        new_name = (new_name or "").strip()
        valid, error = validate_name(new_name)
        if not valid:
            return RenameResult(
                success=False, message=error, error=ErrorKind.INVALID_ARGUMENT
            )

        segments = normalize_segments(path)
        display = join_segments(segments)
        resolved = self.resolver.resolve(grant_id, segments)
        if resolved.handle is None:
            return RenameResult(
                success=False,
                message=f"Source not found: {display}",
                error=resolved.error,
            )

        try:
            renamed = resolved.handle.rename_to(new_name)
        except Exception as e:
            logger.debug("Cannot rename %r in %s", display, grant_id, exc_info=True)
            return RenameResult(
                success=False,
                message=f"Failed to rename: {e}",
                error=_failure_kind(e),
            )

        if not renamed:
            return RenameResult(
                success=False,
                message=f"Rename rejected: {display} -> {new_name}",
                old_path=display,
                new_name=new_name,
                error=ErrorKind.NAME_COLLISION,
            )
        return RenameResult(
            success=True,
            message=f"Renamed {display} to {new_name}",
            old_path=display,
            new_name=new_name,
        )


def _entry_info(doc: DocumentHandle) -> EntryInfo:
    return EntryInfo(
        name=doc.name or "",
        is_directory=doc.is_directory,
        size=doc.length(),
        modified_at=doc.last_modified(),
    )
