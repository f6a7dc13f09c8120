"""TreeResolver — relative segments to a handle inside a granted tree."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .types import ErrorKind, GrantId, ResolveResult
from .utils import join_segments

if TYPE_CHECKING:
    from .protocol import DocumentHandle, TreeProvider

logger = logging.getLogger(__name__)


class TreeResolver:
    """Walks path segments from a grant's root.

    Existing children are descended into whatever their kind.  Missing
    segments are created as directories only when ``create_missing`` is set,
    and the final segment only when ``final_is_directory`` is also set.  A
    file is never created here; that is ``TreeOperations.write_bytes``'s job.

    Any platform exception (revoked grant, unmounted volume) becomes a
    failed result.  ``PermissionError`` is recorded as ``PERMISSION_DENIED``
    and everything else as ``NOT_FOUND``; either way ``handle`` is ``None``.
    """

    def __init__(self, provider: TreeProvider) -> None:
        self._provider = provider

    def root(self, grant_id: GrantId) -> DocumentHandle | None:
        """The grant's root handle, or ``None`` if the grant is unusable."""
        try:
            return self._provider.tree_root(grant_id)
        except Exception:
            logger.debug("Cannot open tree for %s", grant_id, exc_info=True)
            return None

    def resolve(
        self,
        grant_id: GrantId,
        segments: list[str],
        *,
        create_missing: bool = False,
        final_is_directory: bool = False,
    ) -> ResolveResult:
        path = join_segments(segments)
        try:
            return self._walk(
                grant_id, segments, path, create_missing, final_is_directory
            )
        except PermissionError:
            logger.debug("Permission lost resolving %r in %s", path, grant_id, exc_info=True)
            return ResolveResult(
                success=False,
                message=f"Not found: {path}",
                error=ErrorKind.PERMISSION_DENIED,
            )
        except Exception:
            logger.debug("Store failure resolving %r in %s", path, grant_id, exc_info=True)
            return ResolveResult(
                success=False,
                message=f"Not found: {path}",
                error=ErrorKind.NOT_FOUND,
            )

    def _walk(
        self,
        grant_id: GrantId,
        segments: list[str],
        path: str,
        create_missing: bool,
        final_is_directory: bool,
    ) -> ResolveResult:
        current = self._provider.tree_root(grant_id)
        if current is None:
            return ResolveResult(
                success=False,
                message=f"Tree not available: {grant_id}",
                error=ErrorKind.NOT_FOUND,
            )

        created: list[str] = []
        last = len(segments) - 1
        for index, segment in enumerate(segments):
            # A file has no children, so descending past one ends here.
            existing = current.find_file(segment) if current.is_directory else None
            if existing is not None:
                current = existing
                continue

            is_last = index == last
            if not create_missing or (is_last and not final_is_directory):
                return ResolveResult(
                    success=False,
                    message=f"Not found: {path}",
                    error=ErrorKind.NOT_FOUND,
                )

            made = current.create_directory(segment) if current.is_directory else None
            if made is None:
                return ResolveResult(
                    success=False,
                    message=f"Cannot create directory: {join_segments(segments[: index + 1])}",
                    error=ErrorKind.NOT_FOUND,
                    created_dirs=created,
                )
            created.append(join_segments(segments[: index + 1]))
            current = made

        return ResolveResult(
            success=True,
            message=f"Resolved: {path}" if path else "Resolved tree root",
            handle=current,
            created_dirs=created,
        )
