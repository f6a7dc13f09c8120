"""VolumeEnumerator — distinct mounted storage roots, primary first."""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from .sources import locator_for
from .types import (
    EXTERNAL_STORAGE_LABEL,
    INTERNAL_STORAGE_LABEL,
    MEDIA_MOUNTED,
    UNKNOWN_STATE,
    StorageRoot,
)

if TYPE_CHECKING:
    from .locators import VolumeRootLocator
    from .sources import VolumeSource

logger = logging.getLogger(__name__)


class VolumeEnumerator:
    """Lists storage roots reported by a ``VolumeSource``.

    Roots are deduplicated by absolute path and only existing directories
    are kept.  The source's primary storage directory is always added, so
    it is listed even when the volume API omits it, and it is flagged
    primary if no volume was.  Exactly one root is primary (the first one
    flagged) and it always sorts first; the rest sort by path, ignoring
    case.  A volume that cannot be located or described is skipped.
    """

    def __init__(
        self,
        source: VolumeSource,
        locator: VolumeRootLocator | None = None,
    ) -> None:
        self._source = source
        self._locator = locator if locator is not None else locator_for(source)

    def list_roots(self) -> list[StorageRoot]:
        roots: list[StorageRoot] = []
        seen: set[str] = set()

        try:
            volumes = list(self._source.storage_volumes())
        except Exception:
            logger.debug("Volume source failed", exc_info=True)
            volumes = []

        for volume in volumes:
            try:
                path = self._locator.locate(volume)
                default_label = (
                    INTERNAL_STORAGE_LABEL if volume.is_primary else EXTERNAL_STORAGE_LABEL
                )
                label = (volume.description or "").strip() or default_label
                self._add_root(
                    roots,
                    seen,
                    path,
                    label=label,
                    removable=volume.is_removable,
                    primary=volume.is_primary,
                    state=volume.state or UNKNOWN_STATE,
                )
            except Exception:
                logger.debug("Skipping volume %r", volume, exc_info=True)

        try:
            fallback = self._source.primary_storage_directory()
        except Exception:
            logger.debug("No primary storage directory", exc_info=True)
            fallback = None
        self._add_root(
            roots,
            seen,
            fallback,
            label=INTERNAL_STORAGE_LABEL,
            removable=False,
            primary=True,
            state=MEDIA_MOUNTED,
        )

        return sorted(roots, key=lambda r: (not r.is_primary, r.path.lower()))

    @staticmethod
    def _add_root(
        roots: list[StorageRoot],
        seen: set[str],
        path: str | None,
        *,
        label: str,
        removable: bool,
        primary: bool,
        state: str,
    ) -> None:
        normalized = (path or "").strip()
        if not normalized or not os.path.isdir(normalized):
            return

        absolute = os.path.abspath(normalized)
        if absolute in seen:
            # The primary directory reported as a plain volume still becomes primary.
            if primary and not any(r.is_primary for r in roots):
                for root in roots:
                    if root.path == absolute:
                        root.is_primary = True
            return
        seen.add(absolute)

        roots.append(
            StorageRoot(
                path=absolute,
                label=label,
                is_removable=removable,
                is_primary=primary and not any(r.is_primary for r in roots),
                state=state,
            )
        )
