"""Volume root locators — one per platform family."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from .types import StorageVolume

SCRATCH_MARKER = "/Android/"
PRIMARY_MARKER = "/emulated/"


@runtime_checkable
class VolumeRootLocator(Protocol):
    """Works out the root directory of a volume, or ``None``."""

    def locate(self, volume: StorageVolume) -> str | None: ...


class DirectoryLocator:
    """Platforms that report each volume's directory directly."""

    def locate(self, volume: StorageVolume) -> str | None:
        return volume.directory


class ScratchDirectoryLocator:
    """Platforms without a directory accessor.

    The application has one scratch directory per volume, e.g.
    ``/storage/emulated/0/Android/data/<app>/files``.  The part before the
    marker segment is a volume root; the primary volume's root contains
    ``/emulated/`` and a secondary volume's root contains its uuid.
    """

    def __init__(
        self,
        scratch_directories: Callable[[], Iterable[str | None]],
        marker: str = SCRATCH_MARKER,
    ) -> None:
        self._scratch_directories = scratch_directories
        self._marker = marker

    def locate(self, volume: StorageVolume) -> str | None:
        uuid = (volume.uuid or "").strip().lower()
        for candidate in self._scratch_directories():
            if not candidate:
                continue
            root = candidate.split(self._marker, 1)[0]
            if not root.strip():
                continue

            lowered = root.lower()
            if volume.is_primary and PRIMARY_MARKER in lowered:
                return root
            if not volume.is_primary and uuid and uuid in lowered:
                return root
        return None
