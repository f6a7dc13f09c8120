"""Volume sources — where the list of storage volumes comes from."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import psutil

from .locators import DirectoryLocator, ScratchDirectoryLocator
from .types import MEDIA_MOUNTED, StorageVolume

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .locators import VolumeRootLocator

REMOVABLE_MOUNT_PREFIXES = ("/media/", "/run/media/", "/mnt/", "/Volumes/")


@runtime_checkable
class VolumeSource(Protocol):
    """Platform volume API."""

    def storage_volumes(self) -> list[StorageVolume]: ...

    def primary_storage_directory(self) -> str | None: ...


class StaticVolumeSource:
    """Volumes supplied by the host, e.g. bridged from a mobile runtime.

    ``scratch_directories`` is only needed when the host cannot report
    volume directories itself.
    """

    def __init__(
        self,
        volumes: Iterable[StorageVolume],
        primary_directory: str | None,
        *,
        scratch_directories: Iterable[str | None] | None = None,
    ) -> None:
        self._volumes = list(volumes)
        self._primary_directory = primary_directory
        self.scratch_directories = (
            list(scratch_directories) if scratch_directories is not None else None
        )

    def storage_volumes(self) -> list[StorageVolume]:
        return list(self._volumes)

    def primary_storage_directory(self) -> str | None:
        return self._primary_directory


class PartitionVolumeSource:
    """Desktop volumes from the mounted partition table.

    The partition holding the home directory is primary, and its mountpoint
    is the primary storage directory.  Partitions mounted under a
    removable-media prefix, or flagged ``removable`` by the OS, are removable.
    """

    def __init__(self, home: Path | str | None = None) -> None:
        self._home = Path(home) if home is not None else Path.home()

    def primary_storage_directory(self) -> str | None:
        mountpoints = [p.mountpoint for p in psutil.disk_partitions(all=False)]
        return self._mount_of(self._home, mountpoints) or str(self._home)

    def storage_volumes(self) -> list[StorageVolume]:
        partitions = psutil.disk_partitions(all=False)
        primary_mount = self._mount_of(self._home, [p.mountpoint for p in partitions])

        return [
            StorageVolume(
                uuid=p.device or None,
                description=Path(p.mountpoint).name,
                is_primary=p.mountpoint == primary_mount,
                is_removable=self._is_removable(p.mountpoint, p.opts),
                state=MEDIA_MOUNTED,
                directory=p.mountpoint,
            )
            for p in partitions
        ]

    @staticmethod
    def _mount_of(path: Path, mountpoints: list[str]) -> str | None:
        best: str | None = None
        for mountpoint in mountpoints:
            try:
                path.relative_to(mountpoint)
            except ValueError:
                continue
            if best is None or len(mountpoint) > len(best):
                best = mountpoint
        return best

    @staticmethod
    def _is_removable(mountpoint: str, opts: str) -> bool:
        if "removable" in opts.split(","):
            return True
        return mountpoint.startswith(REMOVABLE_MOUNT_PREFIXES)


def locator_for(source: VolumeSource) -> VolumeRootLocator:
    """Pick the locator for *source*'s platform family."""
    scratch = getattr(source, "scratch_directories", None)
    if scratch is not None:
        return ScratchDirectoryLocator(lambda: scratch)
    return DirectoryLocator()
