"""Volume and storage-root records."""

from __future__ import annotations

from dataclasses import dataclass

MEDIA_MOUNTED = "mounted"
UNKNOWN_STATE = "unknown"

INTERNAL_STORAGE_LABEL = "Internal Storage"
EXTERNAL_STORAGE_LABEL = "External Storage"


@dataclass
class StorageVolume:
    """A volume as reported by the platform.

    ``directory`` is only known on platforms with a direct accessor; others
    need a ``VolumeRootLocator`` that works it out from side information.
    """

    uuid: str | None
    description: str | None
    is_primary: bool
    is_removable: bool
    state: str | None = MEDIA_MOUNTED
    directory: str | None = None


@dataclass
class StorageRoot:
    """An enumerable, mounted storage root."""

    path: str
    label: str
    is_removable: bool
    is_primary: bool
    state: str
