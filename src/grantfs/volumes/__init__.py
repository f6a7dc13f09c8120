"""Storage volume enumeration."""

from grantfs.volumes.enumerator import VolumeEnumerator
from grantfs.volumes.locators import (
    DirectoryLocator,
    ScratchDirectoryLocator,
    VolumeRootLocator,
)
from grantfs.volumes.sources import (
    PartitionVolumeSource,
    StaticVolumeSource,
    VolumeSource,
    locator_for,
)
from grantfs.volumes.types import StorageRoot, StorageVolume

__all__ = [
    "DirectoryLocator",
    "PartitionVolumeSource",
    "ScratchDirectoryLocator",
    "StaticVolumeSource",
    "StorageRoot",
    "StorageVolume",
    "VolumeEnumerator",
    "VolumeRootLocator",
    "VolumeSource",
    "locator_for",
]
