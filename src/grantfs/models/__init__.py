"""SQLModel database models for grantfs."""

from grantfs.models.grants import TreeGrant, TreeGrantBase

__all__ = [
    "TreeGrant",
    "TreeGrantBase",
]
