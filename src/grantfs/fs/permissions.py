"""Permission enum for granted trees."""

from __future__ import annotations

from enum import Enum


class Permission(str, Enum):
    """Capability level a grant confers on its tree."""

    READ_WRITE = "read_write"
    READ_ONLY = "read_only"

    @classmethod
    def from_flags(cls, read: bool, write: bool) -> Permission | None:
        """Map stored read/write flags to a permission; ``None`` if unreadable.

        Write without read is treated as no access.
        """
        if not read:
            return None
        return cls.READ_WRITE if write else cls.READ_ONLY

    @property
    def can_write(self) -> bool:
        return self is Permission.READ_WRITE
