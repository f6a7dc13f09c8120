"""TreeGrant model — persisted directory-tree grants.

Provides ``TreeGrantBase`` (non-table) and ``TreeGrant`` (concrete table).
Subclass ``TreeGrantBase`` with ``table=True`` and a custom ``__tablename__``
to keep grants in a different table.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class TreeGrantBase(SQLModel):
    """Base fields for a grant record. Subclass with ``table=True`` for a concrete table."""

    uri: str = Field(primary_key=True)
    host_path: str = Field(index=True, unique=True)
    can_read: bool = Field(default=True)
    can_write: bool = Field(default=False)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),  # type: ignore[invalid-argument-type]
    )


class TreeGrant(TreeGrantBase, table=True):
    """Default grant table — ``grantfs_tree_grants``."""

    __tablename__ = "grantfs_tree_grants"
