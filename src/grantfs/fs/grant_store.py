"""SqlPermissionStore — persisted grants in a SQL table.

Stateless apart from the engine: every call opens its own session, so
the store can be shared across worker threads.
"""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from grantfs.models.grants import TreeGrant

from .exceptions import GrantNotFoundError, NotATreeError, StorageError
from .types import GrantId, PersistedPermission

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from grantfs.models.grants import TreeGrantBase

GRANT_SCHEME = "tree"


def mint_grant_id(location: Path) -> GrantId:
    """New opaque identifier for a host directory."""
    return GrantId(
        f"{GRANT_SCHEME}://local/{uuid.uuid4().hex}/{quote(location.name, safe='')}"
    )


class SqlPermissionStore:
    """Implements ``PermissionStore`` on top of a SQLAlchemy engine.

    Constructor receives the concrete grant model so callers can use
    custom SQLModel subclasses with different table names.
    """

    def __init__(
        self,
        engine: Engine,
        grant_model: type[TreeGrantBase] = TreeGrant,
    ) -> None:
        self._engine = engine
        self._grant_model = grant_model
        SQLModel.metadata.create_all(
            engine,
            tables=[grant_model.__table__],  # type: ignore[attr-defined]
        )

    @property
    def engine(self) -> Engine:
        return self._engine

    def take_persistable(
        self,
        location: str,
        *,
        read: bool = True,
        write: bool = True,
    ) -> GrantId:
        """Persist access to *location*.  Re-granting a tree keeps its identifier."""
        host = Path(location).expanduser().resolve()
        if not host.is_dir():
            raise NotATreeError(f"Not a directory: {host}")
        model = self._grant_model
        try:
            with Session(self._engine) as session:
                grant = session.exec(
                    select(model).where(model.host_path == str(host))
                ).first()
                if grant is None:
                    grant = model(
                        uri=mint_grant_id(host).value,
                        host_path=str(host),
                    )
                grant.can_read = read
                grant.can_write = write
                session.add(grant)
                session.commit()
                return GrantId(grant.uri)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot persist grant for {host}: {e}") from e

    def release_persistable(self, grant_id: GrantId) -> None:
        """Drop both capabilities for *grant_id*."""
        model = self._grant_model
        try:
            with Session(self._engine) as session:
                grant = session.get(model, grant_id.value)
                if grant is None:
                    raise GrantNotFoundError(f"No persisted grant: {grant_id}")
                session.delete(grant)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot release grant {grant_id}: {e}") from e

    def persisted_permissions(self) -> list[PersistedPermission]:
        """All persisted grants, oldest first."""
        model = self._grant_model
        try:
            with Session(self._engine) as session:
                grants = session.exec(
                    select(model).order_by(model.created_at)  # type: ignore[arg-type]
                ).all()
                return [
                    PersistedPermission(
                        grant_id=GrantId(g.uri), read=g.can_read, write=g.can_write
                    )
                    for g in grants
                ]
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot list grants: {e}") from e

    def lookup(self, grant_id: GrantId) -> TreeGrantBase | None:
        """The grant record for *grant_id*, or ``None``."""
        try:
            with Session(self._engine) as session:
                return session.get(self._grant_model, grant_id.value)
        except SQLAlchemyError as e:
            raise StorageError(f"Cannot look up grant {grant_id}: {e}") from e
