"""GrantRegistry and DirectoryPicker — the grant lifecycle.

Grants are created by an out-of-band consent prompt, persisted by the
platform's ``PermissionStore`` and enumerated or released here.  Neither
class holds grant state of its own; the picker only remembers whether a
prompt is currently open.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from grantfs.events import EventType, GrantEvent

from .exceptions import NotATreeError, PickInProgressError
from .resolver import TreeResolver
from .types import (
    ErrorKind,
    GrantId,
    GrantInfo,
    PickedTree,
    PickResult,
    RevokeResult,
)
from .utils import last_path_component

if TYPE_CHECKING:
    from grantfs.events import EventBus

    from .protocol import ConsentPrompt, PermissionStore, TreeProvider

logger = logging.getLogger(__name__)

FALLBACK_TREE_NAME = "Folder"


class GrantRegistry:
    """Enumerates and revokes persisted grants."""

    def __init__(
        self,
        store: PermissionStore,
        provider: TreeProvider,
        event_bus: EventBus | None = None,
    ) -> None:
        self._store = store
        self._resolver = TreeResolver(provider)
        self._event_bus = event_bus

    def display_name(self, grant_id: GrantId) -> str:
        """Tree's own name, else the identifier's last component, else ``"Folder"``."""
        root = self._resolver.root(grant_id)
        candidate = ""
        if root is not None:
            try:
                candidate = (root.name or "").strip()
            except Exception:
                logger.debug("Cannot read tree name for %s", grant_id, exc_info=True)
        if candidate:
            return candidate
        return last_path_component(grant_id.value) or FALLBACK_TREE_NAME

    def list_grants(self) -> list[GrantInfo]:
        """Every persisted grant that can still be read, in store order."""
        try:
            permissions = self._store.persisted_permissions()
        except Exception:
            logger.debug("Cannot enumerate persisted grants", exc_info=True)
            return []

        return [
            GrantInfo(
                grant_id=p.grant_id,
                name=self.display_name(p.grant_id),
                read=p.read,
                write=p.write,
            )
            for p in permissions
            if p.read
        ]

    def revoke(self, grant_id: GrantId) -> RevokeResult:
        """Release read and write capability for *grant_id*."""
        if not grant_id.value.strip():
            return RevokeResult(
                success=False,
                message="Grant identifier is empty",
                error=ErrorKind.INVALID_ARGUMENT,
            )

        try:
            self._store.release_persistable(grant_id)
        except Exception as e:
            logger.debug("Cannot release %s", grant_id, exc_info=True)
            return RevokeResult(
                success=False,
                message=f"Cannot revoke grant: {e}",
                grant_id=grant_id,
                error=ErrorKind.NOT_FOUND,
            )

        if self._event_bus is not None:
            self._event_bus.emit(GrantEvent(EventType.GRANT_REVOKED, grant_id=grant_id))
        return RevokeResult(
            success=True, message=f"Revoked: {grant_id}", grant_id=grant_id
        )


class PendingPick:
    """Single slot for the consent request currently awaited."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    def claim(self) -> None:
        """Occupy the slot or raise ``PickInProgressError``."""
        with self._lock:
            if self._pending:
                raise PickInProgressError("Another directory picker is already open.")
            self._pending = True

    def release(self) -> None:
        with self._lock:
            self._pending = False


class DirectoryPicker:
    """Runs the consent prompt and persists what the user approves.

    At most one prompt is open at a time; a second request is rejected
    immediately instead of queued.
    """

    def __init__(
        self,
        prompt: ConsentPrompt | None,
        store: PermissionStore,
        registry: GrantRegistry,
        event_bus: EventBus | None = None,
    ) -> None:
        self._prompt = prompt
        self._store = store
        self._registry = registry
        self._event_bus = event_bus
        self._slot = PendingPick()

    @property
    def is_pending(self) -> bool:
        return self._slot.is_pending

    def pick(self) -> PickResult:
        self._slot.claim()
        try:
            response = self._prompt.request_tree() if self._prompt is not None else None
        except Exception:
            logger.warning("Consent prompt failed; treating as cancelled", exc_info=True)
            response = None
        finally:
            self._slot.release()

        if response is None or not response.location.strip():
            return PickResult(
                success=False,
                message="Directory pick cancelled",
                error=ErrorKind.CANCELLED,
            )

        try:
            grant_id = self._store.take_persistable(
                response.location, read=response.read, write=response.write
            )
        except NotATreeError as e:
            logger.warning("Rejected grant for %s: %s", response.location, e)
            return PickResult(
                success=False,
                message=str(e),
                error=ErrorKind.KIND_MISMATCH,
            )
        except Exception as e:
            logger.warning("Cannot persist grant for %s", response.location, exc_info=True)
            return PickResult(
                success=False,
                message=f"Cannot persist grant: {e}",
                error=ErrorKind.PERMISSION_DENIED,
            )

        name = self._registry.display_name(grant_id)
        tree = PickedTree(grant_id=grant_id, name=name)

        if self._event_bus is not None:
            self._event_bus.emit(GrantEvent(EventType.GRANT_PERSISTED, grant_id=grant_id))
        return PickResult(success=True, message=f"Granted: {name}", tree=tree)
