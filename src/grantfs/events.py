"""EventBus and event types for grant and share notifications."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from grantfs.fs.types import GrantId

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Types of events raised by the grant lifecycle and the share inbox."""

    GRANT_PERSISTED = "grant_persisted"
    GRANT_REVOKED = "grant_revoked"
    SHARED_FILES_UPDATED = "shared_files_updated"


@dataclass(frozen=True, slots=True)
class GrantEvent:
    """Immutable record of a grant or share change.

    Attributes:
        event_type: The kind of change that occurred.
        grant_id: Affected grant (grant events only).
        paths: Newly offered absolute file paths (share events only).
    """

    event_type: EventType
    grant_id: GrantId | None = None
    paths: tuple[str, ...] = ()


class EventBus:
    """Dispatches events to registered handlers.

    Handlers are called sequentially in registration order.
    Exceptions are logged but never propagated — a failing listener
    must not undo a grant or lose a share.
    """

    def __init__(self) -> None:
        self._handlers: dict[EventType, list[Callable[..., Any]]] = {et: [] for et in EventType}

    def register(self, event_type: EventType, handler: Callable[..., Any]) -> None:
        """Append *handler* to the list for *event_type*."""
        self._handlers[event_type].append(handler)

    def unregister(self, event_type: EventType, handler: Callable[..., Any]) -> bool:
        """Remove first occurrence of *handler*. Return True if found."""
        handlers = self._handlers[event_type]
        try:
            handlers.remove(handler)
            return True
        except ValueError:
            return False

    def emit(self, event: GrantEvent) -> None:
        """Dispatch *event* to all registered handlers for its type."""
        for handler in list(self._handlers[event.event_type]):
            try:
                handler(event)
            except Exception:
                logger.warning(
                    "Handler %r failed for %s",
                    handler,
                    event.event_type.value,
                    exc_info=True,
                )

    @property
    def handler_count(self) -> int:
        """Total number of registered handlers across all event types."""
        return sum(len(h) for h in self._handlers.values())
