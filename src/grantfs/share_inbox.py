"""SharedFileInbox — pending absolute file paths handed to the app.

Share events arrive from outside (launch arguments, an OS share sheet) and
are held here until the application consumes them.  Paths are opaque
strings; they never go through the grant model.
"""

from __future__ import annotations

import logging
import re
import shutil
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote, urlparse

from grantfs.events import EventType, GrantEvent

if TYPE_CHECKING:
    from collections.abc import Iterable
    from typing import BinaryIO

    from grantfs.events import EventBus

logger = logging.getLogger(__name__)

IMPORT_DIR_NAME = "shared_imports"

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]+")


def _dedupe(paths: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(p for p in paths if p))


def resolve_shared_uri(uri: str) -> str | None:
    """Local path for a shared ``file:`` URI or absolute path, else ``None``."""
    uri = uri.strip()
    if not uri:
        return None
    parsed = urlparse(uri)
    if parsed.scheme.lower() == "file":
        return unquote(parsed.path) or None
    if not parsed.scheme and Path(uri).is_absolute():
        return uri
    return None


def capture_arguments(arguments: Iterable[str]) -> list[str]:
    """Existing regular files among launch arguments, absolutized and deduped."""
    captured: list[str] = []
    for argument in arguments:
        try:
            path = Path(argument).absolute()
            if not path.is_file():
                continue
        except (OSError, ValueError):
            continue
        captured.append(str(path))
    return _dedupe(captured)


class SharedFileInbox:
    """Thread-safe list of shared file paths awaiting the application."""

    def __init__(self, cache_dir: Path | str, event_bus: EventBus | None = None) -> None:
        self.cache_dir = Path(cache_dir)
        self._event_bus = event_bus
        self._lock = threading.Lock()
        self._pending: list[str] = []

    def offer(self, paths: Iterable[str], *, notify: bool = True) -> list[str]:
        """Queue *paths* (deduped, order kept).  Returns what was queued."""
        batch = _dedupe(paths)
        if not batch:
            return []
        with self._lock:
            self._pending.extend(batch)
        if notify and self._event_bus is not None:
            self._event_bus.emit(
                GrantEvent(EventType.SHARED_FILES_UPDATED, paths=tuple(batch))
            )
        return batch

    def consume(self) -> list[str]:
        """Snapshot of pending paths; the inbox is empty afterwards."""
        with self._lock:
            snapshot = list(self._pending)
            self._pending.clear()
        return snapshot

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def import_stream(self, display_name: str | None, stream: BinaryIO) -> str:
        """Copy an opaque shared stream into the cache and return its path."""
        millis = int(time.time() * 1000)
        name = (display_name or "").strip() or f"shared_{millis}"
        safe_name = _UNSAFE_CHARS.sub("_", name)

        target_dir = self.cache_dir / IMPORT_DIR_NAME
        target_dir.mkdir(parents=True, exist_ok=True)
        target = target_dir / f"{millis}_{safe_name}"
        with target.open("wb") as out:
            shutil.copyfileobj(stream, out)

        logger.debug("Imported shared stream %r to %s", name, target)
        return str(target)
