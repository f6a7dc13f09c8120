"""Tests for EventBus."""

from __future__ import annotations

import logging

from grantfs.events import EventBus, EventType, GrantEvent
from grantfs.fs.types import GrantId


class TestEventBus:
    def test_dispatch_in_order(self):
        bus = EventBus()
        calls = []
        bus.register(EventType.GRANT_REVOKED, lambda e: calls.append(("first", e)))
        bus.register(EventType.GRANT_REVOKED, lambda e: calls.append(("second", e)))

        event = GrantEvent(EventType.GRANT_REVOKED, grant_id=GrantId("g"))
        bus.emit(event)
        assert calls == [("first", event), ("second", event)]

    def test_only_matching_type(self):
        bus = EventBus()
        calls = []
        bus.register(EventType.GRANT_PERSISTED, calls.append)
        bus.emit(GrantEvent(EventType.GRANT_REVOKED))
        assert calls == []

    def test_failing_handler_is_logged(self, caplog):
        bus = EventBus()
        calls = []

        def broken(event):
            raise RuntimeError("listener bug")

        bus.register(EventType.SHARED_FILES_UPDATED, broken)
        bus.register(EventType.SHARED_FILES_UPDATED, calls.append)

        with caplog.at_level(logging.WARNING, logger="grantfs.events"):
            bus.emit(GrantEvent(EventType.SHARED_FILES_UPDATED, paths=("/a",)))

        assert len(calls) == 1
        assert "shared_files_updated" in caplog.text

    def test_unregister(self):
        bus = EventBus()
        handler = lambda e: None  # noqa: E731
        bus.register(EventType.GRANT_PERSISTED, handler)
        assert bus.handler_count == 1
        assert bus.unregister(EventType.GRANT_PERSISTED, handler) is True
        assert bus.unregister(EventType.GRANT_PERSISTED, handler) is False
        assert bus.handler_count == 0
