"""Tests for GrantRegistry and DirectoryPicker."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from grantfs.events import EventBus, EventType
from grantfs.fs.exceptions import PickInProgressError, StorageError
from grantfs.fs.grants import FALLBACK_TREE_NAME, DirectoryPicker, GrantRegistry, PendingPick
from grantfs.fs.types import ConsentResponse, ErrorKind, GrantId

if TYPE_CHECKING:
    from pathlib import Path

    from grantfs.fs.grant_store import SqlPermissionStore
    from grantfs.fs.local_tree import LocalTreeProvider
    from grantfs.fs.operations import TreeOperations


class FixedPrompt:
    """Consent prompt that always answers the same way."""

    def __init__(self, response: ConsentResponse | None) -> None:
        self.response = response
        self.calls = 0

    def request_tree(self) -> ConsentResponse | None:
        self.calls += 1
        return self.response


class FailingPrompt:
    def request_tree(self) -> ConsentResponse | None:
        raise RuntimeError("picker crashed")


class ReentrantPrompt:
    """Tries to open a second picker while the first is still open."""

    def __init__(self, location: str) -> None:
        self.location = location
        self.picker: DirectoryPicker | None = None
        self.nested_error: Exception | None = None

    def request_tree(self) -> ConsentResponse | None:
        try:
            self.picker.pick()
        except PickInProgressError as e:
            self.nested_error = e
        return ConsentResponse(location=self.location)


class BrokenStore:
    """Permission store whose backend is unavailable."""

    def persisted_permissions(self):
        raise StorageError("database is locked")

    def take_persistable(self, location, *, read=True, write=True):
        raise StorageError("database is locked")

    def release_persistable(self, grant_id):
        raise StorageError("database is locked")


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def registry(
    store: SqlPermissionStore, provider: LocalTreeProvider, bus: EventBus
) -> GrantRegistry:
    return GrantRegistry(store, provider, bus)


def _collect(bus: EventBus, event_type: EventType) -> list:
    seen: list = []
    bus.register(event_type, seen.append)
    return seen


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class TestDisplayName:
    def test_tree_name(self, registry: GrantRegistry, grant):
        assert registry.display_name(grant) == "Documents"

    def test_identifier_component(self, registry: GrantRegistry):
        grant = GrantId("tree://local/abc/My%20Docs")
        assert registry.display_name(grant) == "My Docs"

    def test_fallback(self, registry: GrantRegistry):
        assert registry.display_name(GrantId("///")) == FALLBACK_TREE_NAME
        assert FALLBACK_TREE_NAME == "Folder"


class TestListGrants:
    def test_empty(self, registry: GrantRegistry):
        assert registry.list_grants() == []

    def test_lists_readable_grants(self, registry: GrantRegistry, grant):
        (info,) = registry.list_grants()
        assert info.grant_id == grant
        assert info.name == "Documents"
        assert info.read is True
        assert info.write is True

    def test_skips_write_only(
        self, registry: GrantRegistry, store: SqlPermissionStore, tmp_path: Path
    ):
        (tmp_path / "drop").mkdir()
        store.take_persistable(str(tmp_path / "drop"), read=False, write=True)
        assert registry.list_grants() == []

    def test_lists_grant_with_missing_tree(
        self, registry: GrantRegistry, grant, tree_dir: Path
    ):
        tree_dir.rmdir()
        (info,) = registry.list_grants()
        assert info.grant_id == grant
        assert info.name == "Documents"

    def test_store_failure(self, provider: LocalTreeProvider):
        assert GrantRegistry(BrokenStore(), provider).list_grants() == []


class TestRevoke:
    def test_revoke(self, registry: GrantRegistry, bus: EventBus, grant):
        revoked = _collect(bus, EventType.GRANT_REVOKED)
        result = registry.revoke(grant)
        assert result.success is True
        assert registry.list_grants() == []
        assert [e.grant_id for e in revoked] == [grant]

    def test_revoke_unknown(self, registry: GrantRegistry, bus: EventBus):
        revoked = _collect(bus, EventType.GRANT_REVOKED)
        result = registry.revoke(GrantId("tree://local/none/x"))
        assert result.success is False
        assert result.error == ErrorKind.NOT_FOUND
        assert revoked == []

    def test_revoke_blank(self, registry: GrantRegistry):
        result = registry.revoke(GrantId("   "))
        assert result.success is False
        assert result.error == ErrorKind.INVALID_ARGUMENT

    def test_revoked_grant_stops_working(
        self, registry: GrantRegistry, ops: TreeOperations, grant, tree_dir: Path
    ):
        (tree_dir / "f.txt").write_bytes(b"x")
        registry.revoke(grant)
        assert ops.read_bytes(grant, "f.txt").success is False
        assert ops.write_bytes(grant, "g.txt", b"x").success is False
        assert (tree_dir / "f.txt").exists()


# ---------------------------------------------------------------------------
# Picker
# ---------------------------------------------------------------------------


def _picker(prompt, store, registry, bus) -> DirectoryPicker:
    return DirectoryPicker(prompt, store, registry, bus)


class TestDirectoryPicker:
    def test_approve(self, store, registry, bus: EventBus, tree_dir: Path):
        persisted = _collect(bus, EventType.GRANT_PERSISTED)
        picker = _picker(FixedPrompt(ConsentResponse(str(tree_dir))), store, registry, bus)

        result = picker.pick()
        assert result.success is True
        assert result.tree.name == "Documents"
        assert [e.grant_id for e in persisted] == [result.tree.grant_id]
        assert [g.grant_id for g in registry.list_grants()] == [result.tree.grant_id]

    def test_read_only_approval(self, store, registry, bus, tree_dir: Path):
        response = ConsentResponse(str(tree_dir), read=True, write=False)
        result = _picker(FixedPrompt(response), store, registry, bus).pick()
        (info,) = registry.list_grants()
        assert info.grant_id == result.tree.grant_id
        assert info.write is False

    @pytest.mark.parametrize(
        "response",
        [
            pytest.param(None, id="dismissed"),
            pytest.param(ConsentResponse("   "), id="blank-location"),
        ],
    )
    def test_cancelled(self, store, registry, bus: EventBus, response):
        persisted = _collect(bus, EventType.GRANT_PERSISTED)
        result = _picker(FixedPrompt(response), store, registry, bus).pick()
        assert result.success is False
        assert result.tree is None
        assert result.error == ErrorKind.CANCELLED
        assert persisted == []

    def test_no_prompt_configured(self, store, registry, bus):
        result = _picker(None, store, registry, bus).pick()
        assert result.error == ErrorKind.CANCELLED

    def test_prompt_failure_is_cancel(self, store, registry, bus):
        picker = _picker(FailingPrompt(), store, registry, bus)
        result = picker.pick()
        assert result.error == ErrorKind.CANCELLED
        assert picker.is_pending is False

    def test_store_failure(self, registry, bus, tree_dir: Path):
        prompt = FixedPrompt(ConsentResponse(str(tree_dir)))
        result = _picker(prompt, BrokenStore(), registry, bus).pick()
        assert result.success is False
        assert result.tree is None
        assert result.error == ErrorKind.PERMISSION_DENIED

    def test_file_is_not_a_tree(self, store, registry, bus: EventBus, tmp_path: Path):
        (tmp_path / "plain.txt").write_bytes(b"x")
        persisted = _collect(bus, EventType.GRANT_PERSISTED)
        prompt = FixedPrompt(ConsentResponse(str(tmp_path / "plain.txt")))
        result = _picker(prompt, store, registry, bus).pick()
        assert result.success is False
        assert result.tree is None
        assert result.error == ErrorKind.KIND_MISMATCH
        assert registry.list_grants() == []
        assert persisted == []

    def test_second_pick_rejected_while_open(self, store, registry, bus, tree_dir: Path):
        prompt = ReentrantPrompt(str(tree_dir))
        picker = _picker(prompt, store, registry, bus)
        prompt.picker = picker

        result = picker.pick()
        assert isinstance(prompt.nested_error, PickInProgressError)
        assert result.success is True
        assert picker.is_pending is False

    def test_slot_reusable_after_pick(self, store, registry, bus, tree_dir: Path):
        prompt = FixedPrompt(ConsentResponse(str(tree_dir)))
        picker = _picker(prompt, store, registry, bus)
        first = picker.pick()
        second = picker.pick()
        assert prompt.calls == 2
        assert first.tree.grant_id == second.tree.grant_id


class TestPendingPick:
    def test_claim_release(self):
        slot = PendingPick()
        slot.claim()
        assert slot.is_pending is True
        with pytest.raises(PickInProgressError, match="already open"):
            slot.claim()
        slot.release()
        assert slot.is_pending is False
        slot.claim()
