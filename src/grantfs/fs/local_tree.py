"""LocalTreeProvider — granted trees backed by host directories."""

from __future__ import annotations

import contextlib
import os
import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from .permissions import Permission

if TYPE_CHECKING:
    from .grant_store import SqlPermissionStore
    from .types import GrantId

# Names the host filesystem gives special meaning to
_RESERVED_NAMES = {".", ".."}

# In-flight atomic writes; never exposed as entries
_TEMP_PREFIX = ".grantfs-"
_TEMP_SUFFIX = ".tmp"


def _is_temp_name(name: str) -> bool:
    return name.startswith(_TEMP_PREFIX) and name.endswith(_TEMP_SUFFIX)


class LocalDocument:
    """``DocumentHandle`` for one entry under a host directory.

    Children are looked up by exact name from a directory scan, so ``..``
    and other special names never match anything.  Symlinks are not
    exposed, which keeps every handle inside the tree it came from, and
    neither are the hidden temp files of writes still in flight.
    """

    def __init__(self, path: Path, *, is_root: bool = False, writable: bool = True) -> None:
        self.path = path
        self.is_root = is_root
        self.writable = writable

    def __repr__(self) -> str:
        return f"LocalDocument({str(self.path)!r})"

    # =========================================================================
    # Attributes
    # =========================================================================

    @property
    def name(self) -> str | None:
        return self.path.name or None

    @property
    def is_directory(self) -> bool:
        return self.path.is_dir()

    def length(self) -> int:
        st = self.path.stat()
        return 0 if self.path.is_dir() else st.st_size

    def last_modified(self) -> int:
        return int(self.path.stat().st_mtime * 1000)

    # =========================================================================
    # Children
    # =========================================================================

    def _child(self, path: Path) -> LocalDocument:
        return LocalDocument(path, writable=self.writable)

    def _child_path(self, name: str) -> Path:
        if name in _RESERVED_NAMES or "/" in name or os.sep in name:
            raise PermissionError(f"Name not allowed in a granted tree: {name!r}")
        return self.path / name

    def _require_writable(self) -> None:
        if not self.writable:
            raise PermissionError(f"Grant is read-only: {self.path}")

    def find_file(self, name: str) -> LocalDocument | None:
        if not self.path.is_dir() or _is_temp_name(name):
            return None
        with os.scandir(self.path) as it:
            for entry in it:
                if entry.name == name and not entry.is_symlink():
                    return self._child(Path(entry.path))
        return None

    def list_files(self) -> list[LocalDocument]:
        with os.scandir(self.path) as it:
            return [
                self._child(Path(entry.path))
                for entry in it
                if not entry.is_symlink() and not _is_temp_name(entry.name)
            ]

    def create_directory(self, name: str) -> LocalDocument | None:
        self._require_writable()
        target = self._child_path(name)
        try:
            target.mkdir()
        except FileExistsError:
            return None
        return self._child(target)

    def create_file(self, mime_type: str, name: str) -> LocalDocument | None:
        self._require_writable()
        target = self._child_path(name)
        try:
            with target.open("xb"):
                pass
        except FileExistsError:
            return None
        return self._child(target)

    # =========================================================================
    # Mutations
    # =========================================================================

    def delete(self) -> bool:
        """Delete this entry.  Directories go with their contents."""
        self._require_writable()
        if self.is_root:
            return False
        try:
            if self.path.is_dir():
                shutil.rmtree(self.path)
            else:
                self.path.unlink()
        except FileNotFoundError:
            return False
        return True

    def rename_to(self, name: str) -> bool:
        self._require_writable()
        if self.is_root:
            return False
        target = self.path.parent / name
        if name in _RESERVED_NAMES or "/" in name or os.sep in name:
            return False
        if os.path.lexists(target):
            return False
        self.path.rename(target)
        self.path = target
        return True

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def write_bytes(self, data: bytes) -> int:
        """Replace the whole file.  Atomic via tempfile + replace."""
        self._require_writable()
        fd, tmp_path = tempfile.mkstemp(
            dir=str(self.path.parent), prefix=_TEMP_PREFIX, suffix=_TEMP_SUFFIX
        )
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            Path(tmp_path).replace(self.path)
        except Exception:
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        return len(data)


class LocalTreeProvider:
    """Implements ``TreeProvider`` for grants held by a ``SqlPermissionStore``.

    A grant without read capability, or whose host directory is gone
    (deleted, unmounted), has no root.
    """

    def __init__(self, store: SqlPermissionStore) -> None:
        self._store = store

    def tree_root(self, grant_id: GrantId) -> LocalDocument | None:
        grant = self._store.lookup(grant_id)
        if grant is None:
            return None

        permission = Permission.from_flags(grant.can_read, grant.can_write)
        if permission is None:
            return None

        host = Path(grant.host_path)
        if not host.is_dir():
            return None
        return LocalDocument(host, is_root=True, writable=permission.can_write)
