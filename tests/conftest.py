import asyncio
import tempfile
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set
from unittest.mock import AsyncMock, Mock

import pytest
from git import Repo

from gitfixup.interfaces import (
    ChangeTrackingService,
    CommitPresentationSurface,
    Project,
    VcsBackend,
)
from gitfixup.models import Change, ChangeList, UpdateMode
from gitfixup.reconciliation import DEFAULT_TITLE, ReconciliationRequest

pytest_plugins = ('pytest_asyncio',)


class FakeBackend(VcsBackend):
    def __init__(self, roots, checkin=True, active=True, name="git"):
        self._roots = [Path(r) for r in roots]
        self._checkin = checkin
        self._active = active
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_active(self) -> bool:
        return self._active

    @property
    def has_checkin_capability(self) -> bool:
        return self._checkin

    def roots(self) -> List[Path]:
        return list(self._roots)


class FakeProject(Project):
    def __init__(self, backends=None, background_running=False):
        super().__init__()
        self.backends = list(backends or [])
        self.background_running = background_running

    @property
    def name(self) -> str:
        return "fake"

    def vcs_backends(self) -> List[VcsBackend]:
        return self.backends

    def is_background_operation_running(self) -> bool:
        return self.background_running


class FakeTracker(ChangeTrackingService):
    """In-memory change tracking; completes updates on the next loop turn by default."""

    def __init__(self, changes_by_root=None, change_lists=None, auto_complete=True):
        self.changes_by_root: Dict[Path, Set[Change]] = {
            Path(root): set(changes) for root, changes in (changes_by_root or {}).items()
        }
        self.change_lists: List[ChangeList] = list(change_lists or [ChangeList("Default", is_default=True)])
        self.auto_complete = auto_complete
        self.requests: List[ReconciliationRequest] = []
        self.queried_roots: List[List[Path]] = []

    def changes_under_roots(self, roots: Iterable[Path]) -> Set[Change]:
        roots = list(roots)
        self.queried_roots.append(roots)
        result = set()
        for root in roots:
            result |= self.changes_by_root.get(Path(root), set())
        return result

    def find_change_list_by_name(self, name: str) -> Optional[ChangeList]:
        return next((cl for cl in self.change_lists if cl.name == name), None)

    def change_list_owning(self, change: Change) -> Optional[ChangeList]:
        return next((cl for cl in self.change_lists if change in cl.changes), None)

    def default_change_list(self) -> ChangeList:
        return next(cl for cl in self.change_lists if cl.is_default)

    def request_update(self, mode: UpdateMode, title: str = DEFAULT_TITLE) -> ReconciliationRequest:
        request = ReconciliationRequest(mode, title)
        self.requests.append(request)
        if self.auto_complete:
            asyncio.get_running_loop().call_soon(request.complete)
        return request


@pytest.fixture
def surface():
    """Spy commit surface."""
    spy = Mock(spec=CommitPresentationSurface)
    spy.present = AsyncMock()
    return spy


@pytest.fixture
def project():
    return FakeProject([FakeBackend(["/work/repo"])])


@pytest.fixture
def temp_git_repo():
    """Create a temporary git repository for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        repo = Repo.init(tmp_dir)
        with repo.config_writer() as writer:
            writer.set_value("user", "name", "Test User")
            writer.set_value("user", "email", "test@example.com")

        test_file = Path(tmp_dir) / "test.txt"
        test_file.write_text("Initial content")
        other_file = Path(tmp_dir) / "other.txt"
        other_file.write_text("Other content")

        repo.index.add(["test.txt", "other.txt"])
        repo.index.commit("Initial commit")

        yield tmp_dir
