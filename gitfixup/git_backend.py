"""Collaborators backed by a plain git working tree (GitPython)."""

import asyncio
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from git import Repo

from .interfaces import ChangeTrackingService, Project, VcsBackend, VcsLogSelection
from .models import (
    Change,
    ChangeList,
    ChangeStatus,
    CommitDetails,
    CommitReference,
    UntrackedFile,
    UpdateMode,
)
from .reconciliation import DEFAULT_TITLE, ReconciliationRequest
from .roots import canonical_path

DETACHED_CHANGE_LIST = "Default Changelist"

# Markers git leaves in the git dir while an operation is in progress
IN_PROGRESS_MARKERS = [
    "index.lock",
    "rebase-merge",
    "rebase-apply",
    "MERGE_HEAD",
    "CHERRY_PICK_HEAD",
    "REVERT_HEAD",
    "BISECT_LOG",
]

STATUS_BY_CHANGE_TYPE = {
    "A": ChangeStatus.ADDED,
    "D": ChangeStatus.DELETED,
    "R": ChangeStatus.RENAMED,
    "M": ChangeStatus.MODIFIED,
    "T": ChangeStatus.MODIFIED,
}


class GitVcsBackend(VcsBackend):
    """Git backend for a single working tree.

    Submodules are left alone: their working trees sit inside this root and
    their contents belong to other repositories.
    """

    def __init__(self, repo: Repo):
        self.repo = repo

    @property
    def name(self) -> str:
        return "git"

    @property
    def has_checkin_capability(self) -> bool:
        return not self.repo.bare

    def roots(self) -> List[Path]:
        if self.repo.working_tree_dir is None:
            return []
        return [Path(self.repo.working_tree_dir)]


class GitProject(Project):
    """A git working tree treated as a project."""

    def __init__(self, repo_path: str):
        super().__init__()
        self.repo = Repo(repo_path)
        self.repo_path = repo_path
        self.backend = GitVcsBackend(self.repo)

    @property
    def name(self) -> str:
        return Path(self.repo.working_tree_dir or self.repo_path).name

    def vcs_backends(self) -> List[VcsBackend]:
        return [self.backend]

    def is_background_operation_running(self) -> bool:
        git_dir = Path(self.repo.git_dir)
        return any((git_dir / marker).exists() for marker in IN_PROGRESS_MARKERS)


class GitChangeTracker(ChangeTrackingService):
    """Tracks pending changes of a repository against ``HEAD``.

    Git has no change-lists of its own, so every change belongs to a single
    default list named after the active branch.
    """

    def __init__(self, repo: Repo):
        self.repo = repo
        self._changes: Optional[Dict[Path, Change]] = None

    def refresh(self) -> None:
        """Re-read the index and working tree."""
        self._changes = self._collect_changes()

    def _working_path(self, relative: str) -> Path:
        return canonical_path(Path(self.repo.working_tree_dir) / relative)

    def _to_change(self, diff) -> Change:
        status = STATUS_BY_CHANGE_TYPE.get(diff.change_type, ChangeStatus.MODIFIED)
        if status == ChangeStatus.DELETED:
            return Change(self._working_path(diff.a_path), status)
        old_path = None
        if status == ChangeStatus.RENAMED and diff.a_path:
            old_path = self._working_path(diff.a_path)
        return Change(self._working_path(diff.b_path or diff.a_path), status, old_path)

    def _collect_changes(self) -> Dict[Path, Change]:
        changes: Dict[Path, Change] = {}

        if self.repo.head.is_valid():
            for diff in self.repo.head.commit.diff():
                change = self._to_change(diff)
                changes[change.path] = change
        else:
            # nothing committed yet, everything in the index is new
            for (path, _stage) in self.repo.index.entries:
                change = Change(self._working_path(path), ChangeStatus.ADDED)
                changes[change.path] = change

        # a submodule only counts once its checked out commit moves
        for diff in self.repo.index.diff(None, ignore_submodules="dirty"):
            change = self._to_change(diff)
            staged = changes.get(change.path)
            if staged is None or change.status == ChangeStatus.DELETED:
                changes[change.path] = change

        return changes

    def all_changes(self) -> List[Change]:
        if self._changes is None:
            self.refresh()
        return sorted(self._changes.values(), key=lambda c: str(c.path))

    def untracked_files(self) -> List[UntrackedFile]:
        return [UntrackedFile(self._working_path(p)) for p in self.repo.untracked_files]

    def changes_under_roots(self, roots: Iterable[Path]) -> Set[Change]:
        roots = [canonical_path(r) for r in roots]
        return {
            change for change in self.all_changes()
            if any(root == change.path or root in change.path.parents for root in roots)
        }

    def default_change_list(self) -> ChangeList:
        if self.repo.head.is_detached:
            name = DETACHED_CHANGE_LIST
        else:
            name = self.repo.active_branch.name
        return ChangeList(name=name, is_default=True, changes=tuple(self.all_changes()))

    def find_change_list_by_name(self, name: str) -> Optional[ChangeList]:
        default = self.default_change_list()
        return default if default.name == name else None

    def change_list_owning(self, change: Change) -> Optional[ChangeList]:
        default = self.default_change_list()
        return default if change in default.changes else None

    def request_update(
        self, mode: UpdateMode, title: str = DEFAULT_TITLE
    ) -> ReconciliationRequest:
        """Refresh off the event loop and complete the request when done."""
        loop = asyncio.get_running_loop()
        request = ReconciliationRequest(mode, title, loop=loop)
        refresh = loop.run_in_executor(None, self.refresh)

        def finish(future: asyncio.Future) -> None:
            if future.cancelled() or future.exception() is not None:
                request.abort()
            else:
                request.complete()

        refresh.add_done_callback(finish)
        return request


class GitLogSelection(VcsLogSelection):
    """Commits picked by revision (``HEAD~2``, a short sha, a branch name)."""

    def __init__(self, repo: Repo, revisions: List[str]):
        self.repo = repo
        self.revisions = revisions

    def get_selected_short_commit_details(self) -> List[CommitDetails]:
        details = []
        for revision in self.revisions:
            commit = self.repo.commit(revision)
            details.append(CommitDetails(
                reference=CommitReference(commit.hexsha),
                subject=commit.summary,
                author=commit.author.name,
            ))
        return details
