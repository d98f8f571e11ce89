"""Strategies that turn a selection into a resolved commit request."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from .interfaces import ChangeTrackingService
from .models import (
    AmbientContext,
    Change,
    ChangeList,
    ResolvedCommitRequest,
    UntrackedFile,
)


def _ordered(changes) -> Tuple[Change, ...]:
    return tuple(sorted(changes, key=lambda c: str(c.path)))


class CommitStrategy(ABC):
    """Abstract base class for commit request resolution strategies."""

    @abstractmethod
    def resolve(
        self,
        context: AmbientContext,
        roots: Sequence[Path],
        message: str,
        tracker: ChangeTrackingService,
    ) -> ResolvedCommitRequest:
        """Build the request handed to the commit surface."""
        pass

    def initial_change_list(
        self, context: AmbientContext, tracker: ChangeTrackingService
    ) -> Optional[ChangeList]:
        """Pick the change-list the commit view starts on.

        The first explicitly selected change-list wins, looked up again by
        name because the context may only hold a copy. Otherwise the list
        owning the first selected change, otherwise the default list.
        """
        selection = context.selection
        if selection.change_lists:
            return tracker.find_change_list_by_name(selection.change_lists[0].name)
        if selection.changes:
            return tracker.change_list_owning(selection.changes[0])
        return tracker.default_change_list()


class DefaultCommitStrategy(CommitStrategy):
    """Explicit selection wins in full; otherwise everything under the roots."""

    def resolve(
        self,
        context: AmbientContext,
        roots: Sequence[Path],
        message: str,
        tracker: ChangeTrackingService,
    ) -> ResolvedCommitRequest:
        selection = context.selection
        if not selection.is_empty:
            # untracked files are only ever ticked, never committed as changes
            changes_to_commit = tuple(dict.fromkeys(selection.changes))
            included_items: Tuple[Union[Change, UntrackedFile], ...] = (
                changes_to_commit + tuple(dict.fromkeys(selection.untracked_files))
            )
        else:
            changes_to_commit = _ordered(tracker.changes_under_roots(roots))
            included_items = changes_to_commit

        return ResolvedCommitRequest(
            message=message,
            changes_to_commit=changes_to_commit,
            included=included_items,
            initial_change_list=self.initial_change_list(context, tracker),
        )


class RootsOnlyCommitStrategy(CommitStrategy):
    """Always commits every change under the roots, ignoring selected files."""

    def resolve(
        self,
        context: AmbientContext,
        roots: Sequence[Path],
        message: str,
        tracker: ChangeTrackingService,
    ) -> ResolvedCommitRequest:
        changes = _ordered(tracker.changes_under_roots(roots))
        return ResolvedCommitRequest(
            message=message,
            changes_to_commit=changes,
            included=changes,
            initial_change_list=self.initial_change_list(context, tracker),
        )
