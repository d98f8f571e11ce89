"""Collaborator interfaces consumed by the fixup coordinator.

The coordinator never looks these up globally; everything it needs is
passed in. The git adapters in :mod:`gitfixup.git_backend` implement them
for plain repositories, and an IDE host can implement them over its own
services.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Set, TYPE_CHECKING, Union

from .models import Change, ChangeList, CommitDetails, UntrackedFile, UpdateMode

if TYPE_CHECKING:
    from .reconciliation import ReconciliationRequest


class VcsBackend(ABC):
    """A version control system registered for a project."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    def is_active(self) -> bool:
        return True

    @property
    @abstractmethod
    def has_checkin_capability(self) -> bool:
        """Whether this backend can commit changes at all."""
        pass

    @abstractmethod
    def roots(self) -> List[Path]:
        """Directories under which this backend manages history."""
        pass


class Project(ABC):
    """The project an action runs against."""

    def __init__(self) -> None:
        self._dispose_listeners: List[Callable[[], None]] = []
        self._disposed = False

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @abstractmethod
    def vcs_backends(self) -> List[VcsBackend]:
        pass

    @abstractmethod
    def is_background_operation_running(self) -> bool:
        """Whether another VCS operation (rebase, merge, commit...) is in flight."""
        pass

    def add_dispose_listener(self, listener: Callable[[], None]) -> None:
        self._dispose_listeners.append(listener)

    def remove_dispose_listener(self, listener: Callable[[], None]) -> None:
        if listener in self._dispose_listeners:
            self._dispose_listeners.remove(listener)

    def dispose(self) -> None:
        """Close the project and notify listeners once."""
        if self._disposed:
            return
        self._disposed = True
        for listener in list(self._dispose_listeners):
            listener()
        self._dispose_listeners.clear()


class VcsLogSelection(ABC):
    """Commits currently selected in a log view."""

    @abstractmethod
    def get_selected_short_commit_details(self) -> List[CommitDetails]:
        pass


class ChangeTrackingService(ABC):
    """Read access to pending changes and change-lists of a project."""

    @abstractmethod
    def changes_under_roots(self, roots: Iterable[Path]) -> Set[Change]:
        pass

    @abstractmethod
    def find_change_list_by_name(self, name: str) -> Optional[ChangeList]:
        pass

    @abstractmethod
    def change_list_owning(self, change: Change) -> Optional[ChangeList]:
        pass

    @abstractmethod
    def default_change_list(self) -> ChangeList:
        pass

    @abstractmethod
    def request_update(self, mode: UpdateMode, title: str = "") -> "ReconciliationRequest":
        """Start bringing change tracking up to date.

        The returned handle completes once the tracked state is current.
        """
        pass


class CommitPresentationSurface(ABC):
    """Whatever shows the commit to the user and performs it."""

    @abstractmethod
    async def present(
        self,
        changes_to_commit: Sequence[Change],
        included: Sequence[Union[Change, UntrackedFile]],
        initial_change_list: Optional[ChangeList],
        message: str,
    ) -> None:
        """Hand off a resolved commit. Further interaction is owned by the surface."""
        pass


class DocumentSaver(ABC):
    """Flushes unsaved in-memory documents to disk."""

    @abstractmethod
    def save_all(self) -> None:
        pass
