"""Fixup actions as seen by a hosting UI or the command line."""

from typing import Callable, Optional

from .coordinator import FixupCoordinator
from .models import AmbientContext, CommitDetails, FixupKind


class FixupAction:
    """Enablement check plus invocation for one kind of autosquash commit.

    The host calls :meth:`is_applicable` to decide whether to offer the
    action and :meth:`invoke` when the user triggers it. Each invocation gets
    a fresh coordinator from ``coordinator_factory``.
    """

    def __init__(
        self,
        coordinator_factory: Callable[[str], FixupCoordinator],
        kind: FixupKind = FixupKind.FIXUP,
    ):
        self.coordinator_factory = coordinator_factory
        self.kind = kind
        self.last_coordinator: Optional[FixupCoordinator] = None

    @classmethod
    def fixup(cls, coordinator_factory: Callable[[str], FixupCoordinator]) -> "FixupAction":
        return cls(coordinator_factory, FixupKind.FIXUP)

    @classmethod
    def squash(cls, coordinator_factory: Callable[[str], FixupCoordinator]) -> "FixupAction":
        return cls(coordinator_factory, FixupKind.SQUASH)

    @classmethod
    def amend(cls, coordinator_factory: Callable[[str], FixupCoordinator]) -> "FixupAction":
        return cls(coordinator_factory, FixupKind.AMEND)

    def is_applicable(self, context: AmbientContext) -> bool:
        return self.selected_commit(context) is not None

    def selected_commit(self, context: AmbientContext) -> Optional[CommitDetails]:
        if context.log_selection is None:
            return None
        details = context.log_selection.get_selected_short_commit_details()
        return details[0] if details else None

    async def invoke(self, context: AmbientContext) -> None:
        commit = self.selected_commit(context)
        if commit is None:
            return
        coordinator = self.coordinator_factory(self.kind.value)
        self.last_coordinator = coordinator
        await coordinator.invoke(commit.reference, context)
