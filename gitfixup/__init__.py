"""git-fixup: prepare fixup commits against a selected commit."""

__version__ = "0.1.0"

from .action import FixupAction
from .coordinator import FixupCoordinator, build_fixup_message
from .models import (
    AmbientContext,
    Change,
    ChangeList,
    ChangeStatus,
    CommitDetails,
    CommitReference,
    FixupKind,
    FixupState,
    ResolvedCommitRequest,
    SelectionSnapshot,
    UntrackedFile,
    UpdateMode,
)
from .reconciliation import ReconciliationRequest
from .roots import RootResolver, filter_descending_paths
from .strategy import CommitStrategy, DefaultCommitStrategy, RootsOnlyCommitStrategy

__all__ = [
    "AmbientContext",
    "Change",
    "ChangeList",
    "ChangeStatus",
    "CommitDetails",
    "CommitReference",
    "CommitStrategy",
    "DefaultCommitStrategy",
    "FixupAction",
    "FixupCoordinator",
    "FixupKind",
    "FixupState",
    "ReconciliationRequest",
    "ResolvedCommitRequest",
    "RootResolver",
    "RootsOnlyCommitStrategy",
    "SelectionSnapshot",
    "UntrackedFile",
    "UpdateMode",
    "build_fixup_message",
]
