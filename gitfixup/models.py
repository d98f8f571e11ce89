"""Shared models for git-fixup."""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from .interfaces import Project, VcsLogSelection


class FixupKind(str, Enum):
    """Autosquash markers understood by `git rebase --autosquash`."""
    FIXUP = "fixup! "
    SQUASH = "squash! "
    AMEND = "amend! "


class FixupState(str, Enum):
    IDLE = "idle"
    MESSAGE_BUILT = "message_built"
    ROOTS_PREPARED = "roots_prepared"
    AWAITING_RECONCILIATION = "awaiting_reconciliation"
    READY = "ready"
    ABORTED = "aborted"


class UpdateMode(str, Enum):
    SYNCHRONOUS_CANCELLABLE = "synchronous_cancellable"
    SYNCHRONOUS_NOT_CANCELLABLE = "synchronous_not_cancellable"
    SILENT_CALLBACK_POOLED = "silent_callback_pooled"


class ChangeStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class CommitReference:
    id: str

    def as_string(self) -> str:
        return self.id


@dataclass(frozen=True)
class CommitDetails:
    """Short details of a commit as shown in a log view."""
    reference: CommitReference
    subject: str = ""
    author: str = ""


@dataclass(frozen=True)
class Change:
    path: Path
    status: ChangeStatus = ChangeStatus.MODIFIED
    old_path: Optional[Path] = None


@dataclass(frozen=True)
class UntrackedFile:
    path: Path


@dataclass(frozen=True)
class ChangeList:
    name: str
    is_default: bool = False
    changes: Tuple[Change, ...] = ()


@dataclass(frozen=True)
class SelectionSnapshot:
    """Explicit selection captured once when an action is invoked."""
    changes: Tuple[Change, ...] = ()
    untracked_files: Tuple[UntrackedFile, ...] = ()
    change_lists: Tuple[ChangeList, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.changes and not self.untracked_files


@dataclass(frozen=True)
class AmbientContext:
    project: Optional["Project"] = None
    selection: SelectionSnapshot = field(default_factory=SelectionSnapshot)
    log_selection: Optional["VcsLogSelection"] = None


class ResolvedCommitRequest(BaseModel):
    """Everything the commit surface needs to show a single commit."""
    model_config = ConfigDict(frozen=True)

    message: str
    changes_to_commit: Tuple[Change, ...] = Field(description="Changes pre-selected for the commit")
    included: Tuple[Union[Change, UntrackedFile], ...] = Field(
        description="Changes and untracked files ticked in the commit view"
    )
    initial_change_list: Optional[ChangeList] = None

    @model_validator(mode="after")
    def _changes_are_included(self) -> "ResolvedCommitRequest":
        missing = [c for c in self.changes_to_commit if c not in self.included]
        if missing:
            raise ValueError(f"changes_to_commit not included: {missing}")
        return self
