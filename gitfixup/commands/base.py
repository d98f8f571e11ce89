"""Reversible operations on a working tree."""

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence

from git import Repo
from rich.console import Console

from ..observers import FixupObserver


class GitCommand(ABC):
    """An operation on a working tree that can be rolled back.

    Paths handed to commands are absolute (as produced by the change
    tracker); git wants them relative to the working tree, so the base
    class does the translation. Commits a command creates are reported to
    its observers.

    Attributes:
        repo (Repo): Repository the command runs in
        console (Console): Where failures are printed
        observers (List[FixupObserver]): Notified of created commits
    """

    def __init__(
        self,
        repo: Repo,
        console: Optional[Console] = None,
        observers: Optional[Sequence[FixupObserver]] = None,
    ):
        self.repo = repo
        self.console = console or Console()
        self.observers: List[FixupObserver] = list(observers or [])

    def add_observer(self, observer: FixupObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: FixupObserver) -> None:
        self.observers.remove(observer)

    def relative_path(self, path: Path) -> str:
        """``path`` relative to the working tree, with forward slashes."""
        return Path(os.path.relpath(path, self.repo.working_tree_dir)).as_posix()

    async def notify_commit_created(self, message: str, commit_hash: str) -> None:
        for observer in self.observers:
            await observer.on_commit_created(message, commit_hash)

    @abstractmethod
    async def execute(self) -> bool:
        """Returns True on success. Failures are printed, not raised."""

    @abstractmethod
    async def undo(self) -> bool:
        """Roll back what :meth:`execute` did."""
