"""Commit presentation surfaces for the command line."""

import os
from pathlib import Path
from typing import List, Optional, Sequence, Union

from git import Repo
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .commands import FixupCommitCommand
from .interfaces import CommitPresentationSurface
from .models import Change, ChangeList, UntrackedFile
from .observers import FixupObserver


class ConsolePreviewSurface(CommitPresentationSurface):
    """Shows what would be committed without touching the repository."""

    def __init__(self, console: Optional[Console] = None, base_path: Optional[Path] = None):
        self.console = console or Console()
        self.base_path = base_path
        self.presented = 0

    def _display(self, path: Path) -> str:
        if self.base_path is None:
            return str(path)
        return Path(os.path.relpath(path, self.base_path)).as_posix()

    async def present(
        self,
        changes_to_commit: Sequence[Change],
        included: Sequence[Union[Change, UntrackedFile]],
        initial_change_list: Optional[ChangeList],
        message: str,
    ) -> None:
        self.presented += 1
        table = Table(show_header=True, header_style="bold")
        table.add_column("Status")
        table.add_column("Path")
        for item in included:
            status = item.status.value if isinstance(item, Change) else "untracked"
            table.add_row(status, self._display(item.path))

        list_name = initial_change_list.name if initial_change_list else "-"
        self.console.print(Panel(
            table,
            title=f"[bold]{message}[/bold]",
            subtitle=f"change-list: {list_name}",
        ))
        if not included:
            self.console.print("[yellow]Nothing to commit[/yellow]")


class GitCommitSurface(CommitPresentationSurface):
    """Commits the handed-off request straight away.

    Attributes:
        command (Optional[FixupCommitCommand]): The last executed command, for undo
        success (Optional[bool]): Outcome of the last commit, None when there was nothing to commit
    """

    def __init__(
        self,
        repo: Repo,
        console: Optional[Console] = None,
        no_verify: bool = False,
        observers: Optional[List[FixupObserver]] = None,
    ):
        self.repo = repo
        self.console = console or Console()
        self.no_verify = no_verify
        self.observers: List[FixupObserver] = list(observers or [])
        self.command: Optional[FixupCommitCommand] = None
        self.success: Optional[bool] = None

    async def present(
        self,
        changes_to_commit: Sequence[Change],
        included: Sequence[Union[Change, UntrackedFile]],
        initial_change_list: Optional[ChangeList],
        message: str,
    ) -> None:
        if not included:
            self.console.print("[yellow]Nothing to commit[/yellow]")
            self.command = None
            self.success = None
            return

        command = FixupCommitCommand(
            self.repo,
            message,
            included,
            self.console,
            no_verify=self.no_verify,
            observers=self.observers,
        )
        self.command = command
        self.success = await command.execute()
