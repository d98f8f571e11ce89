"""Command for creating fixup commits."""

import os
import tempfile
from typing import List, Optional, Sequence, Union

from git import Repo
from rich.console import Console

from ..models import Change, ChangeStatus, UntrackedFile
from ..observers import FixupObserver
from .base import GitCommand


class FixupCommitCommand(GitCommand):
    """Command for committing exactly the included items with a fixup message.

    This command handles:
    1. Adding included untracked files to the index
    2. Committing only the included paths, leaving other staged work alone
    3. Notifying observers of the commit
    4. Supporting undo via a soft reset

    Attributes:
        message (str): The commit message, e.g. ``fixup! <sha>``
        included (Sequence[Union[Change, UntrackedFile]]): What goes into the commit
        commit_hash (Optional[str]): The hash of the created commit
    """

    def __init__(
        self,
        repo: Repo,
        message: str,
        included: Sequence[Union[Change, UntrackedFile]],
        console: Optional[Console] = None,
        no_verify: bool = False,
        observers: Optional[Sequence[FixupObserver]] = None,
    ):
        super().__init__(repo, console, observers)
        self.message = message
        self.included = list(included)
        self.commit_hash: Optional[str] = None
        self.no_verify = no_verify

    def _commit_paths(self) -> List[str]:
        paths = []
        for item in self.included:
            paths.append(self.relative_path(item.path))
            if isinstance(item, Change) and item.status == ChangeStatus.RENAMED and item.old_path:
                paths.append(self.relative_path(item.old_path))
        return list(dict.fromkeys(paths))

    async def execute(self) -> bool:
        """Create the fixup commit.

        Returns:
            bool: True if the commit was created successfully, False otherwise
        """
        if not self.included:
            self.console.print("[yellow]No changes to commit, skipping...[/yellow]")
            return False

        try:
            untracked = [self.relative_path(i.path) for i in self.included if isinstance(i, UntrackedFile)]
            if untracked:
                self.repo.index.add(untracked)

            # Multi-line safe, and keeps the message out of the argument list
            with tempfile.NamedTemporaryFile(
                mode="w", delete=False, suffix=".commitmsg"
            ) as f:
                f.write(self.message)
                temp_file = f.name

            args = ["-F", temp_file]
            if self.no_verify:
                args.append("--no-verify")
            try:
                self.repo.git.commit(*args, "--only", "--", *self._commit_paths())
                self.commit_hash = self.repo.head.commit.hexsha
            finally:
                try:
                    os.unlink(temp_file)
                except OSError:
                    pass

            await self.notify_commit_created(self.message, self.commit_hash)
            return True

        except Exception as e:
            self.console.print(f"[red]Failed to create commit: {str(e)}[/red]")
            return False

    async def undo(self) -> bool:
        """Undo the commit, keeping its changes staged.

        Returns:
            bool: True if the commit was undone successfully, False otherwise
        """
        if not self.commit_hash:
            self.console.print("[yellow]No commit to undo[/yellow]")
            return False

        try:
            self.repo.git.reset("--soft", "HEAD~1")
            self.commit_hash = None
            return True

        except Exception as e:
            self.console.print(f"[red]Failed to undo commit: {str(e)}[/red]")
            return False
