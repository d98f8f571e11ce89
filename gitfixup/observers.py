"""Observer pattern for fixup operations."""

from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console

from .models import FixupState, ResolvedCommitRequest


class FixupObserver(ABC):
    """Abstract base class for fixup operation observers."""

    @abstractmethod
    async def on_state_changed(self, state: FixupState) -> None:
        """Called whenever the coordinator moves to a new state."""
        pass

    @abstractmethod
    async def on_aborted(self, reason: str) -> None:
        """Called when an invocation ends without showing a commit."""
        pass

    @abstractmethod
    async def on_request_presented(self, request: ResolvedCommitRequest) -> None:
        """Called after a resolved request was handed to the commit surface."""
        pass

    @abstractmethod
    async def on_commit_created(self, message: str, commit_hash: str) -> None:
        """Called when a fixup commit is written to the repository."""
        pass


class ConsoleLogObserver(FixupObserver):
    """Observer that logs fixup operations to the console."""

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    async def on_state_changed(self, state: FixupState) -> None:
        if self.verbose:
            self.console.print(f"[dim]{state.value}[/dim]")

    async def on_aborted(self, reason: str) -> None:
        self.console.print(f"[yellow]{reason}[/yellow]")

    async def on_request_presented(self, request: ResolvedCommitRequest) -> None:
        self.console.print(
            f"[blue]Prepared '{request.message}' with {len(request.changes_to_commit)} change(s)[/blue]"
        )

    async def on_commit_created(self, message: str, commit_hash: str) -> None:
        self.console.print(f"[green]Created commit {commit_hash[:8]}: {message}[/green]")


class FileLogObserver(FixupObserver):
    """Observer that logs fixup operations to a file."""

    def __init__(self, log_file: str):
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    async def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        with self.log_file.open("a") as f:
            f.write(f"{timestamp} - {message}\n")

    async def on_state_changed(self, state: FixupState) -> None:
        await self._log(f"State: {state.value}")

    async def on_aborted(self, reason: str) -> None:
        await self._log(f"Aborted: {reason}")

    async def on_request_presented(self, request: ResolvedCommitRequest) -> None:
        list_name = request.initial_change_list.name if request.initial_change_list else "none"
        await self._log(
            f"Presented '{request.message}': {len(request.changes_to_commit)} change(s), "
            f"{len(request.included)} included, change-list {list_name}"
        )

    async def on_commit_created(self, message: str, commit_hash: str) -> None:
        await self._log(f"Created commit {commit_hash}: {message}")
