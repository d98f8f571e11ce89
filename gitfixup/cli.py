#!/usr/bin/env python3
import asyncio
import os
from pathlib import Path
from typing import Iterable, Optional

import click
from rich.console import Console

from . import __version__
from .action import FixupAction
from .config import DEFAULT_CONFIG_FILENAME, Config
from .coordinator import FixupCoordinator
from .git_backend import GitChangeTracker, GitLogSelection, GitProject
from .models import AmbientContext, FixupKind, SelectionSnapshot
from .observers import ConsoleLogObserver, FileLogObserver
from .roots import canonical_path
from .strategy import DefaultCommitStrategy, RootsOnlyCommitStrategy
from .surfaces import ConsolePreviewSurface, GitCommitSurface

console = Console()


def run_async(coro):
    """Run an async coroutine to completion from synchronous click code."""
    return asyncio.run(coro)


def build_selection(tracker: GitChangeTracker, repo_path: Path, files: Iterable[Path]) -> SelectionSnapshot:
    """Turn ``--file`` arguments into an explicit selection."""
    tracker.refresh()
    changes = {c.path: c for c in tracker.all_changes()}
    untracked = {u.path: u for u in tracker.untracked_files()}

    selected_changes = []
    selected_untracked = []
    for file in files:
        path = canonical_path(file if file.is_absolute() else repo_path / file)
        if path in changes:
            selected_changes.append(changes[path])
        elif path in untracked:
            selected_untracked.append(untracked[path])
        else:
            console.print(f"[yellow]No pending change for {file}, ignoring[/yellow]")

    return SelectionSnapshot(changes=tuple(selected_changes), untracked_files=tuple(selected_untracked))


@click.command()
@click.argument("revision", default="HEAD")
@click.option(
    "-p",
    "--path",
    default=".",
    help="Path to git repository (defaults to current directory)",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
)
@click.option(
    "-f",
    "--file",
    "files",
    multiple=True,
    type=click.Path(path_type=Path),
    help="Only commit these files (repeatable). Defaults to every pending change",
)
@click.option("--squash", is_flag=True, help="Create a 'squash!' commit instead of 'fixup!'")
@click.option("--amend", is_flag=True, help="Create an 'amend!' commit instead of 'fixup!'")
@click.option(
    "-d", "--dry-run", is_flag=True, help="Show the prepared commit without making it"
)
@click.option(
    "--roots-only",
    is_flag=True,
    help="Commit everything under the repository roots, ignoring --file",
)
@click.option(
    "--no-verify",
    is_flag=True,
    help="Skip pre-commit hooks when creating the commit (overrides config setting)",
)
@click.option(
    "-l",
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional file to log fixup operations (overrides config setting)",
)
@click.option(
    "--config-list", is_flag=True, help="Display current configuration settings"
)
@click.option("-v", "--verbose", is_flag=True, help="Show every preparation step")
@click.option("--version", is_flag=True, help="Display version information and exit")
def main(
    revision: str,
    path: Path,
    files: tuple,
    squash: bool,
    amend: bool,
    dry_run: bool,
    roots_only: bool,
    no_verify: bool,
    log_file: Optional[Path],
    config_list: bool,
    verbose: bool,
    version: bool,
):
    """
    Create a fixup commit for REVISION (defaults to HEAD).

    The commit message references REVISION so that
    `git rebase -i --autosquash` folds the new commit into it. Pending
    changes of the repository (or only the given --file arguments) are
    committed once the working tree state has been refreshed.

    Configuration can be set in .gitfixup.toml in the repository root.
    Command line options override configuration file settings.
    """
    try:
        if version:
            console.print(f"git-fixup {__version__}")
            return

        repo_path = path.absolute()
        config = Config.load(repo_path)

        if config_list:
            config_path = repo_path / DEFAULT_CONFIG_FILENAME
            source = "config" if config_path.exists() else "default"

            console.print("\n[bold]Current Configuration Settings:[/bold]")
            if config_path.exists():
                console.print(
                    f"[dim]Config file: {str(config_path).replace(os.sep, '/')}[/dim]"
                )
            else:
                console.print("[dim]Using default values (no config file found)[/dim]")

            console.print(f"\n{'Setting':<20} {'Value':<25} {'Source':<10}")
            console.print("-" * 55)
            for name, value in config.model_dump(mode="json").items():
                if name == "kind":
                    value = config.kind.name.lower()
                console.print(f"{name:<20} {str(value):<25} {source:<10}")
            return

        if squash and amend:
            raise click.UsageError("--squash and --amend are mutually exclusive")
        if squash:
            config.kind = FixupKind.SQUASH
        if amend:
            config.kind = FixupKind.AMEND
        if no_verify:
            config.no_verify = True
        if log_file is not None:
            config.log_file = str(log_file)

        project = GitProject(str(repo_path))
        tracker = GitChangeTracker(project.repo)
        selection = build_selection(tracker, repo_path, files)

        observers = [ConsoleLogObserver(console, verbose=verbose)]
        log_file_path = log_file or config.get_log_file()
        if log_file_path:
            observers.append(FileLogObserver(str(log_file_path)))

        if dry_run:
            surface = ConsolePreviewSurface(console, base_path=repo_path)
        else:
            surface = GitCommitSurface(
                project.repo, console, no_verify=config.no_verify, observers=observers
            )

        strategy = RootsOnlyCommitStrategy() if roots_only else DefaultCommitStrategy()

        def make_coordinator(prefix: str) -> FixupCoordinator:
            return FixupCoordinator(
                tracker,
                surface,
                strategy=strategy,
                prefix=prefix,
                update_mode=config.update_mode,
                observers=observers,
            )

        action = FixupAction(make_coordinator, config.kind)
        context = AmbientContext(
            project=project,
            selection=selection,
            log_selection=GitLogSelection(project.repo, [revision]),
        )
        if not action.is_applicable(context):
            console.print("[red]No commit selected[/red]")
            raise click.Abort()

        run_async(action.invoke(context))

        if isinstance(surface, GitCommitSurface) and surface.success is False:
            raise click.Abort()
    except (click.Abort, click.UsageError):
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Error: {str(e)}[/red]")
        raise click.Abort()


if __name__ == "__main__":
    main()
