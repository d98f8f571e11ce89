"""Tests for fixup observers."""
from pathlib import Path
from unittest.mock import Mock

import pytest
from rich.console import Console

from gitfixup.models import Change, ChangeList, FixupState, ResolvedCommitRequest
from gitfixup.observers import ConsoleLogObserver, FileLogObserver


@pytest.fixture
def request_():
    change = Change(Path("/repo/a.py"))
    return ResolvedCommitRequest(
        message="fixup! abc",
        changes_to_commit=(change,),
        included=(change,),
        initial_change_list=ChangeList("main", is_default=True),
    )


@pytest.mark.asyncio
async def test_console_observer_quiet_by_default(request_):
    console = Mock(spec=Console)
    observer = ConsoleLogObserver(console)

    await observer.on_state_changed(FixupState.ROOTS_PREPARED)
    console.print.assert_not_called()

    await observer.on_request_presented(request_)
    assert "fixup! abc" in console.print.call_args.args[0]


@pytest.mark.asyncio
async def test_console_observer_verbose_states():
    console = Mock(spec=Console)
    await ConsoleLogObserver(console, verbose=True).on_state_changed(FixupState.READY)
    assert "ready" in console.print.call_args.args[0]


@pytest.mark.asyncio
async def test_file_observer_writes_lines(tmp_path, request_):
    log_file = tmp_path / "nested" / "fixup.log"
    observer = FileLogObserver(str(log_file))

    await observer.on_state_changed(FixupState.AWAITING_RECONCILIATION)
    await observer.on_request_presented(request_)
    await observer.on_aborted("nothing to do")
    await observer.on_commit_created("fixup! abc", "0123456789")

    lines = log_file.read_text().splitlines()
    assert len(lines) == 4
    assert lines[0].endswith("State: awaiting_reconciliation")
    assert "change-list main" in lines[1]
    assert lines[2].endswith("Aborted: nothing to do")
    assert lines[3].endswith("Created commit 0123456789: fixup! abc")
