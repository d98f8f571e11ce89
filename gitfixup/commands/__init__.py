"""Git operation commands using the Command Pattern.

Example:
    ```python
    from gitfixup.commands import FixupCommitCommand
    from gitfixup.observers import FileLogObserver

    command = FixupCommitCommand(repo, "fixup! 1a2b3c4", included)
    command.add_observer(FileLogObserver("git.log"))
    success = await command.execute()

    # Undo the commit if needed
    success = await command.undo()
    ```
"""

from .base import GitCommand
from .commit import FixupCommitCommand

__all__ = [
    "GitCommand",
    "FixupCommitCommand",
]
