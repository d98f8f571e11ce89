"""Cancellable handle for a pending change-tracking update."""

import asyncio
from typing import Callable, List, Optional

from .models import UpdateMode

DEFAULT_TITLE = "Waiting for changelists update to show commit dialog"


class ReconciliationRequest:
    """A pending "bring change tracking up to date" pass.

    The tracker calls :meth:`complete` once its view is current. Whoever
    owns the request may :meth:`cancel` it instead, in which case waiters
    see ``False`` and continuations registered with
    :meth:`add_done_callback` receive ``False`` too.

    Attributes:
        mode (UpdateMode): How the tracker was asked to update
        title (str): Progress text shown while waiting
    """

    def __init__(
        self,
        mode: UpdateMode = UpdateMode.SYNCHRONOUS_CANCELLABLE,
        title: str = DEFAULT_TITLE,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.mode = mode
        self.title = title
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = self._loop.create_future()
        self._callbacks: List[Callable[[bool], None]] = []

    @property
    def done(self) -> bool:
        return self._future.done()

    @property
    def cancelled(self) -> bool:
        return self._future.done() and self._future.result() is False

    @property
    def cancellable(self) -> bool:
        return self.mode != UpdateMode.SYNCHRONOUS_NOT_CANCELLABLE

    def complete(self) -> None:
        """Signal that change tracking is current. No-op once settled."""
        self._settle(True)

    def cancel(self) -> bool:
        """Close the handle without running continuations.

        Returns:
            bool: True if the request was pending and is now cancelled
        """
        if self.done or not self.cancellable:
            return False
        self._settle(False)
        return True

    def abort(self) -> None:
        """Settle as cancelled regardless of mode. Used by trackers that failed to update."""
        self._settle(False)

    def add_done_callback(self, callback: Callable[[bool], None]) -> None:
        if self.done:
            callback(self._future.result())
        else:
            self._callbacks.append(callback)

    async def wait(self) -> bool:
        """Wait for the request to settle.

        Returns:
            bool: True if change tracking became current, False if cancelled
        """
        return await asyncio.shield(self._future)

    def _settle(self, completed: bool) -> None:
        if self._future.done():
            return
        self._future.set_result(completed)
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(completed)

    def __repr__(self) -> str:
        state = "pending"
        if self.done:
            state = "cancelled" if self.cancelled else "completed"
        return f"<ReconciliationRequest mode={self.mode.value} {state}>"
