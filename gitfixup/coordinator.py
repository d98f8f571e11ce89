"""Coordinates building and handing off a single fixup commit.

One invocation moves through::

    IDLE -> MESSAGE_BUILT -> ROOTS_PREPARED -> AWAITING_RECONCILIATION -> READY
                                   |                    |
                                   +----> ABORTED <-----+

Missing projects, a running background VCS operation and a cancelled
update all end in ``ABORTED`` without touching the commit surface. None of
them is an error for the caller.
"""

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

from .interfaces import ChangeTrackingService, CommitPresentationSurface, DocumentSaver, Project
from .models import (
    AmbientContext,
    CommitReference,
    FixupKind,
    FixupState,
    ResolvedCommitRequest,
    UpdateMode,
)
from .observers import FixupObserver
from .reconciliation import DEFAULT_TITLE, ReconciliationRequest
from .roots import RootResolver, filter_descending_paths
from .strategy import CommitStrategy, DefaultCommitStrategy


def build_fixup_message(prefix: str, commit: CommitReference) -> str:
    """Message referencing ``commit`` so autosquash can find its target."""
    return prefix + commit.as_string()


class FixupCoordinator:
    """Prepares a fixup commit and hands it to a commit surface.

    Attributes:
        tracker (ChangeTrackingService): Source of pending changes and change-lists
        surface (CommitPresentationSurface): Receives the resolved request
        state (FixupState): Where the current invocation is
        pending (Optional[ReconciliationRequest]): The outstanding update, if any
        result (Optional[ResolvedCommitRequest]): Last request handed off
    """

    def __init__(
        self,
        tracker: ChangeTrackingService,
        surface: CommitPresentationSurface,
        resolver: Optional[RootResolver] = None,
        strategy: Optional[CommitStrategy] = None,
        document_saver: Optional[DocumentSaver] = None,
        prefix: str = FixupKind.FIXUP.value,
        update_mode: UpdateMode = UpdateMode.SYNCHRONOUS_CANCELLABLE,
        observers: Optional[List[FixupObserver]] = None,
    ):
        self.tracker = tracker
        self.surface = surface
        self.resolver = resolver or RootResolver()
        self.strategy = strategy or DefaultCommitStrategy()
        self.document_saver = document_saver
        self.prefix = prefix
        self.update_mode = update_mode
        self.observers: List[FixupObserver] = list(observers or [])
        self.state = FixupState.IDLE
        self.pending: Optional[ReconciliationRequest] = None
        self.result: Optional[ResolvedCommitRequest] = None

    def add_observer(self, observer: FixupObserver) -> None:
        self.observers.append(observer)

    def remove_observer(self, observer: FixupObserver) -> None:
        self.observers.remove(observer)

    def build_message(self, commit: CommitReference) -> str:
        return build_fixup_message(self.prefix, commit)

    async def prepare(self, context: AmbientContext) -> Optional[List[Path]]:
        """Resolve the roots to commit under.

        Returns:
            Optional[List[Path]]: Non-overlapping roots, or None if there is no project
        """
        project = context.project
        if project is None or project.is_disposed:
            await self._abort("No project available, nothing to commit")
            return None

        roots = self.resolver.resolve(project)
        # the commit reads file contents from disk
        if self.document_saver is not None:
            self.document_saver.save_all()
        roots = filter_descending_paths(roots)
        await self._set_state(FixupState.ROOTS_PREPARED)
        return roots

    async def request_reconciliation(
        self, project: Project, roots: Sequence[Path], message: str
    ) -> Optional[ReconciliationRequest]:
        """Ask the tracker to catch up before ``message`` is committed.

        Returns:
            Optional[ReconciliationRequest]: The pending update, or None when another
            VCS operation is already running for the project
        """
        if project.is_background_operation_running():
            await self._abort("Background VCS operation is running, skipping fixup commit")
            return None

        request = self.tracker.request_update(self.update_mode, DEFAULT_TITLE)
        self.pending = request
        project.add_dispose_listener(self.cancel)
        try:
            await self._set_state(FixupState.AWAITING_RECONCILIATION)
        except Exception:
            request.cancel()
            self._release(project)
            raise
        return request

    async def on_reconciliation_complete(
        self,
        context: AmbientContext,
        project: Project,
        roots: Sequence[Path],
        message: str,
    ) -> ResolvedCommitRequest:
        request = self.strategy.resolve(context, roots, message, self.tracker)
        self.result = request
        await self._set_state(FixupState.READY)
        await self.surface.present(
            request.changes_to_commit,
            request.included,
            request.initial_change_list,
            request.message,
        )
        for observer in self.observers:
            await observer.on_request_presented(request)
        return request

    def cancel(self) -> bool:
        """Cancel the pending update so the handoff never happens."""
        if self.pending is None:
            return False
        return self.pending.cancel()

    async def invoke(self, commit: CommitReference, context: AmbientContext) -> None:
        """Run one full fixup preparation. Outcomes are only observable via the surface."""
        self.state = FixupState.IDLE
        self.result = None
        project = context.project
        try:
            message = self.build_message(commit)
            await self._set_state(FixupState.MESSAGE_BUILT)

            roots = await self.prepare(context)
            if roots is None:
                return

            request = await self.request_reconciliation(project, roots, message)
            if request is None:
                return

            try:
                completed = await request.wait()
            except asyncio.CancelledError:
                request.cancel()
                self.state = FixupState.ABORTED
                raise
            finally:
                self._release(project)

            if not completed or project.is_disposed:
                await self._abort("Change tracking update was cancelled")
                return

            await self.on_reconciliation_complete(context, project, roots, message)
        except Exception as e:
            await self._abort(f"Failed to prepare fixup commit: {str(e)}")

    def _release(self, project: Project) -> None:
        project.remove_dispose_listener(self.cancel)
        self.pending = None

    async def _set_state(self, state: FixupState) -> None:
        self.state = state
        for observer in self.observers:
            await observer.on_state_changed(state)

    async def _abort(self, reason: str) -> None:
        await self._set_state(FixupState.ABORTED)
        for observer in self.observers:
            await observer.on_aborted(reason)
