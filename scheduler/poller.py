"""
Progress Poller

Drives the overlay's fetch -> compute -> reconcile -> notify cycle on a
fixed cadence.

Lifecycle:
- start() runs one cycle immediately and then one every `interval`
  seconds, returning a PollHandle
- PollHandle.stop() cancels the timer, any in-flight cycle and any
  telemetry still being dispatched; it is idempotent, and a fetch that
  resolves after stop is discarded

Only one cycle is in flight at a time. A timer tick that finds the
previous cycle still running is skipped rather than queued.
"""
import asyncio
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from core.error_boundary import run_guarded, run_guarded_async
from core.logging import get_logger, set_tick
from milestones.catalog import DEFAULT_CATALOG, Milestone, MilestoneCatalog
from milestones.progress import ProgressView, build_progress_view, compute_current_step
from milestones.reconciler import StateReconciler
from milestones.snapshot import SnapshotFetcher, SnapshotUnavailableError
from milestones.telemetry import TelemetryDispatcher

logger = get_logger(__name__)

POLL_INTERVAL_SECONDS = 5.0


@dataclass
class CycleResult:
    """Outcome of one poll tick."""
    fetched: bool
    current_step: int
    newly_completed: List[Milestone] = field(default_factory=list)
    discarded: bool = False
    skipped: bool = False
    error: Optional[str] = None


class PollHandle:
    """Cancellable handle for a running poll loop."""

    def __init__(self, poller: 'ProgressPoller'):
        self._poller = poller
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def active(self) -> bool:
        return not self._stopped

    def stop(self) -> None:
        """Stop polling. Safe to call more than once."""
        if self._stopped:
            return
        self._stopped = True
        self._poller._release(self)

    async def wait(self) -> None:
        """Wait until the poll loop has finished."""
        if self._task is None:
            return
        # a loop cancelled by stop() ends the wait quietly; cancelling the waiter still propagates
        await asyncio.gather(self._task, return_exceptions=True)


class ProgressPoller:
    """
    Owns the displayed progress and wires the fetcher, reconciler and
    dispatcher together.

    Args:
        fetcher: Source of fresh snapshots
        reconciler: Retained-state holder, one per engine lifetime
        dispatcher: Fire-and-forget telemetry
        catalog: Milestone universe and order
        interval: Seconds between cycle starts
        on_progress: Called with a ProgressView when the displayed step changes
    """

    def __init__(
        self,
        fetcher: SnapshotFetcher,
        reconciler: StateReconciler,
        dispatcher: TelemetryDispatcher,
        catalog: MilestoneCatalog = DEFAULT_CATALOG,
        interval: float = POLL_INTERVAL_SECONDS,
        on_progress: Optional[Callable[[ProgressView], None]] = None,
    ):
        self.fetcher = fetcher
        self.reconciler = reconciler
        self.dispatcher = dispatcher
        self.catalog = catalog
        self.interval = interval
        self.on_progress = on_progress

        self._current_step = 1
        self._has_snapshot = False
        self._last_published: Optional[ProgressView] = None
        self._tick = 0
        self._in_flight = False
        self._cycle_task: Optional[asyncio.Task] = None
        self._handle: Optional[PollHandle] = None

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def has_snapshot(self) -> bool:
        return self._has_snapshot

    @property
    def view(self) -> ProgressView:
        return build_progress_view(self._current_step, self.catalog)

    @property
    def is_running(self) -> bool:
        return self._handle is not None and self._handle.active

    def start(self) -> PollHandle:
        """Begin polling. Returns the existing handle if already running."""
        if self.is_running:
            return self._handle

        handle = PollHandle(self)
        handle._task = asyncio.create_task(self._run(handle), name='progress-poller')
        self._handle = handle
        logger.info(f"Progress poller started (interval={self.interval}s, milestones={len(self.catalog)})")
        return handle

    def _release(self, handle: PollHandle) -> None:
        if handle._task is not None and not handle._task.done():
            handle._task.cancel()

        if self._handle is handle:
            if self._cycle_task is not None and not self._cycle_task.done():
                self._cycle_task.cancel()
            self.dispatcher.cancel_pending()
            self._handle = None

        logger.info("Progress poller stopped")

    async def _run(self, handle: PollHandle) -> None:
        while handle.active:
            if self._cycle_task is not None and not self._cycle_task.done():
                logger.info("Previous cycle still in flight, skipping tick")
            else:
                self._cycle_task = asyncio.create_task(self._guarded_cycle(handle))
            await asyncio.sleep(self.interval)

    async def _guarded_cycle(self, handle: PollHandle) -> Optional[CycleResult]:
        return await run_guarded_async(
            lambda: self.run_cycle(handle),
            context={"operation": "poll_cycle", "tick": self._tick + 1},
        )

    async def run_cycle(self, handle: Optional[PollHandle] = None) -> CycleResult:
        """
        Run one tick.

        When `handle` is given and gets stopped while the fetch is
        pending, the fetched result is discarded without touching any
        state.
        """
        if self._in_flight:
            logger.info("Cycle already in flight, skipping")
            return CycleResult(fetched=False, current_step=self._current_step, skipped=True)

        self._in_flight = True
        self._tick += 1
        set_tick(self._tick)
        try:
            return await self._cycle(handle)
        finally:
            self._in_flight = False

    async def _cycle(self, handle: Optional[PollHandle]) -> CycleResult:
        try:
            snapshot = await self.fetcher.fetch()
        except SnapshotUnavailableError as e:
            if handle is not None and not handle.active:
                return CycleResult(fetched=False, current_step=self._current_step, discarded=True)
            logger.info(f"Status unavailable, keeping step {self._current_step}: {e}")
            self._publish()
            return CycleResult(fetched=False, current_step=self._current_step, error=str(e))

        if handle is not None and not handle.active:
            logger.debug("Snapshot resolved after stop, discarding")
            return CycleResult(fetched=True, current_step=self._current_step, discarded=True)

        step = compute_current_step(snapshot, self.catalog)
        newly_completed = self.reconciler.reconcile(snapshot)
        self.dispatcher.notify(newly_completed)

        self._has_snapshot = True
        self._current_step = step
        self._publish()

        return CycleResult(fetched=True, current_step=step, newly_completed=newly_completed)

    def _publish(self) -> None:
        view = self.view
        if view == self._last_published:
            return
        self._last_published = view
        logger.info(f"Progress: step {view.display_step} of {view.total} ({view.percent}%)")
        if self.on_progress is not None:
            run_guarded(lambda: self.on_progress(view), context={"operation": "on_progress"})
