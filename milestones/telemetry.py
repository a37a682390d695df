"""
Telemetry Dispatcher

Fire-and-forget notification of newly completed milestones.

For a non-empty batch, one background task is scheduled that:
1. Looks up identity once (failure -> empty name/email)
2. Sends one form response per milestone, sequentially, in catalog order

Delivery failures are logged and dropped. Callers never await the task;
its List[SendResult] exists for tests and for drain() at shutdown.
cancel_pending() stops dispatches that are still in flight when the
overlay is deactivated.
"""
import asyncio
from typing import List, Optional, Sequence, Set

from core.error_boundary import run_guarded_async
from core.logging import get_logger
from integrations.forms.client import FormsClient, SendResult
from integrations.identity.client import EMPTY_IDENTITY, IdentityClient, IdentityInfo
from milestones.catalog import Milestone

logger = get_logger(__name__)


class TelemetryDispatcher:
    """Sends milestone-completion telemetry in the background, never blocking the poll cycle."""

    def __init__(self, identity_client: IdentityClient, forms_client: FormsClient, enabled: bool = True):
        self.identity_client = identity_client
        self.forms_client = forms_client
        self.enabled = enabled
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def notify(self, newly_completed: Sequence[Milestone]) -> Optional[asyncio.Task]:
        """
        Schedule notifications for `newly_completed`.

        Must be called from a running event loop. Returns the background
        task, or None when there is nothing to send.
        """
        if not newly_completed:
            return None

        milestones = list(newly_completed)

        if not self.enabled:
            logger.info(f"Telemetry disabled, not sending: {[m.key for m in milestones]}")
            return None

        task = asyncio.create_task(self._dispatch(milestones))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _lookup_identity(self) -> IdentityInfo:
        identity = await run_guarded_async(
            self.identity_client.lookup,
            context={"operation": "identity_lookup"},
            default=EMPTY_IDENTITY,
        )
        return identity or EMPTY_IDENTITY

    async def _send_one(self, identity: IdentityInfo, milestone: Milestone) -> SendResult:
        result = await run_guarded_async(
            lambda: self.forms_client.send_milestone_event(identity.name, identity.email, milestone.key),
            context={"operation": "telemetry_send", "milestone": milestone.key},
        )
        if result is None:
            return SendResult(success=False, milestone_key=milestone.key, error="unexpected error")
        return result

    async def _dispatch(self, milestones: List[Milestone]) -> List[SendResult]:
        identity = await self._lookup_identity()

        results = []
        for milestone in milestones:
            results.append(await self._send_one(identity, milestone))

        failed = [r.milestone_key for r in results if not r.success]
        if failed:
            logger.warning(f"Telemetry not delivered (dropped): {failed}")
        return results

    def cancel_pending(self) -> int:
        """
        Cancel every scheduled dispatch that has not finished.

        A cancelled dispatch starts no further identity lookup or send.
        Returns the number of tasks cancelled.
        """
        cancelled = 0
        for task in list(self._pending):
            if not task.done():
                task.cancel()
                cancelled += 1
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending telemetry dispatch(es)")
        return cancelled

    async def drain(self) -> None:
        """Wait for every scheduled dispatch to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)
