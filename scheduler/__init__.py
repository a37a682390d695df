"""
Scheduler package - drives the overlay's poll cycle.

- poller: ProgressPoller, PollHandle and CycleResult
"""
from scheduler.poller import POLL_INTERVAL_SECONDS, CycleResult, PollHandle, ProgressPoller

__all__ = ['POLL_INTERVAL_SECONDS', 'CycleResult', 'PollHandle', 'ProgressPoller']
