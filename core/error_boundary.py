"""
Error Boundary / Guarded Execution

Wraps overlay work so a single failure never stops the engine:
1. Logs the error with full context and stack trace
2. Returns a default value instead of propagating

Nothing in the overlay is fatal, so unlike a process-level boundary this
one never exits and never re-raises. asyncio.CancelledError is not an
Exception subclass and passes through untouched, which keeps
PollHandle.stop() working inside guarded code.

Usage:
    from core.error_boundary import run_guarded_async

    result = await run_guarded_async(
        lambda: poller.run_cycle(),
        context={"operation": "poll_cycle"},
    )
"""
from typing import Any, Awaitable, Callable, Dict, Optional, TypeVar

from core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar('T')


def _error_context(fn: Callable, exc: Exception, context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    error_context = {
        "exception_type": type(exc).__name__,
        "exception_message": str(exc),
        "function": getattr(fn, '__name__', 'anonymous'),
    }
    if context:
        error_context.update(context)
    return error_context


async def run_guarded_async(
    fn: Callable[[], Awaitable[T]],
    *,
    context: Optional[Dict[str, Any]] = None,
    default: Optional[T] = None,
) -> Optional[T]:
    """
    Await fn() with error boundary protection.

    On exception:
    - Logs the full stack trace together with the context dict
    - Returns `default`

    Args:
        fn: Zero-argument callable returning an awaitable
        context: Additional context for the log record
        default: Value returned when fn() raises

    Returns:
        The result of fn(), or `default` if an error occurred
    """
    try:
        return await fn()
    except Exception as exc:
        error_context = _error_context(fn, exc, context)
        logger.exception(f"Unhandled exception in guarded execution: {exc} context={error_context}")
        return default


def run_guarded(
    fn: Callable[[], T],
    *,
    context: Optional[Dict[str, Any]] = None,
    default: Optional[T] = None,
) -> Optional[T]:
    """Synchronous version of run_guarded_async, used for presentation callbacks."""
    try:
        return fn()
    except Exception as exc:
        error_context = _error_context(fn, exc, context)
        logger.exception(f"Unhandled exception in guarded execution: {exc} context={error_context}")
        return default
