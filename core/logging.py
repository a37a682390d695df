"""
Structured Logging Infrastructure

Provides centralized logging with automatic context injection for:
- session_id (one overlay session, set by OverlayRuntime)
- tick (poll cycle counter, set by ProgressPoller)
- module name
- timestamps

Uses contextvars for async-safe context propagation.

Usage:
    from core.logging import get_logger, configure_logging, set_session_context

    configure_logging()  # Call once at startup

    logger = get_logger(__name__)
    logger.info("Polling milestones")

    set_session_context(session_id="a1b2c3d4")
    logger.info("Cycle complete")  # Automatically includes session
    clear_session_context()
"""
import logging
import os
import sys
import uuid
from contextvars import ContextVar
from typing import Optional

_session_id_var: ContextVar[Optional[str]] = ContextVar('session_id', default=None)
_tick_var: ContextVar[Optional[int]] = ContextVar('tick', default=None)

_configured = False


def get_context() -> dict:
    """Get current logging context as a dictionary."""
    return {
        'session_id': _session_id_var.get(),
        'tick': _tick_var.get(),
    }


def set_session_context(session_id: Optional[str] = None) -> str:
    """
    Set the overlay session for logging.

    Args:
        session_id: Session identifier (generated if not provided and none is set)

    Returns:
        The active session id.
    """
    if session_id is not None:
        _session_id_var.set(session_id)
    elif _session_id_var.get() is None:
        _session_id_var.set(str(uuid.uuid4())[:8])
    return _session_id_var.get()


def set_tick(tick: Optional[int]) -> None:
    """Set the current poll tick number."""
    _tick_var.set(tick)


def clear_session_context() -> None:
    """Clear all session context."""
    _session_id_var.set(None)
    _tick_var.set(None)


def get_session_id() -> Optional[str]:
    return _session_id_var.get()


class ContextFilter(logging.Filter):
    """
    Logging filter that injects session_id and tick into log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id_var.get() or '-'
        tick = _tick_var.get()
        record.tick = '-' if tick is None else str(tick)
        return True


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs structured log messages with context.

    Format: [timestamp] [LEVEL] [module] [session:X] [tick:N] message
    """

    def __init__(self, include_timestamp: bool = True):
        self.include_timestamp = include_timestamp
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        session_id = getattr(record, 'session_id', '-')
        tick = getattr(record, 'tick', '-')

        parts = []

        if self.include_timestamp:
            timestamp = self.formatTime(record, '%Y-%m-%d %H:%M:%S')
            parts.append(f"[{timestamp}]")

        parts.append(f"[{record.levelname}]")

        module_name = record.name.split('.')[-1] if record.name else 'root'
        parts.append(f"[{module_name}]")

        if session_id and session_id != '-':
            parts.append(f"[session:{session_id}]")

        if tick and tick != '-':
            parts.append(f"[tick:{tick}]")

        parts.append(record.getMessage())

        message = ' '.join(parts)

        if record.exc_info:
            if not record.exc_text:
                record.exc_text = self.formatException(record.exc_info)

        if record.exc_text:
            message = message + '\n' + record.exc_text

        return message


def configure_logging(
    level: Optional[str] = None,
    include_timestamp: bool = True,
) -> None:
    """
    Configure logging for the overlay.

    Should be called once at startup. Later calls are no-ops.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
               Defaults to LOG_LEVEL env var or INFO.
        include_timestamp: Whether to include timestamps in log output.
    """
    global _configured

    if _configured:
        return

    log_level_str = (level or os.environ.get('LOG_LEVEL', 'INFO')).upper()
    log_level = getattr(logging, log_level_str, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(StructuredFormatter(include_timestamp=include_timestamp))
    handler.addFilter(ContextFilter())

    root_logger.addHandler(handler)

    for logger_name in ['urllib3', 'requests', 'asyncio']:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    _configured = True

    logger = logging.getLogger('core.logging')
    logger.debug(f"Logging configured: level={log_level_str}")


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("Cycle complete")
        logger.exception("Error occurred")  # Includes stack trace
    """
    return logging.getLogger(name or 'progress_overlay')
