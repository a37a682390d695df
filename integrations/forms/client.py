"""
Google Forms telemetry client.

Posts one form response per completed milestone. The form is a
write-only, best-effort sink: delivery is never confirmed beyond the HTTP
status and never retried.
"""
import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, Optional

import requests

from core.logging import get_logger

logger = get_logger(__name__)

FIELD_IDS = {
    'name': 'entry.408315530',
    'email': 'entry.753362713',
    'milestone': 'entry.524929387',
    'timestamp': 'entry.1027284314',
}


@dataclass
class SendResult:
    """Result of one telemetry delivery."""
    success: bool
    milestone_key: str
    status_code: Optional[int] = None
    error: Optional[str] = None


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds and a Z suffix."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def build_form_payload(name: str, email: str, milestone_key: str, timestamp: str) -> Dict[str, str]:
    return {
        FIELD_IDS['name']: name,
        FIELD_IDS['email']: email,
        FIELD_IDS['milestone']: milestone_key,
        FIELD_IDS['timestamp']: timestamp,
    }


def post_milestone_event(
    form_url: str,
    name: str,
    email: str,
    milestone_key: str,
    timeout: float = 10.0,
) -> SendResult:
    """
    Submit one milestone event to the form.

    The timestamp is captured here, at send time.

    Returns:
        SendResult; never raises for network or HTTP failures
    """
    payload = build_form_payload(name, email, milestone_key, utc_timestamp())

    try:
        response = requests.post(form_url, data=payload, timeout=timeout)
    except requests.RequestException as e:
        logger.warning(f"Telemetry send failed: milestone={milestone_key}, error={e}")
        return SendResult(success=False, milestone_key=milestone_key, error=str(e))

    if not response.ok:
        logger.warning(f"Telemetry send rejected: milestone={milestone_key}, status={response.status_code}")
        return SendResult(
            success=False,
            milestone_key=milestone_key,
            status_code=response.status_code,
            error=f"HTTP {response.status_code}",
        )

    logger.info(f"Telemetry sent: milestone={milestone_key}")
    return SendResult(success=True, milestone_key=milestone_key, status_code=response.status_code)


class FormsClient:
    """Async wrapper that runs form submissions in a worker thread."""

    def __init__(self, form_url: str, timeout: float = 10.0):
        self.form_url = form_url
        self.timeout = timeout

    async def send_milestone_event(self, name: str, email: str, milestone_key: str) -> SendResult:
        return await asyncio.to_thread(
            post_milestone_event,
            self.form_url,
            name,
            email,
            milestone_key,
            self.timeout,
        )
