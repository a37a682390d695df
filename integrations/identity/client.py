"""
Identity lookup for milestone telemetry.

Resolves the developer's name and email, either from an HTTP endpoint
returning {"name": ..., "email": ...} or from the local project profile
file (makesomething.json). Every failure degrades to empty strings; the
lookup never raises.
"""
import asyncio
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import requests

from core.config import is_url
from core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class IdentityInfo:
    name: str = ''
    email: str = ''


EMPTY_IDENTITY = IdentityInfo()


def _field(data: Any, name: str) -> str:
    if not isinstance(data, dict):
        return ''
    value = data.get(name)
    return value if isinstance(value, str) else ''


def identity_from_document(data: Any) -> IdentityInfo:
    """Build IdentityInfo from a parsed document, blanking anything missing or non-string."""
    return IdentityInfo(name=_field(data, 'name'), email=_field(data, 'email'))


def read_identity_file(path: str) -> IdentityInfo:
    """
    Read name/email from a JSON profile file.

    Args:
        path: Path to the profile file (e.g. makesomething.json)

    Returns:
        IdentityInfo, with empty strings if the file is missing or malformed
    """
    try:
        data = json.loads(Path(path).read_text(encoding='utf-8'))
    except (OSError, ValueError) as e:
        logger.debug(f"Identity file unavailable: {path} ({e})")
        return EMPTY_IDENTITY
    return identity_from_document(data)


def fetch_identity(url: str, timeout: float = 10.0) -> IdentityInfo:
    """
    Fetch name/email from an HTTP endpoint.

    Returns:
        IdentityInfo, with empty strings on any network, status or parse failure
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        logger.warning(f"Identity lookup failed: {e}")
        return EMPTY_IDENTITY

    if not response.ok:
        logger.warning(f"Identity lookup returned HTTP {response.status_code}")
        return EMPTY_IDENTITY

    try:
        return identity_from_document(response.json())
    except ValueError as e:
        logger.warning(f"Identity response is not valid JSON: {e}")
        return EMPTY_IDENTITY


class IdentityClient:
    """Async, best-effort identity lookup over a URL or a local file."""

    def __init__(self, source: Optional[str], timeout: float = 10.0):
        self.source = source
        self.timeout = timeout

    async def lookup(self) -> IdentityInfo:
        if not self.source:
            return EMPTY_IDENTITY
        return await asyncio.to_thread(self._lookup_sync)

    def _lookup_sync(self) -> IdentityInfo:
        if is_url(self.source):
            return fetch_identity(self.source, timeout=self.timeout)
        return read_identity_file(self.source)
