"""
Snapshot Fetcher

Reads the externally-written milestone status document and normalizes it
into a Snapshot: a dict of catalog key -> bool.

The source is either an http(s) URL or a local file path. Blocking I/O
runs in a worker thread so the poll loop never blocks.

Failure modes (all raise SnapshotUnavailableError):
- source unreachable or file missing
- non-success HTTP status
- body is not valid JSON, or not a JSON object
"""
import asyncio
import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import requests

from core.config import is_url
from core.logging import get_logger
from milestones.catalog import DEFAULT_CATALOG, MilestoneCatalog

logger = get_logger(__name__)

Snapshot = Dict[str, bool]

DEFAULT_TIMEOUT_SECONDS = 10.0


class SnapshotUnavailableError(RuntimeError):
    """Raised when the status document cannot be read or parsed."""
    pass


def normalize_snapshot(raw: Mapping[str, Any], catalog: MilestoneCatalog = DEFAULT_CATALOG) -> Snapshot:
    """
    Project a raw status document onto the catalog.

    Only the JSON literal true counts as complete. Unknown keys are
    ignored; missing or non-boolean values are incomplete.
    """
    return {m.key: raw.get(m.key) is True for m in catalog}


class SnapshotFetcher:
    """Fetches a fresh Snapshot from a URL or file on every call."""

    def __init__(
        self,
        source: str,
        catalog: MilestoneCatalog = DEFAULT_CATALOG,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ):
        self.source = source
        self.catalog = catalog
        self.timeout = timeout
        self._session = session

    async def fetch(self) -> Snapshot:
        """
        Retrieve and normalize the status document.

        Raises:
            SnapshotUnavailableError: see module docstring
        """
        raw = await asyncio.to_thread(self._read_document)
        if not isinstance(raw, dict):
            raise SnapshotUnavailableError(
                f"Status document is not a JSON object (got {type(raw).__name__})"
            )
        return normalize_snapshot(raw, self.catalog)

    def _read_document(self) -> Any:
        if is_url(self.source):
            return self._read_url()
        return self._read_file()

    def _read_url(self) -> Any:
        http = self._session or requests
        try:
            response = http.get(self.source, timeout=self.timeout)
        except requests.RequestException as e:
            raise SnapshotUnavailableError(f"Status source unreachable: {e}") from e

        if not response.ok:
            raise SnapshotUnavailableError(f"Status source returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            raise SnapshotUnavailableError(f"Status document is not valid JSON: {e}") from e

    def _read_file(self) -> Any:
        path = Path(self.source)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise SnapshotUnavailableError(f"Status file not readable: {path} ({e})") from e

        # json.loads decodes bytes itself; bad UTF-8 surfaces as a ValueError
        try:
            return json.loads(data)
        except ValueError as e:
            raise SnapshotUnavailableError(f"Status file is not valid JSON: {path} ({e})") from e
