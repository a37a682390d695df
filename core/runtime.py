"""
Overlay Runtime Container

Holds the overlay's collaborators for one engine lifetime and builds them
lazily from Config (or explicit overrides). Eliminates module-level
singletons: every run gets its own reconciler and therefore its own
retained snapshot.

Usage:
    runtime = OverlayRuntime.from_env()

    with runtime.session_context():
        handle = runtime.start()
        ...
        handle.stop()
        await runtime.get_dispatcher().drain()
"""
from contextlib import contextmanager
from typing import Callable, Optional

from core.config import Config
from core.logging import clear_session_context, get_logger, set_session_context
from integrations.forms.client import FormsClient
from integrations.identity.client import IdentityClient
from milestones.catalog import DEFAULT_CATALOG, MilestoneCatalog
from milestones.progress import ProgressView
from milestones.reconciler import StateReconciler
from milestones.snapshot import SnapshotFetcher
from milestones.telemetry import TelemetryDispatcher
from scheduler.poller import PollHandle, ProgressPoller

logger = get_logger(__name__)


class OverlayDisabledError(RuntimeError):
    """Raised when the overlay is started in production."""
    pass


class OverlayRuntime:
    """
    Runtime container for the progress overlay.

    Lazily initializes:
    - Snapshot fetcher (status document source)
    - State reconciler (retained snapshot, one per runtime)
    - Telemetry dispatcher (identity lookup + form client)
    - Progress poller
    """

    def __init__(
        self,
        status_source: str,
        identity_source: Optional[str] = None,
        telemetry_url: Optional[str] = None,
        interval: float = 5.0,
        timeout: float = 10.0,
        telemetry_enabled: bool = True,
        production: bool = False,
        catalog: MilestoneCatalog = DEFAULT_CATALOG,
        on_progress: Optional[Callable[[ProgressView], None]] = None,
        session_id: Optional[str] = None,
    ):
        self.status_source = status_source
        self.identity_source = identity_source
        self.telemetry_url = telemetry_url
        self.interval = interval
        self.timeout = timeout
        self.telemetry_enabled = telemetry_enabled and bool(telemetry_url)
        self.production = production
        self.catalog = catalog
        self.on_progress = on_progress
        self.session_id = session_id

        self._fetcher: Optional[SnapshotFetcher] = None
        self._reconciler: Optional[StateReconciler] = None
        self._dispatcher: Optional[TelemetryDispatcher] = None
        self._poller: Optional[ProgressPoller] = None

    @classmethod
    def from_env(cls, **overrides) -> 'OverlayRuntime':
        """
        Create an OverlayRuntime from environment configuration.

        Keyword overrides take precedence over Config values; None values
        are ignored.
        """
        settings = {
            'status_source': Config.get_status_source(),
            'identity_source': Config.get_identity_source(),
            'telemetry_url': Config.get_telemetry_url(),
            'interval': Config.get_poll_interval(),
            'timeout': Config.get_request_timeout(),
            'telemetry_enabled': Config.is_telemetry_enabled(),
            'production': Config.is_production(),
        }
        settings.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**settings)

    @property
    def enabled(self) -> bool:
        return not self.production

    @contextmanager
    def session_context(self):
        """
        Context manager that tags every log line with this runtime's session.
        """
        self.session_id = set_session_context(session_id=self.session_id)
        try:
            yield
        finally:
            clear_session_context()

    def get_fetcher(self) -> SnapshotFetcher:
        if self._fetcher is None:
            self._fetcher = SnapshotFetcher(self.status_source, catalog=self.catalog, timeout=self.timeout)
        return self._fetcher

    def get_reconciler(self) -> StateReconciler:
        if self._reconciler is None:
            self._reconciler = StateReconciler(self.catalog)
        return self._reconciler

    def get_dispatcher(self) -> TelemetryDispatcher:
        if self._dispatcher is None:
            self._dispatcher = TelemetryDispatcher(
                identity_client=IdentityClient(self.identity_source, timeout=self.timeout),
                forms_client=FormsClient(self.telemetry_url or '', timeout=self.timeout),
                enabled=self.telemetry_enabled,
            )
        return self._dispatcher

    def get_poller(self) -> ProgressPoller:
        if self._poller is None:
            self._poller = ProgressPoller(
                fetcher=self.get_fetcher(),
                reconciler=self.get_reconciler(),
                dispatcher=self.get_dispatcher(),
                catalog=self.catalog,
                interval=self.interval,
                on_progress=self.on_progress,
            )
        return self._poller

    def start(self) -> PollHandle:
        """
        Activate the overlay.

        Raises:
            OverlayDisabledError: in production
        """
        if not self.enabled:
            raise OverlayDisabledError("Progress overlay is disabled in production")

        logger.info(
            f"Overlay starting: status={self.status_source}, "
            f"telemetry={'on' if self.telemetry_enabled else 'off'}"
        )
        return self.get_poller().start()
