"""
Centralized configuration for the progress overlay.
All environment variable access should go through this Config class.
NO side effects at import time - no file reads, no network, no tasks.
"""
import os

DEFAULT_TELEMETRY_URL = (
    "https://docs.google.com/forms/d/e/"
    "1FAIpQLSdrKNy2xgnBInqPnilIKEOS19N-NC97X-B6NJBQcYPsQrdzHA/formResponse"
)


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def is_url(source: str) -> bool:
    """True when a status or identity source is an http(s) URL rather than a file path."""
    return source.startswith('http://') or source.startswith('https://')


class Config:
    STATUS_FILENAME = 'milestones.json'
    IDENTITY_FILENAME = 'makesomething.json'

    @staticmethod
    def get_status_source():
        """URL or filesystem path of the milestone status document."""
        return os.environ.get('OVERLAY_STATUS_SOURCE', Config.STATUS_FILENAME)

    @staticmethod
    def get_identity_source():
        """URL or filesystem path used for the name/email lookup."""
        return os.environ.get('OVERLAY_IDENTITY_SOURCE', Config.IDENTITY_FILENAME)

    @staticmethod
    def get_telemetry_url():
        return os.environ.get('OVERLAY_TELEMETRY_URL', DEFAULT_TELEMETRY_URL)

    @staticmethod
    def is_telemetry_enabled():
        return os.environ.get('OVERLAY_TELEMETRY_ENABLED', '1').lower() not in ('0', 'false', 'no')

    @staticmethod
    def get_poll_interval():
        """Seconds between poll cycles."""
        return _float_env('OVERLAY_POLL_INTERVAL', 5.0)

    @staticmethod
    def get_request_timeout():
        return _float_env('OVERLAY_REQUEST_TIMEOUT', 10.0)

    @staticmethod
    def get_app_env():
        """APP_ENV wins over NODE_ENV; both default to development."""
        return (os.environ.get('APP_ENV') or os.environ.get('NODE_ENV') or 'development').lower()

    @staticmethod
    def is_production():
        """The overlay is a development aid and stays off in production."""
        return Config.get_app_env() == 'production'
