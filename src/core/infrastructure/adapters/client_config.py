"""Shared botocore client configuration."""

from botocore.config import Config

from core.utils.settings import Settings


def build_client_config(settings: Settings) -> Config:
    """Timeouts and retry policy applied to every AWS client.

    Standard retry mode retries throttling and transient 5xx/network errors
    only; permanent errors (4xx, failed conditions) surface immediately.
    """
    return Config(
        connect_timeout=settings.connect_timeout_seconds,
        read_timeout=settings.read_timeout_seconds,
        retries={"max_attempts": settings.max_attempts, "mode": "standard"},
    )
