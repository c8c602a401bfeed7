"""Configuration for flagcore."""

from __future__ import annotations

from dataclasses import dataclass

from flagcore.exceptions import ConfigurationError

__all__ = ["DEFAULT_EVENTS_URL", "FeatureFlagsConfig"]

DEFAULT_EVENTS_URL = "https://events.ff.harness.io/api/1.0"


@dataclass
class FeatureFlagsConfig:
    """Configuration for the flag client and its metrics pipeline.

    Attributes:
        environment: Environment identifier used in the metrics endpoint path.
        cluster: Cluster identifier sent as a query parameter.
        events_url: Base URL of the events service.
        events_sync_interval: Seconds between metrics flushes.
        enable_analytics: Whether evaluations are recorded and submitted.
        max_targets: Maximum number of distinct targets retained per
            flush interval. Further targets are still counted in metrics.
        request_timeout: Timeout in seconds for metrics requests.
        api_key: Bearer token sent to the events service.

    Example:
        >>> config = FeatureFlagsConfig(environment="production", events_sync_interval=30)
        >>> config.events_sync_interval
        30

    """

    environment: str = "default"
    cluster: str = "1"
    events_url: str = DEFAULT_EVENTS_URL
    events_sync_interval: float = 60.0
    enable_analytics: bool = True
    max_targets: int = 100_000
    request_timeout: float = 30.0
    api_key: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.environment:
            raise ConfigurationError("environment must not be empty")
        if not self.events_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"events_url must be an http(s) URL, got {self.events_url!r}")
        if self.events_sync_interval <= 0:
            raise ConfigurationError("events_sync_interval must be positive")
        if self.max_targets < 0:
            raise ConfigurationError("max_targets must be non-negative")
        if self.request_timeout <= 0:
            raise ConfigurationError("request_timeout must be positive")
