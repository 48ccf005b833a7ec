"""
Configuration management for the aggregation tooling.

Provides typed configuration classes with environment variable
injection and validation.
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Dict, Any


@dataclass
class ObservabilityConfig:
    """Observability configuration."""
    log_level: str = field(default_factory=lambda: os.getenv("TSAGG_LOG_LEVEL", "info"))
    log_format: str = field(default_factory=lambda: os.getenv("TSAGG_LOG_FORMAT", "json"))

    def __post_init__(self):
        if self.log_level.lower() not in ["debug", "info", "warning", "error", "critical"]:
            raise ValueError(f"Invalid log level: {self.log_level}")

        if self.log_format not in ["json", "console"]:
            raise ValueError(f"Invalid log format: {self.log_format}")


@dataclass
class AggregationConfig:
    """Aggregation configuration."""
    service_name: str = field(default_factory=lambda: os.getenv("TSAGG_SERVICE_NAME", "tsdb-aggregators"))
    environment: str = field(default_factory=lambda: os.getenv("TSAGG_ENV", "local"))

    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)

    # Downsampling defaults
    default_aggregator: Optional[str] = field(default_factory=lambda: os.getenv("TSAGG_DEFAULT_AGGREGATOR") or None)
    default_interval: str = field(default_factory=lambda: os.getenv("TSAGG_DEFAULT_INTERVAL", "1m"))

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.service_name:
            raise ValueError("service_name is required")

        if self.environment not in ["local", "dev", "staging", "prod"]:
            raise ValueError(f"Invalid environment: {self.environment}")

    @classmethod
    def from_env(cls) -> "AggregationConfig":
        """Create configuration from environment variables."""
        return cls()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "service_name": self.service_name,
            "environment": self.environment,
            "observability": {
                "log_level": self.observability.log_level,
                "log_format": self.observability.log_format,
            },
            "default_aggregator": self.default_aggregator,
            "default_interval": self.default_interval,
        }
