"""
Framework components shared by the aggregation packages.

Provides environment-driven configuration for services and tools
that run aggregations.
"""

from .config import AggregationConfig, ObservabilityConfig

__all__ = [
    "AggregationConfig",
    "ObservabilityConfig",
]
