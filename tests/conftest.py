"""Pytest configuration and fixtures."""

import os
import pytest
from datetime import datetime

from aggregators.registry import build_default_registry
from aggregators.downsample import Downsampler
from shared.framework.config import AggregationConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Drop TSAGG_* variables so configuration defaults are predictable."""
    for key in list(os.environ):
        if key.startswith("TSAGG_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def registry():
    """Isolated default registry fixture."""
    return build_default_registry()


@pytest.fixture
def test_config():
    """Test configuration fixture."""
    return AggregationConfig(service_name="test-service", default_interval="5m")


@pytest.fixture
def downsampler(registry, test_config):
    """Downsampler fixture."""
    return Downsampler(registry, test_config)


@pytest.fixture
def sample_points():
    """Integer points of one series spread over two 5 minute buckets."""
    return [
        (datetime(2024, 1, 1, 10, 0, 0), 1),
        (datetime(2024, 1, 1, 10, 1, 30), 2),
        (datetime(2024, 1, 1, 10, 4, 59), 3),
        (datetime(2024, 1, 1, 10, 5, 0), 4),
        (datetime(2024, 1, 1, 10, 9, 0), 10),
    ]
