"""
Utility modules shared by the aggregation packages.

Provides common utilities for:
- Structured logging
- Error handling
"""

from .logging import setup_logging, get_logger
from .errors import (
    DataProcessingError,
    ValidationError,
    AggregatorNotFoundError,
    EmptySequenceError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "DataProcessingError",
    "ValidationError",
    "AggregatorNotFoundError",
    "EmptySequenceError",
]
