"""
Single-pass statistical aggregators for time-series queries.

Subpackages/modules:
- sequences: integer and floating point numeric sequences
- functions: sum, count, min, max, avg and dev aggregators
- registry: the name to aggregator mapping used by the query layer
- downsample: per-bucket driver for a single series
"""

from .functions import Aggregator, AggregatorKind, Avg, Count, Max, Min, StdDev, Sum
from .registry import (
    AggregatorRegistry,
    build_default_registry,
    SUM, ESUM, MIN, MAX, AVG, EAVG, DEV, EDEV, COUNT,
)
from .sequences import DoubleSequence, LongSequence, NumericSequence, sequence_for, wrap_int64

__all__ = [
    "Aggregator",
    "AggregatorKind",
    "AggregatorRegistry",
    "build_default_registry",
    "Sum",
    "Count",
    "Min",
    "Max",
    "Avg",
    "StdDev",
    "SUM",
    "ESUM",
    "MIN",
    "MAX",
    "AVG",
    "EAVG",
    "DEV",
    "EDEV",
    "COUNT",
    "NumericSequence",
    "LongSequence",
    "DoubleSequence",
    "sequence_for",
    "wrap_int64",
]
