"""
Single-pass aggregation functions.

Each aggregator reduces a numeric sequence to one scalar of the same
domain. Aggregators are immutable and hold no per-call state, so one
instance may be shared by any number of concurrent queries; all working
state lives on the stack of ``run_long`` / ``run_double``.

Every entry point reads the sequence exactly once, front to back, with
O(1) extra memory, and raises ``EmptySequenceError`` when the sequence
has no values.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from shared.utils.errors import EmptySequenceError
from .sequences import INT64_MAX, DoubleSequence, LongSequence, NumericSequence, wrap_int64


class AggregatorKind(Enum):
    """Statistic computed by an aggregator."""
    SUM = "sum"
    COUNT = "count"
    MIN = "min"
    MAX = "max"
    AVG = "avg"
    DEV = "dev"


def _first(values: NumericSequence):
    """Read the first value, failing fast on an empty sequence."""
    if not values.has_next():
        raise EmptySequenceError(values.domain)
    return values.next_value()


def _truncating_div(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(dividend) // divisor
    return quotient if dividend >= 0 else -quotient


@dataclass(frozen=True)
class Aggregator(ABC):
    """A named, stateless aggregation over a numeric sequence.

    ``interpolate`` tells the caller whether the sequence it feeds in should
    already contain interpolated values for missing samples; the arithmetic
    here is the same either way.
    """
    name: str
    interpolate: bool

    kind: ClassVar[AggregatorKind]

    @abstractmethod
    def run_long(self, values: LongSequence) -> int:
        """Aggregate a sequence of integers."""

    @abstractmethod
    def run_double(self, values: DoubleSequence) -> float:
        """Aggregate a sequence of floating point values."""

    def run(self, values: NumericSequence) -> Union[int, float]:
        """Dispatch to the entry point matching the sequence's domain."""
        if isinstance(values, LongSequence):
            return self.run_long(values)
        if isinstance(values, DoubleSequence):
            return self.run_double(values)
        raise TypeError(f"Unsupported sequence type: {type(values).__name__}")

    def __str__(self) -> str:
        return self.name


class Sum(Aggregator):
    """Adds up all the values."""

    kind = AggregatorKind.SUM

    def run_long(self, values: LongSequence) -> int:
        result = _first(values)
        for value in values:
            result = wrap_int64(result + value)
        return result

    def run_double(self, values: DoubleSequence) -> float:
        result = _first(values)
        for value in values:
            result += value
        return result


class Count(Aggregator):
    """Counts the values, ignoring their magnitude."""

    kind = AggregatorKind.COUNT

    def run_long(self, values: LongSequence) -> int:
        _first(values)
        count = 1
        for _ in values:
            count += 1
        return count

    def run_double(self, values: DoubleSequence) -> float:
        _first(values)
        count = 1
        for _ in values:
            count += 1
        return float(count)


class Min(Aggregator):
    """Returns the smallest value; ties keep the first one seen."""

    kind = AggregatorKind.MIN

    def run_long(self, values: LongSequence) -> int:
        return self._run(values)

    def run_double(self, values: DoubleSequence) -> float:
        return self._run(values)

    @staticmethod
    def _run(values):
        result = _first(values)
        for value in values:
            if value < result:
                result = value
        return result


class Max(Aggregator):
    """Returns the largest value; ties keep the first one seen."""

    kind = AggregatorKind.MAX

    def run_long(self, values: LongSequence) -> int:
        return self._run(values)

    def run_double(self, values: DoubleSequence) -> float:
        return self._run(values)

    @staticmethod
    def _run(values):
        result = _first(values)
        for value in values:
            if value > result:
                result = value
        return result


class Avg(Aggregator):
    """Average of the values.

    The integer variant truncates toward zero, it does not round.
    """

    kind = AggregatorKind.AVG

    def run_long(self, values: LongSequence) -> int:
        total = _first(values)
        n = 1
        for value in values:
            total = wrap_int64(total + value)
            n += 1
        return _truncating_div(total, n)

    def run_double(self, values: DoubleSequence) -> float:
        total = _first(values)
        n = 1
        for value in values:
            total += value
            n += 1
        return total / n


class StdDev(Aggregator):
    """Sample standard deviation, computed in a single pass.

    Uses Welford's online update (B. P. Welford, 1962; Knuth, TAOCP Vol. 2,
    3rd ed., p. 232) so the values never need to be held in memory and the
    result does not suffer the cancellation of ``sum(x^2) - sum(x)^2 / n``.
    The denominator is ``n - 1``. A single value has a deviation of 0.
    """

    kind = AggregatorKind.DEV

    def run_long(self, values: LongSequence) -> int:
        # Truncates toward zero like a cast and saturates at INT64_MAX
        return min(int(self._run(values)), INT64_MAX)

    def run_double(self, values: DoubleSequence) -> float:
        return self._run(values)

    @staticmethod
    def _run(values: NumericSequence) -> float:
        mean = float(_first(values))
        if not values.has_next():
            return 0.0

        n = 1
        squares = 0.0
        for value in values:
            n += 1
            x = float(value)
            new_mean = mean + (x - mean) / n
            squares += (x - mean) * (x - new_mean)
            mean = new_mean

        return math.sqrt(squares / (n - 1))
