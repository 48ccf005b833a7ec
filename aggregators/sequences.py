"""
Numeric sequences consumed by the aggregators.

A sequence is a single-pass, forward-only producer of primitive values in
one of two domains: exact integers (signed 64-bit semantics) or floating
point. It supports the explicit ``has_next()`` / ``next_value()`` pull
contract as well as the Python iterator protocol. Reading past the end
raises ``EmptySequenceError`` instead of an out-of-bounds error.

Sequences are built by the code that merges or downsamples series,
immediately before an aggregation call, and are not safe to share between
consumers.
"""

import operator
from abc import ABC, abstractmethod
from typing import Any, Iterable, Iterator, Union

import numpy as np

from shared.utils.errors import EmptySequenceError, ValidationError


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

_UINT64_MASK = (1 << 64) - 1
_SENTINEL = object()


def wrap_int64(value: int) -> int:
    """Fold an arbitrary Python int into the signed 64-bit range.

    Emulates two's complement overflow, so ``wrap_int64(INT64_MAX + 1)``
    is ``INT64_MIN``.
    """
    value &= _UINT64_MASK
    if value > INT64_MAX:
        value -= 1 << 64
    return value


class NumericSequence(ABC):
    """Base class for the integer and floating point sequences."""

    domain: str = "numeric"

    def __init__(self, values: Iterable[Any]):
        self._values: Iterator[Any] = iter(values)
        self._pending: Any = _SENTINEL

    def has_next(self) -> bool:
        """Return True if at least one more value is available."""
        if self._pending is _SENTINEL:
            self._pending = next(self._values, _SENTINEL)
        return self._pending is not _SENTINEL

    def next_value(self):
        """Return the next value and advance the sequence.

        Raises:
            EmptySequenceError: If the sequence is exhausted.
        """
        if not self.has_next():
            raise EmptySequenceError(self.domain)
        raw, self._pending = self._pending, _SENTINEL
        return self._coerce(raw)

    def __iter__(self) -> "NumericSequence":
        return self

    def __next__(self):
        if not self.has_next():
            raise StopIteration
        return self.next_value()

    @classmethod
    def of(cls, values: Iterable[Any]) -> "NumericSequence":
        """Build a sequence of this domain over ``values``."""
        return cls(values)

    @abstractmethod
    def _coerce(self, value: Any):
        """Convert a raw value into this sequence's domain."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(domain={self.domain!r})"


class LongSequence(NumericSequence):
    """Sequence of exact integers, wrapped to signed 64-bit."""

    domain = "integer"

    def _coerce(self, value: Any) -> int:
        if isinstance(value, (bool, np.bool_)):
            raise ValidationError("Boolean values cannot be aggregated", field="value", value=value)
        try:
            return wrap_int64(operator.index(value))
        except TypeError as e:
            raise ValidationError(
                f"Expected an integer value, got {type(value).__name__}",
                field="value",
                value=value,
            ) from e


class DoubleSequence(NumericSequence):
    """Sequence of IEEE 754 double precision values."""

    domain = "floating"

    def _coerce(self, value: Any) -> float:
        if isinstance(value, (bool, np.bool_)):
            raise ValidationError("Boolean values cannot be aggregated", field="value", value=value)
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Expected a numeric value, got {type(value).__name__}",
                field="value",
                value=value,
            ) from e


def sequence_for(values: Union[Iterable[Any], np.ndarray]) -> NumericSequence:
    """Wrap ``values`` in the sequence of the matching domain.

    Arrays and pandas objects are typed by their dtype; other iterables are
    materialized and treated as integers only when every value is an int.
    """
    dtype = getattr(values, "dtype", None)
    if dtype is not None:
        if np.issubdtype(dtype, np.bool_):
            raise ValidationError("Boolean values cannot be aggregated", field="dtype", value=dtype)
        if np.issubdtype(dtype, np.integer):
            return LongSequence(values)
        return DoubleSequence(values)

    values = list(values)
    if values and all(
        isinstance(v, (int, np.integer)) and not isinstance(v, (bool, np.bool_))
        for v in values
    ):
        return LongSequence(values)
    return DoubleSequence(values)
