"""Unit tests for numeric sequences."""

import pytest
import numpy as np

from aggregators.sequences import (
    INT64_MAX,
    INT64_MIN,
    DoubleSequence,
    LongSequence,
    sequence_for,
    wrap_int64,
)
from shared.utils.errors import EmptySequenceError, ValidationError


class TestPullContract:
    """Test the has_next / next_value contract."""

    def test_has_next_does_not_advance(self):
        """Test has_next can be called repeatedly without consuming."""
        values = LongSequence([7, 8])

        assert values.has_next()
        assert values.has_next()
        assert values.next_value() == 7
        assert values.next_value() == 8
        assert not values.has_next()

    def test_next_value_past_end(self):
        """Test reading an exhausted sequence raises EmptySequenceError."""
        values = DoubleSequence([1.0])
        values.next_value()

        with pytest.raises(EmptySequenceError) as exc_info:
            values.next_value()
        assert exc_info.value.domain == "floating"

    def test_single_consumption(self):
        """Test a drained sequence cannot be replayed."""
        values = LongSequence(iter([1, 2, 3]))

        assert list(values) == [1, 2, 3]
        assert list(values) == []
        assert not values.has_next()

    def test_lazy_consumption(self):
        """Test values are pulled from the source one at a time."""
        pulled = []

        def source():
            for i in range(3):
                pulled.append(i)
                yield i

        values = LongSequence(source())
        assert pulled == []

        values.has_next()
        assert pulled == [0]


class TestDomains:
    """Test value coercion per domain."""

    def test_long_sequence_accepts_numpy_integers(self):
        """Test numpy integer scalars become Python ints."""
        values = LongSequence(np.array([1, 2], dtype=np.int32))

        first = values.next_value()
        assert first == 1
        assert type(first) is int

    def test_long_sequence_rejects_floats(self):
        """Test non-integral values are rejected in the integer domain."""
        with pytest.raises(ValidationError):
            LongSequence([1.5]).next_value()

    def test_booleans_rejected(self):
        """Test booleans are rejected in both domains."""
        with pytest.raises(ValidationError):
            LongSequence([True]).next_value()
        with pytest.raises(ValidationError):
            DoubleSequence([False]).next_value()

    def test_double_sequence_coerces(self):
        """Test integers are widened to float in the floating domain."""
        value = DoubleSequence([3]).next_value()

        assert value == 3.0
        assert type(value) is float

    def test_double_sequence_rejects_text(self):
        """Test non-numeric values are rejected."""
        with pytest.raises(ValidationError):
            DoubleSequence(["abc"]).next_value()

    def test_long_sequence_wraps_out_of_range(self):
        """Test values beyond 64 bits are folded into range."""
        assert LongSequence([INT64_MAX + 1]).next_value() == INT64_MIN


class TestWrapInt64:
    """Test signed 64-bit wrapping."""

    def test_in_range_unchanged(self):
        """Test in-range values are untouched."""
        for value in (0, 1, -1, INT64_MAX, INT64_MIN):
            assert wrap_int64(value) == value

    def test_overflow(self):
        """Test overflow wraps like two's complement arithmetic."""
        assert wrap_int64(INT64_MAX + 1) == INT64_MIN
        assert wrap_int64(INT64_MIN - 1) == INT64_MAX
        assert wrap_int64(1 << 64) == 0


class TestSequenceFor:
    """Test domain selection from raw values."""

    def test_integer_list(self):
        """Test a list of ints selects the integer domain."""
        assert isinstance(sequence_for([1, 2, 3]), LongSequence)

    def test_mixed_list(self):
        """Test any float selects the floating domain."""
        assert isinstance(sequence_for([1, 2.5]), DoubleSequence)

    def test_numpy_dtypes(self):
        """Test arrays are typed by dtype."""
        assert isinstance(sequence_for(np.array([1, 2], dtype=np.int64)), LongSequence)
        assert isinstance(sequence_for(np.array([1, 2], dtype=np.float64)), DoubleSequence)

    def test_boolean_array_rejected(self):
        """Test boolean arrays are rejected."""
        with pytest.raises(ValidationError):
            sequence_for(np.array([True, False]))

    def test_empty_list(self):
        """Test an empty list yields an empty sequence."""
        values = sequence_for([])

        assert not values.has_next()
