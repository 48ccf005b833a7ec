"""Performance benchmarks for the aggregation functions."""

import time
import tracemalloc

import pytest

from aggregators.registry import AVG, DEV, SUM
from aggregators.sequences import DoubleSequence, LongSequence


@pytest.mark.performance
class TestAggregatorPerformance:
    """Aggregator throughput and memory tests."""

    def _values(self, count):
        """Generate values lazily so nothing is buffered up front."""
        return (float(i % 1000) * 0.5 for i in range(count))

    def test_throughput(self):
        """Test a single pass over a long sequence stays fast."""
        count = 200_000

        start_time = time.time()
        DEV.run_double(DoubleSequence(self._values(count)))
        duration = time.time() - start_time

        throughput = count / duration
        print(f"Standard deviation throughput: {throughput:.2f} values/second")

        # Assert minimum throughput
        assert throughput > 20_000, f"Throughput too low: {throughput}"

    @pytest.mark.parametrize("aggregator", [SUM, AVG, DEV], ids=str)
    def test_constant_memory(self, aggregator):
        """Test memory does not grow with the length of the sequence."""
        count = 100_000

        tracemalloc.start()
        try:
            aggregator.run_long(LongSequence(i for i in range(count)))
            _, peak = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        assert peak < 256 * 1024, f"Peak memory too high: {peak} bytes"
