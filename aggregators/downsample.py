"""
Downsampling of a single series into fixed time buckets.

Groups the points of one series into epoch-aligned buckets and reduces
each bucket with a registered aggregator, one aggregation call per bucket.
Points are taken as given: nothing is interpolated, filtered or aligned
across series here.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from itertools import groupby
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

import pandas as pd
import structlog

from shared.framework.config import AggregationConfig
from shared.utils.errors import DataProcessingError, ValidationError, create_error_context
from shared.utils.logging import add_series_id, get_logger
from .functions import Aggregator
from .registry import AggregatorRegistry
from .sequences import sequence_for


logger = get_logger(__name__)

_EPOCH = datetime(1970, 1, 1)
_EPOCH_UTC = datetime(1970, 1, 1, tzinfo=timezone.utc)

Number = Union[int, float]


@dataclass
class DownsampledPoint:
    """Aggregated value of one bucket."""
    bucket_start: datetime
    value: Number
    aggregator: str
    sample_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bucket_start": self.bucket_start.isoformat(),
            "value": self.value,
            "aggregator": self.aggregator,
            "sample_count": self.sample_count,
        }


def parse_interval(interval: str) -> timedelta:
    """Parse interval string to timedelta.

    Supported suffixes:
    - s: seconds
    - m: minutes
    - h: hours
    - d: days

    Raises:
        ValidationError: If the interval string uses an unsupported format.
    """
    units = {"s": "seconds", "m": "minutes", "h": "hours", "d": "days"}
    if not interval or interval[-1] not in units or not interval[:-1].isdigit():
        raise ValidationError(f"Invalid interval format: {interval}", field="interval", value=interval)

    amount = int(interval[:-1])
    if amount <= 0:
        raise ValidationError(f"Interval must be positive: {interval}", field="interval", value=interval)
    return timedelta(**{units[interval[-1]]: amount})


def bucket_start(timestamp: datetime, interval_delta: timedelta) -> datetime:
    """Start of the epoch-aligned bucket containing ``timestamp``."""
    epoch = _EPOCH if timestamp.tzinfo is None else _EPOCH_UTC
    return epoch + ((timestamp - epoch) // interval_delta) * interval_delta


class Downsampler:
    """Reduces a series to one value per time bucket.

    The registry is resolved once per call, so an unknown aggregator name
    fails before any bucket is computed. Errors raised while downsampling
    carry an `ErrorContext` naming the operation and series.
    """

    def __init__(self, registry: AggregatorRegistry, config: Optional[AggregationConfig] = None):
        self.registry = registry
        self.config = config or AggregationConfig()

    def resolve(self, aggregator_name: Optional[str]) -> Aggregator:
        """Look up ``aggregator_name``, falling back to the configured default."""
        name = aggregator_name if aggregator_name is not None else self.config.default_aggregator
        if name is None:
            raise ValidationError("No aggregator requested and no default configured", field="aggregator")
        return self.registry.get(name)

    def downsample(
        self,
        points: Iterable[Tuple[datetime, Number]],
        interval: Optional[str] = None,
        aggregator_name: Optional[str] = None,
        series_id: Optional[str] = None,
    ) -> List[DownsampledPoint]:
        """Aggregate ``(timestamp, value)`` points into buckets.

        Args:
            points: Points of a single series, in any order.
            interval: Bucket width such as "5m" or "1h"; defaults to the
                configured interval.
            aggregator_name: Registered aggregator name; defaults to the
                configured aggregator.
            series_id: Identifier of the series, used for log and error
                context.

        Returns:
            One `DownsampledPoint` per non-empty bucket, ordered by time.
        """
        interval = interval or self.config.default_interval
        with self._error_context("downsample", series_id, interval, aggregator_name):
            aggregator = self.resolve(aggregator_name)
            interval_delta = parse_interval(interval)

            points = sorted(points, key=lambda p: p[0])
            if not points:
                return []

            # One domain for the whole series so every bucket returns the same type
            sequence_cls = type(sequence_for([value for _, value in points]))

            results = []
            for start, bucket in groupby(points, key=lambda p: bucket_start(p[0], interval_delta)):
                values = [value for _, value in bucket]
                results.append(DownsampledPoint(
                    bucket_start=start,
                    value=aggregator.run(sequence_cls(values)),
                    aggregator=aggregator.name,
                    sample_count=len(values),
                ))

        self._logger(series_id).debug(
            "Downsampled series",
            aggregator=aggregator.name,
            interval=interval,
            points=len(points),
            buckets=len(results),
        )
        return results

    def downsample_series(
        self,
        series: pd.Series,
        interval: Optional[str] = None,
        aggregator_name: Optional[str] = None,
        series_id: Optional[str] = None,
    ) -> pd.Series:
        """Aggregate a time-indexed pandas Series into buckets.

        Only buckets that contain at least one sample appear in the result,
        which is indexed by bucket start and named after the aggregator.
        ``series_id`` defaults to the Series name.
        """
        if series_id is None and series.name is not None:
            series_id = str(series.name)
        interval = interval or self.config.default_interval
        with self._error_context("downsample_series", series_id, interval, aggregator_name):
            aggregator = self.resolve(aggregator_name)
            interval_delta = parse_interval(interval)

            if not isinstance(series.index, pd.DatetimeIndex):
                raise ValidationError("Series must have a DatetimeIndex", field="index")

            keys = series.index.floor(pd.Timedelta(interval_delta))
            starts = []
            values = []
            for start, group in series.groupby(keys, sort=True):
                starts.append(start)
                values.append(aggregator.run(sequence_for(group.to_numpy())))

        self._logger(series_id).debug(
            "Downsampled series",
            aggregator=aggregator.name,
            interval=interval,
            points=len(series),
            buckets=len(values),
        )
        if not values:
            return pd.Series([], index=pd.DatetimeIndex([], name="bucket_start"), name=aggregator.name, dtype=series.dtype)
        return pd.Series(values, index=pd.DatetimeIndex(starts, name="bucket_start"), name=aggregator.name)

    @contextmanager
    def _error_context(
        self,
        operation: str,
        series_id: Optional[str],
        interval: str,
        aggregator_name: Optional[str],
    ) -> Iterator[None]:
        """Attach an `ErrorContext` to errors that do not carry one yet."""
        try:
            yield
        except DataProcessingError as e:
            if e.context is None:
                e.context = create_error_context(
                    service=self.config.service_name,
                    operation=operation,
                    series_id=series_id,
                    metadata={
                        "interval": interval,
                        "aggregator": aggregator_name or self.config.default_aggregator,
                    },
                )
            raise

    def _logger(self, series_id: Optional[str]) -> structlog.BoundLogger:
        if series_id is None:
            return logger
        return add_series_id(logger, series_id)
