"""
Aggregator registry.

Maps the names used by the query language (``"sum"``, ``"avg"``, ...) to
aggregator instances. A registry is built once at startup and is read-only
afterwards; pass it to the components that need to resolve aggregators.
"""

from types import MappingProxyType
from typing import FrozenSet, Iterable, Iterator, Mapping

import structlog

from shared.utils.errors import AggregatorNotFoundError
from .functions import Aggregator, Avg, Count, Max, Min, StdDev, Sum


logger = structlog.get_logger(__name__)


# Bare names aggregate over interpolated sequences; the "e" prefixed
# variants only see explicit data points. count has no interpolating form.
SUM = Sum("sum", True)
ESUM = Sum("esum", False)
MIN = Min("min", True)
MAX = Max("max", True)
AVG = Avg("avg", True)
EAVG = Avg("eavg", False)
DEV = StdDev("dev", True)
EDEV = StdDev("edev", False)
COUNT = Count("count", False)

DEFAULT_AGGREGATORS = (SUM, ESUM, MIN, MAX, AVG, EAVG, DEV, EDEV, COUNT)


class AggregatorRegistry:
    """
    Immutable name to aggregator mapping.

    Lookups are exact and case-sensitive; there is no way to register
    aggregators after construction.
    """

    def __init__(self, aggregators: Iterable[Aggregator]):
        entries = {}
        for aggregator in aggregators:
            if aggregator.name in entries:
                raise ValueError(f"Duplicate aggregator name: {aggregator.name}")
            entries[aggregator.name] = aggregator
            logger.debug(
                "Adding aggregator",
                aggregator=aggregator.name,
                kind=aggregator.kind.value,
                interpolate=aggregator.interpolate,
            )

        self._aggregators: Mapping[str, Aggregator] = MappingProxyType(entries)
        self._names: FrozenSet[str] = frozenset(entries)

    def names(self) -> FrozenSet[str]:
        """Return the names that can be passed to :meth:`get`."""
        return self._names

    def get(self, name: str) -> Aggregator:
        """Return the aggregator registered under ``name``.

        Raises:
            AggregatorNotFoundError: If no aggregator has that name.
        """
        try:
            return self._aggregators[name]
        except (KeyError, TypeError):
            raise AggregatorNotFoundError(name, available=self._names) from None

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._aggregators)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._names))

    def __repr__(self) -> str:
        return f"AggregatorRegistry({sorted(self._names)})"


def build_default_registry() -> AggregatorRegistry:
    """Build a registry holding the standard set of nine aggregators."""
    return AggregatorRegistry(DEFAULT_AGGREGATORS)
