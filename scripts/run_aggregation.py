#!/usr/bin/env python3
"""
Run a registered aggregator over values given on the command line.

Lists the available aggregators with --list, otherwise reduces the values
with the named aggregator and prints the result.
"""

import sys
import argparse
from typing import List, Optional

from aggregators.registry import build_default_registry
from aggregators.sequences import DoubleSequence, LongSequence
from shared.framework.config import AggregationConfig
from shared.utils.errors import DataProcessingError
from shared.utils.logging import get_logger, setup_logging


logger = get_logger("run-aggregation")


def _parse_values(raw_values: List[str], force_float: bool):
    """Build a sequence from the raw arguments, preferring the integer domain."""
    if not force_float:
        try:
            return LongSequence([int(v) for v in raw_values])
        except ValueError:
            pass
    return DoubleSequence([float(v) for v in raw_values])


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Aggregate numeric values with a registered aggregator")
    parser.add_argument("aggregator", nargs="?", help="Aggregator name (see --list)")
    parser.add_argument("values", nargs="*", help="Values to aggregate")
    parser.add_argument("--list", action="store_true", help="List registered aggregators and exit")
    parser.add_argument("--float", dest="force_float", action="store_true", help="Aggregate in the floating point domain")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default=None,
        help="Log level (defaults to TSAGG_LOG_LEVEL)",
    )

    args = parser.parse_args(argv)

    config = AggregationConfig.from_env()
    setup_logging(
        config.service_name,
        log_level=args.log_level or config.observability.log_level,
        format_type=config.observability.log_format,
        stream=sys.stderr,
    )

    registry = build_default_registry()

    if args.list:
        for name in registry:
            aggregator = registry.get(name)
            print(f"{name}\tinterpolate={str(aggregator.interpolate).lower()}")
        return 0

    if not args.aggregator:
        parser.print_usage(sys.stderr)
        return 2

    try:
        aggregator = registry.get(args.aggregator)
        values = _parse_values(args.values, args.force_float)
        result = aggregator.run(values)
    except ValueError as e:
        print(f"Invalid value: {e}", file=sys.stderr)
        return 2
    except DataProcessingError as e:
        logger.debug("Aggregation rejected", **e.to_dict())
        print(e.message, file=sys.stderr)
        return 2

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
