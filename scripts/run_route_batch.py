"""
Run a lorry route batch over a route table CSV and write kilometer / tollPrice back.

Example:
    python scripts/run_route_batch.py sampledata/destinations.csv --output route_results.csv
"""

import argparse
import logging
import os
import sys
import time

import pandas as pd

# allow running as a plain script from the repository root
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from destinations.batching import PacingPolicy, RouteBatcher  # noqa: E402
from destinations.table import apply_batch_result, destinations_from_frame  # noqa: E402
from routing.route_query import RouteQuery  # noqa: E402
from routing.settings import ProviderSettings  # noqa: E402

logging.basicConfig(level=logging.INFO)

logger = logging.getLogger("RouteBatch")


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Calculate depot -> destination lorry distances.")
    parser.add_argument("input", help="Route table CSV with id, location, latitude, longitude columns.")
    parser.add_argument("--output", default="route_results.csv", help="Where to write the updated table.")
    parser.add_argument("--limit", type=int, default=None, help="Only process the first N rows.")
    parser.add_argument(
        "--deadline-seconds",
        type=float,
        default=None,
        help="Stop querying after this many seconds; remaining rows are reported as cancelled.",
    )
    return parser.parse_args(argv)


def run_batch(args: argparse.Namespace) -> int:
    print("=== STARTING ROUTE BATCH ===")

    frame = pd.read_csv(args.input, dtype={"id": str})
    if args.limit is not None:
        frame = frame.head(args.limit)
    destinations = destinations_from_frame(frame)
    print(f"Loaded {len(destinations)} destinations from {args.input}.\n")

    settings = ProviderSettings.from_env()
    if not settings.has_api_key:
        logger.warning("OPENROUTESERVICE_API_KEY is not set: every row will get the zero fallback")

    policy = PacingPolicy.from_env()

    deadline = None
    if args.deadline_seconds is not None:
        deadline = time.monotonic() + args.deadline_seconds

    start_time = time.time()
    with RouteQuery(settings) as query:
        result = RouteBatcher(query, policy).run(destinations, deadline=deadline)
    print(f"Batch finished in {time.time() - start_time:.2f}s.\n")

    updated = apply_batch_result(frame, result)
    updated.to_csv(args.output, index=False)

    failed = result.failed_ids()
    print("=== ROUTE BATCH COMPLETE ===" if result.complete else "=== ROUTE BATCH INCOMPLETE ===")
    print(f"Routes calculated: {len(result.distances) - len(failed)} / {len(result.distances)}")
    for dest_id in failed:
        outcome = result.outcomes[dest_id]
        print(f"  - {dest_id}: {outcome.outcome.value} ({outcome.detail})")
    print(f"Results written to '{args.output}'.")

    return 0 if result.complete else 1


if __name__ == "__main__":
    sys.exit(run_batch(parse_args()))
