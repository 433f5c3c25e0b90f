"""
Example: Proximity Point Finding

Takes the first fingerprint of a radio map as the query, locates it against
the remaining fingerprints and reports the error to its surveyed center.

Usage:
    python -m fingerprint_demos.example_proximity
    python -m fingerprint_demos.example_proximity --radio-map data/radio_map.json

Author: Navigation Engineer
Date: 2024
"""

import argparse
from typing import List, Optional

from fingerprint_demos.common import (
    add_common_args,
    configure_logging,
    format_result,
    load_fingerprints,
    locator_config,
)
from wifiloc.eval import distance_between
from wifiloc.fingerprinting import LocalizationError, Locator


def main(argv: Optional[List[str]] = None) -> dict:
    """Run the proximity example."""
    parser = argparse.ArgumentParser(
        description="Locate the first radio map fingerprint against the rest"
    )
    parser.add_argument(
        "--query-index", type=int, default=0, help="Index of the query fingerprint (default: 0)"
    )
    add_common_args(parser)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    print("=" * 70)
    print("Fingerprint Locator: Proximity Point Finding")
    print("=" * 70)

    fingerprints = load_fingerprints(args)
    if not 0 <= args.query_index < len(fingerprints):
        parser.error(
            f"--query-index {args.query_index} out of range for "
            f"{len(fingerprints)} fingerprints"
        )

    query = fingerprints.pop(args.query_index)
    locator = Locator(locator_config(args))
    print(f"\nRadio map: {len(fingerprints)} references, query has {len(query)} APs")

    try:
        estimate = locator.locate_with_details(fingerprints, query)
    except LocalizationError as exc:
        print(f"  {exc}")
        return {"estimate": None, "truth": query.center, "error": None}

    error = distance_between(query.center, estimate.location)

    print(f"Neighbors used: {estimate.n_neighbors} (score {estimate.best_score})")
    print(format_result(query, estimate.location, error))

    return {"estimate": estimate.location, "truth": query.center, "error": error}


if __name__ == "__main__":
    main()
