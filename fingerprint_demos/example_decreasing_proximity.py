"""
Example: Decreasing Proximity Point Finding

Takes one fingerprint as the query and repeatedly locates it while removing
the first remaining reference after every round, until the radio map is
empty. Shows how the estimate degrades as the radio map thins out.

Usage:
    python -m fingerprint_demos.example_decreasing_proximity
    python -m fingerprint_demos.example_decreasing_proximity --plot --output figs/

Author: Navigation Engineer
Date: 2024
"""

import argparse
from typing import List, Optional

import numpy as np

from fingerprint_demos.common import (
    add_common_args,
    configure_logging,
    format_result,
    load_fingerprints,
    locator_config,
)
from wifiloc.eval import distance_between, plot_neighbor_sweep, save_figure
from wifiloc.fingerprinting import LocalizationError, Locator


def main(argv: Optional[List[str]] = None) -> dict:
    """Run the decreasing proximity example."""
    parser = argparse.ArgumentParser(
        description="Locate one fingerprint while the radio map shrinks"
    )
    parser.add_argument(
        "--query-index", type=int, default=15, help="Index of the query fingerprint (default: 15)"
    )
    parser.add_argument("--plot", action="store_true", help="Save the error sweep figure")
    parser.add_argument(
        "--output", type=str, default="figs", help="Figure directory (default: figs)"
    )
    add_common_args(parser)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    print("=" * 70)
    print("Fingerprint Locator: Decreasing Proximity Point Finding")
    print("=" * 70)

    references = load_fingerprints(args)
    if not 0 <= args.query_index < len(references):
        parser.error(
            f"--query-index {args.query_index} out of range for "
            f"{len(references)} fingerprints"
        )

    query = references.pop(args.query_index)
    locator = Locator(locator_config(args))

    n_references = []
    errors = []
    while references:
        n_references.append(len(references))
        print(f"Number of k neighbours: {len(references)}")
        try:
            location = locator.locate(references, query)
        except LocalizationError as exc:
            print(f"  {exc}")
            errors.append(np.nan)
        else:
            error = distance_between(query.center, location)
            print(format_result(query, location, error))
            errors.append(error)
        references.pop(0)

    if args.plot:
        fig = plot_neighbor_sweep(n_references, errors)
        paths = save_figure(fig, args.output, "decreasing_proximity", formats=("png",))
        print(f"\nSaved figure: {paths[0]}")

    return {"n_references": n_references, "errors": np.array(errors)}


if __name__ == "__main__":
    main()
