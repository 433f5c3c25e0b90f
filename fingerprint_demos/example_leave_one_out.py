"""
Example: Leave-One-Out Evaluation

Locates every fingerprint of the radio map against all the others and
summarizes the position errors.

Usage:
    python -m fingerprint_demos.example_leave_one_out --plot

Author: Navigation Engineer
Date: 2024
"""

import argparse
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from fingerprint_demos.common import (
    add_common_args,
    configure_logging,
    load_fingerprints,
    locator_config,
)
from wifiloc.eval import (
    compute_error_stats,
    compute_position_errors,
    plot_error_cdf,
    save_figure,
)
from wifiloc.fingerprinting import LocalizationError, Locator


def main(argv: Optional[List[str]] = None) -> dict:
    """Run leave-one-out evaluation."""
    parser = argparse.ArgumentParser(description="Leave-one-out locator evaluation")
    parser.add_argument("--plot", action="store_true", help="Save the error CDF figure")
    parser.add_argument(
        "--output", type=str, default="figs", help="Figure directory (default: figs)"
    )
    parser.add_argument(
        "--no-progress", action="store_true", help="Disable the progress bar"
    )
    add_common_args(parser)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    print("=" * 70)
    print("Fingerprint Locator: Leave-One-Out Evaluation")
    print("=" * 70)

    fingerprints = load_fingerprints(args)
    locator = Locator(locator_config(args))

    truths = []
    estimates = []
    n_failed = 0
    for i in tqdm(
        range(len(fingerprints)), desc="Locating", unit="fp", disable=args.no_progress
    ):
        query = fingerprints[i]
        references = fingerprints[:i] + fingerprints[i + 1:]
        try:
            estimates.append(locator.locate(references, query))
        except LocalizationError:
            n_failed += 1
            continue
        truths.append(query.center)

    print(f"\nLocated {len(estimates)} of {len(fingerprints)} fingerprints "
          f"({n_failed} without comparable references)")

    if not estimates:
        return {"stats": None, "n_failed": n_failed}

    errors = compute_position_errors(np.array(truths), np.array(estimates))
    stats = compute_error_stats(errors)

    print(f"  RMSE:            {stats['rmse']:.2f}m")
    print(f"  Median:          {stats['median']:.2f}m")
    print(f"  90th percentile: {stats['p90']:.2f}m")
    print(f"  Max:             {stats['max']:.2f}m")

    if args.plot:
        fig = plot_error_cdf({"Weighted centroid": errors}, title="Leave-One-Out Error CDF")
        paths = save_figure(fig, args.output, "leave_one_out_cdf", formats=("png",))
        print(f"\nSaved figure: {paths[0]}")

    return {"stats": stats, "n_failed": n_failed}


if __name__ == "__main__":
    main()
