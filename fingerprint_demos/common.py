"""Shared command-line options for the fingerprint demos."""

import argparse
import logging
from typing import List

from wifiloc.fingerprinting import (
    Fingerprint,
    LocatorConfig,
    generate_radio_map,
    load_radio_map,
)

BOLD_RED = "\033[1;31m"
BOLD_TURQUOISE = "\033[1;36m"
RESET = "\033[0m"


def add_common_args(parser: argparse.ArgumentParser) -> None:
    """Radio map source, locator thresholds and verbosity."""
    data_group = parser.add_argument_group("Radio Map")
    data_group.add_argument(
        "--radio-map",
        type=str,
        default=None,
        help="JSON radio map (default: synthetic 20m x 20m grid)",
    )
    data_group.add_argument(
        "--exclude-removed",
        action="store_true",
        help="Skip records flagged as removed in the radio map",
    )
    data_group.add_argument(
        "--seed", type=int, default=42, help="Seed for the synthetic map (default: 42)"
    )

    locator_group = parser.add_argument_group("Locator Parameters")
    locator_group.add_argument(
        "--min-rss", type=int, default=-75, help="Strong AP threshold in dBm (default: -75)"
    )
    locator_group.add_argument(
        "--min-score", type=int, default=-1, help="Neighbor score threshold (default: -1)"
    )
    locator_group.add_argument(
        "--rss-offset", type=int, default=100, help="Missing AP offset in dB (default: 100)"
    )

    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )


def locator_config(args: argparse.Namespace) -> LocatorConfig:
    return LocatorConfig(
        min_rss_to_count=args.min_rss,
        neighbour_min_score=args.min_score,
        rss_offset=args.rss_offset,
    )


def load_fingerprints(args: argparse.Namespace) -> List[Fingerprint]:
    if args.radio_map:
        return load_radio_map(args.radio_map, include_removed=not args.exclude_removed)
    return generate_radio_map(seed=args.seed)


def format_result(truth: Fingerprint, estimate, error: float) -> str:
    """True center in red, estimate in turquoise, then the error distance."""
    return (
        f"{BOLD_RED}({truth.x} , {truth.y}){RESET}"
        f"{BOLD_TURQUOISE}({estimate[0]:.6f} , {estimate[1]:.6f}){RESET}"
        f" Distance from point: {error}"
    )
