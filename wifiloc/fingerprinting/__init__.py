"""WiFi fingerprint localization.

This module estimates a 2D location from a WiFi RSS fingerprint by comparing
it against a reference radio map: references sharing the most strong access
points with the query are selected, and their centers are averaged with
inverse signal-space dissimilarity weights.

Main components:
    - Fingerprint: Immutable AP -> RSS record with a known center
    - LocatorConfig: Tunable thresholds (strong RSS, score, offset)
    - dissimilarity, score, select_neighbors: Building blocks
    - estimate_location, Locator: Location estimation
    - load_radio_map, validate_radio_map: JSON radio map I/O
    - generate_radio_map: Synthetic radio map for demos and tests

Example usage:
    >>> from wifiloc.fingerprinting import load_radio_map, estimate_location
    >>> radio_map = load_radio_map('data/radio_map.json')
    >>> query, references = radio_map[0], radio_map[1:]
    >>> x_hat = estimate_location(references, query)

Author: Navigation Engineer
Date: 2024
"""

from .config import DEFAULT_CONFIG, LocatorConfig
from .dataset import (
    load_radio_map,
    parse_radio_map,
    print_radio_map_summary,
    validate_radio_map,
)
from .deterministic import (
    MAX_DISSIMILARITY,
    MIN_DISSIMILARITY,
    LocationEstimate,
    Locator,
    aps_with_min_rss,
    dissimilarity,
    estimate_location,
    score,
    select_neighbors,
    weighted_centroid,
)
from .errors import InvalidInputError, LocalizationError, NoComparableNeighborsError
from .simulate import generate_radio_map, log_distance_path_loss
from .types import SIGNAL_NOT_PRESENT, Fingerprint, Location

__all__ = [
    # Core types
    "Fingerprint",
    "Location",
    "SIGNAL_NOT_PRESENT",
    # Configuration
    "LocatorConfig",
    "DEFAULT_CONFIG",
    # Errors
    "LocalizationError",
    "InvalidInputError",
    "NoComparableNeighborsError",
    # Locator
    "MAX_DISSIMILARITY",
    "MIN_DISSIMILARITY",
    "dissimilarity",
    "aps_with_min_rss",
    "score",
    "select_neighbors",
    "weighted_centroid",
    "estimate_location",
    "Locator",
    "LocationEstimate",
    # Dataset I/O
    "load_radio_map",
    "parse_radio_map",
    "validate_radio_map",
    "print_radio_map_summary",
    # Simulation
    "generate_radio_map",
    "log_distance_path_loss",
]

__version__ = "0.1.0"
