"""Deterministic fingerprint localization with coverage-based neighbor selection.

This module implements the localization engine: a query fingerprint is
compared against a reference radio map and its location is estimated as an
inverse-dissimilarity weighted centroid of the best-matching references.

Pipeline:
    1. Strong-AP sets: APs heard above a threshold (whole scan if too few).
    2. Score: 2·|shared| − |query-only| − |reference-only| over strong sets.
    3. Neighbors: references achieving the single best score above the
       minimum score.
    4. Estimate: x̂ = Σ w_i x_i / Σ w_i with w_i = 1 / D(z, f_i).

The dissimilarity D is a Euclidean distance in RSS space in which an AP heard
on only one side contributes (rss + offset)², so asymmetric coverage counts
as distance instead of being ignored.

Author: Navigation Engineer
Date: 2024
"""

import logging
import sys
from dataclasses import dataclass
from typing import List, Optional, Sequence, Set

import numpy as np

from .config import DEFAULT_CONFIG, LocatorConfig
from .errors import InvalidInputError, NoComparableNeighborsError
from .types import Fingerprint, Location

logger = logging.getLogger(__name__)

# Returned by dissimilarity() when either fingerprint is missing.
MAX_DISSIMILARITY = sys.float_info.max

# Returned by dissimilarity() instead of 0.0 so that 1 / D stays defined.
# Identical fingerprints get this value; it only means "needs non-zero weight".
MIN_DISSIMILARITY = float(np.nextafter(0.0, 1.0))


def dissimilarity(
    actual: Optional[Fingerprint],
    reference: Optional[Fingerprint],
    config: Optional[LocatorConfig] = None,
) -> float:
    """
    Compute signal-space dissimilarity D(actual, reference).

    Every AP heard in either fingerprint contributes one squared term:
        - heard in both:            (rss_a - rss_r)²
        - heard only in ``actual``:    (rss_a + offset)²
        - heard only in ``reference``: (rss_r + offset)²
    and D is the square root of the sum.

    Args:
        actual: Query fingerprint (evaluated first by convention).
        reference: Reference fingerprint.
        config: Locator parameters; ``rss_offset`` is used.

    Returns:
        Non-negative distance. MAX_DISSIMILARITY if either fingerprint is
        None. MIN_DISSIMILARITY instead of exactly 0.0 for identical
        fingerprints, so the result can always be inverted as a weight.

    Examples:
        >>> a = Fingerprint({"ap1": -70, "ap2": -60}, center=(0, 0))
        >>> b = Fingerprint({"ap1": -65, "ap2": -55}, center=(1, 1))
        >>> round(dissimilarity(a, b), 3)
        7.071
    """
    if actual is None or reference is None:
        return MAX_DISSIMILARITY

    config = config or DEFAULT_CONFIG
    offset = config.rss_offset

    distance_sq = 0
    for ap_id, rss in actual.signals.items():
        if ap_id in reference.signals:
            diff = rss - reference.signals[ap_id]
        else:
            diff = rss + offset
        distance_sq += diff * diff

    for ap_id, rss in reference.signals.items():
        if ap_id not in actual.signals:
            diff = rss + offset
            distance_sq += diff * diff

    difference = float(np.sqrt(distance_sq))
    if difference == 0.0:
        return MIN_DISSIMILARITY
    return difference


def aps_with_min_rss(
    fp: Optional[Fingerprint],
    min_rss: Optional[int] = None,
    config: Optional[LocatorConfig] = None,
) -> Set[str]:
    """
    APs of ``fp`` heard strictly above ``min_rss``.

    If fewer than ``config.min_strong_aps`` APs qualify, all APs of the
    fingerprint are returned instead, so a scan without strong broadcasters
    can still be compared. A None fingerprint yields an empty set.

    Args:
        fp: Fingerprint to inspect.
        min_rss: Threshold in dBm. Defaults to ``config.min_rss_to_count``.
        config: Locator parameters.

    Returns:
        New set of AP identifiers (safe for the caller to modify).
    """
    config = config or DEFAULT_CONFIG
    if min_rss is None:
        min_rss = config.min_rss_to_count

    strong_aps: Set[str] = set()
    if fp is None:
        return strong_aps

    weak_aps: Set[str] = set()
    for ap_id, rss in fp.signals.items():
        if rss > min_rss:
            strong_aps.add(ap_id)
        else:
            weak_aps.add(ap_id)

    if len(strong_aps) < config.min_strong_aps:
        strong_aps |= weak_aps
    return strong_aps


def score(
    fingerprint: Optional[Fingerprint],
    reference: Optional[Fingerprint],
    config: Optional[LocatorConfig] = None,
) -> int:
    """
    Coverage-overlap score between two fingerprints.

    score = 2·|S_q ∩ S_r| − |S_q \\ S_r| − |S_r \\ S_q|

    where S_q, S_r are the strong-AP sets from aps_with_min_rss(). The score
    is symmetric in its arguments.

    Examples:
        >>> a = Fingerprint({"ap1": -70, "ap2": -60}, center=(0, 0))
        >>> b = Fingerprint({"ap1": -65, "ap3": -55}, center=(1, 1))
        >>> score(a, b)
        0
    """
    fingerprint_aps = aps_with_min_rss(fingerprint, config=config)
    reference_aps = aps_with_min_rss(reference, config=config)

    shared = fingerprint_aps & reference_aps
    only_fingerprint = fingerprint_aps - shared
    only_reference = reference_aps - shared

    return 2 * len(shared) - len(only_fingerprint) - len(only_reference)


def select_neighbors(
    reference_set: Sequence[Fingerprint],
    query: Fingerprint,
    config: Optional[LocatorConfig] = None,
) -> List[Fingerprint]:
    """
    Select the reference fingerprints whose AP coverage best matches the query.

    Every reference is scored against the query; references scoring at or
    below ``config.neighbour_min_score`` are discarded, and of the rest only
    those sharing the single highest score are kept. Lower-scoring
    references are dropped even when they clear the threshold.

    Args:
        reference_set: Radio map to search.
        query: Query fingerprint.
        config: Locator parameters.

    Returns:
        Neighbors in radio-map order. Empty if no reference clears the
        threshold.
    """
    config = config or DEFAULT_CONFIG

    scores = [score(query, ref, config=config) for ref in reference_set]
    passing = [s for s in scores if s > config.neighbour_min_score]
    if not passing:
        logger.debug(
            "No reference out of %d scored above %d",
            len(scores),
            config.neighbour_min_score,
        )
        return []

    best_score = max(passing)
    neighbors = [ref for ref, s in zip(reference_set, scores) if s == best_score]
    logger.debug(
        "Selected %d of %d references with best score %d",
        len(neighbors),
        len(scores),
        best_score,
    )
    return neighbors


def _inverse_dissimilarity_weights(
    neighbors: Sequence[Fingerprint],
    query: Fingerprint,
    config: LocatorConfig,
) -> np.ndarray:
    # w_i = 1 / D_i, scaled by min_j D_j so an exact match (D = MIN_DISSIMILARITY)
    # gets weight 1 instead of overflowing. The scale cancels in Σ w x / Σ w.
    distances = np.array(
        [dissimilarity(query, n, config=config) for n in neighbors], dtype=float
    )
    return distances.min() / distances


def weighted_centroid(
    neighbors: Sequence[Fingerprint],
    query: Fingerprint,
    config: Optional[LocatorConfig] = None,
) -> Location:
    """
    Inverse-dissimilarity weighted centroid of neighbor centers.

    Implements:
        x̂ = Σ_i w_i x_i / Σ_i w_i,   w_i = 1 / D(query, f_i)

    The result is a convex combination of the neighbor centers and equals
    the center itself when there is a single neighbor.

    Args:
        neighbors: Neighbor set from select_neighbors().
        query: Query fingerprint.
        config: Locator parameters.

    Returns:
        Estimated location, shape (2,).

    Raises:
        NoComparableNeighborsError: If ``neighbors`` is empty.
    """
    if len(neighbors) == 0:
        raise NoComparableNeighborsError()

    config = config or DEFAULT_CONFIG
    weights = _inverse_dissimilarity_weights(neighbors, query, config)
    centers = np.array([n.center for n in neighbors], dtype=float)

    return np.sum(weights[:, np.newaxis] * centers, axis=0) / np.sum(weights)


def _check_inputs(reference_set: Sequence[Fingerprint], query: Fingerprint) -> None:
    if reference_set is None or len(reference_set) == 0:
        raise InvalidInputError("reference set is empty")
    if query is None:
        raise InvalidInputError("query fingerprint is missing")
    if not isinstance(query, Fingerprint):
        raise InvalidInputError(f"query must be a Fingerprint, got {type(query)}")
    if len(query) == 0:
        raise InvalidInputError("query fingerprint has no access points")
    for i, ref in enumerate(reference_set):
        if not isinstance(ref, Fingerprint):
            raise InvalidInputError(
                f"reference {i} must be a Fingerprint, got {type(ref)}"
            )


def estimate_location(
    reference_set: Sequence[Fingerprint],
    query: Fingerprint,
    config: Optional[LocatorConfig] = None,
) -> Location:
    """
    Estimate the location of ``query`` from a reference radio map.

    Args:
        reference_set: Reference fingerprints with known centers. Not modified.
        query: Fingerprint observed at the unknown location.
        config: Locator parameters. Defaults to DEFAULT_CONFIG.

    Returns:
        Estimated location (x, y), shape (2,).

    Raises:
        InvalidInputError: If the reference set is empty, the query is
            missing or has no access points.
        NoComparableNeighborsError: If no reference is comparable to the query.

    Examples:
        >>> refs = [
        ...     Fingerprint({"ap1": -65, "ap2": -55}, center=(10.5, 20.5)),
        ...     Fingerprint({"ap1": -75, "ap2": -65}, center=(9.5, 19.5)),
        ... ]
        >>> query = Fingerprint({"ap1": -70, "ap2": -60}, center=(10.0, 20.0))
        >>> estimate_location(refs, query)
        array([10., 20.])
    """
    _check_inputs(reference_set, query)
    neighbors = select_neighbors(reference_set, query, config=config)
    return weighted_centroid(neighbors, query, config=config)


@dataclass
class LocationEstimate:
    """Location estimate with the evidence it was computed from.

    Attributes:
        location: Estimated (x, y), shape (2,).
        neighbors: Reference fingerprints that contributed.
        weights: Normalized weights (sum to 1), aligned with ``neighbors``.
        best_score: Coverage score shared by all neighbors.
    """
    location: Location
    neighbors: List[Fingerprint]
    weights: np.ndarray
    best_score: int

    @property
    def n_neighbors(self) -> int:
        return len(self.neighbors)


class Locator:
    """
    Fingerprint locator bound to a fixed set of parameters.

    The locator keeps no state between calls; the radio map is passed to
    every call and never cached or modified.

    Examples:
        >>> locator = Locator(LocatorConfig(min_rss_to_count=-80))
        >>> x_hat = locator.locate(radio_map, query)
    """

    def __init__(self, config: Optional[LocatorConfig] = None):
        self.config = config or DEFAULT_CONFIG

    def dissimilarity(
        self, actual: Optional[Fingerprint], reference: Optional[Fingerprint]
    ) -> float:
        return dissimilarity(actual, reference, config=self.config)

    def score(
        self, fingerprint: Optional[Fingerprint], reference: Optional[Fingerprint]
    ) -> int:
        return score(fingerprint, reference, config=self.config)

    def neighbors(
        self, reference_set: Sequence[Fingerprint], query: Fingerprint
    ) -> List[Fingerprint]:
        return select_neighbors(reference_set, query, config=self.config)

    def locate(
        self, reference_set: Sequence[Fingerprint], query: Fingerprint
    ) -> Location:
        """Estimate the location of ``query``. See estimate_location()."""
        return estimate_location(reference_set, query, config=self.config)

    def locate_with_details(
        self, reference_set: Sequence[Fingerprint], query: Fingerprint
    ) -> LocationEstimate:
        """
        Estimate the location of ``query`` and report the neighbors and
        weights used. Raises the same errors as locate().
        """
        _check_inputs(reference_set, query)
        neighbors = self.neighbors(reference_set, query)
        location = weighted_centroid(neighbors, query, config=self.config)

        weights = _inverse_dissimilarity_weights(neighbors, query, self.config)
        return LocationEstimate(
            location=location,
            neighbors=neighbors,
            weights=weights / np.sum(weights),
            best_score=self.score(query, neighbors[0]),
        )

    def __repr__(self) -> str:
        return f"Locator({self.config})"
