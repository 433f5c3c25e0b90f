"""Unit tests for wifiloc.fingerprinting.deterministic module.

Tests the dissimilarity metric, strong-AP sets, coverage score, neighbor
selection and the weighted centroid estimate.

Author: Navigation Engineer
Date: 2024
"""

import math
import sys

import numpy as np
import pytest

from wifiloc.fingerprinting import (
    MAX_DISSIMILARITY,
    MIN_DISSIMILARITY,
    Fingerprint,
    InvalidInputError,
    LocalizationError,
    LocatorConfig,
    NoComparableNeighborsError,
    aps_with_min_rss,
    dissimilarity,
    estimate_location,
    score,
    select_neighbors,
    weighted_centroid,
)


@pytest.fixture
def query():
    return Fingerprint({"mac1": -70, "mac2": -60}, center=(10.0, 20.0))


@pytest.fixture
def reference_set():
    fp1 = Fingerprint({"mac1": -65, "mac2": -55}, center=(10.5, 20.5))
    fp2 = Fingerprint({"mac1": -75, "mac2": -65}, center=(9.5, 19.5))
    return [fp1, fp2]


class TestDissimilarity:
    """Test suite for dissimilarity() function."""

    def test_shared_aps(self, query, reference_set):
        """Test Euclidean distance over shared APs."""
        d = dissimilarity(query, reference_set[0])

        assert d == pytest.approx(math.sqrt(5**2 + 5**2))

    def test_missing_aps_penalized(self):
        """Test that an AP heard on one side only costs (rss + offset)²."""
        a = Fingerprint({"x": -60}, center=(0, 0))
        b = Fingerprint({"y": -70}, center=(0, 0))

        # (-60 + 100)² + (-70 + 100)² = 1600 + 900
        assert dissimilarity(a, b) == pytest.approx(50.0)

    def test_mixed_shared_and_missing(self):
        """Test shared and one-sided APs together."""
        a = Fingerprint({"s": -50, "x": -80}, center=(0, 0))
        b = Fingerprint({"s": -53, "y": -90}, center=(0, 0))

        expected = math.sqrt(3**2 + 20**2 + 10**2)
        assert dissimilarity(a, b) == pytest.approx(expected)

    def test_custom_offset(self):
        """Test that rss_offset from the config is used."""
        a = Fingerprint({"x": -60}, center=(0, 0))
        b = Fingerprint({}, center=(0, 0))

        d = dissimilarity(a, b, config=LocatorConfig(rss_offset=90))

        assert d == pytest.approx(30.0)

    def test_identical_returns_epsilon(self, query):
        """Test that identical fingerprints give the epsilon, not zero."""
        d = dissimilarity(query, query)

        assert d == MIN_DISSIMILARITY
        assert d > 0.0

    def test_identical_copy_returns_epsilon(self, query):
        """Test epsilon for a distinct fingerprint with equal readings."""
        copy = Fingerprint(dict(query.signals), center=(0.0, 0.0))

        assert dissimilarity(query, copy) == MIN_DISSIMILARITY

    def test_both_empty_returns_epsilon(self):
        """Test two empty scans."""
        a = Fingerprint({}, center=(0, 0))
        b = Fingerprint({}, center=(1, 1))

        assert dissimilarity(a, b) == MIN_DISSIMILARITY

    def test_epsilon_is_invertible(self):
        """Test that 1 / epsilon does not raise."""
        assert 1.0 / MIN_DISSIMILARITY > 0.0

    def test_none_returns_max(self, query):
        """Test that a missing fingerprint gives the maximal sentinel."""
        assert dissimilarity(None, query) == MAX_DISSIMILARITY
        assert dissimilarity(query, None) == MAX_DISSIMILARITY
        assert dissimilarity(None, None) == sys.float_info.max

    def test_non_negative(self, query, reference_set):
        """Test non-negativity over several pairs."""
        fps = [query] + reference_set + [Fingerprint({}, center=(0, 0))]
        for a in fps:
            for b in fps:
                assert dissimilarity(a, b) >= 0.0

    def test_order_of_arguments(self):
        """Test that swapping arguments gives the same value."""
        a = Fingerprint({"s": -50, "x": -80}, center=(0, 0))
        b = Fingerprint({"s": -53, "y": -90, "z": -40}, center=(0, 0))

        assert dissimilarity(a, b) == pytest.approx(dissimilarity(b, a))


class TestApsWithMinRss:
    """Test suite for aps_with_min_rss() function."""

    def test_enough_strong_aps(self):
        """Test that weak APs are dropped when 3+ strong ones exist."""
        fp = Fingerprint({"a": -50, "b": -60, "c": -70, "d": -80}, center=(0, 0))

        assert aps_with_min_rss(fp, -75) == {"a", "b", "c"}

    def test_threshold_is_strict(self):
        """Test that an AP exactly at the threshold counts as weak."""
        fp = Fingerprint({"a": -50, "b": -60, "c": -70, "d": -75}, center=(0, 0))

        assert "d" not in aps_with_min_rss(fp, -75)

    def test_fallback_to_all_aps(self):
        """Test fallback when fewer than 3 strong APs are heard."""
        fp = Fingerprint({"a": -50, "b": -80, "c": -90}, center=(0, 0))

        assert aps_with_min_rss(fp, -75) == {"a", "b", "c"}

    def test_no_strong_aps(self):
        """Test a scan of only weak APs."""
        fp = Fingerprint({"a": -85, "b": -90}, center=(0, 0))

        assert aps_with_min_rss(fp) == {"a", "b"}

    def test_default_threshold_from_config(self):
        """Test that min_rss defaults to config.min_rss_to_count."""
        fp = Fingerprint({"a": -50, "b": -55, "c": -60, "d": -78}, center=(0, 0))

        assert aps_with_min_rss(fp) == {"a", "b", "c"}
        config = LocatorConfig(min_rss_to_count=-80)
        assert aps_with_min_rss(fp, config=config) == {"a", "b", "c", "d"}

    def test_custom_min_strong_aps(self):
        """Test a lower fallback bound."""
        fp = Fingerprint({"a": -50, "b": -80, "c": -90}, center=(0, 0))
        config = LocatorConfig(min_strong_aps=1)

        assert aps_with_min_rss(fp, config=config) == {"a"}

    def test_none_fingerprint(self):
        """Test that None yields an empty set."""
        assert aps_with_min_rss(None) == set()

    def test_empty_fingerprint(self):
        """Test that an empty scan yields an empty set."""
        assert aps_with_min_rss(Fingerprint({}, center=(0, 0))) == set()

    def test_never_fewer_than_min_of_three_and_size(self):
        """Test the lower bound min(3, |APs|) across RSS patterns."""
        rng = np.random.default_rng(0)
        for n_aps in range(1, 8):
            for _ in range(20):
                rss = rng.integers(-100, -30, size=n_aps)
                fp = Fingerprint(
                    {f"ap{i}": int(v) for i, v in enumerate(rss)}, center=(0, 0)
                )
                assert len(aps_with_min_rss(fp)) >= min(3, n_aps)

    def test_returns_fresh_set(self):
        """Test that callers may modify the returned set."""
        fp = Fingerprint({"a": -50}, center=(0, 0))
        aps = aps_with_min_rss(fp)
        aps.add("z")

        assert aps_with_min_rss(fp) == {"a"}


class TestScore:
    """Test suite for score() function."""

    def test_full_overlap(self, query, reference_set):
        """Test two fingerprints with the same two APs."""
        assert score(query, reference_set[0]) == 4

    def test_partial_overlap(self):
        """Test 2·shared − query-only − reference-only."""
        a = Fingerprint({"a": -50, "b": -50, "c": -50}, center=(0, 0))
        b = Fingerprint({"b": -50, "c": -50, "d": -50}, center=(0, 0))

        assert score(a, b) == 2 * 2 - 1 - 1

    def test_no_overlap(self):
        """Test disjoint strong sets."""
        a = Fingerprint({"a": -50, "b": -50, "c": -50}, center=(0, 0))
        b = Fingerprint({"x": -50, "y": -50, "z": -50}, center=(0, 0))

        assert score(a, b) == -6

    def test_weak_aps_ignored_when_enough_strong(self):
        """Test that weak APs do not count once 3 strong ones exist."""
        a = Fingerprint({"a": -50, "b": -50, "c": -50, "w": -90}, center=(0, 0))
        b = Fingerprint({"a": -50, "b": -50, "c": -50}, center=(0, 0))

        assert score(a, b) == 6

    def test_symmetric(self):
        """Test score(a, b) == score(b, a) over random fingerprints."""
        rng = np.random.default_rng(1)
        aps = [f"ap{i}" for i in range(8)]
        fps = []
        for _ in range(15):
            chosen = rng.choice(aps, size=rng.integers(0, 8), replace=False)
            fps.append(
                Fingerprint(
                    {str(ap): int(rng.integers(-95, -40)) for ap in chosen},
                    center=(0, 0),
                )
            )

        for a in fps:
            for b in fps:
                assert score(a, b) == score(b, a)

    def test_none_reference(self, query):
        """Test that a missing reference only penalizes the query APs."""
        assert score(query, None) == -2


class TestSelectNeighbors:
    """Test suite for select_neighbors() function."""

    def test_tied_scores_all_selected(self, query, reference_set):
        """Test that references sharing the best score are all kept."""
        neighbors = select_neighbors(reference_set, query)

        assert neighbors == reference_set

    def test_only_best_group_kept(self):
        """Test that lower-scoring references above threshold are dropped."""
        query = Fingerprint({"a": -50, "b": -50, "c": -50}, center=(0, 0))
        best = Fingerprint({"a": -55, "b": -55, "c": -55}, center=(1, 1))
        good = Fingerprint({"a": -55, "b": -55, "x": -55}, center=(2, 2))
        poor = Fingerprint({"a": -55, "x": -55, "y": -55}, center=(3, 3))

        neighbors = select_neighbors([poor, good, best], query)

        assert score(query, good) == 2
        assert neighbors == [best]

    def test_zero_score_kept(self):
        """Test that a score of 0 is above the default threshold of -1."""
        query = Fingerprint({"a": -50, "b": -50}, center=(0, 0))
        ref = Fingerprint({"a": -50, "c": -50}, center=(1, 1))

        assert score(query, ref) == 0
        assert select_neighbors([ref], query) == [ref]

    def test_threshold_score_excluded(self):
        """Test that a score equal to the threshold is discarded."""
        query = Fingerprint({"a": -50}, center=(0, 0))
        ref = Fingerprint({"a": -50, "b": -50, "c": -50, "d": -50}, center=(1, 1))

        # 2·1 − 0 − 3
        assert score(query, ref) == -1
        assert select_neighbors([ref], query) == []

    def test_custom_threshold(self):
        """Test a stricter minimum score."""
        query = Fingerprint({"a": -50, "b": -50}, center=(0, 0))
        ref = Fingerprint({"a": -50, "c": -50}, center=(1, 1))

        config = LocatorConfig(neighbour_min_score=0)
        assert select_neighbors([ref], query, config=config) == []

    def test_no_comparable_references(self):
        """Test that disjoint coverage gives an empty neighbor set."""
        query = Fingerprint({"a": -50, "b": -50, "c": -50}, center=(0, 0))
        refs = [
            Fingerprint({"x": -50, "y": -50, "z": -50}, center=(1, 1)),
            Fingerprint({"u": -60, "v": -60, "w": -60}, center=(2, 2)),
        ]

        assert select_neighbors(refs, query) == []

    def test_empty_reference_set(self, query):
        """Test that an empty radio map gives no neighbors."""
        assert select_neighbors([], query) == []

    def test_dataset_order_preserved(self, query):
        """Test that neighbors keep radio-map order."""
        refs = [
            Fingerprint({"mac1": -65, "mac2": -55}, center=(float(i), 0.0))
            for i in range(5)
        ]

        assert select_neighbors(refs, query) == refs

    def test_all_selected_share_max_score(self):
        """Test the selection invariant on a synthetic radio map."""
        from wifiloc.fingerprinting import generate_radio_map

        radio_map = generate_radio_map(area_size=(10.0, 10.0), seed=3)
        query, refs = radio_map[7], radio_map[:7] + radio_map[8:]

        neighbors = select_neighbors(refs, query)
        scores = [score(query, r) for r in refs]
        best = max(scores)

        assert len(neighbors) == scores.count(best)
        assert all(score(query, n) == best for n in neighbors)
        assert all(score(query, n) > -1 for n in neighbors)

    def test_reference_set_not_modified(self, query, reference_set):
        """Test that the input list is left untouched."""
        before = list(reference_set)
        select_neighbors(reference_set, query)

        assert reference_set == before


class TestWeightedCentroid:
    """Test suite for weighted_centroid() function."""

    def test_equal_weights(self, query, reference_set):
        """Test that equal dissimilarities average the centers."""
        x_hat = weighted_centroid(reference_set, query)

        np.testing.assert_array_almost_equal(x_hat, [10.0, 20.0])

    def test_inverse_distance_weights(self, query):
        """Test that the closer reference in signal space dominates."""
        near = Fingerprint({"mac1": -65, "mac2": -55}, center=(10.5, 20.5))
        far = Fingerprint({"mac1": -80, "mac2": -70}, center=(9.5, 19.5))

        x_hat = weighted_centroid([near, far], query)

        # D_near = 5√2, D_far = 10√2 → weights 2:1
        np.testing.assert_array_almost_equal(x_hat, [(2 * 10.5 + 9.5) / 3, (2 * 20.5 + 19.5) / 3])

    def test_single_neighbor_exact_center(self, query, reference_set):
        """Test that one neighbor returns its center exactly."""
        x_hat = weighted_centroid(reference_set[:1], query)

        np.testing.assert_array_equal(x_hat, reference_set[0].center)

    def test_exact_match_dominates(self):
        """Test that an identical reference wins without overflow."""
        query = Fingerprint({"a": -60, "b": -60}, center=(0, 0))
        same = Fingerprint({"a": -60, "b": -60}, center=(3.0, 4.0))
        other = Fingerprint({"a": -70, "b": -70}, center=(10.0, 10.0))

        x_hat = weighted_centroid([same, other], query)

        assert np.all(np.isfinite(x_hat))
        np.testing.assert_array_almost_equal(x_hat, [3.0, 4.0])

    def test_two_exact_matches_averaged(self):
        """Test that two identical references share the weight."""
        query = Fingerprint({"a": -60}, center=(0, 0))
        m1 = Fingerprint({"a": -60}, center=(0.0, 0.0))
        m2 = Fingerprint({"a": -60}, center=(2.0, 4.0))

        np.testing.assert_array_almost_equal(weighted_centroid([m1, m2], query), [1.0, 2.0])

    def test_empty_neighbors_error(self, query):
        """Test that an empty neighbor set raises instead of returning NaN."""
        with pytest.raises(NoComparableNeighborsError, match="no comparable reference"):
            weighted_centroid([], query)


class TestEstimateLocation:
    """Test suite for estimate_location() function."""

    def test_reference_scenario(self, query, reference_set):
        """Test the two-reference scenario lies between both centers."""
        x_hat = estimate_location(reference_set, query)

        assert x_hat.shape == (2,)
        assert 9.5 <= x_hat[0] <= 10.5
        assert 19.5 <= x_hat[1] <= 20.5
        assert x_hat[0] == pytest.approx(10.0, abs=0.1)
        assert x_hat[1] == pytest.approx(20.0, abs=0.1)

    def test_estimate_closer_to_nearer_reference(self, query):
        """Test that the estimate leans toward the smaller signal distance."""
        near = Fingerprint({"mac1": -66, "mac2": -57}, center=(10.5, 20.5))
        far = Fingerprint({"mac1": -78, "mac2": -70}, center=(9.5, 19.5))

        x_hat = estimate_location([near, far], query)

        assert np.linalg.norm(x_hat - near.center) < np.linalg.norm(x_hat - far.center)

    def test_empty_reference_set_error(self, query):
        """Test that an empty radio map raises InvalidInputError."""
        with pytest.raises(InvalidInputError, match="reference set is empty"):
            estimate_location([], query)

    def test_none_reference_set_error(self, query):
        """Test that a missing radio map raises InvalidInputError."""
        with pytest.raises(InvalidInputError):
            estimate_location(None, query)

    def test_none_query_error(self, reference_set):
        """Test that a missing query raises InvalidInputError."""
        with pytest.raises(InvalidInputError, match="query fingerprint is missing"):
            estimate_location(reference_set, None)

    def test_empty_query_error(self, reference_set):
        """Test that a query without APs raises InvalidInputError."""
        empty = Fingerprint({}, center=(0, 0))

        with pytest.raises(InvalidInputError, match="no access points"):
            estimate_location(reference_set, empty)

    def test_non_fingerprint_reference_error(self, query, reference_set):
        """Test that malformed references are rejected up front."""
        with pytest.raises(InvalidInputError, match="reference 2"):
            estimate_location(reference_set + [{"mac1": -70}], query)

    def test_no_comparable_neighbors_error(self):
        """Test that disjoint coverage raises NoComparableNeighborsError."""
        query = Fingerprint({"a": -50, "b": -50, "c": -50}, center=(0, 0))
        refs = [Fingerprint({"x": -50, "y": -50, "z": -50}, center=(1, 1))]

        with pytest.raises(NoComparableNeighborsError):
            estimate_location(refs, query)

    def test_errors_are_value_errors(self, query):
        """Test that localization errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            estimate_location([], query)
        assert issubclass(NoComparableNeighborsError, LocalizationError)

    def test_deterministic(self, query, reference_set):
        """Test that repeated calls give identical results."""
        x1 = estimate_location(reference_set, query)
        x2 = estimate_location(reference_set, query)

        np.testing.assert_array_equal(x1, x2)

    def test_inputs_not_modified(self, query, reference_set):
        """Test that neither the query nor the radio map change."""
        signals_before = [dict(fp.signals) for fp in reference_set]
        estimate_location(reference_set, query)

        assert [dict(fp.signals) for fp in reference_set] == signals_before
        assert dict(query.signals) == {"mac1": -70, "mac2": -60}
