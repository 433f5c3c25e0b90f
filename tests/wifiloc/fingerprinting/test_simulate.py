"""Unit tests for wifiloc.fingerprinting.simulate module."""

import numpy as np
import pytest

from wifiloc.fingerprinting import Fingerprint, generate_radio_map, log_distance_path_loss


class TestLogDistancePathLoss:
    """Test suite for log_distance_path_loss()."""

    def test_reference_distance(self):
        """Test RSS equals P0 at d0 without fading."""
        assert log_distance_path_loss(1.0, P0=-30.0, sigma=0.0) == pytest.approx(-30.0)

    def test_decade_loss(self):
        """Test 10·n dB loss per decade."""
        rss = log_distance_path_loss(10.0, P0=-30.0, n=2.5, sigma=0.0)

        assert rss == pytest.approx(-55.0)

    def test_singularity_clamped(self):
        """Test that d=0 is clamped instead of diverging."""
        assert np.isfinite(log_distance_path_loss(0.0, sigma=0.0))

    def test_fading_uses_rng(self):
        """Test that the same generator seed reproduces fading."""
        a = log_distance_path_loss(5.0, rng=np.random.default_rng(3))
        b = log_distance_path_loss(5.0, rng=np.random.default_rng(3))

        assert a == b


class TestGenerateRadioMap:
    """Test suite for generate_radio_map()."""

    def test_grid_size(self):
        """Test number of reference points on the grid."""
        radio_map = generate_radio_map(area_size=(20.0, 20.0), grid_spacing=2.0)

        assert len(radio_map) == 11 * 11
        assert all(isinstance(fp, Fingerprint) for fp in radio_map)

    def test_reproducible(self):
        """Test that the seed fixes the radio map."""
        a = generate_radio_map(seed=5)
        b = generate_radio_map(seed=5)

        assert [dict(fp.signals) for fp in a] == [dict(fp.signals) for fp in b]

    def test_detection_threshold(self):
        """Test that no RSS below the detection threshold is recorded."""
        radio_map = generate_radio_map(detection_threshold=-70.0)

        for fp in radio_map:
            assert all(rss >= -70 for rss in fp.signals.values())
        assert min(len(fp) for fp in radio_map) < 8

    def test_default_detection_threshold(self):
        """Test that the default map only records APs at -85 dBm or stronger."""
        radio_map = generate_radio_map()

        assert min(rss for fp in radio_map for rss in fp.signals.values()) >= -85

    def test_integer_rss(self):
        """Test that recorded RSS values are integers."""
        radio_map = generate_radio_map(area_size=(4.0, 4.0))

        for fp in radio_map:
            assert all(type(rss) is int for rss in fp.signals.values())

    def test_invalid_spacing_error(self):
        """Test that non-positive spacing raises ValueError."""
        with pytest.raises(ValueError, match="grid_spacing must be positive"):
            generate_radio_map(grid_spacing=0.0)

    def test_invalid_n_aps_error(self):
        """Test that too many APs raise ValueError."""
        with pytest.raises(ValueError, match="n_aps must be between"):
            generate_radio_map(n_aps=12)
