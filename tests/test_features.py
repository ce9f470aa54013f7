"""
Tests for band-power feature extraction.
"""

from unittest.mock import patch

import numpy as np
import pytest


def _sine_window(freq=10.0, fs=250, seconds=4.0, rows=8, channels=(1, 2, 3, 4)):
    t = np.arange(int(fs * seconds)) / fs
    rng = np.random.default_rng(7)
    data = rng.normal(scale=0.05, size=(rows, t.size))
    for ch in channels:
        data[ch] += np.sin(2 * np.pi * freq * t)
    return data


# =====================================================================
# Welch (scipy) extractor
# =====================================================================

class TestWelchBandPowerExtractor:
    """Tests for the scipy band-power extractor."""

    def test_alpha_dominates_for_10hz_sine(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        mean, stddev = WelchBandPowerExtractor().band_powers(
            _sine_window(), [1, 2, 3, 4], 250, apply_filters=False
        )

        assert mean.shape == (5,)
        assert stddev.shape == (5,)
        assert int(np.argmax(mean)) == 2

    def test_relative_powers_sum_to_one(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        mean, _ = WelchBandPowerExtractor().band_powers(
            _sine_window(), [1, 2, 3, 4], 250, apply_filters=False
        )

        assert mean.sum() == pytest.approx(1.0)

    def test_filters_keep_alpha_dominant(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        mean, _ = WelchBandPowerExtractor().band_powers(
            _sine_window(), [1, 2, 3, 4], 250, apply_filters=True
        )

        assert int(np.argmax(mean)) == 2

    def test_beta_dominates_for_20hz_sine(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        mean, _ = WelchBandPowerExtractor().band_powers(
            _sine_window(freq=20.0), [1, 2, 3, 4], 250, apply_filters=False
        )

        assert int(np.argmax(mean)) == 3

    def test_identical_channels_have_low_spread(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        t = np.arange(1000) / 250
        row = np.sin(2 * np.pi * 10 * t)
        data = np.vstack([row] * 4)

        _, stddev = WelchBandPowerExtractor().band_powers(data, [0, 1, 2, 3], 250, False)

        assert np.allclose(stddev, 0.0)

    def test_low_sampling_rate_skips_out_of_range_notches(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        data = _sine_window(fs=100, seconds=4.0)
        mean, _ = WelchBandPowerExtractor().band_powers(data, [1, 2, 3, 4], 100, True)

        assert np.all(np.isfinite(mean))

    def test_rejects_vector(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        with pytest.raises(ValueError):
            WelchBandPowerExtractor().band_powers(np.zeros(100), [0], 250)

    def test_rejects_empty_channel_list(self):
        from restfulness.features.band_power import WelchBandPowerExtractor

        with pytest.raises(ValueError):
            WelchBandPowerExtractor().band_powers(np.zeros((4, 100)), [], 250)


# =====================================================================
# BrainFlow extractor
# =====================================================================

class TestBrainFlowBandPowerExtractor:
    """Tests for the DataFilter-backed extractor (DataFilter mocked)."""

    def test_passes_writable_copy_and_returns_mean_stddev(self):
        from restfulness.features.band_power import BrainFlowBandPowerExtractor
        from restfulness.windowing import as_window

        window = as_window(np.ones((8, 500)))
        with patch("restfulness.features.band_power.DataFilter") as mock_filter:
            mock_filter.get_avg_band_powers.return_value = (
                [0.1, 0.2, 0.4, 0.2, 0.1],
                [0.0, 0.0, 0.0, 0.0, 0.0],
            )
            mean, stddev = BrainFlowBandPowerExtractor().band_powers(
                window, (1, 2, 3, 4), 250, True
            )

        data, channels, rate, filters = mock_filter.get_avg_band_powers.call_args[0]
        assert data is not window
        assert data.flags.writeable
        assert data.flags.c_contiguous
        assert channels == [1, 2, 3, 4]
        assert rate == 250
        assert filters is True
        assert mean.tolist() == [0.1, 0.2, 0.4, 0.2, 0.1]
        assert stddev.shape == (5,)

    def test_brainflow_error_becomes_device_error(self):
        from brainflow.exit_codes import BrainFlowError

        from restfulness.errors import DeviceError
        from restfulness.features.band_power import BrainFlowBandPowerExtractor

        with patch("restfulness.features.band_power.DataFilter") as mock_filter:
            mock_filter.get_avg_band_powers.side_effect = BrainFlowError("invalid arguments", 13)

            with pytest.raises(DeviceError) as exc_info:
                BrainFlowBandPowerExtractor().band_powers(np.ones((8, 10)), [1], 250)

        assert exc_info.value.action == "band power extraction"
