"""
Band-power feature extractors.

Both extractors return ``(mean, stddev)`` of relative band powers
across the selected EEG channels, one entry per band:

    delta 1-4 Hz · theta 4-8 Hz · alpha 8-13 Hz · beta 13-30 Hz · gamma 30-50 Hz

With ``apply_filters`` the signal first goes through, in order:
band-stop 48-52 Hz, band-stop 58-62 Hz and band-pass 2-45 Hz
(Butterworth, order 4).

- `BrainFlowBandPowerExtractor` delegates to DataFilter.get_avg_band_powers,
  the routine the restfulness classifier was trained against.
- `WelchBandPowerExtractor` computes the same features with scipy, for
  hosts that feed the pipeline from a non-BrainFlow source.
"""

import logging
import math
from typing import Sequence

import numpy as np
from brainflow.data_filter import DataFilter
from brainflow.exit_codes import BrainFlowError
from scipy.integrate import trapezoid
from scipy.signal import butter, sosfilt, welch

from restfulness.config import BANDPASS_RANGE, BANDS, BANDSTOP_RANGES, FILTER_ORDER
from restfulness.errors import DeviceError
from restfulness.ports import FeatureExtractor

logger = logging.getLogger(__name__)


class BrainFlowBandPowerExtractor(FeatureExtractor):
    """Average band powers via BrainFlow's DataFilter."""

    def band_powers(
        self,
        data: np.ndarray,
        channels: Sequence[int],
        sampling_rate: int,
        apply_filters: bool = True,
    ) -> tuple[np.ndarray, np.ndarray]:
        # DataFilter filters in place; never hand it the read-only window.
        buffer = np.array(data, dtype=np.float64, order="C", copy=True)
        try:
            mean, stddev = DataFilter.get_avg_band_powers(
                buffer, list(channels), int(sampling_rate), apply_filters
            )
        except BrainFlowError as exc:
            raise DeviceError("band power extraction", str(exc)) from exc
        return np.asarray(mean, dtype=np.float64), np.asarray(stddev, dtype=np.float64)


def _nearest_power_of_two(value: float) -> int:
    return 2 ** max(1, round(math.log2(max(value, 2))))


class WelchBandPowerExtractor(FeatureExtractor):
    """Average band powers from a Welch PSD (scipy)."""

    def __init__(
        self,
        bands: Sequence[tuple[float, float]] = BANDS,
        filter_order: int = FILTER_ORDER,
    ) -> None:
        self._bands = tuple(bands)
        self._order = filter_order

    def band_powers(
        self,
        data: np.ndarray,
        channels: Sequence[int],
        sampling_rate: int,
        apply_filters: bool = True,
    ) -> tuple[np.ndarray, np.ndarray]:
        arr = np.asarray(data, dtype=np.float64)
        if arr.ndim != 2:
            raise ValueError(f"Expected a 2D window, got shape {arr.shape}")
        if len(channels) == 0:
            raise ValueError("At least one EEG channel is required")

        rows = arr[list(channels)]
        if apply_filters:
            rows = self._filter(rows, sampling_rate)

        powers = np.vstack([self._channel_powers(x, sampling_rate) for x in rows])
        totals = powers.sum(axis=1, keepdims=True)
        relative = np.divide(
            powers, totals, out=np.zeros_like(powers), where=totals > 0
        )
        return relative.mean(axis=0), relative.std(axis=0)

    def _filter(self, rows: np.ndarray, fs: float) -> np.ndarray:
        nyquist = fs / 2.0
        out = rows
        for lo, hi in BANDSTOP_RANGES:
            if hi >= nyquist:
                logger.debug("Skipping %s-%s Hz band-stop at fs=%s.", lo, hi, fs)
                continue
            sos = butter(self._order, [lo, hi], btype="bandstop", fs=fs, output="sos")
            out = sosfilt(sos, out, axis=1)

        lo, hi = BANDPASS_RANGE
        hi = min(hi, nyquist * 0.99)
        if lo < hi:
            sos = butter(self._order, [lo, hi], btype="bandpass", fs=fs, output="sos")
            out = sosfilt(sos, out, axis=1)
        return out

    def _channel_powers(self, x: np.ndarray, fs: float) -> np.ndarray:
        nperseg = min(len(x), _nearest_power_of_two(fs))
        freqs, pxx = welch(x, fs=fs, nperseg=nperseg)
        powers = []
        for lo, hi in self._bands:
            idx = (freqs >= lo) & (freqs <= hi)
            powers.append(float(trapezoid(pxx[idx], freqs[idx])) if idx.sum() > 1 else 0.0)
        return np.array(powers)
