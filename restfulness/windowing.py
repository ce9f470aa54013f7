"""
Prediction window assembly.

Turns ring-buffer pulls into the matrix handed to feature extraction:

- **First tick**: the newest ``n`` samples (one interval).
- **Later ticks**: ``n`` consumed samples (old half) followed by the
  newest ``n`` samples (new half), joined along the time axis, so every
  window after the first spans two intervals.

Windows are float64, rows = board channels, columns = samples, and are
marked read-only once built.
"""

import logging

import numpy as np

from restfulness.errors import DataShapeError
from restfulness.ports import AcquisitionSource

logger = logging.getLogger(__name__)


def as_window(data: np.ndarray) -> np.ndarray:
    """Return ``data`` as a fresh read-only 2D float64 window."""
    window = np.array(data, dtype=np.float64, copy=True)
    if window.ndim != 2:
        raise DataShapeError(window.shape, (None, None))
    window.flags.writeable = False
    return window


def concatenate_windows(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """Join two window halves along the time axis.

    Args:
        first: Older half, shape (channels, n1).
        second: Newer half, shape (channels, n2).

    Returns:
        Read-only window of shape (channels, n1 + n2).

    Raises:
        DataShapeError: If either half is not 2D or the row counts differ.
    """
    first = np.asarray(first, dtype=np.float64)
    second = np.asarray(second, dtype=np.float64)

    if first.ndim != 2 or second.ndim != 2 or first.shape[0] != second.shape[0]:
        raise DataShapeError(first.shape, second.shape)

    window = np.concatenate((first, second), axis=1)
    window.flags.writeable = False
    return window


class WindowAssembler:
    """Pulls the right amount of signal for each tick.

    Not thread-safe on its own; the scheduler calls it while holding
    the session lock.
    """

    def __init__(self, source: AcquisitionSource, samples_per_interval: int) -> None:
        self._source = source
        self._n = samples_per_interval
        self._first = True

    @property
    def samples_per_interval(self) -> int:
        return self._n

    @property
    def first_window_pending(self) -> bool:
        return self._first

    def next_window(self) -> np.ndarray:
        """Pull and assemble the window for the current tick."""
        if self._first:
            available = self._source.available_samples()
            if available < self._n:
                logger.debug(
                    "First window requested %d samples, buffer holds %d.",
                    self._n, available,
                )
            window = as_window(self._source.pull_latest(self._n))
            # Only a successful first pull switches to two-interval windows.
            self._first = False
            return window

        old_half = self._source.pull_consumed(self._n)
        new_half = self._source.pull_latest(self._n)
        return concatenate_windows(old_half, new_half)

    def reset(self) -> None:
        """Treat the next tick as the first one again."""
        self._first = True
