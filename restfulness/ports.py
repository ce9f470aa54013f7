"""
Port interfaces (ABCs) for the restfulness predictor.

Ports define the contracts the prediction pipeline requires from the
outside world. BrainFlow adapters implement these interfaces; tests
substitute in-memory fakes. The session and scheduler never depend
on concrete implementations.
"""

from abc import ABC, abstractmethod
from typing import Callable, Sequence

import numpy as np

ScoreCallback = Callable[[float], None]


class AcquisitionSource(ABC):
    """Port for a streaming multichannel EEG board.

    Matrices returned by the pull methods have one row per board
    channel and one column per sample.
    """

    @abstractmethod
    def prepare(self) -> None:
        """Open the device session. Raises DeviceError on failure."""
        raise NotImplementedError

    @abstractmethod
    def start(self) -> None:
        """Start streaming into the device ring buffer."""
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        """Stop streaming."""
        raise NotImplementedError

    @abstractmethod
    def release(self) -> None:
        """Release the device session and its resources."""
        raise NotImplementedError

    @property
    @abstractmethod
    def sampling_rate(self) -> int:
        """Samples per second per channel."""
        raise NotImplementedError

    @property
    @abstractmethod
    def channel_indices(self) -> list[int]:
        """Row indices of the EEG channels in pulled matrices."""
        raise NotImplementedError

    @abstractmethod
    def pull_latest(self, n: int) -> np.ndarray:
        """Return the newest ``n`` samples without removing them."""
        raise NotImplementedError

    @abstractmethod
    def pull_consumed(self, n: int) -> np.ndarray:
        """Remove and return ``n`` samples from the ring buffer."""
        raise NotImplementedError

    @abstractmethod
    def available_samples(self) -> int:
        """Number of samples currently held in the ring buffer."""
        raise NotImplementedError


class FeatureExtractor(ABC):
    """Port for spectral band-power feature extraction."""

    @abstractmethod
    def band_powers(
        self,
        data: np.ndarray,
        channels: Sequence[int],
        sampling_rate: int,
        apply_filters: bool = True,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Compute band powers averaged across ``channels``.

        Args:
            data: Window matrix, rows = board channels, columns = samples.
            channels: Rows of ``data`` that hold EEG signal.
            sampling_rate: Samples per second.
            apply_filters: Run the notch/band-pass chain before the PSD.

        Returns:
            ``(mean, stddev)`` vectors, one entry per frequency band.
        """
        raise NotImplementedError


class InferenceService(ABC):
    """Port for the pretrained restfulness classifier."""

    @abstractmethod
    def prepare(self) -> None:
        """Load the classifier. Raises DeviceError on failure."""
        raise NotImplementedError

    @abstractmethod
    def predict(self, features: np.ndarray) -> np.ndarray:
        """Return the classifier output; the first element is the score."""
        raise NotImplementedError

    @abstractmethod
    def release(self) -> None:
        """Free the classifier resources."""
        raise NotImplementedError


class ErrorReporter(ABC):
    """Port for the side channel that receives per-tick and teardown errors."""

    @abstractmethod
    def report(self, error: Exception, stage: str) -> None:
        """Record ``error`` raised while running ``stage``."""
        raise NotImplementedError


class ScoreObserver(ABC):
    """Outward-facing observable holding the latest restfulness score."""

    @abstractmethod
    def subscribe(self, callback: ScoreCallback) -> ScoreCallback:
        raise NotImplementedError

    @abstractmethod
    def unsubscribe(self, callback: ScoreCallback) -> bool:
        raise NotImplementedError

    @abstractmethod
    def current_score(self) -> float:
        raise NotImplementedError
