"""
Shared fixtures and in-memory fakes for the restfulness predictor tests.

The fakes implement the port ABCs so the session and scheduler can be
exercised without a board, a classifier or a running timer.
"""

import threading
from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from restfulness.ports import (
    AcquisitionSource,
    ErrorReporter,
    FeatureExtractor,
    InferenceService,
)


class FakeSource(AcquisitionSource):
    """Ring buffer stand-in that records every call in order."""

    def __init__(self, sampling_rate=250, channels=(1, 2, 3, 4), rows=8):
        self._sampling_rate = sampling_rate
        self._channels = list(channels)
        self.rows = rows
        self.consumed_rows = rows
        self.available = 10_000
        self.calls: list[tuple] = []
        self.fail: dict[str, Exception] = {}

    def _call(self, name, *args):
        self.calls.append((name, *args))
        exc = self.fail.get(name)
        if exc is not None:
            raise exc

    @property
    def sampling_rate(self):
        return self._sampling_rate

    @property
    def channel_indices(self):
        return list(self._channels)

    def prepare(self):
        self._call("prepare")

    def start(self):
        self._call("start")

    def stop(self):
        self._call("stop")

    def release(self):
        self._call("release")

    def pull_latest(self, n):
        self._call("pull_latest", n)
        return np.ones((self.rows, n))

    def pull_consumed(self, n):
        self._call("pull_consumed", n)
        return np.zeros((self.consumed_rows, n))

    def available_samples(self):
        return self.available

    @property
    def pulls(self):
        return [c for c in self.calls if c[0].startswith("pull_")]

    @property
    def names(self):
        return [c[0] for c in self.calls]


class FakeExtractor(FeatureExtractor):
    """Returns a fixed band-power vector and remembers its inputs."""

    MEAN = np.array([0.1, 0.2, 0.4, 0.2, 0.1])
    STDDEV = np.array([0.01, 0.02, 0.03, 0.02, 0.01])

    def __init__(self):
        self.calls: list[dict] = []
        self.fail: Exception | None = None
        self.entered = threading.Event()
        self.gate: threading.Event | None = None

    def band_powers(self, data, channels, sampling_rate, apply_filters=True):
        self.calls.append({
            "shape": data.shape,
            "channels": list(channels),
            "sampling_rate": sampling_rate,
            "apply_filters": apply_filters,
        })
        self.entered.set()
        if self.gate is not None:
            self.gate.wait(timeout=5)
        if self.fail is not None:
            raise self.fail
        return self.MEAN.copy(), self.STDDEV.copy()


class StubModel(InferenceService):
    """Classifier that always answers ``score``."""

    def __init__(self, score=0.73):
        self.output = [score]
        self.calls: list[str] = []
        self.features: list[np.ndarray] = []
        self.fail: dict[str, Exception] = {}

    def _call(self, name):
        self.calls.append(name)
        exc = self.fail.get(name)
        if exc is not None:
            raise exc

    def prepare(self):
        self._call("prepare")

    def predict(self, features):
        self._call("predict")
        self.features.append(np.asarray(features))
        return np.asarray(self.output, dtype=np.float64)

    def release(self):
        self._call("release")


class RecordingReporter(ErrorReporter):
    def __init__(self):
        self.reports: list[tuple[Exception, str]] = []

    def report(self, error, stage):
        self.reports.append((error, stage))

    @property
    def stages(self):
        return [stage for _, stage in self.reports]


# =====================================================================
# Fixtures
# =====================================================================

@pytest.fixture
def source():
    return FakeSource()


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def model():
    return StubModel()


@pytest.fixture
def reporter():
    return RecordingReporter()


@pytest.fixture
def fake_timer():
    """Replace APScheduler's BackgroundScheduler so no timer thread runs."""
    with patch("restfulness.realtime.scheduler.BackgroundScheduler") as mock_cls:
        mock_cls.return_value = MagicMock()
        yield mock_cls


@pytest.fixture
def make_scheduler(source, extractor, model, reporter):
    from restfulness.realtime.publisher import ScorePublisher
    from restfulness.realtime.scheduler import PredictionScheduler

    def _make(**kwargs):
        params = {
            "channels": source.channel_indices,
            "sampling_rate": source.sampling_rate,
            "samples_per_interval": 500,
            "interval_ms": 2000,
            "error_reporter": reporter,
        }
        params.update(kwargs)
        publisher = params.pop("publisher", None) or ScorePublisher()
        return PredictionScheduler(source, extractor, model, publisher, **params)

    return _make


@pytest.fixture
def make_session(source, extractor, model, reporter):
    from restfulness.session import SessionManager

    def _make(prediction_interval_ms=2000, **kwargs):
        params = {
            "source": source,
            "extractor": extractor,
            "model": model,
            "error_reporter": reporter,
        }
        params.update(kwargs)
        return SessionManager("SYNTHETIC_BOARD", prediction_interval_ms, **params)

    return _make
