"""
Restfulness session manager.

Owns one acquisition source and one inference service for their whole
lifetime and guards the lifecycle:

    CREATED ──start_session()──▶ STARTED ──stop_session()──▶ STOPPED

There is no way out of STOPPED. To measure again, construct a new
SessionManager; resources are never shared between sessions.

Usage:
    session = SessionManager("SYNTHETIC_BOARD", prediction_interval_ms=2500)
    session.subscribe(lambda score: print(f"restfulness={score:.2f}"))
    session.start_session()
    ...
    session.stop_session()
"""

import logging
import threading
from enum import Enum
from typing import Any

from brainflow.board_shim import BoardIds, BrainFlowInputParams

from restfulness.acquisition.board import BrainFlowBoardSource, build_input_params
from restfulness.config import (
    DEFAULT_PREDICTION_INTERVAL_MS,
    MIN_PREDICTION_INTERVAL_MS,
    RestfulnessConfig,
    config,
)
from restfulness.errors import DeviceError, InvalidConfigurationError, InvalidStateError
from restfulness.features.band_power import BrainFlowBandPowerExtractor
from restfulness.models.restfulness_model import BrainFlowRestfulnessModel
from restfulness.ports import (
    AcquisitionSource,
    ErrorReporter,
    FeatureExtractor,
    InferenceService,
    ScoreCallback,
)
from restfulness.realtime.publisher import ScorePublisher
from restfulness.realtime.scheduler import PredictionScheduler
from restfulness.shared.errors import LoggingErrorReporter

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CREATED = "created"
    STARTED = "started"
    STOPPED = "stopped"


def interval_sample_count(sampling_rate: int, interval_ms: int) -> int:
    """Samples one channel produces during ``interval_ms``."""
    return int(round(sampling_rate * interval_ms / 1000.0))


class SessionManager:
    """Lifecycle owner for one EEG board + restfulness classifier pair.

    Construction prepares both resources; any failure there raises
    DeviceError after releasing whatever was already acquired.

    A stopped session cannot be restarted. Create a new instance instead.

    Subscribers run on the scheduler thread while the session lock is
    held. They may call stop_session() but must not wait on another
    thread that uses this session.
    """

    def __init__(
        self,
        board_id: BoardIds | int | str,
        prediction_interval_ms: int = DEFAULT_PREDICTION_INTERVAL_MS,
        *,
        apply_filters: bool = True,
        input_params: BrainFlowInputParams | None = None,
        source: AcquisitionSource | None = None,
        extractor: FeatureExtractor | None = None,
        model: InferenceService | None = None,
        error_reporter: ErrorReporter | None = None,
        max_consecutive_failures: int = 5,
        tick_history_size: int = 200,
    ) -> None:
        if isinstance(prediction_interval_ms, bool) or not isinstance(prediction_interval_ms, int):
            raise InvalidConfigurationError(
                "prediction_interval_ms", prediction_interval_ms, "must be an integer"
            )
        if prediction_interval_ms < MIN_PREDICTION_INTERVAL_MS:
            raise InvalidConfigurationError(
                "prediction_interval_ms",
                prediction_interval_ms,
                f"must be {MIN_PREDICTION_INTERVAL_MS} ms or greater",
            )

        self.board_id = board_id
        self._interval_ms = prediction_interval_ms
        self._reporter = error_reporter or LoggingErrorReporter()
        self._lock = threading.RLock()
        self._state = SessionState.CREATED
        self._publisher = ScorePublisher()

        self._source = source if source is not None else BrainFlowBoardSource(board_id, input_params)
        self._extractor = extractor if extractor is not None else BrainFlowBandPowerExtractor()
        self._model = model if model is not None else BrainFlowRestfulnessModel()

        self._sampling_rate, self._channels = self._acquire_resources()
        self._samples_per_interval = interval_sample_count(self._sampling_rate, self._interval_ms)

        self._scheduler = PredictionScheduler(
            self._source,
            self._extractor,
            self._model,
            self._publisher,
            channels=self._channels,
            sampling_rate=self._sampling_rate,
            samples_per_interval=self._samples_per_interval,
            interval_ms=self._interval_ms,
            apply_filters=apply_filters,
            error_reporter=self._reporter,
            lock=self._lock,
            max_consecutive_failures=max_consecutive_failures,
            max_history=tick_history_size,
        )

        logger.info(
            "Session created for board %s: %d Hz, %d EEG channels, "
            "%d ms interval (%d samples).",
            board_id, self._sampling_rate, len(self._channels),
            self._interval_ms, self._samples_per_interval,
        )

    @classmethod
    def from_config(
        cls, cfg: RestfulnessConfig | None = None, **overrides: Any
    ) -> "SessionManager":
        """Build a session from RestfulnessConfig; keyword overrides win."""
        cfg = cfg or config
        board_id = overrides.pop("board_id", cfg.board.board_id)
        kwargs: dict[str, Any] = {
            "prediction_interval_ms": cfg.predictor.prediction_interval_ms,
            "apply_filters": cfg.predictor.apply_filters,
            "max_consecutive_failures": cfg.predictor.max_consecutive_failures,
            "tick_history_size": cfg.predictor.tick_history_size,
        }
        if "source" not in overrides and "input_params" not in overrides:
            kwargs["input_params"] = build_input_params(**cfg.board.input_params())
        kwargs.update(overrides)
        return cls(board_id, **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_streaming(self) -> bool:
        return self._state is SessionState.STARTED

    @property
    def sampling_rate(self) -> int:
        return self._sampling_rate

    @property
    def channel_indices(self) -> list[int]:
        return list(self._channels)

    @property
    def prediction_interval_ms(self) -> int:
        return self._interval_ms

    @property
    def samples_per_interval(self) -> int:
        return self._samples_per_interval

    @property
    def scheduler(self) -> PredictionScheduler:
        return self._scheduler

    @property
    def publisher(self) -> ScorePublisher:
        return self._publisher

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _acquire_resources(self) -> tuple[int, list[int]]:
        acquired = []
        try:
            self._source.prepare()
            acquired.append(("release acquisition", self._source.release))
            self._model.prepare()
            acquired.append(("release inference", self._model.release))

            sampling_rate = int(self._source.sampling_rate)
            channels = [int(c) for c in self._source.channel_indices]
            if sampling_rate <= 0:
                raise DeviceError("read sampling rate", f"board reported {sampling_rate} Hz")
            if not channels:
                raise DeviceError("read EEG channels", "board reports no EEG channels")
        except Exception as exc:
            for stage, release in reversed(acquired):
                try:
                    release()
                except Exception as release_exc:
                    self._report(release_exc, stage)
            self._state = SessionState.STOPPED
            if isinstance(exc, DeviceError):
                raise
            raise DeviceError("session construction", str(exc)) from exc
        return sampling_rate, channels

    def start_session(self) -> None:
        """Start streaming and arm the prediction scheduler.

        Raises:
            InvalidStateError: If the session was already started or stopped.
            DeviceError: If the board refuses to stream or the timer cannot
                start; state stays CREATED and the stream is stopped.
        """
        with self._lock:
            if self._state is not SessionState.CREATED:
                raise InvalidStateError("start session", self._state.value)
            self._source.start()
            try:
                self._scheduler.arm()
            except Exception as exc:
                self._teardown((("stop stream", self._source.stop),))
                raise DeviceError("arm scheduler", str(exc)) from exc
            self._state = SessionState.STARTED
        logger.info("Session started.")

    def stop_session(self) -> None:
        """Disarm the scheduler, stop the stream and release both resources.

        Every step runs even if an earlier one fails. Failures are
        reported, then raised together once all steps ran.

        Raises:
            InvalidStateError: If the session is not started.
            DeviceError: If any teardown step failed.
        """
        with self._lock:
            if self._state is not SessionState.STARTED:
                raise InvalidStateError("stop session", self._state.value)
            self._state = SessionState.STOPPED
            failures = self._teardown((
                ("disarm scheduler", self._scheduler.disarm),
                ("stop stream", self._source.stop),
                ("release acquisition", self._source.release),
                ("release inference", self._model.release),
            ))
        self._raise_teardown(failures)
        logger.info("Session stopped.")

    def close(self) -> None:
        """Release resources whatever the state; idempotent.

        A started session is stopped. A session that was never started
        has its board and model released.
        """
        with self._lock:
            state = self._state
            if state is SessionState.STOPPED:
                return
            if state is SessionState.CREATED:
                self._state = SessionState.STOPPED
                failures = self._teardown((
                    ("release acquisition", self._source.release),
                    ("release inference", self._model.release),
                ))
        if state is SessionState.STARTED:
            self.stop_session()
            return
        self._raise_teardown(failures)
        logger.info("Session closed before start.")

    def _teardown(self, steps) -> list[tuple[str, Exception]]:
        failures = []
        for stage, step in steps:
            try:
                step()
            except Exception as exc:
                failures.append((stage, exc))
                self._report(exc, stage)
        return failures

    def _report(self, error: Exception, stage: str) -> None:
        try:
            self._reporter.report(error, stage)
        except Exception:
            logger.exception("Error reporter failed while reporting %s failure.", stage)

    @staticmethod
    def _raise_teardown(failures: list[tuple[str, Exception]]) -> None:
        if not failures:
            return
        detail = "; ".join(f"{stage}: {exc}" for stage, exc in failures)
        raise DeviceError("stop session", detail) from failures[0][1]

    def __enter__(self) -> "SessionManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Score observer
    # ------------------------------------------------------------------

    def subscribe(self, callback: ScoreCallback) -> ScoreCallback:
        return self._publisher.subscribe(callback)

    def unsubscribe(self, callback: ScoreCallback) -> bool:
        return self._publisher.unsubscribe(callback)

    def current_score(self) -> float:
        return self._publisher.current_score()

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def get_status(self) -> dict:
        """Return the session status summary."""
        return {
            "state": self._state.value,
            "board_id": str(self.board_id),
            "sampling_rate": self._sampling_rate,
            "channels": list(self._channels),
            "prediction_interval_ms": self._interval_ms,
            "samples_per_interval": self._samples_per_interval,
            "current_score": self.current_score(),
            "has_score": self._publisher.has_score,
            "scheduler": self._scheduler.get_status(),
        }
