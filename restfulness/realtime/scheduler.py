"""
Periodic prediction scheduler.

Uses APScheduler to fire one prediction tick every
``prediction_interval_ms``. Each tick:

1. Pulls signal from the acquisition source (one interval on the
   first tick, two concatenated intervals afterwards)
2. Computes mean band powers over the EEG channels
3. Runs the restfulness classifier on the band powers
4. Publishes the score to subscribers

Ticks never overlap: the job runs with ``max_instances=1`` and
``coalesce=True``, and the pipeline itself runs under the session
lock. A failed tick publishes nothing, is reported to the injected
ErrorReporter and leaves the scheduler armed for the next tick.
"""

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Sequence

import numpy as np
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from restfulness.errors import DeviceError
from restfulness.ports import (
    AcquisitionSource,
    ErrorReporter,
    FeatureExtractor,
    InferenceService,
)
from restfulness.realtime.publisher import ScorePublisher
from restfulness.shared.errors import LoggingErrorReporter
from restfulness.windowing import WindowAssembler

logger = logging.getLogger(__name__)


class TickStatus(Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class TickResult:
    """Outcome of one prediction tick."""

    tick: int
    status: TickStatus
    started_at: str
    finished_at: str | None = None
    duration_seconds: float = 0.0
    window_shape: tuple[int, ...] | None = None
    score: float | None = None
    stage: str | None = None
    error: str | None = None


class PredictionScheduler:
    """Fires the windowed feature-extraction and prediction pipeline.

    The scheduler shares ``lock`` with its owning session so that ticks,
    start and stop never touch the acquisition source concurrently.
    The lock is re-entrant: a subscriber may stop the session from
    inside a tick.

    Usage:
        scheduler = PredictionScheduler(source, extractor, model, publisher,
                                        channels=[1, 2, 3, 4],
                                        sampling_rate=250,
                                        samples_per_interval=625,
                                        interval_ms=2500)
        scheduler.arm()      # start firing ticks
        scheduler.disarm()   # no pipeline work after this returns
        scheduler.tick()     # run one tick immediately (blocking)
    """

    JOB_ID = "restfulness_prediction"

    def __init__(
        self,
        source: AcquisitionSource,
        extractor: FeatureExtractor,
        model: InferenceService,
        publisher: ScorePublisher,
        *,
        channels: Sequence[int],
        sampling_rate: int,
        samples_per_interval: int,
        interval_ms: int,
        apply_filters: bool = True,
        error_reporter: ErrorReporter | None = None,
        lock: "threading.RLock | None" = None,
        max_consecutive_failures: int = 5,
        max_history: int = 200,
    ) -> None:
        self._extractor = extractor
        self._model = model
        self._publisher = publisher
        self._channels = list(channels)
        self._sampling_rate = sampling_rate
        self._interval_ms = interval_ms
        self._apply_filters = apply_filters
        self._reporter = error_reporter or LoggingErrorReporter()
        self._lock = lock or threading.RLock()
        self._max_failures = max(1, max_consecutive_failures)
        self._max_history = max_history

        self._assembler = WindowAssembler(source, samples_per_interval)
        self._armed = False
        self._scheduler: BackgroundScheduler | None = None
        self._tick_count = 0
        self._consecutive_failures = 0
        self._history: list[TickResult] = []
        self._history_lock = threading.Lock()

    @property
    def is_armed(self) -> bool:
        return self._armed

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def samples_per_interval(self) -> int:
        return self._assembler.samples_per_interval

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def tick_history(self) -> list[TickResult]:
        with self._history_lock:
            return list(self._history)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def arm(self) -> None:
        """Start firing ticks every ``interval_ms``."""
        with self._lock:
            if self._armed:
                logger.warning("Prediction scheduler already armed.")
                return

            self._assembler.reset()
            self._consecutive_failures = 0

            scheduler = BackgroundScheduler(
                job_defaults={"coalesce": True, "max_instances": 1},
            )
            scheduler.add_job(
                self.tick,
                IntervalTrigger(seconds=self._interval_ms / 1000.0),
                id=self.JOB_ID,
                name="Restfulness prediction tick",
            )
            scheduler.start()
            self._armed = True
            self._scheduler = scheduler

        logger.info(
            "Prediction scheduler armed: every %d ms, %d samples per interval.",
            self._interval_ms, self.samples_per_interval,
        )

    def disarm(self) -> None:
        """Stop firing ticks.

        Waits for an in-flight tick on another thread to finish; once this
        returns, any tick that still fires is skipped without touching the
        source or the model. Safe to call from inside a tick.
        """
        with self._lock:
            was_armed = self._armed
            self._armed = False
            scheduler, self._scheduler = self._scheduler, None

        if scheduler is not None:
            # A queued tick may be blocked on the lock held by our caller.
            scheduler.shutdown(wait=False)

        if was_armed:
            logger.info("Prediction scheduler disarmed.")

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """Run one prediction cycle. Never raises."""
        start = time.monotonic()
        started_at = datetime.now(timezone.utc).isoformat()

        with self._lock:
            if not self._armed:
                logger.debug("Tick skipped: scheduler is not armed.")
                return TickResult(
                    tick=self._tick_count,
                    status=TickStatus.SKIPPED,
                    started_at=started_at,
                    finished_at=datetime.now(timezone.utc).isoformat(),
                )

            self._tick_count += 1
            number = self._tick_count
            stage = "acquisition"
            window = None
            try:
                window = self._assembler.next_window()
                stage = "features"
                features = self._extract_features(window)
                stage = "inference"
                score = self._infer(features)
            except Exception as exc:
                self._consecutive_failures += 1
                self._report(exc, stage)
                result = TickResult(
                    tick=number,
                    status=TickStatus.FAILED,
                    started_at=started_at,
                    finished_at=datetime.now(timezone.utc).isoformat(),
                    duration_seconds=round(time.monotonic() - start, 4),
                    window_shape=window.shape if window is not None else None,
                    stage=stage,
                    error=str(exc),
                )
                if self._consecutive_failures % self._max_failures == 0:
                    logger.warning(
                        "%d consecutive prediction ticks failed (last stage: %s).",
                        self._consecutive_failures, stage,
                    )
            else:
                self._consecutive_failures = 0
                delivered = self._publisher.publish(score)
                result = TickResult(
                    tick=number,
                    status=TickStatus.COMPLETED,
                    started_at=started_at,
                    finished_at=datetime.now(timezone.utc).isoformat(),
                    duration_seconds=round(time.monotonic() - start, 4),
                    window_shape=window.shape,
                    score=score,
                )
                logger.debug(
                    "Tick %d: window=%s score=%.4f delivered=%d",
                    number, window.shape, score, delivered,
                )

        self._record_result(result)
        return result

    def _extract_features(self, window: np.ndarray) -> np.ndarray:
        mean, _stddev = self._extractor.band_powers(
            window, self._channels, self._sampling_rate, self._apply_filters
        )
        return np.asarray(mean, dtype=np.float64)

    def _infer(self, features: np.ndarray) -> float:
        output = np.asarray(self._model.predict(features), dtype=np.float64).ravel()
        if output.size == 0:
            raise DeviceError("inference", "classifier returned an empty result")
        score = float(output[0])
        if not np.isfinite(score):
            raise DeviceError("inference", f"classifier returned {score}")
        return score

    def _report(self, error: Exception, stage: str) -> None:
        try:
            self._reporter.report(error, stage)
        except Exception:
            logger.exception("Error reporter failed while reporting %s failure.", stage)

    # ------------------------------------------------------------------
    # Status & introspection
    # ------------------------------------------------------------------

    def _record_result(self, result: TickResult) -> None:
        with self._history_lock:
            self._history.append(result)
            if len(self._history) > self._max_history:
                self._history = self._history[-self._max_history:]

    def get_status(self) -> dict:
        """Return the scheduler status summary."""
        scheduler = self._scheduler
        job = scheduler.get_job(self.JOB_ID) if scheduler is not None else None
        recent = self.tick_history[-10:]
        return {
            "armed": self._armed,
            "interval_ms": self._interval_ms,
            "samples_per_interval": self.samples_per_interval,
            "ticks": self._tick_count,
            "consecutive_failures": self._consecutive_failures,
            "next_run": str(job.next_run_time) if job is not None else None,
            "recent_ticks": [
                {
                    "tick": r.tick,
                    "status": r.status.value,
                    "duration": r.duration_seconds,
                    "score": r.score,
                    "stage": r.stage,
                }
                for r in recent
            ],
        }
