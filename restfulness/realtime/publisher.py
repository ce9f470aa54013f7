"""
Last-score observable.

Holds the most recent restfulness score and fans every update out to
registered callbacks, synchronously and in registration order:

    publisher = ScorePublisher()
    publisher.subscribe(lambda score: print(f"restfulness={score:.2f}"))
    publisher.publish(0.73)
    publisher.current_score()   # 0.73

A callback that raises is logged and skipped; the remaining callbacks
still receive the value. No display logic belongs here.
"""

import logging
import threading
from datetime import datetime, timezone

from restfulness.ports import ScoreCallback, ScoreObserver

logger = logging.getLogger(__name__)


class ScorePublisher(ScoreObserver):
    """Thread-safe single-value observable with per-subscriber isolation."""

    def __init__(self, initial_score: float = 0.0) -> None:
        self._score = float(initial_score)
        self._updated_at: str | None = None
        self._subscribers: list[ScoreCallback] = []
        self._lock = threading.Lock()
        self._stats = {
            "total_published": 0,
            "total_delivered": 0,
            "total_subscriber_errors": 0,
        }

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @property
    def has_score(self) -> bool:
        """True once at least one score was published."""
        return self._updated_at is not None

    @property
    def updated_at(self) -> str | None:
        return self._updated_at

    @property
    def stats(self) -> dict:
        with self._lock:
            return {**self._stats, "subscribers": len(self._subscribers)}

    def current_score(self) -> float:
        with self._lock:
            return self._score

    def subscribe(self, callback: ScoreCallback) -> ScoreCallback:
        """Register ``callback``; returns it so this works as a decorator."""
        if not callable(callback):
            raise TypeError(f"Subscriber must be callable, got {type(callback).__name__}")
        with self._lock:
            self._subscribers.append(callback)
        logger.debug("Score subscriber added. Total: %d", self.subscriber_count)
        return callback

    def unsubscribe(self, callback: ScoreCallback) -> bool:
        """Remove the first registration of ``callback``."""
        with self._lock:
            try:
                self._subscribers.remove(callback)
            except ValueError:
                logger.warning("Score subscriber not registered: %r", callback)
                return False
        logger.debug("Score subscriber removed. Total: %d", self.subscriber_count)
        return True

    def publish(self, score: float) -> int:
        """Store ``score`` then invoke every subscriber with it.

        Returns:
            Number of subscribers that accepted the value without raising.
        """
        score = float(score)
        with self._lock:
            self._score = score
            self._updated_at = datetime.now(timezone.utc).isoformat()
            self._stats["total_published"] += 1
            subscribers = list(self._subscribers)

        delivered = 0
        for callback in subscribers:
            try:
                callback(score)
            except Exception:
                logger.exception("Score subscriber %r failed.", callback)
                with self._lock:
                    self._stats["total_subscriber_errors"] += 1
            else:
                delivered += 1

        with self._lock:
            self._stats["total_delivered"] += delivered
        return delivered
