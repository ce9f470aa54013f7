"""
Real-time prediction pipeline.

Provides:
- **PredictionScheduler**: APScheduler-based timer that runs the
  acquisition → band powers → classifier pipeline every interval.
- **ScorePublisher**: last-score observable that fans each new score
  out to subscribers.
"""

from restfulness.realtime.publisher import ScorePublisher
from restfulness.realtime.scheduler import PredictionScheduler, TickResult, TickStatus

__all__ = [
    "PredictionScheduler",
    "ScorePublisher",
    "TickResult",
    "TickStatus",
]
