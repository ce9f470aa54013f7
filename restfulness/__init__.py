"""
Restfulness Predictor
=====================

Periodic EEG restfulness scoring on top of BrainFlow.

Architecture
------------
- **Session**: owns the board and the classifier, CREATED → STARTED → STOPPED
- **Scheduler**: APScheduler timer pulling one or two intervals of signal
- **Features**: average band powers (delta · theta · alpha · beta · gamma)
- **Inference**: BrainFlow RESTFULNESS classifier, score in [0, 1]
- **Publisher**: latest score plus subscriber callbacks

Quick start (CLI)
-----------------
    python -m restfulness run --board SYNTHETIC_BOARD --interval 2500
    python -m restfulness info --board MUSE_2_BOARD

Public API
----------
    from restfulness import SessionManager, SessionState
    from restfulness.realtime import PredictionScheduler, ScorePublisher
    from restfulness.config import config
"""

# ── Public façade ──────────────────────────────────────────────────
from restfulness.config import RestfulnessConfig, config
from restfulness.errors import (
    DataShapeError,
    DeviceError,
    InvalidConfigurationError,
    InvalidStateError,
    RestfulnessError,
)
from restfulness.session import SessionManager, SessionState

__version__ = "0.1.0"

__all__ = [
    "RestfulnessConfig",
    "config",
    "SessionManager",
    "SessionState",
    "RestfulnessError",
    "InvalidConfigurationError",
    "InvalidStateError",
    "DeviceError",
    "DataShapeError",
    "__version__",
]
