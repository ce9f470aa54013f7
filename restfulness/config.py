"""
Predictor configuration.

Reads deployment settings (board, interval, logging) from the central
Settings object (restfulness.settings), which loads from the
environment and .env.

Pipeline constants (minimum interval, frequency bands, filter chain)
are defined here; they are properties of the classifier contract,
not of a deployment.
"""

from dataclasses import dataclass, field


def _load_settings():
    """Lazy-load the settings so importing config never reads .env twice."""
    from restfulness.settings import settings
    return settings


MIN_PREDICTION_INTERVAL_MS = 500
DEFAULT_PREDICTION_INTERVAL_MS = 2500

# Bands the restfulness classifier was trained on (Hz).
BANDS: tuple[tuple[float, float], ...] = (
    (1.0, 4.0),
    (4.0, 8.0),
    (8.0, 13.0),
    (13.0, 30.0),
    (30.0, 50.0),
)

# Filter chain applied before band powers when apply_filters is set.
BANDSTOP_RANGES: tuple[tuple[float, float], ...] = ((48.0, 52.0), (58.0, 62.0))
BANDPASS_RANGE: tuple[float, float] = (2.0, 45.0)
FILTER_ORDER = 4


@dataclass(frozen=True)
class BoardConfig:
    """BrainFlow board selection and connection parameters."""

    board_id: str = field(default_factory=lambda: _load_settings().board_id)
    serial_port: str = field(default_factory=lambda: _load_settings().serial_port)
    mac_address: str = field(default_factory=lambda: _load_settings().mac_address)
    ip_address: str = field(default_factory=lambda: _load_settings().ip_address)
    ip_port: int = field(default_factory=lambda: _load_settings().ip_port)
    timeout: int = field(default_factory=lambda: _load_settings().timeout)
    serial_number: str = field(default_factory=lambda: _load_settings().serial_number)
    file: str = field(default_factory=lambda: _load_settings().file)
    other_info: str = field(default_factory=lambda: _load_settings().other_info)

    def input_params(self) -> dict:
        """Non-empty connection parameters, keyed like BrainFlowInputParams."""
        params = {
            "serial_port": self.serial_port,
            "mac_address": self.mac_address,
            "ip_address": self.ip_address,
            "ip_port": self.ip_port,
            "timeout": self.timeout,
            "serial_number": self.serial_number,
            "file": self.file,
            "other_info": self.other_info,
        }
        return {k: v for k, v in params.items() if v}


@dataclass(frozen=True)
class PredictorConfig:
    """Prediction cadence and pipeline behaviour."""

    prediction_interval_ms: int = field(
        default_factory=lambda: _load_settings().prediction_interval_ms
    )
    apply_filters: bool = field(default_factory=lambda: _load_settings().apply_filters)
    max_consecutive_failures: int = field(
        default_factory=lambda: _load_settings().max_consecutive_failures
    )
    tick_history_size: int = field(
        default_factory=lambda: _load_settings().tick_history_size
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Log level and BrainFlow developer logging."""

    level: str = field(default_factory=lambda: _load_settings().log_level)
    dev_logging: bool = field(default_factory=lambda: _load_settings().dev_logging)
    log_dir: str = field(default_factory=lambda: _load_settings().log_dir)


@dataclass(frozen=True)
class RestfulnessConfig:
    """Top-level configuration aggregating all sub-configs."""

    board: BoardConfig = field(default_factory=BoardConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton instance
config = RestfulnessConfig()
