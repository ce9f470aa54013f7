"""
Logging configuration for applications embedding the predictor.

The predictor core only creates module loggers; configuring handlers
is left to the host application (the CLI calls configure_logging).
Logging must not change program behavior.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from brainflow.board_shim import BoardShim
from brainflow.exit_codes import BrainFlowError
from brainflow.ml_model import MLModel

from restfulness.errors import DeviceError

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEV_LOG_TIMESTAMP = "%Y-%m-%d_%H-%M-%S"


def configure_logging(level: str = "INFO") -> None:
    """Send predictor and BrainFlow adapter logs to stdout.

    Called by the CLI only; embedding hosts keep their own handlers.
    APScheduler is held at WARNING so each prediction tick does not
    log its job start and finish.

    Args:
        level: DEBUG, INFO, WARNING or ERROR; unknown names fall back to INFO.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        stream=sys.stdout,
        force=True,
    )

    logging.getLogger("apscheduler").setLevel(logging.WARNING)


def enable_dev_logging(log_dir: str | Path = "log") -> tuple[Path, Path]:
    """Send BrainFlow board and ML logs to timestamped files.

    Files are named ``bf_{yyyy-MM-dd_HH-mm-ss}.log`` and
    ``ml_{yyyy-MM-dd_HH-mm-ss}.log`` inside ``log_dir``, which is
    created if missing.

    Returns:
        Paths of the board log and the ML log.

    Raises:
        DeviceError: If BrainFlow cannot open a log file (e.g. locked).
    """
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime(DEV_LOG_TIMESTAMP)
    board_log = log_path / f"bf_{stamp}.log"
    ml_log = log_path / f"ml_{stamp}.log"

    try:
        BoardShim.set_log_file(str(board_log))
        MLModel.set_log_file(str(ml_log))
        MLModel.enable_dev_ml_logger()
        BoardShim.enable_dev_board_logger()
    except BrainFlowError as exc:
        raise DeviceError("enable dev logging", str(exc)) from exc

    logging.getLogger(__name__).info(
        "BrainFlow dev logging enabled: %s, %s", board_log, ml_log
    )
    return board_log, ml_log
