"""
CLI entry point for the restfulness predictor.

Usage:
    # Stream from the synthetic board and log a score every 2.5 s
    python -m restfulness run

    # Muse 2 over BLE, one score per second, stop after a minute
    python -m restfulness run --board MUSE_2_BOARD --interval 1000 --duration 60

    # BrainFlow board and ML logs to log/bf_*.log and log/ml_*.log
    python -m restfulness run --dev-logging --log-dir log

    # Describe a board without streaming
    python -m restfulness info --board CYTON_BOARD --interval 2000
"""

import argparse
import logging
import time

from restfulness.acquisition.board import BrainFlowBoardSource
from restfulness.config import MIN_PREDICTION_INTERVAL_MS, config
from restfulness.errors import InvalidConfigurationError, RestfulnessError
from restfulness.session import SessionManager, interval_sample_count
from restfulness.shared.logging import configure_logging, enable_dev_logging

logger = logging.getLogger(__name__)


def _wait(duration: float | None) -> None:
    if duration is not None:
        time.sleep(duration)
        return
    while True:
        time.sleep(1)


def cmd_run(args: argparse.Namespace) -> None:
    """Stream from a board and log every restfulness score."""
    if args.dev_logging:
        enable_dev_logging(args.log_dir)

    overrides = {}
    if args.board is not None:
        overrides["board_id"] = args.board
    if args.interval is not None:
        overrides["prediction_interval_ms"] = args.interval
    if args.no_filters:
        overrides["apply_filters"] = False

    session = SessionManager.from_config(**overrides)

    @session.subscribe
    def _log_score(score: float) -> None:
        logger.info("Restfulness: %.3f", score)

    try:
        session.start_session()
    except RestfulnessError:
        session.close()
        raise
    logger.info(
        "Streaming from %s every %d ms. Press Ctrl+C to stop.",
        session.board_id, session.prediction_interval_ms,
    )

    try:
        _wait(args.duration)
    except KeyboardInterrupt:
        logger.info("Stopping session...")
    finally:
        session.stop_session()

    status = session.scheduler.get_status()
    logger.info(
        "Session finished: %d ticks, last score %.3f.",
        status["ticks"], session.current_score(),
    )


def cmd_info(args: argparse.Namespace) -> None:
    """Log sampling rate, EEG channels and window size of a board."""
    board = args.board if args.board is not None else config.board.board_id
    interval = (
        args.interval
        if args.interval is not None
        else config.predictor.prediction_interval_ms
    )
    if interval < MIN_PREDICTION_INTERVAL_MS:
        raise InvalidConfigurationError(
            "prediction_interval_ms",
            interval,
            f"must be {MIN_PREDICTION_INTERVAL_MS} ms or greater",
        )

    source = BrainFlowBoardSource(board)
    n = interval_sample_count(source.sampling_rate, interval)
    logger.info("Board:               %s (id %d)", board, source.board_id)
    logger.info("Sampling rate:       %d Hz", source.sampling_rate)
    logger.info("EEG channels:        %s", source.channel_indices)
    logger.info("Samples per interval: %d (%d ms)", n, interval)
    logger.info("Window after first:  %d samples", 2 * n)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="restfulness",
        description="EEG restfulness predictor CLI",
    )
    parser.add_argument(
        "--log-level", default=None, dest="log_level",
        help="DEBUG, INFO, WARNING or ERROR (default from settings)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Run
    run_parser = subparsers.add_parser("run", help="Stream and predict restfulness")
    run_parser.add_argument(
        "--board", default=None,
        help="BrainFlow board name or id (e.g. SYNTHETIC_BOARD, 38)",
    )
    run_parser.add_argument(
        "--interval", type=int, default=None,
        help=f"Milliseconds between predictions (>= {MIN_PREDICTION_INTERVAL_MS})",
    )
    run_parser.add_argument(
        "--duration", type=float, default=None,
        help="Seconds to stream before stopping (default: until Ctrl+C)",
    )
    run_parser.add_argument(
        "--no-filters", action="store_true", dest="no_filters",
        help="Skip the notch/band-pass chain before band powers",
    )
    run_parser.add_argument(
        "--dev-logging", action="store_true", dest="dev_logging",
        default=config.logging.dev_logging,
        help="Write BrainFlow board and ML logs to timestamped files",
    )
    run_parser.add_argument(
        "--log-dir", default=config.logging.log_dir, dest="log_dir",
        help="Folder for the BrainFlow log files (default: log)",
    )
    run_parser.set_defaults(func=cmd_run)

    # Info
    info_parser = subparsers.add_parser("info", help="Describe a board")
    info_parser.add_argument("--board", default=None, help="BrainFlow board name or id")
    info_parser.add_argument(
        "--interval", type=int, default=None, help="Milliseconds between predictions",
    )
    info_parser.set_defaults(func=cmd_info)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level or config.logging.level)

    try:
        args.func(args)
    except RestfulnessError as exc:
        logger.error("%s", exc.message)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
