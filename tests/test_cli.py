"""
Tests for the command-line interface.

Logging setup and the session are patched; ``info`` reads the real
BrainFlow board description, which needs no hardware.
"""

from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def no_logging_setup():
    with patch("restfulness.cli.configure_logging") as mock_configure:
        yield mock_configure


@pytest.fixture
def fake_session():
    session = MagicMock()
    session.board_id = "SYNTHETIC_BOARD"
    session.prediction_interval_ms = 2500
    session.current_score.return_value = 0.5
    session.scheduler.get_status.return_value = {"ticks": 3}
    with patch("restfulness.cli.SessionManager") as mock_cls:
        mock_cls.from_config.return_value = session
        yield mock_cls, session


class TestRunCommand:
    """Tests for ``restfulness run``."""

    def test_builds_session_from_flags(self, fake_session):
        from restfulness.cli import main

        mock_cls, session = fake_session
        with patch("restfulness.cli._wait") as mock_wait:
            code = main([
                "run", "--board", "MUSE_2_BOARD", "--interval", "1000",
                "--duration", "5", "--no-filters",
            ])

        assert code == 0
        mock_cls.from_config.assert_called_once_with(
            board_id="MUSE_2_BOARD",
            prediction_interval_ms=1000,
            apply_filters=False,
        )
        session.subscribe.assert_called_once()
        session.start_session.assert_called_once()
        mock_wait.assert_called_once_with(5.0)
        session.stop_session.assert_called_once()

    def test_defaults_come_from_config(self, fake_session):
        from restfulness.cli import main

        mock_cls, _ = fake_session
        with patch("restfulness.cli._wait"):
            main(["run"])

        mock_cls.from_config.assert_called_once_with()

    def test_ctrl_c_stops_session(self, fake_session):
        from restfulness.cli import main

        _, session = fake_session
        with patch("restfulness.cli._wait", side_effect=KeyboardInterrupt):
            code = main(["run"])

        assert code == 0
        session.stop_session.assert_called_once()

    def test_start_failure_closes_session(self, fake_session):
        from restfulness.cli import main
        from restfulness.errors import DeviceError

        _, session = fake_session
        session.start_session.side_effect = DeviceError("start stream", "board asleep")

        with patch("restfulness.cli._wait") as mock_wait:
            code = main(["run"])

        assert code == 1
        session.close.assert_called_once()
        mock_wait.assert_not_called()

    def test_construction_failure_exits_1(self, fake_session):
        from restfulness.cli import main
        from restfulness.errors import InvalidConfigurationError

        mock_cls, _ = fake_session
        mock_cls.from_config.side_effect = InvalidConfigurationError(
            "prediction_interval_ms", 100, "must be 500 ms or greater"
        )

        assert main(["run", "--interval", "100"]) == 1

    def test_dev_logging_flag(self, fake_session, tmp_path):
        from restfulness.cli import main

        with patch("restfulness.cli.enable_dev_logging") as mock_dev, \
                patch("restfulness.cli._wait"):
            main(["run", "--dev-logging", "--log-dir", str(tmp_path)])

        mock_dev.assert_called_once_with(str(tmp_path))

    def test_log_level_flag(self, fake_session, no_logging_setup):
        from restfulness.cli import main

        with patch("restfulness.cli._wait"):
            main(["--log-level", "DEBUG", "run"])

        no_logging_setup.assert_called_once_with("DEBUG")


class TestInfoCommand:
    """Tests for ``restfulness info``."""

    def test_synthetic_board(self):
        from restfulness.cli import main

        assert main(["info", "--board", "SYNTHETIC_BOARD", "--interval", "2000"]) == 0

    def test_unknown_board(self):
        from restfulness.cli import main

        assert main(["info", "--board", "NOT_A_BOARD"]) == 1

    def test_interval_below_minimum(self):
        from restfulness.cli import main

        assert main(["info", "--interval", "100"]) == 1


class TestWait:
    """Tests for the foreground wait helper."""

    def test_duration(self):
        from restfulness.cli import _wait

        with patch("restfulness.cli.time.sleep") as mock_sleep:
            _wait(2.5)

        mock_sleep.assert_called_once_with(2.5)
