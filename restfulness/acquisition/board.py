"""
BrainFlow acquisition source.

Wraps a BoardShim behind the AcquisitionSource port. Every BrainFlow
call is translated so that BrainFlowError surfaces as DeviceError.

Pull semantics:
- ``pull_latest(n)``  → ``get_current_board_data(n)`` (buffer untouched)
- ``pull_consumed(n)`` → ``get_board_data(n)`` (samples removed)
"""

import logging
from contextlib import contextmanager
from typing import Iterator

import numpy as np
from brainflow.board_shim import BoardIds, BoardShim, BrainFlowInputParams
from brainflow.exit_codes import BrainFlowError

from restfulness.errors import DeviceError, InvalidConfigurationError
from restfulness.ports import AcquisitionSource

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 450000


def resolve_board_id(board: BoardIds | int | str) -> int:
    """Turn a BoardIds member, integer id or board name into an id.

    ``"SYNTHETIC_BOARD"``, ``"synthetic_board"``, ``"-1"``, ``-1`` and
    ``BoardIds.SYNTHETIC_BOARD`` all resolve to -1.
    """
    if isinstance(board, BoardIds):
        return board.value
    if isinstance(board, int):
        candidate = board
    else:
        text = str(board).strip()
        try:
            candidate = int(text)
        except ValueError:
            try:
                return BoardIds[text.upper()].value
            except KeyError:
                raise InvalidConfigurationError(
                    "board_id", board, "not a BrainFlow board name"
                ) from None
    try:
        return BoardIds(candidate).value
    except ValueError:
        raise InvalidConfigurationError(
            "board_id", board, "not a BrainFlow board id"
        ) from None


def build_input_params(**params) -> BrainFlowInputParams:
    """Create BrainFlowInputParams from keyword arguments.

    Unknown keys are rejected so typos in configuration do not silently
    fall back to defaults.
    """
    input_params = BrainFlowInputParams()
    for key, value in params.items():
        if not hasattr(input_params, key):
            raise InvalidConfigurationError(key, value, "unknown BrainFlow input parameter")
        setattr(input_params, key, value)
    return input_params


@contextmanager
def _brainflow_call(action: str) -> Iterator[None]:
    try:
        yield
    except BrainFlowError as exc:
        raise DeviceError(action, str(exc)) from exc


class BrainFlowBoardSource(AcquisitionSource):
    """Streaming EEG board backed by BrainFlow's BoardShim."""

    def __init__(
        self,
        board_id: BoardIds | int | str,
        input_params: BrainFlowInputParams | None = None,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        streamer_params: str | None = None,
    ) -> None:
        self.board_id = resolve_board_id(board_id)
        self._input_params = input_params or BrainFlowInputParams()
        self._buffer_size = buffer_size
        self._streamer_params = streamer_params
        self._board: BoardShim | None = None

        with _brainflow_call("board description"):
            self._sampling_rate = int(BoardShim.get_sampling_rate(self.board_id))
            self._channels = [int(c) for c in BoardShim.get_eeg_channels(self.board_id)]

    @property
    def sampling_rate(self) -> int:
        return self._sampling_rate

    @property
    def channel_indices(self) -> list[int]:
        return list(self._channels)

    @property
    def board(self) -> BoardShim:
        if self._board is None:
            raise DeviceError("board access", "session not prepared")
        return self._board

    def prepare(self) -> None:
        with _brainflow_call("prepare session"):
            board = BoardShim(self.board_id, self._input_params)
            board.prepare_session()
        self._board = board
        logger.info(
            "Board %s prepared: %d Hz, EEG channels %s",
            BoardIds(self.board_id).name, self._sampling_rate, self._channels,
        )

    def start(self) -> None:
        with _brainflow_call("start stream"):
            self.board.start_stream(self._buffer_size, self._streamer_params)

    def stop(self) -> None:
        with _brainflow_call("stop stream"):
            self.board.stop_stream()

    def release(self) -> None:
        if self._board is None:
            return
        with _brainflow_call("release session"):
            self._board.release_session()
        self._board = None

    def pull_latest(self, n: int) -> np.ndarray:
        with _brainflow_call("read current data"):
            return self.board.get_current_board_data(n)

    def pull_consumed(self, n: int) -> np.ndarray:
        with _brainflow_call("read buffered data"):
            return self.board.get_board_data(n)

    def available_samples(self) -> int:
        with _brainflow_call("read buffer count"):
            return int(self.board.get_board_data_count())
