"""
Acquisition sub-package.

- `BrainFlowBoardSource`: BoardShim-backed AcquisitionSource
- `resolve_board_id`    : BoardIds member / name / integer → board id
- `build_input_params`  : BrainFlowInputParams from keyword arguments
"""

from restfulness.acquisition.board import (
    BrainFlowBoardSource,
    build_input_params,
    resolve_board_id,
)

__all__ = [
    "BrainFlowBoardSource",
    "build_input_params",
    "resolve_board_id",
]
