"""Shared fixtures: synthetic board frames and a scripted legal-move oracle."""

from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np
import pytest

from chess_move_tracker.move_inference import LegalMoveOracle
from chess_move_tracker.utils import BoardCorners, Frame, LegalMove

BOARD_SIZE = 400
STEP = BOARD_SIZE // 8
PATCH_RADIUS = 20


class FakeOracle(LegalMoveOracle):
    """Returns a fixed move list and counts how often it is asked."""

    def __init__(self, moves: Iterable[LegalMove] = (), game_over: bool = False,
                 error: Optional[Exception] = None) -> None:
        self.moves = list(moves)
        self.game_over = game_over
        self.error = error
        self.calls = 0

    def legal_moves(self) -> List[LegalMove]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.moves)

    def is_game_over(self) -> bool:
        return self.game_over


def square_point(label: str) -> tuple:
    """Pixel position the sampler produces for `label` on a full-frame board."""
    file_idx = "abcdefgh".index(label[0])
    rank_idx = 8 - int(label[1])
    return file_idx * STEP, rank_idx * STEP


def make_board_frame(occupied: Iterable[str], background: int = 128, piece: int = 20,
                     channels: int = 3, size: int = BOARD_SIZE) -> Frame:
    pixels = np.full((size, size, channels), background, dtype=np.uint8)
    for label in occupied:
        x, y = square_point(label)
        pixels[max(0, y - PATCH_RADIUS):y + PATCH_RADIUS + 1,
               max(0, x - PATCH_RADIUS):x + PATCH_RADIUS + 1, :3] = piece
    return Frame(pixels)


@pytest.fixture
def full_frame_corners() -> BoardCorners:
    return BoardCorners(
        top_left=(0.0, 0.0),
        top_right=(float(BOARD_SIZE), 0.0),
        bottom_left=(0.0, float(BOARD_SIZE)),
        bottom_right=(float(BOARD_SIZE), float(BOARD_SIZE)),
    )


@pytest.fixture
def board_frame():
    return make_board_frame


@pytest.fixture
def oracle_factory():
    return FakeOracle
