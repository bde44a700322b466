import math
from typing import List

from .utils import BoardCorners, SquarePosition

FILES = "abcdefgh"
RANKS = "87654321"  # top to bottom as seen by the camera


def _lerp(start: float, end: float, ratio: float) -> float:
    return start + (end - start) * ratio


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def square_labels() -> List[str]:
    """All 64 labels in sampling order: rank 8 first, a-file first within a rank."""
    return [f"{file}{rank}" for rank in RANKS for file in FILES]


def sample_squares(corners: BoardCorners) -> List[SquarePosition]:
    """
    Maps the 8x8 subdivision of the board quadrilateral to pixel coordinates.

    Each position is interpolated along the top and bottom edges with the file
    ratio, then between those two points with the rank ratio.
    """
    corners.validate()

    (tl_x, tl_y), (tr_x, tr_y) = corners.top_left, corners.top_right
    (bl_x, bl_y), (br_x, br_y) = corners.bottom_left, corners.bottom_right

    squares = []
    for rank_idx, rank in enumerate(RANKS):
        y_ratio = rank_idx / 8
        for file_idx, file in enumerate(FILES):
            x_ratio = file_idx / 8

            top_x, top_y = _lerp(tl_x, tr_x, x_ratio), _lerp(tl_y, tr_y, x_ratio)
            bottom_x, bottom_y = _lerp(bl_x, br_x, x_ratio), _lerp(bl_y, br_y, x_ratio)

            x = _lerp(top_x, bottom_x, y_ratio)
            y = _lerp(top_y, bottom_y, y_ratio)
            squares.append(SquarePosition(file=file, rank=rank, x=_round_half_up(x), y=_round_half_up(y)))

    return squares
