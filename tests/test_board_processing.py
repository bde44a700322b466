"""Tests for board_processing: edge-density grid search for the board."""

from __future__ import annotations

import numpy as np
import pytest

from chess_move_tracker.board_processing import EdgeDensityBoardLocator, cell_density
from chess_move_tracker.utils import Frame

SIZE = 100


def _blank_frame(width: int = SIZE, height: int = SIZE) -> Frame:
    return Frame(np.zeros((height, width, 3), dtype=np.uint8))


def _mask_with_cell_fill(gx: int, gy: int, count: int, grid: int = 10) -> np.ndarray:
    """Marks `count` pixels of cell (gx, gy) on a SIZE x SIZE mask."""
    cell = SIZE // grid
    mask = np.zeros((SIZE, SIZE), dtype=bool)
    block = np.zeros(cell * cell, dtype=bool)
    block[:count] = True
    mask[gy * cell:(gy + 1) * cell, gx * cell:(gx + 1) * cell] = block.reshape(cell, cell)
    return mask


class TestCellDensity:
    def test_density_per_cell(self) -> None:
        densities = cell_density(_mask_with_cell_fill(5, 3, 20), 10)
        assert densities.shape == (10, 10)
        assert densities[3, 5] == pytest.approx(0.2)
        assert densities.sum() == pytest.approx(0.2)

    def test_grid_larger_than_frame(self) -> None:
        mask = np.ones((3, 3), dtype=bool)
        densities = cell_density(mask, 5)
        assert densities.max() == pytest.approx(1.0)
        assert densities.min() == 0.0


class TestEdgeDensityBoardLocator:
    def test_uniform_frame_is_not_detected(self) -> None:
        frame = Frame(np.full((120, 160, 3), 200, dtype=np.uint8))
        result = EdgeDensityBoardLocator().locate(frame)
        assert result.detected is False
        assert result.corners is None
        assert result.confidence == 0.0

    def test_checkered_frame_is_detected(self) -> None:
        idx = np.arange(200) // 25
        pattern = ((idx[:, None] + idx[None, :]) % 2 * 255).astype(np.uint8)
        frame = Frame(np.repeat(pattern[:, :, None], 3, axis=2))
        result = EdgeDensityBoardLocator().locate(frame)
        assert result.detected is True
        assert result.confidence == pytest.approx(1.0)
        corners = result.corners
        for x, y in (corners.top_left, corners.top_right, corners.bottom_left, corners.bottom_right):
            assert 0 <= x <= 200
            assert 0 <= y <= 200
        assert corners.top_right[0] - corners.top_left[0] <= 160 + 1e-9

    def test_corners_centred_on_anchor_and_clipped(self) -> None:
        locator = EdgeDensityBoardLocator(grid_size=10)
        result = locator.locate_from_mask(_blank_frame(), _mask_with_cell_fill(5, 3, 20))
        assert result.detected is True
        assert result.confidence == pytest.approx(1.0)
        # anchor centre (55, 35), half side 40; the top edge is clipped to 0
        assert result.corners.top_left == pytest.approx((15.0, 0.0))
        assert result.corners.top_right == pytest.approx((95.0, 0.0))
        assert result.corners.bottom_left == pytest.approx((15.0, 75.0))
        assert result.corners.bottom_right == pytest.approx((95.0, 75.0))

    def test_low_density_is_not_detected(self) -> None:
        locator = EdgeDensityBoardLocator(grid_size=10)
        result = locator.locate_from_mask(_blank_frame(), _mask_with_cell_fill(2, 2, 3))
        assert result.detected is False
        assert result.corners is None
        assert result.confidence == pytest.approx(0.2)

    def test_confidence_monotonic_in_anchor_density(self) -> None:
        locator = EdgeDensityBoardLocator(grid_size=10)
        confidences = [
            locator.locate_from_mask(_blank_frame(), _mask_with_cell_fill(4, 4, count)).confidence
            for count in range(0, 101, 5)
        ]
        assert confidences == sorted(confidences)
        assert confidences[-1] == pytest.approx(1.0)

    def test_first_densest_cell_wins_ties(self) -> None:
        mask = _mask_with_cell_fill(7, 6, 50) | _mask_with_cell_fill(2, 1, 50)
        result = EdgeDensityBoardLocator(grid_size=10).locate_from_mask(_blank_frame(), mask)
        # cell (2, 1) comes first in row-major order, centre (25, 15)
        assert result.corners.top_left == pytest.approx((0.0, 0.0))
        assert result.corners.bottom_right == pytest.approx((65.0, 55.0))

    def test_board_uses_shorter_side(self) -> None:
        frame = _blank_frame(width=200, height=100)
        mask = np.zeros((100, 200), dtype=bool)
        mask[40:60, 90:110] = True
        result = EdgeDensityBoardLocator(grid_size=10).locate_from_mask(frame, mask)
        width = result.corners.top_right[0] - result.corners.top_left[0]
        height = result.corners.bottom_left[1] - result.corners.top_left[1]
        assert width == pytest.approx(80.0)
        assert height <= 80.0

    def test_locate_is_repeatable(self) -> None:
        idx = np.arange(100) // 10
        pattern = ((idx[:, None] + idx[None, :]) % 2 * 255).astype(np.uint8)
        frame = Frame(np.repeat(pattern[:, :, None], 3, axis=2))
        locator = EdgeDensityBoardLocator()
        assert locator.locate(frame) == locator.locate(frame)

    @pytest.mark.parametrize("kwargs", [
        {"grid_size": 0},
        {"reference_density": 0.0},
        {"board_ratio": 0.0},
        {"board_ratio": 1.5},
    ])
    def test_rejects_bad_settings(self, kwargs) -> None:
        with pytest.raises(ValueError):
            EdgeDensityBoardLocator(**kwargs)
