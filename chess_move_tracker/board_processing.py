from abc import ABC, abstractmethod
import logging

import numpy as np

from .config import BOARD_SETTINGS, EDGE_SETTINGS
from .edge_processing import build_edge_mask
from .utils import BoardCorners, DetectionResult, Frame

logger = logging.getLogger(__name__)


def cell_density(edge_mask: np.ndarray, grid_size: int) -> np.ndarray:
    """
    Splits the mask into a grid_size x grid_size grid and returns the fraction of
    edge pixels in each cell. Cells that receive no pixels (frames smaller than the
    grid) get a density of 0.
    """
    height, width = edge_mask.shape
    ys = (np.arange(grid_size + 1) * height) // grid_size
    xs = (np.arange(grid_size + 1) * width) // grid_size

    densities = np.zeros((grid_size, grid_size), dtype=np.float64)
    for gy in range(grid_size):
        for gx in range(grid_size):
            cell = edge_mask[ys[gy]:ys[gy + 1], xs[gx]:xs[gx + 1]]
            if cell.size:
                densities[gy, gx] = np.count_nonzero(cell) / cell.size
    return densities


class BoardLocator(ABC):
    @abstractmethod
    def locate(self, frame: Frame) -> DetectionResult:
        """Finds the board in a single frame. Must not keep state between calls."""


class EdgeDensityBoardLocator(BoardLocator):
    """
    Coarse locator: the board is assumed to sit around the grid cell with the
    densest edges, scaled to a fixed share of the shorter frame side. It recovers
    scale and rough centring only, never rotation or perspective.
    """

    def __init__(self, grid_size: int = None, reference_density: float = None,
                 min_confidence: float = None, board_ratio: float = None,
                 edge_threshold: float = None):
        self.grid_size = BOARD_SETTINGS['grid_size'] if grid_size is None else grid_size
        self.reference_density = (BOARD_SETTINGS['reference_density']
                                  if reference_density is None else reference_density)
        self.min_confidence = BOARD_SETTINGS['min_confidence'] if min_confidence is None else min_confidence
        self.board_ratio = BOARD_SETTINGS['board_ratio'] if board_ratio is None else board_ratio
        self.edge_threshold = EDGE_SETTINGS['threshold'] if edge_threshold is None else edge_threshold

        if self.grid_size < 1:
            raise ValueError(f"grid_size must be at least 1, got {self.grid_size}")
        if self.reference_density <= 0:
            raise ValueError(f"reference_density must be positive, got {self.reference_density}")
        if not 0 < self.board_ratio <= 1:
            raise ValueError(f"board_ratio must be in (0, 1], got {self.board_ratio}")

    def locate(self, frame: Frame) -> DetectionResult:
        edge_mask = build_edge_mask(frame, self.edge_threshold)
        return self.locate_from_mask(frame, edge_mask)

    def locate_from_mask(self, frame: Frame, edge_mask: np.ndarray) -> DetectionResult:
        densities = cell_density(edge_mask, self.grid_size)
        # argmax keeps the first cell in row-major order on ties
        anchor_y, anchor_x = np.unravel_index(np.argmax(densities), densities.shape)
        max_density = float(densities[anchor_y, anchor_x])

        confidence = min(1.0, max_density / self.reference_density)
        if confidence < self.min_confidence:
            logger.debug(f"No board: max edge density {max_density:.3f}, confidence {confidence:.2f}")
            return DetectionResult(detected=False, corners=None, confidence=confidence)

        cell_width = frame.width / self.grid_size
        cell_height = frame.height / self.grid_size
        center_x = (anchor_x + 0.5) * cell_width
        center_y = (anchor_y + 0.5) * cell_height
        half = min(frame.width, frame.height) * self.board_ratio / 2

        left = max(0.0, center_x - half)
        right = min(float(frame.width), center_x + half)
        top = max(0.0, center_y - half)
        bottom = min(float(frame.height), center_y + half)

        corners = BoardCorners(
            top_left=(left, top),
            top_right=(right, top),
            bottom_left=(left, bottom),
            bottom_right=(right, bottom),
        )
        logger.debug(f"Board anchored at cell ({anchor_x}, {anchor_y}) with confidence {confidence:.2f}: {corners}")
        return DetectionResult(detected=True, corners=corners, confidence=confidence)
