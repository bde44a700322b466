from abc import ABC, abstractmethod
import logging
from typing import List

import numpy as np

from .config import OCCUPANCY_SETTINGS
from .edge_processing import to_luminance
from .utils import Frame, OccupancySet, SquarePosition

logger = logging.getLogger(__name__)


def region_brightness(luminance: np.ndarray, x: int, y: int, radius: int) -> float:
    """
    Mean luminance of the (2r+1)x(2r+1) window around (x, y). Pixels outside the
    image are left out of the average rather than counted as black.
    """
    height, width = luminance.shape
    x0, x1 = max(0, x - radius), min(width, x + radius + 1)
    y0, y1 = max(0, y - radius), min(height, y + radius + 1)
    if x0 >= x1 or y0 >= y1:
        return 0.0
    return float(luminance[y0:y1, x0:x1].mean())


class OccupancyClassifier(ABC):
    @abstractmethod
    def classify(self, frame: Frame, squares: List[SquarePosition]) -> OccupancySet:
        """Returns the labels of the squares judged to hold a piece."""


class BrightnessOccupancyClassifier(OccupancyClassifier):
    """
    Flags a square as occupied when its brightness strays from the board-wide mean
    by more than `delta`, in either direction. Piece colour is not distinguished.
    """

    def __init__(self, radius: int = None, delta: float = None):
        self.radius = OCCUPANCY_SETTINGS['radius'] if radius is None else radius
        self.delta = OCCUPANCY_SETTINGS['delta'] if delta is None else delta
        if self.radius < 0:
            raise ValueError(f"radius must not be negative, got {self.radius}")

    def square_brightness(self, frame: Frame, squares: List[SquarePosition]) -> List[float]:
        """Weighted luminance per square, not the plain (R+G+B)/3 channel average."""
        luminance = to_luminance(frame)
        return [region_brightness(luminance, sq.x, sq.y, self.radius) for sq in squares]

    def classify(self, frame: Frame, squares: List[SquarePosition]) -> OccupancySet:
        if not squares:
            return frozenset()

        brightness = self.square_brightness(frame, squares)
        mean_brightness = sum(brightness) / len(brightness)

        occupied = frozenset(
            sq.label for sq, value in zip(squares, brightness)
            if abs(value - mean_brightness) > self.delta
        )
        logger.debug(f"Mean square brightness {mean_brightness:.1f}, occupied: {sorted(occupied)}")
        return occupied
