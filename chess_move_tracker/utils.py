from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

import numpy as np
from shapely.geometry import Polygon

Point = Tuple[float, float]
OccupancySet = FrozenSet[str]


class InvalidFrame(ValueError):
    """Raised when a frame buffer is empty or not an HxWx3 / HxWx4 image."""


class InvalidCorners(ValueError):
    """Raised when board corners collapse or cross each other."""


class OracleUnavailable(RuntimeError):
    """Raised when the legal-move oracle fails or reports nothing to play."""


@dataclass(frozen=True, eq=False)
class Frame:
    pixels: np.ndarray

    def __post_init__(self):
        pixels = self.pixels
        if not isinstance(pixels, np.ndarray):
            raise InvalidFrame(f"Frame pixels must be a numpy array, got {type(pixels).__name__}")
        if pixels.ndim != 3 or pixels.shape[2] not in (3, 4):
            raise InvalidFrame(f"Frame must be HxWx3 or HxWx4, got shape {pixels.shape}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise InvalidFrame(f"Frame has zero width or height: {pixels.shape}")

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]


@dataclass(frozen=True)
class BoardCorners:
    top_left: Point
    top_right: Point
    bottom_left: Point
    bottom_right: Point

    def as_polygon(self) -> Polygon:
        # ring order: top edge left to right, then bottom edge right to left
        return Polygon([self.top_left, self.top_right, self.bottom_right, self.bottom_left])

    def validate(self) -> None:
        points = [self.top_left, self.top_right, self.bottom_left, self.bottom_right]
        if len(set(points)) != 4:
            raise InvalidCorners(f"Board corners are not distinct: {points}")
        polygon = self.as_polygon()
        if not polygon.is_valid or polygon.area <= 0:
            raise InvalidCorners(f"Board corners do not form a simple quadrilateral: {points}")
        # image y grows downwards, so a correctly ordered ring reads as counter-clockwise
        if not polygon.exterior.is_ccw:
            raise InvalidCorners(f"Board corners are mirrored or upside down: {points}")
        if not (self.top_left[0] < self.top_right[0] and self.bottom_left[0] < self.bottom_right[0]):
            raise InvalidCorners(f"Board edges must run left to right: {points}")
        if not (self.top_left[1] < self.bottom_left[1] and self.top_right[1] < self.bottom_right[1]):
            raise InvalidCorners(f"Top corners must lie above bottom corners: {points}")


@dataclass(frozen=True)
class DetectionResult:
    detected: bool
    corners: Optional[BoardCorners]
    confidence: float


@dataclass(frozen=True)
class SquarePosition:
    file: str
    rank: str
    x: int
    y: int

    @property
    def label(self) -> str:
        return f"{self.file}{self.rank}"


@dataclass(frozen=True)
class LegalMove:
    from_square: str
    to_square: str
    is_kingside_castling: bool = False
    is_queenside_castling: bool = False

    @property
    def is_castling(self) -> bool:
        return self.is_kingside_castling or self.is_queenside_castling


@dataclass(frozen=True)
class DetectedMove:
    from_square: str
    to_square: str
    confidence: float

    @property
    def uci(self) -> str:
        return f"{self.from_square}{self.to_square}"


@dataclass
class TrackerState:
    baseline: Optional[OccupancySet] = None
    last_observed: Optional[OccupancySet] = None
    stable_frame_count: int = 0
