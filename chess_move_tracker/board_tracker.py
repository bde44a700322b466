from dataclasses import dataclass, replace
import logging
from typing import Optional

from .board_processing import BoardLocator, EdgeDensityBoardLocator
from .config import TRACKER_SETTINGS
from .move_inference import LegalMoveOracle, MoveInferencer
from .occupancy_processing import BrightnessOccupancyClassifier, OccupancyClassifier
from .square_processing import sample_squares
from .utils import BoardCorners, DetectedMove, DetectionResult, Frame, OccupancySet, TrackerState

logger = logging.getLogger(__name__)


class BoardStateTracker:
    """
    Holds the confirmed occupancy (the baseline) for one tracking session and only
    attempts move inference once a change has looked the same for
    `stability_threshold` consecutive frames, so hands and pieces in transit are
    not reported as moves.

    Create one tracker per physical board and call `reset` when a new game starts.
    """

    def __init__(self, classifier: OccupancyClassifier = None, inferencer: MoveInferencer = None,
                 stability_threshold: int = None):
        self.classifier = classifier if classifier is not None else BrightnessOccupancyClassifier()
        self.inferencer = inferencer if inferencer is not None else MoveInferencer()
        self.stability_threshold = (TRACKER_SETTINGS['stability_threshold']
                                    if stability_threshold is None else stability_threshold)
        if self.stability_threshold < 0:
            raise ValueError(f"stability_threshold must not be negative, got {self.stability_threshold}")
        self._state = TrackerState()

    @property
    def state(self) -> TrackerState:
        return replace(self._state)

    @property
    def is_initialized(self) -> bool:
        return self._state.baseline is not None

    def reset(self) -> None:
        logger.info("Tracker reset, next frame becomes the baseline")
        self._state = TrackerState()

    def process_frame(self, frame: Frame, corners: BoardCorners,
                      oracle: LegalMoveOracle) -> Optional[DetectedMove]:
        squares = sample_squares(corners)
        current = self.classifier.classify(frame, squares)
        return self.process_occupancy(current, oracle)

    def process_occupancy(self, current: OccupancySet, oracle: LegalMoveOracle) -> Optional[DetectedMove]:
        current = frozenset(current)
        state = self._state

        if state.baseline is None:
            state.baseline = current
            state.last_observed = current
            state.stable_frame_count = 0
            logger.info(f"Baseline set with {len(current)} occupied squares")
            return None

        if current == state.last_observed:
            state.stable_frame_count += 1
        else:
            state.stable_frame_count = 0
            state.last_observed = current

        if state.stable_frame_count < self.stability_threshold or current == state.baseline:
            return None

        move = self.inferencer.infer(state.baseline, current, oracle)
        if move is None:
            # baseline stays put, later frames get another chance
            logger.debug(f"Settled change after {state.stable_frame_count} frames gave no move")
            return None

        state.baseline = current
        state.stable_frame_count = 0
        logger.info(f"Detected move {move.uci} (confidence {move.confidence})")
        return move


@dataclass
class FrameResult:
    detection: DetectionResult
    move: Optional[DetectedMove]


class BoardPipeline:
    """Locates the board in each frame and feeds it to a tracker."""

    def __init__(self, locator: BoardLocator = None, tracker: BoardStateTracker = None):
        self.locator = locator if locator is not None else EdgeDensityBoardLocator()
        self.tracker = tracker if tracker is not None else BoardStateTracker()

    def process(self, frame: Frame, oracle: LegalMoveOracle) -> FrameResult:
        detection = self.locator.locate(frame)
        if not detection.detected:
            return FrameResult(detection, None)
        move = self.tracker.process_frame(frame, detection.corners, oracle)
        return FrameResult(detection, move)

    def reset(self) -> None:
        self.tracker.reset()
