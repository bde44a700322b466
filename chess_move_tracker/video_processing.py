import logging
from typing import List

import cv2
import numpy as np

from .board_tracker import BoardPipeline
from .chess_oracle import ChessBoardOracle
from .config import INFERENCE_SETTINGS
from .utils import DetectedMove, Frame, InvalidFrame

logger = logging.getLogger(__name__)


class VideoProcessor:
    def __init__(self, video_path: str, pipeline: BoardPipeline, oracle: ChessBoardOracle):
        """
        Initialize video processor with required components.
        """
        self.cap = cv2.VideoCapture(video_path)
        if not self.cap.isOpened():
            raise ValueError(f"Could not open video: {video_path}")

        self.pipeline = pipeline
        self.oracle = oracle
        self.fps = int(self.cap.get(cv2.CAP_PROP_FPS)) or 1
        self.frame_interval = max(1, int(self.fps * INFERENCE_SETTINGS['frame_interval_seconds']))
        self.moves_detected: List[DetectedMove] = []
        self.board_visible = False

    def _process_single_frame(self, image_bgr: np.ndarray, frame_number: int):
        """Run one BGR video frame through the pipeline and apply any detected move."""
        try:
            frame = Frame(cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB))
        except (InvalidFrame, cv2.error) as e:
            logger.error(f"Skipping frame {frame_number}: {e}")
            return None

        result = self.pipeline.process(frame, self.oracle)

        if result.detection.detected != self.board_visible:
            self.board_visible = result.detection.detected
            state = "found" if self.board_visible else "lost"
            logger.info(f"Board {state} at frame {frame_number} "
                        f"(confidence {result.detection.confidence:.2f})")

        if result.move is not None:
            san = self.oracle.push(result.move)
            self.moves_detected.append(result.move)
            logger.info(f"Detected move at frame {frame_number}: {san}")
        return result

    def process_video(self) -> str:
        """
        Process entire video and return the game in numbered SAN notation.
        """
        start_board = self.oracle.board.root()
        try:
            frame_number = 0
            while self.cap.isOpened():
                ret, image = self.cap.read()
                if not ret:
                    break
                frame_number += 1

                if frame_number == 1 or frame_number % self.frame_interval == 0:
                    logger.debug(f"Processing frame {frame_number}")
                    self._process_single_frame(image, frame_number)

            logger.info(f"Processed {frame_number} frames, {len(self.moves_detected)} moves detected")
            return start_board.variation_san(self.oracle.board.move_stack)
        finally:
            self.cap.release()
