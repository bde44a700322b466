import cv2
import numpy as np

from .config import EDGE_SETTINGS
from .utils import Frame

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def to_luminance(frame: Frame) -> np.ndarray:
    """
    Converts an RGB(A) frame to a float32 luminance image. The alpha channel is ignored.
    """
    rgb = frame.pixels[:, :, :3].astype(np.float32)
    return rgb @ LUMA_WEIGHTS


def build_edge_mask(frame: Frame, threshold: float = None) -> np.ndarray:
    """
    Returns a boolean mask of the same height and width as the frame, True where
    the 3x3 Sobel gradient magnitude exceeds the threshold.

    The outermost 1-pixel ring has no full neighbourhood and is never marked.
    """
    if threshold is None:
        threshold = EDGE_SETTINGS['threshold']

    mask = np.zeros((frame.height, frame.width), dtype=bool)
    if frame.height < 3 or frame.width < 3:
        return mask

    gray = to_luminance(frame)
    gx = cv2.Sobel(gray, cv2.CV_32F, 1, 0, ksize=3)
    gy = cv2.Sobel(gray, cv2.CV_32F, 0, 1, ksize=3)
    magnitude = cv2.magnitude(gx, gy)

    mask[1:-1, 1:-1] = magnitude[1:-1, 1:-1] > threshold
    return mask
