# Configuration settings
VIDEO_PATHS = [
    './inputs/sample_input_video.mp4',
]

EDGE_SETTINGS = {
    'threshold': 100  # Sobel magnitude above which a pixel counts as an edge
}

BOARD_SETTINGS = {
    'grid_size': 20,
    'reference_density': 0.15,  # edge density expected inside a real grid pattern
    'min_confidence': 0.3,
    'board_ratio': 0.8  # board side as a fraction of the shorter frame dimension
}

OCCUPANCY_SETTINGS = {
    'radius': 20,
    'delta': 15
}

TRACKER_SETTINGS = {
    'stability_threshold': 3,
    'strict_castling': False
}

MOVE_CONFIDENCE = {
    'normal': 0.8,
    'castling': 0.7
}

INFERENCE_SETTINGS = {
    'frame_interval_seconds': 0.25  # Process every N seconds
}
