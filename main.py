import logging
from chess_move_tracker.config import VIDEO_PATHS
from chess_move_tracker.board_tracker import BoardPipeline
from chess_move_tracker.chess_oracle import ChessBoardOracle
from chess_move_tracker.video_processing import VideoProcessor
import pandas as pd

logging.basicConfig(level=logging.INFO)

def main():
    data_for_csv = []
    for video_path in VIDEO_PATHS:
        # one pipeline and one game per video, nothing carries over
        pipeline = BoardPipeline()
        oracle = ChessBoardOracle()

        video_processor = VideoProcessor(video_path, pipeline, oracle)
        moves_notation = video_processor.process_video()

        video_name = video_path.split('/')[-1]
        data_for_csv.append({"row_id": video_name, "output": moves_notation})

    submission_df = pd.DataFrame(data_for_csv)
    submission_df.to_csv("result.csv", index=False, encoding="utf-8")
    logging.info("Processing complete. Results saved to result.csv")

if __name__ == "__main__":
    main()
