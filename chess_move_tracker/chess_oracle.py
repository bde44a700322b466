import logging
from typing import List, Optional

import chess

from .move_inference import LegalMoveOracle
from .utils import DetectedMove, LegalMove

logger = logging.getLogger(__name__)


class ChessBoardOracle(LegalMoveOracle):
    """
    Legal-move oracle backed by a python-chess board. The board is the caller's
    game record: detected moves are applied with `push`.
    """

    def __init__(self, board: Optional[chess.Board] = None):
        self.board = board if board is not None else chess.Board()

    def legal_moves(self) -> List[LegalMove]:
        moves = []
        for m in self.board.legal_moves:
            moves.append(LegalMove(
                from_square=chess.square_name(m.from_square),
                to_square=chess.square_name(m.to_square),
                is_kingside_castling=self.board.is_kingside_castling(m),
                is_queenside_castling=self.board.is_queenside_castling(m),
            ))
        return moves

    def is_game_over(self) -> bool:
        return self.board.is_game_over()

    def to_move(self, detected: DetectedMove) -> chess.Move:
        move = chess.Move.from_uci(detected.uci)
        if move not in self.board.legal_moves:
            # occupancy cannot see the promoted piece, assume a queen
            move = chess.Move.from_uci(detected.uci + "q")
        if move not in self.board.legal_moves:
            raise ValueError(f"Move {detected.uci} is not legal in position {self.board.fen()}")
        return move

    def push(self, detected: DetectedMove) -> str:
        """Applies the move to the board and returns its SAN."""
        move = self.to_move(detected)
        san = self.board.san(move)
        self.board.push(move)
        logger.info(f"Applied {san} ({detected.uci}), position {self.board.fen()}")
        return san

    def reset(self) -> None:
        self.board.reset()
