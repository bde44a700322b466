from abc import ABC, abstractmethod
import logging
from typing import AbstractSet, List, Optional, Tuple

from .config import MOVE_CONFIDENCE, TRACKER_SETTINGS
from .utils import DetectedMove, LegalMove, OracleUnavailable

logger = logging.getLogger(__name__)


class LegalMoveOracle(ABC):
    """Read-only view of the game in progress, supplied by the caller."""

    @abstractmethod
    def legal_moves(self) -> List[LegalMove]:
        ...

    @abstractmethod
    def is_game_over(self) -> bool:
        ...


def diff_occupancy(previous: AbstractSet[str], current: AbstractSet[str]) -> Tuple[List[str], List[str]]:
    """
    Returns (disappeared, appeared): squares emptied since the previous snapshot and
    squares newly filled, each sorted.
    """
    disappeared = sorted(set(previous) - set(current))
    appeared = sorted(set(current) - set(previous))
    return disappeared, appeared


def castling_squares(move: LegalMove) -> Tuple[set, set]:
    """
    Returns ({king_from, rook_from}, {king_to, rook_to}) for a standard castling move.
    """
    rank = move.from_square[1]
    if move.is_kingside_castling:
        rook_from, rook_to = f"h{rank}", f"f{rank}"
    else:
        rook_from, rook_to = f"a{rank}", f"d{rank}"
    return {move.from_square, rook_from}, {move.to_square, rook_to}


class MoveInferencer:
    """
    Turns an occupancy transition into a move the oracle accepts.

    Only two shapes are considered: one square emptied and one filled (a plain move
    or a move onto an empty square), and two emptied with two filled (castling).
    Everything else, captures and en passant included, yields no move.
    """

    def __init__(self, strict_castling: bool = None,
                 normal_confidence: float = None, castling_confidence: float = None):
        self.strict_castling = (TRACKER_SETTINGS['strict_castling']
                                if strict_castling is None else strict_castling)
        self.normal_confidence = MOVE_CONFIDENCE['normal'] if normal_confidence is None else normal_confidence
        self.castling_confidence = (MOVE_CONFIDENCE['castling']
                                    if castling_confidence is None else castling_confidence)

    def _query_oracle(self, oracle: LegalMoveOracle) -> List[LegalMove]:
        try:
            moves = list(oracle.legal_moves())
            game_over = oracle.is_game_over() if not moves else False
        except OracleUnavailable:
            raise
        except Exception as e:
            raise OracleUnavailable(f"Legal-move oracle failed: {e}") from e

        if not moves and not game_over:
            raise OracleUnavailable("Legal-move oracle returned no moves for a game in progress")
        return moves

    def infer(self, previous: AbstractSet[str], current: AbstractSet[str],
              oracle: LegalMoveOracle) -> Optional[DetectedMove]:
        disappeared, appeared = diff_occupancy(previous, current)

        if len(disappeared) == 1 and len(appeared) == 1:
            from_square, to_square = disappeared[0], appeared[0]
            for move in self._query_oracle(oracle):
                if move.from_square == from_square and move.to_square == to_square:
                    return DetectedMove(from_square, to_square, self.normal_confidence)
            logger.info(f"Transition {from_square}->{to_square} matches no legal move")
            return None

        if len(disappeared) == 2 and len(appeared) == 2:
            for move in self._query_oracle(oracle):
                if not move.is_castling:
                    continue
                if self.strict_castling:
                    vacated, filled = castling_squares(move)
                    if vacated != set(disappeared) or filled != set(appeared):
                        continue
                return DetectedMove(move.from_square, move.to_square, self.castling_confidence)
            logger.info(f"Two-square transition {disappeared}->{appeared} matches no castling move")
            return None

        if disappeared or appeared:
            logger.debug(f"Ignoring transition: {len(disappeared)} emptied, {len(appeared)} filled")
        return None


def infer_move(previous: AbstractSet[str], current: AbstractSet[str], oracle: LegalMoveOracle,
               strict_castling: bool = None) -> Optional[DetectedMove]:
    return MoveInferencer(strict_castling=strict_castling).infer(previous, current, oracle)
