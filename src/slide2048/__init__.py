"""Rule engine for the 2048 sliding-tile merging puzzle."""

from .core import (
    Board,
    Direction,
    EMPTY,
    MoveResult,
    collapse_line,
    create_empty_board,
    has_available_moves,
    has_reached_target,
    move_down,
    move_left,
    move_right,
    move_up,
    process_move,
    spawn_random_tile,
)
from .config import GameConfig
from .errors import ConfigurationError, InvalidBoardError, Slide2048Error
from .session import GameSession, GameStatus, TurnResult

__version__ = "1.0.0"
