# session.py
# Mutable play-session state driven by the stateless board engine.

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import logging

from . import core
from .config import GameConfig
from .core import Board, Direction
from .storage import BestScoreStore, InMemoryBestScoreStore

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Represents the current progress state of the game."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


def determine_game_status(board: Board, target: int = 2048, keep_playing: bool = False) -> GameStatus:
    """
    Determines the progress state of the game based on the board.
    Args:
        board (Board): The current game board.
        target (int): The tile value that signifies a win.
        keep_playing (bool): True once the player chose to continue past a win,
                             in which case reaching the target is no longer reported.
    Returns:
        GameStatus: WON takes priority over LOST when both hold.
    """
    if not keep_playing and core.has_reached_target(board, target):
        return GameStatus.WON
    if not core.has_available_moves(board):
        return GameStatus.LOST
    return GameStatus.PLAYING


@dataclass(frozen=True)
class TurnResult:
    """What happened when the player asked for a move."""
    accepted: bool  # False while a won/lost screen is showing
    moved: bool
    gained_score: int
    board: Board
    status: GameStatus


class GameSession:
    """
    One player's game: board, score, best score and won/lost state.

    The board engine is only ever called with the current board; all
    mutation happens here. The best score store and the random source are
    injected so the session can be replayed deterministically in tests.
    """

    def __init__(self, config: Optional[GameConfig] = None,
                 best_score_store: Optional[BestScoreStore] = None,
                 rng: Optional[Any] = None):
        self.config = config or GameConfig()
        self._store = best_score_store if best_score_store is not None else InMemoryBestScoreStore()
        self._rng = rng
        self.best_score = self._store.load()
        self.board: Board
        self.score: int
        self.status: GameStatus
        self.keep_playing: bool
        self.restart()

    @property
    def won(self) -> bool:
        return self.status == GameStatus.WON

    @property
    def lost(self) -> bool:
        return self.status == GameStatus.LOST

    @property
    def max_tile(self) -> int:
        return core.max_tile(self.board)

    def restart(self) -> None:
        """Starts over with a fresh board and zero score. The best score is kept."""
        self.board = core.initialize_board(self.config.size, self._rng)
        self.score = 0
        self.status = GameStatus.PLAYING
        self.keep_playing = False
        logger.info("New %dx%d game, target %d", self.config.size, self.config.size, self.config.target)

    def dismiss(self) -> None:
        """Closes the won/lost screen and goes back to playing with the same board and score."""
        if self.status == GameStatus.WON:
            self.keep_playing = True
        self.status = GameStatus.PLAYING

    def move(self, direction: Direction) -> TurnResult:
        """
        Plays one turn.

        A move that changes nothing leaves the board and score alone and
        spawns no tile; it only checks whether the game is lost.
        """
        if self.status != GameStatus.PLAYING:
            return TurnResult(False, False, 0, self.board, self.status)

        result = core.process_move(self.board, direction)
        if not result.moved:
            if not core.has_available_moves(self.board):
                self.status = GameStatus.LOST
            return TurnResult(True, False, 0, self.board, self.status)

        self.board = core.spawn_random_tile(result.board, self._rng)
        self.score += result.gained_score
        logger.debug("Moved %s: +%d (score %d)", direction.value, result.gained_score, self.score)
        self._record_best_score()
        self.status = determine_game_status(self.board, self.config.target, self.keep_playing)
        if self.status != GameStatus.PLAYING:
            logger.info("Game %s with score %d", self.status.value, self.score)
        return TurnResult(True, True, result.gained_score, self.board, self.status)

    def _record_best_score(self) -> None:
        if self.score > self.best_score:
            self.best_score = self.score
            self._store.save(self.score)
