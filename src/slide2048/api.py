from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field
from typing import List, Optional
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
import logging

from . import core
from .config import DEFAULT_BOARD_SIZE, DEFAULT_TARGET, MAX_BOARD_SIZE, load_api_settings, validate_game_settings
from .session import GameStatus, determine_game_status

logger = logging.getLogger(__name__)
api_settings = load_api_settings()

# Initialize the rate limiter
limiter = Limiter(key_func=get_remote_address, enabled=api_settings.rate_limit_enabled)
app = FastAPI(
    title="2048 Game API",
    description="A stateless API for playing the 2048 game. "\
                "Manage your game state (board, score, win_tile) on the client side.",
    version="1.0.0"
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# --- Pydantic Models for API requests and responses ---

class NewGameSettings(BaseModel):
    """Settings for creating a new game."""
    size: int = Field(
        default=DEFAULT_BOARD_SIZE,
        gt=1, # Board size must be at least 2x2
        le=MAX_BOARD_SIZE,
        description="Size of the N x N game board (e.g., 4 for a 4x4 board)."
    )
    win_tile: int = Field(
        default=DEFAULT_TARGET,
        gt=0,
        description="The tile value to achieve for winning the game; a power of two >= 4."
    )

class GameStateData(BaseModel):
    """Represents the complete state of a game instance."""
    board: List[List[int]] = Field(..., description="The N x N game board; 0 marks an empty cell.")
    score: int = Field(..., ge=0, description="Current score of the game.")
    progress: GameStatus = Field(
        ...,
        description="Current progress state of the game (playing, won, lost)."
    )
    win_tile: int = Field(..., gt=0, description="The tile value required to win this game instance.")
    board_size: int = Field(..., gt=0, description="The dimension N of the N x N board.")


class MoveRequestData(BaseModel):
    """Data required to make a move."""
    board: List[List[int]] = Field(..., description="Current N x N game board state before the move.")
    score: int = Field(..., ge=0, description="Current score before the move.")
    direction: core.Direction = Field(
        ...,
        description="Direction of the move (up, down, left, right)."
    )
    win_tile: int = Field(..., gt=0, description="The win condition tile for this game instance.")
    keep_playing: bool = Field(
        default=False,
        description="Set once the player chose to continue after winning; the win is not reported again."
    )

class MoveResponseData(GameStateData):
    """Response after a move, including the new game state and move effectiveness."""
    move_was_effective: bool = Field(
        ...,
        description="True if the slide changed the board (a new tile was then spawned)."
    )
    gained_score: int = Field(..., ge=0, description="Sum of the tiles created by merges in this move.")
    message: Optional[str] = Field(
        default=None,
        description="An optional message, e.g., if a move was invalid, game ended, or other info."
    )

class BoardStatusRequest(BaseModel):
    """A board to evaluate without moving."""
    board: List[List[int]]
    win_tile: int = Field(default=DEFAULT_TARGET, gt=0)
    keep_playing: bool = False

class BoardStatusData(BaseModel):
    progress: GameStatus
    reached_target: bool
    moves_available: bool
    max_tile: int


def _parse_board(rows: List[List[int]]) -> core.Board:
    try:
        return core.to_board(rows)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid board structure in request: {str(e)}")


def _check_settings(size: int, win_tile: int) -> None:
    try:
        validate_game_settings(size, win_tile)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

# --- API Endpoints ---

@app.post("/game/new", response_model=GameStateData, summary="Start a New 2048 Game")
@limiter.limit(api_settings.rate_limit)
async def start_new_game(request: Request, settings: NewGameSettings):
    """
    Initializes a new 2048 game based on the provided settings (size and win_tile).

    - **size**: Dimension of the N x N board (e.g., 4 for 4x4). Default is 4.
    - **win_tile**: Tile value to reach to win (e.g., 2048). Default is 2048.

    Returns the initial game state, including the board with two random tiles,
    score (0), progress status (playing), and the specified win_tile.
    """
    _check_settings(settings.size, settings.win_tile)
    try:
        initial_board = core.initialize_board(settings.size)
    except Exception:
        logger.exception("Unexpected error in /game/new")
        raise HTTPException(status_code=500, detail="An unexpected error occurred during game creation.")

    logger.info("New %dx%d game, win tile %d", settings.size, settings.size, settings.win_tile)
    return GameStateData(
        board=core.board_to_lists(initial_board),
        score=0,
        progress=GameStatus.PLAYING,
        win_tile=settings.win_tile,
        board_size=settings.size
    )


@app.post("/game/move", response_model=MoveResponseData, summary="Make a Move in the Game")
@limiter.limit(api_settings.rate_limit)
async def make_move(request: Request, request_data: MoveRequestData):
    """
    Processes a player's move in the game.

    Requires the current `board` state, `score`, the `direction` of the move,
    and the `win_tile` for this game instance.

    The API will:
    1. Attempt to process the move (slide tiles, merge).
    2. If the move changed the board, add a new random tile (2 or 4).
    3. Determine the new game status (playing, won, lost).

    Returns the updated game state, whether the move was effective, and an optional message.
    """
    current_board = _parse_board(request_data.board)
    board_size = core.get_board_size(current_board)
    _check_settings(board_size, request_data.win_tile)

    final_board = current_board
    final_score = request_data.score
    message_for_client: Optional[str] = None

    try:
        # Step 1: Process the slide and merge logic for the chosen direction
        result = core.process_move(current_board, request_data.direction)

        if result.moved:
            # Step 2: Only an effective slide earns points and a new tile
            final_score += result.gained_score
            final_board = core.spawn_random_tile(result.board)
        else:
            message_for_client = "Move was not effective; board state unchanged by slide."

        # Step 3: Determine the new game status
        current_progress = determine_game_status(final_board, request_data.win_tile, request_data.keep_playing)
    except Exception:
        logger.exception("Unexpected error in /game/move")
        raise HTTPException(status_code=500, detail="An unexpected server error occurred while processing the move.")

    if current_progress == GameStatus.WON:
        message_for_client = "Congratulations! You won!"
    elif current_progress == GameStatus.LOST:
        message_for_client = "Game Over. No more valid moves."

    return MoveResponseData(
        board=core.board_to_lists(final_board),
        score=final_score,
        progress=current_progress,
        win_tile=request_data.win_tile,
        board_size=board_size,
        move_was_effective=result.moved,
        gained_score=result.gained_score if result.moved else 0,
        message=message_for_client
    )


@app.post("/game/status", response_model=BoardStatusData, summary="Evaluate a Board")
@limiter.limit(api_settings.rate_limit)
async def board_status(request: Request, request_data: BoardStatusRequest):
    """Reports whether the board has reached the win tile and whether any move is left."""
    board = _parse_board(request_data.board)
    _check_settings(core.get_board_size(board), request_data.win_tile)
    return BoardStatusData(
        progress=determine_game_status(board, request_data.win_tile, request_data.keep_playing),
        reached_target=core.has_reached_target(board, request_data.win_tile),
        moves_available=core.has_available_moves(board),
        max_tile=core.max_tile(board),
    )
