# core.py
# Stateless board engine for the sliding-tile merging puzzle.

from enum import Enum
from typing import Any, List, NamedTuple, Optional, Sequence, Tuple
import random

from .errors import ConfigurationError, InvalidBoardError

EMPTY = 0
MIN_BOARD_SIZE = 2
SPAWN_FOUR_PROBABILITY = 0.1

Line = Tuple[int, ...]
Board = Tuple[Line, ...]


class Direction(Enum):
    """Represents the possible move directions."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


class MoveResult(NamedTuple):
    """Outcome of sliding a board in one direction, before any tile is spawned."""
    board: Board
    moved: bool
    gained_score: int


# --- Board Helper Functions ---

def is_power_of_two(value: int) -> bool:
    return value > 0 and value & (value - 1) == 0


def create_empty_board(size: int) -> Board:
    """
    Creates an N x N board with every cell empty.
    Args:
        size (int): The dimension of the board.
    Returns:
        Board: A board filled with EMPTY.
    Raises:
        ConfigurationError: If size is not an integer >= 2.
    """
    if not isinstance(size, int) or isinstance(size, bool) or size < MIN_BOARD_SIZE:
        raise ConfigurationError(f"Board size must be an integer >= {MIN_BOARD_SIZE}, got {size!r}.")
    return tuple((EMPTY,) * size for _ in range(size))


def get_board_size(board: Sequence[Sequence[int]]) -> int:
    """
    Gets the size (N) of an N x N board.
    Args:
        board: The game board.
    Returns:
        int: The dimension of the board.
    Raises:
        InvalidBoardError: If the board is not square or empty.
    """
    if not board or not all(len(row) == len(board) for row in board):
        raise InvalidBoardError("Board must be a non-empty square matrix.")
    return len(board)


def to_board(rows: Sequence[Sequence[Any]]) -> Board:
    """
    Validates a grid of cell values and freezes it into a Board.
    Args:
        rows: Any square grid of integers (lists, tuples...).
    Returns:
        Board: The same values as nested tuples.
    Raises:
        InvalidBoardError: If the grid is not square, smaller than 2 x 2, or
                           holds anything but EMPTY and powers of two >= 2.
    """
    n = get_board_size(rows)
    if n < MIN_BOARD_SIZE:
        raise InvalidBoardError(f"Board must be at least {MIN_BOARD_SIZE}x{MIN_BOARD_SIZE}.")
    for r, row in enumerate(rows):
        for c, value in enumerate(row):
            if not isinstance(value, int) or isinstance(value, bool):
                raise InvalidBoardError(f"Cell ({r}, {c}) is not an integer: {value!r}.")
            if value != EMPTY and (value < 2 or not is_power_of_two(value)):
                raise InvalidBoardError(f"Cell ({r}, {c}) must be empty or a power of two >= 2, got {value}.")
    return tuple(tuple(row) for row in rows)


def board_to_lists(board: Board) -> List[List[int]]:
    """Returns a mutable copy of the board, e.g. for JSON responses."""
    return [list(row) for row in board]


def get_empty_cells(board: Board) -> List[Tuple[int, int]]:
    """
    Get coordinates of empty cells in the given board.
    Args:
        board (Board): The board to check.
    Returns:
        List[Tuple[int, int]]: List of (row, col) tuples for empty cells, in row-major order.
    """
    n = get_board_size(board)
    return [(row, col) for row in range(n) for col in range(n) if board[row][col] == EMPTY]


def max_tile(board: Board) -> int:
    return max(max(row) for row in board)


def spawn_random_tile(board: Board, rng: Optional[Any] = None) -> Board:
    """
    Places a new tile (90% chance of 2, 10% chance of 4) on a uniformly chosen empty cell.
    Args:
        board (Board): The current game board. It is never modified.
        rng: Source of randomness providing ``choice`` and ``random``
             (e.g. a seeded ``random.Random``). Defaults to the ``random`` module.
    Returns:
        Board: A new board with one extra tile, or the very same board if it is full.
    """
    rng = rng or random
    empty_cells = get_empty_cells(board)
    if not empty_cells:
        return board

    row, col = rng.choice(empty_cells)
    value = 4 if rng.random() < SPAWN_FOUR_PROBABILITY else 2
    new_row = board[row][:col] + (value,) + board[row][col + 1:]
    return board[:row] + (new_row,) + board[row + 1:]


def initialize_board(size: int = 4, rng: Optional[Any] = None) -> Board:
    """
    Initializes a new game board with two random tiles.
    Args:
        size (int): The dimension of the N x N game board. Default is 4.
        rng: Optional random source, see spawn_random_tile.
    Returns:
        Board: The starting board.
    Raises:
        ConfigurationError: If board size is below 2.
    """
    board = create_empty_board(size)
    board = spawn_random_tile(board, rng)
    board = spawn_random_tile(board, rng)
    return board


# --- Line Manipulation (Core Move Logic Helpers) ---

def _compress_line(line: Sequence[int]) -> List[int]:
    """Drops empty cells, keeping the order of the remaining tiles."""
    return [value for value in line if value != EMPTY]


def _merge_line(tiles: List[int]) -> Tuple[List[int], int]:
    """
    Merges adjacent identical tiles of a compressed line (moving towards index 0).
    Args:
        tiles (List[int]): Non-empty tile values, already compressed.
    Returns:
        Tuple[List[int], int]: The merged tiles and the score gained from merges.
    """
    merged: List[int] = []
    score_gained = 0
    read_idx = 0

    while read_idx < len(tiles):
        current_val = tiles[read_idx]
        if read_idx + 1 < len(tiles) and current_val == tiles[read_idx + 1]:
            merged_value = current_val * 2
            merged.append(merged_value)
            score_gained += merged_value
            read_idx += 2  # the new tile is never compared again this move
        else:
            merged.append(current_val)
            read_idx += 1

    return merged, score_gained


def collapse_line(line: Sequence[int]) -> Tuple[Line, int]:
    """
    Slides and merges a single line towards index 0.
    Args:
        line: N cell values, already oriented so the move goes towards index 0.
    Returns:
        Tuple[Line, int]: The collapsed line padded with EMPTY to length N,
                          and the score gained in it.
    """
    merged, score_gained = _merge_line(_compress_line(line))
    merged += [EMPTY] * (len(line) - len(merged))
    return tuple(merged), score_gained


# --- Board Transformations ---

def transpose_board(board: Board) -> Board:
    """Swaps rows and columns."""
    return tuple(zip(*board))


def reverse_rows(board: Board) -> Board:
    """Reverses each row in a given board."""
    return tuple(row[::-1] for row in board)


# --- Core Game Move Processing ---

def move_left(board: Board) -> MoveResult:
    """
    Collapses every row towards column 0.
    Args:
        board (Board): The board to process.
    Returns:
        MoveResult: The new board, whether any row changed (a shift without a
                    merge counts), and the total score gained.
    """
    new_rows = []
    moved = False
    gained_score = 0

    for row in board:
        new_row, score_from_line = collapse_line(row)
        if new_row != tuple(row):
            moved = True
        gained_score += score_from_line
        new_rows.append(new_row)

    return MoveResult(tuple(new_rows), moved, gained_score)


def move_right(board: Board) -> MoveResult:
    result = move_left(reverse_rows(board))
    return MoveResult(reverse_rows(result.board), result.moved, result.gained_score)


def move_up(board: Board) -> MoveResult:
    result = move_left(transpose_board(board))
    return MoveResult(transpose_board(result.board), result.moved, result.gained_score)


def move_down(board: Board) -> MoveResult:
    result = move_right(transpose_board(board))
    return MoveResult(transpose_board(result.board), result.moved, result.gained_score)


_MOVES = {
    Direction.LEFT: move_left,
    Direction.RIGHT: move_right,
    Direction.UP: move_up,
    Direction.DOWN: move_down,
}


def process_move(board: Board, direction: Direction) -> MoveResult:
    """
    Slides the board in the specified direction.
    Args:
        board (Board): The current game board.
        direction (Direction): The direction to move.
    Returns:
        MoveResult: See move_left.
    Raises:
        ValueError: If an invalid direction is specified.
    """
    try:
        move = _MOVES[direction]
    except KeyError:
        raise ValueError(f"Invalid direction specified for process_move: {direction!r}.") from None
    return move(board)


# --- Game State Checks ---

def has_reached_target(board: Board, target: int = 2048) -> bool:
    """
    Check whether any tile is at least the target value.
    Args:
        board (Board): The game board.
        target (int): The tile value that signifies a win. Default is 2048.
    Returns:
        bool: True if some cell holds a value >= target.
    """
    return any(value >= target for row in board for value in row)


def has_available_moves(board: Board) -> bool:
    """
    Checks if any move is possible in any direction on the board.

    A move exists when there is an empty cell or two horizontally or
    vertically adjacent cells hold the same value. This agrees with
    ``moved`` as reported by the four move functions.
    Args:
        board (Board): The game board.
    Returns:
        bool: True if any move can be made, False otherwise.
    """
    n = get_board_size(board)
    for r in range(n):
        for c in range(n):
            value = board[r][c]
            if value == EMPTY:
                return True
            if c < n - 1 and value == board[r][c + 1]:
                return True
            if r < n - 1 and value == board[r + 1][c]:
                return True
    return False
