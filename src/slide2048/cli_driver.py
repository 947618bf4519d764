# cli_driver.py
# Play the game in a terminal: python -m slide2048.cli_driver

from typing import Callable, List, Optional
import argparse
import logging
import random

from .config import LOG_LEVELS, GameConfig, load_settings
from .core import Board, Direction
from .errors import ConfigurationError
from .session import GameSession, GameStatus
from .storage import BestScoreStore, InMemoryBestScoreStore, JsonFileBestScoreStore

DIRECTION_KEYS = {'W': Direction.UP, 'A': Direction.LEFT, 'S': Direction.DOWN, 'D': Direction.RIGHT}
PROMPT = "Enter move (W/A/S/D for Up/Left/Down/Right, R to restart, Q to quit): "
MODAL_PROMPT = "C to continue, R to restart, Q to quit: "


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="slide2048", description="Play 2048 in the terminal.")
    try:
        settings = load_settings()
    except ConfigurationError as e:
        parser.error(str(e))
    parser.add_argument("--size", type=int, default=settings.board_size, help="board dimension (default: %(default)s)")
    parser.add_argument("--target", type=int, default=settings.target, help="winning tile (default: %(default)s)")
    parser.add_argument("--best-score-file", default=settings.best_score_file,
                        help="JSON file keeping the best score; kept in memory if omitted")
    parser.add_argument("--seed", type=int, default=None, help="seed the tile spawner for a reproducible game")
    parser.add_argument("--log-level", default=settings.log_level,
                        choices=LOG_LEVELS, type=str.upper)
    return parser


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = GameConfig(size=args.size, target=args.target)
    except ConfigurationError as e:
        parser.error(str(e))

    store: BestScoreStore = JsonFileBestScoreStore(args.best_score_file) if args.best_score_file \
        else InMemoryBestScoreStore()
    rng = random.Random(args.seed) if args.seed is not None else None
    session = GameSession(config, store, rng)
    display_board_state(session.board, session.score, session.best_score, session.status)

    while True:
        modal_showing = session.status != GameStatus.PLAYING
        try:
            key = input_fn(MODAL_PROMPT if modal_showing else PROMPT).strip().upper()
        except EOFError:
            key = 'Q'

        if key == 'Q':
            print("Quitting game.")
            break
        if key == 'R':
            session.restart()
        elif modal_showing:
            if key != 'C':
                continue
            session.dismiss()
        else:
            chosen_direction = DIRECTION_KEYS.get(key)
            if chosen_direction is None:
                print("Invalid input. Use W, A, S, D.")
                continue
            turn = session.move(chosen_direction)
            if not turn.moved and turn.status == GameStatus.PLAYING:
                print("Move did not change the board. Try a different direction.")

        display_board_state(session.board, session.score, session.best_score, session.status)
        if session.status == GameStatus.WON:
            print(f"Congratulations! You reached the {config.target} tile!")
        elif session.status == GameStatus.LOST:
            print("No more moves possible. Better luck next time!")

    print(f"\nFinal score: {session.score} (best {session.best_score})")
    return 0


# --- Display Function ---
def display_board_state(board: Board, score: int, best_score: int, progress: GameStatus):
    """Prints the board, score, and game status to the console."""
    print(f"\nScore: {score}\tBest: {best_score}")
    status_message = {
        GameStatus.PLAYING: f"Status: {progress.name}",
        GameStatus.WON: "YOU WON!",
        GameStatus.LOST: "GAME OVER!"
    }
    print(status_message[progress])

    width = max(len(str(value)) for row in board for value in row) + 1
    for row in board:
        print("".join((str(value) if value else ".").rjust(width) for value in row))
    print("-" * (len(board) * width))


if __name__ == "__main__":
    raise SystemExit(main())
