# config.py
# Game settings and environment configuration.

from dataclasses import dataclass
from typing import Mapping, Optional
import os

from .core import MIN_BOARD_SIZE, is_power_of_two
from .errors import ConfigurationError

DEFAULT_BOARD_SIZE = 4
DEFAULT_TARGET = 2048
MIN_TARGET = 4
MAX_BOARD_SIZE = 64
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_game_settings(size: int, target: int) -> None:
    """
    Checks the settings a session is created with.
    Args:
        size (int): Board dimension, between 2 and MAX_BOARD_SIZE.
        target (int): Winning tile, must be a power of two >= 4 so it can be
                      reached by doubling from 2.
    Raises:
        ConfigurationError: If either value is unusable.
    """
    if not isinstance(size, int) or isinstance(size, bool) or not MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE:
        raise ConfigurationError(
            f"Board size must be an integer between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}, got {size!r}.")
    if not isinstance(target, int) or isinstance(target, bool) or target < MIN_TARGET or not is_power_of_two(target):
        raise ConfigurationError(f"Target must be a power of two >= {MIN_TARGET}, got {target!r}.")


@dataclass(frozen=True)
class GameConfig:
    """Settings fixed for the lifetime of a game session."""
    size: int = DEFAULT_BOARD_SIZE
    target: int = DEFAULT_TARGET

    def __post_init__(self):
        validate_game_settings(self.size, self.target)


@dataclass(frozen=True)
class Settings:
    """Game and terminal settings read from the environment."""
    board_size: int = DEFAULT_BOARD_SIZE
    target: int = DEFAULT_TARGET
    best_score_file: Optional[str] = None
    log_level: str = "WARNING"

    def game_config(self) -> GameConfig:
        return GameConfig(size=self.board_size, target=self.target)


@dataclass(frozen=True)
class ApiSettings:
    """Settings the HTTP API reads at import time."""
    rate_limit: str = "100/minute"
    rate_limit_enabled: bool = True


def _int_from_env(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from None


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Builds Settings from SLIDE2048_* environment variables.

    SLIDE2048_BOARD_SIZE, SLIDE2048_TARGET, SLIDE2048_BEST_SCORE_FILE,
    SLIDE2048_LOG_LEVEL.
    Raises:
        ConfigurationError: If a number does not parse or the log level is unknown.
    """
    environ = os.environ if environ is None else environ
    log_level = environ.get("SLIDE2048_LOG_LEVEL", "WARNING").upper()
    if log_level not in LOG_LEVELS:
        raise ConfigurationError(f"SLIDE2048_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}.")
    return Settings(
        board_size=_int_from_env(environ, "SLIDE2048_BOARD_SIZE", DEFAULT_BOARD_SIZE),
        target=_int_from_env(environ, "SLIDE2048_TARGET", DEFAULT_TARGET),
        best_score_file=environ.get("SLIDE2048_BEST_SCORE_FILE") or None,
        log_level=log_level,
    )


def load_api_settings(environ: Optional[Mapping[str, str]] = None) -> ApiSettings:
    """Builds ApiSettings from SLIDE2048_RATE_LIMIT and SLIDE2048_RATE_LIMIT_ENABLED."""
    environ = os.environ if environ is None else environ
    return ApiSettings(
        rate_limit=environ.get("SLIDE2048_RATE_LIMIT") or "100/minute",
        rate_limit_enabled=environ.get("SLIDE2048_RATE_LIMIT_ENABLED", "true").lower() not in ("0", "false", "no"),
    )
