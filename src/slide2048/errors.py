# errors.py
# Exceptions raised by the board engine and its shells.


class Slide2048Error(Exception):
    """Base class for all errors raised by slide2048."""


class ConfigurationError(Slide2048Error, ValueError):
    """Invalid game settings (board size, target tile)."""


class InvalidBoardError(Slide2048Error, ValueError):
    """A board that is not square or holds values that cannot appear in play."""
