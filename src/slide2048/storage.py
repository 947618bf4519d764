# storage.py
# Best-score persistence used by the session shell.

from pathlib import Path
from typing import Union
import json
import logging
import os

logger = logging.getLogger(__name__)


class BestScoreStore:
    """Where a session reads its best score at start and writes new records."""

    def load(self) -> int:
        raise NotImplementedError

    def save(self, score: int) -> None:
        raise NotImplementedError


class InMemoryBestScoreStore(BestScoreStore):
    def __init__(self, initial: int = 0):
        self.best_score = initial

    def load(self) -> int:
        return self.best_score

    def save(self, score: int) -> None:
        self.best_score = score


class JsonFileBestScoreStore(BestScoreStore):
    """
    Keeps the best score in a small JSON document: {"best_score": N}.

    A missing file reads as 0. A file that cannot be parsed is reported
    and also reads as 0, so the next record overwrites it.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            best = int(data.get("best_score", 0))
        except (OSError, ValueError, TypeError, AttributeError, OverflowError) as e:
            logger.warning("Ignoring unreadable best score file %s: %s", self.path, e)
            return 0
        return max(best, 0)

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as f:
            json.dump({"best_score": score}, f)
        os.replace(tmp_path, self.path)
        logger.info("Saved best score %d to %s", score, self.path)
