import json
import logging
import math
import os

from config import HIGHSCORE_PREFIX, HIGHSCORE_FILE

logger = logging.getLogger(__name__)


def highscore_key(mode_key):
    return f"{HIGHSCORE_PREFIX}{mode_key}"


class HighScoreStore:
    """Per-mode best values kept as text in a small JSON key/value file."""

    def __init__(self, path=None):
        if path is None:
            path = os.path.join(os.path.dirname(os.path.abspath(__file__)), HIGHSCORE_FILE)
        self.path = path

    def _read_all(self):
        if not os.path.isfile(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("high score file is not an object")
        return data

    def load(self, mode_key) -> float:
        try:
            raw = self._read_all().get(highscore_key(mode_key))
            if raw is None:
                return 0.0
            value = float(raw)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning("Ignoring unreadable high score for %s: %s", mode_key, exc)
            return 0.0
        if not math.isfinite(value) or value < 0:
            logger.warning("Ignoring invalid high score for %s: %r", mode_key, raw)
            return 0.0
        return value

    def save(self, mode_key, value):
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Rewriting corrupt high score file %s: %s", self.path, exc)
            data = {}
        data[highscore_key(mode_key)] = str(max(0.0, float(value)))
        tmp = self.path + ".tmp"
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as exc:
            logger.warning("Could not save high score for %s: %s", mode_key, exc)
            return False
        return True
