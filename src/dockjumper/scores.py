# src/dockjumper/scores.py
"""
Score persistence.

Two stores with the same interface:
  - MemoryScoreStore: process-lifetime only (headless env, tests)
  - JsonScoreStore:   a small JSON record next to the user's home

The simulation never depends on a store succeeding. Unreadable or corrupt data
loads as an empty scoreboard with a zero high score; failed writes are logged
and otherwise ignored.
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Iterable, List, Optional

from .config import SCOREBOARD_LIMIT, DEFAULT_PLAYER_NAME

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreEntry:
    name: str
    score: int
    timestamp: float    # seconds since the epoch

    @classmethod
    def from_dict(cls, raw: dict) -> "ScoreEntry":
        return cls(name=str(raw["name"]), score=int(raw["score"]), timestamp=float(raw["timestamp"]))


def rank_scores(entries: Iterable[ScoreEntry], limit: int = SCOREBOARD_LIMIT) -> List[ScoreEntry]:
    """Best score first; equal scores keep the earlier run ahead."""
    return sorted(entries, key=lambda e: (-e.score, e.timestamp))[:limit]


class MemoryScoreStore:
    def __init__(self, limit: int = SCOREBOARD_LIMIT):
        self.limit = limit
        self._high_score = 0
        self._scoreboard: List[ScoreEntry] = []
        self._player_name: Optional[str] = None

    def load_high_score(self) -> int:
        best = self._scoreboard[0].score if self._scoreboard else 0
        return max(self._high_score, best)

    def load_scoreboard(self) -> List[ScoreEntry]:
        return list(self._scoreboard)

    def record_finished_run(self, name: str, score: int, timestamp: float):
        if score <= 0:
            return
        self._scoreboard = rank_scores(
            self._scoreboard + [ScoreEntry(name, int(score), float(timestamp))], self.limit)
        self._high_score = max(self._high_score, int(score))
        self._save()

    def store_high_score(self, score: int):
        if score > self._high_score:
            self._high_score = int(score)
            self._save()

    def load_player_name(self) -> str:
        return self._player_name or DEFAULT_PLAYER_NAME

    def save_player_name(self, name: str):
        name = name.strip()
        self._player_name = name or DEFAULT_PLAYER_NAME
        self._save()

    def _save(self):
        pass


class JsonScoreStore(MemoryScoreStore):
    """
    File layout:
      {"high_score": 12,
       "player_name": "Ada",
       "scoreboard": [{"name": "Ada", "score": 12, "timestamp": 1718000000.0}, ...]}
    """
    def __init__(self, path: str | Path, limit: int = SCOREBOARD_LIMIT):
        super().__init__(limit)
        self.path = Path(path)
        self._load()

    def _load(self):
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return
        except (OSError, ValueError) as e:
            logger.warning("ignoring unreadable score file %s: %s", self.path, e)
            return
        if not isinstance(data, dict):
            logger.warning("ignoring malformed score file %s", self.path)
            return

        try:
            self._scoreboard = rank_scores(
                (ScoreEntry.from_dict(raw) for raw in data.get("scoreboard", [])), self.limit)
        except (TypeError, ValueError, KeyError, OverflowError) as e:
            logger.warning("dropping corrupt scoreboard in %s: %s", self.path, e)
            self._scoreboard = []

        try:
            self._high_score = max(0, int(data.get("high_score", 0)))
        except (TypeError, ValueError, OverflowError):
            self._high_score = 0

        name = data.get("player_name")
        if isinstance(name, str) and name.strip():
            self._player_name = name.strip()

    def _save(self):
        data = {
            "high_score": self._high_score,
            "player_name": self._player_name,
            "scoreboard": [asdict(e) for e in self._scoreboard],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # a crash mid-write must not truncate the previous record
            tmp = self.path.with_name(self.path.name + ".tmp")
            with tmp.open("w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            tmp.replace(self.path)
        except OSError as e:
            logger.warning("could not write score file %s: %s", self.path, e)
