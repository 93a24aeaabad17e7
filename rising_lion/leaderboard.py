"""
Leaderboard
============
High-score persistence behind a small store interface, plus the
boundary service the game talks to. Store failures never reach the
simulation: the service logs them and answers with an empty board.
"""

import json
import logging
import re
import time
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional, Protocol, Union

logger = logging.getLogger(__name__)

DEFAULT_NAME = 'Anonymous'
NAME_CHARS = re.compile(r'[a-zA-Z0-9 \-_.]')


class LeaderboardError(Exception):
    """A store could not be read or written."""


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    score: int
    timestamp: float


class LeaderboardStore(Protocol):
    def fetch_top(self, n: int) -> List[LeaderboardEntry]:
        """Best n entries, highest score first, earlier arrival first on ties."""
        ...

    def submit(self, name: str, score: int) -> None:
        ...


def rank(entries: List[LeaderboardEntry], n: int) -> List[LeaderboardEntry]:
    """Order by score, keeping arrival order for ties (sort is stable)."""
    return sorted(entries, key=lambda e: e.score, reverse=True)[:max(0, n)]


class MemoryStore:
    """Process-local store."""

    def __init__(self, entries: Optional[List[LeaderboardEntry]] = None):
        self.entries: List[LeaderboardEntry] = list(entries or [])

    def fetch_top(self, n: int) -> List[LeaderboardEntry]:
        return rank(self.entries, n)

    def submit(self, name: str, score: int) -> None:
        self.entries.append(LeaderboardEntry(name, int(score), time.time()))


class JsonFileStore:
    """
    Store rows in a JSON array on disk.

    A missing file is an empty board. A corrupt file raises
    LeaderboardError; the service turns that into "no scores yet".
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> List[LeaderboardEntry]:
        if not self.path.exists():
            return []
        try:
            rows = json.loads(self.path.read_text(encoding='utf-8'))
            return [
                LeaderboardEntry(str(r['name']), int(r['score']), float(r['timestamp']))
                for r in rows
            ]
        except (OSError, ValueError, KeyError, TypeError) as exc:
            raise LeaderboardError(f'unreadable leaderboard {self.path}: {exc}') from exc

    def fetch_top(self, n: int) -> List[LeaderboardEntry]:
        return rank(self._read(), n)

    def submit(self, name: str, score: int) -> None:
        entries = self._read()
        entries.append(LeaderboardEntry(name, int(score), time.time()))
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self.path.with_suffix(self.path.suffix + '.tmp')
            tmp.write_text(json.dumps([asdict(e) for e in entries], indent=2),
                           encoding='utf-8')
            tmp.replace(self.path)
        except OSError as exc:
            raise LeaderboardError(f'cannot write leaderboard {self.path}: {exc}') from exc


class Leaderboard:
    """
    Boundary service between the game and a store.

    Keeps the last fetched board in `entries` for the top-scores screen.
    With no store configured every call is a no-op.
    """

    def __init__(self, store: Optional[LeaderboardStore], slots: int = 3):
        self.store = store
        self.slots = slots
        self.entries: List[LeaderboardEntry] = []

    @property
    def available(self) -> bool:
        return self.store is not None

    def refresh(self) -> List[LeaderboardEntry]:
        """Reload the board. Failures leave an empty board."""
        if self.store is None:
            self.entries = []
            return self.entries
        try:
            self.entries = list(self.store.fetch_top(self.slots))
        except Exception as exc:  # any store failure leaves the game running
            logger.warning('Failed to load high scores: %s', exc)
            self.entries = []
        return self.entries

    def scores(self) -> List[int]:
        return [e.score for e in self.refresh()]

    def submit(self, name: str, score: int) -> bool:
        """Persist a score. Returns False when the store refused it."""
        clean = clean_name(name)
        if self.store is None:
            logger.warning('No leaderboard store, cannot save %s=%d', clean, score)
            return False
        try:
            self.store.submit(clean, score)
        except Exception as exc:
            logger.warning('Failed to save high score: %s', exc)
            return False
        logger.info('High score saved: %s=%d', clean, score)
        self.refresh()
        return True


def clean_name(name: Optional[str]) -> str:
    return (name or '').strip() or DEFAULT_NAME


class NameEntry:
    """Text buffer for the name-input screen."""

    def __init__(self, max_length: int = 12):
        self.max_length = max_length
        self.text = ''

    def type_char(self, char: str) -> bool:
        """Append one allowed character. Anything else is ignored."""
        if len(char) != 1 or len(self.text) >= self.max_length:
            return False
        if not NAME_CHARS.fullmatch(char):
            return False
        self.text += char
        return True

    def type_text(self, text: str) -> int:
        """Type a whole string; returns how many characters were kept."""
        return sum(self.type_char(char) for char in text)

    def backspace(self) -> None:
        self.text = self.text[:-1]

    def clear(self) -> None:
        self.text = ''
