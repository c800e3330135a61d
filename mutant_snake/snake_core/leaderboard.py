"""
Leaderboard
===========

Bounded, ranked high-score table keyed by player identity, persisted as a
JSON list of {"score": int, "wallet": str} objects.

Usage:
    store = LeaderboardStore("leaderboard.json")
    store.merge("0xabc", 17)
    for entry in store.entries:
        print(entry.player_id, entry.score)
"""

from __future__ import annotations

import json
import logging
import math
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

from mutant_snake.snake_core.config_loader import GameConfig, get_config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardEntry:
    """One player's best score."""
    player_id: str
    score: int

    def to_dict(self) -> dict:
        return {"score": self.score, "wallet": self.player_id}


def merge_entries(
    entries: Sequence[LeaderboardEntry],
    player_id: str,
    score: int,
    capacity: int
) -> List[LeaderboardEntry]:
    """
    Merge a finished run into a ranked list.

    An existing player's score is replaced only by a strictly greater one;
    otherwise a new entry is appended. The result is sorted descending by
    score (ties keep their previous order) and truncated to capacity.

    Args:
        entries: Current ranked entries.
        player_id: Player identity (wallet address or name).
        score: Final score of the run.
        capacity: Maximum number of entries kept.

    Returns:
        New list of entries. The input is not modified.
    """
    merged = list(entries)
    for i, entry in enumerate(merged):
        if entry.player_id == player_id:
            if score > entry.score:
                merged[i] = LeaderboardEntry(player_id, score)
            break
    else:
        merged.append(LeaderboardEntry(player_id, score))

    merged.sort(key=lambda e: e.score, reverse=True)
    return merged[:capacity]


def _parse_entry(raw: Any) -> Optional[LeaderboardEntry]:
    """Parse one persisted row; None if malformed."""
    if not isinstance(raw, dict):
        return None
    wallet = raw.get("wallet")
    score = raw.get("score")
    if not isinstance(wallet, str) or not wallet:
        return None
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    if isinstance(score, float) and not math.isfinite(score):
        return None
    if score < 0 or score != int(score):
        return None
    return LeaderboardEntry(player_id=wallet, score=int(score))


def parse_leaderboard(raw: Any, capacity: int) -> List[LeaderboardEntry]:
    """
    Build a valid ranked list from decoded JSON.

    Malformed rows are dropped and duplicate players keep their best score.
    Anything that is not a list yields an empty board.
    """
    if not isinstance(raw, list):
        return []

    entries: List[LeaderboardEntry] = []
    dropped = 0
    for row in raw:
        entry = _parse_entry(row)
        if entry is None:
            dropped += 1
            continue
        entries = merge_entries(entries, entry.player_id, entry.score, len(raw))

    if dropped:
        logger.warning("Dropped %d malformed leaderboard rows", dropped)
    return entries[:capacity]


class LeaderboardStore:
    """
    Process-wide leaderboard shared across sessions.

    Reads return immutable copies; merges and saves are serialized by a lock.
    With no path the store is memory-only.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        config: Optional[GameConfig] = None
    ):
        """
        Initialize store and load persisted entries.

        Args:
            path: JSON file backing the store. Memory-only if None.
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._path = Path(path) if path is not None else None
        self._capacity = config.leaderboard.capacity
        self._lock = threading.Lock()
        self._entries: Tuple[LeaderboardEntry, ...] = ()
        self._entries = tuple(self.load())

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> Tuple[LeaderboardEntry, ...]:
        """Current ranked entries (snapshot)."""
        return self._entries

    def best_score(self, player_id: str) -> Optional[int]:
        for entry in self._entries:
            if entry.player_id == player_id:
                return entry.score
        return None

    def load(self) -> List[LeaderboardEntry]:
        """
        Read entries from disk.

        Missing files give an empty board; unreadable ones are logged and
        treated as empty.
        """
        if self._path is None or not self._path.exists():
            return []

        try:
            with open(self._path, "r") as f:
                raw = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Leaderboard at %s is unreadable, starting empty: %s", self._path, e)
            return []

        if not isinstance(raw, list):
            logger.warning("Leaderboard at %s is not a list, starting empty", self._path)
            return []

        return parse_leaderboard(raw, self._capacity)

    def save(self) -> None:
        """Write entries to disk (no-op for memory-only stores)."""
        with self._lock:
            self._save_locked()

    def merge(self, player_id: str, score: int) -> Tuple[LeaderboardEntry, ...]:
        """
        Merge a run's final score and persist the result.

        Returns:
            The updated entries.
        """
        if score < 0:
            raise ValueError(f"Score must be non-negative, got {score}")

        with self._lock:
            merged = merge_entries(self._entries, player_id, score, self._capacity)
            if tuple(merged) == self._entries:
                logger.debug("Leaderboard unchanged by %s=%d", player_id, score)
                return self._entries
            self._entries = tuple(merged)
            self._save_locked()
            return self._entries

    def _save_locked(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        with open(tmp_path, "w") as f:
            json.dump([e.to_dict() for e in self._entries], f, indent=2)
        os.replace(tmp_path, self._path)
        logger.info("Leaderboard saved to %s (%d entries)", self._path, len(self._entries))
