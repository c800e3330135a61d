"""
Scoring System
==============

Awards points per consumption, maps cumulative score to evolution tiers and
detects milestone and reward-threshold crossings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set

from mutant_snake.snake_core.config_loader import GameConfig, get_config


class EvolutionTier(str, Enum):
    """Status label derived from cumulative score."""
    TINY = "tiny"
    AGILE = "agile"
    ARMORED = "armored"
    LEGENDARY = "legendary"

    @property
    def rank(self) -> int:
        return list(EvolutionTier).index(self)


def tier_for_score(score: int, config: Optional[GameConfig] = None) -> EvolutionTier:
    """
    Evolution tier for a cumulative score.

    Pure function of score against the ascending config thresholds.
    """
    if config is None:
        config = get_config()

    tier = EvolutionTier(config.scoring.evolution[0].tier)
    for threshold in config.scoring.evolution:
        if score >= threshold.min_score:
            tier = EvolutionTier(threshold.tier)
    return tier


@dataclass
class ScoreEvent:
    """Record of one consumption's scoring consequences."""
    points: int
    score: int
    doubled: bool
    tier: EvolutionTier
    tier_changed: bool = False
    milestones: List[str] = field(default_factory=list)
    thresholds: List[int] = field(default_factory=list)

    def __repr__(self) -> str:
        extra = ""
        if self.tier_changed:
            extra += f", evolved={self.tier.value}"
        if self.milestones:
            extra += f", milestones={self.milestones}"
        if self.thresholds:
            extra += f", thresholds={self.thresholds}"
        return f"ScoreEvent(+{self.points} -> {self.score}{extra})"


class ScoreTracker:
    """
    Tracks score, evolution tier and one-shot notifications for a session.

    Each milestone fires when the score lands exactly on its value. Each
    reward threshold fires once when the score first reaches it; several
    crossed by one consumption fire in ascending order.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._base_points = config.scoring.base_points
        self._multiplier = config.scoring.double_points_multiplier
        self._milestones = config.scoring.milestone_labels
        self._thresholds = config.scoring.reward_thresholds

        self._score: int = 0
        self._catches: int = 0
        self._tier = tier_for_score(0, config)
        self._fired_milestones: Set[int] = set()
        self._fired_thresholds: Set[int] = set()

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def catches(self) -> int:
        """Items consumed this session."""
        return self._catches

    @property
    def tier(self) -> EvolutionTier:
        return self._tier

    def on_consume(self, double_points_active: bool) -> int:
        """Points for one consumption."""
        if double_points_active:
            return self._base_points * self._multiplier
        return self._base_points

    @staticmethod
    def apply_score(current: int, points_awarded: int) -> int:
        return current + points_awarded

    def apply_consumption(self, double_points_active: bool) -> ScoreEvent:
        """
        Score one consumption and evaluate tier, milestones and thresholds.

        Args:
            double_points_active: True if a pending double-points flag was consumed.

        Returns:
            ScoreEvent describing what happened.
        """
        points = self.on_consume(double_points_active)
        self._score = self.apply_score(self._score, points)
        self._catches += 1
        assert self._score >= 0

        new_tier = tier_for_score(self._score, self._config)
        tier_changed = new_tier.rank > self._tier.rank
        if tier_changed:
            self._tier = new_tier

        milestones = []
        label = self._milestones.get(self._score)
        if label is not None and self._score not in self._fired_milestones:
            self._fired_milestones.add(self._score)
            milestones.append(label)

        thresholds = []
        for threshold in self._thresholds:
            if threshold <= self._score and threshold not in self._fired_thresholds:
                self._fired_thresholds.add(threshold)
                thresholds.append(threshold)

        return ScoreEvent(
            points=points,
            score=self._score,
            doubled=double_points_active,
            tier=self._tier,
            tier_changed=tier_changed,
            milestones=milestones,
            thresholds=thresholds
        )

    def resume(self, score: int, catches: int = 0) -> None:
        """
        Continue a session at a given score and catch count.

        Notifications at or below the score count as already fired.
        """
        if score < 0:
            raise ValueError(f"Score must be non-negative, got {score}")
        self._score = score
        self._catches = max(0, catches)
        self._tier = tier_for_score(score, self._config)
        self._fired_milestones = {s for s in self._milestones if s <= score}
        self._fired_thresholds = {t for t in self._thresholds if t <= score}

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._catches = 0
        self._tier = tier_for_score(0, self._config)
        self._fired_milestones = set()
        self._fired_thresholds = set()
