"""
Stats kernel for match-night standings.

This module defines how a single match outcome is classified from one side's
perspective and how it is folded into a running aggregate. Scoring is the
standard 3-1-0 football system; stored standings rows assume it.
"""

from typing import Iterable, Optional, Tuple
from dataclasses import dataclass, replace
from enum import Enum


class Outcome(Enum):
    """Result of a match from one side's perspective."""

    WIN = "win"
    DRAW = "draw"
    LOSS = "loss"


WIN_POINTS = 3
DRAW_POINTS = 1
LOSS_POINTS = 0


@dataclass(frozen=True)
class TeamStats:
    """Aggregate statistics for a player or a pair.

    ``gd`` is always ``gf - ga`` and is recomputed on every fold, never
    adjusted on its own.
    """

    mp: int = 0  # Matches played
    w: int = 0
    d: int = 0
    l: int = 0  # noqa: E741
    gf: int = 0  # Goals for
    ga: int = 0  # Goals against
    gd: int = 0  # Goal difference
    pts: int = 0

    def __add__(self, other: "TeamStats") -> "TeamStats":
        if not isinstance(other, TeamStats):
            return NotImplemented
        gf = self.gf + other.gf
        ga = self.ga + other.ga
        return TeamStats(
            mp=self.mp + other.mp,
            w=self.w + other.w,
            d=self.d + other.d,
            l=self.l + other.l,
            gf=gf,
            ga=ga,
            gd=gf - ga,
            pts=self.pts + other.pts,
        )

    def as_dict(self) -> dict:
        """Return the counters keyed by their column names."""
        return {
            "mp": self.mp,
            "w": self.w,
            "d": self.d,
            "l": self.l,
            "gf": self.gf,
            "ga": self.ga,
            "gd": self.gd,
            "pts": self.pts,
        }


def classify_result(goals_for: int, goals_against: int) -> Outcome:
    """Classify a match from the perspective of the side that scored ``goals_for``."""
    if goals_for > goals_against:
        return Outcome.WIN
    elif goals_for < goals_against:
        return Outcome.LOSS
    return Outcome.DRAW


def points_for(outcome: Outcome) -> int:
    """Return league points awarded for an outcome."""
    if outcome == Outcome.WIN:
        return WIN_POINTS
    elif outcome == Outcome.DRAW:
        return DRAW_POINTS
    return LOSS_POINTS


def empty_stats() -> TeamStats:
    """Return the zero aggregate, the seed of every fold."""
    return TeamStats()


def fold_match(stats: TeamStats, goals_for: int, goals_against: int) -> TeamStats:
    """
    Fold one match into an aggregate.

    Args:
        stats: The aggregate so far
        goals_for: Goals scored by the side being aggregated
        goals_against: Goals scored by the opposing side

    Returns:
        A new TeamStats; ``stats`` is left untouched
    """
    outcome = classify_result(goals_for, goals_against)
    gf = stats.gf + goals_for
    ga = stats.ga + goals_against

    return replace(
        stats,
        mp=stats.mp + 1,
        w=stats.w + (1 if outcome == Outcome.WIN else 0),
        d=stats.d + (1 if outcome == Outcome.DRAW else 0),
        l=stats.l + (1 if outcome == Outcome.LOSS else 0),
        gf=gf,
        ga=ga,
        gd=gf - ga,
        pts=stats.pts + points_for(outcome),
    )


def fold_matches(
    results: Iterable[Tuple[int, int]], start: Optional[TeamStats] = None
) -> TeamStats:
    """Fold a sequence of (goals_for, goals_against) tuples, in any order."""
    stats = start if start is not None else empty_stats()
    for goals_for, goals_against in results:
        stats = fold_match(stats, goals_for, goals_against)
    return stats
