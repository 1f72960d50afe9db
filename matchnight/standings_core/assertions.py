"""
Fluent assertion interface for testing standings.

This module provides a clean, fluent way to assert computed standings for
testing purposes. It works with the pure standings_core structures; rows are
selected by display name (players) or by the two member names (pairs).
"""

from typing import List, Optional, Union
from dataclasses import dataclass

from matchnight.standings_core.aggregation import compute_standings
from matchnight.standings_core.stats import TeamStats
from matchnight.standings_core.structure import (
    MatchLog,
    PairStanding,
    PlayerStanding,
    Standings,
)


# Use the built-in AssertionError for proper test framework integration


def check_invariants(stats: TeamStats, label: str = "stats") -> TeamStats:
    """Assert the identities every aggregate must satisfy."""
    if stats.mp != stats.w + stats.d + stats.l:
        raise AssertionError(
            f"{label}: mp={stats.mp} but w+d+l={stats.w + stats.d + stats.l}"
        )
    if stats.pts != 3 * stats.w + stats.d:
        raise AssertionError(
            f"{label}: pts={stats.pts} but 3w+d={3 * stats.w + stats.d}"
        )
    if stats.gd != stats.gf - stats.ga:
        raise AssertionError(f"{label}: gd={stats.gd} but gf-ga={stats.gf - stats.ga}")
    return stats


@dataclass
class StandingsAssertion:
    """Fluent interface for asserting standings."""

    standings: Standings

    def _find_player(self, name: str) -> Optional[PlayerStanding]:
        return next((p for p in self.standings.players if p.display_name == name), None)

    def _find_pair(self, name1: str, name2: str) -> Optional[PairStanding]:
        labels = {f"{name1} & {name2}", f"{name2} & {name1}"}
        return next((p for p in self.standings.pairs if p.label in labels), None)

    def player(self, name: str) -> "RowAssertion":
        """Select a player row by display name."""
        row = self._find_player(name)
        if row is None:
            raise AssertionError(f"Player '{name}' not found in standings")
        return RowAssertion(name, row, self.standings.players)

    def pair(self, name1: str, name2: str) -> "RowAssertion":
        """Select a pair row by its members' display names, in any order."""
        row = self._find_pair(name1, name2)
        if row is None:
            raise AssertionError(f"Pair '{name1} & {name2}' not found in standings")
        return RowAssertion(row.label, row, self.standings.pairs)

    def no_player(self, name: str) -> "StandingsAssertion":
        """Assert a player has no row (no matches, or excluded from the scope)."""
        if self._find_player(name) is not None:
            raise AssertionError(f"Player '{name}' unexpectedly present in standings")
        return self

    def no_pair(self, name1: str, name2: str) -> "StandingsAssertion":
        if self._find_pair(name1, name2) is not None:
            raise AssertionError(
                f"Pair '{name1} & {name2}' unexpectedly present in standings"
            )
        return self

    def player_order(self, *names: str) -> "StandingsAssertion":
        """Assert the full player leaderboard order by display name."""
        actual = [p.display_name for p in self.standings.players]
        if actual != list(names):
            raise AssertionError(f"Expected player order {list(names)}, got {actual}")
        return self

    def pair_order(self, *labels: str) -> "StandingsAssertion":
        """Assert the full pair leaderboard order by label."""
        actual = [p.label for p in self.standings.pairs]
        if actual != list(labels):
            raise AssertionError(f"Expected pair order {list(labels)}, got {actual}")
        return self

    def invariants(self) -> "StandingsAssertion":
        """Assert mp/pts/gd identities on every row."""
        for row in self.standings.players:
            check_invariants(row.stats, row.display_name)
        for row in self.standings.pairs:
            check_invariants(row.stats, row.label)
        return self


class RowAssertion:
    """Assertions for a single standings row."""

    def __init__(
        self,
        label: str,
        row: Union[PlayerStanding, PairStanding],
        table: List[Union[PlayerStanding, PairStanding]],
    ):
        self.label = label
        self.row = row
        self.table = table

    def _check(self, field_name: str, expected: int) -> "RowAssertion":
        actual = getattr(self.row.stats, field_name)
        if actual != expected:
            raise AssertionError(
                f"{self.label} expected {field_name}={expected}, got {actual}"
            )
        return self

    def played(self, expected: int) -> "RowAssertion":
        return self._check("mp", expected)

    def wins(self, expected: int) -> "RowAssertion":
        return self._check("w", expected)

    def draws(self, expected: int) -> "RowAssertion":
        return self._check("d", expected)

    def losses(self, expected: int) -> "RowAssertion":
        return self._check("l", expected)

    def goals_for(self, expected: int) -> "RowAssertion":
        return self._check("gf", expected)

    def goals_against(self, expected: int) -> "RowAssertion":
        return self._check("ga", expected)

    def goal_difference(self, expected: int) -> "RowAssertion":
        return self._check("gd", expected)

    def points(self, expected: int) -> "RowAssertion":
        return self._check("pts", expected)

    def record(
        self, mp: int, w: int, d: int, l: int, gf: int, ga: int  # noqa: E741
    ) -> "RowAssertion":
        """Assert the whole line at once; gd and pts are derived and checked too."""
        self.played(mp).wins(w).draws(d).losses(l).goals_for(gf).goals_against(ga)
        check_invariants(self.row.stats, self.label)
        return self

    def position(self, expected: int) -> "RowAssertion":
        """Assert the 1-based leaderboard position."""
        actual = next(
            (i for i, row in enumerate(self.table, 1) if row is self.row), None
        )
        if actual != expected:
            raise AssertionError(
                f"{self.label} expected position {expected}, got {actual}"
            )
        return self


def assert_standings(
    source: Union[Standings, MatchLog], include_idle: bool = False
) -> StandingsAssertion:
    """Entry point for standings assertions; computes standings for a match log."""
    if isinstance(source, MatchLog):
        source = compute_standings(source, include_idle=include_idle)
    return StandingsAssertion(source)
