"""
Builder for creating match logs with a fluent API.

This module provides builder classes for creating standings_core structures
by player name instead of by identifier. They are used by the tests and by
the demo data seeder, and need no database.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple, Union

from matchnight.standings_core.structure import (
    MAX_GOALS,
    MatchLog,
    MatchResult,
    PairIdentity,
    Player,
    validate_match,
)

Score = Union[str, Tuple[int, int]]

DEFAULT_START = datetime(2024, 1, 1, 19, 0)


def parse_score(score: Score) -> Tuple[int, int]:
    """Convert a "3-1" style string (or a tuple) to (team_a_goals, team_b_goals)."""
    if isinstance(score, tuple):
        if len(score) != 2:
            raise ValueError(f"Score must have two values, got {score!r}")
        return int(score[0]), int(score[1])

    parts = str(score).split("-")
    if len(parts) != 2:
        raise ValueError(f"Invalid score: {score!r}")
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        raise ValueError(f"Invalid score: {score!r}") from None


class MatchLogBuilder:
    """Builder for a single session's roster and matches."""

    def __init__(
        self,
        scope: str = "",
        id_prefix: str = "p",
        start: datetime = DEFAULT_START,
        max_goals: Optional[int] = MAX_GOALS,
    ):
        self.scope = scope
        self.id_prefix = id_prefix
        self.max_goals = max_goals
        self.players_by_name: Dict[str, Player] = {}
        self.matches: List[MatchResult] = []
        self._next_player_id = 1
        self._clock = start

    def _get_or_create_player(
        self, name: str, account: Optional[str] = None
    ) -> Player:
        player = self.players_by_name.get(name)
        if player is None:
            player = Player(f"{self.id_prefix}{self._next_player_id}", name, account)
            self._next_player_id += 1
            self.players_by_name[name] = player
        return player

    def player(self, name: str, account: Optional[str] = None) -> "MatchLogBuilder":
        """Add a player, linked to ``account`` when given."""
        if name in self.players_by_name:
            raise ValueError(f"Player already added: {name}")
        self._get_or_create_player(name, account)
        return self

    def guest(self, name: str) -> "MatchLogBuilder":
        """Add a player without a linked account."""
        return self.player(name)

    def players(self, *names: str) -> "MatchLogBuilder":
        """Add several guest players at once."""
        for name in names:
            self.player(name)
        return self

    def player_id(self, name: str) -> str:
        player = self.players_by_name.get(name)
        if player is None:
            raise ValueError(f"Player not found: {name}")
        return player.player_id

    def pair_id(self, name1: str, name2: str) -> PairIdentity:
        return PairIdentity.of(self.player_id(name1), self.player_id(name2))

    def match(
        self,
        team_a: Sequence[str],
        team_b: Sequence[str],
        score: Score,
        validate: bool = True,
    ) -> "MatchLogBuilder":
        """Log a match between two named sides.

        Args:
            team_a: Names of the players on side A
            team_b: Names of the players on side B
            score: "3-1" style string or (3, 1), side A first
            validate: Check the match invariants now (turn off to build bad data)
        """
        team_a_goals, team_b_goals = parse_score(score)
        result = MatchResult(
            team_a=tuple(self.player_id(name) for name in team_a),
            team_b=tuple(self.player_id(name) for name in team_b),
            team_a_goals=team_a_goals,
            team_b_goals=team_b_goals,
            played_at=self._clock,
            match_id=f"{self.id_prefix}m{len(self.matches) + 1}",
        )
        if validate:
            validate_match(result, max_goals=self.max_goals)
        self.matches.append(result)
        self._clock += timedelta(minutes=10)
        return self

    def build(self) -> MatchLog:
        """Return the match log built so far."""
        return MatchLog(
            players=list(self.players_by_name.values()),
            matches=list(self.matches),
            scope=self.scope,
        )


class GroupBuilder:
    """Builder for several sessions of one group, oldest first."""

    def __init__(self, start: datetime = DEFAULT_START):
        self.sessions: List[MatchLogBuilder] = []
        self._start = start

    def session(self, scope: str = "") -> MatchLogBuilder:
        """Start a new session and return its builder."""
        number = len(self.sessions) + 1
        builder = MatchLogBuilder(
            scope=scope or f"session {number}",
            id_prefix=f"s{number}p",
            start=self._start + timedelta(days=7 * (number - 1)),
        )
        self.sessions.append(builder)
        return builder

    def build(self) -> List[MatchLog]:
        return [session.build() for session in self.sessions]
