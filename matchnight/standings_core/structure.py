"""
Match-night structures for representing a scope of matches and its standings.

This module provides the typed, immutable data the standings engine works on:
- Players (session-local, optionally linked to an account)
- Match results between two sides of one or two players
- Pair identities normalized so (A, B) and (B, A) are the same pair
- Standings rows produced by the aggregation engine
"""

from datetime import datetime
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union
from dataclasses import dataclass, field

from matchnight.standings_core.stats import TeamStats, empty_stats


# Upper bound on goals for one side, taken from the match logging form.
# Pass max_goals=None to validate_match to disable it.
MAX_GOALS = 19
MIN_DISTINCT_PLAYERS = 3
MAX_SIDE_SIZE = 2


class MalformedMatchError(ValueError):
    """A match record violates the roster or goal invariants."""

    def __init__(self, match: Union["MatchResult", str], reason: str):
        # A plain label is used when the record could not be parsed at all
        if isinstance(match, MatchResult):
            self.match = match
            label = match.describe()
        else:
            self.match = None
            label = str(match)
        self.reason = reason
        super().__init__(f"Malformed match {label}: {reason}")


@dataclass(frozen=True)
class Player:
    """A session player, optionally linked to a persistent account."""

    player_id: str
    display_name: str
    linked_identity: Optional[str] = None

    @property
    def is_guest(self) -> bool:
        return self.linked_identity is None


@dataclass(frozen=True)
class MatchResult:
    """A single logged match between two sides.

    Sides are stored as given; nothing here assumes team A is the side with
    two players.
    """

    team_a: Tuple[str, ...]
    team_b: Tuple[str, ...]
    team_a_goals: int
    team_b_goals: int
    played_at: Optional[datetime] = None
    match_id: Optional[str] = None

    def sides(self) -> Iterator[Tuple[Tuple[str, ...], int, int]]:
        """Yield (roster, goals_for, goals_against) for both sides."""
        yield (self.team_a, self.team_a_goals, self.team_b_goals)
        yield (self.team_b, self.team_b_goals, self.team_a_goals)

    def player_ids(self) -> Tuple[str, ...]:
        return self.team_a + self.team_b

    def describe(self) -> str:
        label = self.match_id if self.match_id is not None else "<unsaved>"
        return (
            f"{label} [{', '.join(self.team_a)}] {self.team_a_goals}-"
            f"{self.team_b_goals} [{', '.join(self.team_b)}]"
        )


@dataclass(frozen=True, order=True)
class PairIdentity:
    """An unordered pair of player identifiers, stored sorted."""

    first: str
    second: str

    def __post_init__(self):
        if self.first == self.second:
            raise ValueError(f"A pair needs two different players, got {self.first!r}")
        if self.first > self.second:
            raise ValueError(
                f"Pair members must be sorted, got ({self.first!r}, {self.second!r}); "
                "use PairIdentity.of()"
            )

    @classmethod
    def of(cls, player1_id: str, player2_id: str) -> "PairIdentity":
        """Build the normalized identity for two players in any order."""
        first, second = sorted((player1_id, player2_id))
        return cls(first, second)

    @property
    def key(self) -> str:
        return f"{self.first}_{self.second}"

    def __iter__(self):
        return iter((self.first, self.second))


def pair_label(name1: str, name2: str) -> str:
    """Human-readable label for a pair, names in normalized identity order."""
    return f"{name1} & {name2}"


@dataclass(frozen=True)
class PlayerStanding:
    """Standings row for a single player."""

    player_id: str
    display_name: str
    stats: TeamStats = field(default_factory=empty_stats)
    linked_identity: Optional[str] = None

    @property
    def name(self) -> str:
        return self.display_name

    @property
    def identity(self) -> str:
        return self.player_id


@dataclass(frozen=True)
class PairStanding:
    """Standings row for a pair that played together on one side."""

    pair: PairIdentity
    label: str
    stats: TeamStats = field(default_factory=empty_stats)

    @property
    def name(self) -> str:
        return self.label

    @property
    def identity(self) -> str:
        return self.pair.key


@dataclass(frozen=True)
class Standings:
    """Both derived tables for one scope, already in leaderboard order."""

    players: List[PlayerStanding] = field(default_factory=list)
    pairs: List[PairStanding] = field(default_factory=list)

    def player(self, player_id: str) -> Optional[PlayerStanding]:
        return next((p for p in self.players if p.player_id == player_id), None)

    def pair(self, player1_id: str, player2_id: str) -> Optional[PairStanding]:
        identity = PairIdentity.of(player1_id, player2_id)
        return next((p for p in self.pairs if p.pair == identity), None)


@dataclass(frozen=True)
class MatchLog:
    """The complete match history and roster of one scope.

    Any sequences passed in are copied to tuples, so the roster index built
    here can never go stale.
    """

    players: Tuple[Player, ...] = ()
    matches: Tuple[MatchResult, ...] = ()
    scope: str = ""
    _by_id: Dict[str, Player] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        object.__setattr__(self, "players", tuple(self.players))
        object.__setattr__(self, "matches", tuple(self.matches))
        object.__setattr__(self, "_by_id", {p.player_id: p for p in self.players})

    def player(self, player_id: str) -> Optional[Player]:
        return self._by_id.get(player_id)


def validate_match(
    match: MatchResult,
    roster: Optional[MatchLog] = None,
    max_goals: Optional[int] = MAX_GOALS,
) -> MatchResult:
    """
    Check a match against the roster and goal invariants.

    Args:
        match: The match to check
        roster: Optional match log whose players every participant must belong to
        max_goals: Upper bound for either side's goals, or None for no bound

    Returns:
        The same match, so the call can be used inline

    Raises:
        MalformedMatchError: If any invariant is violated
    """
    for side_name, side in (("team A", match.team_a), ("team B", match.team_b)):
        if not 1 <= len(side) <= MAX_SIDE_SIZE:
            raise MalformedMatchError(
                match, f"{side_name} must have 1 or 2 players, got {len(side)}"
            )
        if len(set(side)) != len(side):
            raise MalformedMatchError(match, f"{side_name} lists a player twice")

    overlap = set(match.team_a) & set(match.team_b)
    if overlap:
        raise MalformedMatchError(
            match, f"players on both sides: {', '.join(sorted(overlap))}"
        )

    distinct = len(set(match.player_ids()))
    if distinct < MIN_DISTINCT_PLAYERS:
        raise MalformedMatchError(
            match, f"need at least {MIN_DISTINCT_PLAYERS} distinct players, got {distinct}"
        )

    for goals in (match.team_a_goals, match.team_b_goals):
        if isinstance(goals, bool) or not isinstance(goals, int):
            raise MalformedMatchError(match, f"goals must be integers, got {goals!r}")
        if goals < 0:
            raise MalformedMatchError(match, f"goals cannot be negative, got {goals}")
        if max_goals is not None and goals > max_goals:
            raise MalformedMatchError(
                match, f"goals cannot exceed {max_goals}, got {goals}"
            )

    if roster is not None:
        unknown = [pid for pid in match.player_ids() if roster.player(pid) is None]
        if unknown:
            raise MalformedMatchError(
                match, f"unknown players for this scope: {', '.join(unknown)}"
            )

    return match


def create_match(
    team_a: Sequence[str],
    team_b: Sequence[str],
    team_a_goals: int,
    team_b_goals: int,
    **kwargs,
) -> MatchResult:
    """Create a match from any sequences of player IDs."""
    return MatchResult(tuple(team_a), tuple(team_b), team_a_goals, team_b_goals, **kwargs)
