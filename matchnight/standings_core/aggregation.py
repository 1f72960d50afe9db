"""
Aggregation of a match log into player and pair standings.

Every call recomputes from the complete match log of a scope; nothing here
patches previously computed rows. Matches are validated as they enter the
pass, so a corrupt record raises MalformedMatchError before any standings
are produced.
"""

import logging
from collections import defaultdict
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

from matchnight.standings_core.ranking import Collation, rank
from matchnight.standings_core.stats import TeamStats, empty_stats, fold_match
from matchnight.standings_core.structure import (
    MAX_GOALS,
    MatchLog,
    MatchResult,
    PairIdentity,
    PairStanding,
    Player,
    PlayerStanding,
    Standings,
    pair_label,
    validate_match,
)

logger = logging.getLogger(__name__)

Row = TypeVar("Row", PlayerStanding, PairStanding)


def _validated_matches(log: MatchLog, max_goals: Optional[int]) -> List[MatchResult]:
    return [validate_match(match, log, max_goals) for match in log.matches]


def _fold_players(matches: Iterable[MatchResult]) -> Dict[str, TeamStats]:
    totals: Dict[str, TeamStats] = defaultdict(empty_stats)
    for match in matches:
        for roster, goals_for, goals_against in match.sides():
            for player_id in roster:
                totals[player_id] = fold_match(
                    totals[player_id], goals_for, goals_against
                )
    return totals


def _fold_pairs(matches: Iterable[MatchResult]) -> Dict[PairIdentity, TeamStats]:
    totals: Dict[PairIdentity, TeamStats] = defaultdict(empty_stats)
    for match in matches:
        for roster, goals_for, goals_against in match.sides():
            # A lone player facing two opponents never forms a pair
            if len(roster) != 2:
                continue
            identity = PairIdentity.of(*roster)
            totals[identity] = fold_match(totals[identity], goals_for, goals_against)
    return totals


def _player_rows(
    log: MatchLog, totals: Dict[str, TeamStats], include_idle: bool
) -> List[PlayerStanding]:
    rows = []
    for player in log.players:
        stats = totals.get(player.player_id)
        if stats is None:
            if not include_idle:
                continue
            stats = empty_stats()
        rows.append(
            PlayerStanding(
                player_id=player.player_id,
                display_name=player.display_name,
                stats=stats,
                linked_identity=player.linked_identity,
            )
        )
    return rows


def _pair_rows(
    log: MatchLog, totals: Dict[PairIdentity, TeamStats]
) -> List[PairStanding]:
    rows = []
    for identity, stats in totals.items():
        first = log.player(identity.first)
        second = log.player(identity.second)
        rows.append(
            PairStanding(
                pair=identity,
                label=pair_label(first.display_name, second.display_name),
                stats=stats,
            )
        )
    return rows


def aggregate_players(
    log: MatchLog,
    include_idle: bool = False,
    max_goals: Optional[int] = MAX_GOALS,
    collation: Collation = Collation.LOCALE,
) -> List[PlayerStanding]:
    """
    Compute standings for every player of a scope.

    Args:
        log: Roster and matches of the scope
        include_idle: Whether players without matches appear with zero stats
        max_goals: Goal bound applied while validating matches
        collation: Name comparison used for the final tie-break

    Returns:
        Player rows in leaderboard order

    Raises:
        MalformedMatchError: If any match violates the roster or goal invariants
    """
    matches = _validated_matches(log, max_goals)
    return rank(_player_rows(log, _fold_players(matches), include_idle), collation)


def aggregate_pairs(
    log: MatchLog,
    max_goals: Optional[int] = MAX_GOALS,
    collation: Collation = Collation.LOCALE,
) -> List[PairStanding]:
    """Compute standings for every pair that shared a side at least once."""
    matches = _validated_matches(log, max_goals)
    return rank(_pair_rows(log, _fold_pairs(matches)), collation)


def compute_standings(
    log: MatchLog,
    include_idle: bool = False,
    max_goals: Optional[int] = MAX_GOALS,
    collation: Collation = Collation.LOCALE,
) -> Standings:
    """Compute both standings tables for one scope in a single validation pass."""
    matches = _validated_matches(log, max_goals)
    players = _player_rows(log, _fold_players(matches), include_idle)
    pairs = _pair_rows(log, _fold_pairs(matches))

    logger.debug(
        "Computed standings for %s: %d matches, %d players, %d pairs",
        log.scope or "<scope>",
        len(matches),
        len(players),
        len(pairs),
    )
    return Standings(players=rank(players, collation), pairs=rank(pairs, collation))


def link_player_rows(
    rows: Iterable[PlayerStanding], players: Dict[str, Player]
) -> List[PlayerStanding]:
    """Re-key session player rows by linked account, dropping guests.

    Args:
        rows: Player rows of a single session
        players: That session's roster keyed by session player ID
    """
    linked = []
    for row in rows:
        player = players.get(row.player_id)
        if player is None or player.is_guest:
            continue
        linked.append(
            PlayerStanding(
                player_id=player.linked_identity,
                display_name=row.display_name,
                stats=row.stats,
                linked_identity=player.linked_identity,
            )
        )
    return linked


def link_pair_rows(
    rows: Iterable[PairStanding], players: Dict[str, Player]
) -> List[PairStanding]:
    """Re-key session pair rows by linked accounts.

    A pair is dropped when either member is a guest: a guest's identifier is
    only meaningful inside its own session.
    """
    linked = []
    for row in rows:
        first = players.get(row.pair.first)
        second = players.get(row.pair.second)
        if first is None or second is None or first.is_guest or second.is_guest:
            continue
        identity = PairIdentity.of(first.linked_identity, second.linked_identity)
        if identity.first == first.linked_identity:
            label = pair_label(first.display_name, second.display_name)
        else:
            label = pair_label(second.display_name, first.display_name)
        linked.append(PairStanding(pair=identity, label=label, stats=row.stats))
    return linked


def combine_standings(rows: Iterable[Row]) -> List[Row]:
    """
    Sum rows that share an identity.

    Rows are expected in chronological order of their sessions; the name of
    the last row for an identity is kept, so a renamed player shows under
    their most recent name.
    """
    totals: Dict[str, TeamStats] = {}
    latest: Dict[str, Row] = {}
    for row in rows:
        key = row.identity
        totals[key] = totals.get(key, empty_stats()) + row.stats
        latest[key] = row
    return [replace(row, stats=totals[key]) for key, row in latest.items()]


def aggregate_group(
    logs: Sequence[MatchLog],
    include_idle: bool = False,
    max_goals: Optional[int] = MAX_GOALS,
    collation: Collation = Collation.LOCALE,
) -> Standings:
    """
    Pool the standings of several sessions of a group.

    Only players linked to an account are comparable across sessions, so
    guests and any pair containing a guest are excluded. Each session is
    aggregated on its own and the linked rows are summed, which gives the
    same totals as one fold over every match.

    Args:
        logs: One match log per session, oldest first
        include_idle: Whether linked players without matches appear
        max_goals: Goal bound applied while validating matches
        collation: Name comparison used for the final tie-break

    Returns:
        Pooled standings keyed by linked account

    Raises:
        MalformedMatchError: If any session holds a corrupt match
        ValueError: If two players of one session share a linked account
    """
    player_rows: List[PlayerStanding] = []
    pair_rows: List[PairStanding] = []

    for log in logs:
        roster = {p.player_id: p for p in log.players}
        _check_unique_links(log)
        session = compute_standings(log, include_idle, max_goals, collation)
        player_rows.extend(link_player_rows(session.players, roster))
        pair_rows.extend(link_pair_rows(session.pairs, roster))

    players = combine_standings(player_rows)
    pairs = combine_standings(pair_rows)

    logger.debug(
        "Pooled %d sessions into %d players and %d pairs",
        len(logs),
        len(players),
        len(pairs),
    )
    return Standings(players=rank(players, collation), pairs=rank(pairs, collation))


def _check_unique_links(log: MatchLog) -> None:
    seen: Dict[str, str] = {}
    for player in log.players:
        if player.is_guest:
            continue
        other = seen.get(player.linked_identity)
        if other is not None:
            raise ValueError(
                f"Players {other} and {player.player_id} in {log.scope or 'session'} "
                f"are linked to the same account {player.linked_identity}"
            )
        seen[player.linked_identity] = player.player_id
