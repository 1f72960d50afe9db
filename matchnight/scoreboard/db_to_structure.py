"""
Transform database models to standings_core structure representation.

This module provides functions to convert Django ORM models from
matchnight.scoreboard into the typed standings_core structures. It is the
schema boundary: loosely typed column values (JSON player lists, integers
from the database) are parsed here, and nothing downstream sees a raw row.
"""

from typing import List, Tuple

from matchnight.standings_core.structure import (
    MalformedMatchError,
    MatchLog,
    MatchResult,
    PairIdentity,
    PairStanding,
    Player,
    PlayerStanding,
)


def _parse_side(value, record_label: str, side_name: str) -> Tuple[str, ...]:
    """Parse a JSON list of session player IDs into a tuple of strings."""
    if not isinstance(value, (list, tuple)):
        raise MalformedMatchError(
            record_label, f"{side_name} must be a list of player IDs, got {value!r}"
        )

    player_ids = []
    for item in value:
        # bool is an int subclass; True is never a player ID
        if isinstance(item, bool) or not isinstance(item, (int, str)):
            raise MalformedMatchError(
                record_label, f"{side_name} holds an invalid player ID {item!r}"
            )
        player_ids.append(str(item))
    return tuple(player_ids)


def _parse_goals(value, record_label: str, side_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedMatchError(
            record_label, f"{side_name} goals must be an integer, got {value!r}"
        )
    return value


def match_row_to_result(match) -> MatchResult:
    """Convert a Match model instance to a MatchResult.

    Only the column types are checked here. Roster and goal invariants are
    checked when the result enters an aggregation pass.

    Args:
        match: A Match model instance

    Returns:
        The typed, immutable match

    Raises:
        MalformedMatchError: If a column cannot be parsed
    """
    record_label = f"#{match.pk}" if match.pk is not None else "<unsaved>"
    return MatchResult(
        team_a=_parse_side(match.team_a_player_ids, record_label, "team A"),
        team_b=_parse_side(match.team_b_player_ids, record_label, "team B"),
        team_a_goals=_parse_goals(match.team_a_goals, record_label, "team A"),
        team_b_goals=_parse_goals(match.team_b_goals, record_label, "team B"),
        played_at=match.played_at,
        match_id=str(match.pk) if match.pk is not None else None,
    )


def session_player_to_player(session_player) -> Player:
    """Convert a SessionPlayer to a Player; the profile ID is the linked identity."""
    return Player(
        player_id=str(session_player.pk),
        display_name=session_player.display_name,
        linked_identity=(
            str(session_player.profile_id)
            if session_player.profile_id is not None
            else None
        ),
    )


def roster_for_session(session) -> List[Player]:
    """Return every player of a session in the order they joined."""
    from matchnight.scoreboard.models import SessionPlayer

    return [
        session_player_to_player(sp)
        for sp in SessionPlayer.objects.filter(session=session).order_by("id")
    ]


def session_to_match_log(session) -> MatchLog:
    """Convert a session's matches and players to a MatchLog.

    This is the main entry point for feeding the database into the
    standings engine.

    Args:
        session: A Session model instance

    Returns:
        MatchLog with the full roster and every match, oldest first
    """
    from matchnight.scoreboard.models import Match

    matches = [
        match_row_to_result(match)
        for match in Match.objects.filter(session=session).order_by("played_at", "id")
    ]
    return MatchLog(
        players=roster_for_session(session),
        matches=matches,
        scope=f"session {session.pk}",
    )


def group_to_match_logs(group) -> List[MatchLog]:
    """Convert every session of a group to match logs, oldest session first."""
    return [
        session_to_match_log(session)
        for session in group.sessions.all().order_by("date_created", "id")
    ]


def player_stats_to_standing(player_stats) -> PlayerStanding:
    """Convert a persisted PlayerStats row back to a PlayerStanding."""
    return PlayerStanding(
        player_id=str(player_stats.session_player_id),
        display_name=player_stats.session_player.display_name,
        stats=player_stats.stats,
        linked_identity=(
            str(player_stats.session_player.profile_id)
            if player_stats.session_player.profile_id is not None
            else None
        ),
    )


def pair_stats_to_standing(pair_stats) -> PairStanding:
    """Convert a persisted PairStats row back to a PairStanding."""
    return PairStanding(
        pair=PairIdentity.of(
            str(pair_stats.session_player_1_id), str(pair_stats.session_player_2_id)
        ),
        label=pair_stats.label,
        stats=pair_stats.stats,
    )
