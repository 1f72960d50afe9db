"""
Convert standings_core structures to database objects.

This module provides the two writes the scoreboard needs:
- replacing a session's derived standings rows with a freshly computed set
- persisting a MatchLogBuilder's session (players and matches) for seeding
  and tests
"""

import logging
from typing import Tuple

from django.db import transaction
from django.utils.text import slugify

from matchnight.standings_core.builder import MatchLogBuilder
from matchnight.standings_core.structure import Standings

logger = logging.getLogger(__name__)


def replace_session_standings(session, standings: Standings) -> Tuple[int, int]:
    """Replace every PlayerStats and PairStats row of a session.

    The delete and the inserts run in one atomic block, so readers see
    either the previous set or the new one, never a mix.

    Args:
        session: The Session the standings were computed for
        standings: Output of compute_standings for that session's match log

    Returns:
        (player rows written, pair rows written)
    """
    from matchnight.scoreboard.models import PairStats, PlayerStats

    player_rows = [
        PlayerStats(
            session=session,
            session_player_id=int(row.player_id),
            **row.stats.as_dict(),
        )
        for row in standings.players
    ]
    pair_rows = [
        PairStats(
            session=session,
            session_player_1_id=int(row.pair.first),
            session_player_2_id=int(row.pair.second),
            label=row.label,
            **row.stats.as_dict(),
        )
        for row in standings.pairs
    ]

    with transaction.atomic():
        PlayerStats.objects.filter(session=session).delete()
        PairStats.objects.filter(session=session).delete()
        PlayerStats.objects.bulk_create(player_rows)
        PairStats.objects.bulk_create(pair_rows)

    logger.debug(
        "Replaced standings of session %s: %d player rows, %d pair rows",
        session.pk,
        len(player_rows),
        len(pair_rows),
    )
    return len(player_rows), len(pair_rows)


def _get_or_create_profile(account: str, display_name: str):
    from matchnight.scoreboard.models import Profile

    handle = slugify(account) or "player"
    profile, _ = Profile.objects.get_or_create(
        handle=handle, defaults={"display_name": display_name}
    )
    return profile


def structure_to_db(builder: MatchLogBuilder, group=None, session=None) -> dict:
    """Convert a MatchLogBuilder's session to database objects.

    Players with an account are linked to a Profile whose handle is the
    account name (created on first use, shared across sessions). Matches are
    created with the builder's timestamps.

    Args:
        builder: A MatchLogBuilder with players and matches
        group: Optional Group the new session belongs to
        session: Optional existing Session to fill instead of creating one

    Returns:
        dict: A dictionary containing the created database objects:
            - 'session': The Session instance
            - 'players': Dict mapping player names to SessionPlayer instances
            - 'profiles': Dict mapping account names to Profile instances
            - 'matches': List of Match instances, in builder order
    """
    from matchnight.scoreboard.models import Match, Session, SessionPlayer

    with transaction.atomic():
        if session is None:
            session = Session.objects.create(group=group)

        db_players = {}  # player name -> SessionPlayer
        db_profiles = {}  # account -> Profile
        builder_ids = {}  # builder player ID -> SessionPlayer ID

        for name, player in builder.players_by_name.items():
            profile = None
            if player.linked_identity is not None:
                profile = _get_or_create_profile(player.linked_identity, name)
                db_profiles[player.linked_identity] = profile
                if group is not None:
                    group.members.add(profile)

            session_player = SessionPlayer.objects.create(
                session=session, profile=profile, display_name=name
            )
            db_players[name] = session_player
            builder_ids[player.player_id] = session_player.pk

        db_matches = []
        for result in builder.matches:
            match_data = {
                "session": session,
                "team_a_player_ids": [str(builder_ids[pid]) for pid in result.team_a],
                "team_b_player_ids": [str(builder_ids[pid]) for pid in result.team_b],
                "team_a_goals": result.team_a_goals,
                "team_b_goals": result.team_b_goals,
            }
            if result.played_at is not None:
                match_data["played_at"] = _aware(result.played_at)
            db_matches.append(Match.objects.create(**match_data))

    return {
        "session": session,
        "players": db_players,
        "profiles": db_profiles,
        "matches": db_matches,
    }


def _aware(value):
    from django.utils import timezone

    if timezone.is_naive(value):
        return timezone.make_aware(value)
    return value
