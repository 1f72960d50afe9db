"""
Leaderboard read path.

Session boards rank the persisted PlayerStats/PairStats rows. Group boards
pool sessions by linked account: by default from the persisted rows of
every session, or with ``fresh=True`` straight from the match logs.
"""

from typing import Dict, List

from matchnight.scoreboard.conf import (
    get_collation,
    get_include_idle_players,
    get_max_goals,
)
from matchnight.scoreboard.db_to_structure import (
    group_to_match_logs,
    pair_stats_to_standing,
    player_stats_to_standing,
    roster_for_session,
)
from matchnight.standings_core.aggregation import (
    aggregate_group,
    combine_standings,
    link_pair_rows,
    link_player_rows,
)
from matchnight.standings_core.ranking import rank
from matchnight.standings_core.structure import Player, Standings


def session_player_leaderboard(session) -> list:
    """Persisted PlayerStats rows of a session in leaderboard order."""
    from matchnight.scoreboard.models import PlayerStats

    rows = PlayerStats.objects.filter(session=session).select_related("session_player")
    return rank(list(rows), get_collation())


def session_pair_leaderboard(session) -> list:
    """Persisted PairStats rows of a session in leaderboard order."""
    from matchnight.scoreboard.models import PairStats

    return rank(list(PairStats.objects.filter(session=session)), get_collation())


def _persisted_group_standings(group) -> Standings:
    from matchnight.scoreboard.models import PairStats, PlayerStats

    player_rows = []
    pair_rows = []
    for session in group.sessions.order_by("date_created", "id"):
        roster: Dict[str, Player] = {
            p.player_id: p for p in roster_for_session(session)
        }
        players = [
            player_stats_to_standing(row)
            for row in PlayerStats.objects.filter(session=session).select_related(
                "session_player"
            )
        ]
        pairs = [
            pair_stats_to_standing(row)
            for row in PairStats.objects.filter(session=session)
        ]
        player_rows.extend(link_player_rows(players, roster))
        pair_rows.extend(link_pair_rows(pairs, roster))

    collation = get_collation()
    return Standings(
        players=rank(combine_standings(player_rows), collation),
        pairs=rank(combine_standings(pair_rows), collation),
    )


def group_standings(group, fresh: bool = False) -> Standings:
    """All-time standings of a group, guests excluded.

    Args:
        group: A Group model instance
        fresh: Recompute from the match logs instead of the persisted rows
    """
    if fresh:
        return aggregate_group(
            group_to_match_logs(group),
            include_idle=get_include_idle_players(),
            max_goals=get_max_goals(),
            collation=get_collation(),
        )
    return _persisted_group_standings(group)


def group_player_leaderboard(group, fresh: bool = False) -> list:
    return group_standings(group, fresh).players


def group_pair_leaderboard(group, fresh: bool = False) -> list:
    return group_standings(group, fresh).pairs


def group_session_breakdown(group) -> List[dict]:
    """Per-session player boards of a group, newest session first."""
    return [
        {
            "session": session,
            "leaderboard": session_player_leaderboard(session),
            "match_count": session.matches.count(),
        }
        for session in group.sessions.order_by("-date_created", "-id")
    ]
