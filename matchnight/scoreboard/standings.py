"""
Recompute-on-write orchestration for session standings.

A recompute reads the complete match log of a session, runs the standings
engine and replaces the session's derived rows. The session row is locked
with SELECT ... FOR UPDATE for the whole read-compute-write cycle, so at
most one recompute per session is in flight and the last one to commit
reflects every committed match.
"""

import logging

from django.db import transaction

from matchnight.scoreboard.conf import (
    get_collation,
    get_include_idle_players,
    get_max_goals,
)
from matchnight.scoreboard.db_to_structure import session_to_match_log
from matchnight.scoreboard.structure_to_db import replace_session_standings
from matchnight.standings_core.aggregation import compute_standings
from matchnight.standings_core.structure import MalformedMatchError, Standings

logger = logging.getLogger(__name__)


def compute_session_standings(session) -> Standings:
    """Compute standings for a session from the database without writing them."""
    return compute_standings(
        session_to_match_log(session),
        include_idle=get_include_idle_players(),
        max_goals=get_max_goals(),
        collation=get_collation(),
    )


def recompute_session_standings(session_id) -> Standings:
    """
    Recompute and persist the standings of one session.

    Args:
        session_id: Primary key of the Session

    Returns:
        The standings that were written

    Raises:
        Session.DoesNotExist: If the session is gone
        MalformedMatchError: If a stored match is corrupt; the previously
            persisted standings are left as they were
    """
    from matchnight.scoreboard.models import Session

    with transaction.atomic():
        session = Session.objects.select_for_update().get(pk=session_id)
        try:
            standings = compute_session_standings(session)
        except MalformedMatchError:
            logger.exception("Could not recompute standings for session %s", session_id)
            raise
        player_count, pair_count = replace_session_standings(session, standings)

    logger.info(
        "Recomputed standings for session %s: %d players, %d pairs",
        session_id,
        player_count,
        pair_count,
    )
    return standings


def recompute_group_standings(group) -> int:
    """Recompute every session of a group; returns the number of sessions."""
    session_ids = list(
        group.sessions.order_by("date_created", "id").values_list("id", flat=True)
    )
    for session_id in session_ids:
        recompute_session_standings(session_id)
    return len(session_ids)


def _recompute_if_exists(session_id):
    from matchnight.scoreboard.models import Session

    # The session may have been deleted along with its matches
    if not Session.objects.filter(pk=session_id).exists():
        logger.debug("Session %s is gone, skipping recompute", session_id)
        return
    recompute_session_standings(session_id)


class _QueuedRecompute:
    """An on-commit callback for one session; runs at most once."""

    def __init__(self, session_id, queued):
        self.session_id = session_id
        self.queued = queued

    def __call__(self):
        if self.queued.get(self.session_id) is self:
            del self.queued[self.session_id]
        _recompute_if_exists(self.session_id)


def _is_queued(connection, callback) -> bool:
    # Rolled-back savepoints drop their callbacks from run_on_commit
    return any(entry[1] is callback for entry in connection.run_on_commit)


def schedule_recompute(session_id, using=None):
    """
    Recompute a session's standings once the current transaction commits.

    A session is queued at most once per transaction, however many of its
    matches the transaction writes.
    """
    connection = transaction.get_connection(using)
    queued = connection.__dict__.setdefault("matchnight_recomputes", {})

    callback = queued.get(session_id)
    if callback is not None and _is_queued(connection, callback):
        logger.debug("Recompute of session %s already queued", session_id)
        return

    callback = _QueuedRecompute(session_id, queued)
    queued[session_id] = callback
    transaction.on_commit(callback, using=using)
