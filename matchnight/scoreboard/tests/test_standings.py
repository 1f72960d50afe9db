"""
Tests for recompute-on-write and the management commands.
"""

from datetime import timedelta
from io import StringIO
from unittest import mock

from django.core.exceptions import ValidationError
from django.core.management import CommandError, call_command
from django.db import transaction
from django.test import TestCase, override_settings

from matchnight.scoreboard.models import (
    Group,
    Match,
    PairStats,
    PlayerStats,
    Session,
    SessionPlayer,
)
from matchnight.scoreboard.standings import (
    compute_session_standings,
    recompute_group_standings,
    recompute_session_standings,
)
from matchnight.scoreboard.structure_to_db import structure_to_db
from matchnight.standings_core.structure import MalformedMatchError

from .testutils import friday_builder, log_match, persist_group, two_week_group


def stats_of(session_player):
    row = PlayerStats.objects.get(session_player=session_player)
    return (row.mp, row.w, row.d, row.l, row.gf, row.ga, row.gd, row.pts)


class RecomputeTests(TestCase):
    """Test the full recompute of a session's derived rows."""

    def setUp(self):
        self.created = structure_to_db(friday_builder())
        self.session = self.created["session"]
        self.players = self.created["players"]

    def test_recompute_persists_every_row(self):
        standings = recompute_session_standings(self.session.pk)

        self.assertEqual(len(standings.players), 5)
        self.assertEqual(PlayerStats.objects.filter(session=self.session).count(), 5)
        self.assertEqual(PairStats.objects.filter(session=self.session).count(), 5)
        self.assertEqual(stats_of(self.players["Cid"]), (3, 1, 1, 1, 4, 5, -1, 4))
        self.assertEqual(stats_of(self.players["Dan"]), (2, 0, 0, 2, 1, 4, -3, 0))

    def test_recompute_matches_fresh_computation(self):
        recompute_session_standings(self.session.pk)
        fresh = compute_session_standings(self.session)

        for row in fresh.players:
            persisted = PlayerStats.objects.get(session_player_id=int(row.player_id))
            self.assertEqual(persisted.stats, row.stats)

    def test_recompute_is_idempotent(self):
        first = recompute_session_standings(self.session.pk)
        second = recompute_session_standings(self.session.pk)

        self.assertEqual(first, second)
        self.assertEqual(PlayerStats.objects.filter(session=self.session).count(), 5)

    def test_malformed_match_keeps_previous_rows(self):
        recompute_session_standings(self.session.pk)
        before = stats_of(self.players["Ann"])

        # A 1v1 row written behind the form's back
        Match.objects.filter(pk=self.created["matches"][0].pk).update(
            team_a_player_ids=[self.players["Ann"].pk],
            team_b_player_ids=[self.players["Cid"].pk],
        )
        with self.assertLogs("matchnight.scoreboard.standings", "ERROR"):
            with self.assertRaises(MalformedMatchError):
                recompute_session_standings(self.session.pk)

        self.assertEqual(stats_of(self.players["Ann"]), before)
        self.assertEqual(PlayerStats.objects.filter(session=self.session).count(), 5)

    def test_player_of_another_session_is_rejected(self):
        other = structure_to_db(friday_builder())
        Match.objects.filter(pk=self.created["matches"][0].pk).update(
            team_b_player_ids=[other["players"]["Cid"].pk, self.players["Dan"].pk],
        )
        with self.assertLogs("matchnight.scoreboard.standings", "ERROR"):
            with self.assertRaises(MalformedMatchError):
                recompute_session_standings(self.session.pk)

    def test_idle_players_follow_the_setting(self):
        SessionPlayer.objects.create(session=self.session, display_name="Bench")

        standings = recompute_session_standings(self.session.pk)
        self.assertNotIn("Bench", [p.display_name for p in standings.players])

        with self.settings(MATCHNIGHT_INCLUDE_IDLE_PLAYERS=True):
            standings = recompute_session_standings(self.session.pk)
        self.assertIn("Bench", [p.display_name for p in standings.players])
        self.assertEqual(PlayerStats.objects.filter(session=self.session).count(), 6)

    def test_goal_bound_follows_the_setting(self):
        Match.objects.filter(pk=self.created["matches"][0].pk).update(team_a_goals=25)
        with self.assertLogs("matchnight.scoreboard.standings", "ERROR"):
            with self.assertRaises(MalformedMatchError):
                recompute_session_standings(self.session.pk)

        with self.settings(MATCHNIGHT_MAX_GOALS=None):
            standings = recompute_session_standings(self.session.pk)
        self.assertEqual(standings.player(str(self.players["Ann"].pk)).stats.gf, 27)

    def test_missing_session(self):
        with self.assertRaises(Session.DoesNotExist):
            recompute_session_standings(-1)

    def test_recompute_group(self):
        group = Group.objects.create(name="Thursday club")
        persist_group(two_week_group(), group)

        self.assertEqual(recompute_group_standings(group), 2)
        self.assertEqual(PlayerStats.objects.filter(session__group=group).count(), 7)


class RecomputeOnWriteTests(TestCase):
    """Test that match writes keep the derived rows current."""

    def setUp(self):
        builder = friday_builder()
        builder.matches.clear()
        self.created = structure_to_db(builder)
        self.session = self.created["session"]
        self.players = self.created["players"]

    def test_logging_a_match_recomputes(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(stats_of(self.players["Ann"]), (1, 1, 0, 0, 3, 1, 2, 3))
        self.assertEqual(stats_of(self.players["Cid"]), (1, 0, 0, 1, 1, 3, -2, 0))
        self.assertEqual(PairStats.objects.filter(session=self.session).count(), 1)

    def test_deleting_a_match_recomputes(self):
        with self.captureOnCommitCallbacks(execute=True):
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))
            second = log_match(
                self.session, self.players, ["Dan", "Bob"], ["Ann", "Cid"], (0, 2)
            )
        self.assertEqual(stats_of(self.players["Bob"])[0], 2)

        with self.captureOnCommitCallbacks(execute=True):
            second.delete()

        self.assertEqual(stats_of(self.players["Bob"]), (1, 1, 0, 0, 3, 1, 2, 3))
        self.assertFalse(
            PlayerStats.objects.filter(session_player=self.players["Dan"]).exists()
        )

    def test_editing_a_match_recomputes(self):
        with self.captureOnCommitCallbacks(execute=True):
            match = log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        match.team_a_goals = 0
        with self.captureOnCommitCallbacks(execute=True):
            match.save()

        self.assertEqual(stats_of(self.players["Cid"]), (1, 1, 0, 0, 1, 0, 1, 3))

    def test_nothing_runs_before_commit(self):
        with self.captureOnCommitCallbacks(execute=False):
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        self.assertFalse(PlayerStats.objects.filter(session=self.session).exists())

    @override_settings(MATCHNIGHT_RECOMPUTE_ON_WRITE=False)
    def test_recompute_on_write_can_be_disabled(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        self.assertEqual(callbacks, [])
        self.assertFalse(PlayerStats.objects.filter(session=self.session).exists())

    def test_deleting_the_session(self):
        with self.captureOnCommitCallbacks(execute=True):
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        with self.captureOnCommitCallbacks(execute=True):
            self.session.delete()

        self.assertFalse(PlayerStats.objects.exists())

    def test_one_recompute_per_session_per_transaction(self):
        spy = mock.patch(
            "matchnight.scoreboard.standings.recompute_session_standings",
            wraps=recompute_session_standings,
        )
        with spy as recompute:
            with self.captureOnCommitCallbacks(execute=True) as callbacks:
                created = structure_to_db(friday_builder())

        self.assertEqual(len(callbacks), 1)
        recompute.assert_called_once_with(created["session"].pk)
        self.assertEqual(
            PlayerStats.objects.filter(session=created["session"]).count(), 5
        )

    def test_each_session_is_queued_once(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))
            other = structure_to_db(friday_builder())
            log_match(self.session, self.players, ["Dan", "Bob"], ["Cid"], (0, 0))

        self.assertEqual(len(callbacks), 2)
        self.assertEqual(stats_of(self.players["Bob"])[0], 2)
        self.assertEqual(
            PlayerStats.objects.filter(session=other["session"]).count(), 5
        )

    def test_club_only_save_does_not_recompute(self):
        with self.captureOnCommitCallbacks(execute=True):
            match = log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        match.team_a_club = "Inter"
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            match.save(update_fields=["team_a_club"])
        self.assertEqual(callbacks, [])

        match.team_b_goals = 3
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            match.save(update_fields=["team_a_club", "team_b_goals"])
        self.assertEqual(len(callbacks), 1)
        self.assertEqual(stats_of(self.players["Cid"]), (1, 0, 1, 0, 3, 3, 0, 1))

    def test_rolled_back_write_does_not_block_the_next_one(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            with self.assertRaises(RuntimeError):
                with transaction.atomic():
                    log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (9, 0))
                    raise RuntimeError("abort")
            log_match(self.session, self.players, ["Ann", "Bob"], ["Cid"], (3, 1))

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(stats_of(self.players["Ann"]), (1, 1, 0, 0, 3, 1, 2, 3))

    def test_form_validation_without_session(self):
        match = Match(
            team_a_player_ids=[self.players["Ann"].pk, self.players["Bob"].pk],
            team_b_player_ids=[self.players["Cid"].pk],
            team_a_goals=1,
            team_b_goals=0,
        )
        with self.assertRaises(ValidationError):
            match.clean()

    def test_form_validation(self):
        match = Match(
            session=self.session,
            team_a_player_ids=[self.players["Ann"].pk],
            team_b_player_ids=[self.players["Cid"].pk],
            team_a_goals=1,
            team_b_goals=0,
        )
        with self.assertRaises(ValidationError):
            match.clean()

        match.team_b_player_ids.append(self.players["Dan"].pk)
        match.clean()

        match.team_a_goals = 20
        with self.assertRaises(ValidationError):
            match.clean()


class SessionLifecycleTests(TestCase):
    def test_join_code_and_expiry(self):
        session = Session.objects.create()

        self.assertEqual(len(session.join_code), 6)
        self.assertTrue(set(session.join_code) <= set("ABCDEFGHJKLMNPQRSTUVWXYZ23456789"))
        self.assertTrue(session.is_active())
        self.assertFalse(session.is_expired())
        self.assertTrue(session.is_expired(now=session.expires_at + timedelta(seconds=1)))
        self.assertFalse(session.is_active(now=session.expires_at + timedelta(seconds=1)))

    def test_end(self):
        session = Session.objects.create()
        session.end()
        session.refresh_from_db()

        self.assertEqual(session.status, "ended")
        self.assertIsNotNone(session.ended_at)
        self.assertFalse(session.is_active())


class CommandTests(TestCase):
    """Test the management commands."""

    def test_recompute_all(self):
        structure_to_db(friday_builder())
        structure_to_db(friday_builder())
        out = StringIO()

        call_command("recompute_standings", "--all", stdout=out)

        self.assertIn("Recomputed standings for 2 sessions", out.getvalue())
        self.assertEqual(PlayerStats.objects.count(), 10)

    def test_recompute_group(self):
        group = Group.objects.create(name="Thursday club")
        persist_group(two_week_group(), group)
        structure_to_db(friday_builder())
        out = StringIO()

        call_command("recompute_standings", "--group", str(group.pk), stdout=out)

        self.assertIn("Recomputed standings for 2 sessions", out.getvalue())
        self.assertEqual(PlayerStats.objects.count(), 7)

    def test_recompute_missing_session(self):
        with self.assertRaises(CommandError):
            call_command("recompute_standings", "--session", "999999", stdout=StringIO())

    def test_recompute_needs_a_target(self):
        with self.assertRaises(CommandError):
            call_command("recompute_standings", stdout=StringIO())

    def test_recompute_reports_malformed_sessions(self):
        created = structure_to_db(friday_builder())
        Match.objects.filter(session=created["session"]).update(team_a_goals=99)

        out = StringIO()
        with self.assertLogs("matchnight.scoreboard.standings", "ERROR"):
            with self.assertRaises(CommandError):
                call_command("recompute_standings", "--all", stdout=out)
        self.assertIn(f"Session {created['session'].pk}", out.getvalue())

    def test_seed_match_night(self):
        out = StringIO()
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            call_command(
                "seed_match_night",
                "--sessions", "2",
                "--players", "5",
                "--matches", "4",
                "--group-name", "Demo night",
                "--seed", "7",
                stdout=out,
            )

        # One recompute per seeded session
        self.assertEqual(len(callbacks), 2)

        group = Group.objects.get(name="Demo night")
        self.assertEqual(group.sessions.count(), 2)
        for session in group.sessions.all():
            self.assertEqual(session.players.count(), 5)
            self.assertEqual(session.matches.count(), 4)
            self.assertTrue(PlayerStats.objects.filter(session=session).exists())
        self.assertIn("Created group 'Demo night'", out.getvalue())

    @override_settings(MATCHNIGHT_RECOMPUTE_ON_WRITE=False)
    def test_seed_without_recompute_on_write(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            call_command(
                "seed_match_night",
                "--sessions", "1",
                "--group-name", "Quiet night",
                "--seed", "3",
                stdout=StringIO(),
            )

        session = Group.objects.get(name="Quiet night").sessions.get()
        self.assertEqual(callbacks, [])
        self.assertTrue(PlayerStats.objects.filter(session=session).exists())

    def test_seed_needs_enough_players(self):
        with self.assertRaises(CommandError):
            call_command("seed_match_night", "--players", "3", stdout=StringIO())
