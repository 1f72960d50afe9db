"""
Tests for the session and group leaderboards.
"""

from django.test import TestCase

from matchnight.scoreboard.leaderboards import (
    group_pair_leaderboard,
    group_player_leaderboard,
    group_session_breakdown,
    group_standings,
    session_pair_leaderboard,
    session_player_leaderboard,
)
from matchnight.scoreboard.models import Group
from matchnight.scoreboard.standings import (
    recompute_group_standings,
    recompute_session_standings,
)
from matchnight.scoreboard.structure_to_db import structure_to_db
from matchnight.standings_core.assertions import assert_standings
from matchnight.standings_core.builder import MatchLogBuilder

from .testutils import friday_builder, persist_group, two_week_group


def labels_match(label, name1, name2):
    return label in (f"{name1} & {name2}", f"{name2} & {name1}")


class SessionLeaderboardTests(TestCase):
    def setUp(self):
        self.session = structure_to_db(friday_builder())["session"]
        recompute_session_standings(self.session.pk)

    def test_player_leaderboard_order(self):
        rows = session_player_leaderboard(self.session)

        self.assertEqual(
            [row.name for row in rows], ["Ann", "Gus", "Cid", "Bob", "Dan"]
        )
        self.assertEqual([row.pts for row in rows], [4, 4, 4, 3, 0])

    def test_pair_leaderboard_order(self):
        rows = session_pair_leaderboard(self.session)

        self.assertEqual([row.pts for row in rows], [3, 3, 1, 0, 0])
        expected = [
            ("Ann", "Bob"),
            ("Cid", "Gus"),
            ("Ann", "Gus"),
            ("Bob", "Dan"),
            ("Cid", "Dan"),
        ]
        for row, (name1, name2) in zip(rows, expected):
            self.assertTrue(labels_match(row.label, name1, name2), row.label)

    def test_empty_session(self):
        session = structure_to_db(MatchLogBuilder())["session"]
        self.assertEqual(session_player_leaderboard(session), [])
        self.assertEqual(session_pair_leaderboard(session), [])


class GroupLeaderboardTests(TestCase):
    """Test all-time boards pooled across a group's sessions."""

    def setUp(self):
        self.group = Group.objects.create(name="Thursday club")
        self.created = persist_group(two_week_group(), self.group)
        recompute_group_standings(self.group)

    def test_players_are_pooled_by_profile(self):
        standings = assert_standings(group_standings(self.group))

        standings.player("Bob").record(3, 2, 1, 0, 9, 3).points(7).position(1)
        standings.player("Cid").record(4, 1, 2, 1, 8, 6).points(5).position(2)
        standings.player("Ann").record(4, 1, 2, 1, 6, 8).points(5).position(3)
        standings.no_player("Gus")
        standings.invariants()

    def test_pairs_are_pooled_by_profile(self):
        standings = assert_standings(group_standings(self.group))

        standings.pair("Ann", "Bob").record(2, 1, 1, 0, 5, 3).points(4).position(1)
        standings.pair("Bob", "Cid").record(1, 1, 0, 0, 4, 0).points(3).position(2)
        standings.pair("Ann", "Cid").record(1, 0, 1, 0, 1, 1).points(1).position(3)
        standings.no_pair("Cid", "Gus")

    def test_rows_are_keyed_by_profile(self):
        ann = self.created[0]["profiles"]["ann"]
        rows = group_player_leaderboard(self.group)

        self.assertEqual(rows[2].player_id, str(ann.pk))
        self.assertEqual(len(group_pair_leaderboard(self.group)), 3)

    def test_persisted_and_fresh_boards_agree(self):
        persisted = group_standings(self.group)
        fresh = group_standings(self.group, fresh=True)

        self.assertEqual(
            [(row.player_id, row.stats) for row in persisted.players],
            [(row.player_id, row.stats) for row in fresh.players],
        )
        self.assertEqual(
            [(row.pair, row.stats) for row in persisted.pairs],
            [(row.pair, row.stats) for row in fresh.pairs],
        )

    def test_fresh_board_does_not_need_persisted_rows(self):
        group = Group.objects.create(name="Never recomputed")
        persist_group(two_week_group(), group)

        self.assertEqual(group_player_leaderboard(group), [])
        self.assertEqual(len(group_player_leaderboard(group, fresh=True)), 3)

    def test_ad_hoc_sessions_are_not_pooled(self):
        session = structure_to_db(friday_builder())["session"]
        recompute_session_standings(session.pk)

        standings = group_standings(self.group)
        self.assertEqual(len(standings.players), 3)
        assert_standings(standings).player("Bob").played(3)

    def test_session_breakdown(self):
        breakdown = group_session_breakdown(self.group)

        self.assertEqual(
            [entry["session"] for entry in breakdown],
            [self.created[1]["session"], self.created[0]["session"]],
        )
        self.assertEqual([entry["match_count"] for entry in breakdown], [2, 2])

        # Session boards keep guests
        latest, earliest = breakdown
        # Bob and Cid are level on every column in week 2, so the name decides
        self.assertEqual([row.name for row in latest["leaderboard"]], ["Bob", "Cid", "Ann"])
        self.assertIn("Gus", [row.name for row in earliest["leaderboard"]])
