"""
Tests for leaderboard ordering.
"""

import unittest
from types import SimpleNamespace

from matchnight.standings_core.ranking import Collation, name_key, rank, with_positions
from matchnight.standings_core.stats import TeamStats
from matchnight.standings_core.structure import PairIdentity, PairStanding, PlayerStanding


def row(name, pts=0, gd=0, gf=0, player_id=None):
    """A player row whose stats only carry the sort columns."""
    return PlayerStanding(
        player_id=player_id or name.lower(),
        display_name=name,
        stats=TeamStats(pts=pts, gd=gd, gf=gf),
    )


def names(rows):
    return [r.name for r in rows]


class TieBreakTests(unittest.TestCase):
    """Test Pts -> GD -> GF -> name ordering."""

    def test_points_first(self):
        rows = [row("A", pts=3, gd=5, gf=9), row("B", pts=4, gd=-2, gf=0)]
        self.assertEqual(names(rank(rows)), ["B", "A"])

    def test_goal_difference_breaks_points_tie(self):
        rows = [row("A", pts=3, gd=1, gf=9), row("B", pts=3, gd=2, gf=2)]
        self.assertEqual(names(rank(rows)), ["B", "A"])

    def test_goals_for_breaks_goal_difference_tie(self):
        rows = [row("A", pts=3, gd=2, gf=4), row("B", pts=3, gd=2, gf=5)]
        self.assertEqual(names(rank(rows)), ["B", "A"])

    def test_name_breaks_full_stats_tie(self):
        rows = [
            row("Mia", pts=6, gd=3, gf=5),
            row("Zed", pts=6, gd=3, gf=5),
            row("Ann", pts=6, gd=3, gf=5),
        ]
        self.assertEqual(names(rank(rows)), ["Ann", "Mia", "Zed"])

    def test_identity_breaks_name_tie(self):
        rows = [row("Sam", player_id="p9"), row("Sam", player_id="p1")]
        ranked = rank(rows)
        self.assertEqual([r.player_id for r in ranked], ["p1", "p9"])
        self.assertEqual([r.player_id for r in rank(list(reversed(rows)))], ["p1", "p9"])

    def test_rank_returns_a_new_list(self):
        rows = [row("B", pts=1), row("A", pts=3)]
        ranked = rank(rows)
        self.assertEqual(names(rows), ["B", "A"])
        self.assertEqual(names(ranked), ["A", "B"])

    def test_pairs_rank_by_label(self):
        rows = [
            PairStanding(PairIdentity.of("p3", "p4"), "Cid & Dan", TeamStats(pts=3)),
            PairStanding(PairIdentity.of("p1", "p2"), "Ann & Bob", TeamStats(pts=3)),
        ]
        self.assertEqual([r.label for r in rank(rows)], ["Ann & Bob", "Cid & Dan"])

    def test_any_row_with_stats_name_and_identity(self):
        rows = [
            SimpleNamespace(stats=TeamStats(pts=1), name="Low", identity=1),
            SimpleNamespace(stats=TeamStats(pts=7), name="High", identity=2),
        ]
        self.assertEqual(names(rank(rows)), ["High", "Low"])

    def test_with_positions(self):
        ranked = rank([row("B", pts=1), row("A", pts=3)])
        self.assertEqual(
            [(position, r.name) for position, r in with_positions(ranked)],
            [(1, "A"), (2, "B")],
        )


class CollationTests(unittest.TestCase):
    """Test the display name comparison."""

    def test_locale_ignores_case(self):
        rows = [row("Bob"), row("alice")]
        self.assertEqual(names(rank(rows, Collation.LOCALE)), ["alice", "Bob"])
        self.assertEqual(names(rank(rows, Collation.ORDINAL)), ["Bob", "alice"])

    def test_locale_ignores_accents(self):
        rows = [row("Eva"), row("Émile")]
        self.assertEqual(names(rank(rows, Collation.LOCALE)), ["Émile", "Eva"])
        self.assertEqual(names(rank(rows, Collation.ORDINAL)), ["Eva", "Émile"])

    def test_locale_puts_lowercase_first_on_equal_letters(self):
        self.assertLess(name_key("ann"), name_key("Ann"))

    def test_ordinal_key_is_the_name(self):
        self.assertEqual(name_key("Zoë", Collation.ORDINAL), "Zoë")

    def test_collation_from_setting_value(self):
        self.assertIs(Collation("locale"), Collation.LOCALE)
        self.assertIs(Collation("ordinal"), Collation.ORDINAL)


if __name__ == "__main__":
    unittest.main()
