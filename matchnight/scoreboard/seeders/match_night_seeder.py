"""
Match night seeder for creating demo groups, sessions and matches.
"""

from typing import List

from django.utils.text import slugify

from matchnight.scoreboard.conf import recompute_on_write
from matchnight.scoreboard.models import Group
from matchnight.scoreboard.standings import recompute_session_standings
from matchnight.scoreboard.structure_to_db import structure_to_db
from matchnight.standings_core.builder import MatchLogBuilder

from .base import BaseSeeder

CLUBS = [
    "Arsenal",
    "Barcelona",
    "Bayern",
    "Inter",
    "Juventus",
    "Liverpool",
    "Man City",
    "PSG",
    "Real Madrid",
]


class MatchNightSeeder(BaseSeeder):
    """Seeder for a group with several sessions of random 2v2 and 2v1 matches."""

    def seed(
        self,
        sessions: int = 3,
        players: int = 6,
        matches: int = 10,
        group_name: str = None,
        guest_probability: float = 0.25,
        max_goals: int = 8,
    ) -> Group:
        """Create a group and fill it with sessions.

        Args:
            sessions: Number of sessions in the group
            players: Players per session (at least 4)
            matches: Matches logged per session
            group_name: Name of the group, generated when omitted
            guest_probability: Chance that a session seat goes to a guest
            max_goals: Highest score either side can get
        """
        if players < 4:
            raise ValueError("A match night needs at least 4 players")

        group = self._track_object(
            Group.objects.create(name=group_name or f"{self.fake.city()} Night Club")
        )

        # A fixed pool of accounts so the same people come back every session
        accounts = {}
        while len(accounts) < players:
            name = self.fake.unique.first_name()
            # Profile handles are slugs, so "José" and "Jose" would collide
            accounts.setdefault(slugify(name), name)
        accounts = [(name, account) for account, name in accounts.items()]

        for number in range(1, sessions + 1):
            builder = MatchLogBuilder(scope=f"{group.name} #{number}")
            for name, account in self.rng.sample(accounts, players):
                if self.weighted_bool(guest_probability):
                    builder.guest(f"{name} (guest)")
                else:
                    builder.player(name, account=account)

            names = list(builder.players_by_name)
            for _ in range(matches):
                self._add_random_match(builder, names, max_goals)

            created = structure_to_db(builder, group=group)
            self._track_object(created["session"])
            self._assign_clubs(created["matches"])
            if not recompute_on_write():
                # Otherwise the match writes queued a recompute for commit time
                recompute_session_standings(created["session"].pk)

        return group

    def _add_random_match(self, builder: MatchLogBuilder, names: List[str], max_goals: int):
        lone_side = self.weighted_bool(0.25)
        seats = self.rng.sample(names, 3 if lone_side else 4)
        team_a, team_b = seats[:2], seats[2:]
        if self.weighted_bool(0.5):
            team_a, team_b = team_b, team_a
        score = (self.rng.randint(0, max_goals), self.rng.randint(0, max_goals))
        builder.match(team_a, team_b, score)

    def _assign_clubs(self, matches):
        for match in matches:
            match.team_a_club, match.team_b_club = self.rng.sample(CLUBS, 2)
            match.save(update_fields=["team_a_club", "team_b_club"])

