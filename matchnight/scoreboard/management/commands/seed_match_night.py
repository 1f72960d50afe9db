"""
Management command to seed the database with demo match nights.
"""

import random

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from faker import Faker

from matchnight.scoreboard.seeders import MatchNightSeeder


class Command(BaseCommand):
    help = "Seed the database with a group of demo match night sessions"

    def add_arguments(self, parser):
        parser.add_argument(
            "--sessions",
            type=int,
            default=3,
            help="Number of sessions in the group (default: 3)",
        )
        parser.add_argument(
            "--players",
            type=int,
            default=6,
            help="Number of players per session (default: 6)",
        )
        parser.add_argument(
            "--matches",
            type=int,
            default=10,
            help="Number of matches per session (default: 10)",
        )
        parser.add_argument(
            "--group-name",
            type=str,
            default=None,
            help="Name of the group (default: generated)",
        )
        parser.add_argument(
            "--locale",
            type=str,
            default="en_US",
            help="Faker locale for data generation (default: en_US)",
        )
        parser.add_argument(
            "--seed",
            type=int,
            default=None,
            help="Random seed for reproducible data",
        )
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Delete existing groups, sessions and profiles before seeding",
        )

    def handle(self, *args, **options):
        fake = Faker(options["locale"])
        rng = random.Random(options["seed"])
        if options["seed"] is not None:
            fake.seed_instance(options["seed"])

        self.stdout.write(self.style.WARNING("Starting match night seeding..."))

        if options["clear"]:
            self._clear_data()

        seeder = MatchNightSeeder(fake, rng=rng)
        try:
            with transaction.atomic():
                group = seeder.seed(
                    sessions=options["sessions"],
                    players=options["players"],
                    matches=options["matches"],
                    group_name=options["group_name"],
                )
        except ValueError as e:
            raise CommandError(str(e))

        self.stdout.write(
            self.style.SUCCESS(
                f"✓ Created group '{group.name}' with "
                f"{group.sessions.count()} sessions and "
                f"{group.members.count()} members"
            )
        )
        self.stdout.write(f"  - {len(seeder.created_objects)} objects tracked")

    def _clear_data(self):
        """Clear existing match night data."""
        from matchnight.scoreboard.models import Group, Profile, Session

        self.stdout.write(self.style.WARNING("Clearing existing data..."))

        # Sessions cascade to players, matches and standings rows
        for model in [Session, Group, Profile]:
            count = model.objects.count()
            if count > 0:
                model.objects.all().delete()
                self.stdout.write(f"  - Deleted {count} {model.__name__} records")
