"""
Management command to rebuild persisted standings from the match logs.
"""

from django.core.management.base import BaseCommand, CommandError

from matchnight.scoreboard.models import Group, Session
from matchnight.scoreboard.standings import recompute_session_standings
from matchnight.standings_core.structure import MalformedMatchError


class Command(BaseCommand):
    help = "Recompute player and pair standings for sessions"

    def add_arguments(self, parser):
        parser.add_argument(
            "--session",
            type=int,
            action="append",
            default=[],
            help="Session ID to recompute (can be repeated)",
        )
        parser.add_argument(
            "--group",
            type=int,
            default=None,
            help="Recompute every session of this group ID",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Recompute every session in the database",
        )

    def handle(self, *args, **options):
        if options["all"]:
            sessions = Session.objects.all()
        elif options["group"] is not None:
            try:
                group = Group.objects.get(pk=options["group"])
            except Group.DoesNotExist:
                raise CommandError(f"Group {options['group']} does not exist")
            sessions = group.sessions.all()
        elif options["session"]:
            sessions = Session.objects.filter(pk__in=options["session"])
            missing = set(options["session"]) - set(sessions.values_list("pk", flat=True))
            if missing:
                raise CommandError(
                    f"Sessions do not exist: {', '.join(str(pk) for pk in sorted(missing))}"
                )
        else:
            raise CommandError("Pass --session, --group or --all")

        failed = 0
        session_ids = list(sessions.order_by("id").values_list("id", flat=True))
        for session_id in session_ids:
            try:
                standings = recompute_session_standings(session_id)
            except MalformedMatchError as e:
                failed += 1
                self.stdout.write(self.style.ERROR(f"✗ Session {session_id}: {e}"))
                continue
            self.stdout.write(
                f"  - Session {session_id}: {len(standings.players)} players, "
                f"{len(standings.pairs)} pairs"
            )

        if failed:
            raise CommandError(
                f"{failed} of {len(session_ids)} sessions have malformed matches"
            )
        self.stdout.write(
            self.style.SUCCESS(f"✓ Recomputed standings for {len(session_ids)} sessions")
        )
