from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from matchnight.scoreboard.conf import recompute_on_write
from matchnight.scoreboard.models import Match
from matchnight.scoreboard.standings import schedule_recompute

# Columns that feed the standings; saves touching only others are ignored
STANDINGS_FIELDS = frozenset(
    [
        "session",
        "session_id",
        "team_a_player_ids",
        "team_b_player_ids",
        "team_a_goals",
        "team_b_goals",
    ]
)


@receiver(post_save, sender=Match, dispatch_uid="matchnight_match_saved")
def match_saved(instance, created, update_fields=None, **kwargs):
    if kwargs.get("raw") or not recompute_on_write():
        return
    if update_fields is not None and not STANDINGS_FIELDS.intersection(update_fields):
        return
    schedule_recompute(instance.session_id, using=kwargs.get("using"))


@receiver(post_delete, sender=Match, dispatch_uid="matchnight_match_deleted")
def match_deleted(instance, **kwargs):
    if not recompute_on_write():
        return
    schedule_recompute(instance.session_id, using=kwargs.get("using"))
