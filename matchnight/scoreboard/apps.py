from django.apps import AppConfig


class ScoreboardConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'matchnight.scoreboard'
    verbose_name = 'Match Night Scoreboard'

    def ready(self):
        # Registers the recompute-on-write receivers
        from matchnight.scoreboard import signals  # noqa: F401
