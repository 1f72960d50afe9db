import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import matchnight.scoreboard.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Profile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("handle", models.SlugField(max_length=64, unique=True)),
                ("display_name", models.CharField(max_length=64)),
            ],
            options={
                "ordering": ("handle",),
            },
        ),
        migrations.CreateModel(
            name="Group",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("members", models.ManyToManyField(blank=True, related_name="groups", to="scoreboard.profile")),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Session",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("join_code", models.CharField(default=matchnight.scoreboard.models.generate_join_code, max_length=6, unique=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("ended", "Ended"), ("expired", "Expired")], default="active", max_length=16)),
                ("expires_at", models.DateTimeField(default=matchnight.scoreboard.models.default_expiry)),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("group", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="sessions", to="scoreboard.group")),
                ("initiator", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="scoreboard.profile")),
            ],
            options={
                "ordering": ("date_created", "id"),
            },
        ),
        migrations.CreateModel(
            name="SessionPlayer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("display_name", models.CharField(max_length=64)),
                ("profile", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="scoreboard.profile")),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="players", to="scoreboard.session")),
            ],
            options={
                "ordering": ("session", "id"),
            },
        ),
        migrations.AddConstraint(
            model_name="sessionplayer",
            constraint=models.UniqueConstraint(condition=models.Q(("profile__isnull", False)), fields=("session", "profile"), name="unique_profile_per_session"),
        ),
        migrations.CreateModel(
            name="Match",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("team_a_player_ids", models.JSONField(default=list)),
                ("team_b_player_ids", models.JSONField(default=list)),
                ("team_a_club", models.CharField(blank=True, max_length=64)),
                ("team_b_club", models.CharField(blank=True, max_length=64)),
                ("team_a_goals", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(0)])),
                ("team_b_goals", models.PositiveSmallIntegerField(validators=[django.core.validators.MinValueValidator(0)])),
                ("played_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("logged_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to="scoreboard.profile")),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="matches", to="scoreboard.session")),
            ],
            options={
                "verbose_name_plural": "matches",
                "ordering": ("played_at", "id"),
            },
        ),
        migrations.CreateModel(
            name="PlayerStats",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("mp", models.PositiveIntegerField(default=0)),
                ("w", models.PositiveIntegerField(default=0)),
                ("d", models.PositiveIntegerField(default=0)),
                ("l", models.PositiveIntegerField(default=0)),
                ("gf", models.PositiveIntegerField(default=0)),
                ("ga", models.PositiveIntegerField(default=0)),
                ("gd", models.IntegerField(default=0)),
                ("pts", models.PositiveIntegerField(default=0)),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="player_stats", to="scoreboard.session")),
                ("session_player", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="scoreboard.sessionplayer")),
            ],
            options={
                "verbose_name_plural": "player stats",
            },
        ),
        migrations.AddConstraint(
            model_name="playerstats",
            constraint=models.UniqueConstraint(fields=("session", "session_player"), name="unique_player_stats"),
        ),
        migrations.CreateModel(
            name="PairStats",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("mp", models.PositiveIntegerField(default=0)),
                ("w", models.PositiveIntegerField(default=0)),
                ("d", models.PositiveIntegerField(default=0)),
                ("l", models.PositiveIntegerField(default=0)),
                ("gf", models.PositiveIntegerField(default=0)),
                ("ga", models.PositiveIntegerField(default=0)),
                ("gd", models.IntegerField(default=0)),
                ("pts", models.PositiveIntegerField(default=0)),
                ("label", models.CharField(max_length=255)),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="pair_stats", to="scoreboard.session")),
                ("session_player_1", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="scoreboard.sessionplayer")),
                ("session_player_2", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="+", to="scoreboard.sessionplayer")),
            ],
            options={
                "verbose_name_plural": "pair stats",
            },
        ),
        migrations.AddConstraint(
            model_name="pairstats",
            constraint=models.UniqueConstraint(fields=("session", "session_player_1", "session_player_2"), name="unique_pair_stats"),
        ),
    ]
