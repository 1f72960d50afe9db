import random
from datetime import timedelta

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from matchnight.standings_core.stats import TeamStats

# Characters for join codes, without the easily confused ones (0/O, 1/I)
JOIN_CODE_CHARS = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
JOIN_CODE_LENGTH = 6
SESSION_DURATION = timedelta(hours=10)


def generate_join_code():
    return "".join(random.choice(JOIN_CODE_CHARS) for _ in range(JOIN_CODE_LENGTH))


def default_expiry():
    return timezone.now() + SESSION_DURATION


# -------------------------------------------------------------------------------
class _BaseModel(models.Model):
    date_created = models.DateTimeField(auto_now_add=True)
    date_modified = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# -------------------------------------------------------------------------------
class Profile(_BaseModel):
    """A persistent account a session player can be linked to."""

    handle = models.SlugField(max_length=64, unique=True)
    display_name = models.CharField(max_length=64)

    class Meta:
        ordering = ("handle",)

    def __str__(self):
        return self.display_name


# -------------------------------------------------------------------------------
class Group(_BaseModel):
    """A persistent group whose sessions share all-time leaderboards."""

    name = models.CharField(max_length=255)
    members = models.ManyToManyField(Profile, blank=True, related_name="groups")

    def __str__(self):
        return self.name


SESSION_STATUS_OPTIONS = (
    ("active", "Active"),
    ("ended", "Ended"),
    ("expired", "Expired"),
)


# -------------------------------------------------------------------------------
class Session(_BaseModel):
    """A time-limited match night, ad hoc or belonging to a group."""

    group = models.ForeignKey(
        Group, null=True, blank=True, on_delete=models.CASCADE, related_name="sessions"
    )
    initiator = models.ForeignKey(
        Profile, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    join_code = models.CharField(
        max_length=JOIN_CODE_LENGTH, unique=True, default=generate_join_code
    )
    status = models.CharField(
        max_length=16, choices=SESSION_STATUS_OPTIONS, default="active"
    )
    expires_at = models.DateTimeField(default=default_expiry)
    ended_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ("date_created", "id")

    def __str__(self):
        return f"Session {self.join_code}"

    def is_expired(self, now=None):
        return self.expires_at < (now or timezone.now())

    def is_active(self, now=None):
        return self.status == "active" and not self.is_expired(now)

    def end(self):
        self.status = "ended"
        self.ended_at = timezone.now()
        self.save(update_fields=["status", "ended_at", "date_modified"])


# -------------------------------------------------------------------------------
class SessionPlayer(_BaseModel):
    """A player of one session; guests have no profile."""

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="players")
    profile = models.ForeignKey(
        Profile, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    display_name = models.CharField(max_length=64)

    class Meta:
        ordering = ("session", "id")
        constraints = [
            models.UniqueConstraint(
                fields=["session", "profile"],
                condition=models.Q(profile__isnull=False),
                name="unique_profile_per_session",
            ),
        ]

    def __str__(self):
        return self.display_name

    @property
    def is_guest(self):
        return self.profile_id is None


# -------------------------------------------------------------------------------
class Match(_BaseModel):
    """A logged match. Sides hold session player IDs; edits are delete + recreate."""

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="matches")
    logged_by = models.ForeignKey(
        Profile, null=True, blank=True, on_delete=models.SET_NULL, related_name="+"
    )
    team_a_player_ids = models.JSONField(default=list)
    team_b_player_ids = models.JSONField(default=list)
    team_a_club = models.CharField(max_length=64, blank=True)
    team_b_club = models.CharField(max_length=64, blank=True)
    team_a_goals = models.PositiveSmallIntegerField(validators=[MinValueValidator(0)])
    team_b_goals = models.PositiveSmallIntegerField(validators=[MinValueValidator(0)])
    played_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ("played_at", "id")
        verbose_name_plural = "matches"

    def __str__(self):
        return "%s - %s %d-%d" % (
            self.team_a_club or "Team A",
            self.team_b_club or "Team B",
            self.team_a_goals,
            self.team_b_goals,
        )

    def clean(self):
        from matchnight.scoreboard.conf import get_max_goals
        from matchnight.scoreboard.db_to_structure import (
            match_row_to_result,
            roster_for_session,
        )
        from matchnight.standings_core.structure import (
            MalformedMatchError,
            MatchLog,
            validate_match,
        )

        if self.session_id is None:
            raise ValidationError("A match must belong to a session.")

        try:
            result = match_row_to_result(self)
            roster = MatchLog(players=roster_for_session(self.session))
            validate_match(result, roster, get_max_goals())
        except MalformedMatchError as e:
            raise ValidationError(e.reason)


# -------------------------------------------------------------------------------
class _StatsColumns(models.Model):
    mp = models.PositiveIntegerField(default=0)
    w = models.PositiveIntegerField(default=0)
    d = models.PositiveIntegerField(default=0)
    l = models.PositiveIntegerField(default=0)  # noqa: E741
    gf = models.PositiveIntegerField(default=0)
    ga = models.PositiveIntegerField(default=0)
    gd = models.IntegerField(default=0)
    pts = models.PositiveIntegerField(default=0)

    class Meta:
        abstract = True

    @property
    def stats(self):
        return TeamStats(
            mp=self.mp,
            w=self.w,
            d=self.d,
            l=self.l,
            gf=self.gf,
            ga=self.ga,
            gd=self.gd,
            pts=self.pts,
        )


# -------------------------------------------------------------------------------
class PlayerStats(_StatsColumns):
    """Derived standings row of a session player. Replaced wholesale on recompute."""

    session = models.ForeignKey(
        Session, on_delete=models.CASCADE, related_name="player_stats"
    )
    session_player = models.ForeignKey(
        SessionPlayer, on_delete=models.CASCADE, related_name="+"
    )

    class Meta:
        verbose_name_plural = "player stats"
        constraints = [
            models.UniqueConstraint(
                fields=["session", "session_player"], name="unique_player_stats"
            ),
        ]

    def __str__(self):
        return f"{self.session_player.display_name} ({self.pts} pts)"

    @property
    def name(self):
        return self.session_player.display_name

    @property
    def identity(self):
        return str(self.session_player_id)


# -------------------------------------------------------------------------------
class PairStats(_StatsColumns):
    """Derived standings row of a pair; player 1 is the lower identifier."""

    session = models.ForeignKey(
        Session, on_delete=models.CASCADE, related_name="pair_stats"
    )
    session_player_1 = models.ForeignKey(
        SessionPlayer, on_delete=models.CASCADE, related_name="+"
    )
    session_player_2 = models.ForeignKey(
        SessionPlayer, on_delete=models.CASCADE, related_name="+"
    )
    label = models.CharField(max_length=255)

    class Meta:
        verbose_name_plural = "pair stats"
        constraints = [
            models.UniqueConstraint(
                fields=["session", "session_player_1", "session_player_2"],
                name="unique_pair_stats",
            ),
        ]

    def __str__(self):
        return f"{self.label} ({self.pts} pts)"

    @property
    def name(self):
        return self.label

    @property
    def identity(self):
        return f"{self.session_player_1_id}_{self.session_player_2_id}"
