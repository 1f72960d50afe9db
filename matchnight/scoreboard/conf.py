"""
Standings policy settings, read from Django settings with defaults.

MATCHNIGHT_MAX_GOALS            Upper bound per side, None disables it (19)
MATCHNIGHT_INCLUDE_IDLE_PLAYERS List players without matches with zero stats (False)
MATCHNIGHT_NAME_COLLATION       "locale" or "ordinal" name tie-break ("locale")
MATCHNIGHT_RECOMPUTE_ON_WRITE   Recompute standings when a match is saved or deleted (True)
"""

from django.conf import settings

from matchnight.standings_core.ranking import Collation
from matchnight.standings_core.structure import MAX_GOALS


def get_max_goals():
    return getattr(settings, "MATCHNIGHT_MAX_GOALS", MAX_GOALS)


def get_include_idle_players():
    return bool(getattr(settings, "MATCHNIGHT_INCLUDE_IDLE_PLAYERS", False))


def get_collation():
    value = getattr(settings, "MATCHNIGHT_NAME_COLLATION", Collation.LOCALE.value)
    return Collation(value)


def recompute_on_write():
    return bool(getattr(settings, "MATCHNIGHT_RECOMPUTE_ON_WRITE", True))
