"""
Django settings for matchnight.

Values come from the environment; a local .env file is loaded first so
development machines don't need to export anything.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent

load_dotenv(BASE_DIR / ".env", override=False)


def env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def env_int(name, default=None):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    if value.strip().lower() == "none":
        return None
    return int(value)


SECRET_KEY = os.getenv("MATCHNIGHT_SECRET_KEY", "matchnight-insecure-development-key")
DEBUG = env_bool("MATCHNIGHT_DEBUG", True)
ALLOWED_HOSTS = [h for h in os.getenv("MATCHNIGHT_ALLOWED_HOSTS", "").split(",") if h]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "matchnight.standings_core",
    "matchnight.scoreboard",
]

MIDDLEWARE = []

DATABASES = {
    "default": {
        "ENGINE": os.getenv("MATCHNIGHT_DB_ENGINE", "django.db.backends.sqlite3"),
        "NAME": os.getenv("MATCHNIGHT_DB_NAME", str(BASE_DIR / "matchnight.sqlite3")),
        "USER": os.getenv("MATCHNIGHT_DB_USER", ""),
        "PASSWORD": os.getenv("MATCHNIGHT_DB_PASSWORD", ""),
        "HOST": os.getenv("MATCHNIGHT_DB_HOST", ""),
        "PORT": os.getenv("MATCHNIGHT_DB_PORT", ""),
    }
}

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

# Standings policy (see matchnight/scoreboard/conf.py)
MATCHNIGHT_MAX_GOALS = env_int("MATCHNIGHT_MAX_GOALS", 19)
MATCHNIGHT_INCLUDE_IDLE_PLAYERS = env_bool("MATCHNIGHT_INCLUDE_IDLE_PLAYERS", False)
MATCHNIGHT_NAME_COLLATION = os.getenv("MATCHNIGHT_NAME_COLLATION", "locale")
MATCHNIGHT_RECOMPUTE_ON_WRITE = env_bool("MATCHNIGHT_RECOMPUTE_ON_WRITE", True)

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "matchnight": {
            "handlers": ["console"],
            "level": os.getenv("MATCHNIGHT_LOG_LEVEL", "INFO"),
            "propagate": False,
        },
    },
}
