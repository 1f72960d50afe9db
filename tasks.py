import os
import sys
from invoke import task
from pathlib import Path

# Get project root directory
PROJECT_ROOT = Path(__file__).parent.absolute()

# Note: .env file is automatically loaded by Django settings
# No need to load it here to avoid duplication

TEST_SETTINGS = "matchnight.test_settings"


def project_relative(path):
    """Convert a relative path to an absolute path relative to the project root."""
    return str(PROJECT_ROOT / path)


def import_db_name():
    """Import database name from Django settings."""
    sys.path.insert(0, str(PROJECT_ROOT))
    from matchnight.settings import DATABASES
    return DATABASES['default']['NAME']


@task
def migrate(c):
    """Run Django database migrations."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} migrate")


@task
def makemigrations(c):
    """Create new Django migrations."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} makemigrations")


@task
def shell(c):
    """Start Django shell."""
    manage_py = project_relative("manage.py")
    c.run(f"python {manage_py} shell")


@task
def test(c, path=None):
    """Run Django tests. Optionally specify a specific test path."""
    manage_py = project_relative("manage.py")
    with c.prefix(f"export DJANGO_SETTINGS_MODULE={TEST_SETTINGS}"):
        if path:
            c.run(f"python {manage_py} test {path}")
        else:
            c.run(f"python {manage_py} test")


@task
def pytest(c, path=None):
    """Run the test suite with pytest-django."""
    c.run(f"pytest {path or ''}".strip())


@task
def recompute(c, session=None, group=None):
    """Recompute persisted standings for a session, a group or everything."""
    manage_py = project_relative("manage.py")
    if session:
        c.run(f"python {manage_py} recompute_standings --session {session}")
    elif group:
        c.run(f"python {manage_py} recompute_standings --group {group}")
    else:
        c.run(f"python {manage_py} recompute_standings --all")


@task
def seed(c, sessions=3, players=6, matches=10, clear=False):
    """Seed a demo group of match night sessions."""
    manage_py = project_relative("manage.py")
    args = f"--sessions {sessions} --players {players} --matches {matches}"
    if clear:
        args += " --clear"
    c.run(f"python {manage_py} seed_match_night {args}")


@task
def resetdb(c):
    """Delete the local SQLite database and migrate from scratch."""
    database_name = import_db_name()
    if os.path.exists(database_name):
        os.remove(database_name)
        print(f"Removed {database_name}")
    migrate(c)
