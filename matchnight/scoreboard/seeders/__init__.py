"""
Database seeders for generating demo data.

Sessions and matches are described with the standings_core builders and
persisted through structure_to_db.
"""

from .base import BaseSeeder
from .match_night_seeder import MatchNightSeeder

__all__ = [
    "BaseSeeder",
    "MatchNightSeeder",
]
