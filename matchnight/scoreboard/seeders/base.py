"""
Base class for database seeders.
"""

import random
from typing import Any, List

from faker import Faker


class BaseSeeder:
    """Common helpers for seeders; every created object is tracked."""

    def __init__(self, fake: Faker, rng: random.Random = None):
        self.fake = fake
        self.rng = rng or random.Random()
        self.created_objects: List[Any] = []

    def seed(self, *args, **kwargs):
        raise NotImplementedError

    def weighted_bool(self, true_probability: float) -> bool:
        """Return True with the given probability."""
        return self.rng.random() < true_probability

    def _track_object(self, obj: Any) -> Any:
        self.created_objects.append(obj)
        return obj
