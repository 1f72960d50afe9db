"""
Leaderboard ordering for standings rows.

Rows are ordered by points, then goal difference, then goals for (all
descending), then by display name ascending. Rows with identical stats and
names fall back to their identity string so the order is always total and
deterministic for the same input.

Any object with ``stats``, ``name`` and ``identity`` attributes can be ranked,
so the same function serves freshly computed rows and rows loaded from the
database.
"""

import unicodedata
from enum import Enum
from typing import Any, List, Sequence, Tuple, TypeVar


Row = TypeVar("Row")


class Collation(Enum):
    """How display names are compared for the final tie-break."""

    LOCALE = "locale"  # Accent- and case-insensitive first, lowercase before uppercase
    ORDINAL = "ordinal"  # Plain code point order


def _locale_name_key(name: str) -> Tuple[str, str]:
    decomposed = unicodedata.normalize("NFKD", name)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    # swapcase puts lowercase ahead of uppercase when the base letters agree
    return (base.casefold(), name.swapcase())


def name_key(name: str, collation: Collation = Collation.LOCALE) -> Any:
    """Return the sort key used for the display name tie-break."""
    if collation == Collation.ORDINAL:
        return name
    return _locale_name_key(name)


def leaderboard_key(row, collation: Collation = Collation.LOCALE) -> tuple:
    """Sort key implementing Pts -> GD -> GF -> name -> identity."""
    stats = row.stats
    return (
        -stats.pts,
        -stats.gd,
        -stats.gf,
        name_key(row.name, collation),
        str(row.identity),
    )


def rank(rows: Sequence[Row], collation: Collation = Collation.LOCALE) -> List[Row]:
    """
    Return the rows in leaderboard order.

    Args:
        rows: Player or pair rows (or anything exposing stats/name/identity)
        collation: How names are compared for the final tie-break

    Returns:
        A new list; the input sequence is not modified
    """
    return sorted(rows, key=lambda row: leaderboard_key(row, collation))


def with_positions(rows: Sequence[Row]) -> List[Tuple[int, Row]]:
    """Pair already-ranked rows with their 1-based leaderboard position."""
    return [(position, row) for position, row in enumerate(rows, 1)]
