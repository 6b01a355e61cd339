"""
Recommended activity durations per category.

Purpose:
    Static targets (minutes per day, week and month) that the progress analyzer
    and the suggestion generator compare the logged activities against.

Notes:
    The table is read-only (`MappingProxyType`) and its iteration order is the
    declaration order below, which is also the order of the comparison rows and
    of the suggestion messages. Analytics classes receive the table as a
    constructor argument, so tests can pass a custom table.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, NamedTuple

from activity_planner.models import Category


class RecommendedMinutes(NamedTuple):
    daily: int
    weekly: int
    monthly: int


RecommendationTable = Mapping[Category, RecommendedMinutes]


DEFAULT_RECOMMENDATIONS: RecommendationTable = MappingProxyType(
    {
        Category.PHYSICAL: RecommendedMinutes(daily=60, weekly=300, monthly=1200),
        Category.EDUCATIONAL: RecommendedMinutes(daily=30, weekly=180, monthly=720),
        Category.SOCIAL: RecommendedMinutes(daily=20, weekly=120, monthly=480),
        Category.CREATIVE: RecommendedMinutes(daily=15, weekly=75, monthly=300),
        Category.RECREATIONAL: RecommendedMinutes(daily=30, weekly=150, monthly=600),
    }
)


def freeze_recommendations(table: Mapping[Category, tuple[int, int, int]]) -> RecommendationTable:
    """
    Turns a user supplied table into a read-only recommendation table.

    Parameters:
        table (Mapping[Category, tuple[int, int, int]]): Category -> (daily, weekly, monthly).

    Returns:
        RecommendationTable: Read-only copy, insertion order preserved.

    Raises:
        TypeError: If a key is not a `Category`.
        ValueError: If a value is negative.
    """

    frozen: dict[Category, RecommendedMinutes] = {}
    for category, minutes in table.items():
        if not isinstance(category, Category):
            raise TypeError(f"recommendation key must be a Category, got {category!r}")
        entry = RecommendedMinutes(*(int(m) for m in minutes))
        if min(entry) < 0:
            raise ValueError(f"recommended minutes for {category} must not be negative")
        frozen[category] = entry
    return MappingProxyType(frozen)
