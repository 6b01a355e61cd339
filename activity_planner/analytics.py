from __future__ import annotations

# -----------------------------------------------------------------------------
# Progress analytics
# -----------------------------------------------------------------------------
# - ProgressAnalyzer: daily summaries (completed/incomplete/minutes) and the
#   comparison of completed activities per category against the weekly targets
# - SuggestionGenerator: today's minutes per category against the daily targets
#
# Both work on plain activity lists; the recommendation table is passed in.
# -----------------------------------------------------------------------------


import math
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Iterable

from activity_planner.models import Activity, Category
from activity_planner.recommendations import DEFAULT_RECOMMENDATIONS, RecommendationTable

__all__ = [
    "ALL_BALANCED_MESSAGE",
    "NO_COMPLETED_MESSAGE",
    "DailyActivitySummary",
    "ComparisonData",
    "ProgressSeries",
    "ProgressAnalyzer",
    "SuggestionGenerator",
]

ALL_BALANCED_MESSAGE = "All activity types are well-balanced!"
NO_COMPLETED_MESSAGE = "No activities completed yet."


@dataclass(slots=True)
class DailyActivitySummary:
    """
    Aggregated activities of one calendar day.

    Attributes:
        date (date): Calendar day (time of day discarded).
        completed (int): Number of completed activities.
        incomplete (int): Number of open activities.
        total_duration_minutes (float): Summed duration of all activities of the day.
        completed_titles (str): Newline-joined titles, encounter order.
        incomplete_titles (str): Newline-joined titles, encounter order.
    """

    date: date
    completed: int
    incomplete: int
    total_duration_minutes: float
    completed_titles: str = ""
    incomplete_titles: str = ""


@dataclass(slots=True)
class ComparisonData:
    """Completed activities of one category vs. its weekly target (minutes)."""

    category: Category
    completed: int
    recommended: int


@dataclass(slots=True)
class ProgressSeries:
    """
    Chart-ready series derived from daily summaries.

    Notes:
        Labels use the `MM/dd` form; all lists have the same length.
    """

    labels: list[str] = field(default_factory=list)
    completed: list[int] = field(default_factory=list)
    incomplete: list[int] = field(default_factory=list)
    durations: list[float] = field(default_factory=list)


class ProgressAnalyzer:
    """
    Aggregates activity lists into progress figures.

    Purpose:
        Provides the data the progress dashboard/report shows: completion per
        day, minutes per day, and completed counts per category compared with
        the recommendations.
    """

    def __init__(self, recommendations: RecommendationTable = DEFAULT_RECOMMENDATIONS) -> None:
        self._recommendations = recommendations

    @property
    def recommendations(self) -> RecommendationTable:
        return self._recommendations

    def analyze_progress(self, activities: Iterable[Activity]) -> list[DailyActivitySummary]:
        """
        Groups activities by calendar day.

        Parameters:
            activities (Iterable[Activity]): Activities of one child.

        Returns:
            list[DailyActivitySummary]: One entry per distinct day, ascending.
        """

        by_day: dict[date, list[Activity]] = defaultdict(list)
        for activity in activities:
            by_day[activity.scheduled_date.date()].append(activity)

        out: list[DailyActivitySummary] = []
        for day in sorted(by_day):
            group = by_day[day]
            done = [a.title for a in group if a.is_completed]
            open_ = [a.title for a in group if not a.is_completed]
            out.append(
                DailyActivitySummary(
                    date=day,
                    completed=len(done),
                    incomplete=len(open_),
                    total_duration_minutes=sum(a.duration_minutes for a in group),
                    completed_titles="\n".join(done),
                    incomplete_titles="\n".join(open_),
                )
            )
        return out

    def get_comparison_data(self, activities: Iterable[Activity]) -> list[ComparisonData]:
        """
        Completed activities per category (all time) vs. weekly recommended minutes.

        Returns:
            list[ComparisonData]: One row per table category, table order; categories
            without completions have `completed == 0`.
        """

        completed_per_category = Counter(a.category for a in activities if a.is_completed)
        return [
            ComparisonData(
                category=category,
                completed=completed_per_category.get(category, 0),
                recommended=minutes.weekly,
            )
            for category, minutes in self._recommendations.items()
        ]

    def get_completed_activity_titles(self, activities: Iterable[Activity]) -> list[str]:
        # distinct, first occurrence wins
        return list(dict.fromkeys(a.title for a in activities if a.is_completed))

    @staticmethod
    def progress_series(summaries: Iterable[DailyActivitySummary]) -> ProgressSeries:
        series = ProgressSeries()
        for s in summaries:
            series.labels.append(s.date.strftime("%m/%d"))
            series.completed.append(s.completed)
            series.incomplete.append(s.incomplete)
            series.durations.append(s.total_duration_minutes)
        return series


class SuggestionGenerator:
    """
    Suggests categories that need more minutes today.

    Notes:
        `clock` returns "today"; tests inject a fixed date.
    """

    def __init__(
        self,
        recommendations: RecommendationTable = DEFAULT_RECOMMENDATIONS,
        *,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._recommendations = recommendations
        self._clock = clock

    def minutes_today(self, activities: Iterable[Activity]) -> dict[Category, float]:
        today = self._clock()
        totals: dict[Category, float] = defaultdict(float)
        for activity in activities:
            if activity.scheduled_date.date() == today:
                totals[activity.category] += activity.duration_minutes
        return dict(totals)

    def get_suggestions(self, activities: Iterable[Activity]) -> list[str]:
        """
        Builds the suggestion messages for today.

        Parameters:
            activities (Iterable[Activity]): Activities of one child.

        Returns:
            list[str]: One message per category below its daily target, in table
            order. If no minutes are logged today, or every category meets its
            target, a single `ALL_BALANCED_MESSAGE`.
        """

        totals = self.minutes_today(activities)
        # no minutes logged today at all: nothing to compare
        if not any(totals.values()):
            return [ALL_BALANCED_MESSAGE]

        suggestions: list[str] = []
        for category, minutes in self._recommendations.items():
            logged = totals.get(category, 0.0)
            if logged < minutes.daily:
                missing = math.ceil(minutes.daily - logged)
                suggestions.append(f"Add more {category} activities today (Need {missing} more minutes).")
        return suggestions or [ALL_BALANCED_MESSAGE]
