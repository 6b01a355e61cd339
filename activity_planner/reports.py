"""
Plain-text reports for the command line.

Purpose:
    Renders a child's activity list and progress figures (daily summaries,
    suggestions, completed titles, comparison with recommendations) as text.

Notes:
    Pure formatting: all numbers come from `analytics.py`.
"""

from __future__ import annotations

import math
from datetime import date
from typing import Iterable, Sequence

from activity_planner.analytics import (
    NO_COMPLETED_MESSAGE,
    ComparisonData,
    DailyActivitySummary,
    ProgressAnalyzer,
)
from activity_planner.models import Activity, Child

# Minutes per bar mark in the "Minutes Per Day" section
MINUTES_PER_MARK = 10


def format_child(child: Child, today: date) -> str:
    years, months = child.age_in_years_and_months(today)
    return f"{child.name}, Age: {years} years and {months} months"


def format_activity(activity: Activity) -> str:
    return str(activity)


def format_duration_minutes(minutes: float) -> str:
    """
    Formats minutes as `1 h 05 min` / `45 min`.

    Notes:
        Fractions of a minute are rounded to the nearest minute.
    """

    total = int(round(minutes))
    hours, rest = divmod(total, 60)
    if hours:
        return f"{hours} h {rest:02d} min"
    return f"{rest} min"


def build_activity_listing(child: Child, activities: Sequence[Activity], today: date) -> str:
    """
    Renders the activity table of one child.

    Parameters:
        child (Child): The child (header line).
        activities (Sequence[Activity]): Activities in display order.
        today (date): Reference date for the age in the header.

    Returns:
        str: Multi-line text.
    """

    lines = [format_child(child, today)]
    if not activities:
        lines.append("  (no activities scheduled)")
        return "\n".join(lines)

    width = max(len("Title"), *(len(a.title) for a in activities))
    lines.append(f"  {'Title':<{width}}  {'Scheduled':<16}  {'Category':<12}  {'Duration':>10}  Status")
    for a in activities:
        status = "done" if a.is_completed else "open"
        lines.append(
            f"  {a.title:<{width}}  {a.scheduled_date:%Y-%m-%d %H:%M}  {str(a.category):<12}  "
            f"{format_duration_minutes(a.duration_minutes):>10}  {status}"
        )
    return "\n".join(lines)


def _section(title: str) -> list[str]:
    return ["", title, "-" * len(title)]


def build_progress_report(
    child: Child,
    summaries: Iterable[DailyActivitySummary],
    comparison: Iterable[ComparisonData],
    suggestions: Iterable[str],
    completed_titles: Sequence[str],
    today: date,
) -> str:
    """
    Renders the progress report of one child.

    Sections:
        Activity Completion Over Time, Minutes Per Day, Suggested Activities,
        Completed Activities, Comparison With Recommendations.

    Returns:
        str: Multi-line text.
    """

    lines = [f"Progress Report for {format_child(child, today)}"]

    lines += _section("Activity Completion Over Time")
    summaries = list(summaries)
    if not summaries:
        lines.append("  (no activities scheduled)")
    for s in summaries:
        lines.append(
            f"  {s.date:%Y-%m-%d}  completed: {s.completed}  incomplete: {s.incomplete}  "
            f"total: {format_duration_minutes(s.total_duration_minutes)}"
        )

    lines += _section("Minutes Per Day")
    series = ProgressAnalyzer.progress_series(summaries)
    for label, minutes in zip(series.labels, series.durations):
        bar = "#" * math.ceil(minutes / MINUTES_PER_MARK)
        lines.append(f"  {label}  {bar} {format_duration_minutes(minutes)}")

    lines += _section("Suggested Activities")
    lines += [f"  {message}" for message in suggestions]

    lines += _section("Completed Activities")
    lines += [f"  {title}" for title in completed_titles] or [f"  {NO_COMPLETED_MESSAGE}"]

    lines += _section("Comparison With Recommendations")
    for row in comparison:
        lines.append(f"  {str(row.category):<12}  completed: {row.completed:>3}  recommended: {row.recommended} min/week")

    return "\n".join(lines)
