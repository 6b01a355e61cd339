from __future__ import annotations

# -----------------------------------------------------------------------------
# Domain model (Entities)
# -----------------------------------------------------------------------------
# Core objects of the planner: User -> Child -> Activity.
#
# Goal: lean, easily testable dataclasses.
# - Entities hold data and a few list helpers, nothing else.
# - Business rules (age range, unique titles/names) live in `managers.py`.
# - Text parsing (user input) lives in `validation.py`, file format in `codec.py`.
# -----------------------------------------------------------------------------


import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional


class Category(Enum):
    """
    Fixed classification of activities.

    Notes:
        The declaration order is the order used by `Category.by_index()` and by
        the persisted `Type:` field when it holds a number.
    """

    PHYSICAL = "Physical"
    EDUCATIONAL = "Educational"
    RECREATIONAL = "Recreational"
    SOCIAL = "Social"
    CREATIVE = "Creative"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def by_index(cls, index: int) -> "Category":
        return list(cls)[index]


# Default value of `Activity.scheduled_date` / `Child.date_of_birth` for records
# read from a file that lack the field.
MIN_DATETIME = datetime(1, 1, 1)
MIN_DATE = date(1, 1, 1)


def _new_activity_id() -> str:
    return uuid.uuid4().hex


def calculate_age(dob: date, today: date) -> int:
    """
    Computes the age in complete years.

    Purpose:
        A child becomes one year older on the birthday itself (month/day aware).
        Birthdays on Feb 29 count as passed on Mar 1 in non-leap years.

    Parameters:
        dob (date): Date of birth.
        today (date): Reference date.

    Returns:
        int: Age in whole years (negative for birth dates in the future).
    """

    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def age_in_years_and_months(dob: date, today: date) -> tuple[int, int]:
    """
    Computes the age as (complete years, additional complete months).

    Parameters:
        dob (date): Date of birth.
        today (date): Reference date.

    Returns:
        tuple[int, int]: `(years, months)` with `0 <= months < 12`.
    """

    months = (today.year - dob.year) * 12 + (today.month - dob.month)
    if today.day < dob.day:
        months -= 1
    return divmod(months, 12)


@dataclass(slots=True, eq=False)
class Activity:
    """
    An activity scheduled for one child.

    Purpose:
        Plain, mutable record. Managers mutate fields in place on update and the
        file codec fills a default instance field by field while reading.

    Attributes:
        title (str): Short title, unique per child (case-insensitive, enforced by
            `ActivityManager`).
        description (str): Free text, may be empty.
        scheduled_date (datetime): Date and time the activity takes place.
        category (Category): Classification used by the analytics.
        duration (timedelta): Planned length, never negative.
        is_completed (bool): Completion flag.
        activity_id (str): Stable identifier generated on construction.

    Notes:
        Equality is identity based (`eq=False`): two activities with equal fields
        are still different activities. Lookups by key use `activity_id`.
    """

    title: str = ""
    description: str = ""
    scheduled_date: datetime = MIN_DATETIME
    category: Category = Category.PHYSICAL
    duration: timedelta = timedelta(0)
    is_completed: bool = False
    activity_id: str = field(default_factory=_new_activity_id)

    def __post_init__(self) -> None:
        if not isinstance(self.category, Category):
            raise TypeError("category must be a Category")
        # Durations are non-negative time spans
        if self.duration < timedelta(0):
            raise ValueError("duration must not be negative")
        if self.description is None:
            self.description = ""

    @property
    def duration_minutes(self) -> float:
        return self.duration.total_seconds() / 60.0

    def toggle_completion(self) -> None:
        self.is_completed = not self.is_completed

    def __str__(self) -> str:
        return f"{self.title} scheduled on {self.scheduled_date:%Y-%m-%d %H:%M} ({self.category})"


@dataclass(slots=True)
class Child:
    """
    A child with personal details and an ordered list of activities.

    Attributes:
        name (str): Display name (unique per user, case-insensitive, enforced by
            `ChildManager`).
        date_of_birth (date): Birth date; the 3..6 years range is checked by
            `ChildManager.add_child` only.
        activities (list[Activity]): Owned activities in insertion order.
    """

    name: str = ""
    date_of_birth: date = MIN_DATE
    activities: list[Activity] = field(default_factory=list)

    def add_activity(self, activity: Activity) -> None:
        if activity is None:
            raise TypeError("activity must not be None")
        self.activities.append(activity)

    def find_activity(self, activity_id: str) -> Optional[Activity]:
        for activity in self.activities:
            if activity.activity_id == activity_id:
                return activity
        return None

    def contains_activity(self, activity: Activity) -> bool:
        if activity is None:
            raise TypeError("activity must not be None")
        return self.find_activity(activity.activity_id) is not None

    def remove_activity(self, activity: Activity) -> bool:
        """
        Removes an activity by its identifier.

        Returns:
            bool: True if an activity was removed, False if it was not in the list.

        Raises:
            TypeError: If `activity` is None.
        """

        if activity is None:
            raise TypeError("activity must not be None")
        for index, candidate in enumerate(self.activities):
            if candidate.activity_id == activity.activity_id:
                del self.activities[index]
                return True
        return False

    def clear_activities(self) -> None:
        self.activities.clear()

    def sort_activities_by_date(self) -> None:
        self.activities.sort(key=lambda a: a.scheduled_date)

    def age_in_years_and_months(self, today: date) -> tuple[int, int]:
        return age_in_years_and_months(self.date_of_birth, today)


@dataclass(slots=True)
class User:
    """
    Owner of all planner data (the whole persisted graph).

    Notes:
        The model does not enforce unique child names; `ChildManager` does.
    """

    children: list[Child] = field(default_factory=list)

    def add_child(self, child: Child) -> None:
        if child is None:
            raise TypeError("child must not be None")
        self.children.append(child)
