from __future__ import annotations

# -----------------------------------------------------------------------------
# Managers (CRUD over the in-memory User graph)
# -----------------------------------------------------------------------------
# ChildManager / ActivityManager implement the use-cases the service facade and
# the CLI call. They enforce the business rules the entities do not:
# - children are 3..6 years old when added, names unique (case-insensitive)
# - activity titles unique per child (case-insensitive)
#
# Expected failures (not found, rule violated) return False / None / [].
# Contract violations (None user, blank names) raise.
# -----------------------------------------------------------------------------


import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional, Union

from activity_planner.models import Activity, Category, Child, User, calculate_age

__all__ = [
    "MIN_CHILD_AGE",
    "MAX_CHILD_AGE",
    "ActivityRef",
    "ChangeCallback",
    "ChildManager",
    "ActivityManager",
]

_LOGGER = logging.getLogger(__name__)

MIN_CHILD_AGE = 3
MAX_CHILD_AGE = 6

# An activity is referenced either by the object or by its identifier
ActivityRef = Union[Activity, str]
ChangeCallback = Callable[[str], None]


def _require_non_empty(val: str, field: str) -> None:
    """
    Checks that a required string is not blank.

    Raises:
        ValueError: If `val` is not a string or blank.
    """

    if not isinstance(val, str) or not val.strip():
        raise ValueError(f"{field} must not be empty")


def _same_name(a: str, b: str) -> bool:
    return a.casefold() == b.casefold()


def _ref_id(ref: ActivityRef) -> str:
    if ref is None:
        raise TypeError("activity reference must not be None")
    if isinstance(ref, Activity):
        return ref.activity_id
    return str(ref)


class _BaseManager:
    """Shared plumbing: owned user and change notification."""

    def __init__(self, user: User, on_change: Optional[ChangeCallback]) -> None:
        if user is None:
            raise TypeError("user must not be None")
        self._user = user
        self._on_change = on_change

    @property
    def user(self) -> User:
        return self._user

    def _changed(self, description: str) -> None:
        _LOGGER.debug("Data changed: %s", description)
        if self._on_change is not None:
            self._on_change(description)


class ChildManager(_BaseManager):
    """
    Adds, edits and deletes children of a `User`.

    Purpose:
        Central place for the child rules: age range on add, unique names
        (case-insensitive) on add and edit.

    Notes:
        `clock` returns "today"; tests inject a fixed date.
    """

    def __init__(
        self,
        user: User,
        *,
        clock: Callable[[], date] = date.today,
        on_change: Optional[ChangeCallback] = None,
    ) -> None:
        super().__init__(user, on_change)
        self._clock = clock

    def calculate_age(self, dob: date) -> int:
        return calculate_age(dob, self._clock())

    def find_child(self, name: str) -> Optional[Child]:
        """
        Finds the first child whose name matches case-insensitively.

        Returns:
            Child | None: Matching child or None.
        """

        for child in self._user.children:
            if _same_name(child.name, name):
                return child
        return None

    def list_children(self) -> list[Child]:
        return list(self._user.children)

    def add_child(self, name: str, dob: date) -> bool:
        """
        Adds a child if the age is within 3..6 years and the name is free.

        Parameters:
            name (str): Child name (required).
            dob (date): Date of birth.

        Returns:
            bool: True if added; False if the age is out of range or the name is
            already used (case-insensitive).

        Raises:
            ValueError: If `name` is blank.
        """

        _require_non_empty(name, "child name")
        if isinstance(dob, datetime):
            dob = dob.date()

        age = self.calculate_age(dob)
        if age < MIN_CHILD_AGE or age > MAX_CHILD_AGE:
            _LOGGER.debug("Rejected child %r: age %d outside %d..%d", name, age, MIN_CHILD_AGE, MAX_CHILD_AGE)
            return False
        if self.find_child(name) is not None:
            _LOGGER.debug("Rejected child %r: name already used", name)
            return False

        self._user.add_child(Child(name=name, date_of_birth=dob))
        self._changed(f"child added: {name}")
        return True

    def edit_child(self, old_name: str, new_name: str, new_dob: date) -> bool:
        """
        Renames a child and changes the birth date in place.

        Returns:
            bool: False if no child matches `old_name` or `new_name` belongs to a
            different child.

        Raises:
            ValueError: If `old_name` or `new_name` is blank.

        Notes:
            The 3..6 years range is not re-validated on edit.
        """

        _require_non_empty(old_name, "old name")
        _require_non_empty(new_name, "new name")
        if isinstance(new_dob, datetime):
            new_dob = new_dob.date()

        child = self.find_child(old_name)
        if child is None:
            return False
        for other in self._user.children:
            if other is not child and _same_name(other.name, new_name):
                _LOGGER.debug("Rejected rename %r -> %r: name already used", old_name, new_name)
                return False

        child.name = new_name
        child.date_of_birth = new_dob
        self._changed(f"child edited: {old_name} -> {new_name}")
        return True

    def delete_child(self, name: str) -> bool:
        """
        Deletes every child whose name matches case-insensitively, with all
        their activities.

        Returns:
            bool: True if at least one child was removed.

        Raises:
            ValueError: If `name` is blank.
        """

        _require_non_empty(name, "child name")
        before = len(self._user.children)
        self._user.children[:] = [c for c in self._user.children if not _same_name(c.name, name)]
        removed = before - len(self._user.children)
        if removed:
            self._changed(f"child deleted: {name} ({removed})")
        return removed > 0


class ActivityManager(_BaseManager):
    """
    Adds, updates, deletes and lists the activities of a child.

    Notes:
        Children are looked up by exact name here (as entered/selected), while
        activity titles are compared case-insensitively.
    """

    def __init__(self, user: User, *, on_change: Optional[ChangeCallback] = None) -> None:
        super().__init__(user, on_change)

    def _child(self, child_name: str) -> Optional[Child]:
        for child in self._user.children:
            if child.name == child_name:
                return child
        return None

    @staticmethod
    def _title_taken(child: Child, title: str, *, ignore: Optional[Activity] = None) -> bool:
        return any(
            a is not ignore and _same_name(a.title, title)
            for a in child.activities
        )

    def add_activity(
        self,
        child_name: str,
        title: str,
        description: str,
        scheduled_date: datetime,
        category: Category,
        duration: timedelta,
    ) -> Optional[Activity]:
        """
        Schedules a new activity for a child.

        Parameters:
            child_name (str): Exact name of the child.
            title (str): Title (required, unique per child case-insensitively).
            description (str): Free text (None is stored as "").
            scheduled_date (datetime): Date and time.
            category (Category): Activity category.
            duration (timedelta): Planned duration (>= 0).

        Returns:
            Activity | None: The new activity (not completed), or None if the child
            does not exist or the title is already used.

        Raises:
            ValueError: If `title` is blank or `duration` is negative.
            TypeError: If `category` is not a `Category`.
        """

        _require_non_empty(title, "activity title")
        if not isinstance(category, Category):
            raise TypeError("category must be a Category")
        if duration < timedelta(0):
            raise ValueError("duration must not be negative")

        child = self._child(child_name)
        if child is None:
            _LOGGER.debug("Cannot add activity %r: child %r not found", title, child_name)
            return None
        if self._title_taken(child, title):
            _LOGGER.debug("Cannot add activity %r: title already used for %r", title, child_name)
            return None

        activity = Activity(
            title=title,
            description=description or "",
            scheduled_date=scheduled_date,
            category=category,
            duration=duration,
            is_completed=False,
        )
        child.add_activity(activity)
        self._changed(f"activity added: {child_name}/{title}")
        return activity

    def get_activity(self, child_name: str, activity_ref: ActivityRef) -> Optional[Activity]:
        child = self._child(child_name)
        if child is None:
            return None
        return child.find_activity(_ref_id(activity_ref))

    def find_by_title(self, child_name: str, title: str) -> Optional[Activity]:
        child = self._child(child_name)
        if child is None:
            return None
        for activity in child.activities:
            if _same_name(activity.title, title):
                return activity
        return None

    def update_activity(
        self,
        child_name: str,
        activity_ref: ActivityRef,
        new_title: str,
        new_description: str,
        new_scheduled_date: datetime,
        new_category: Category,
        new_duration: timedelta,
    ) -> bool:
        """
        Changes all editable fields of an activity in place.

        Returns:
            bool: False if the child or the activity is not found, or the new title
            is used by another activity of the child. Keeping the own title
            (in any casing) is allowed.

        Raises:
            ValueError: If `new_title` is blank or `new_duration` is negative.
            TypeError: If `new_category` is not a `Category`.
        """

        _require_non_empty(new_title, "activity title")
        if not isinstance(new_category, Category):
            raise TypeError("category must be a Category")
        if new_duration < timedelta(0):
            raise ValueError("duration must not be negative")

        child = self._child(child_name)
        if child is None:
            return False
        activity = child.find_activity(_ref_id(activity_ref))
        if activity is None:
            return False
        if self._title_taken(child, new_title, ignore=activity):
            _LOGGER.debug("Cannot rename activity to %r: title already used for %r", new_title, child_name)
            return False

        activity.title = new_title
        activity.description = new_description or ""
        activity.scheduled_date = new_scheduled_date
        activity.category = new_category
        activity.duration = new_duration
        self._changed(f"activity updated: {child_name}/{new_title}")
        return True

    def delete_activity(self, child_name: str, activity_ref: ActivityRef) -> bool:
        child = self._child(child_name)
        if child is None:
            return False
        activity = child.find_activity(_ref_id(activity_ref))
        if activity is None or not child.remove_activity(activity):
            return False
        self._changed(f"activity deleted: {child_name}/{activity.title}")
        return True

    def set_completed(self, child_name: str, activity_ref: ActivityRef, completed: bool) -> bool:
        activity = self.get_activity(child_name, activity_ref)
        if activity is None:
            return False
        if activity.is_completed != bool(completed):
            activity.is_completed = bool(completed)
            self._changed(f"activity {'completed' if completed else 'reopened'}: {child_name}/{activity.title}")
        return True

    def toggle_completion(self, child_name: str, activity_ref: ActivityRef) -> bool:
        activity = self.get_activity(child_name, activity_ref)
        if activity is None:
            return False
        activity.toggle_completion()
        self._changed(f"activity toggled: {child_name}/{activity.title}")
        return True

    def clear_activities(self, child_name: str) -> bool:
        child = self._child(child_name)
        if child is None:
            return False
        if child.activities:
            child.clear_activities()
            self._changed(f"activities cleared: {child_name}")
        return True

    def list_activities(self, child_name: str) -> list[Activity]:
        """
        Returns the child's activities sorted by scheduled date and time.

        Returns:
            list[Activity]: New list (stable order for equal timestamps); empty if
            the child does not exist.
        """

        child = self._child(child_name)
        if child is None:
            return []
        return sorted(child.activities, key=lambda a: a.scheduled_date)
