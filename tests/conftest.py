from datetime import date

import pytest

from activity_planner.managers import ActivityManager, ChildManager
from activity_planner.models import Child, User
from helpers import fixed_clock


@pytest.fixture
def user():
    u = User()
    u.add_child(Child(name="Mia", date_of_birth=date(2020, 3, 1)))
    return u


@pytest.fixture
def changes():
    return []


@pytest.fixture
def child_manager(user, changes):
    return ChildManager(user, clock=fixed_clock, on_change=changes.append)


@pytest.fixture
def activity_manager(user, changes):
    return ActivityManager(user, on_change=changes.append)
