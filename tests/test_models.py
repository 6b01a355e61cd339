from datetime import date, datetime, timedelta

import pytest

from activity_planner.models import (
    Activity,
    Category,
    Child,
    User,
    age_in_years_and_months,
    calculate_age,
)
from helpers import make_activity


class TestAge:
    def test_birthday_today_counts(self):
        assert calculate_age(date(2021, 6, 15), date(2024, 6, 15)) == 3

    def test_day_before_birthday(self):
        assert calculate_age(date(2021, 6, 16), date(2024, 6, 15)) == 2

    def test_leap_day_birthday(self):
        assert calculate_age(date(2020, 2, 29), date(2023, 2, 28)) == 2
        assert calculate_age(date(2020, 2, 29), date(2023, 3, 1)) == 3

    def test_years_and_months(self):
        assert age_in_years_and_months(date(2020, 3, 1), date(2024, 6, 15)) == (4, 3)
        assert age_in_years_and_months(date(2020, 3, 31), date(2024, 6, 15)) == (4, 2)
        assert age_in_years_and_months(date(2021, 7, 15), date(2024, 6, 15)) == (2, 11)


class TestActivity:
    def test_defaults(self):
        a = Activity()
        assert a.title == ""
        assert a.description == ""
        assert a.category is Category.PHYSICAL
        assert a.duration == timedelta(0)
        assert a.is_completed is False
        assert a.activity_id

    def test_ids_are_unique_and_equality_is_identity(self):
        a = make_activity()
        b = make_activity()
        assert a.activity_id != b.activity_id
        assert a != b
        assert a == a

    def test_negative_duration_rejected(self):
        with pytest.raises(ValueError):
            Activity(title="x", duration=timedelta(minutes=-1))

    def test_category_must_be_enum(self):
        with pytest.raises(TypeError):
            Activity(title="x", category="Physical")

    def test_toggle_and_minutes(self):
        a = make_activity(minutes=90)
        a.toggle_completion()
        assert a.is_completed is True
        assert a.duration_minutes == 90.0

    def test_str(self):
        a = make_activity("Park", when=datetime(2024, 6, 15, 9, 5))
        assert str(a) == "Park scheduled on 2024-06-15 09:05 (Physical)"


class TestCategory:
    def test_str_and_index(self):
        assert str(Category.SOCIAL) == "Social"
        assert Category.by_index(0) is Category.PHYSICAL
        assert Category.by_index(4) is Category.CREATIVE


class TestChild:
    def test_activity_list_helpers(self):
        child = Child(name="Mia", date_of_birth=date(2020, 3, 1))
        late = make_activity("Late", when=datetime(2024, 6, 15, 18, 0))
        early = make_activity("Early", when=datetime(2024, 6, 15, 8, 0))
        child.add_activity(late)
        child.add_activity(early)

        child.sort_activities_by_date()
        assert [a.title for a in child.activities] == ["Early", "Late"]
        assert child.contains_activity(late)
        assert child.find_activity(early.activity_id) is early

        assert child.remove_activity(late) is True
        assert child.remove_activity(late) is False
        assert not child.contains_activity(late)

        child.clear_activities()
        assert child.activities == []

    def test_none_rejected(self):
        child = Child(name="Mia")
        with pytest.raises(TypeError):
            child.add_activity(None)
        with pytest.raises(TypeError):
            child.remove_activity(None)
        with pytest.raises(TypeError):
            User().add_child(None)

    def test_age(self):
        child = Child(name="Mia", date_of_birth=date(2020, 3, 1))
        assert child.age_in_years_and_months(date(2024, 6, 15)) == (4, 3)
