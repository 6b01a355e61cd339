from datetime import date, datetime, timedelta

import pytest

from activity_planner.managers import ActivityManager, ChildManager
from activity_planner.models import Category, Child


def _schedule(manager, title, *, child="Mia", when=datetime(2024, 6, 15, 10, 0), minutes=30):
    return manager.add_activity(child, title, "", when, Category.PHYSICAL, timedelta(minutes=minutes))


class TestChildManager:
    @pytest.mark.parametrize(
        "dob, accepted",
        [
            (date(2021, 7, 15), False),  # 2 years 11 months
            (date(2021, 6, 15), True),  # 3 years exactly
            (date(2017, 7, 15), True),  # 6 years 11 months
            (date(2017, 6, 15), False),  # 7 years exactly
        ],
    )
    def test_age_range(self, child_manager, user, dob, accepted):
        assert child_manager.add_child("Leo", dob) is accepted
        assert (child_manager.find_child("Leo") is not None) is accepted
        assert len(user.children) == (2 if accepted else 1)

    def test_datetime_birth_date_is_truncated(self, child_manager):
        assert child_manager.add_child("Leo", datetime(2020, 1, 1, 13, 45))
        assert child_manager.find_child("leo").date_of_birth == date(2020, 1, 1)

    def test_duplicate_name_rejected(self, child_manager, user, changes):
        assert child_manager.add_child("MIA", date(2020, 5, 5)) is False
        assert len(user.children) == 1
        assert changes == []

    def test_blank_name_raises(self, child_manager):
        with pytest.raises(ValueError):
            child_manager.add_child("  ", date(2020, 5, 5))

    def test_calculate_age_uses_clock(self, child_manager):
        assert child_manager.calculate_age(date(2020, 3, 1)) == 4

    def test_edit(self, child_manager, changes):
        assert child_manager.edit_child("mia", "Mila", date(2020, 4, 1)) is True
        child = child_manager.find_child("Mila")
        assert child.date_of_birth == date(2020, 4, 1)
        assert child_manager.find_child("Mia") is None
        assert len(changes) == 1

    def test_edit_keeps_own_name_in_other_case(self, child_manager):
        assert child_manager.edit_child("Mia", "MIA", date(2020, 3, 1)) is True
        assert child_manager.list_children()[0].name == "MIA"

    def test_edit_rejects_name_of_other_child(self, child_manager):
        child_manager.add_child("Leo", date(2020, 1, 1))
        assert child_manager.edit_child("Leo", "mia", date(2020, 1, 1)) is False
        assert child_manager.find_child("Leo") is not None

    def test_edit_unknown_child(self, child_manager):
        assert child_manager.edit_child("Nobody", "Somebody", date(2020, 1, 1)) is False

    def test_delete_removes_all_case_variants(self, child_manager, user, changes):
        # files written by hand may contain names differing only in case
        user.add_child(Child(name="mia", date_of_birth=date(2021, 1, 1)))
        assert child_manager.delete_child("MIA") is True
        assert user.children == []
        assert len(changes) == 1

    def test_delete_unknown(self, child_manager, changes):
        assert child_manager.delete_child("Leo") is False
        assert changes == []

    def test_list_is_a_copy(self, child_manager, user):
        children = child_manager.list_children()
        children.clear()
        assert len(user.children) == 1

    def test_none_user_rejected(self):
        with pytest.raises(TypeError):
            ChildManager(None)


class TestActivityManager:
    def test_add(self, activity_manager, user, changes):
        activity = _schedule(activity_manager, "Park")
        assert activity is not None
        assert activity.is_completed is False
        assert user.children[0].activities == [activity]
        assert changes == ["activity added: Mia/Park"]

    def test_add_duplicate_title_any_case(self, activity_manager, user):
        _schedule(activity_manager, "Park")
        assert _schedule(activity_manager, "PARK") is None
        assert len(user.children[0].activities) == 1

    def test_child_lookup_is_exact(self, activity_manager):
        assert _schedule(activity_manager, "Park", child="mia") is None
        assert activity_manager.list_activities("mia") == []

    def test_invalid_input_raises(self, activity_manager):
        with pytest.raises(ValueError):
            _schedule(activity_manager, "")
        with pytest.raises(ValueError):
            _schedule(activity_manager, "Park", minutes=-5)
        with pytest.raises(TypeError):
            activity_manager.add_activity("Mia", "Park", "", datetime(2024, 6, 15), "Physical", timedelta(0))

    def test_invalid_input_raises_before_child_lookup(self, activity_manager):
        with pytest.raises(TypeError):
            activity_manager.add_activity("Nobody", "Park", "", datetime(2024, 6, 15), "Physical", timedelta(0))
        with pytest.raises(ValueError):
            _schedule(activity_manager, "Park", child="Nobody", minutes=-5)

    def test_invalid_input_raises_for_taken_title(self, activity_manager):
        _schedule(activity_manager, "Park")
        with pytest.raises(ValueError):
            _schedule(activity_manager, "Park", minutes=-5)

    def test_list_sorted_by_date(self, activity_manager, user):
        _schedule(activity_manager, "Evening", when=datetime(2024, 6, 15, 18, 0))
        _schedule(activity_manager, "Tomorrow", when=datetime(2024, 6, 16, 8, 0))
        _schedule(activity_manager, "Morning", when=datetime(2024, 6, 15, 8, 0))

        listed = activity_manager.list_activities("Mia")
        assert [a.title for a in listed] == ["Morning", "Evening", "Tomorrow"]
        # storage order is untouched
        assert [a.title for a in user.children[0].activities] == ["Evening", "Tomorrow", "Morning"]

    def test_update(self, activity_manager):
        activity = _schedule(activity_manager, "Park")
        ok = activity_manager.update_activity(
            "Mia",
            activity,
            "park",
            "with the dog",
            datetime(2024, 6, 16, 9, 0),
            Category.RECREATIONAL,
            timedelta(minutes=50),
        )
        assert ok is True
        assert activity.title == "park"
        assert activity.description == "with the dog"
        assert activity.category is Category.RECREATIONAL
        assert activity.duration_minutes == 50

    def test_update_rejects_title_of_other_activity(self, activity_manager):
        _schedule(activity_manager, "Park")
        reading = _schedule(activity_manager, "Reading")
        ok = activity_manager.update_activity(
            "Mia", reading.activity_id, "PARK", "", reading.scheduled_date, Category.PHYSICAL, timedelta(0)
        )
        assert ok is False
        assert reading.title == "Reading"

    def test_update_unknown_activity(self, activity_manager):
        ok = activity_manager.update_activity(
            "Mia", "missing-id", "Park", "", datetime(2024, 6, 15), Category.PHYSICAL, timedelta(0)
        )
        assert ok is False

    def test_delete(self, activity_manager, user):
        park = _schedule(activity_manager, "Park")
        reading = _schedule(activity_manager, "Reading")

        assert activity_manager.delete_activity("Mia", park.activity_id) is True
        assert activity_manager.delete_activity("Mia", park) is False
        assert user.children[0].activities == [reading]

    def test_delete_from_unknown_child(self, activity_manager):
        park = _schedule(activity_manager, "Park")
        assert activity_manager.delete_activity("Leo", park) is False

    def test_completion(self, activity_manager, changes):
        park = _schedule(activity_manager, "Park")
        changes.clear()

        assert activity_manager.set_completed("Mia", park, True) is True
        assert park.is_completed is True
        # no change, no notification
        assert activity_manager.set_completed("Mia", park, True) is True
        assert len(changes) == 1

        assert activity_manager.toggle_completion("Mia", park) is True
        assert park.is_completed is False
        assert activity_manager.toggle_completion("Mia", "missing-id") is False

    def test_find_by_title_and_get(self, activity_manager):
        park = _schedule(activity_manager, "Park")
        assert activity_manager.find_by_title("Mia", "pArK") is park
        assert activity_manager.get_activity("Mia", park.activity_id) is park
        assert activity_manager.find_by_title("Mia", "Zoo") is None

    def test_clear(self, activity_manager, user):
        _schedule(activity_manager, "Park")
        assert activity_manager.clear_activities("Mia") is True
        assert user.children[0].activities == []
        assert activity_manager.clear_activities("Leo") is False

    def test_none_reference_raises(self, activity_manager):
        with pytest.raises(TypeError):
            activity_manager.delete_activity("Mia", None)

    def test_managers_share_the_user(self, user):
        children = ChildManager(user, clock=lambda: date(2024, 6, 15))
        activities = ActivityManager(user)
        children.add_child("Leo", date(2020, 1, 1))
        assert _schedule(activities, "Park", child="Leo") is not None
