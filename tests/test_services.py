from datetime import date, datetime, timedelta

import pytest

from activity_planner.analytics import ALL_BALANCED_MESSAGE
from activity_planner.file_store import FileUserStore
from activity_planner.models import Category
from activity_planner.services import PlannerService
from activity_planner.settings import get_settings
from helpers import fixed_clock


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "userData.txt"


@pytest.fixture
def svc(data_file):
    return PlannerService.bootstrap(get_settings(data_file), clock=fixed_clock)


def _add_mia_with_park(svc, *, completed=False):
    assert svc.children.add_child("Mia", date(2020, 3, 1))
    park = svc.activities.add_activity(
        "Mia", "Park", "", datetime(2024, 6, 15, 10, 0), Category.PHYSICAL, timedelta(minutes=30)
    )
    if completed:
        svc.activities.set_completed("Mia", park, True)
    return park


def test_bootstrap_without_file(svc, data_file):
    assert svc.user.children == []
    assert svc.current_path == data_file
    assert svc.load_failed is False
    assert svc.has_unsaved_changes is False


def test_changes_mark_dirty_and_save_clears(svc, data_file):
    _add_mia_with_park(svc)
    assert svc.has_unsaved_changes is True

    assert svc.save() is True
    assert svc.has_unsaved_changes is False
    assert "Title:Park" in data_file.read_text(encoding="utf-8")


def test_failed_mutation_does_not_mark_dirty(svc):
    assert svc.children.add_child("Baby", date(2024, 1, 1)) is False
    assert svc.has_unsaved_changes is False


def test_bootstrap_loads_existing_file(svc, data_file):
    _add_mia_with_park(svc)
    svc.save()

    again = PlannerService.bootstrap(get_settings(data_file), clock=fixed_clock)
    assert [a.title for a in again.activities.list_activities("Mia")] == ["Park"]


def test_bootstrap_flags_unreadable_file(data_file):
    data_file.write_text("CHILD_START\nName:Mia\nDateOfBirth:someday\nCHILD_END\n", encoding="utf-8")

    strict = PlannerService.bootstrap(get_settings(data_file, strict_parsing=True), clock=fixed_clock)
    assert strict.load_failed is True
    assert strict.user.children == []

    permissive = PlannerService.bootstrap(get_settings(data_file), clock=fixed_clock)
    assert permissive.load_failed is False
    assert permissive.find_child("mia") is not None


def test_new_writes_empty_file(svc, data_file):
    _add_mia_with_park(svc)
    assert svc.new() is True
    assert svc.user.children == []
    assert svc.has_unsaved_changes is False
    assert data_file.read_text(encoding="utf-8") == "USER_START\nUSER_END\n"


def test_open_and_save_as(svc, tmp_path):
    _add_mia_with_park(svc)
    other = tmp_path / "copy.txt"

    assert svc.save_as(other) is True
    assert svc.current_path == other

    assert svc.new() is True
    assert svc.open(other) is True
    assert svc.find_child("Mia") is not None
    assert svc.current_path == other


def test_open_failure_keeps_current_data(svc, tmp_path):
    _add_mia_with_park(svc)
    assert svc.open(tmp_path / "missing.txt") is False
    assert svc.find_child("Mia") is not None
    assert svc.has_unsaved_changes is True


def test_save_as_failure_keeps_path(svc, tmp_path, data_file):
    assert svc.save_as(tmp_path / "no-dir" / "x.txt") is False
    assert svc.current_path == data_file


def test_progress_figures(svc):
    _add_mia_with_park(svc, completed=True)

    summaries = svc.progress_for("Mia")
    assert summaries[0].completed == 1
    assert summaries[0].total_duration_minutes == 30
    assert svc.completed_titles_for("Mia") == ["Park"]
    assert svc.comparison_for("Mia")[0].completed == 1
    assert svc.suggestions_for("Mia")[0] == "Add more Physical activities today (Need 30 more minutes)."


def test_progress_figures_unknown_child(svc):
    assert svc.progress_for("Nobody") == []
    assert svc.suggestions_for("Nobody") == [ALL_BALANCED_MESSAGE]


def test_custom_recommendations(data_file):
    settings = get_settings(data_file, recommendations={Category.PHYSICAL: (20, 100, 400)})
    svc = PlannerService(FileUserStore(data_file), settings=settings, clock=fixed_clock)
    _add_mia_with_park(svc)
    assert svc.suggestions_for("Mia") == [ALL_BALANCED_MESSAGE]
    assert [row.recommended for row in svc.comparison_for("Mia")] == [100]
