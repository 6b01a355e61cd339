from datetime import date, datetime, timedelta

from activity_planner.models import Activity, Category

# Fixed "today" for every test that depends on the current date
TODAY = date(2024, 6, 15)


def fixed_clock() -> date:
    return TODAY


def make_activity(
    title="Park",
    *,
    when=datetime(2024, 6, 15, 10, 0),
    category=Category.PHYSICAL,
    minutes=30,
    completed=False,
    description="",
):
    return Activity(
        title=title,
        description=description,
        scheduled_date=when,
        category=category,
        duration=timedelta(minutes=minutes),
        is_completed=completed,
    )
