"""
Entry point of the application (young child activity planner).

Purpose:
    Command-line front end. It only parses arguments, calls `PlannerService`
    and prints results; all rules live in the service/manager layer.

Usage:
    python -m activity_planner.main [--file PATH] [--strict] [-v] <command> ...
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from activity_planner.models import Activity, Child
from activity_planner.reports import (
    build_activity_listing,
    build_progress_report,
    format_activity,
    format_child,
)
from activity_planner.services import PlannerService
from activity_planner.settings import get_settings
from activity_planner.validation import (
    ValidationError,
    parse_category,
    parse_date,
    parse_minutes,
    parse_scheduled,
    parse_time,
    require_text,
)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


class CommandFailed(Exception):
    """A command could not be carried out (business rule, not found, I/O)."""


def _child(svc: PlannerService, name: str) -> Child:
    child = svc.find_child(name)
    if child is None:
        raise CommandFailed(f"Child '{name}' not found.")
    return child


def _activity(svc: PlannerService, child: Child, title: str) -> Activity:
    activity = svc.activities.find_by_title(child.name, title)
    if activity is None:
        raise CommandFailed(f"Activity '{title}' not found for {child.name}.")
    return activity


def _save(svc: PlannerService) -> None:
    if not svc.save():
        raise CommandFailed(f"Failed to save the schedule to {svc.current_path}.")


def cmd_children(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    children = svc.children.list_children()
    if not children:
        return "No children registered."
    return "\n".join(format_child(c, today) for c in children)


def cmd_add_child(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    name = require_text(args.name, field="Name")
    dob = parse_date(args.dob)
    if not svc.children.add_child(name, dob):
        raise CommandFailed(f"Cannot add '{name}': the child must be 3 to 6 years old and the name must be unique.")
    _save(svc)
    return f"Child '{name}' added."


def cmd_edit_child(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    old = require_text(args.old_name, field="Old name")
    new = require_text(args.new_name, field="New name")
    if not svc.children.edit_child(old, new, parse_date(args.dob)):
        raise CommandFailed(f"Cannot edit '{old}': child not found or name '{new}' already used.")
    _save(svc)
    return f"Child '{old}' updated."


def cmd_delete_child(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    name = require_text(args.name, field="Name")
    if not svc.children.delete_child(name):
        raise CommandFailed(f"Child '{name}' not found.")
    _save(svc)
    return f"Child '{name}' and all their activities deleted."


def cmd_activities(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    return build_activity_listing(child, svc.activities.list_activities(child.name), today)


def cmd_add_activity(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    title = require_text(args.title, field="Title")
    activity = svc.activities.add_activity(
        child.name,
        title,
        args.description or "",
        parse_scheduled(args.date, args.time),
        parse_category(args.category),
        parse_minutes(args.minutes),
    )
    if activity is None:
        raise CommandFailed(f"An activity titled '{title}' already exists for {child.name}.")
    _save(svc)
    return f"Scheduled: {format_activity(activity)}"


def cmd_update_activity(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    """
    Changes selected fields of an activity.

    Notes:
        Options that are not given keep the current value; `--date` and
        `--time` can be changed independently.
    """

    child = _child(svc, args.child)
    activity = _activity(svc, child, args.title)

    title = require_text(args.new_title, field="New title") if args.new_title is not None else activity.title
    day = parse_date(args.date) if args.date is not None else activity.scheduled_date.date()
    at = parse_time(args.time) if args.time is not None else activity.scheduled_date.time()
    category = parse_category(args.category) if args.category is not None else activity.category
    duration = parse_minutes(args.minutes) if args.minutes is not None else activity.duration
    description = args.description if args.description is not None else activity.description

    if not svc.activities.update_activity(
        child.name, activity, title, description, datetime.combine(day, at), category, duration
    ):
        raise CommandFailed(f"An activity titled '{title}' already exists for {child.name}.")
    _save(svc)
    return f"Updated: {format_activity(activity)}"


def cmd_toggle(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    activity = _activity(svc, child, args.title)
    svc.activities.toggle_completion(child.name, activity)
    _save(svc)
    return f"{activity.title}: {'done' if activity.is_completed else 'open'}"


def cmd_clear_activities(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    svc.activities.clear_activities(child.name)
    _save(svc)
    return f"All activities of {child.name} deleted."


def cmd_complete(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    activity = _activity(svc, child, args.title)
    svc.activities.set_completed(child.name, activity, not args.undo)
    _save(svc)
    return f"{activity.title}: {'done' if activity.is_completed else 'open'}"


def cmd_delete_activity(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    activity = svc.activities.find_by_title(child.name, args.title)
    if activity is None or not svc.activities.delete_activity(child.name, activity):
        raise CommandFailed(f"Activity '{args.title}' not found for {child.name}.")
    _save(svc)
    return f"Activity '{activity.title}' deleted."


def cmd_report(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    return build_progress_report(
        child,
        svc.progress_for(child.name),
        svc.comparison_for(child.name),
        svc.suggestions_for(child.name),
        svc.completed_titles_for(child.name),
        today,
    )


def cmd_suggest(svc: PlannerService, args: argparse.Namespace, today: date) -> str:
    child = _child(svc, args.child)
    return "\n".join(svc.suggestions_for(child.name))


Command = Callable[[PlannerService, argparse.Namespace, date], str]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activity-planner",
        description="Plan and track activities of young children (ages 3-6).",
    )
    parser.add_argument("--file", help="planner data file (default: ./userData.txt)")
    parser.add_argument("--strict", action="store_true", help="fail on malformed fields in the data file")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more log output (-vv for debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    def add(name: str, func: Command, help_text: str) -> argparse.ArgumentParser:
        p = sub.add_parser(name, help=help_text)
        p.set_defaults(func=func)
        return p

    add("children", cmd_children, "list children")

    p = add("add-child", cmd_add_child, "register a child (3-6 years old)")
    p.add_argument("name")
    p.add_argument("dob", help="date of birth, e.g. 2021-05-17")

    p = add("edit-child", cmd_edit_child, "rename a child / change the birth date")
    p.add_argument("old_name")
    p.add_argument("new_name")
    p.add_argument("dob")

    p = add("delete-child", cmd_delete_child, "delete a child and all their activities")
    p.add_argument("name")

    p = add("activities", cmd_activities, "list the activities of a child")
    p.add_argument("child")

    p = add("add-activity", cmd_add_activity, "schedule an activity")
    p.add_argument("child")
    p.add_argument("title")
    p.add_argument("--date", required=True)
    p.add_argument("--time", required=True, help="HH:MM")
    p.add_argument("--category", required=True, help="Physical, Educational, Recreational, Social or Creative")
    p.add_argument("--minutes", required=True)
    p.add_argument("--description", default="")

    p = add("update-activity", cmd_update_activity, "change an activity (omitted options keep their value)")
    p.add_argument("child")
    p.add_argument("title")
    p.add_argument("--new-title")
    p.add_argument("--date")
    p.add_argument("--time", help="HH:MM")
    p.add_argument("--category")
    p.add_argument("--minutes")
    p.add_argument("--description")

    p = add("toggle", cmd_toggle, "switch an activity between done and open")
    p.add_argument("child")
    p.add_argument("title")

    p = add("clear-activities", cmd_clear_activities, "delete all activities of a child")
    p.add_argument("child")

    p = add("complete", cmd_complete, "mark an activity as done")
    p.add_argument("child")
    p.add_argument("title")
    p.add_argument("--undo", action="store_true", help="mark as open again")

    p = add("delete-activity", cmd_delete_activity, "delete an activity")
    p.add_argument("child")
    p.add_argument("title")

    p = add("report", cmd_report, "show the progress report of a child")
    p.add_argument("child")

    p = add("suggest", cmd_suggest, "suggest activities for today")
    p.add_argument("child")

    return parser


def run(argv: Optional[Sequence[str]] = None, *, clock: Callable[[], date] = date.today) -> int:
    """
    Runs one command.

    Parameters:
        argv (Sequence[str] | None): Arguments without the program name.
        clock (callable): Returns "today".

    Returns:
        int: Exit code (0 ok, 1 command failed, 2 invalid input).
    """

    args = build_parser().parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    settings = get_settings(args.file, strict_parsing=args.strict)
    svc = PlannerService.bootstrap(settings, clock=clock)
    if svc.load_failed:
        # never overwrite a file we could not read
        print(f"Cannot read planner data from {settings.data_file}.", file=sys.stderr)
        return EXIT_FAILED
    try:
        print(args.func(svc, args, clock()))
    except ValidationError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return EXIT_INVALID
    except CommandFailed as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_FAILED
    return EXIT_OK


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
