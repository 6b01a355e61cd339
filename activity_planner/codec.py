from __future__ import annotations

# -----------------------------------------------------------------------------
# Persistence codec (text format)
# -----------------------------------------------------------------------------
# Converts the whole User graph to/from the line-oriented planner file format:
#
#   USER_START
#   CHILD_START
#   Name:<name>
#   DateOfBirth:<yyyy-MM-dd>
#   ACTIVITIES_COUNT:<n>
#   ACTIVITY_START
#   Title:... / Description:... / ScheduledDate:<yyyy-MM-dd HH:mm>
#   Type:<Category> / Duration:<[d.]hh:mm:ss> / IsCompleted:<True|False> / Id:<id>
#   ACTIVITY_END
#   CHILD_END
#   USER_END
#
# The codec works on strings only; file access and I/O error shielding live in
# `file_store.py`.
# -----------------------------------------------------------------------------


"""Text codec for planner data files.

Purpose:
    `serialize()` writes a `User` as nested token blocks, `deserialize()` reads
    them back in one forward pass.

Reading rules:
    - Lines end at `\\n` only (a trailing `\\r` is dropped); other Unicode line
      boundaries are ordinary characters inside a value.
    - Key/value lines are split on the first colon, so values may contain colons.
    - Tokens and keys are matched ignoring surrounding whitespace. Free-text
      values (Name, Title, Description) are kept exactly as written; all other
      values are stripped before parsing.
    - Malformed values produce a warning and leave the field at its default
      (permissive mode) or raise `FormatError` (strict mode).
    - Missing `_END` tokens are not detected; unclosed blocks are dropped.

Notes:
    Free-text fields escape backslash, line feed and carriage return so that a
    value always stays on one line.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Callable, Optional

from activity_planner.models import Activity, Category, Child, User

__all__ = [
    "FormatError",
    "WarningHandler",
    "serialize",
    "deserialize",
    "format_duration",
    "parse_duration",
    "escape_text",
    "unescape_text",
]

_LOGGER = logging.getLogger(__name__)

USER_START = "USER_START"
USER_END = "USER_END"
CHILD_START = "CHILD_START"
CHILD_END = "CHILD_END"
ACTIVITY_START = "ACTIVITY_START"
ACTIVITY_END = "ACTIVITY_END"

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M"

WarningHandler = Callable[[str], None]

_DURATION_RE = re.compile(
    r"^(?P<sign>-)?(?:(?P<days>\d+)\.)?(?P<hours>\d{1,2}):(?P<minutes>\d{1,2})"
    r"(?::(?P<seconds>\d{1,2})(?:\.(?P<fraction>\d{1,7}))?)?$"
)
_DAYS_ONLY_RE = re.compile(r"^-?\d+$")


class FormatError(ValueError):
    """
    Raised by `deserialize(strict=True)` for the first malformed field value.

    Attributes:
        line_number (int): 1-based line number of the offending line.
        line (str): The offending line (stripped).
    """

    def __init__(self, message: str, line_number: int, line: str) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.line = line


# -----------------------------
# Field formatting / parsing
# -----------------------------
def escape_text(value: str) -> str:
    return value.replace("\\", "\\\\").replace("\n", "\\n").replace("\r", "\\r")


def unescape_text(value: str) -> str:
    """
    Reverses `escape_text()`.

    Notes:
        Unknown escape sequences (and a trailing lone backslash) are kept
        verbatim, so hand-written files with Windows paths survive a reload.
    """

    if "\\" not in value:
        return value
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            nxt = value[i + 1]
            if nxt == "n":
                out.append("\n")
                i += 2
                continue
            if nxt == "r":
                out.append("\r")
                i += 2
                continue
            if nxt == "\\":
                out.append("\\")
                i += 2
                continue
        out.append(ch)
        i += 1
    return "".join(out)


def format_duration(duration: timedelta) -> str:
    """
    Formats a duration as `[-][d.]hh:mm:ss[.fffffff]`.

    Parameters:
        duration (timedelta): Duration to format.

    Returns:
        str: e.g. `00:45:00`, `1.02:00:00` or `00:00:01.5000000`.
    """

    total_us = duration // timedelta(microseconds=1)
    sign = "-" if total_us < 0 else ""
    total_us = abs(total_us)
    days, rem = divmod(total_us, 86_400_000_000)
    hours, rem = divmod(rem, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    seconds, micros = divmod(rem, 1_000_000)

    text = f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    if days:
        text = f"{days}.{text}"
    if micros:
        # seven fractional digits (100 ns ticks)
        text = f"{text}.{micros:06d}0"
    return sign + text


def parse_duration(text: str) -> timedelta:
    """
    Parses a duration written by `format_duration()` or a plain day count.

    Parameters:
        text (str): e.g. `00:30:00`, `0:30`, `1.00:00:00`, `2`.

    Returns:
        timedelta: Parsed duration.

    Raises:
        ValueError: If the text is not a valid duration or out of range.
    """

    t = text.strip()
    if _DAYS_ONLY_RE.match(t):
        return timedelta(days=int(t))

    m = _DURATION_RE.match(t)
    if not m:
        raise ValueError(f"invalid duration: {text!r}")

    hours = int(m.group("hours"))
    minutes = int(m.group("minutes"))
    seconds = int(m.group("seconds") or 0)
    if hours > 23 or minutes > 59 or seconds > 59:
        raise ValueError(f"duration component out of range: {text!r}")

    fraction = m.group("fraction") or ""
    micros = int(fraction.ljust(7, "0")) // 10 if fraction else 0
    result = timedelta(
        days=int(m.group("days") or 0),
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        microseconds=micros,
    )
    return -result if m.group("sign") else result


def _parse_bool(text: str) -> bool:
    t = text.strip().lower()
    if t == "true":
        return True
    if t == "false":
        return False
    raise ValueError(f"invalid boolean: {text!r}")


def _parse_category(text: str) -> Category:
    # Accept the enumeration name (exact case) or its declaration index.
    try:
        return Category(text)
    except ValueError:
        pass
    if text.isdigit():
        index = int(text)
        if index < len(Category):
            return Category.by_index(index)
    raise ValueError(f"invalid category: {text!r}")


def _parse_non_negative_duration(text: str) -> timedelta:
    duration = parse_duration(text)
    if duration < timedelta(0):
        raise ValueError(f"negative duration: {text!r}")
    return duration


def _parse_id(text: str) -> str:
    if not text or any(ch.isspace() for ch in text):
        raise ValueError(f"invalid id: {text!r}")
    return text


# Persisted key -> (Activity attribute, value parser)
_ACTIVITY_FIELDS: dict[str, tuple[str, Callable[[str], object]]] = {
    "ScheduledDate": ("scheduled_date", lambda v: datetime.strptime(v, DATETIME_FORMAT)),
    "Type": ("category", _parse_category),
    "Duration": ("duration", _parse_non_negative_duration),
    "IsCompleted": ("is_completed", _parse_bool),
    "Id": ("activity_id", _parse_id),
}


# -----------------------------
# Writing
# -----------------------------
def serialize(user: User) -> str:
    """
    Serializes the complete user graph.

    Parameters:
        user (User): Data to write.

    Returns:
        str: File content, `\\n` line endings, trailing newline.

    Raises:
        TypeError: If `user` is None.
    """

    if user is None:
        raise TypeError("user must not be None")

    lines: list[str] = [USER_START]
    for child in user.children:
        lines.append(CHILD_START)
        lines.append(f"Name:{escape_text(child.name)}")
        lines.append(f"DateOfBirth:{child.date_of_birth.strftime(DATE_FORMAT)}")
        lines.append(f"ACTIVITIES_COUNT:{len(child.activities)}")
        for activity in child.activities:
            lines.append(ACTIVITY_START)
            lines.append(f"Title:{escape_text(activity.title)}")
            lines.append(f"Description:{escape_text(activity.description)}")
            lines.append(f"ScheduledDate:{activity.scheduled_date.strftime(DATETIME_FORMAT)}")
            lines.append(f"Type:{activity.category}")
            lines.append(f"Duration:{format_duration(activity.duration)}")
            lines.append(f"IsCompleted:{activity.is_completed}")
            lines.append(f"Id:{activity.activity_id}")
            lines.append(ACTIVITY_END)
        lines.append(CHILD_END)
    lines.append(USER_END)
    return "\n".join(lines) + "\n"


# -----------------------------
# Reading
# -----------------------------
class _UserParser:
    """
    Single forward pass over the lines of a planner file.

    Notes:
        At most one child and one activity are open at a time. Key/value lines
        go to the open activity first, then to the open child.
    """

    def __init__(self, *, strict: bool, on_warning: Optional[WarningHandler]) -> None:
        self.user = User()
        self.strict = strict
        self.on_warning = on_warning
        self.child: Optional[Child] = None
        self.activity: Optional[Activity] = None
        self.line_number = 0
        self.line = ""

    def warn(self, message: str) -> None:
        message = f"line {self.line_number}: {message}"
        _LOGGER.warning("Planner file: %s", message)
        if self.on_warning is not None:
            self.on_warning(message)

    def _bad_value(self, key: str, value: str, exc: Exception) -> None:
        message = f"invalid {key} value {value!r} ({exc})"
        if self.strict:
            raise FormatError(f"line {self.line_number}: {message}", self.line_number, self.line)
        self.warn(message + "; keeping default")

    def feed(self, line_number: int, raw: str) -> None:
        self.line_number = line_number
        raw = raw.removesuffix("\r")
        line = raw.strip()
        self.line = line

        if line in (USER_START, USER_END):
            return
        if line == CHILD_START:
            if self.child is not None:
                self.warn(f"unclosed child {self.child.name!r} discarded")
            self.child = Child()
            return
        if line == CHILD_END:
            self._close_child()
            return
        if line == ACTIVITY_START:
            if self.activity is not None:
                self.warn(f"unclosed activity {self.activity.title!r} discarded")
            self.activity = Activity()
            return
        if line == ACTIVITY_END:
            self._close_activity()
            return

        key, sep, value = raw.partition(":")
        if not sep:
            return
        key = key.strip()

        if self.activity is not None:
            self._set_activity_field(self.activity, key, value)
        elif self.child is not None:
            self._set_child_field(self.child, key, value)

    def _close_child(self) -> None:
        if self.child is None:
            return
        if self.activity is not None:
            self.warn(f"activity {self.activity.title!r} not closed before CHILD_END; dropped")
            self.activity = None
        self.user.children.append(self.child)
        self.child = None

    def _close_activity(self) -> None:
        if self.activity is None:
            return
        if self.child is None:
            self.warn(f"activity {self.activity.title!r} outside of a child block; dropped")
        else:
            self.child.activities.append(self.activity)
        self.activity = None

    def _set_child_field(self, child: Child, key: str, value: str) -> None:
        if key == "Name":
            child.name = unescape_text(value)
        elif key == "DateOfBirth":
            value = value.strip()
            try:
                child.date_of_birth = datetime.strptime(value, DATE_FORMAT).date()
            except ValueError as exc:
                self._bad_value(key, value, exc)
        # ACTIVITIES_COUNT is informational; other keys are ignored

    def _set_activity_field(self, activity: Activity, key: str, value: str) -> None:
        if key == "Title":
            activity.title = unescape_text(value)
            return
        if key == "Description":
            activity.description = unescape_text(value)
            return

        entry = _ACTIVITY_FIELDS.get(key)
        if entry is None:
            return
        attr, parse = entry
        value = value.strip()
        try:
            setattr(activity, attr, parse(value))
        except ValueError as exc:
            self._bad_value(key, value, exc)

    def finish(self) -> User:
        if self.activity is not None or self.child is not None:
            _LOGGER.debug("Planner file ended with unclosed blocks; they are ignored")
        return self.user


def deserialize(
    text: str,
    *,
    strict: bool = False,
    on_warning: Optional[WarningHandler] = None,
) -> User:
    """
    Parses planner file content into a `User`.

    Parameters:
        text (str): File content.
        strict (bool): If True, the first malformed field value raises `FormatError`.
        on_warning (callable | None): Receives one message per malformed value
            (permissive mode). Warnings are logged in any case.

    Returns:
        User: Parsed data. Children without a closing `CHILD_END` are not included.

    Raises:
        FormatError: Only in strict mode.
    """

    parser = _UserParser(strict=strict, on_warning=on_warning)
    for line_number, raw in enumerate(text.split("\n"), start=1):
        parser.feed(line_number, raw)
    return parser.finish()
