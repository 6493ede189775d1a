"""
Time predicates for scheduled and once-per-hour playlists.

A predicate is a small tree that renders to the engine's time-predicate
syntax (``(1w or 2w) and 9h0m-17h0m``) and can be evaluated against a local
``datetime`` with ``matches``. Weekdays are ISO numbered (1 = Monday,
7 = Sunday); Sunday renders as ``0w``.

Malformed input fails closed with ``SchedulingInputError`` rather than
degrading to a predicate that is always true or always false.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from ..infra.exceptions import SchedulingInputError
from .builder import Expr

ALL_WEEKDAYS = frozenset(range(1, 8))


@dataclass(frozen=True)
class TimeOfDay:
    hour: int
    minute: int
    second: int | None = None
    text: str | None = None

    def render(self) -> str:
        if self.text:
            return self.text
        out = f"{self.hour}h{self.minute}m"
        if self.second is not None:
            out += f"{self.second}s"
        return out

    @property
    def start_seconds(self) -> int:
        return self.hour * 3600 + self.minute * 60 + (self.second or 0)

    @property
    def end_seconds(self) -> int:
        """Last second covered when used as an inclusive range end."""
        if self.second is not None:
            return self.start_seconds
        return self.hour * 3600 + self.minute * 60 + 59


END_OF_DAY = TimeOfDay(23, 59, 59)
START_OF_DAY = TimeOfDay(0, 0, text="00h00m")


def _seconds_of_day(moment: datetime) -> int:
    return moment.hour * 3600 + moment.minute * 60 + moment.second


class TimePredicate(Expr):
    """Boolean expression over weekday and time of day."""

    def matches(self, moment: datetime) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class TimeInstant(TimePredicate):
    at: TimeOfDay

    def render(self) -> str:
        return self.at.render()

    def matches(self, moment: datetime) -> bool:
        return moment.hour == self.at.hour and moment.minute == self.at.minute


@dataclass(frozen=True)
class TimeRange(TimePredicate):
    start: TimeOfDay
    end: TimeOfDay

    def render(self) -> str:
        return f"{self.start.render()}-{self.end.render()}"

    def matches(self, moment: datetime) -> bool:
        return self.start.start_seconds <= _seconds_of_day(moment) <= self.end.end_seconds


@dataclass(frozen=True)
class MinuteOfHour(TimePredicate):
    minute: int

    def render(self) -> str:
        return f"{self.minute}m"

    def matches(self, moment: datetime) -> bool:
        return moment.minute == self.minute


@dataclass(frozen=True)
class DaySet(TimePredicate):
    """Disjunction of weekdays, ``(1w or 3w)``."""

    days: tuple[int, ...]

    def render(self) -> str:
        return "(" + " or ".join(weekday_marker(day) for day in self.days) + ")"

    def matches(self, moment: datetime) -> bool:
        return moment.isoweekday() in self.days


@dataclass(frozen=True)
class Both(TimePredicate):
    first: TimePredicate
    second: TimePredicate

    def render(self) -> str:
        return f"{self.first.render()} and {self.second.render()}"

    def matches(self, moment: datetime) -> bool:
        return self.first.matches(moment) and self.second.matches(moment)


@dataclass(frozen=True)
class Either(TimePredicate):
    options: tuple[TimePredicate, ...]

    def render(self) -> str:
        return "(" + ") or (".join(option.render() for option in self.options) + ")"

    def matches(self, moment: datetime) -> bool:
        return any(option.matches(moment) for option in self.options)


def weekday_marker(day: int) -> str:
    """Engine weekday token. ISO 7 (Sunday) is written as ``0w``."""
    return f"{0 if day == 7 else day}w"


def next_weekday(day: int) -> int:
    """Successor weekday, wrapping Sunday (7) back to Monday (1)."""
    day += 1
    if day > 7:
        day = 1
    return day


def parse_time_code(code: int | str | None) -> TimeOfDay:
    """Parse an ``HHMM`` integer time code (``930`` -> 09:30)."""
    if code is None or isinstance(code, bool):
        raise SchedulingInputError(f"Invalid time code: {code!r}")
    try:
        value = int(code)
    except (TypeError, ValueError):
        raise SchedulingInputError(f"Invalid time code: {code!r}") from None
    if isinstance(code, float) and value != code:
        raise SchedulingInputError(f"Invalid time code: {code!r}")

    hours, minutes = divmod(value, 100)
    if value < 0 or hours > 23 or minutes > 59:
        raise SchedulingInputError(f"Time code out of range: {code!r}")
    return TimeOfDay(hours, minutes)


def format_time_code(code: int | str) -> str:
    return parse_time_code(code).render()


def normalize_weekdays(days: Iterable[int | str] | None) -> tuple[int, ...]:
    """Validate a weekday subset; returns distinct ISO weekdays in input order."""
    if not days:
        return ()
    seen: list[int] = []
    for raw in days:
        if isinstance(raw, bool):
            raise SchedulingInputError(f"Invalid weekday: {raw!r}")
        try:
            day = int(raw)
        except (TypeError, ValueError):
            raise SchedulingInputError(f"Invalid weekday: {raw!r}") from None
        if day not in ALL_WEEKDAYS:
            raise SchedulingInputError(f"Weekday out of range (1-7): {raw!r}")
        if day not in seen:
            seen.append(day)
    return tuple(seen)


def build_schedule_predicate(
    start_code: int | str,
    end_code: int | str,
    days: Iterable[int | str] | None = None,
) -> TimePredicate:
    """Predicate for a scheduled playlist's window.

    - start == end: a single instant
    - start < end: an inclusive same-day range
    - start > end: the window wraps midnight and becomes the union of
      ``[start, 23:59:59]`` today and ``[00:00, end]`` tomorrow

    A weekday subset of fewer than seven days restricts the window; for
    wrapping windows the second half is restricted by each day's successor.
    """
    start = parse_time_code(start_code)
    end = parse_time_code(end_code)
    weekdays = normalize_weekdays(days)
    restrict = bool(weekdays) and len(weekdays) < 7

    if start.start_seconds > end.start_seconds:
        today: TimePredicate = TimeRange(start, END_OF_DAY)
        tomorrow: TimePredicate = TimeRange(START_OF_DAY, end)
        if restrict:
            today = Both(DaySet(weekdays), today)
            tomorrow = Both(DaySet(tuple(next_weekday(day) for day in weekdays)), tomorrow)
        return Either((today, tomorrow))

    window: TimePredicate
    if start == end:
        window = TimeInstant(start)
    else:
        window = TimeRange(start, end)

    if restrict:
        return Both(DaySet(weekdays), window)
    return window


def build_hourly_predicate(minute: int | str) -> MinuteOfHour:
    """Predicate for a once-per-hour playlist playing at ``minute`` past each hour."""
    if isinstance(minute, bool):
        raise SchedulingInputError(f"Invalid minute: {minute!r}")
    try:
        value = int(minute)
    except (TypeError, ValueError):
        raise SchedulingInputError(f"Invalid minute: {minute!r}") from None
    if not 0 <= value <= 59:
        raise SchedulingInputError(f"Minute out of range (0-59): {minute!r}")
    return MinuteOfHour(value)
