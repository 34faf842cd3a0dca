"""Date-range rules for the report picker and filter form.

Every comparison happens on calendar days in the application time zone
(``Asia/Dhaka``), never in the host's local zone. Inputs are interpreted as:

- ``date`` objects and ``YYYY-MM-DD`` strings: a calendar day in the app zone
- aware datetimes / ISO strings with an offset: an instant, converted
- naive datetimes: a UTC instant, converted
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Union

import pandas as pd

APP_TIMEZONE = "Asia/Dhaka"

DateLike = Union[date, datetime, str, pd.Timestamp]


def _blank(value: Optional[DateLike]) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _is_calendar_day(value: DateLike) -> bool:
    if isinstance(value, str):
        return len(value.strip()) == 10
    return isinstance(value, date) and not isinstance(value, datetime)


def to_app_timestamp(value: DateLike, tz: str = APP_TIMEZONE) -> pd.Timestamp:
    """Return ``value`` as a timestamp in the app time zone."""
    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        if _is_calendar_day(value):
            return ts.tz_localize(tz)
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(tz)


def app_day(value: DateLike, tz: str = APP_TIMEZONE) -> date:
    return to_app_timestamp(value, tz).date()


def _as_day(value: DateLike, tz: str = APP_TIMEZONE) -> date:
    """Calendar day for ``value``; plain days skip pandas entirely."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    if isinstance(value, str) and _is_calendar_day(value):
        try:
            return datetime.strptime(value.strip(), "%Y-%m-%d").date()
        except ValueError:
            pass
    return app_day(value, tz)


def app_today(now: Optional[DateLike] = None, tz: str = APP_TIMEZONE) -> date:
    if now is None:
        now = pd.Timestamp.now(tz="UTC")
    return app_day(now, tz)


def start_of_day(value: DateLike, tz: str = APP_TIMEZONE) -> pd.Timestamp:
    return to_app_timestamp(value, tz).normalize()


def end_of_day(value: DateLike, tz: str = APP_TIMEZONE) -> pd.Timestamp:
    return start_of_day(value, tz) + pd.Timedelta(days=1) - pd.Timedelta(milliseconds=1)


def days_between(start: DateLike, end: DateLike, tz: str = APP_TIMEZONE) -> int:
    """Whole calendar days from ``start`` to ``end`` (negative if reversed)."""
    return (_as_day(end, tz) - _as_day(start, tz)).days


def months_between(start: DateLike, end: DateLike, tz: str = APP_TIMEZONE) -> int:
    """Month-index difference; ignores the day of month entirely."""
    a = _as_day(start, tz)
    b = _as_day(end, tz)
    return (b.year - a.year) * 12 + (b.month - a.month)


def parse_day(value: Optional[str], tz: str = APP_TIMEZONE) -> Optional[date]:
    """Parse a query/form value into an app-zone calendar day, or ``None``."""
    if not value:
        return None
    try:
        day = datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        parsed = pd.to_datetime(value, errors="coerce")
        if pd.isna(parsed):
            return None
        try:
            return app_day(parsed, tz)
        except (ValueError, OverflowError):
            return None

    # Days pandas cannot place in the app zone (e.g. year 1600) are not usable
    try:
        to_app_timestamp(day, tz)
    except (ValueError, OverflowError):
        return None
    return day


def format_request_date(value: Optional[DateLike], tz: str = APP_TIMEZONE) -> Optional[str]:
    """ISO-8601 instant in the app zone, e.g. ``2024-01-01T00:00:00+06:00``."""
    if value is None:
        return None
    return to_app_timestamp(value, tz).isoformat(timespec="seconds")


def format_display_date(value: Optional[DateLike], tz: str = APP_TIMEZONE) -> str:
    """Human label such as ``Jan 5, 2024``."""
    if _blank(value):
        return ""
    ts = to_app_timestamp(value, tz)
    return f"{ts:%b} {ts.day}, {ts.year}"


@dataclass(frozen=True)
class PickerRules:
    """Which days a range picker lets the user choose.

    ``pending_from``/``pending_to`` describe the selection in progress: the
    ``max_days`` window only applies after a start day has been picked and
    before an end day has.
    """

    today: date
    past_allowed: bool = True
    future_allowed: bool = True
    today_allowed: bool = True
    max_days: Optional[int] = None
    pending_from: Optional[DateLike] = None
    pending_to: Optional[DateLike] = None
    tz: str = APP_TIMEZONE


def is_date_disabled(candidate: DateLike, rules: PickerRules) -> bool:
    day = _as_day(candidate, rules.tz)

    if day == rules.today and not rules.today_allowed:
        return True
    if day < rules.today and not rules.past_allowed:
        return True
    if day > rules.today and not rules.future_allowed:
        return True

    if rules.max_days and rules.pending_from is not None and rules.pending_to is None:
        diff = days_between(rules.pending_from, day, rules.tz)
        return diff >= rules.max_days or diff < 0

    return False


def disabled_days(year: int, month: int, rules: PickerRules) -> List[date]:
    """All days of ``year``-``month`` the picker should grey out."""
    days = [date(year, month, d) for d in range(1, calendar.monthrange(year, month)[1] + 1)]
    return [d for d in days if is_date_disabled(d, rules)]


@dataclass(frozen=True)
class DateRangeSelection:
    """A picker value that has not been applied to the filters yet."""

    start: Optional[pd.Timestamp] = None
    end: Optional[pd.Timestamp] = None

    @classmethod
    def from_values(
        cls,
        start: Optional[DateLike],
        end: Optional[DateLike],
        tz: str = APP_TIMEZONE,
    ) -> "DateRangeSelection":
        return cls(
            start=None if _blank(start) else to_app_timestamp(start, tz),
            end=None if _blank(end) else to_app_timestamp(end, tz),
        )

    @property
    def is_empty(self) -> bool:
        return self.start is None and self.end is None


def clamp_selection(
    selection: DateRangeSelection,
    max_days: Optional[int],
    tz: str = APP_TIMEZONE,
) -> DateRangeSelection:
    """Truncate a two-ended selection to at most ``max_days`` days."""
    if not max_days or selection.start is None or selection.end is None:
        return selection

    from_day = start_of_day(selection.start, tz)
    to_day = start_of_day(selection.end, tz)
    if (to_day.date() - from_day.date()).days >= max_days:
        return DateRangeSelection(
            start=selection.start,
            end=from_day + pd.Timedelta(days=max_days - 1),
        )
    return selection


def apply_selection(selection: DateRangeSelection, tz: str = APP_TIMEZONE) -> DateRangeSelection:
    """Promote a picker value: floor ``start``, ceil ``end``.

    A lone start day becomes a single-day range.
    """
    start = start_of_day(selection.start, tz) if selection.start is not None else None
    if selection.end is not None:
        end = end_of_day(selection.end, tz)
    elif start is not None:
        end = end_of_day(start, tz)
    else:
        end = None
    return DateRangeSelection(start=start, end=end)


def reset_selection() -> DateRangeSelection:
    return DateRangeSelection()


__all__ = [
    "APP_TIMEZONE",
    "DateRangeSelection",
    "PickerRules",
    "app_day",
    "app_today",
    "apply_selection",
    "clamp_selection",
    "days_between",
    "disabled_days",
    "end_of_day",
    "format_display_date",
    "format_request_date",
    "is_date_disabled",
    "months_between",
    "parse_day",
    "reset_selection",
    "start_of_day",
    "to_app_timestamp",
]
