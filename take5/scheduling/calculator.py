"""
Next Call Calculator

Turns a group snapshot and the current time into the group's next call
timestamp.

The engine is stateless: the weekly/monthly day set is re-derived from the
roll call on every invocation, so each call re-randomizes slot choice.
Callers that poll repeatedly and need a stable answer must cache the result
or pass a selector seeded per window.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum

import structlog

from take5.shared.cadence import (
    Cadence,
    business_hours_window,
    window_length_days,
)
from take5.shared.exceptions import UnsupportedCadenceError
from take5.shared.models.group import Group
from take5.scheduling.call_history import ensure_utc, last_call_time
from take5.scheduling.slot_selector import SlotSelector

log = structlog.get_logger()

ONE_DAY = timedelta(days=1)
ONE_WEEK = timedelta(days=7)

# Window length used by the legacy variant for monthly groups
LEGACY_MONTHLY_WINDOW_DAYS = 30


class WindowAnchor(str, Enum):
    """
    Policy for placing weekly/monthly windows.

    Both variants honour the one-call-per-day ceiling; they pick different
    concrete days for the same history.
    """

    HISTORY_BOUNDARY = "history_boundary"
    """Calendar week/month containing the last call; exhausted windows
    re-anchor one period later."""

    NEXT_DAY = "next_day"
    """Window starts at the last call itself; an exhausted window is replaced
    by a fresh one starting the day after now."""


def _week_start(moment: datetime) -> datetime:
    """Sunday of the week containing moment, keeping its time of day."""
    days_since_sunday = (moment.weekday() + 1) % 7
    return moment - timedelta(days=days_since_sunday)


def _month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _next_month(month_start: datetime) -> datetime:
    if month_start.month == 12:
        return month_start.replace(year=month_start.year + 1, month=1)
    return month_start.replace(month=month_start.month + 1)


def _first_after(days: list[datetime], now: datetime) -> datetime | None:
    for day in days:
        if day > now:
            return day
    return None


def _next_daily_day(base: datetime, now: datetime) -> datetime:
    candidate = base + ONE_DAY
    while candidate <= now:
        candidate += ONE_DAY
    return candidate


def _next_weekly_day(
    base: datetime,
    now: datetime,
    count: int,
    selector: SlotSelector,
    anchor: WindowAnchor,
) -> datetime:
    if anchor is WindowAnchor.NEXT_DAY:
        day = _first_after(selector.pick_days(base, 7, count), now)
        if day is None:
            day = selector.pick_days(now + ONE_DAY, 7, count)[0]
        return day

    anchor_time = base
    while True:
        days = selector.pick_days(_week_start(anchor_time), 7, count)
        day = _first_after(days, now)
        if day is not None:
            return day
        anchor_time += ONE_WEEK


def _next_monthly_day(
    base: datetime,
    now: datetime,
    count: int,
    selector: SlotSelector,
    anchor: WindowAnchor,
) -> datetime:
    if anchor is WindowAnchor.NEXT_DAY:
        day = _first_after(
            selector.pick_days(base, LEGACY_MONTHLY_WINDOW_DAYS, count), now
        )
        if day is None:
            day = selector.pick_days(now + ONE_DAY, LEGACY_MONTHLY_WINDOW_DAYS, count)[0]
        return day

    month_start = _month_start(base)
    while True:
        length = window_length_days(Cadence.MONTHLY, month_start)
        day = _first_after(selector.pick_days(month_start, length, count), now)
        if day is not None:
            return day
        month_start = _next_month(month_start)


def next_call_time(
    group: Group,
    now: datetime | None = None,
    *,
    selector: SlotSelector | None = None,
    anchor: WindowAnchor = WindowAnchor.HISTORY_BOUNDARY,
) -> datetime:
    """
    Calculate the next call time for a group.

    Args:
        group: Group snapshot (read-only)
        now: Current time (defaults to wall clock, naive values read as UTC)
        selector: Slot selector supplying randomness (default: fresh selector)
        anchor: Weekly/monthly window policy

    Returns:
        Aware UTC datetime with hour inside the cadence's business hours and
        seconds/microseconds zeroed

    Raises:
        UnsupportedCadenceError: If the group's cadence is not daily/weekly/monthly
    """
    try:
        cadence = Cadence.from_string(group.cadence)
    except UnsupportedCadenceError as e:
        raise UnsupportedCadenceError(group.cadence, group_id=group.id) from e

    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    selector = selector or SlotSelector()
    last_call = last_call_time(group.roll_call)
    base = last_call or now

    # Frequencies below 1 are invalid; still schedule one call per window
    count = max(group.frequency, 1)

    if cadence is Cadence.DAILY:
        day = _next_daily_day(base, now)
    elif cadence is Cadence.WEEKLY:
        day = _next_weekly_day(base, now, min(count, 7), selector, anchor)
    else:
        day = _next_monthly_day(base, now, min(count, 30), selector, anchor)

    hour, minute = selector.random_time_within(business_hours_window(cadence))
    result = day.replace(hour=hour, minute=minute, second=0, microsecond=0)

    if cadence is Cadence.DAILY:
        # The drawn time of day can fall before now on the candidate's date
        while result <= now:
            result += ONE_DAY

    log.debug(
        "next_call_time_computed",
        group_id=group.id,
        cadence=cadence.value,
        frequency=group.frequency,
        last_call_time=last_call.isoformat() if last_call else None,
        next_call_time=result.isoformat(),
        anchor=anchor.value,
    )

    return result
