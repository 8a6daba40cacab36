"""
Schedule Generator and Validators

Projects a group's upcoming calls for previews, and exposes the
configuration-time and call-time checks used by collaborators.
"""

from datetime import datetime, timezone

from take5.shared import cadence as cadence_policy
from take5.shared.cadence import ACCEPTABLE_CALL_HOURS, Cadence, HourRange
from take5.shared.models.group import Group
from take5.scheduling.calculator import WindowAnchor, next_call_time
from take5.scheduling.call_history import ensure_utc
from take5.scheduling.slot_selector import SlotSelector


def generate_schedule(
    group: Group,
    count: int = 5,
    start_time: datetime | None = None,
    *,
    selector: SlotSelector | None = None,
    anchor: WindowAnchor = WindowAnchor.HISTORY_BOUNDARY,
) -> list[datetime]:
    """
    Generate the next ``count`` call times for a group.

    Each step simulates the previous call having happened: a transient copy
    of the group gets one roll-call entry at the previous time, and the next
    time is computed as of that moment. The caller's group is never mutated.

    Args:
        group: Group snapshot
        count: Number of calls to project
        start_time: Time the projection starts from (defaults to wall clock)
        selector: Slot selector shared by every step (default: fresh)
        anchor: Weekly/monthly window policy

    Returns:
        Strictly increasing list of aware UTC datetimes

    Raises:
        UnsupportedCadenceError: If the group's cadence is unknown
    """
    if count <= 0:
        return []

    start_time = ensure_utc(start_time) if start_time is not None else datetime.now(timezone.utc)
    selector = selector or SlotSelector()

    schedule: list[datetime] = []
    current = next_call_time(group, start_time, selector=selector, anchor=anchor)
    projected = group

    for _ in range(count):
        schedule.append(current)
        if len(schedule) == count:
            break
        projected = projected.with_call(current)
        current = next_call_time(projected, current, selector=selector, anchor=anchor)

    return schedule


def is_valid_frequency(cadence: Cadence | str, frequency: object) -> bool:
    """Check a group's frequency against its cadence bounds."""
    return cadence_policy.is_valid_frequency(cadence, frequency)


def is_call_time_acceptable(timestamp: datetime) -> bool:
    """
    Check a call time against the fixed acceptance window.

    True iff the hour is within 9..20 inclusive and the day is Monday to
    Friday. The same window applies to every cadence, including monthly
    groups whose calls are generated between 10 and 18.
    """
    start, end = ACCEPTABLE_CALL_HOURS
    if timestamp.weekday() >= 5:
        return False
    return start <= timestamp.hour <= end


def adjust_call_time_to_business_hours(
    timestamp: datetime,
    hour_range: HourRange = ACCEPTABLE_CALL_HOURS,
) -> datetime:
    """
    Clamp a call time into an hour window on the same day.

    Before the window moves to its start hour, after it to its end hour
    (minutes and seconds zeroed). Times inside the window are unchanged.
    """
    start, end = hour_range
    if timestamp.hour < start:
        return timestamp.replace(hour=start, minute=0, second=0, microsecond=0)
    if timestamp.hour > end:
        return timestamp.replace(hour=end, minute=0, second=0, microsecond=0)
    return timestamp
