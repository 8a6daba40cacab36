"""
Cadence Policy

Defines the closed set of call cadences and the rules attached to each one:
the valid frequency range, the business-hours window used when placing a
call's time of day, and the length of one cadence window in days.

One call per calendar day is the system-wide ceiling, which is why the
frequency maximum equals the window length for weekly cadences and stays
at 30 for monthly ones.
"""

import calendar
from datetime import date, datetime
from enum import Enum
from typing import Final

import structlog

from take5.shared.exceptions import UnsupportedCadenceError

log = structlog.get_logger()


class Cadence(str, Enum):
    """
    Repeating period over which a group's calls are scheduled.
    """

    DAILY = "daily"
    """One call every day."""

    WEEKLY = "weekly"
    """Between one and seven calls per Sunday-first calendar week."""

    MONTHLY = "monthly"
    """Between one and thirty calls per calendar month."""

    @classmethod
    def from_string(cls, value: "Cadence | str") -> "Cadence":
        """Convert string to Cadence enum."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise UnsupportedCadenceError(value) from e


HourRange = tuple[int, int]

# Generation-time window for daily and weekly groups (9 AM - 8 PM)
STANDARD_BUSINESS_HOURS: Final[HourRange] = (9, 20)

# Generation-time window for monthly groups (10 AM - 6 PM)
MONTHLY_BUSINESS_HOURS: Final[HourRange] = (10, 18)

# Window used by is_call_time_acceptable for every cadence.
# Not reconciled with MONTHLY_BUSINESS_HOURS; callers pick the check they need.
ACCEPTABLE_CALL_HOURS: Final[HourRange] = (9, 20)

MAX_CALLS_PER_DAY: Final[int] = 1

FREQUENCY_BOUNDS: Final[dict[Cadence, tuple[int, int]]] = {
    Cadence.DAILY: (1, 1),
    Cadence.WEEKLY: (1, 7),
    Cadence.MONTHLY: (1, 30),
}

BUSINESS_HOURS: Final[dict[Cadence, HourRange]] = {
    Cadence.DAILY: STANDARD_BUSINESS_HOURS,
    Cadence.WEEKLY: STANDARD_BUSINESS_HOURS,
    Cadence.MONTHLY: MONTHLY_BUSINESS_HOURS,
}

# Human-readable rules, surfaced by the schedule preview handler
FREQUENCY_RULES: Final[dict[Cadence, str]] = {
    Cadence.DAILY: "Must be 1",
    Cadence.WEEKLY: "Must be 1-7",
    Cadence.MONTHLY: "Must be 1-30",
}


def frequency_bounds(cadence: Cadence | str) -> tuple[int, int]:
    """
    Get the inclusive (min, max) frequency allowed for a cadence.

    Raises:
        UnsupportedCadenceError: If cadence is not a known value
    """
    return FREQUENCY_BOUNDS[Cadence.from_string(cadence)]


def is_valid_frequency(cadence: Cadence | str, frequency: object) -> bool:
    """
    Check a frequency against the bounds for its cadence.

    Unknown cadences and non-integer frequencies are reported as invalid
    rather than raised, so batch callers can log and continue.
    """
    try:
        low, high = frequency_bounds(cadence)
    except UnsupportedCadenceError:
        log.debug("frequency_check_unknown_cadence", cadence=cadence)
        return False

    if isinstance(frequency, bool) or not isinstance(frequency, int):
        return False

    return low <= frequency <= high


def business_hours_window(cadence: Cadence | str) -> HourRange:
    """
    Get the inclusive (start_hour, end_hour) used to place a call's time of day.

    Raises:
        UnsupportedCadenceError: If cadence is not a known value
    """
    return BUSINESS_HOURS[Cadence.from_string(cadence)]


def window_length_days(cadence: Cadence | str, reference: date | datetime) -> int:
    """
    Get the number of days in one cadence window.

    Monthly windows follow the calendar month containing ``reference``.

    Raises:
        UnsupportedCadenceError: If cadence is not a known value
    """
    cadence = Cadence.from_string(cadence)
    if cadence is Cadence.DAILY:
        return 1
    if cadence is Cadence.WEEKLY:
        return 7
    return calendar.monthrange(reference.year, reference.month)[1]


class CadencePolicy:
    """
    Lookup table from Cadence to its scheduling rules.

    Thin namespace over the module-level functions so collaborators can
    depend on (and substitute) a single object.
    """

    frequency_bounds = staticmethod(frequency_bounds)
    is_valid_frequency = staticmethod(is_valid_frequency)
    business_hours_window = staticmethod(business_hours_window)
    window_length_days = staticmethod(window_length_days)
