"""
Call Scheduling Engine

Pure computation that turns a group's cadence, frequency and roll-call
history into its next call time, a due/not-due decision and schedule
previews. No I/O, no persistent state.

Components:
- call_history: last call time from a roll call
- slot_selector: randomized day and time-of-day selection
- calculator: next call time for one group
- due_groups: groups due now
- schedule: multi-call projection and call-time validators
"""

from take5.scheduling.calculator import WindowAnchor, next_call_time
from take5.scheduling.call_history import last_call_time
from take5.scheduling.due_groups import (
    DueGroupsResult,
    SkippedGroup,
    find_due_groups,
    groups_due,
    is_group_due,
)
from take5.scheduling.schedule import (
    adjust_call_time_to_business_hours,
    generate_schedule,
    is_call_time_acceptable,
    is_valid_frequency,
)
from take5.scheduling.slot_selector import RandomSource, SlotSelector

__all__ = [
    # Calculator
    "WindowAnchor",
    "next_call_time",
    # History
    "last_call_time",
    # Due groups
    "DueGroupsResult",
    "SkippedGroup",
    "find_due_groups",
    "groups_due",
    "is_group_due",
    # Schedule & validators
    "adjust_call_time_to_business_hours",
    "generate_schedule",
    "is_call_time_acceptable",
    "is_valid_frequency",
    # Randomness
    "RandomSource",
    "SlotSelector",
]
