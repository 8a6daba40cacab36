# Shared Models
"""
Pydantic models for group snapshots and EventBridge events.
"""

from take5.shared.models.group import Group
from take5.shared.models.events import (
    BaseEvent,
    CallDueEvent,
    ScheduledUser,
    parse_event,
)

__all__ = [
    # Groups
    "Group",
    # Events
    "BaseEvent",
    "CallDueEvent",
    "ScheduledUser",
    "parse_event",
]
