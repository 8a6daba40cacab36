# Shared Tools
"""
AWS adapters used by the scheduling Lambda.

The scheduling engine never imports these; they load group snapshots and
publish the engine's decisions.
"""

from take5.shared.tools.dynamodb import (
    list_groups,
    load_group,
    record_roll_call,
    save_group,
)
from take5.shared.tools.eventbridge import send_event, send_events_batch

__all__ = [
    # DynamoDB
    "list_groups",
    "load_group",
    "record_roll_call",
    "save_group",
    # EventBridge
    "send_event",
    "send_events_batch",
]
