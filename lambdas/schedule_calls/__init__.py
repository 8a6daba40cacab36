"""
ScheduleCalls Lambda

Periodic Lambda triggered by an EventBridge Scheduled Rule to find the
groups whose next call time has arrived and emit CallDue events.

Components:
- handler: Lambda entry points (scheduled trigger plus admin previews)

Flow:
1. Triggered by scheduled EventBridge rule
2. Load all group snapshots from DynamoDB (GSI1)
3. Compute next call times with the scheduling engine
4. Emit CallDue events for due groups
5. Return summary of the run
"""

from lambdas.schedule_calls.handler import (
    generate_group_schedule,
    lambda_handler,
    validate_all_groups,
)

__all__ = [
    "lambda_handler",
    "generate_group_schedule",
    "validate_all_groups",
]
