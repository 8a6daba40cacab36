"""
Custom Exceptions for Take5 Call Scheduling

All exceptions carry the context needed for debugging and structured logging.
Invalid frequencies and malformed roll-call entries are deliberately NOT
exceptions inside the scheduling engine: the first is a boolean validation
result and the second is skipped silently.
"""

from dataclasses import dataclass
from typing import Any


class Take5Error(Exception):
    """Base exception for the Take5 scheduling system."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


@dataclass
class UnsupportedCadenceError(Take5Error):
    """Cadence value is outside the closed daily/weekly/monthly set."""

    cadence: Any
    group_id: str | None = None

    def __init__(self, cadence: Any, group_id: str | None = None) -> None:
        self.cadence = cadence
        self.group_id = group_id
        super().__init__(
            f"Unsupported cadence: {cadence!r}",
            cadence=cadence,
            group_id=group_id,
        )


@dataclass
class InvalidFrequencyError(Take5Error):
    """Frequency is outside the bounds allowed for the group's cadence."""

    cadence: str
    frequency: Any
    group_id: str | None = None

    def __init__(
        self,
        cadence: str,
        frequency: Any,
        group_id: str | None = None,
    ) -> None:
        self.cadence = cadence
        self.frequency = frequency
        self.group_id = group_id
        super().__init__(
            f"Invalid frequency {frequency!r} for cadence '{cadence}'",
            cadence=cadence,
            frequency=frequency,
            group_id=group_id,
        )


@dataclass
class GroupNotFoundError(Take5Error):
    """Group record not found in DynamoDB."""

    group_id: str

    def __init__(self, group_id: str) -> None:
        self.group_id = group_id
        super().__init__(
            f"Group '{group_id}' not found",
            group_id=group_id,
        )


@dataclass
class DynamoDBError(Take5Error):
    """DynamoDB operation failed."""

    operation: str  # "get", "put", "update", "query"
    table_name: str

    def __init__(
        self,
        operation: str,
        table_name: str,
        error_message: str | None = None,
    ) -> None:
        self.operation = operation
        self.table_name = table_name
        super().__init__(
            f"DynamoDB {operation} failed on table '{table_name}': {error_message or 'Unknown error'}",
            operation=operation,
            table_name=table_name,
            error_message=error_message,
        )


@dataclass
class RollCallConflictError(DynamoDBError):
    """A roll-call entry for this call time was already recorded."""

    group_id: str | None = None
    call_time: str | None = None

    def __init__(
        self,
        table_name: str,
        group_id: str,
        call_time: str,
    ) -> None:
        self.group_id = group_id
        self.call_time = call_time
        super().__init__(
            operation="conditional_write",
            table_name=table_name,
            error_message=f"Roll call {call_time} already recorded for group {group_id}",
        )


@dataclass
class EventPublishError(Take5Error):
    """Failed to publish event to EventBridge."""

    event_type: str
    error_code: str | None = None
    error_message: str | None = None

    def __init__(
        self,
        event_type: str,
        error_code: str | None = None,
        error_message: str | None = None,
    ) -> None:
        self.event_type = event_type
        self.error_code = error_code
        self.error_message = error_message
        super().__init__(
            f"Failed to publish event '{event_type}': {error_message or 'Unknown error'}",
            event_type=event_type,
            error_code=error_code,
            error_message=error_message,
        )
