"""
Event Models

Pydantic models for events published to EventBridge by the scheduling
Lambda. Downstream consumers (call initiation, monitoring) subscribe by
detail-type.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ScheduledUser(BaseModel):
    """Member of a group who should be dialled in."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., description="User identifier")
    phone_number: str | None = Field(default=None, description="10-digit phone number")
    timezone: str | None = Field(default=None, description="User timezone label (e.g., EST)")

    @classmethod
    def from_member(cls, member: dict[str, Any]) -> "ScheduledUser":
        """Build from a group member dict in either snake or camel case."""
        return cls(
            id=str(member.get("id", "")),
            phone_number=member.get("phone_number") or member.get("phoneNumber"),
            timezone=member.get("timezone"),
        )


class BaseEvent(BaseModel):
    """Base class for all events."""

    model_config = ConfigDict(frozen=True)

    group_id: str = Field(..., min_length=1, description="Group identifier")

    def to_eventbridge_detail(self) -> dict:
        """Convert to EventBridge detail payload."""
        return self.model_dump(mode="json", exclude_none=True)


class CallDueEvent(BaseEvent):
    """
    A group's next call time has arrived.

    Source: take5.lambdas.schedule_calls
    Triggers: call initiation (Chime meeting + SMS invites)
    """

    group_name: str = Field(default="", description="Group display name")
    next_call_time: datetime = Field(..., description="Computed call time (UTC)")
    cadence: str = Field(..., description="Group cadence")
    frequency: int = Field(..., description="Calls per cadence window")
    is_valid_frequency: bool = Field(..., description="Frequency within cadence bounds")
    business_hours_ok: bool = Field(..., description="Weekday, 9 AM - 8 PM")
    last_call_time: datetime | None = Field(default=None, description="Most recent roll call")
    duration_minutes: int | None = Field(default=None, description="Call length in minutes")
    users: list[ScheduledUser] = Field(default_factory=list, description="Members to dial in")

    @classmethod
    def detail_type(cls) -> str:
        return "CallDue"


EVENT_TYPE_MAP: dict[str, type[BaseEvent]] = {
    "CallDue": CallDueEvent,
}


def parse_event(detail_type: str, detail: dict) -> BaseEvent:
    """
    Parse an EventBridge event detail into the appropriate model.

    Raises:
        ValueError: If detail_type is unknown
        ValidationError: If detail doesn't match schema
    """
    event_class = EVENT_TYPE_MAP.get(detail_type)
    if event_class is None:
        raise ValueError(f"Unknown event type: {detail_type}")
    return event_class.model_validate(detail)
