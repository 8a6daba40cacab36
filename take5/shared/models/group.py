"""
Group Models

Pydantic model for a check-in group snapshot and its DynamoDB item layout.

The scheduling engine only reads id, cadence, frequency, enabled and
roll_call. The descriptive fields are owned by the CRUD layer and carried
through for event payloads.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator
import structlog

log = structlog.get_logger()

GROUPS_GSI1PK = "GROUPS"


class Group(BaseModel):
    """
    Immutable snapshot of a check-in group.

    PK: GROUP#<id>
    SK: METADATA
    GSI1PK: GROUPS  (fixed, enables listing all groups)
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str = Field(..., description="Group identifier")
    cadence: str = Field(..., description="daily, weekly or monthly")
    frequency: int = Field(..., description="Calls intended within one cadence window")
    enabled: bool = Field(default=True, description="Disabled groups are never due")
    roll_call: dict[str, list[str]] = Field(
        default_factory=dict,
        alias="rollCall",
        description="ISO call timestamp -> ids of users who joined",
    )

    name: str = Field(default="", description="Display name")
    users: list[dict[str, Any]] = Field(
        default_factory=list,
        description="Members (id, phone_number, timezone)",
    )
    duration_minutes: int | None = Field(
        default=None,
        alias="duration",
        description="Call length in minutes",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("cadence", mode="before")
    @classmethod
    def _normalize_cadence(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("roll_call", mode="before")
    @classmethod
    def _normalize_roll_call(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, dict):
            return {
                str(ts): [str(user) for user in (attendees or [])]
                for ts, attendees in value.items()
            }
        return value

    @property
    def pk(self) -> str:
        return f"GROUP#{self.id}"

    @property
    def sk(self) -> str:
        return "METADATA"

    def with_call(
        self,
        call_time: datetime,
        attendees: Iterable[str] = (),
    ) -> "Group":
        """
        Return a copy with one extra roll-call entry.

        Since Group is frozen, the original snapshot is left untouched.
        """
        if call_time.tzinfo is None:
            call_time = call_time.replace(tzinfo=timezone.utc)
        roll_call = dict(self.roll_call)
        roll_call[call_time.astimezone(timezone.utc).isoformat()] = list(attendees)
        return self.model_copy(update={"roll_call": roll_call})

    def to_dynamodb(self) -> dict[str, Any]:
        """Convert to DynamoDB item."""
        item: dict[str, Any] = {
            "PK": self.pk,
            "SK": self.sk,
            "GSI1PK": GROUPS_GSI1PK,
            "group_id": self.id,
            "cadence": self.cadence,
            "frequency": self.frequency,
            "enabled": self.enabled,
            "roll_call": self.roll_call,
            "name": self.name,
            "users": self.users,
        }
        if self.duration_minutes is not None:
            item["duration_minutes"] = self.duration_minutes
        return item

    @classmethod
    def from_dynamodb(cls, item: dict[str, Any]) -> "Group":
        """
        Parse from DynamoDB item (boto3 resource returns numbers as Decimal).

        A cadence of the wrong type is kept as text so it is rejected later
        as an unsupported cadence. A missing frequency becomes 0.

        Raises:
            ValueError: If frequency or duration is not numeric
            ValidationError: If the item cannot form a Group
        """
        group_id = item.get("group_id")
        if not group_id:
            pk = item.get("PK", "")
            group_id = pk.replace("GROUP#", "") if pk.startswith("GROUP#") else pk

        cadence = item.get("cadence", "")
        if not isinstance(cadence, str):
            log.debug("group_field_malformed", group_id=group_id, field="cadence", value=str(cadence))
            cadence = "" if cadence is None else str(cadence)

        frequency = item.get("frequency")
        if frequency is None:
            log.debug("group_field_malformed", group_id=group_id, field="frequency", value=None)
            frequency = 0

        duration = item.get("duration_minutes")
        return cls(
            id=group_id,
            cadence=cadence,
            frequency=int(frequency),
            enabled=bool(item.get("enabled", True)),
            roll_call=item.get("roll_call", {}),
            name=item.get("name", ""),
            users=[_plain(user) for user in item.get("users", [])],
            duration_minutes=int(duration) if duration is not None else None,
        )


def _plain(value: Any) -> Any:
    """Convert DynamoDB Decimals nested in maps/lists back to ints."""
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, Decimal):
        return int(value) if value == int(value) else float(value)
    return value
