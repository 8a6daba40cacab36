"""
Mock Group Generator for Testing

Generates realistic check-in groups with members and roll-call history.
Seeded generators are fully reproducible.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from uuid import uuid4

from faker import Faker

from take5.shared.cadence import FREQUENCY_BOUNDS, Cadence
from take5.shared.models.group import Group


class MockGroupGenerator:
    """Generate mock groups for testing."""

    TIMEZONES = ["EST", "CST", "MST", "PST"]

    DURATIONS = [5, 10, 15, 30]

    def __init__(self, seed: Optional[int] = None):
        """Initialize generator with optional seed for reproducibility."""
        self._rng = random.Random(seed)
        self.fake = Faker()
        if seed is not None:
            self.fake.seed_instance(seed)

    def generate_group_id(self) -> str:
        """Generate unique group ID."""
        return f"group-{uuid4().hex[:8]}"

    def generate_member(self) -> dict[str, Any]:
        """Generate a group member in the camelCase shape of the groups API."""
        return {
            "id": f"user-{uuid4().hex[:8]}",
            "name": self.fake.name(),
            "phoneNumber": self.fake.numerify("##########"),
            "timezone": self._rng.choice(self.TIMEZONES),
        }

    def generate_roll_call(
        self,
        calls: int,
        end: datetime,
        members: list[dict[str, Any]],
        spacing_days: int = 1,
    ) -> dict[str, list[str]]:
        """Generate `calls` past roll-call entries ending at `end`."""
        roll_call: dict[str, list[str]] = {}
        for i in range(calls):
            when = end - timedelta(days=i * spacing_days)
            attendees = [m["id"] for m in members if self._rng.random() < 0.8]
            roll_call[when.astimezone(timezone.utc).isoformat()] = attendees
        return roll_call

    def generate_group(
        self,
        cadence: Cadence | str | None = None,
        frequency: Optional[int] = None,
        last_call: Optional[datetime] = None,
        history_size: int = 3,
        member_count: Optional[int] = None,
        enabled: bool = True,
    ) -> Group:
        """
        Generate a group with a valid frequency for its cadence.

        Args:
            cadence: Cadence (random when omitted)
            frequency: Calls per window (random within bounds when omitted)
            last_call: Most recent roll call; no history when omitted
            history_size: Number of roll-call entries when last_call is set
            member_count: Number of members (random 2-6 when omitted)
            enabled: Whether the group is enabled
        """
        cadence = Cadence.from_string(cadence) if cadence else self._rng.choice(list(Cadence))
        if frequency is None:
            low, high = FREQUENCY_BOUNDS[cadence]
            frequency = self._rng.randint(low, high)

        members = [
            self.generate_member()
            for _ in range(member_count if member_count is not None else self._rng.randint(2, 6))
        ]
        roll_call = (
            self.generate_roll_call(history_size, last_call, members)
            if last_call is not None
            else {}
        )

        return Group(
            id=self.generate_group_id(),
            name=f"{self.fake.last_name()} {self._rng.choice(['Family', 'Crew', 'Friends'])}",
            cadence=cadence.value,
            frequency=frequency,
            enabled=enabled,
            roll_call=roll_call,
            users=members,
            duration_minutes=self._rng.choice(self.DURATIONS),
        )

    def generate_groups(self, count: int, **kwargs: Any) -> list[Group]:
        """Generate several groups sharing the same options."""
        return [self.generate_group(**kwargs) for _ in range(count)]
