"""
Pytest Configuration and Shared Fixtures

Provides fixed clocks, scripted randomness, sample groups and moto AWS mocking.
"""

import os
from datetime import datetime, timezone
from typing import Any, Callable, Iterable

import boto3
import pytest
from moto import mock_aws

# Set test environment before importing application modules
os.environ["TAKE5_DYNAMODB_TABLE_NAME"] = "TestTake5Groups"
os.environ["TAKE5_EVENTBRIDGE_BUS_NAME"] = "test-take5"
os.environ["TAKE5_AWS_REGION"] = "us-east-1"
os.environ["TAKE5_ENVIRONMENT"] = "development"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"

from take5.scheduling.slot_selector import SlotSelector  # noqa: E402
from take5.shared.config import get_settings  # noqa: E402
from take5.shared.models.group import Group  # noqa: E402

TABLE_NAME = "TestTake5Groups"
BUS_NAME = "test-take5"


class ScriptedRandom:
    """
    RandomSource that replays scripted values.

    Each randint call consumes the next value; once the script runs out the
    lower bound is returned. Every call is recorded as (a, b, value).
    """

    def __init__(self, values: Iterable[int] = ()):
        self._values = list(values)
        self.calls: list[tuple[int, int, int]] = []

    def randint(self, a: int, b: int) -> int:
        value = self._values.pop(0) if self._values else a
        assert a <= value <= b, f"scripted value {value} outside [{a}, {b}]"
        self.calls.append((a, b, value))
        return value


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings from the environment for every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# --- Time Fixtures ---


@pytest.fixture
def frozen_datetime() -> datetime:
    """Fixed current time: Thursday 2024-01-18 12:00 UTC."""
    return datetime(2024, 1, 18, 12, 0, tzinfo=timezone.utc)


# --- Randomness Fixtures ---


@pytest.fixture
def scripted_selector() -> Callable[..., SlotSelector]:
    """Factory for a SlotSelector that replays the given randint values."""

    def _make(*values: int) -> SlotSelector:
        return SlotSelector(ScriptedRandom(values))

    return _make


@pytest.fixture
def scripted_random() -> type[ScriptedRandom]:
    """The ScriptedRandom class, for tests that inspect recorded draws."""
    return ScriptedRandom


# --- Group Fixtures ---


def make_group(**overrides: Any) -> Group:
    """Build a Group with sensible defaults."""
    data: dict[str, Any] = {
        "id": "group-001",
        "name": "Morning Check-in",
        "cadence": "weekly",
        "frequency": 3,
        "enabled": True,
        "roll_call": {},
        "users": [
            {"id": "user-1", "phoneNumber": "5551230001", "timezone": "EST"},
            {"id": "user-2", "phoneNumber": "5551230002", "timezone": "PST"},
        ],
        "duration_minutes": 15,
    }
    data.update(overrides)
    return Group(**data)


@pytest.fixture
def group_factory() -> Callable[..., Group]:
    """Factory building groups from keyword overrides."""
    return make_group


@pytest.fixture
def daily_group() -> Group:
    return make_group(id="daily-1", name="Daily Test", cadence="daily", frequency=1)


@pytest.fixture
def weekly_group() -> Group:
    """Weekly group, three calls per week, last call Monday 2024-01-15 10:00."""
    return make_group(
        id="weekly-1",
        name="Weekly Test",
        cadence="weekly",
        frequency=3,
        roll_call={"2024-01-15T10:00:00.000Z": ["user-1"]},
    )


@pytest.fixture
def monthly_group() -> Group:
    """Monthly group, five calls per month, last call 2024-01-01 14:00."""
    return make_group(
        id="monthly-1",
        name="Monthly Test",
        cadence="monthly",
        frequency=5,
        roll_call={"2024-01-01T14:00:00.000Z": ["user-1"]},
    )


# --- AWS Mocking Fixtures ---


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    return {
        "aws_access_key_id": "testing",
        "aws_secret_access_key": "testing",
        "region_name": "us-east-1",
    }


def _create_groups_table(dynamodb):
    table = dynamodb.create_table(
        TableName=TABLE_NAME,
        KeySchema=[
            {"AttributeName": "PK", "KeyType": "HASH"},
            {"AttributeName": "SK", "KeyType": "RANGE"},
        ],
        AttributeDefinitions=[
            {"AttributeName": "PK", "AttributeType": "S"},
            {"AttributeName": "SK", "AttributeType": "S"},
            {"AttributeName": "GSI1PK", "AttributeType": "S"},
        ],
        GlobalSecondaryIndexes=[
            {
                "IndexName": "GSI1",
                "KeySchema": [
                    {"AttributeName": "GSI1PK", "KeyType": "HASH"},
                    {"AttributeName": "SK", "KeyType": "RANGE"},
                ],
                "Projection": {"ProjectionType": "ALL"},
                "ProvisionedThroughput": {
                    "ReadCapacityUnits": 5,
                    "WriteCapacityUnits": 5,
                },
            }
        ],
        ProvisionedThroughput={
            "ReadCapacityUnits": 5,
            "WriteCapacityUnits": 5,
        },
    )
    table.meta.client.get_waiter("table_exists").wait(TableName=TABLE_NAME)
    return table


@pytest.fixture
def mock_dynamodb(aws_credentials):
    """
    Create a mocked DynamoDB groups table.

    Yields the table resource; GSI1 is keyed on GSI1PK/SK.
    """
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", **aws_credentials)
        yield _create_groups_table(dynamodb)


@pytest.fixture
def mock_eventbridge(aws_credentials):
    """Create a mocked EventBridge client with bus."""
    with mock_aws():
        events = boto3.client("events", **aws_credentials)
        events.create_event_bus(Name=BUS_NAME)
        yield events


@pytest.fixture
def mock_aws_all(aws_credentials):
    """
    Mock every AWS service the scheduler touches.

    Yields a dict with the groups table and the EventBridge client.
    """
    with mock_aws():
        dynamodb = boto3.resource("dynamodb", **aws_credentials)
        table = _create_groups_table(dynamodb)

        events = boto3.client("events", **aws_credentials)
        events.create_event_bus(Name=BUS_NAME)

        yield {"table": table, "events": events}
