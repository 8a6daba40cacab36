"""
DynamoDB Tools

Group snapshot persistence in DynamoDB.

Item layout:
- PK: GROUP#<group_id>
- SK: METADATA
- GSI1PK: GROUPS (lists every group through GSI1)
- roll_call: map of ISO call timestamp -> attendee ids
"""

from datetime import datetime, timezone
from typing import Any, Iterable

import boto3
from botocore.exceptions import ClientError
from pydantic import ValidationError
import structlog

from take5.shared.config import get_settings
from take5.shared.exceptions import (
    DynamoDBError,
    GroupNotFoundError,
    RollCallConflictError,
)
from take5.shared.models.group import GROUPS_GSI1PK, Group

log = structlog.get_logger()


def _get_table():
    """Get DynamoDB table resource."""
    settings = get_settings()
    dynamodb = boto3.resource("dynamodb", **settings.dynamodb_config)
    return dynamodb.Table(settings.dynamodb_table_name)


def _group_key(group_id: str) -> dict[str, str]:
    return {"PK": f"GROUP#{group_id}", "SK": "METADATA"}


def load_group(group_id: str, *, consistent_read: bool = True) -> Group | None:
    """
    Load a group snapshot from DynamoDB.

    Args:
        group_id: Group identifier
        consistent_read: Use strongly consistent read (default True)

    Returns:
        Group if found, None otherwise

    Raises:
        DynamoDBError: On DynamoDB operation failure
    """
    settings = get_settings()
    table = _get_table()

    log.debug("loading_group", group_id=group_id)

    try:
        response = table.get_item(
            Key=_group_key(group_id),
            ConsistentRead=consistent_read,
        )
    except ClientError as e:
        log.error("dynamodb_get_failed", group_id=group_id, error=str(e))
        raise DynamoDBError(
            operation="get",
            table_name=settings.dynamodb_table_name,
            error_message=str(e),
        ) from e

    item = response.get("Item")
    if not item:
        log.debug("group_not_found", group_id=group_id)
        return None

    return Group.from_dynamodb(item)


def list_groups(limit: int | None = None) -> list[Group]:
    """
    List every group through GSI1 (GSI1PK = 'GROUPS').

    Follows pagination until the index is exhausted or ``limit`` groups
    have been read. Items that cannot be parsed are logged and skipped.

    Raises:
        DynamoDBError: On DynamoDB operation failure
    """
    settings = get_settings()
    table = _get_table()

    query_kwargs: dict[str, Any] = {
        "IndexName": settings.dynamodb_gsi1_name,
        "KeyConditionExpression": "GSI1PK = :pk",
        "ExpressionAttributeValues": {":pk": GROUPS_GSI1PK},
    }

    groups: list[Group] = []
    while True:
        if limit is not None:
            query_kwargs["Limit"] = limit - len(groups)
        try:
            response = table.query(**query_kwargs)
        except ClientError as e:
            log.error("list_groups_failed", error=str(e))
            raise DynamoDBError(
                operation="query",
                table_name=settings.dynamodb_table_name,
                error_message=str(e),
            ) from e

        for item in response.get("Items", []):
            try:
                groups.append(Group.from_dynamodb(item))
            except (ValidationError, ValueError, TypeError) as e:
                log.warning("group_item_malformed", pk=item.get("PK"), error=str(e))

        last_key = response.get("LastEvaluatedKey")
        if not last_key or (limit is not None and len(groups) >= limit):
            break
        query_kwargs["ExclusiveStartKey"] = last_key

    log.info("groups_listed", count=len(groups))
    return groups


def save_group(group: Group) -> Group:
    """
    Write a group snapshot, replacing any existing record.

    Raises:
        DynamoDBError: On DynamoDB operation failure
    """
    settings = get_settings()
    table = _get_table()

    try:
        table.put_item(Item=group.to_dynamodb())
    except ClientError as e:
        log.error("dynamodb_put_failed", group_id=group.id, error=str(e))
        raise DynamoDBError(
            operation="put",
            table_name=settings.dynamodb_table_name,
            error_message=str(e),
        ) from e

    log.info("group_saved", group_id=group.id, cadence=group.cadence)
    return group


def record_roll_call(
    group_id: str,
    call_time: datetime,
    attendees: Iterable[str] = (),
) -> str:
    """
    Append a completed call to a group's roll call.

    The write is conditional on the timestamp not being present yet, so a
    call slot can be claimed exactly once even when several scheduler
    invocations race on the same due group.

    Args:
        group_id: Group identifier
        call_time: When the call happened (naive values read as UTC)
        attendees: Ids of users who joined

    Returns:
        The ISO timestamp used as the roll-call key

    Raises:
        GroupNotFoundError: If the group does not exist
        RollCallConflictError: If this call time is already recorded
        DynamoDBError: On any other DynamoDB failure
    """
    settings = get_settings()
    table = _get_table()

    if call_time.tzinfo is None:
        call_time = call_time.replace(tzinfo=timezone.utc)
    key = call_time.astimezone(timezone.utc).isoformat()

    try:
        table.update_item(
            Key=_group_key(group_id),
            UpdateExpression="SET roll_call.#ts = :attendees",
            ConditionExpression="attribute_exists(PK) AND attribute_not_exists(roll_call.#ts)",
            ExpressionAttributeNames={"#ts": key},
            ExpressionAttributeValues={":attendees": [str(a) for a in attendees]},
        )
    except ClientError as e:
        if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
            if load_group(group_id) is None:
                raise GroupNotFoundError(group_id) from e
            log.info("roll_call_already_recorded", group_id=group_id, call_time=key)
            raise RollCallConflictError(
                table_name=settings.dynamodb_table_name,
                group_id=group_id,
                call_time=key,
            ) from e

        log.error("dynamodb_update_failed", group_id=group_id, error=str(e))
        raise DynamoDBError(
            operation="update",
            table_name=settings.dynamodb_table_name,
            error_message=str(e),
        ) from e

    log.info("roll_call_recorded", group_id=group_id, call_time=key)
    return key
