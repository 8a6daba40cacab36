"""
EventBridge Tools

Publishes scheduling events to the Take5 event bus.
"""

import json

import boto3
from botocore.exceptions import ClientError
import structlog

from take5.shared.config import get_settings
from take5.shared.exceptions import EventPublishError
from take5.shared.models.events import BaseEvent

log = structlog.get_logger()

# EventBridge accepts at most 10 entries per PutEvents request
BATCH_SIZE = 10


def _get_client():
    """Get EventBridge client."""
    settings = get_settings()
    return boto3.client("events", **settings.eventbridge_config)


def _default_source() -> str:
    return f"{get_settings().eventbridge_source_prefix}.lambdas.schedule_calls"


def _entry(event: BaseEvent, source: str, detail_type: str | None = None) -> dict:
    return {
        "EventBusName": get_settings().eventbridge_bus_name,
        "Source": source,
        "DetailType": detail_type or event.detail_type(),
        "Detail": json.dumps(event.to_eventbridge_detail()),
    }


def send_event(
    event: BaseEvent,
    *,
    source: str | None = None,
    detail_type: str | None = None,
) -> str:
    """
    Publish a single event to EventBridge.

    Args:
        event: Event model to publish
        source: Override event source (default: <prefix>.lambdas.schedule_calls)
        detail_type: Override detail-type (default: from event class)

    Returns:
        EventBridge event ID

    Raises:
        EventPublishError: If publication fails
    """
    client = _get_client()
    entry = _entry(event, source or _default_source(), detail_type)
    event_detail_type = entry["DetailType"]

    log.info(
        "publishing_event",
        detail_type=event_detail_type,
        group_id=event.group_id,
        source=entry["Source"],
    )

    try:
        response = client.put_events(Entries=[entry])
    except ClientError as e:
        log.error("eventbridge_put_failed", detail_type=event_detail_type, error=str(e))
        raise EventPublishError(
            event_type=event_detail_type,
            error_code=e.response["Error"]["Code"],
            error_message=e.response["Error"]["Message"],
        ) from e

    if response.get("FailedEntryCount", 0) > 0:
        failed = response["Entries"][0]
        log.error(
            "eventbridge_entry_failed",
            detail_type=event_detail_type,
            error_code=failed.get("ErrorCode"),
            error_message=failed.get("ErrorMessage"),
        )
        raise EventPublishError(
            event_type=event_detail_type,
            error_code=failed.get("ErrorCode"),
            error_message=failed.get("ErrorMessage"),
        )

    event_id = response["Entries"][0]["EventId"]
    log.info(
        "event_published",
        detail_type=event_detail_type,
        event_id=event_id,
        group_id=event.group_id,
    )
    return event_id


def send_events_batch(
    events: list[BaseEvent],
    *,
    source: str | None = None,
) -> list[str]:
    """
    Publish multiple events to EventBridge, BATCH_SIZE per request.

    Every batch is attempted even if an earlier entry fails; the first
    failure is raised once all batches have been sent.

    Args:
        events: Events to publish
        source: Override event source for all events

    Returns:
        EventBridge event IDs, in input order

    Raises:
        EventPublishError: If a request fails or any entry is rejected
    """
    if not events:
        return []

    client = _get_client()
    event_source = source or _default_source()
    entries = [_entry(event, event_source) for event in events]

    log.info("publishing_event_batch", count=len(entries), source=event_source)

    event_ids: list[str] = []
    failures: list[dict] = []

    for i in range(0, len(entries), BATCH_SIZE):
        batch = entries[i : i + BATCH_SIZE]
        batch_number = i // BATCH_SIZE + 1

        log.debug("publishing_batch", batch_number=batch_number, batch_size=len(batch))

        try:
            response = client.put_events(Entries=batch)
        except ClientError as e:
            log.error("eventbridge_batch_failed", batch_number=batch_number, error=str(e))
            raise EventPublishError(
                event_type="batch",
                error_code=e.response["Error"]["Code"],
                error_message=e.response["Error"]["Message"],
            ) from e

        for j, result in enumerate(response["Entries"]):
            if "EventId" in result:
                event_ids.append(result["EventId"])
            else:
                failures.append({
                    "index": i + j,
                    "error_code": result.get("ErrorCode"),
                    "error_message": result.get("ErrorMessage"),
                })

    if failures:
        log.error(
            "some_events_failed",
            failed_count=len(failures),
            total_count=len(entries),
            failures=failures,
        )
        first = failures[0]
        raise EventPublishError(
            event_type=f"batch[{first['index']}]",
            error_code=first["error_code"],
            error_message=first["error_message"],
        )

    log.info("batch_published", count=len(event_ids))
    return event_ids
