"""
ScheduleCalls Lambda Handler

Entry points for the scheduled call-planning Lambda.

Trigger: EventBridge Scheduled Rule (e.g., rate(15 minutes))
Output: EventBridge CallDue events

Flow:
1. Parse scheduled event (optional current_time override and dry_run flag)
2. Load every group snapshot through GSI1
3. Compute each enabled group's next call time and keep the due ones
4. Build a CallDue event per due group (frequency and business-hours checks)
5. Publish events in batches (skipped on dry run)
6. Return a summary of the run

Admin entry points:
- generate_group_schedule: preview the next N calls of one group
- validate_all_groups: data integrity report over every group
"""

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import structlog

from take5.scheduling import (
    SlotSelector,
    WindowAnchor,
    find_due_groups,
    generate_schedule,
    is_call_time_acceptable,
    is_valid_frequency,
    last_call_time,
    next_call_time,
)
from take5.scheduling.call_history import parse_call_time
from take5.shared.cadence import (
    FREQUENCY_RULES,
    MAX_CALLS_PER_DAY,
    Cadence,
    business_hours_window,
)
from take5.shared.config import Settings, get_settings
from take5.shared.exceptions import (
    GroupNotFoundError,
    InvalidFrequencyError,
    UnsupportedCadenceError,
)
from take5.shared.models.events import CallDueEvent, ScheduledUser
from take5.shared.models.group import Group
from take5.shared.tools.dynamodb import list_groups, load_group
from take5.shared.tools.eventbridge import send_events_batch

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)
logging.basicConfig(format="%(message)s", level=get_settings().log_level)

log = structlog.get_logger()


@dataclass
class ScheduleResult:
    """Summary of one scheduling run."""

    groups_loaded: int = 0
    groups_evaluated: int = 0
    groups_disabled: int = 0
    groups_due: int = 0
    events_published: int = 0
    schedule: list[dict[str, Any]] = field(default_factory=list)
    skipped_groups: list[dict[str, str]] = field(default_factory=list)
    summary: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    failed: bool = False
    duration_ms: float = 0.0

    @property
    def succeeded(self) -> bool:
        """Whether the run completed without a critical error."""
        return not self.failed


def _event_params(event: dict[str, Any] | None) -> dict[str, Any]:
    """
    Merge top-level invocation parameters with the EventBridge detail.

    Scheduled rules and direct invocations carry parameters in different
    places; detail values win when both are present.
    """
    params: dict[str, Any] = {}
    if not isinstance(event, dict):
        return params

    params.update({k: v for k, v in event.items() if k != "detail"})

    detail = event.get("detail", {})
    if isinstance(detail, str):
        try:
            detail = json.loads(detail)
        except json.JSONDecodeError:
            log.warning("event_detail_not_json")
            detail = {}

    if isinstance(detail, dict):
        params.update(detail)

    return params


def _param(params: dict[str, Any], name: str, camel_name: str, default: Any = None) -> Any:
    if name in params:
        return params[name]
    return params.get(camel_name, default)


def _resolve_now(params: dict[str, Any]) -> datetime:
    """Current time, or the current_time override when it parses."""
    raw = _param(params, "current_time", "currentTime")
    if raw:
        parsed = parse_call_time(raw)
        if parsed is not None:
            return parsed
        log.warning("current_time_override_invalid", current_time=raw)
    return datetime.now(timezone.utc)


def _build_selector(settings: Settings) -> SlotSelector:
    return SlotSelector(seed=settings.random_seed)


def _response(status_code: int, body: dict[str, Any]) -> dict[str, Any]:
    return {"statusCode": status_code, "body": body}


def _error_response(status_code: int, error: str, message: str) -> dict[str, Any]:
    return _response(status_code, {"error": error, "message": message})


def _build_call_due_event(group: Group, call_time: datetime) -> CallDueEvent:
    """
    Build the CallDue event for a due group.

    Invalid frequencies are reported on the event and logged, never dropped.
    """
    valid = is_valid_frequency(group.cadence, group.frequency)
    if not valid:
        log.warning(
            "group_frequency_invalid",
            group_id=group.id,
            group_name=group.name,
            cadence=group.cadence,
            frequency=group.frequency,
        )

    return CallDueEvent(
        group_id=group.id,
        group_name=group.name,
        next_call_time=call_time,
        cadence=group.cadence,
        frequency=group.frequency,
        is_valid_frequency=valid,
        business_hours_ok=is_call_time_acceptable(call_time),
        last_call_time=last_call_time(group.roll_call),
        duration_minutes=group.duration_minutes,
        users=[ScheduledUser.from_member(member) for member in group.users],
    )


def _summarize(events: list[CallDueEvent]) -> dict[str, int]:
    """Per-cadence counts and total users across due groups."""
    summary = {f"{cadence.value}_groups": 0 for cadence in Cadence}
    for event in events:
        key = f"{event.cadence}_groups"
        if key in summary:
            summary[key] += 1
    summary["total_users"] = sum(len(event.users) for event in events)
    return summary


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Main Lambda handler for scheduled call planning.

    Args:
        event: EventBridge scheduled event
        context: Lambda context

    Returns:
        Processing result summary
    """
    start_time = time.time()
    settings = get_settings()
    params = _event_params(event)
    now = _resolve_now(params)
    dry_run = str(_param(params, "dry_run", "dryRun", False)).lower() == "true"

    log.info(
        "call_scheduling_started",
        current_time=now.isoformat(),
        dry_run=dry_run,
        window_anchor=settings.window_anchor,
    )

    result = ScheduleResult()

    try:
        groups = list_groups()
        result.groups_loaded = len(groups)

        due = find_due_groups(
            groups,
            now,
            selector=_build_selector(settings),
            anchor=WindowAnchor(settings.window_anchor),
        )
        result.groups_evaluated = due.evaluated
        result.groups_disabled = due.disabled
        result.groups_due = due.count
        result.skipped_groups = [
            {"group_id": skipped.group_id, "reason": skipped.reason}
            for skipped in due.skipped
        ]

        events = [
            _build_call_due_event(group, due.next_call_times[group.id])
            for group in due.due
        ]
        result.schedule = [event.to_eventbridge_detail() for event in events]
        result.summary = _summarize(events)

        for event_detail in result.schedule:
            log.info(
                "group_call_scheduled",
                group_id=event_detail["group_id"],
                next_call_time=event_detail["next_call_time"],
                cadence=event_detail["cadence"],
                users=len(event_detail["users"]),
                business_hours_ok=event_detail["business_hours_ok"],
                is_valid_frequency=event_detail["is_valid_frequency"],
            )

        if dry_run:
            log.info("dry_run_mode", events_would_publish=len(events))
        else:
            result.events_published = len(send_events_batch(events))

    except Exception as e:
        log.exception("call_scheduling_failed", error=str(e))
        result.errors.append(f"Critical error: {e}")
        result.failed = True

    result.duration_ms = (time.time() - start_time) * 1000

    log.info(
        "call_scheduling_completed",
        groups_loaded=result.groups_loaded,
        groups_due=result.groups_due,
        events_published=result.events_published,
        skipped=len(result.skipped_groups),
        errors=len(result.errors),
        duration_ms=result.duration_ms,
    )

    return _response(
        200 if result.succeeded else 500,
        {
            "message": "Call scheduling complete",
            "timestamp": now.isoformat(),
            "dry_run": dry_run,
            "groups_loaded": result.groups_loaded,
            "groups_evaluated": result.groups_evaluated,
            "groups_disabled": result.groups_disabled,
            "groups_due": result.groups_due,
            "events_published": result.events_published,
            "schedule": result.schedule,
            "skipped_groups": result.skipped_groups,
            "summary": result.summary,
            "errors": result.errors if result.errors else None,
            "duration_ms": round(result.duration_ms, 2),
        },
    )


def _parse_number_of_calls(raw: Any, settings: Settings) -> int:
    """
    Validate the requested preview length.

    Raises:
        ValueError: If the value is not a positive integer
    """
    if raw is None:
        return settings.default_schedule_length
    if isinstance(raw, bool):
        raise ValueError(f"number_of_calls must be a positive integer, got {raw!r}")
    try:
        count = int(raw)
    except (TypeError, ValueError) as e:
        raise ValueError(f"number_of_calls must be a positive integer, got {raw!r}") from e
    if count < 1:
        raise ValueError(f"number_of_calls must be a positive integer, got {raw!r}")
    return min(count, settings.max_schedule_length)


def generate_group_schedule(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Preview the upcoming calls of one group.

    Parameters (top level or detail):
        group_id: Group to project (required)
        number_of_calls: Calls to project (default from settings, capped)
        current_time: Projection start (default: now)

    Returns:
        200 with the ISO schedule, 400 on bad input, 404 for an unknown
        group, 422 for an invalid frequency, 500 on infrastructure failure
    """
    settings = get_settings()
    params = _event_params(event)

    group_id = _param(params, "group_id", "groupId")
    if not group_id:
        return _error_response(400, "Bad request", "group_id is required")
    group_id = str(group_id)

    try:
        count = _parse_number_of_calls(
            _param(params, "number_of_calls", "numberOfCalls"), settings
        )
    except ValueError as e:
        return _error_response(400, "Bad request", str(e))

    now = _resolve_now(params)
    log.info("schedule_preview_requested", group_id=group_id, number_of_calls=count)

    try:
        group = load_group(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)

        if not is_valid_frequency(group.cadence, group.frequency):
            raise InvalidFrequencyError(group.cadence, group.frequency, group_id=group.id)

        anchor = WindowAnchor(settings.window_anchor)
        schedule = generate_schedule(
            group,
            count,
            now,
            selector=_build_selector(settings),
            anchor=anchor,
        )
    except GroupNotFoundError as e:
        log.info("schedule_preview_group_not_found", group_id=group_id)
        return _error_response(404, "Not found", e.message)
    except InvalidFrequencyError as e:
        log.warning(
            "schedule_preview_invalid_frequency",
            group_id=group_id,
            cadence=e.cadence,
            frequency=e.frequency,
        )
        return _error_response(422, "Invalid frequency", e.message)
    except Exception as e:
        log.exception("schedule_preview_failed", group_id=group_id, error=str(e))
        return _error_response(500, "Internal server error", str(e))

    start_hour, end_hour = business_hours_window(group.cadence)

    return _response(
        200,
        {
            "group_id": group.id,
            "group_name": group.name,
            "schedule": [call_time.isoformat() for call_time in schedule],
            "scheduling_info": {
                "cadence": group.cadence,
                "frequency": group.frequency,
                "max_calls_per_day": MAX_CALLS_PER_DAY,
                "business_hours": {"start_hour": start_hour, "end_hour": end_hour},
                "window_anchor": anchor.value,
                "randomization": "Random time within business hours, random days for weekly/monthly",
            },
            "validation": {
                "is_valid_frequency": True,
                "frequency_rules": {
                    cadence.value: rule for cadence, rule in FREQUENCY_RULES.items()
                },
            },
        },
    )


def _validate_group(
    group: Group,
    now: datetime,
    selector: SlotSelector,
    anchor: WindowAnchor,
) -> dict[str, Any]:
    """Build the integrity report for one group."""
    report: dict[str, Any] = {
        "group_id": group.id,
        "group_name": group.name,
        "cadence": group.cadence,
        "frequency": group.frequency,
        "enabled": group.enabled,
        "is_valid_frequency": is_valid_frequency(group.cadence, group.frequency),
        "next_call_time": None,
        "business_hours_ok": None,
        "issues": [],
    }

    try:
        call_time = next_call_time(group, now, selector=selector, anchor=anchor)
    except UnsupportedCadenceError:
        report["issues"].append(f"Unsupported cadence {group.cadence!r}")
        return report

    report["next_call_time"] = call_time.isoformat()
    report["business_hours_ok"] = is_call_time_acceptable(call_time)

    if not report["is_valid_frequency"]:
        report["issues"].append(
            f"Invalid frequency {group.frequency} for cadence {group.cadence}"
        )
    if not report["business_hours_ok"]:
        report["issues"].append("Next call time is outside business hours")

    return report


def validate_all_groups(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """
    Report configuration issues across every stored group.

    A bad group becomes a list of issues in the report; only failing to
    load the groups turns into a 500.
    """
    settings = get_settings()
    params = _event_params(event)
    now = _resolve_now(params)

    try:
        groups = list_groups()
    except Exception as e:
        log.exception("group_validation_failed", error=str(e))
        return _error_response(500, "Internal server error", str(e))

    selector = _build_selector(settings)
    anchor = WindowAnchor(settings.window_anchor)
    reports = [_validate_group(group, now, selector, anchor) for group in groups]

    summary = {
        "total_groups": len(reports),
        "valid_groups": sum(1 for r in reports if not r["issues"]),
        "invalid_groups": sum(1 for r in reports if r["issues"]),
        "total_issues": sum(len(r["issues"]) for r in reports),
    }

    log.info("group_validation_completed", **summary)

    return _response(200, {"validation_results": reports, "summary": summary})
