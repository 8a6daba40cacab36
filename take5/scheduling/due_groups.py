"""
Due Group Filter

Selects the groups whose next call time has arrived.

A group with an unsupported cadence is skipped with a warning so one bad
record never blocks scheduling for the rest of the batch.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

import structlog

from take5.shared.exceptions import UnsupportedCadenceError
from take5.shared.models.group import Group
from take5.scheduling.calculator import WindowAnchor, next_call_time
from take5.scheduling.call_history import ensure_utc
from take5.scheduling.slot_selector import SlotSelector

log = structlog.get_logger()


@dataclass(frozen=True)
class SkippedGroup:
    """A group excluded from the batch because it could not be evaluated."""

    group_id: str
    reason: str


@dataclass
class DueGroupsResult:
    """Outcome of evaluating a batch of groups."""

    due: list[Group] = field(default_factory=list)
    next_call_times: dict[str, datetime] = field(default_factory=dict)
    skipped: list[SkippedGroup] = field(default_factory=list)
    evaluated: int = 0
    disabled: int = 0

    @property
    def count(self) -> int:
        """Number of due groups."""
        return len(self.due)


def is_group_due(
    group: Group,
    now: datetime | None = None,
    *,
    selector: SlotSelector | None = None,
    anchor: WindowAnchor = WindowAnchor.HISTORY_BOUNDARY,
) -> bool:
    """
    Check if a single group is due for a call.

    Raises:
        UnsupportedCadenceError: If the group's cadence is unknown
    """
    if not group.enabled:
        return False
    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    return next_call_time(group, now, selector=selector, anchor=anchor) <= now


def find_due_groups(
    groups: Iterable[Group],
    now: datetime | None = None,
    *,
    selector: SlotSelector | None = None,
    anchor: WindowAnchor = WindowAnchor.HISTORY_BOUNDARY,
) -> DueGroupsResult:
    """
    Evaluate every enabled group against the current time.

    Args:
        groups: Group snapshots, in the order results should keep
        now: Current time (defaults to wall clock)
        selector: Slot selector shared across the batch (default: fresh)
        anchor: Weekly/monthly window policy

    Returns:
        DueGroupsResult with due groups in input order and skipped groups
    """
    now = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    selector = selector or SlotSelector()
    result = DueGroupsResult()

    for group in groups:
        if not group.enabled:
            result.disabled += 1
            continue

        result.evaluated += 1
        try:
            call_time = next_call_time(group, now, selector=selector, anchor=anchor)
        except UnsupportedCadenceError as e:
            log.warning(
                "group_skipped_unsupported_cadence",
                group_id=group.id,
                cadence=group.cadence,
            )
            result.skipped.append(SkippedGroup(group_id=group.id, reason=str(e)))
            continue

        if call_time <= now:
            result.due.append(group)
            result.next_call_times[group.id] = call_time

    log.info(
        "due_groups_evaluated",
        evaluated=result.evaluated,
        disabled=result.disabled,
        due=result.count,
        skipped=len(result.skipped),
    )

    return result


def groups_due(
    groups: Iterable[Group],
    now: datetime | None = None,
    *,
    selector: SlotSelector | None = None,
    anchor: WindowAnchor = WindowAnchor.HISTORY_BOUNDARY,
) -> list[Group]:
    """Get the enabled groups whose next call time is at or before now."""
    return find_due_groups(groups, now, selector=selector, anchor=anchor).due
