"""
Call History

Derives the last call time from a group's roll-call map. Keys that do not
parse as ISO-8601 timestamps are skipped: corrupted history must never
block future scheduling.
"""

from datetime import datetime, timezone
from typing import Mapping

import structlog

log = structlog.get_logger()


def ensure_utc(value: datetime) -> datetime:
    """Read naive datetimes as UTC and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_call_time(value: str) -> datetime | None:
    """
    Parse a roll-call key.

    Args:
        value: ISO-8601 timestamp, optionally with a trailing 'Z'

    Returns:
        Aware UTC datetime, or None when the key is malformed
    """
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def last_call_time(roll_call: Mapping[str, object] | None) -> datetime | None:
    """
    Get the most recent call time recorded in a roll call.

    Args:
        roll_call: Mapping of ISO timestamp -> attendees

    Returns:
        Latest parsable timestamp, or None if empty or nothing parses
    """
    if not roll_call:
        return None

    latest: datetime | None = None
    for key in roll_call:
        parsed = parse_call_time(key)
        if parsed is None:
            log.debug("malformed_history_entry_skipped", key=key)
            continue
        if latest is None or parsed > latest:
            latest = parsed

    return latest
