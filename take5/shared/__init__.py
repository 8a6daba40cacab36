# Shared Infrastructure for Take5
"""
Shared infrastructure components for the call scheduler.

This package provides:
- Cadence definitions and per-cadence policy tables
- Pydantic models for group snapshots and events
- Tool implementations for DynamoDB and EventBridge
- Configuration management
- Custom exceptions
"""

from take5.shared.cadence import (
    ACCEPTABLE_CALL_HOURS,
    MONTHLY_BUSINESS_HOURS,
    STANDARD_BUSINESS_HOURS,
    Cadence,
    CadencePolicy,
)
from take5.shared.exceptions import (
    DynamoDBError,
    EventPublishError,
    GroupNotFoundError,
    InvalidFrequencyError,
    RollCallConflictError,
    Take5Error,
    UnsupportedCadenceError,
)
from take5.shared.config import Settings, get_settings

__all__ = [
    # Cadence
    "Cadence",
    "CadencePolicy",
    "STANDARD_BUSINESS_HOURS",
    "MONTHLY_BUSINESS_HOURS",
    "ACCEPTABLE_CALL_HOURS",
    # Exceptions
    "Take5Error",
    "UnsupportedCadenceError",
    "InvalidFrequencyError",
    "GroupNotFoundError",
    "DynamoDBError",
    "RollCallConflictError",
    "EventPublishError",
    # Config
    "Settings",
    "get_settings",
]
