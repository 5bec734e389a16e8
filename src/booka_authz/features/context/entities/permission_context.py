"""Per-call permission context.

A PermissionContext is built for one decision and discarded afterwards. It is
never cached and never stored in ambient (global or task-local) state.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ....config.constants import OperationType


@dataclass(frozen=True)
class TimeRestriction:
    """Daily access window.

    The window is half-open ``[start_hour, end_hour)`` in ``timezone`` and
    wraps past midnight when ``start_hour > end_hour`` (e.g. 22 to 6).
    ``allowed_days`` holds ISO weekday numbers (Monday=1 .. Sunday=7);
    None allows every day.
    """
    start_hour: int = 0
    end_hour: int = 24
    allowed_days: Optional[Tuple[int, ...]] = None
    timezone: str = "UTC"

    def __post_init__(self):
        if not (0 <= self.start_hour <= 23):
            raise ValueError(f"start_hour must be within 0..23, got {self.start_hour}")
        if not (1 <= self.end_hour <= 24):
            raise ValueError(f"end_hour must be within 1..24, got {self.end_hour}")
        if self.start_hour == self.end_hour:
            raise ValueError("Time window cannot be empty")
        if self.allowed_days is not None:
            days = tuple(sorted(set(self.allowed_days)))
            if any(d < 1 or d > 7 for d in days):
                raise ValueError(f"allowed_days must be ISO weekdays 1..7, got {days}")
            object.__setattr__(self, "allowed_days", days)
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone}") from e

    def contains(self, moment: datetime) -> bool:
        """Whether ``moment`` falls inside the window; naive datetimes are taken as UTC."""
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=timezone.utc)
        local = moment.astimezone(ZoneInfo(self.timezone))

        if self.allowed_days is not None and local.isoweekday() not in self.allowed_days:
            return False

        hour = local.hour
        if self.start_hour < self.end_hour:
            return self.start_hour <= hour < self.end_hour
        return hour >= self.start_hour or hour < self.end_hour


@dataclass(frozen=True)
class PermissionContext:
    """Facts about one access attempt.

    ``user_id`` and ``tenant_id`` come from the authenticated identity. The
    remaining fields describe the target of the operation and any server-side
    policy (time window, IP allow-list) that narrows it.
    """
    user_id: str
    tenant_id: Optional[str] = None
    target_tenant_id: Optional[str] = None
    target_user_id: Optional[str] = None
    resource_id: Optional[str] = None
    resource_owner_id: Optional[str] = None
    ip_address: Optional[str] = None
    allowed_ips: Optional[Tuple[str, ...]] = None
    time_restriction: Optional[TimeRestriction] = None
    operation_type: Optional[OperationType] = None
    resource_type: Optional[str] = None
    request_id: Optional[str] = None

    def __post_init__(self):
        if self.allowed_ips is not None and not isinstance(self.allowed_ips, tuple):
            object.__setattr__(self, "allowed_ips", tuple(self.allowed_ips))
        if self.operation_type is not None and not isinstance(self.operation_type, OperationType):
            object.__setattr__(self, "operation_type", OperationType(self.operation_type))

    def with_changes(self, **changes: Any) -> "PermissionContext":
        """Copy of this context with some fields replaced."""
        return replace(self, **changes)
