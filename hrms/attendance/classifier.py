"""Per employee-day attendance classification.

``classify_day`` is a pure function: given one check-in / check-out pair and
the employee's group policy it assigns exactly one ``DailyStatus``. The
precedence is fixed::

    Holiday > On Leave > Absent > Half Day > Late > Short Leave > Present

All clock comparisons are minute-of-day integers in local time.
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel

from hrms.common.constants import AttendanceAnomaly, DailyStatus
from hrms.common.exceptions import AnomalyWarning
from hrms.config import settings
from hrms.policy.schemas import GroupPolicy, PolicyThresholds

logger = logging.getLogger(__name__)


def to_local(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an aware timestamp to naive local time; naive values pass through."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(ZoneInfo(settings.TIMEZONE)).replace(tzinfo=None)


def minutes_of_day(value: datetime | time) -> int:
    return value.hour * 60 + value.minute


class DayClassification(BaseModel):
    """Outcome of classifying one employee-day."""

    status: DailyStatus
    is_late: bool = False
    is_half_day: bool = False
    on_short_leave: bool = False
    is_absent: bool = False
    late_minutes: int = 0
    worked_hours: Optional[float] = None
    anomaly: Optional[AttendanceAnomaly] = None
    in_time: Optional[time] = None
    out_time: Optional[time] = None


def measure_worked_hours(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
) -> tuple[Optional[float], Optional[AttendanceAnomaly]]:
    """Hours between *check_in* and *check_out*, with any data anomaly.

    A pair that crosses midnight is attributed to the check-in day and
    clipped at 24:00.
    """
    if check_in is None or check_out is None:
        return None, None

    if check_out < check_in:
        logger.warning(
            "%s: check-out %s precedes check-in %s; counting 0 hours",
            AnomalyWarning.__name__, check_out.isoformat(), check_in.isoformat(),
        )
        return 0.0, AttendanceAnomaly.checkout_before_checkin

    if check_out.date() > check_in.date():
        midnight = datetime.combine(check_in.date() + timedelta(days=1), time.min)
        logger.warning(
            "%s: attendance %s -> %s spans midnight; clipped to %s",
            AnomalyWarning.__name__,
            check_in.isoformat(), check_out.isoformat(), midnight.isoformat(),
        )
        return (midnight - check_in).total_seconds() / 3600, AttendanceAnomaly.spans_midnight

    return (check_out - check_in).total_seconds() / 3600, None


def classify_day(
    check_in: Optional[datetime],
    check_out: Optional[datetime],
    policy: Optional[GroupPolicy],
    *,
    on_approved_leave: bool = False,
    is_holiday: bool = False,
) -> DayClassification:
    """Assign a single status to one employee-day.

    Missing policy fields fall back as follows: no grace period means
    lateness counts from ``startTime`` (or never, when that is missing too),
    the half-day window is ignored when either bound is missing, and the
    full-day length defaults to 8 hours.
    """
    check_in, check_out = to_local(check_in), to_local(check_out)

    if is_holiday:
        worked, anomaly = measure_worked_hours(check_in, check_out)
        return DayClassification(
            status=DailyStatus.holiday,
            worked_hours=worked,
            anomaly=anomaly,
            in_time=check_in.time() if check_in else None,
            out_time=check_out.time() if check_out else None,
        )

    if on_approved_leave:
        return DayClassification(status=DailyStatus.on_leave)

    if check_in is None:
        return DayClassification(status=DailyStatus.absent, is_absent=True)

    limits = policy.thresholds() if policy is not None else PolicyThresholds()
    arrival = minutes_of_day(check_in)

    late_minutes = 0
    if limits.grace_until is not None:
        late_minutes = max(0, arrival - limits.grace_until)
    is_late = late_minutes > 0

    is_half_day = (
        limits.half_day_after is not None
        and limits.half_day_before is not None
        and limits.half_day_after < arrival < limits.half_day_before
    )

    worked, anomaly = measure_worked_hours(check_in, check_out)

    if is_half_day:
        status = DailyStatus.half_day
    elif is_late:
        status = DailyStatus.late
    else:
        status = DailyStatus.present

    on_short_leave = (
        status is DailyStatus.present
        and worked is not None
        and limits.full_day_hours / 2 < worked < limits.full_day_hours
    )
    if on_short_leave:
        status = DailyStatus.short_leave

    return DayClassification(
        status=status,
        is_late=is_late,
        is_half_day=is_half_day,
        on_short_leave=on_short_leave,
        late_minutes=late_minutes,
        worked_hours=worked,
        anomaly=anomaly,
        in_time=check_in.time(),
        out_time=check_out.time() if check_out else None,
    )
