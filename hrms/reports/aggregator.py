"""Pure folds from evaluated employee-days into report rows.

Nothing here touches the database or the policy file: every function works
on ``EmployeeDay`` values produced by an ``AttendanceSnapshot``.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from hrms.attendance.calendar import WorkingCalendar
from hrms.attendance.classifier import minutes_of_day
from hrms.common.constants import (
    DEFAULT_SHORT_LEAVE_QUOTA,
    MINUTES_PER_DAY,
    STATUS_CODES,
    WEEKDAY_NAMES,
    AttendanceAnomaly,
    DailyStatus,
)
from hrms.policy.schemas import GroupPolicy
from hrms.reports.schemas import (
    AttendanceSummaryDay,
    DailyAttendanceRow,
    DailyOvertimeRow,
    HalfDayRow,
    LateArrivalRow,
    MonthlyAttendanceRow,
    MonthlyDayCell,
    MonthlyTotals,
    OfferAttendanceRow,
    ShortLeaveUsageRow,
    WeeklyBreakdown,
)
from hrms.reports.snapshot import EmployeeDay, EmployeeRef

SATURDAY = 5


def _columns(employee: EmployeeRef) -> dict[str, Any]:
    return {
        "employee_id": employee.employee_code,
        "full_name": employee.full_name,
        "employee_group": employee.employee_group,
    }


# ── Daily ───────────────────────────────────────────────────────────

def _daily_fields(day: EmployeeDay) -> dict[str, Any]:
    c, ot = day.classification, day.overtime
    return {
        **_columns(day.employee),
        "date": day.day,
        "in_time": c.in_time,
        "out_time": c.out_time,
        "total_hours": c.worked_hours,
        "is_late": c.is_late,
        "is_half_day": c.is_half_day,
        "on_short_leave": c.on_short_leave,
        "is_absent": c.is_absent,
        "status": c.status,
        "late_minutes": c.late_minutes,
        "actual_hours": ot.actual_hours,
        "required_hours": ot.required_hours,
        "ot_hours": ot.calculated,
        "ot_approval_status": ot.approval_status,
        "anomaly": c.anomaly,
    }


def daily_row(day: EmployeeDay) -> DailyAttendanceRow:
    return DailyAttendanceRow(**_daily_fields(day))


def has_overtime_activity(day: EmployeeDay) -> bool:
    return day.overtime.calculated > 0 or day.overtime.override is not None


def daily_overtime_row(day: EmployeeDay) -> DailyOvertimeRow:
    override = day.overtime.override
    return DailyOvertimeRow(
        **_daily_fields(day),
        override_hours=override.value if override else None,
        effective_ot_hours=day.overtime.effective_hours,
    )


# ── Monthly ─────────────────────────────────────────────────────────

def monthly_row(
    employee: EmployeeRef,
    days: Iterable[EmployeeDay],
) -> MonthlyAttendanceRow:
    """Fold a range of days into per-date cells plus totals.

    ``total.workedHours`` is the unrounded sum of the cells' worked hours;
    ``total.overtime`` prefers an approved request over the calculation.
    """
    cells: dict[str, MonthlyDayCell] = {}
    totals = MonthlyTotals()
    counts: Counter[DailyStatus] = Counter()

    for day in days:
        c = day.classification
        overtime = day.overtime.effective_hours
        cells[day.day.isoformat()] = MonthlyDayCell(
            in_time=c.in_time,
            out_time=c.out_time,
            worked_hours=c.worked_hours,
            status=c.status,
            code=STATUS_CODES[c.status],
            overtime=overtime,
            leave=day.leave_type,
        )
        totals.worked_hours += c.worked_hours or 0.0
        totals.overtime += overtime
        counts[c.status] += 1

    totals.present_days = counts[DailyStatus.present]
    totals.late_days = counts[DailyStatus.late]
    totals.half_days = counts[DailyStatus.half_day]
    totals.short_leave_days = counts[DailyStatus.short_leave]
    totals.absent_days = counts[DailyStatus.absent]
    totals.leave_days = counts[DailyStatus.on_leave]
    totals.holidays = counts[DailyStatus.holiday]

    return MonthlyAttendanceRow(**_columns(employee), daily_data=cells, total=totals)


# ── Late arrival / half day ─────────────────────────────────────────

def late_arrival_rows(days: Iterable[EmployeeDay]) -> list[LateArrivalRow]:
    rows = []
    for day in days:
        c = day.classification
        if not c.is_late:
            continue
        late = day.policy.late_arrival_policy if day.policy else None
        rows.append(
            LateArrivalRow(
                **_columns(day.employee),
                date=day.day,
                check_in_time=c.in_time,
                status=c.status,
                minutes_late=c.late_minutes,
                grace_period_until=late.grace_period_until if late else None,
                half_day_after=late.half_day_after if late else None,
            )
        )
    return rows


def half_day_rows(days: Iterable[EmployeeDay]) -> list[HalfDayRow]:
    rows = []
    for day in days:
        c = day.classification
        if c.status is not DailyStatus.half_day:
            continue
        late = day.policy.late_arrival_policy if day.policy else None
        after = late.half_day_after if late else None
        rows.append(
            HalfDayRow(
                **_columns(day.employee),
                date=day.day,
                check_in_time=c.in_time,
                check_out_time=c.out_time,
                worked_hours=c.worked_hours,
                reason=f"Late arrival after {after:%H:%M}" if after else "Late arrival",
                half_day_after=after,
                half_day_before=late.half_day_before if late else None,
            )
        )
    return rows


# ── Short leave usage ───────────────────────────────────────────────

def short_leave_usage_row(
    employee: EmployeeRef,
    days: Sequence[EmployeeDay],
    policy: Optional[GroupPolicy],
    month: str,
) -> ShortLeaveUsageRow:
    short = policy.short_leave_policy if policy else None
    allowed = (
        short.max_per_month
        if short is not None and short.max_per_month is not None
        else DEFAULT_SHORT_LEAVE_QUOTA
    )
    used_on = [d.day for d in days if d.classification.on_short_leave]
    used = len(used_on)
    return ShortLeaveUsageRow(
        **_columns(employee),
        month=month,
        short_leaves_used=used,
        max_allowed=allowed,
        remaining=max(0, allowed - used),
        usage_percentage=round(used / allowed * 100) if allowed else 0,
        exceeds_quota=used > allowed,
        last_used=max(used_on) if used_on else None,
        morning_start=short.morning_start if short else None,
        morning_end=short.morning_end if short else None,
        evening_start=short.evening_start if short else None,
        evening_end=short.evening_end if short else None,
        pre_approval_required=short.pre_approval_required if short else None,
    )


# ── Offer attendance ────────────────────────────────────────────────

def offer_hours(day: EmployeeDay) -> float:
    """Hours worked past the group's end time.

    On Saturdays and non-working days every worked hour counts.
    """
    c = day.classification
    if c.worked_hours is None or c.anomaly is AttendanceAnomaly.checkout_before_checkin:
        return 0.0

    offer = 0.0
    end = day.thresholds.end
    if end is not None and c.out_time is not None:
        out = (
            MINUTES_PER_DAY
            if c.anomaly is AttendanceAnomaly.spans_midnight
            else minutes_of_day(c.out_time)
        )
        offer = max(0, out - end) / 60

    if day.day.weekday() == SATURDAY or day.is_non_working_day:
        offer = max(offer, c.worked_hours)
    return offer


def offer_attendance_row(
    employee: EmployeeRef,
    days: Iterable[EmployeeDay],
) -> OfferAttendanceRow:
    row = OfferAttendanceRow(**_columns(employee))
    weekly = WeeklyBreakdown()

    for day in days:
        if day.classification.status is DailyStatus.on_leave:
            continue
        hours = offer_hours(day)
        if day.day.weekday() == SATURDAY:
            row.saturday_hours += hours
        elif day.is_non_working_day:
            row.holiday_hours += hours
        if hours > 0:
            row.total_offer_hours += hours
            row.working_days += 1
            name = WEEKDAY_NAMES[day.day.weekday()]
            setattr(weekly, name, getattr(weekly, name) + hours)

    row.weekly_breakdown = weekly
    row.average_offer_hours_per_day = row.total_offer_hours / max(row.working_days, 1)
    return row


# ── Attendance summary ──────────────────────────────────────────────

def attendance_summary(
    dates: Sequence[date],
    days: Iterable[EmployeeDay],
    calendar: WorkingCalendar,
) -> list[AttendanceSummaryDay]:
    by_date = {
        d: AttendanceSummaryDay(date=d, is_holiday=calendar.is_non_working_day(d))
        for d in dates
    }
    field_for = {
        DailyStatus.present: "present",
        DailyStatus.late: "late",
        DailyStatus.half_day: "half_day",
        DailyStatus.short_leave: "short_leave",
        DailyStatus.absent: "absent",
        DailyStatus.on_leave: "on_leave",
    }
    for day in days:
        summary = by_date.get(day.day)
        if summary is None:
            continue
        summary.total_employees += 1
        name = field_for.get(day.classification.status)
        if name is not None:
            setattr(summary, name, getattr(summary, name) + 1)
    return [by_date[d] for d in dates]
