"""Report service — loads one snapshot per request and folds it into rows.

All methods are static async, following the project convention. The group
policy is re-read from the ``PolicyStore`` for every report.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import GroupFilter
from hrms.common.exceptions import ValidationException
from hrms.config import settings
from hrms.core_hr.service import EmployeeService
from hrms.policy.store import PolicyStore
from hrms.reports import aggregator
from hrms.reports.schemas import (
    AttendanceSummaryDay,
    DailyAttendanceRow,
    DailyOvertimeRow,
    HalfDayRow,
    LateArrivalRow,
    MonthlyAttendanceRow,
    OfferAttendanceRow,
    ShortLeaveUsageRow,
)
from hrms.reports.snapshot import AttendanceSnapshot, EmployeeRef


def resolve_range(
    day: Optional[date],
    start: Optional[date],
    end: Optional[date],
) -> tuple[date, date]:
    """Turn ``date`` or ``startDate``/``endDate`` query params into a range."""
    if start is None and end is None:
        if day is None:
            raise ValidationException(
                {"date": ["Provide date, or startDate and endDate."]}
            )
        return day, day
    if start is None or end is None:
        missing = "startDate" if start is None else "endDate"
        raise ValidationException({missing: ["This field is required."]})
    if start > end:
        raise ValidationException({"startDate": ["startDate must not be after endDate."]})
    if (end - start).days + 1 > settings.MAX_REPORT_RANGE_DAYS:
        raise ValidationException(
            {"endDate": [f"Range may span at most {settings.MAX_REPORT_RANGE_DAYS} days."]}
        )
    return start, end


def _ref(employee) -> EmployeeRef:
    return EmployeeRef(
        employee_code=employee.employee_code,
        full_name=employee.full_name,
        employee_group=employee.employee_group,
    )


class ReportService:
    """Async report builders."""

    @staticmethod
    async def load_snapshot(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        *,
        group: GroupFilter = GroupFilter.all,
        employee_code: Optional[str] = None,
    ) -> AttendanceSnapshot:
        employees = await EmployeeService.list_in_scope(
            db, group=group, employee_code=employee_code,
        )
        return await AttendanceSnapshot.load(
            db,
            start=start,
            end=end,
            employees=employees,
            policy=store.get_group_working_hours(),
        )

    # ── Daily ───────────────────────────────────────────────────────

    @staticmethod
    async def get_daily_attendance(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[DailyAttendanceRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        return [
            aggregator.daily_row(snap.evaluate(employee, day))
            for day in snap.dates()
            for employee in snap.employees
        ]

    @staticmethod
    async def get_daily_overtime(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[DailyOvertimeRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        rows = []
        for day in snap.dates():
            for employee in snap.employees:
                evaluated = snap.evaluate(employee, day)
                if aggregator.has_overtime_activity(evaluated):
                    rows.append(aggregator.daily_overtime_row(evaluated))
        return rows

    # ── Monthly ─────────────────────────────────────────────────────

    @staticmethod
    async def get_monthly_attendance(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[MonthlyAttendanceRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        return [
            aggregator.monthly_row(_ref(employee), snap.days_for(employee))
            for employee in snap.employees
        ]

    # ── Exception reports ───────────────────────────────────────────

    @staticmethod
    async def get_late_arrivals(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[LateArrivalRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        rows: list[LateArrivalRow] = []
        for employee in snap.employees:
            rows.extend(aggregator.late_arrival_rows(snap.days_for(employee)))
        rows.sort(key=lambda r: r.date, reverse=True)
        return rows

    @staticmethod
    async def get_half_days(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[HalfDayRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        rows: list[HalfDayRow] = []
        for employee in snap.employees:
            rows.extend(aggregator.half_day_rows(snap.days_for(employee)))
        rows.sort(key=lambda r: r.date, reverse=True)
        return rows

    @staticmethod
    async def get_short_leave_usage(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[ShortLeaveUsageRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        month = start.strftime("%B %Y")
        return [
            aggregator.short_leave_usage_row(
                _ref(employee),
                snap.days_for(employee),
                snap.policy.for_group(employee.employee_group.value),
                month,
            )
            for employee in snap.employees
        ]

    # ── Offer attendance / summary ──────────────────────────────────

    @staticmethod
    async def get_offer_attendance(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[OfferAttendanceRow]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        return [
            aggregator.offer_attendance_row(_ref(employee), snap.days_for(employee))
            for employee in snap.employees
        ]

    @staticmethod
    async def get_attendance_summary(
        db: AsyncSession,
        store: PolicyStore,
        start: date,
        end: date,
        **filters,
    ) -> list[AttendanceSummaryDay]:
        snap = await ReportService.load_snapshot(db, store, start, end, **filters)
        days = [d for employee in snap.employees for d in snap.days_for(employee)]
        return aggregator.attendance_summary(snap.dates(), days, snap.calendar)
