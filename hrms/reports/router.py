"""Reports router — attendance sheets and policy-driven exception reports.

Every endpoint accepts either ``date`` or ``startDate`` + ``endDate`` plus the
optional ``employeeId`` and ``group`` filters (``all`` disables either).
"""


from datetime import date
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import GroupFilter
from hrms.common.rate_limit import REPORT_LIMIT, limiter
from hrms.database import get_db
from hrms.dependencies import get_policy_store
from hrms.policy.store import PolicyStore
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
from hrms.reports.service import ReportService, resolve_range

router = APIRouter(prefix="", tags=["reports"])


class ReportParams:
    """Resolved report query: a validated date range plus filters."""

    def __init__(
        self,
        day: Optional[date] = Query(None, alias="date"),
        start_date: Optional[date] = Query(None, alias="startDate"),
        end_date: Optional[date] = Query(None, alias="endDate"),
        employee_id: Optional[str] = Query(None, alias="employeeId"),
        group: GroupFilter = Query(GroupFilter.all),
    ) -> None:
        self.start, self.end = resolve_range(day, start_date, end_date)
        self.employee_code = employee_id
        self.group = group

    @property
    def filters(self) -> dict[str, Any]:
        return {"group": self.group, "employee_code": self.employee_code}


# ── GET /daily-attendance ───────────────────────────────────────────

@router.get("/daily-attendance", response_model=list[DailyAttendanceRow])
@limiter.limit(REPORT_LIMIT)
async def daily_attendance(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    """One row per employee per day with status flags and overtime."""
    return await ReportService.get_daily_attendance(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /daily-ot ───────────────────────────────────────────────────

@router.get("/daily-ot", response_model=list[DailyOvertimeRow])
@limiter.limit(REPORT_LIMIT)
async def daily_overtime(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    """Employee-days with overtime or an overtime request on file."""
    return await ReportService.get_daily_overtime(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /monthly-attendance ─────────────────────────────────────────

@router.get("/monthly-attendance", response_model=list[MonthlyAttendanceRow])
@limiter.limit(REPORT_LIMIT)
async def monthly_attendance(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    return await ReportService.get_monthly_attendance(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /late-arrival ───────────────────────────────────────────────

@router.get("/late-arrival", response_model=list[LateArrivalRow])
@limiter.limit(REPORT_LIMIT)
async def late_arrival(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    return await ReportService.get_late_arrivals(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /half-day ───────────────────────────────────────────────────

@router.get("/half-day", response_model=list[HalfDayRow])
@limiter.limit(REPORT_LIMIT)
async def half_day(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    return await ReportService.get_half_days(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /short-leave-usage ──────────────────────────────────────────

@router.get("/short-leave-usage", response_model=list[ShortLeaveUsageRow])
@limiter.limit(REPORT_LIMIT)
async def short_leave_usage(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    """Short-leave days used against the monthly allowance."""
    return await ReportService.get_short_leave_usage(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /offer-attendance ───────────────────────────────────────────

@router.get("/offer-attendance", response_model=list[OfferAttendanceRow])
@limiter.limit(REPORT_LIMIT)
async def offer_attendance(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    """Hours worked beyond the group end time, by weekday."""
    return await ReportService.get_offer_attendance(
        db, store, params.start, params.end, **params.filters,
    )


# ── GET /attendance-summary ─────────────────────────────────────────

@router.get("/attendance-summary", response_model=list[AttendanceSummaryDay])
@limiter.limit(REPORT_LIMIT)
async def attendance_summary(
    request: Request,
    params: ReportParams = Depends(),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    return await ReportService.get_attendance_summary(
        db, store, params.start, params.end, **params.filters,
    )
