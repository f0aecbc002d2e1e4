"""Report payload schemas — one row type per report kind.

All rows serialise with camelCase keys; hour values are rounded to two
decimals only on JSON output.
"""


from datetime import date
from typing import Optional

from pydantic import Field

from hrms.common.constants import (
    AttendanceAnomaly,
    DailyStatus,
    EmployeeGroup,
    LeaveType,
    OvertimeApprovalStatus,
)
from hrms.common.schemas import CamelModel, ClockTime, Hours


class EmployeeColumns(CamelModel):
    """Identity columns shared by every report row."""

    employee_id: str
    full_name: str
    employee_group: EmployeeGroup


# ═════════════════════════════════════════════════════════════════════
# Daily sheet / daily OT
# ═════════════════════════════════════════════════════════════════════


class DailyAttendanceRow(EmployeeColumns):
    date: date
    in_time: Optional[ClockTime] = None
    out_time: Optional[ClockTime] = None
    total_hours: Optional[Hours] = None
    is_late: bool = False
    is_half_day: bool = False
    on_short_leave: bool = False
    is_absent: bool = False
    status: DailyStatus
    late_minutes: int = 0
    actual_hours: Hours = 0.0
    required_hours: Hours
    ot_hours: Hours = 0.0
    ot_approval_status: Optional[OvertimeApprovalStatus] = None
    anomaly: Optional[AttendanceAnomaly] = None


class DailyOvertimeRow(DailyAttendanceRow):
    """Daily row with the reviewer's figure next to the calculated one."""

    override_hours: Optional[Hours] = None
    effective_ot_hours: Hours = 0.0


# ═════════════════════════════════════════════════════════════════════
# Monthly sheet
# ═════════════════════════════════════════════════════════════════════


class MonthlyDayCell(CamelModel):
    in_time: Optional[ClockTime] = None
    out_time: Optional[ClockTime] = None
    worked_hours: Optional[Hours] = None
    status: DailyStatus
    code: str
    overtime: Hours = 0.0
    leave: Optional[LeaveType] = None


class MonthlyTotals(CamelModel):
    worked_hours: Hours = 0.0
    overtime: Hours = 0.0
    present_days: int = 0
    late_days: int = 0
    half_days: int = 0
    short_leave_days: int = 0
    absent_days: int = 0
    leave_days: int = 0
    holidays: int = 0


class MonthlyAttendanceRow(EmployeeColumns):
    # Keyed by ISO date
    daily_data: dict[str, MonthlyDayCell] = Field(default_factory=dict)
    total: MonthlyTotals = Field(default_factory=MonthlyTotals)


# ═════════════════════════════════════════════════════════════════════
# Policy-driven exception reports
# ═════════════════════════════════════════════════════════════════════


class LateArrivalRow(EmployeeColumns):
    date: date
    check_in_time: Optional[ClockTime] = None
    status: DailyStatus
    minutes_late: int
    grace_period_until: Optional[ClockTime] = None
    half_day_after: Optional[ClockTime] = None


class HalfDayRow(EmployeeColumns):
    date: date
    check_in_time: Optional[ClockTime] = None
    check_out_time: Optional[ClockTime] = None
    worked_hours: Optional[Hours] = None
    reason: str
    half_day_after: Optional[ClockTime] = None
    half_day_before: Optional[ClockTime] = None


class ShortLeaveUsageRow(EmployeeColumns):
    month: str
    short_leaves_used: int
    max_allowed: int
    remaining: int
    usage_percentage: int
    exceeds_quota: bool
    last_used: Optional[date] = None
    morning_start: Optional[ClockTime] = None
    morning_end: Optional[ClockTime] = None
    evening_start: Optional[ClockTime] = None
    evening_end: Optional[ClockTime] = None
    pre_approval_required: Optional[bool] = None


# ═════════════════════════════════════════════════════════════════════
# Offer attendance / summary
# ═════════════════════════════════════════════════════════════════════


class WeeklyBreakdown(CamelModel):
    monday: Hours = 0.0
    tuesday: Hours = 0.0
    wednesday: Hours = 0.0
    thursday: Hours = 0.0
    friday: Hours = 0.0
    saturday: Hours = 0.0
    sunday: Hours = 0.0


class OfferAttendanceRow(EmployeeColumns):
    total_offer_hours: Hours = 0.0
    working_days: int = 0
    average_offer_hours_per_day: Hours = 0.0
    saturday_hours: Hours = 0.0
    holiday_hours: Hours = 0.0
    weekly_breakdown: WeeklyBreakdown = Field(default_factory=WeeklyBreakdown)


class AttendanceSummaryDay(CamelModel):
    date: date
    is_holiday: bool
    present: int = 0
    late: int = 0
    half_day: int = 0
    short_leave: int = 0
    absent: int = 0
    on_leave: int = 0
    total_employees: int = 0
