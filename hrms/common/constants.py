"""Enums and constants for the attendance engine."""

from __future__ import annotations

import enum


# ── Employee ────────────────────────────────────────────────────────

class EmployeeGroup(str, enum.Enum):
    group_a = "group_a"
    group_b = "group_b"


class GroupFilter(str, enum.Enum):
    """Report query filter; ``all`` disables group filtering."""

    all = "all"
    group_a = "group_a"
    group_b = "group_b"


class EmployeeStatus(str, enum.Enum):
    active = "active"
    inactive = "inactive"


# ── Requests (leave / overtime) ─────────────────────────────────────

class RequestStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class LeaveType(str, enum.Enum):
    annual = "annual"
    sick = "sick"
    casual = "casual"
    maternity = "maternity"
    paternity = "paternity"


class OvertimeDecision(str, enum.Enum):
    """Terminal states an approver can set on an eligible employee-day."""

    approved = "approved"
    rejected = "rejected"


class OvertimeApprovalStatus(str, enum.Enum):
    """Display label surfaced on report rows."""

    pending = "Pending"
    approved = "Approved"
    rejected = "Rejected"


# ── Calendar ────────────────────────────────────────────────────────

class HolidayType(str, enum.Enum):
    annual = "annual"
    special = "special"
    weekend = "weekend"


# ── Attendance ──────────────────────────────────────────────────────

class DailyStatus(str, enum.Enum):
    """Exactly one of these is assigned to every employee-day."""

    holiday = "Holiday"
    on_leave = "On Leave"
    absent = "Absent"
    half_day = "Half Day"
    late = "Late"
    short_leave = "Short Leave"
    present = "Present"


class AttendanceAnomaly(str, enum.Enum):
    checkout_before_checkin = "checkout_before_checkin"
    spans_midnight = "spans_midnight"


# Monthly sheet cell codes
STATUS_CODES: dict[DailyStatus, str] = {
    DailyStatus.holiday: "HL",
    DailyStatus.on_leave: "LV",
    DailyStatus.absent: "A",
    DailyStatus.half_day: "HD",
    DailyStatus.late: "LT",
    DailyStatus.short_leave: "SL",
    DailyStatus.present: "P",
}

# ── Misc constants ──────────────────────────────────────────────────

DEFAULT_REQUIRED_HOURS = 8.0
DEFAULT_SHORT_LEAVE_QUOTA = 2
MINUTES_PER_DAY = 24 * 60
TIME_FORMAT = "%H:%M"
WEEKDAY_NAMES = (
    "monday", "tuesday", "wednesday", "thursday",
    "friday", "saturday", "sunday",
)
