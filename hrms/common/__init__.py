"""Common module — shared enums, errors and schema helpers."""

from hrms.common.constants import (
    DEFAULT_REQUIRED_HOURS,
    STATUS_CODES,
    AttendanceAnomaly,
    DailyStatus,
    EmployeeGroup,
    EmployeeStatus,
    GroupFilter,
    HolidayType,
    LeaveType,
    OvertimeApprovalStatus,
    OvertimeDecision,
    RequestStatus,
)
from hrms.common.exceptions import (
    AnomalyWarning,
    AppException,
    ConflictError,
    NotFoundException,
    ValidationException,
    register_exception_handlers,
)
from hrms.common.schemas import CamelModel, ClockTime, Hours

__all__ = [
    # Constants / Enums
    "AttendanceAnomaly",
    "DailyStatus",
    "EmployeeGroup",
    "EmployeeStatus",
    "GroupFilter",
    "HolidayType",
    "LeaveType",
    "OvertimeApprovalStatus",
    "OvertimeDecision",
    "RequestStatus",
    "DEFAULT_REQUIRED_HOURS",
    "STATUS_CODES",
    # Exceptions
    "AnomalyWarning",
    "AppException",
    "ConflictError",
    "NotFoundException",
    "ValidationException",
    "register_exception_handlers",
    # Schemas
    "CamelModel",
    "ClockTime",
    "Hours",
]
