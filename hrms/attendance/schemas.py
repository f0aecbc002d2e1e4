"""Attendance Pydantic v2 schemas — attendance entry and holidays.

Naming conventions:
  - *Entry / *Create → request bodies (write)
  - *Response → response bodies (read)
"""


from datetime import date, datetime
from typing import Optional

from pydantic import Field

from hrms.common.constants import AttendanceAnomaly, HolidayType
from hrms.common.schemas import CamelModel, Hours


# ═════════════════════════════════════════════════════════════════════
# Attendance entry (manual / device sync)
# ═════════════════════════════════════════════════════════════════════


class AttendanceEntry(CamelModel):
    """Upsert payload for one employee-day.

    Timestamps carrying a UTC offset are converted to local time before
    storage; naive timestamps are taken as local already.
    """

    employee_id: str = Field(..., min_length=1, max_length=50)
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    source: str = Field(
        default="manual",
        max_length=50,
        description="Entry source: manual, biometric, import",
    )
    notes: Optional[str] = Field(None, max_length=2000)


class AttendanceRecordResponse(CamelModel):
    id: int
    employee_id: str
    date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    working_hours: Optional[Hours] = None
    source: str
    notes: Optional[str] = None
    anomaly: Optional[AttendanceAnomaly] = None
    created: bool = False


# ═════════════════════════════════════════════════════════════════════
# Holidays
# ═════════════════════════════════════════════════════════════════════


class HolidayCreate(CamelModel):
    date: date
    name: str = Field(..., min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=2000)
    type: HolidayType = HolidayType.annual
    is_recurring: bool = False


class HolidayUpdate(CamelModel):
    """Partial update of a holiday (all fields optional)."""

    holiday_date: Optional[date] = Field(None, alias="date")
    name: Optional[str] = Field(None, min_length=1, max_length=150)
    description: Optional[str] = Field(None, max_length=2000)
    type: Optional[HolidayType] = None
    is_recurring: Optional[bool] = None


class HolidayResponse(CamelModel):
    """Single holiday entry."""

    id: int
    date: date
    name: str
    description: Optional[str] = None
    type: HolidayType
    is_recurring: bool = False
