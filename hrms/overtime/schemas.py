"""Overtime Pydantic v2 schemas — eligibility queue, decisions, requests.

Naming conventions:
  - *Create / *Review → request bodies (write)
  - *Response / *Item → response bodies (read)
"""


from datetime import date, datetime
from typing import Optional

from pydantic import Field

from hrms.common.constants import EmployeeGroup, OvertimeDecision, RequestStatus
from hrms.common.schemas import CamelModel, ClockTime, Hours


class EligibleOvertimeItem(CamelModel):
    """Employee-day with accrued overtime and no request on file."""

    employee_id: str
    full_name: str
    employee_group: EmployeeGroup
    date: date
    in_time: Optional[ClockTime] = None
    out_time: Optional[ClockTime] = None
    actual_hours: Hours
    required_hours: Hours
    ot_hours: Hours


class OvertimeDecisionCreate(CamelModel):
    """Approve or reject an eligible employee-day in one step."""

    employee_id: str = Field(..., min_length=1, max_length=50)
    date: date
    status: OvertimeDecision
    hours: Optional[float] = Field(
        None, ge=0, le=24,
        description="Defaults to the calculated overtime for the day",
    )
    comments: Optional[str] = Field(None, max_length=2000)
    reviewed_by: Optional[str] = Field(None, max_length=100)


class OvertimeRequestCreate(CamelModel):
    """Employee-submitted overtime claim; starts as pending."""

    employee_id: str = Field(..., min_length=1, max_length=50)
    date: date
    hours: float = Field(..., gt=0, le=24)
    reason: Optional[str] = Field(None, max_length=2000)


class OvertimeReview(CamelModel):
    comments: Optional[str] = Field(None, max_length=2000)
    reviewed_by: Optional[str] = Field(None, max_length=100)


class OvertimeRequestResponse(CamelModel):
    id: int
    employee_id: str
    full_name: str
    date: date
    hours: Hours
    reason: Optional[str] = None
    status: RequestStatus
    requested_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    comments: Optional[str] = None
