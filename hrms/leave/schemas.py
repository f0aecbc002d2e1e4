"""Leave Pydantic v2 schemas — application, review and read."""


from datetime import date, datetime
from typing import Optional

from pydantic import Field, model_validator

from hrms.common.constants import LeaveType, RequestStatus
from hrms.common.schemas import CamelModel


class LeaveRequestCreate(CamelModel):
    """Leave application; starts as pending."""

    employee_id: str = Field(..., min_length=1, max_length=50)
    start_date: date
    end_date: date
    leave_type: LeaveType
    reason: Optional[str] = Field(None, max_length=2000)

    @model_validator(mode="after")
    def _check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class LeaveReview(CamelModel):
    comments: Optional[str] = Field(None, max_length=2000)
    reviewed_by: Optional[str] = Field(None, max_length=100)


class LeaveRequestResponse(CamelModel):
    id: int
    employee_id: str
    full_name: str
    start_date: date
    end_date: date
    total_days: int
    leave_type: LeaveType
    status: RequestStatus
    reason: Optional[str] = None
    applied_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    comments: Optional[str] = None
