"""Core HR Pydantic v2 schemas — employee create / update / read.

``employeeId`` on the wire is the employee code shown on reports, never the
internal UUID.
"""


from datetime import date, datetime
from typing import Optional

from pydantic import Field

from hrms.common.constants import EmployeeGroup, EmployeeStatus
from hrms.common.schemas import CamelModel


class EmployeeCreate(CamelModel):
    """Payload for creating a new employee."""

    employee_id: str = Field(..., min_length=1, max_length=50)
    full_name: str = Field(..., min_length=1, max_length=200)
    employee_group: EmployeeGroup
    status: EmployeeStatus = EmployeeStatus.active
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    position: Optional[str] = Field(None, max_length=100)
    department_id: Optional[int] = None
    join_date: Optional[date] = None
    biometric_device_id: Optional[str] = Field(None, max_length=50)


class EmployeeUpdate(CamelModel):
    """Partial-update payload (all fields optional)."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    employee_group: Optional[EmployeeGroup] = None
    status: Optional[EmployeeStatus] = None
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=30)
    position: Optional[str] = Field(None, max_length=100)
    department_id: Optional[int] = None
    join_date: Optional[date] = None
    biometric_device_id: Optional[str] = Field(None, max_length=50)


class EmployeeResponse(CamelModel):
    employee_id: str
    full_name: str
    employee_group: EmployeeGroup
    status: EmployeeStatus
    email: Optional[str] = None
    phone: Optional[str] = None
    position: Optional[str] = None
    department_id: Optional[int] = None
    department_name: Optional[str] = None
    join_date: Optional[date] = None
    biometric_device_id: Optional[str] = None
    created_at: Optional[datetime] = None
