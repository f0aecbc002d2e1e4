"""Core HR ORM models: Department, Employee.

SQLAlchemy 2.0 async-compatible models with Mapped[] annotations.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.common.constants import EmployeeGroup, EmployeeStatus
from hrms.database import Base

if TYPE_CHECKING:
    from hrms.attendance.models import AttendanceRecord
    from hrms.leave.models import LeaveRequest
    from hrms.overtime.models import OvertimeRequest


class Department(Base):
    __tablename__ = "departments"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True)
    name: Mapped[str] = mapped_column(sa.String(100), unique=True, nullable=False)

    # Relationships
    employees: Mapped[list[Employee]] = relationship(back_populates="department")


class Employee(Base):
    """Staff member; ``employee_code`` is the identifier shown on reports."""

    __tablename__ = "employees"

    id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    employee_code: Mapped[str] = mapped_column(
        sa.String(50), unique=True, nullable=False,
    )
    full_name: Mapped[str] = mapped_column(sa.String(200), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(sa.String(255), unique=True)
    phone: Mapped[Optional[str]] = mapped_column(sa.String(30))
    position: Mapped[Optional[str]] = mapped_column(sa.String(100))
    department_id: Mapped[Optional[int]] = mapped_column(
        sa.Integer, sa.ForeignKey("departments.id"),
    )
    employee_group: Mapped[EmployeeGroup] = mapped_column(
        sa.Enum(EmployeeGroup, name="employee_group"),
        nullable=False,
    )
    status: Mapped[EmployeeStatus] = mapped_column(
        sa.Enum(EmployeeStatus, name="employee_status"),
        nullable=False,
        default=EmployeeStatus.active,
    )
    join_date: Mapped[Optional[date]] = mapped_column(sa.Date)
    biometric_device_id: Mapped[Optional[str]] = mapped_column(sa.String(50))
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    department: Mapped[Optional[Department]] = relationship(back_populates="employees")
    attendance_records: Mapped[list[AttendanceRecord]] = relationship(
        back_populates="employee"
    )
    leave_requests: Mapped[list[LeaveRequest]] = relationship(
        back_populates="employee"
    )
    overtime_requests: Mapped[list[OvertimeRequest]] = relationship(
        back_populates="employee"
    )

    def __repr__(self) -> str:
        return f"<Employee {self.employee_code} ({self.employee_group.value})>"
