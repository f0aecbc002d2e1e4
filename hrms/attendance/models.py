"""Attendance ORM models: AttendanceRecord, Holiday."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.common.constants import HolidayType
from hrms.database import Base

if TYPE_CHECKING:
    from hrms.core_hr.models import Employee


class AttendanceRecord(Base):
    """One employee-day of device or manual check-in / check-out.

    ``check_in`` / ``check_out`` are naive local timestamps. Absent days have
    no row at all.
    """

    __tablename__ = "attendance"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "date", name="uq_attendance_emp_date"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False,
    )
    date: Mapped[date] = mapped_column(sa.Date, nullable=False, index=True)
    check_in: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    check_out: Mapped[Optional[datetime]] = mapped_column(sa.DateTime)
    working_hours: Mapped[Optional[float]] = mapped_column(sa.Float)
    source: Mapped[str] = mapped_column(sa.String(50), default="biometric")
    notes: Mapped[Optional[str]] = mapped_column(sa.Text)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    # Relationships
    employee: Mapped[Employee] = relationship(
        back_populates="attendance_records"
    )


class Holiday(Base):
    __tablename__ = "holidays"
    __table_args__ = (
        sa.UniqueConstraint("date", name="uq_holiday_date"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True)
    date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    name: Mapped[str] = mapped_column(sa.String(150), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(sa.Text)
    type: Mapped[HolidayType] = mapped_column(
        sa.Enum(HolidayType, name="holiday_type"),
        nullable=False,
        default=HolidayType.annual,
    )
    # Recurring holidays match the same month/day every year
    is_recurring: Mapped[bool] = mapped_column(sa.Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
