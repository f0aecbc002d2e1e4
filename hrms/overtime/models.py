"""Overtime ORM model: OvertimeRequest."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.common.constants import RequestStatus
from hrms.database import Base

if TYPE_CHECKING:
    from hrms.core_hr.models import Employee


class OvertimeRequest(Base):
    """Overtime claim or decision for one employee-day.

    The unique (employee, date) constraint makes a decision atomic with the
    eligibility check: a second writer fails on flush.
    """

    __tablename__ = "overtime_requests"
    __table_args__ = (
        sa.UniqueConstraint("employee_id", "date", name="uq_overtime_emp_date"),
    )

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False,
    )
    date: Mapped[date] = mapped_column(sa.Date, nullable=False, index=True)
    hours: Mapped[float] = mapped_column(sa.Float, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    status: Mapped[RequestStatus] = mapped_column(
        sa.Enum(RequestStatus, name="overtime_status"),
        nullable=False,
        default=RequestStatus.pending,
    )
    requested_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )
    reviewed_by: Mapped[Optional[str]] = mapped_column(sa.String(100))
    comments: Mapped[Optional[str]] = mapped_column(sa.Text)

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="overtime_requests")

    def __repr__(self) -> str:
        return f"<OvertimeRequest {self.employee_id} {self.date} {self.status.value}>"
