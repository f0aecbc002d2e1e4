"""Leave ORM model: LeaveRequest."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hrms.common.constants import LeaveType, RequestStatus
from hrms.database import Base

if TYPE_CHECKING:
    from hrms.core_hr.models import Employee


class LeaveRequest(Base):
    """A leave application; only approved requests affect attendance."""

    __tablename__ = "leave_requests"

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True)
    employee_id: Mapped[uuid.UUID] = mapped_column(
        sa.Uuid, sa.ForeignKey("employees.id", ondelete="CASCADE"), nullable=False,
    )
    start_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(sa.Date, nullable=False)
    leave_type: Mapped[LeaveType] = mapped_column(
        sa.Enum(LeaveType, name="leave_type"), nullable=False,
    )
    status: Mapped[RequestStatus] = mapped_column(
        sa.Enum(RequestStatus, name="leave_status"),
        nullable=False,
        default=RequestStatus.pending,
    )
    reason: Mapped[Optional[str]] = mapped_column(sa.Text)
    applied_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
    reviewed_at: Mapped[Optional[datetime]] = mapped_column(
        sa.DateTime(timezone=True)
    )
    reviewed_by: Mapped[Optional[str]] = mapped_column(sa.String(100))
    comments: Mapped[Optional[str]] = mapped_column(sa.Text)

    # Relationships
    employee: Mapped[Employee] = relationship(back_populates="leave_requests")

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
