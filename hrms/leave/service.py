"""Leave service layer — application, listing and approval workflow.

Business logic:
  - A new request may not overlap a pending or approved request of the
    same employee
  - Only pending requests can be approved or rejected
  - Approved requests turn the covered days into On Leave in every report
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.common.audit import create_audit_entry
from hrms.common.constants import RequestStatus
from hrms.common.exceptions import NotFoundException, ValidationException
from hrms.core_hr.models import Employee
from hrms.core_hr.service import EmployeeService
from hrms.leave.models import LeaveRequest
from hrms.leave.schemas import LeaveRequestCreate, LeaveRequestResponse, LeaveReview

logger = logging.getLogger(__name__)


def _to_response(req: LeaveRequest, employee: Employee) -> LeaveRequestResponse:
    return LeaveRequestResponse(
        id=req.id,
        employee_id=employee.employee_code,
        full_name=employee.full_name,
        start_date=req.start_date,
        end_date=req.end_date,
        total_days=(req.end_date - req.start_date).days + 1,
        leave_type=req.leave_type,
        status=req.status,
        reason=req.reason,
        applied_at=req.applied_at,
        reviewed_at=req.reviewed_at,
        reviewed_by=req.reviewed_by,
        comments=req.comments,
    )


# ═════════════════════════════════════════════════════════════════════
# LeaveService
# ═════════════════════════════════════════════════════════════════════


class LeaveService:
    """Async leave operations."""

    @staticmethod
    async def apply_leave(
        db: AsyncSession,
        data: LeaveRequestCreate,
    ) -> LeaveRequestResponse:
        employee = await EmployeeService.get_by_code(db, data.employee_id)

        overlap = await db.execute(
            select(LeaveRequest.id).where(
                LeaveRequest.employee_id == employee.id,
                LeaveRequest.status.in_([RequestStatus.pending, RequestStatus.approved]),
                LeaveRequest.start_date <= data.end_date,
                LeaveRequest.end_date >= data.start_date,
            )
        )
        if overlap.first() is not None:
            raise ValidationException(
                {"startDate": ["Overlaps an existing pending or approved leave request."]}
            )

        req = LeaveRequest(
            employee_id=employee.id,
            start_date=data.start_date,
            end_date=data.end_date,
            leave_type=data.leave_type,
            reason=data.reason,
            status=RequestStatus.pending,
            applied_at=datetime.now(timezone.utc),
        )
        db.add(req)
        await db.flush()

        await create_audit_entry(
            db,
            action="create",
            entity_type="leave_request",
            entity_id=req.id,
            new_values=data.model_dump(mode="json"),
        )
        return _to_response(req, employee)

    @staticmethod
    async def list_requests(
        db: AsyncSession,
        *,
        status: Optional[RequestStatus] = None,
        employee_code: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[LeaveRequestResponse]:
        """Requests overlapping [start, end], newest first."""
        query = select(LeaveRequest, Employee).join(
            Employee, LeaveRequest.employee_id == Employee.id
        )
        if status is not None:
            query = query.where(LeaveRequest.status == status)
        if employee_code:
            query = query.where(Employee.employee_code == employee_code)
        if start is not None:
            query = query.where(LeaveRequest.end_date >= start)
        if end is not None:
            query = query.where(LeaveRequest.start_date <= end)

        result = await db.execute(
            query.order_by(LeaveRequest.start_date.desc(), Employee.employee_code)
        )
        return [_to_response(req, employee) for req, employee in result.all()]

    @staticmethod
    async def review_leave(
        db: AsyncSession,
        request_id: int,
        status: RequestStatus,
        review: LeaveReview,
    ) -> LeaveRequestResponse:
        """Approve or reject a pending leave request."""
        result = await db.execute(
            select(LeaveRequest)
            .where(LeaveRequest.id == request_id)
            .options(selectinload(LeaveRequest.employee))
        )
        req = result.scalars().first()
        if req is None:
            raise NotFoundException("LeaveRequest", request_id)

        if req.status is not RequestStatus.pending:
            raise ValidationException(
                {"status": [f"Leave request is already {req.status.value}."]}
            )

        old_status = req.status.value
        req.status = status
        req.reviewed_at = datetime.now(timezone.utc)
        req.reviewed_by = review.reviewed_by
        req.comments = review.comments
        await db.flush()

        await create_audit_entry(
            db,
            action="approve" if status is RequestStatus.approved else "reject",
            entity_type="leave_request",
            entity_id=req.id,
            actor=review.reviewed_by,
            old_values={"status": old_status},
            new_values={"status": status.value, "comments": review.comments},
        )
        logger.info(
            "Leave request %s %s for %s (%s to %s)",
            req.id, status.value, req.employee.employee_code,
            req.start_date.isoformat(), req.end_date.isoformat(),
        )
        return _to_response(req, req.employee)
