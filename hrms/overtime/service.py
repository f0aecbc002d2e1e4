"""Overtime service layer — eligibility queue, decisions and request review.

Business logic:
  - An employee-day is eligible when calculated overtime is positive and no
    request of any status exists for it
  - A decision creates the request directly in its terminal state
  - Submitted requests start pending and are approved or rejected once
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.common.audit import create_audit_entry
from hrms.common.constants import GroupFilter, OvertimeDecision, RequestStatus
from hrms.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from hrms.core_hr.models import Employee
from hrms.core_hr.service import EmployeeService
from hrms.overtime.models import OvertimeRequest
from hrms.overtime.schemas import (
    EligibleOvertimeItem,
    OvertimeDecisionCreate,
    OvertimeRequestCreate,
    OvertimeRequestResponse,
    OvertimeReview,
)
from hrms.policy.store import PolicyStore
from hrms.reports.snapshot import AttendanceSnapshot

logger = logging.getLogger(__name__)

_DECISION_STATUS = {
    OvertimeDecision.approved: RequestStatus.approved,
    OvertimeDecision.rejected: RequestStatus.rejected,
}


def _to_response(req: OvertimeRequest, employee: Employee) -> OvertimeRequestResponse:
    return OvertimeRequestResponse(
        id=req.id,
        employee_id=employee.employee_code,
        full_name=employee.full_name,
        date=req.date,
        hours=req.hours,
        reason=req.reason,
        status=req.status,
        requested_at=req.requested_at,
        reviewed_at=req.reviewed_at,
        reviewed_by=req.reviewed_by,
        comments=req.comments,
    )


def _snapshot_values(req: OvertimeRequest) -> dict:
    return {"status": req.status.value, "hours": req.hours, "date": req.date.isoformat()}


# ═════════════════════════════════════════════════════════════════════
# OvertimeService
# ═════════════════════════════════════════════════════════════════════


class OvertimeService:
    """Async overtime operations."""

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    async def _insert(
        db: AsyncSession,
        employee: Employee,
        req: OvertimeRequest,
    ) -> OvertimeRequest:
        """Add *req*; a concurrent writer for the same employee-day loses."""
        key = f"{employee.employee_code}/{req.date.isoformat()}"
        db.add(req)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("employeeId+date", key)
        return req

    @staticmethod
    async def _existing(
        db: AsyncSession,
        employee: Employee,
        day: date,
    ) -> Optional[OvertimeRequest]:
        result = await db.execute(
            select(OvertimeRequest).where(
                OvertimeRequest.employee_id == employee.id,
                OvertimeRequest.date == day,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _load_request(db: AsyncSession, request_id: int) -> OvertimeRequest:
        result = await db.execute(
            select(OvertimeRequest)
            .where(OvertimeRequest.id == request_id)
            .options(selectinload(OvertimeRequest.employee))
        )
        req = result.scalars().first()
        if req is None:
            raise NotFoundException("OvertimeRequest", request_id)
        return req

    # ── Eligibility queue ───────────────────────────────────────────

    @staticmethod
    async def get_eligible(
        db: AsyncSession,
        store: PolicyStore,
        day: date,
        *,
        group: GroupFilter = GroupFilter.all,
        employee_code: Optional[str] = None,
    ) -> list[EligibleOvertimeItem]:
        """Employee-days on *day* awaiting an overtime decision."""
        employees = await EmployeeService.list_in_scope(
            db, group=group, employee_code=employee_code,
        )
        snap = await AttendanceSnapshot.load(
            db,
            start=day,
            end=day,
            employees=employees,
            policy=store.get_group_working_hours(),
        )
        items = []
        for employee in snap.employees:
            evaluated = snap.evaluate(employee, day)
            if not evaluated.overtime.is_eligible:
                continue
            c, ot = evaluated.classification, evaluated.overtime
            items.append(
                EligibleOvertimeItem(
                    employee_id=employee.employee_code,
                    full_name=employee.full_name,
                    employee_group=employee.employee_group,
                    date=day,
                    in_time=c.in_time,
                    out_time=c.out_time,
                    actual_hours=ot.actual_hours,
                    required_hours=ot.required_hours,
                    ot_hours=ot.calculated,
                )
            )
        return items

    # ── Decisions ───────────────────────────────────────────────────

    @staticmethod
    async def decide(
        db: AsyncSession,
        store: PolicyStore,
        data: OvertimeDecisionCreate,
    ) -> OvertimeRequestResponse:
        """Record an approve / reject decision for one employee-day.

        A second decision for the same employee-day raises ``ConflictError``.
        """
        employee = await EmployeeService.get_by_code(db, data.employee_id)
        if await OvertimeService._existing(db, employee, data.date) is not None:
            raise ConflictError(
                "employeeId+date", f"{employee.employee_code}/{data.date.isoformat()}"
            )

        hours = data.hours
        if hours is None:
            snap = await AttendanceSnapshot.load(
                db,
                start=data.date,
                end=data.date,
                employees=[employee],
                policy=store.get_group_working_hours(),
            )
            hours = snap.evaluate(employee, data.date).overtime.calculated
            if hours <= 0:
                raise ValidationException(
                    {"hours": ["No overtime accrued on this date; provide hours explicitly."]}
                )

        now = datetime.now(timezone.utc)
        req = await OvertimeService._insert(
            db,
            employee,
            OvertimeRequest(
                employee_id=employee.id,
                date=data.date,
                hours=hours,
                status=_DECISION_STATUS[data.status],
                requested_at=now,
                reviewed_at=now,
                reviewed_by=data.reviewed_by,
                comments=data.comments,
            ),
        )

        await create_audit_entry(
            db,
            action="approve" if data.status is OvertimeDecision.approved else "reject",
            entity_type="overtime_request",
            entity_id=req.id,
            actor=data.reviewed_by,
            new_values=_snapshot_values(req),
        )
        logger.info(
            "Overtime %s for %s on %s (%.2f h)",
            data.status.value, employee.employee_code, data.date.isoformat(), hours,
        )
        return _to_response(req, employee)

    # ── Requests ────────────────────────────────────────────────────

    @staticmethod
    async def submit_request(
        db: AsyncSession,
        data: OvertimeRequestCreate,
    ) -> OvertimeRequestResponse:
        employee = await EmployeeService.get_by_code(db, data.employee_id)
        if await OvertimeService._existing(db, employee, data.date) is not None:
            raise ConflictError(
                "employeeId+date", f"{employee.employee_code}/{data.date.isoformat()}"
            )

        req = await OvertimeService._insert(
            db,
            employee,
            OvertimeRequest(
                employee_id=employee.id,
                date=data.date,
                hours=data.hours,
                reason=data.reason,
                status=RequestStatus.pending,
            ),
        )
        await create_audit_entry(
            db,
            action="create",
            entity_type="overtime_request",
            entity_id=req.id,
            new_values=_snapshot_values(req),
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
    ) -> list[OvertimeRequestResponse]:
        query = select(OvertimeRequest, Employee).join(
            Employee, OvertimeRequest.employee_id == Employee.id
        )
        if status is not None:
            query = query.where(OvertimeRequest.status == status)
        if employee_code:
            query = query.where(Employee.employee_code == employee_code)
        if start is not None:
            query = query.where(OvertimeRequest.date >= start)
        if end is not None:
            query = query.where(OvertimeRequest.date <= end)

        result = await db.execute(
            query.order_by(OvertimeRequest.date.desc(), Employee.employee_code)
        )
        return [_to_response(req, employee) for req, employee in result.all()]

    @staticmethod
    async def review_request(
        db: AsyncSession,
        request_id: int,
        decision: OvertimeDecision,
        review: OvertimeReview,
    ) -> OvertimeRequestResponse:
        """Move a pending request to approved or rejected."""
        req = await OvertimeService._load_request(db, request_id)
        if req.status is not RequestStatus.pending:
            raise ValidationException(
                {"status": [f"Overtime request is already {req.status.value}."]}
            )

        old_values = _snapshot_values(req)
        req.status = _DECISION_STATUS[decision]
        req.reviewed_at = datetime.now(timezone.utc)
        req.reviewed_by = review.reviewed_by
        req.comments = review.comments
        await db.flush()

        await create_audit_entry(
            db,
            action="approve" if decision is OvertimeDecision.approved else "reject",
            entity_type="overtime_request",
            entity_id=req.id,
            actor=review.reviewed_by,
            old_values=old_values,
            new_values=_snapshot_values(req),
        )
        logger.info(
            "Overtime request %s %s for %s",
            req.id, req.status.value, req.employee.employee_code,
        )
        return _to_response(req, req.employee)
