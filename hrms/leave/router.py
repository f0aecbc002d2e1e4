"""Leave router — apply, list, approve and reject leave requests."""


from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import RequestStatus
from hrms.database import get_db
from hrms.leave.schemas import LeaveRequestCreate, LeaveRequestResponse, LeaveReview
from hrms.leave.service import LeaveService

router = APIRouter(prefix="", tags=["leave"])


# ── GET /leave-requests ─────────────────────────────────────────────

@router.get("", response_model=list[LeaveRequestResponse])
async def list_leave_requests(
    status: Optional[RequestStatus] = Query(None),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    return await LeaveService.list_requests(
        db,
        status=status,
        employee_code=employee_id,
        start=start_date,
        end=end_date,
    )


# ── POST /leave-requests ────────────────────────────────────────────

@router.post("", response_model=LeaveRequestResponse, status_code=201)
async def apply_leave(
    body: LeaveRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """Apply for leave; rejects ranges overlapping an open request."""
    return await LeaveService.apply_leave(db, body)


# ── PUT /leave-requests/{id}/approve ────────────────────────────────

@router.put("/{request_id}/approve", response_model=LeaveRequestResponse)
async def approve_leave(
    request_id: int,
    body: Optional[LeaveReview] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Approve a pending leave request."""
    return await LeaveService.review_leave(
        db, request_id, RequestStatus.approved, body or LeaveReview(),
    )


# ── PUT /leave-requests/{id}/reject ─────────────────────────────────

@router.put("/{request_id}/reject", response_model=LeaveRequestResponse)
async def reject_leave(
    request_id: int,
    body: Optional[LeaveReview] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """Reject a pending leave request."""
    return await LeaveService.review_leave(
        db, request_id, RequestStatus.rejected, body or LeaveReview(),
    )
