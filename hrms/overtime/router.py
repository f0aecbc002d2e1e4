"""Overtime router — eligibility queue, decisions and request review."""


from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import GroupFilter, OvertimeDecision, RequestStatus
from hrms.database import get_db
from hrms.dependencies import get_policy_store
from hrms.overtime.schemas import (
    EligibleOvertimeItem,
    OvertimeDecisionCreate,
    OvertimeRequestCreate,
    OvertimeRequestResponse,
    OvertimeReview,
)
from hrms.overtime.service import OvertimeService
from hrms.policy.store import PolicyStore

router = APIRouter(prefix="", tags=["overtime"])


# ── GET /eligible ───────────────────────────────────────────────────

@router.get("/eligible", response_model=list[EligibleOvertimeItem])
async def list_eligible(
    day: date = Query(..., alias="date"),
    group: GroupFilter = Query(GroupFilter.all),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    """Employee-days with overtime that nobody has decided yet."""
    return await OvertimeService.get_eligible(
        db, store, day, group=group, employee_code=employee_id,
    )


# ── POST /decisions ─────────────────────────────────────────────────

@router.post("/decisions", response_model=OvertimeRequestResponse, status_code=201)
async def create_decision(
    body: OvertimeDecisionCreate,
    db: AsyncSession = Depends(get_db),
    store: PolicyStore = Depends(get_policy_store),
):
    """Approve or reject an eligible employee-day; 409 if already decided."""
    return await OvertimeService.decide(db, store, body)


# ── GET /requests ───────────────────────────────────────────────────

@router.get("/requests", response_model=list[OvertimeRequestResponse])
async def list_requests(
    status: Optional[RequestStatus] = Query(None),
    employee_id: Optional[str] = Query(None, alias="employeeId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db),
):
    return await OvertimeService.list_requests(
        db,
        status=status,
        employee_code=employee_id,
        start=start_date,
        end=end_date,
    )


# ── POST /requests ──────────────────────────────────────────────────

@router.post("/requests", response_model=OvertimeRequestResponse, status_code=201)
async def submit_request(
    body: OvertimeRequestCreate,
    db: AsyncSession = Depends(get_db),
):
    """Submit a pending overtime claim."""
    return await OvertimeService.submit_request(db, body)


# ── PUT /requests/{id}/approve ──────────────────────────────────────

@router.put("/requests/{request_id}/approve", response_model=OvertimeRequestResponse)
async def approve_request(
    request_id: int,
    body: Optional[OvertimeReview] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    return await OvertimeService.review_request(
        db, request_id, OvertimeDecision.approved, body or OvertimeReview(),
    )


# ── PUT /requests/{id}/reject ───────────────────────────────────────

@router.put("/requests/{request_id}/reject", response_model=OvertimeRequestResponse)
async def reject_request(
    request_id: int,
    body: Optional[OvertimeReview] = Body(None),
    db: AsyncSession = Depends(get_db),
):
    return await OvertimeService.review_request(
        db, request_id, OvertimeDecision.rejected, body or OvertimeReview(),
    )
