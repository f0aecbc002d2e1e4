"""Attendance router — attendance entry and the holiday calendar."""


from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.attendance.schemas import (
    AttendanceEntry,
    AttendanceRecordResponse,
    HolidayCreate,
    HolidayResponse,
    HolidayUpdate,
)
from hrms.attendance.service import AttendanceService
from hrms.database import get_db

router = APIRouter(prefix="", tags=["attendance"])
holidays_router = APIRouter(prefix="", tags=["holidays"])


# ── POST /attendance ────────────────────────────────────────────────

@router.post("", response_model=AttendanceRecordResponse)
async def upsert_attendance(
    body: AttendanceEntry,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    """Record or replace check-in / check-out for an employee-day."""
    record = await AttendanceService.upsert_attendance(db, body)
    response.status_code = 201 if record.created else 200
    return record


# ── GET /holidays ───────────────────────────────────────────────────

@holidays_router.get("", response_model=list[HolidayResponse])
async def list_holidays(
    year: Optional[int] = Query(None, ge=1900, le=2100),
    db: AsyncSession = Depends(get_db),
):
    """List holidays, optionally filtered by year."""
    return await AttendanceService.list_holidays(db, year=year)


# ── POST /holidays ──────────────────────────────────────────────────

@holidays_router.post("", response_model=HolidayResponse, status_code=201)
async def create_holiday(
    body: HolidayCreate,
    db: AsyncSession = Depends(get_db),
):
    return await AttendanceService.create_holiday(db, body)


# ── PUT /holidays/{id} ──────────────────────────────────────────────

@holidays_router.put("/{holiday_id}", response_model=HolidayResponse)
async def update_holiday(
    holiday_id: int,
    body: HolidayUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Rename, re-date or retype a holiday (partial update)."""
    return await AttendanceService.update_holiday(db, holiday_id, body)


# ── DELETE /holidays/{id} ───────────────────────────────────────────

@holidays_router.delete("/{holiday_id}", status_code=204)
async def delete_holiday(
    holiday_id: int,
    db: AsyncSession = Depends(get_db),
):
    await AttendanceService.delete_holiday(db, holiday_id)
    return Response(status_code=204)
