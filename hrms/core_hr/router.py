"""Core HR router — employee list, detail, create and partial update."""


from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.common.constants import EmployeeStatus, GroupFilter
from hrms.core_hr.schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from hrms.core_hr.service import EmployeeService
from hrms.database import get_db

router = APIRouter(prefix="", tags=["employees"])


# ── GET /employees ──────────────────────────────────────────────────

@router.get("", response_model=list[EmployeeResponse])
async def list_employees(
    group: GroupFilter = Query(GroupFilter.all),
    status: Optional[EmployeeStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """List employees ordered by employee code."""
    return await EmployeeService.list_employees(db, group=group, status=status)


# ── GET /employees/{employeeId} ─────────────────────────────────────

@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(
    employee_id: str,
    db: AsyncSession = Depends(get_db),
):
    return await EmployeeService.get_employee(db, employee_id)


# ── POST /employees ─────────────────────────────────────────────────

@router.post("", response_model=EmployeeResponse, status_code=201)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create an employee; 409 when the employee code is taken."""
    return await EmployeeService.create_employee(db, body)


# ── PUT /employees/{employeeId} ─────────────────────────────────────

@router.put("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: str,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update an employee record (partial update)."""
    return await EmployeeService.update_employee(db, employee_id, body)
