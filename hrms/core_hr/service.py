"""Core HR service layer — employee records and the lookups shared by
reports and overtime."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrms.common.audit import create_audit_entry
from hrms.common.constants import EmployeeGroup, EmployeeStatus, GroupFilter
from hrms.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from hrms.core_hr.models import Department, Employee
from hrms.core_hr.schemas import EmployeeCreate, EmployeeResponse, EmployeeUpdate

logger = logging.getLogger(__name__)

ALL_EMPLOYEES = "all"


def _to_response(
    employee: Employee,
    department: Optional[Department],
) -> EmployeeResponse:
    return EmployeeResponse(
        employee_id=employee.employee_code,
        full_name=employee.full_name,
        employee_group=employee.employee_group,
        status=employee.status,
        email=employee.email,
        phone=employee.phone,
        position=employee.position,
        department_id=employee.department_id,
        department_name=department.name if department else None,
        join_date=employee.join_date,
        biometric_device_id=employee.biometric_device_id,
        created_at=employee.created_at,
    )


class EmployeeService:
    """Async employee operations."""

    # ── Lookups ─────────────────────────────────────────────────────

    @staticmethod
    async def get_by_code(db: AsyncSession, employee_code: str) -> Employee:
        result = await db.execute(
            select(Employee).where(Employee.employee_code == employee_code)
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundException("Employee", employee_code)
        return employee

    @staticmethod
    async def list_in_scope(
        db: AsyncSession,
        *,
        group: GroupFilter = GroupFilter.all,
        employee_code: Optional[str] = None,
    ) -> Sequence[Employee]:
        """Active employees matching the report filters, ordered by code.

        ``employee_code`` of ``None`` or ``"all"`` disables the filter; an
        unknown code is a validation error rather than an empty report.
        """
        query = select(Employee).where(Employee.status == EmployeeStatus.active)
        if group is not GroupFilter.all:
            query = query.where(Employee.employee_group == EmployeeGroup(group.value))
        if employee_code and employee_code != ALL_EMPLOYEES:
            exists = await db.execute(
                select(Employee.id).where(Employee.employee_code == employee_code)
            )
            if exists.scalar_one_or_none() is None:
                raise ValidationException(
                    {"employeeId": [f"Unknown employee '{employee_code}'."]}
                )
            query = query.where(Employee.employee_code == employee_code)

        result = await db.execute(query.order_by(Employee.employee_code))
        return result.scalars().all()

    @staticmethod
    async def _department(
        db: AsyncSession,
        department_id: Optional[int],
    ) -> Optional[Department]:
        if department_id is None:
            return None
        department = await db.get(Department, department_id)
        if department is None:
            raise NotFoundException("Department", department_id)
        return department

    # ── List / detail ───────────────────────────────────────────────

    @staticmethod
    async def list_employees(
        db: AsyncSession,
        *,
        group: GroupFilter = GroupFilter.all,
        status: Optional[EmployeeStatus] = None,
    ) -> list[EmployeeResponse]:
        """All employees (any status unless filtered), ordered by code."""
        query = select(Employee).options(selectinload(Employee.department))
        if group is not GroupFilter.all:
            query = query.where(Employee.employee_group == EmployeeGroup(group.value))
        if status is not None:
            query = query.where(Employee.status == status)

        result = await db.execute(query.order_by(Employee.employee_code))
        return [_to_response(e, e.department) for e in result.scalars().all()]

    @staticmethod
    async def get_employee(db: AsyncSession, employee_code: str) -> EmployeeResponse:
        result = await db.execute(
            select(Employee)
            .where(Employee.employee_code == employee_code)
            .options(selectinload(Employee.department))
        )
        employee = result.scalar_one_or_none()
        if employee is None:
            raise NotFoundException("Employee", employee_code)
        return _to_response(employee, employee.department)

    # ── Create ──────────────────────────────────────────────────────

    @staticmethod
    async def create_employee(
        db: AsyncSession,
        data: EmployeeCreate,
    ) -> EmployeeResponse:
        department = await EmployeeService._department(db, data.department_id)

        fields = data.model_dump(exclude={"employee_id"})
        employee = Employee(employee_code=data.employee_id, **fields)
        db.add(employee)
        try:
            await db.flush()
        except IntegrityError as exc:
            await db.rollback()
            err = str(exc.orig)
            if "employee_code" in err:
                raise ConflictError("employeeId", data.employee_id)
            if "email" in err:
                raise ConflictError("email", data.email)
            raise

        await create_audit_entry(
            db,
            action="create",
            entity_type="employee",
            entity_id=data.employee_id,
            new_values=data.model_dump(mode="json"),
        )
        logger.info("Created employee %s (%s)", data.employee_id, data.employee_group.value)
        return _to_response(employee, department)

    # ── Update ──────────────────────────────────────────────────────

    @staticmethod
    async def update_employee(
        db: AsyncSession,
        employee_code: str,
        data: EmployeeUpdate,
    ) -> EmployeeResponse:
        """Apply a partial update; only fields present in the body change."""
        employee = await EmployeeService.get_by_code(db, employee_code)
        changes = data.model_dump(exclude_unset=True)
        required = {"full_name": "fullName", "employee_group": "employeeGroup", "status": "status"}
        nulls = [alias for key, alias in required.items() if key in changes and changes[key] is None]
        if nulls:
            raise ValidationException({alias: ["This field may not be null."] for alias in nulls})

        department = await EmployeeService._department(
            db, changes.get("department_id", employee.department_id),
        )

        old_values = EmployeeUpdate.model_validate(
            {key: getattr(employee, key) for key in changes}
        ).model_dump(mode="json", exclude_unset=True)
        for key, value in changes.items():
            setattr(employee, key, value)
        employee.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("email", changes.get("email"))

        await create_audit_entry(
            db,
            action="update",
            entity_type="employee",
            entity_id=employee_code,
            old_values=old_values,
            new_values=data.model_dump(mode="json", exclude_unset=True),
        )
        return _to_response(employee, department)
