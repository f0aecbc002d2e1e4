"""Attendance service layer — attendance upsert and holiday calendar CRUD."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from sqlalchemy import extract, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.attendance.classifier import measure_worked_hours, to_local
from hrms.attendance.models import AttendanceRecord, Holiday
from hrms.attendance.schemas import (
    AttendanceEntry,
    AttendanceRecordResponse,
    HolidayCreate,
    HolidayResponse,
    HolidayUpdate,
)
from hrms.common.audit import create_audit_entry
from hrms.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from hrms.core_hr.service import EmployeeService

logger = logging.getLogger(__name__)


class AttendanceService:
    """Async attendance and holiday operations."""

    # ── Attendance upsert ───────────────────────────────────────────

    @staticmethod
    async def upsert_attendance(
        db: AsyncSession,
        data: AttendanceEntry,
    ) -> AttendanceRecordResponse:
        """Create or replace the check-in / check-out pair for an employee-day.

        ``working_hours`` is derived from the pair; anomalies are stored as
        data, never rejected.
        """
        check_in, check_out = to_local(data.check_in), to_local(data.check_out)
        if check_in is None and check_out is not None:
            raise ValidationException({"checkIn": ["checkIn is required with checkOut."]})
        if check_in is not None and check_in.date() != data.date:
            raise ValidationException(
                {"checkIn": [f"checkIn must fall on {data.date.isoformat()}."]}
            )

        employee = await EmployeeService.get_by_code(db, data.employee_id)
        worked, anomaly = measure_worked_hours(check_in, check_out)

        result = await db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.employee_id == employee.id,
                AttendanceRecord.date == data.date,
            )
        )
        record = result.scalar_one_or_none()
        created = record is None
        if record is None:
            record = AttendanceRecord(employee_id=employee.id, date=data.date)
            db.add(record)

        record.check_in = check_in
        record.check_out = check_out
        record.working_hours = worked
        record.source = data.source
        record.notes = data.notes
        record.updated_at = datetime.now(timezone.utc)

        code = employee.employee_code
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("employeeId+date", f"{code}/{data.date.isoformat()}")

        return AttendanceRecordResponse(
            id=record.id,
            employee_id=code,
            date=record.date,
            check_in=record.check_in,
            check_out=record.check_out,
            working_hours=record.working_hours,
            source=record.source,
            notes=record.notes,
            anomaly=anomaly,
            created=created,
        )

    # ── Holidays ────────────────────────────────────────────────────

    @staticmethod
    async def list_holidays(
        db: AsyncSession,
        *,
        year: Optional[int] = None,
    ) -> Sequence[Holiday]:
        """List holidays by date; recurring ones are included for every year."""
        query = select(Holiday)
        if year is not None:
            query = query.where(
                or_(
                    extract("year", Holiday.date) == year,
                    Holiday.is_recurring.is_(True),
                )
            )
        result = await db.execute(query.order_by(Holiday.date))
        return result.scalars().all()

    @staticmethod
    async def create_holiday(
        db: AsyncSession,
        data: HolidayCreate,
    ) -> HolidayResponse:
        holiday = Holiday(
            date=data.date,
            name=data.name,
            description=data.description,
            type=data.type,
            is_recurring=data.is_recurring,
        )
        db.add(holiday)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("date", data.date.isoformat())

        await create_audit_entry(
            db,
            action="create",
            entity_type="holiday",
            entity_id=holiday.id,
            new_values={"date": data.date.isoformat(), "name": data.name},
        )
        return HolidayResponse.model_validate(holiday)

    @staticmethod
    async def update_holiday(
        db: AsyncSession,
        holiday_id: int,
        data: HolidayUpdate,
    ) -> HolidayResponse:
        """Apply a partial update; moving onto another holiday's date is a 409."""
        holiday = await db.get(Holiday, holiday_id)
        if holiday is None:
            raise NotFoundException("Holiday", holiday_id)

        changes = data.model_dump(exclude_unset=True)
        if "holiday_date" in changes:
            changes["date"] = changes.pop("holiday_date")
        required = {"date": "date", "name": "name", "type": "type", "is_recurring": "isRecurring"}
        nulls = [alias for key, alias in required.items() if key in changes and changes[key] is None]
        if nulls:
            raise ValidationException({alias: ["This field may not be null."] for alias in nulls})

        old_values = {"date": holiday.date.isoformat(), "name": holiday.name}
        for key, value in changes.items():
            setattr(holiday, key, value)
        try:
            await db.flush()
        except IntegrityError:
            await db.rollback()
            raise ConflictError("date", str(changes.get("date")))

        await create_audit_entry(
            db,
            action="update",
            entity_type="holiday",
            entity_id=holiday_id,
            old_values=old_values,
            new_values=data.model_dump(mode="json", by_alias=True, exclude_unset=True),
        )
        logger.info("Updated holiday %s (%s)", holiday_id, holiday.date.isoformat())
        return HolidayResponse.model_validate(holiday)

    @staticmethod
    async def delete_holiday(db: AsyncSession, holiday_id: int) -> None:
        holiday = await db.get(Holiday, holiday_id)
        if holiday is None:
            raise NotFoundException("Holiday", holiday_id)

        old_values = {"date": holiday.date.isoformat(), "name": holiday.name}
        await db.delete(holiday)
        await db.flush()
        await create_audit_entry(
            db,
            action="delete",
            entity_type="holiday",
            entity_id=holiday_id,
            old_values=old_values,
        )
        logger.info("Deleted holiday %s (%s)", holiday_id, old_values["date"])
