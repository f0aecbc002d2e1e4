"""Closed per-request view of everything a report needs.

A snapshot is loaded once, then every employee-day is evaluated from it
without touching the database again, so a report never mixes data from two
different moments.
"""

from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.attendance.calendar import WorkingCalendar
from hrms.attendance.classifier import DayClassification, classify_day
from hrms.attendance.models import AttendanceRecord
from hrms.common.constants import EmployeeGroup, LeaveType, RequestStatus
from hrms.core_hr.models import Employee
from hrms.leave.models import LeaveRequest
from hrms.overtime.calculator import OvertimeResult, calculate_overtime
from hrms.overtime.models import OvertimeRequest
from hrms.policy.schemas import GroupPolicy, GroupWorkingHours, PolicyThresholds


class EmployeeRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    employee_code: str
    full_name: str
    employee_group: EmployeeGroup


class EmployeeDay(BaseModel):
    """Classification and overtime for one employee on one date."""

    model_config = ConfigDict(frozen=True)

    employee: EmployeeRef
    day: date
    classification: DayClassification
    overtime: OvertimeResult
    thresholds: PolicyThresholds
    policy: Optional[GroupPolicy] = None
    is_non_working_day: bool = False
    leave_type: Optional[LeaveType] = None


def date_range(start: date, end: date) -> list[date]:
    return [start + timedelta(days=n) for n in range((end - start).days + 1)]


class AttendanceSnapshot:
    def __init__(
        self,
        *,
        start: date,
        end: date,
        employees: Sequence[Employee],
        policy: GroupWorkingHours,
        calendar: WorkingCalendar,
        attendance: Iterable[AttendanceRecord] = (),
        leaves: Iterable[LeaveRequest] = (),
        overtime_requests: Iterable[OvertimeRequest] = (),
    ) -> None:
        self.start = start
        self.end = end
        self.employees = list(employees)
        self.policy = policy
        self.calendar = calendar
        self._attendance = {(r.employee_id, r.date): r for r in attendance}
        self._overtime = {(r.employee_id, r.date): r for r in overtime_requests}
        self._leaves: dict[uuid.UUID, list[LeaveRequest]] = {}
        for leave in leaves:
            if leave.status is RequestStatus.approved:
                self._leaves.setdefault(leave.employee_id, []).append(leave)

    @classmethod
    async def load(
        cls,
        db: AsyncSession,
        *,
        start: date,
        end: date,
        employees: Sequence[Employee],
        policy: GroupWorkingHours,
    ) -> AttendanceSnapshot:
        ids = [e.id for e in employees]
        calendar = await WorkingCalendar.load(db, start, end)
        if not ids:
            return cls(start=start, end=end, employees=[], policy=policy, calendar=calendar)

        attendance = await db.execute(
            select(AttendanceRecord).where(
                AttendanceRecord.employee_id.in_(ids),
                AttendanceRecord.date.between(start, end),
            )
        )
        leaves = await db.execute(
            select(LeaveRequest).where(
                LeaveRequest.employee_id.in_(ids),
                LeaveRequest.status == RequestStatus.approved,
                LeaveRequest.start_date <= end,
                LeaveRequest.end_date >= start,
            )
        )
        overtime = await db.execute(
            select(OvertimeRequest).where(
                OvertimeRequest.employee_id.in_(ids),
                OvertimeRequest.date.between(start, end),
            )
        )
        return cls(
            start=start,
            end=end,
            employees=employees,
            policy=policy,
            calendar=calendar,
            attendance=attendance.scalars().all(),
            leaves=leaves.scalars().all(),
            overtime_requests=overtime.scalars().all(),
        )

    # ── Evaluation ──────────────────────────────────────────────────

    def dates(self) -> list[date]:
        return date_range(self.start, self.end)

    def _leave_on(self, employee_id: uuid.UUID, day: date) -> Optional[LeaveRequest]:
        for leave in self._leaves.get(employee_id, ()):
            if leave.covers(day):
                return leave
        return None

    def evaluate(self, employee: Employee, day: date) -> EmployeeDay:
        policy = self.policy.for_group(employee.employee_group.value)
        record = self._attendance.get((employee.id, day))
        leave = self._leave_on(employee.id, day)
        non_working = self.calendar.is_non_working_day(day)

        classification = classify_day(
            record.check_in if record else None,
            record.check_out if record else None,
            policy,
            on_approved_leave=leave is not None,
            is_holiday=non_working,
        )
        overtime = calculate_overtime(
            classification.worked_hours,
            policy,
            self._overtime.get((employee.id, day)),
        )
        return EmployeeDay(
            employee=EmployeeRef(
                employee_code=employee.employee_code,
                full_name=employee.full_name,
                employee_group=employee.employee_group,
            ),
            day=day,
            classification=classification,
            overtime=overtime,
            thresholds=policy.thresholds() if policy is not None else PolicyThresholds(),
            policy=policy,
            is_non_working_day=non_working,
            leave_type=leave.leave_type if leave else None,
        )

    def days_for(self, employee: Employee) -> list[EmployeeDay]:
        return [self.evaluate(employee, day) for day in self.dates()]
