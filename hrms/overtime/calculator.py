"""Overtime computation for a single employee-day.

The calculated value is always kept; a reviewer's request is carried next to
it as an override so reports can show both.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from hrms.common.constants import (
    DEFAULT_REQUIRED_HOURS,
    OvertimeApprovalStatus,
    RequestStatus,
)
from hrms.overtime.models import OvertimeRequest
from hrms.policy.schemas import GroupPolicy

_APPROVAL_LABELS = {
    RequestStatus.pending: OvertimeApprovalStatus.pending,
    RequestStatus.approved: OvertimeApprovalStatus.approved,
    RequestStatus.rejected: OvertimeApprovalStatus.rejected,
}


class OvertimeOverride(BaseModel):
    value: float
    status: RequestStatus


class OvertimeResult(BaseModel):
    calculated: float
    actual_hours: float
    required_hours: float
    override: Optional[OvertimeOverride] = None
    approval_status: Optional[OvertimeApprovalStatus] = None

    @property
    def effective_hours(self) -> float:
        """Hours to display or total: an approved override wins."""
        if self.override is not None and self.override.status is RequestStatus.approved:
            return self.override.value
        return self.calculated

    @property
    def is_eligible(self) -> bool:
        return self.calculated > 0 and self.override is None


def required_hours_for(policy: Optional[GroupPolicy]) -> float:
    if policy is None:
        return DEFAULT_REQUIRED_HOURS
    required = policy.required_ot_hours
    return required if required and required > 0 else DEFAULT_REQUIRED_HOURS


def calculate_overtime(
    worked_hours: Optional[float],
    policy: Optional[GroupPolicy],
    request: Optional[OvertimeRequest] = None,
) -> OvertimeResult:
    """``max(0, actual - required)`` reconciled against an existing request."""
    actual = worked_hours or 0.0
    required = required_hours_for(policy)
    calculated = max(0.0, actual - required)

    override = None
    if request is not None:
        override = OvertimeOverride(value=request.hours, status=request.status)
        approval = _APPROVAL_LABELS[request.status]
    elif calculated > 0:
        approval = OvertimeApprovalStatus.pending
    else:
        approval = None

    return OvertimeResult(
        calculated=calculated,
        actual_hours=actual,
        required_hours=required,
        override=override,
        approval_status=approval,
    )


def is_eligible(
    worked_hours: Optional[float],
    policy: Optional[GroupPolicy],
    request: Optional[OvertimeRequest] = None,
) -> bool:
    """Overtime accrued and nobody has filed or decided it yet."""
    return calculate_overtime(worked_hours, policy, request).is_eligible
