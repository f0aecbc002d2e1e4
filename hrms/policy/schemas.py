"""Group working-hours policy schemas.

The JSON document on disk uses camelCase keys (``groupA``, ``startTime``,
``lateArrivalPolicy`` …). Reads are lenient: a malformed field is logged and
replaced by ``None`` so that reporting keeps working on documented
fallbacks. Writes validate with ``context={"strict": True}`` and reject any
malformed value.
"""

import logging
from typing import Any, Optional, get_args

from pydantic import (
    BaseModel,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from hrms.common.constants import (
    DEFAULT_REQUIRED_HOURS,
    DEFAULT_SHORT_LEAVE_QUOTA,
    EmployeeGroup,
)
from hrms.common.schemas import CamelModel, ClockTime

logger = logging.getLogger(__name__)


def _is_strict(info: ValidationInfo) -> bool:
    return bool(info.context and info.context.get("strict"))


def _minutes(value) -> Optional[int]:
    if value is None:
        return None
    return value.hour * 60 + value.minute


class PolicyModel(CamelModel):
    """Policy fragment whose fields degrade to ``None`` when malformed."""

    @field_validator("*", mode="wrap")
    @classmethod
    def _fallback_on_error(cls, value: Any, handler, info: ValidationInfo):
        try:
            return handler(value)
        except ValidationError:
            if _is_strict(info):
                raise
            logger.warning(
                "Ignoring malformed policy field %s.%s=%r",
                cls.__name__, info.field_name, value,
            )
            return None

    @classmethod
    def to_aliases(
        cls,
        data: dict[str, Any],
        unknown: list[str],
        prefix: str = "",
    ) -> dict[str, Any]:
        """Rewrite field names in *data* to their camelCase aliases.

        Keys that are neither a field name nor an alias are left out and
        their dotted paths appended to *unknown*.
        """
        by_key: dict[str, str] = {}
        for name, field in cls.model_fields.items():
            by_key[name] = name
            by_key[field.alias or to_camel(name)] = name

        out: dict[str, Any] = {}
        for key, value in data.items():
            name = by_key.get(key)
            if name is None:
                unknown.append(f"{prefix}{key}")
                continue
            field = cls.model_fields[name]
            alias = field.alias or to_camel(name)
            nested = _policy_model(field.annotation)
            if nested is not None and isinstance(value, dict):
                value = nested.to_aliases(value, unknown, f"{prefix}{alias}.")
            out[alias] = value
        return out


def _policy_model(annotation: Any) -> Optional[type[PolicyModel]]:
    for candidate in (annotation, *get_args(annotation)):
        if isinstance(candidate, type) and issubclass(candidate, PolicyModel):
            return candidate
    return None


# ═════════════════════════════════════════════════════════════════════
# Policy fragments
# ═════════════════════════════════════════════════════════════════════


class LateArrivalPolicy(PolicyModel):
    grace_period_until: Optional[ClockTime] = None
    half_day_after: Optional[ClockTime] = None
    half_day_before: Optional[ClockTime] = None
    short_leave_allowance: Optional[bool] = None

    @model_validator(mode="after")
    def _check_window(self, info: ValidationInfo):
        if (
            _is_strict(info)
            and self.half_day_after is not None
            and self.half_day_before is not None
            and self.half_day_after >= self.half_day_before
        ):
            raise ValueError("halfDayAfter must be earlier than halfDayBefore")
        return self


class ShortLeavePolicy(PolicyModel):
    morning_start: Optional[ClockTime] = None
    morning_end: Optional[ClockTime] = None
    evening_start: Optional[ClockTime] = None
    evening_end: Optional[ClockTime] = None
    max_per_month: Optional[int] = Field(None, ge=0)
    pre_approval_required: Optional[bool] = None
    minimum_working_hours_required: Optional[bool] = None


class DayOvertimeRule(PolicyModel):
    min_hours_for_ot: Optional[float] = Field(None, alias="minHoursForOT", gt=0)


class OvertimePolicy(PolicyModel):
    normal_day: Optional[DayOvertimeRule] = None


class PolicyThresholds(BaseModel):
    """Policy resolved to minute-of-day integers with fallbacks applied."""

    start: Optional[int] = None
    end: Optional[int] = None
    grace_until: Optional[int] = None
    half_day_after: Optional[int] = None
    half_day_before: Optional[int] = None
    full_day_hours: float = DEFAULT_REQUIRED_HOURS
    required_ot_hours: float = DEFAULT_REQUIRED_HOURS
    short_leave_quota: int = DEFAULT_SHORT_LEAVE_QUOTA


class GroupPolicy(PolicyModel):
    start_time: Optional[ClockTime] = None
    end_time: Optional[ClockTime] = None
    duration_minutes: Optional[int] = Field(None, gt=0)
    min_hours_for_ot: Optional[float] = Field(None, alias="minHoursForOT", gt=0)
    late_arrival_policy: Optional[LateArrivalPolicy] = None
    short_leave_policy: Optional[ShortLeavePolicy] = None
    overtime_policy: Optional[OvertimePolicy] = None

    @model_validator(mode="after")
    def _check_shift(self, info: ValidationInfo):
        if (
            _is_strict(info)
            and self.start_time is not None
            and self.end_time is not None
            and self.start_time >= self.end_time
        ):
            raise ValueError("startTime must be earlier than endTime")
        return self

    @property
    def required_ot_hours(self) -> float:
        """Hours after which overtime accrues; the normal-day rule wins."""
        rule = self.overtime_policy.normal_day if self.overtime_policy else None
        if rule is not None and rule.min_hours_for_ot:
            return rule.min_hours_for_ot
        if self.min_hours_for_ot:
            return self.min_hours_for_ot
        return DEFAULT_REQUIRED_HOURS

    @property
    def full_day_hours(self) -> float:
        if self.duration_minutes:
            return self.duration_minutes / 60
        start, end = _minutes(self.start_time), _minutes(self.end_time)
        if start is not None and end is not None and end > start:
            return (end - start) / 60
        return DEFAULT_REQUIRED_HOURS

    def thresholds(self) -> PolicyThresholds:
        late = self.late_arrival_policy or LateArrivalPolicy()
        short = self.short_leave_policy or ShortLeavePolicy()
        start = _minutes(self.start_time)
        grace = _minutes(late.grace_period_until)
        after = _minutes(late.half_day_after)
        before = _minutes(late.half_day_before)
        if after is None or before is None:
            after = before = None
        return PolicyThresholds(
            start=start,
            end=_minutes(self.end_time),
            # No grace period configured: lateness counts from the shift start
            grace_until=grace if grace is not None else start,
            half_day_after=after,
            half_day_before=before,
            full_day_hours=self.full_day_hours,
            required_ot_hours=self.required_ot_hours,
            short_leave_quota=(
                short.max_per_month
                if short.max_per_month is not None
                else DEFAULT_SHORT_LEAVE_QUOTA
            ),
        )


class GroupWorkingHours(PolicyModel):
    """Both group policies, as persisted in the settings file."""

    group_a: Optional[GroupPolicy] = None
    group_b: Optional[GroupPolicy] = None

    def for_group(self, group: Optional[str]) -> Optional[GroupPolicy]:
        if group == EmployeeGroup.group_a.value:
            return self.group_a
        if group == EmployeeGroup.group_b.value:
            return self.group_b
        return None


class GroupWorkingHoursSaved(BaseModel):
    """Response after a policy update."""

    message: str
    settings: GroupWorkingHours


# ── Defaults used when the settings file is absent ──────────────────

DEFAULT_GROUP_WORKING_HOURS: dict[str, Any] = {
    "groupA": {
        "startTime": "08:30",
        "endTime": "16:15",
        "durationMinutes": 465,
        "minHoursForOT": 7.75,
        "lateArrivalPolicy": {
            "gracePeriodUntil": "09:00",
            "halfDayAfter": "10:00",
            "halfDayBefore": "14:45",
        },
        "shortLeavePolicy": {
            "morningStart": "08:30",
            "morningEnd": "10:00",
            "eveningStart": "14:45",
            "eveningEnd": "16:15",
            "maxPerMonth": 2,
            "preApprovalRequired": True,
            "minimumWorkingHoursRequired": True,
        },
    },
    "groupB": {
        "startTime": "08:00",
        "endTime": "16:45",
        "durationMinutes": 525,
        "minHoursForOT": 8.75,
        "lateArrivalPolicy": {
            "gracePeriodUntil": "08:15",
            "halfDayAfter": "09:30",
            "halfDayBefore": "15:15",
            "shortLeaveAllowance": True,
        },
        "shortLeavePolicy": {
            "morningStart": "08:00",
            "morningEnd": "09:30",
            "eveningStart": "15:15",
            "eveningEnd": "16:45",
            "maxPerMonth": 2,
            "preApprovalRequired": True,
        },
    },
}
