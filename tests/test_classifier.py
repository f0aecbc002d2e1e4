"""Attendance classifier tests — status precedence, flags, anomalies, fallbacks.

Pure function tests: no database, default group policies.
"""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from hrms.attendance.classifier import (
    classify_day,
    measure_worked_hours,
    minutes_of_day,
    to_local,
)
from hrms.common.constants import AttendanceAnomaly, DailyStatus
from hrms.policy.schemas import (
    DEFAULT_GROUP_WORKING_HOURS,
    GroupPolicy,
    GroupWorkingHours,
)
from tests.conftest import at

MONDAY = date(2024, 3, 4)


@pytest.fixture
def group_a() -> GroupPolicy:
    return GroupWorkingHours.model_validate(DEFAULT_GROUP_WORKING_HOURS).group_a


@pytest.fixture
def group_b() -> GroupPolicy:
    return GroupWorkingHours.model_validate(DEFAULT_GROUP_WORKING_HOURS).group_b


def _classify(policy, check_in, check_out=None, **kwargs):
    return classify_day(
        at(MONDAY, check_in) if check_in else None,
        at(MONDAY, check_out) if check_out else None,
        policy,
        **kwargs,
    )


# ═════════════════════════════════════════════════════════════════════
# STATUS PRECEDENCE
# ═════════════════════════════════════════════════════════════════════


class TestGroupAStatus:
    """Group A: grace 09:00, half-day window 10:00–14:45, 7.75 h day."""

    def test_on_time_is_present(self, group_a):
        result = _classify(group_a, "08:45", "17:00")
        assert result.status == DailyStatus.present
        assert result.is_late is False
        assert result.late_minutes == 0
        assert result.worked_hours == pytest.approx(8.25)

    def test_arrival_at_grace_boundary_is_on_time(self, group_a):
        result = _classify(group_a, "09:00", "17:00")
        assert result.status == DailyStatus.present
        assert result.late_minutes == 0

    def test_after_grace_is_late(self, group_a):
        result = _classify(group_a, "09:15", "17:00")
        assert result.status == DailyStatus.late
        assert result.is_late is True
        assert result.is_half_day is False
        assert result.late_minutes == 15

    def test_before_half_day_window_is_late_not_half_day(self, group_a):
        result = _classify(group_a, "09:30", "16:15")
        assert result.status == DailyStatus.late
        assert result.is_half_day is False

    def test_window_bounds_are_exclusive(self, group_a):
        assert _classify(group_a, "10:00").status == DailyStatus.late
        assert _classify(group_a, "14:45").status == DailyStatus.late

    def test_inside_half_day_window_is_half_day(self, group_a):
        result = _classify(group_a, "10:30", "16:15")
        assert result.status == DailyStatus.half_day
        assert result.is_half_day is True
        assert result.is_late is True
        assert result.late_minutes == 90
        assert result.on_short_leave is False

    def test_no_check_in_is_absent(self, group_a):
        result = _classify(group_a, None)
        assert result.status == DailyStatus.absent
        assert result.is_absent is True
        assert result.worked_hours is None

    def test_missing_check_out_leaves_hours_unknown(self, group_a):
        result = _classify(group_a, "08:40")
        assert result.status == DailyStatus.present
        assert result.worked_hours is None
        assert result.out_time is None

    def test_partial_day_is_short_leave(self, group_a):
        result = _classify(group_a, "08:30", "14:00")
        assert result.status == DailyStatus.short_leave
        assert result.on_short_leave is True
        assert result.worked_hours == pytest.approx(5.5)

    def test_less_than_half_day_worked_is_not_short_leave(self, group_a):
        result = _classify(group_a, "08:30", "10:00")
        assert result.status == DailyStatus.present
        assert result.on_short_leave is False

    def test_late_arrival_never_becomes_short_leave(self, group_a):
        result = _classify(group_a, "09:30", "14:00")
        assert result.status == DailyStatus.late
        assert result.on_short_leave is False


class TestGroupBStatus:
    def test_group_b_grace_is_earlier(self, group_b):
        result = _classify(group_b, "08:20", "17:00")
        assert result.status == DailyStatus.late
        assert result.late_minutes == 5

    def test_group_b_half_day_window(self, group_b):
        assert _classify(group_b, "09:45").status == DailyStatus.half_day


class TestOverridingStatuses:
    def test_holiday_wins_over_everything(self, group_a):
        result = _classify(
            group_a, "11:00", "15:00", is_holiday=True, on_approved_leave=True,
        )
        assert result.status == DailyStatus.holiday
        assert not (result.is_late or result.is_half_day or result.on_short_leave)
        assert result.is_absent is False

    def test_holiday_still_measures_worked_hours(self, group_a):
        result = _classify(group_a, "09:00", "13:00", is_holiday=True)
        assert result.worked_hours == pytest.approx(4.0)
        assert result.in_time is not None

    def test_approved_leave_ignores_stray_attendance(self, group_a):
        result = _classify(group_a, "10:30", "16:15", on_approved_leave=True)
        assert result.status == DailyStatus.on_leave
        assert result.worked_hours is None
        assert not (result.is_late or result.is_half_day or result.on_short_leave)

    @pytest.mark.parametrize(
        "check_in, check_out",
        [("08:45", "17:00"), ("09:15", "17:00"), ("10:30", "16:15"),
         ("08:30", "14:00"), (None, None)],
    )
    def test_exactly_one_status(self, group_a, check_in, check_out):
        result = _classify(group_a, check_in, check_out)
        flags = {
            DailyStatus.half_day: result.is_half_day,
            DailyStatus.short_leave: result.on_short_leave,
            DailyStatus.absent: result.is_absent,
        }
        for status, flag in flags.items():
            assert flag == (result.status == status)


# ═════════════════════════════════════════════════════════════════════
# ANOMALIES
# ═════════════════════════════════════════════════════════════════════


class TestAnomalies:
    def test_checkout_before_checkin_counts_zero(self, group_a, caplog):
        result = _classify(group_a, "09:00", "08:00")
        assert result.worked_hours == 0.0
        assert result.anomaly == AttendanceAnomaly.checkout_before_checkin
        assert "AnomalyWarning" in caplog.text

    def test_pair_spanning_midnight_is_clipped(self, group_a):
        check_in = datetime(2024, 3, 4, 20, 0)
        check_out = datetime(2024, 3, 5, 2, 0)
        result = classify_day(check_in, check_out, group_a)
        assert result.anomaly == AttendanceAnomaly.spans_midnight
        assert result.worked_hours == pytest.approx(4.0)
        assert result.status == DailyStatus.late

    def test_measure_without_pair(self):
        assert measure_worked_hours(None, None) == (None, None)


# ═════════════════════════════════════════════════════════════════════
# POLICY FALLBACKS
# ═════════════════════════════════════════════════════════════════════


class TestFallbacks:
    def test_no_grace_period_counts_from_start(self):
        policy = GroupPolicy.model_validate({"startTime": "08:30", "endTime": "16:30"})
        result = _classify(policy, "08:31")
        assert result.status == DailyStatus.late
        assert result.late_minutes == 1

    def test_no_policy_means_no_lateness(self):
        result = _classify(None, "11:00")
        assert result.status == DailyStatus.present
        assert result.late_minutes == 0

    def test_half_day_window_needs_both_bounds(self):
        policy = GroupPolicy.model_validate(
            {"lateArrivalPolicy": {"gracePeriodUntil": "09:00", "halfDayAfter": "10:00"}}
        )
        result = _classify(policy, "10:30")
        assert result.status == DailyStatus.late
        assert result.is_half_day is False

    def test_malformed_field_degrades_to_fallback(self):
        policy = GroupPolicy.model_validate(
            {"startTime": "8h30", "lateArrivalPolicy": {"gracePeriodUntil": "09:00"}}
        )
        assert policy.start_time is None
        assert _classify(policy, "09:10").status == DailyStatus.late

    def test_full_day_defaults_to_eight_hours(self):
        policy = GroupPolicy.model_validate({})
        # 5 h is above half of 8 h and below 8 h
        assert _classify(policy, "08:00", "13:00").status == DailyStatus.short_leave


# ═════════════════════════════════════════════════════════════════════
# TIME HELPERS
# ═════════════════════════════════════════════════════════════════════


class TestTimeHelpers:
    def test_aware_timestamp_converted_to_local(self):
        # Asia/Colombo is UTC+05:30
        local = to_local(datetime(2024, 3, 4, 3, 0, tzinfo=timezone.utc))
        assert local == datetime(2024, 3, 4, 8, 30)
        assert local.tzinfo is None

    def test_naive_timestamp_passes_through(self):
        value = datetime(2024, 3, 4, 8, 30)
        assert to_local(value) is value

    def test_minutes_of_day(self):
        assert minutes_of_day(datetime(2024, 3, 4, 14, 45)) == 885
