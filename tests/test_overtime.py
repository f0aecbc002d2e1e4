"""Overtime test suite — calculator, eligibility queue, decisions, request review.

Tests exercise the pure calculator, the service layer (direct DB) and the
HTTP API (via router).
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlalchemy import select

from hrms.common.audit import AuditTrail
from hrms.common.constants import (
    GroupFilter,
    OvertimeApprovalStatus,
    OvertimeDecision,
    RequestStatus,
)
from hrms.common.exceptions import (
    ConflictError,
    NotFoundException,
    ValidationException,
)
from hrms.overtime.calculator import calculate_overtime, is_eligible
from hrms.overtime.models import OvertimeRequest
from hrms.overtime.schemas import (
    OvertimeDecisionCreate,
    OvertimeRequestCreate,
    OvertimeReview,
)
from hrms.overtime.service import OvertimeService
from hrms.policy.schemas import DEFAULT_GROUP_WORKING_HOURS, GroupPolicy, GroupWorkingHours
from tests.conftest import add_attendance, add_overtime_request

MONDAY = date(2024, 3, 4)


@pytest.fixture
def group_a() -> GroupPolicy:
    return GroupWorkingHours.model_validate(DEFAULT_GROUP_WORKING_HOURS).group_a


# ═════════════════════════════════════════════════════════════════════
# 1. CALCULATOR
# ═════════════════════════════════════════════════════════════════════


class TestCalculateOvertime:
    def test_hours_beyond_required(self, group_a):
        result = calculate_overtime(8.5, group_a)
        assert result.required_hours == 7.75
        assert result.calculated == pytest.approx(0.75)
        assert result.approval_status == OvertimeApprovalStatus.pending
        assert result.override is None

    def test_never_negative(self, group_a):
        result = calculate_overtime(6.0, group_a)
        assert result.calculated == 0.0
        assert result.approval_status is None

    def test_unknown_worked_hours_counts_zero(self, group_a):
        result = calculate_overtime(None, group_a)
        assert result.actual_hours == 0.0
        assert result.calculated == 0.0

    def test_missing_policy_requires_eight_hours(self):
        assert calculate_overtime(9.0, None).calculated == pytest.approx(1.0)

    def test_normal_day_rule_takes_precedence(self):
        policy = GroupPolicy.model_validate(
            {"minHoursForOT": 7.75, "overtimePolicy": {"normalDay": {"minHoursForOT": 9}}}
        )
        assert calculate_overtime(9.5, policy).required_hours == 9

    def test_non_positive_threshold_falls_back(self):
        policy = GroupPolicy.model_validate({"minHoursForOT": 0})
        assert calculate_overtime(9.0, policy).required_hours == 8.0

    def test_approved_request_overrides_display_value(self, group_a):
        request = OvertimeRequest(hours=1.0, status=RequestStatus.approved)
        result = calculate_overtime(8.5, group_a, request)
        assert result.calculated == pytest.approx(0.75)
        assert result.override.value == 1.0
        assert result.effective_hours == 1.0
        assert result.approval_status == OvertimeApprovalStatus.approved

    def test_rejected_request_keeps_calculated_value(self, group_a):
        request = OvertimeRequest(hours=2.0, status=RequestStatus.rejected)
        result = calculate_overtime(8.5, group_a, request)
        assert result.effective_hours == pytest.approx(0.75)
        assert result.approval_status == OvertimeApprovalStatus.rejected

    def test_request_on_day_without_overtime_still_surfaces(self, group_a):
        request = OvertimeRequest(hours=1.0, status=RequestStatus.pending)
        result = calculate_overtime(7.0, group_a, request)
        assert result.approval_status == OvertimeApprovalStatus.pending

    def test_eligibility(self, group_a):
        assert is_eligible(8.5, group_a) is True
        assert is_eligible(7.0, group_a) is False
        request = OvertimeRequest(hours=0.75, status=RequestStatus.rejected)
        assert is_eligible(8.5, group_a, request) is False


# ═════════════════════════════════════════════════════════════════════
# 2. ELIGIBILITY & DECISIONS — Service Layer
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_eligible_lists_only_overtime_days(db, policy_store, employee_a, employee_b):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")
    await add_attendance(db, employee_b, MONDAY, "08:00", "16:45")

    items = await OvertimeService.get_eligible(db, policy_store, MONDAY)

    assert [i.employee_id for i in items] == ["A001"]
    assert items[0].ot_hours == pytest.approx(0.75)
    assert items[0].actual_hours == pytest.approx(8.5)


@pytest.mark.asyncio
async def test_eligible_honours_group_filter(db, policy_store, employee_a, employee_b):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")
    await add_attendance(db, employee_b, MONDAY, "08:00", "18:00")

    items = await OvertimeService.get_eligible(
        db, policy_store, MONDAY, group=GroupFilter.group_b,
    )
    assert [i.employee_id for i in items] == ["B001"]


@pytest.mark.asyncio
async def test_decision_removes_day_from_queue(db, policy_store, employee_a):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")

    resp = await OvertimeService.decide(
        db,
        policy_store,
        OvertimeDecisionCreate(
            employee_id="A001", date=MONDAY, status=OvertimeDecision.approved,
            reviewed_by="hr.manager",
        ),
    )

    assert resp.status == RequestStatus.approved
    assert resp.hours == pytest.approx(0.75)
    assert await OvertimeService.get_eligible(db, policy_store, MONDAY) == []


@pytest.mark.asyncio
async def test_rejection_also_removes_day_from_queue(db, policy_store, employee_a):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")

    await OvertimeService.decide(
        db,
        policy_store,
        OvertimeDecisionCreate(employee_id="A001", date=MONDAY, status="rejected"),
    )
    assert await OvertimeService.get_eligible(db, policy_store, MONDAY) == []


@pytest.mark.asyncio
async def test_second_decision_conflicts(db, policy_store, employee_a):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")
    data = OvertimeDecisionCreate(employee_id="A001", date=MONDAY, status="approved")
    await OvertimeService.decide(db, policy_store, data)

    with pytest.raises(ConflictError):
        await OvertimeService.decide(db, policy_store, data)


@pytest.mark.asyncio
async def test_decision_writes_audit_entry(db, policy_store, employee_a):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")
    resp = await OvertimeService.decide(
        db,
        policy_store,
        OvertimeDecisionCreate(
            employee_id="A001", date=MONDAY, status="approved", reviewed_by="hr.manager",
        ),
    )

    entry = (await db.execute(select(AuditTrail))).scalars().one()
    assert entry.action == "approve"
    assert entry.entity_id == str(resp.id)
    assert entry.actor == "hr.manager"


@pytest.mark.asyncio
async def test_decision_without_overtime_needs_explicit_hours(db, policy_store, employee_a):
    await add_attendance(db, employee_a, MONDAY, "08:30", "16:00")

    with pytest.raises(ValidationException):
        await OvertimeService.decide(
            db,
            policy_store,
            OvertimeDecisionCreate(employee_id="A001", date=MONDAY, status="approved"),
        )

    resp = await OvertimeService.decide(
        db,
        policy_store,
        OvertimeDecisionCreate(
            employee_id="A001", date=MONDAY, status="approved", hours=1.5,
        ),
    )
    assert resp.hours == 1.5


@pytest.mark.asyncio
async def test_decision_for_unknown_employee(db, policy_store):
    with pytest.raises(NotFoundException):
        await OvertimeService.decide(
            db,
            policy_store,
            OvertimeDecisionCreate(employee_id="X999", date=MONDAY, status="approved"),
        )


# ═════════════════════════════════════════════════════════════════════
# 3. REQUESTS — Service Layer
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_submit_and_approve_request(db, employee_a):
    created = await OvertimeService.submit_request(
        db, OvertimeRequestCreate(employee_id="A001", date=MONDAY, hours=2, reason="Audit"),
    )
    assert created.status == RequestStatus.pending

    approved = await OvertimeService.review_request(
        db, created.id, OvertimeDecision.approved, OvertimeReview(reviewed_by="lead"),
    )
    assert approved.status == RequestStatus.approved
    assert approved.reviewed_by == "lead"
    assert approved.reviewed_at is not None


@pytest.mark.asyncio
async def test_reviewing_decided_request_fails(db, employee_a):
    req = await add_overtime_request(
        db, employee_a, MONDAY, 1.0, status=RequestStatus.rejected,
    )
    with pytest.raises(ValidationException):
        await OvertimeService.review_request(
            db, req.id, OvertimeDecision.approved, OvertimeReview(),
        )


@pytest.mark.asyncio
async def test_review_missing_request(db):
    with pytest.raises(NotFoundException):
        await OvertimeService.review_request(
            db, 404, OvertimeDecision.rejected, OvertimeReview(),
        )


@pytest.mark.asyncio
async def test_duplicate_submission_conflicts(db, employee_a):
    await add_overtime_request(db, employee_a, MONDAY, 1.0)
    with pytest.raises(ConflictError):
        await OvertimeService.submit_request(
            db, OvertimeRequestCreate(employee_id="A001", date=MONDAY, hours=1),
        )


@pytest.mark.asyncio
async def test_list_requests_filters_by_status(db, employee_a, employee_b):
    await add_overtime_request(db, employee_a, MONDAY, 1.0)
    await add_overtime_request(db, employee_b, MONDAY, 2.0, status=RequestStatus.approved)

    pending = await OvertimeService.list_requests(db, status=RequestStatus.pending)
    assert [r.employee_id for r in pending] == ["A001"]

    everything = await OvertimeService.list_requests(db)
    assert len(everything) == 2


# ═════════════════════════════════════════════════════════════════════
# 4. HTTP API
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_api_eligible_and_decide(client, db, employee_a):
    await add_attendance(db, employee_a, MONDAY, "08:30", "17:00")

    resp = await client.get("/api/v1/overtime/eligible", params={"date": "2024-03-04"})
    assert resp.status_code == 200
    body = resp.json()
    assert body[0]["employeeId"] == "A001"
    assert body[0]["otHours"] == 0.75
    assert body[0]["inTime"] == "08:30"

    payload = {"employeeId": "A001", "date": "2024-03-04", "status": "approved"}
    resp = await client.post("/api/v1/overtime/decisions", json=payload)
    assert resp.status_code == 201
    assert resp.json()["status"] == "approved"

    resp = await client.post("/api/v1/overtime/decisions", json=payload)
    assert resp.status_code == 409
    assert resp.headers["content-type"].startswith("application/problem+json")
    assert resp.json()["type"] == "/errors/conflict"

    resp = await client.get("/api/v1/overtime/eligible", params={"date": "2024-03-04"})
    assert resp.json() == []


@pytest.mark.asyncio
async def test_api_request_lifecycle(client, employee_a):
    resp = await client.post(
        "/api/v1/overtime/requests",
        json={"employeeId": "A001", "date": "2024-03-04", "hours": 1.25},
    )
    assert resp.status_code == 201
    request_id = resp.json()["id"]

    resp = await client.put(
        f"/api/v1/overtime/requests/{request_id}/reject",
        json={"comments": "Not pre-approved"},
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "rejected"
    assert resp.json()["comments"] == "Not pre-approved"

    resp = await client.put(f"/api/v1/overtime/requests/{request_id}/approve")
    assert resp.status_code == 422

    resp = await client.get("/api/v1/overtime/requests", params={"status": "rejected"})
    assert [r["id"] for r in resp.json()] == [request_id]


@pytest.mark.asyncio
async def test_api_rejects_invalid_decision_status(client, employee_a):
    resp = await client.post(
        "/api/v1/overtime/decisions",
        json={"employeeId": "A001", "date": "2024-03-04", "status": "pending"},
    )
    assert resp.status_code == 422
    assert resp.json()["type"] == "/errors/validation-error"
