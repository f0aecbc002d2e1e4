"""Attendance module test suite — attendance upsert and holiday calendar.

Tests exercise both the service layer (direct DB) and the HTTP API (via router).
"""

from __future__ import annotations

from datetime import date, datetime

import pytest
from sqlalchemy import select

from hrms.attendance.models import AttendanceRecord
from hrms.attendance.schemas import AttendanceEntry
from hrms.attendance.service import AttendanceService
from hrms.common.exceptions import NotFoundException, ValidationException

MONDAY = date(2024, 3, 4)


# ═════════════════════════════════════════════════════════════════════
# 1. ATTENDANCE UPSERT — Service Layer
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_upsert_creates_then_updates(db, employee_a):
    created = await AttendanceService.upsert_attendance(
        db,
        AttendanceEntry(
            employee_id="A001", date=MONDAY, check_in=datetime(2024, 3, 4, 8, 30),
        ),
    )
    assert created.created is True
    assert created.working_hours is None

    updated = await AttendanceService.upsert_attendance(
        db,
        AttendanceEntry(
            employee_id="A001",
            date=MONDAY,
            check_in=datetime(2024, 3, 4, 8, 30),
            check_out=datetime(2024, 3, 4, 17, 0),
            source="biometric",
        ),
    )
    assert updated.created is False
    assert updated.id == created.id
    assert updated.working_hours == pytest.approx(8.5)

    rows = (await db.execute(select(AttendanceRecord))).scalars().all()
    assert len(rows) == 1
    assert rows[0].source == "biometric"


@pytest.mark.asyncio
async def test_upsert_flags_checkout_before_checkin(db, employee_a):
    resp = await AttendanceService.upsert_attendance(
        db,
        AttendanceEntry(
            employee_id="A001",
            date=MONDAY,
            check_in=datetime(2024, 3, 4, 17, 0),
            check_out=datetime(2024, 3, 4, 8, 0),
        ),
    )
    assert resp.working_hours == 0.0
    assert resp.anomaly == "checkout_before_checkin"


@pytest.mark.asyncio
async def test_upsert_rejects_checkout_without_checkin(db, employee_a):
    with pytest.raises(ValidationException):
        await AttendanceService.upsert_attendance(
            db,
            AttendanceEntry(
                employee_id="A001", date=MONDAY, check_out=datetime(2024, 3, 4, 17, 0),
            ),
        )


@pytest.mark.asyncio
async def test_upsert_rejects_checkin_on_other_day(db, employee_a):
    with pytest.raises(ValidationException):
        await AttendanceService.upsert_attendance(
            db,
            AttendanceEntry(
                employee_id="A001", date=MONDAY, check_in=datetime(2024, 3, 5, 8, 30),
            ),
        )


@pytest.mark.asyncio
async def test_upsert_unknown_employee(db):
    with pytest.raises(NotFoundException):
        await AttendanceService.upsert_attendance(
            db, AttendanceEntry(employee_id="Z999", date=MONDAY),
        )


# ═════════════════════════════════════════════════════════════════════
# 2. ATTENDANCE — HTTP API
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_api_device_sync_converts_to_local_time(client, employee_a):
    resp = await client.post(
        "/api/v1/attendance",
        json={
            "employeeId": "A001",
            "date": "2024-03-04",
            "checkIn": "2024-03-04T03:00:00Z",
            "checkOut": "2024-03-04T11:30:00+00:00",
            "source": "biometric",
        },
    )

    assert resp.status_code == 201
    body = resp.json()
    assert body["checkIn"] == "2024-03-04T08:30:00"
    assert body["checkOut"] == "2024-03-04T17:00:00"
    assert body["workingHours"] == 8.5

    resp = await client.post(
        "/api/v1/attendance",
        json={"employeeId": "A001", "date": "2024-03-04", "checkIn": "2024-03-04T08:40:00"},
    )
    assert resp.status_code == 200
    assert resp.json()["created"] is False


@pytest.mark.asyncio
async def test_api_attendance_feeds_reports(client, employee_a):
    await client.post(
        "/api/v1/attendance",
        json={
            "employeeId": "A001",
            "date": "2024-03-04",
            "checkIn": "2024-03-04T09:20:00",
            "checkOut": "2024-03-04T17:30:00",
        },
    )

    resp = await client.get("/api/v1/reports/daily-attendance", params={"date": "2024-03-04"})
    (row,) = resp.json()
    assert row["status"] == "Late"
    assert row["lateMinutes"] == 20


# ═════════════════════════════════════════════════════════════════════
# 3. HOLIDAYS — HTTP API
# ═════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_holiday_crud(client):
    resp = await client.post(
        "/api/v1/holidays",
        json={"date": "2024-04-13", "name": "Sinhala and Tamil New Year", "type": "annual"},
    )
    assert resp.status_code == 201
    holiday = resp.json()
    assert holiday["isRecurring"] is False

    resp = await client.post(
        "/api/v1/holidays", json={"date": "2024-04-13", "name": "Duplicate"},
    )
    assert resp.status_code == 409

    resp = await client.get("/api/v1/holidays", params={"year": 2024})
    assert [h["name"] for h in resp.json()] == ["Sinhala and Tamil New Year"]

    resp = await client.delete(f"/api/v1/holidays/{holiday['id']}")
    assert resp.status_code == 204

    resp = await client.delete(f"/api/v1/holidays/{holiday['id']}")
    assert resp.status_code == 404
    assert resp.json()["type"] == "/errors/not-found"


@pytest.mark.asyncio
async def test_recurring_holiday_listed_for_any_year(client):
    await client.post(
        "/api/v1/holidays",
        json={"date": "2020-02-04", "name": "Independence Day", "isRecurring": True},
    )
    await client.post("/api/v1/holidays", json={"date": "2023-05-05", "name": "Vesak"})

    resp = await client.get("/api/v1/holidays", params={"year": 2024})
    assert [h["name"] for h in resp.json()] == ["Independence Day"]


@pytest.mark.asyncio
async def test_holiday_marks_report_day(client, employee_a):
    await client.post("/api/v1/holidays", json={"date": "2024-03-04", "name": "Poya Day"})

    resp = await client.get("/api/v1/reports/daily-attendance", params={"date": "2024-03-04"})
    (row,) = resp.json()
    assert row["status"] == "Holiday"
    assert row["isAbsent"] is False


@pytest.mark.asyncio
async def test_holiday_update(client, employee_a):
    resp = await client.post("/api/v1/holidays", json={"date": "2024-03-04", "name": "Poya"})
    holiday_id = resp.json()["id"]
    await client.post("/api/v1/holidays", json={"date": "2024-03-06", "name": "Special"})

    resp = await client.put(
        f"/api/v1/holidays/{holiday_id}",
        json={"date": "2024-03-05", "name": "Medin Full Moon Poya Day"},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["date"] == "2024-03-05"
    assert body["name"] == "Medin Full Moon Poya Day"
    assert body["type"] == "annual"

    resp = await client.get(
        "/api/v1/reports/daily-attendance",
        params={"startDate": "2024-03-04", "endDate": "2024-03-05"},
    )
    assert [r["status"] for r in resp.json()] == ["Absent", "Holiday"]

    resp = await client.put(f"/api/v1/holidays/{holiday_id}", json={"date": "2024-03-06"})
    assert resp.status_code == 409
    assert resp.json()["errors"] == {"date": ["'2024-03-06' is already in use."]}

    resp = await client.put(f"/api/v1/holidays/{holiday_id}", json={"name": None})
    assert resp.status_code == 422
    assert "name" in resp.json()["errors"]

    resp = await client.put("/api/v1/holidays/999", json={"name": "Missing"})
    assert resp.status_code == 404
