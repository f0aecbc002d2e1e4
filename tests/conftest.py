"""Shared test fixtures — async DB, client, policy store, factories.

Uses SQLite + aiosqlite in memory; every test gets fresh tables and its own
policy file under ``tmp_path``.
"""

from __future__ import annotations

import os

# Configure settings before any other import touches pydantic-settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("TIMEZONE", "Asia/Colombo")

import uuid
from datetime import date, datetime, time, timezone
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from hrms.common.constants import (
    EmployeeGroup,
    EmployeeStatus,
    HolidayType,
    LeaveType,
    RequestStatus,
)
from hrms.database import Base, get_db
from hrms.dependencies import get_policy_store
from hrms.main import create_app
from hrms.policy.store import PolicyStore

# Import ALL model modules so SQLAlchemy can resolve cross-module relationships
import hrms.attendance.models  # noqa: F401
import hrms.common.audit  # noqa: F401
import hrms.core_hr.models  # noqa: F401
import hrms.leave.models  # noqa: F401
import hrms.overtime.models  # noqa: F401


# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Policy store ────────────────────────────────────────────────────

@pytest.fixture
def policy_path(tmp_path):
    return tmp_path / "group-working-hours.json"


@pytest.fixture
def policy_store(policy_path) -> PolicyStore:
    return PolicyStore(policy_path)


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(policy_path):
    """Create a fresh app instance with DB and policy dependencies overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    application.dependency_overrides[get_policy_store] = lambda: PolicyStore(policy_path)
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session (for direct DB operations in tests) ────────────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


# ── Model factories ─────────────────────────────────────────────────

def _make_employee(
    *,
    code: str,
    full_name: str = "Test User",
    group: EmployeeGroup = EmployeeGroup.group_a,
    status: EmployeeStatus = EmployeeStatus.active,
) -> dict:
    return dict(
        id=uuid.uuid4(),
        employee_code=code,
        full_name=full_name,
        employee_group=group,
        status=status,
        join_date=date(2023, 1, 2),
        created_at=datetime.now(timezone.utc),
        updated_at=datetime.now(timezone.utc),
    )


def at(day: date, clock: str) -> datetime:
    """Naive local timestamp for "HH:MM" on *day*."""
    return datetime.combine(day, time.fromisoformat(clock))


async def add_employee(db: AsyncSession, **kwargs):
    from hrms.core_hr.models import Employee

    employee = Employee(**_make_employee(**kwargs))
    db.add(employee)
    await db.commit()
    return employee


async def add_attendance(
    db: AsyncSession,
    employee,
    day: date,
    check_in: Optional[str],
    check_out: Optional[str] = None,
):
    from hrms.attendance.models import AttendanceRecord

    record = AttendanceRecord(
        employee_id=employee.id,
        date=day,
        check_in=at(day, check_in) if check_in else None,
        check_out=at(day, check_out) if check_out else None,
    )
    db.add(record)
    await db.commit()
    return record


async def add_leave(
    db: AsyncSession,
    employee,
    start: date,
    end: date,
    status: RequestStatus = RequestStatus.approved,
):
    from hrms.leave.models import LeaveRequest

    leave = LeaveRequest(
        employee_id=employee.id,
        start_date=start,
        end_date=end,
        leave_type=LeaveType.annual,
        status=status,
    )
    db.add(leave)
    await db.commit()
    return leave


async def add_holiday(
    db: AsyncSession,
    day: date,
    name: str = "Poya Day",
    *,
    recurring: bool = False,
):
    from hrms.attendance.models import Holiday

    holiday = Holiday(date=day, name=name, type=HolidayType.annual, is_recurring=recurring)
    db.add(holiday)
    await db.commit()
    return holiday


async def add_overtime_request(
    db: AsyncSession,
    employee,
    day: date,
    hours: float,
    status: RequestStatus = RequestStatus.pending,
):
    from hrms.overtime.models import OvertimeRequest

    req = OvertimeRequest(employee_id=employee.id, date=day, hours=hours, status=status)
    db.add(req)
    await db.commit()
    return req


@pytest.fixture
async def employee_a(db):
    """Active Group A employee (08:30–16:15, grace 09:00)."""
    return await add_employee(db, code="A001", full_name="Amal Perera")


@pytest.fixture
async def employee_b(db):
    """Active Group B employee (08:00–16:45, grace 08:15)."""
    return await add_employee(
        db, code="B001", full_name="Bimali Silva", group=EmployeeGroup.group_b,
    )
