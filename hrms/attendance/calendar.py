"""Working calendar: weekly off-days plus the Holiday table."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrms.attendance.models import Holiday
from hrms.config import settings


class WorkingCalendar:
    """Answers whether a date is a working day.

    Explicit holidays match by exact date; recurring holidays match the same
    month and day in any year. Weekday numbers follow ``date.weekday()``
    (0 = Monday).
    """

    def __init__(
        self,
        holidays: Iterable[Holiday] = (),
        weekly_off_days: Optional[Iterable[int]] = None,
    ) -> None:
        self.weekly_off_days = frozenset(
            settings.weekly_off_days if weekly_off_days is None else weekly_off_days
        )
        self._by_date: dict[date, Holiday] = {}
        self._recurring: dict[tuple[int, int], Holiday] = {}
        for holiday in holidays:
            if holiday.is_recurring:
                self._recurring[(holiday.date.month, holiday.date.day)] = holiday
            else:
                self._by_date[holiday.date] = holiday

    @classmethod
    async def load(
        cls,
        db: AsyncSession,
        start: date,
        end: date,
    ) -> WorkingCalendar:
        """Build a calendar holding every holiday relevant to [start, end]."""
        result = await db.execute(
            select(Holiday).where(
                or_(
                    Holiday.date.between(start, end),
                    Holiday.is_recurring.is_(True),
                )
            )
        )
        return cls(result.scalars().all())

    def holiday_on(self, day: date) -> Optional[Holiday]:
        return self._by_date.get(day) or self._recurring.get((day.month, day.day))

    def is_weekly_off(self, day: date) -> bool:
        return day.weekday() in self.weekly_off_days

    def is_non_working_day(self, day: date) -> bool:
        return self.is_weekly_off(day) or self.holiday_on(day) is not None
