"""Data models for workspace attendance schedules."""

from __future__ import annotations

import datetime
from typing import Optional

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class Category(BaseModel):
    """Workspace-configured attendance option."""

    id: str = Field(..., min_length=1, description="Stable category identifier")
    emoji: str = Field(..., description="Emoji shown before the category name")
    display_name: str = Field(..., description="Human-readable category name")
    is_enabled: bool = Field(default=True, description="Whether the category is shown")

    @property
    def label(self) -> str:
        """Emoji and display name, as shown in selectors."""
        return f"{self.emoji} {self.display_name}"


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="office", emoji="🏢", display_name="Office"),
    Category(id="remote", emoji="🏠", display_name="Remote"),
    Category(id="traveling", emoji="✈️", display_name="Traveling"),
    Category(id="holiday", emoji="🌴", display_name="Holiday"),
)


def _default_categories() -> list[Category]:
    return [category.model_copy() for category in DEFAULT_CATEGORIES]


class WorkspaceSettings(BaseModel):
    """Per-workspace office details and attendance categories."""

    office_name: str = Field(default="Office", description="Shown as the home tab header")
    office_address: str = Field(default="", description="Shown under the office name")
    categories: list[Category] = Field(default_factory=_default_categories)

    @field_validator("categories")
    @classmethod
    def _unique_category_ids(cls, categories: list[Category]) -> list[Category]:
        seen: set[str] = set()
        for category in categories:
            if category.id in seen:
                raise ValueError(f"Duplicate category id: {category.id}")
            seen.add(category.id)
        return categories

    @property
    def enabled_categories(self) -> list[Category]:
        """Enabled categories in configured order."""
        return [c for c in self.categories if c.is_enabled]

    def get_category(self, category_id: str) -> Optional[Category]:
        """Return the category with the given id, enabled or not."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None


class Attendee(BaseModel):
    """A user's attendance status for one day."""

    user_id: str
    status: str


class DaySchedule(BaseModel):
    """Attendance record for a single calendar day."""

    year: int
    month: int = Field(..., ge=1, le=12)
    date: int = Field(..., ge=1, le=31)
    attendees: list[Attendee] = Field(default_factory=list)

    @property
    def calendar_date(self) -> datetime.date:
        """The day as a ``datetime.date``."""
        return datetime.date(self.year, self.month, self.date)

    @classmethod
    def for_date(cls, day: datetime.date) -> DaySchedule:
        """Create an empty schedule for ``day``."""
        return cls(year=day.year, month=day.month, date=day.day)


# week index -> day name -> day record
WeekSchedule = dict[str, DaySchedule]
MonthSchedule = dict[int, WeekSchedule]

month_schedule_adapter: TypeAdapter[MonthSchedule] = TypeAdapter(MonthSchedule)
