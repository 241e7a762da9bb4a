"""JSON-backed workspace store for schedules and settings with atomic writes.

On-disk format::

    {"workspaces": {"<team_id>": {"settings": {...}, "schedule": {"0": {"Monday": {...}}}}}}

Readers receive deep copies, so rendering never mutates stored state.
"""

from __future__ import annotations

import contextlib
import datetime
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from officebot.core.timezone_utils import today_local
from officebot.domain.exceptions import ScheduleNotFoundError
from officebot.domain.models import (
    DaySchedule,
    MonthSchedule,
    WorkspaceSettings,
    month_schedule_adapter,
)
from officebot.domain.schedule import (
    create_month_schedule,
    roll_schedule_forward,
    set_attendee_status,
)

logger = logging.getLogger(__name__)


def _copy_schedule(schedule: MonthSchedule) -> MonthSchedule:
    return {
        week: {day: record.model_copy(deep=True) for day, record in days.items()}
        for week, days in schedule.items()
    }


class WorkspaceStore:
    """Persistent per-workspace schedules and settings.

    All public methods are safe to call from the event loop thread and from
    worker threads.
    """

    def __init__(
        self, path: str | Path, default_settings: Optional[dict[str, Any]] = None
    ) -> None:
        """Create a WorkspaceStore.

        Args:
            path: JSON file to read and write
            default_settings: Settings mapping applied to workspaces with none saved
        """
        self._path = Path(path)
        self._lock = threading.Lock()
        self._settings: dict[str, WorkspaceSettings] = {}
        self._schedules: dict[str, MonthSchedule] = {}
        self._defaults = self._build_defaults(default_settings)

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.debug("Could not ensure directory for workspace store: %s", self._path.parent)

        self.load()

    @staticmethod
    def _build_defaults(default_settings: Optional[dict[str, Any]]) -> WorkspaceSettings:
        if not default_settings:
            return WorkspaceSettings()
        try:
            return WorkspaceSettings.model_validate(default_settings)
        except ValidationError as e:
            logger.warning("Invalid default workspace settings, using built-ins: %s", e)
            return WorkspaceSettings()

    def load(self) -> None:
        """Load JSON from disk, skipping malformed workspaces.

        Idempotent; a missing or unreadable file leaves the store empty.
        """
        with self._lock:
            self._settings = {}
            self._schedules = {}

            if not self._path.exists():
                logger.debug("Workspace store file not found; starting empty: %s", self._path)
                return

            try:
                with self._path.open("r", encoding="utf-8") as fh:
                    data = json.load(fh)
                workspaces = data.get("workspaces", {})
                if not isinstance(workspaces, dict):
                    raise ValueError("'workspaces' must be an object")
            except (OSError, ValueError, AttributeError) as exc:
                logger.warning("Failed to read workspace store %s: %s", self._path, exc)
                return

            for team_id, entry in workspaces.items():
                try:
                    if entry.get("settings") is not None:
                        self._settings[team_id] = WorkspaceSettings.model_validate(
                            entry["settings"]
                        )
                    if entry.get("schedule") is not None:
                        self._schedules[team_id] = month_schedule_adapter.validate_python(
                            entry["schedule"]
                        )
                except (ValidationError, AttributeError) as exc:
                    logger.warning("Skipping malformed workspace %s: %s", team_id, exc)

            logger.info(
                "Initialized workspace store with %d workspace schedules", len(self._schedules)
            )

    def _persist(self) -> None:
        """Write the store atomically via a temp file and ``os.replace``.

        Caller must hold the lock.
        """
        workspaces: dict[str, dict[str, Any]] = {}
        for team_id in set(self._settings) | set(self._schedules):
            entry: dict[str, Any] = {}
            if team_id in self._settings:
                entry["settings"] = self._settings[team_id].model_dump(mode="json")
            if team_id in self._schedules:
                entry["schedule"] = month_schedule_adapter.dump_python(
                    self._schedules[team_id], mode="json"
                )
            workspaces[team_id] = entry

        fd, tmp_path = tempfile.mkstemp(
            prefix=".workspaces.", suffix=".tmp", dir=str(self._path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump({"workspaces": workspaces}, fh, ensure_ascii=False, indent=2)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_path, self._path)
        except OSError:
            with contextlib.suppress(OSError):
                os.unlink(tmp_path)
            raise

    def workspace_ids(self) -> list[str]:
        with self._lock:
            return sorted(set(self._settings) | set(self._schedules))

    def get_settings(self, team_id: str) -> WorkspaceSettings:
        """Saved settings for ``team_id``, or a copy of the defaults."""
        with self._lock:
            settings = self._settings.get(team_id, self._defaults)
            return settings.model_copy(deep=True)

    def save_settings(self, team_id: str, settings: WorkspaceSettings) -> None:
        with self._lock:
            self._settings[team_id] = settings.model_copy(deep=True)
            self._persist()
        logger.info("Saved settings for workspace %s", team_id)

    def get_schedule(self, team_id: str) -> Optional[MonthSchedule]:
        """Snapshot of the schedule for ``team_id``, or None if it has none."""
        with self._lock:
            schedule = self._schedules.get(team_id)
            return _copy_schedule(schedule) if schedule is not None else None

    def require_schedule(
        self, team_id: str, today: Optional[datetime.date] = None
    ) -> MonthSchedule:
        """Existing schedule for ``team_id``, rolled forward to the current week.

        Never creates a schedule.

        Raises:
            ScheduleNotFoundError: If no schedule exists for ``team_id``
        """
        today = today or today_local()
        with self._lock:
            schedule = self._schedules.get(team_id)
            if schedule is None:
                raise ScheduleNotFoundError(f"No schedule for workspace {team_id}")
            return _copy_schedule(self._roll_forward(team_id, schedule, today))

    def _roll_forward(
        self, team_id: str, schedule: MonthSchedule, today: datetime.date
    ) -> MonthSchedule:
        """Shift a stored schedule to the current week, persisting if it moved.

        Caller must hold the lock.
        """
        rolled = roll_schedule_forward(schedule, today)
        if rolled is None:
            return schedule
        logger.info("Rolling schedule for workspace %s forward to %s", team_id, today)
        self._schedules[team_id] = rolled
        self._persist()
        return rolled

    def ensure_schedule(
        self, team_id: str, today: Optional[datetime.date] = None
    ) -> MonthSchedule:
        """Return the workspace schedule, creating or rolling it forward as needed.

        A new schedule starts at the current week. Once a new week begins,
        the schedule is shifted so week 0 is again the current week; statuses
        already recorded for current and future weeks are kept.
        """
        today = today or today_local()
        with self._lock:
            schedule = self._schedules.get(team_id)
            if schedule is not None:
                return _copy_schedule(self._roll_forward(team_id, schedule, today))

            logger.info("Creating schedule for workspace %s starting %s", team_id, today)
            schedule = create_month_schedule(today)
            self._schedules[team_id] = schedule
            self._persist()
            return _copy_schedule(schedule)

    def set_status(
        self, team_id: str, week: int, day: str, user_id: str, category_id: str
    ) -> DaySchedule:
        """Record a user's status for a day and persist it.

        Raises:
            ScheduleNotFoundError: If the workspace has no schedule
            InvalidActionError: If the week, day or category is unknown
        """
        with self._lock:
            schedule = self._schedules.get(team_id)
            if schedule is None:
                raise ScheduleNotFoundError(f"No schedule for workspace {team_id}")
            settings = self._settings.get(team_id, self._defaults)
            record = set_attendee_status(schedule, week, day, user_id, category_id, settings)
            self._persist()
            return record.model_copy(deep=True)
