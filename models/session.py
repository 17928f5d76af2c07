import enum
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

import config
from models.diet_record import DietRecord


class SessionState(str, enum.Enum):
    """Whether a fast is currently running."""

    IDLE = "idle"
    RUNNING = "running"


class TimerState(BaseModel):
    """
    The persisted snapshot of the timer. Reloaded on process restart so the
    running fast survives the app being closed.
    """

    is_running: bool = False
    start_time: Optional[datetime] = None
    duration_hours: float = config.DEFAULT_FASTING_DURATION_HOURS

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FastingSession(BaseModel):
    """A running fast. `end_time` is the scheduled end, not the actual one."""

    start_time: datetime = Field(alias="startTime")
    duration_hours: float = Field(alias="durationHours")

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    @property
    def end_time(self) -> datetime:
        return self.start_time + timedelta(hours=self.duration_hours)

    @property
    def duration(self) -> timedelta:
        return timedelta(hours=self.duration_hours)


class TickResult(BaseModel):
    """What a single tick observed."""

    state: SessionState
    remaining: timedelta
    completed_record: Optional[DietRecord] = None

    @property
    def completed(self) -> bool:
        return self.completed_record is not None


class TimerSnapshot(BaseModel):
    """Read-only view of the timer for renderers."""

    state: SessionState
    remaining: timedelta
    remaining_text: str
    progress: float = Field(ge=0.0, le=1.0)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
