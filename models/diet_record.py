import uuid
from datetime import datetime, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DietRecord(BaseModel):
    """
    Represents the outcome of one fast, anchored to the calendar day it was
    started on. A record with a start time but no end time is still running.
    """

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    date: datetime = Field(description="Anchor day of the fast.")
    success: bool = False
    start_time: Optional[datetime] = Field(default=None, alias="startTime")
    end_time: Optional[datetime] = Field(default=None, alias="endTime")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @property
    def is_in_progress(self) -> bool:
        return self.start_time is not None and self.end_time is None

    @property
    def duration(self) -> Optional[timedelta]:
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time


def is_successful(
    start_time: datetime, end_time: datetime, duration_hours: float
) -> bool:
    """A fast succeeds once it lasted at least the configured number of hours."""
    return end_time - start_time >= timedelta(hours=duration_hours)
