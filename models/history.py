import enum
from datetime import date
from typing import List, Optional

from pydantic import BaseModel, model_validator


class Period(str, enum.Enum):
    """Bucketing granularity for history queries."""

    WEEK = "week"
    MONTH = "month"


class DateRange(BaseModel):
    """A calendar range, inclusive on both ends."""

    start: date
    end: date

    @model_validator(mode="after")
    def check_order(self):
        if self.end < self.start:
            raise ValueError(f"Range end {self.end} precedes start {self.start}.")
        return self

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


class CalendarDay(BaseModel):
    """One cell of the history calendar."""

    day: date
    has_fasting_record: bool = False
    fasting_succeeded: bool = False
    has_weight_record: bool = False


class MonthGrid(BaseModel):
    """
    A month laid out for a calendar view. `cells` starts with `None` padding
    for the days before the first of the month in the first week row.
    """

    year: int
    month: int
    cells: List[Optional[CalendarDay]]

    @property
    def weeks(self) -> List[List[Optional[CalendarDay]]]:
        return [self.cells[i : i + 7] for i in range(0, len(self.cells), 7)]
