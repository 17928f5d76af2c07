# services/history_query.py
import calendar
from datetime import date, datetime, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional

import numpy as np

import config
from models.diet_record import DietRecord
from models.history import CalendarDay, DateRange, MonthGrid, Period
from models.weight_record import WeightRecord
from utils.day_key import as_local, default_timezone, local_date, start_of_day


def _shift_months(day: date, months: int) -> date:
    """Moves `day` back by `months`, clamping to the last day of the target month."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def range_for(
    period: Period,
    offset: int,
    reference_date: date | datetime,
    first_weekday: int = config.FIRST_WEEKDAY,
    tz: Optional[tzinfo] = None,
) -> DateRange:
    """
    Calendar range of the week or month `offset` periods before the one
    containing `reference_date`. Both ends are inclusive.
    """
    if not 0 <= offset <= config.MAX_HISTORY_OFFSET:
        raise ValueError(
            f"Offset must be between 0 and {config.MAX_HISTORY_OFFSET}, got {offset}."
        )
    if isinstance(reference_date, datetime):
        reference_date = local_date(reference_date, tz or default_timezone())

    period = Period(period)
    if period == Period.WEEK:
        shifted = reference_date - timedelta(weeks=offset)
        start = shifted - timedelta(days=(shifted.weekday() - first_weekday) % 7)
        return DateRange(start=start, end=start + timedelta(days=6))

    shifted = _shift_months(reference_date, offset)
    last_day = calendar.monthrange(shifted.year, shifted.month)[1]
    return DateRange(
        start=shifted.replace(day=1), end=shifted.replace(day=last_day)
    )


def filter_records(
    records: Iterable[WeightRecord],
    date_range: DateRange,
    tz: Optional[tzinfo] = None,
) -> List[WeightRecord]:
    """Records whose calendar day falls inside the range, oldest first."""
    tz = tz or default_timezone()
    return sorted(
        (record for record in records if local_date(record.date, tz) in date_range),
        key=lambda record: as_local(record.date, tz),
    )


def interpolate_monthly(
    records: Iterable[WeightRecord],
    date_range: DateRange,
    step_days: int = config.MONTHLY_SAMPLE_STEP_DAYS,
    tz: Optional[tzinfo] = None,
) -> List[WeightRecord]:
    """
    Samples the range every `step_days` days, always including its last day,
    for plotting sparse data. A sample on a recorded day uses that record;
    other samples are linearly interpolated by day count between the closest
    records on either side, or take the value of the only side available.
    Nothing is returned when there are no records at all.
    """
    if step_days < 1:
        raise ValueError(f"step_days must be positive, got {step_days}.")
    tz = tz or default_timezone()

    by_day: Dict[int, WeightRecord] = {}
    for record in sorted(records, key=lambda r: as_local(r.date, tz)):
        by_day[local_date(record.date, tz).toordinal()] = record
    if not by_day:
        return []

    known_days = np.array(sorted(by_day), dtype=float)
    known_weights = np.array([by_day[int(day)].weight for day in known_days])

    first, last = date_range.start.toordinal(), date_range.end.toordinal()
    sample_days = list(range(first, last + 1, step_days))
    if sample_days[-1] != last:
        sample_days.append(last)

    weights = np.interp(np.array(sample_days, dtype=float), known_days, known_weights)

    samples = []
    for day, weight in zip(sample_days, weights):
        if day in by_day:
            samples.append(by_day[day])
        else:
            samples.append(
                WeightRecord(
                    date=start_of_day(date.fromordinal(day), tz), weight=float(weight)
                )
            )
    return samples


def month_grid(
    month: date,
    diet_records: Iterable[DietRecord],
    weight_records: Iterable[WeightRecord],
    first_weekday: int = config.FIRST_WEEKDAY,
    tz: Optional[tzinfo] = None,
) -> MonthGrid:
    """Lays out one month for the history calendar with per-day markers."""
    tz = tz or default_timezone()
    fasting: Dict[date, DietRecord] = {
        local_date(record.date, tz): record for record in diet_records
    }
    weighed = {local_date(record.date, tz) for record in weight_records}

    first_of_month = month.replace(day=1)
    days_in_month = calendar.monthrange(month.year, month.month)[1]
    padding = (first_of_month.weekday() - first_weekday) % 7

    cells: List[Optional[CalendarDay]] = [None] * padding
    for offset in range(days_in_month):
        day = first_of_month + timedelta(days=offset)
        record = fasting.get(day)
        cells.append(
            CalendarDay(
                day=day,
                has_fasting_record=record is not None,
                fasting_succeeded=record is not None and record.success,
                has_weight_record=day in weighed,
            )
        )
    return MonthGrid(year=month.year, month=month.month, cells=cells)
