# services/day_records.py
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Tuple

from exceptions import CannotClearActiveSession
from models.diet_record import DietRecord, is_successful
from models.weight_record import WeightRecord
from services.notifications import NotificationDispatcher, ReminderPlanner
from services.record_store import RecordStore
from utils.day_key import as_local, day_key, default_timezone, end_of_day, start_of_day
from utils.weight_input import parse_weight


class DayRecordService:
    """Weigh-ins and manual edits of past days, one record per calendar day."""

    def __init__(
        self,
        store: RecordStore,
        dispatcher: NotificationDispatcher,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.tz = tz or default_timezone()
        self.reminders = ReminderPlanner(dispatcher, self.tz)

    def add_weight(self, raw_value: str, now: datetime) -> WeightRecord:
        """
        Records today's weight, replacing the value if today already has one.
        Raises InvalidWeightInput before anything is written.
        """
        weight = parse_weight(raw_value)
        now = as_local(now, self.tz)
        records = self.store.load_weight_records()
        record = self._upsert_weight(records, now, weight)
        self.store.save_weight_records(records)
        logging.info(f"Recorded weight {weight:.1f} kg for {record.date.date()}.")
        self.reminders.schedule_weight_reminder(now, records)
        return record

    def weight_for(self, day: date | datetime) -> Optional[WeightRecord]:
        key = day_key(day, self.tz)
        return next(
            (r for r in self.store.load_weight_records() if day_key(r.date, self.tz) == key),
            None,
        )

    def diet_record_for(self, day: date | datetime) -> Optional[DietRecord]:
        key = day_key(day, self.tz)
        return next(
            (r for r in self.store.load_diet_records() if day_key(r.date, self.tz) == key),
            None,
        )

    def edit_day(
        self,
        day: date,
        start_time: datetime,
        end_time: datetime,
        weight_text: str = "",
    ) -> Tuple[DietRecord, Optional[WeightRecord]]:
        """
        Replaces the fasting record of `day` with one spanning start to end,
        its success derived from the configured duration. The fast may start
        on the previous day but must end on `day`. A non-empty weight is
        stored for the day, an empty one removes the day's weight.
        """
        start_time = as_local(start_time, self.tz)
        end_time = as_local(end_time, self.tz)
        if end_time < start_time:
            raise ValueError("The fast cannot end before it starts.")
        earliest_start = start_of_day(day - timedelta(days=1), self.tz)
        if not earliest_start <= start_time <= end_of_day(day, self.tz):
            raise ValueError(f"The fast must start on {day} or the day before.")
        if not start_of_day(day, self.tz) <= end_time <= end_of_day(day, self.tz):
            raise ValueError(f"The fast must end on {day}.")

        weight = parse_weight(weight_text) if weight_text.strip() else None

        key = day_key(day, self.tz)
        diet_records = self.store.load_diet_records()
        if any(
            r.is_in_progress for r in diet_records if day_key(r.date, self.tz) == key
        ):
            raise CannotClearActiveSession(
                f"The fast on {day} is still running and cannot be edited."
            )

        duration_hours = self.store.load_fasting_duration()
        diet_record = DietRecord(
            date=start_of_day(day, self.tz),
            success=is_successful(start_time, end_time, duration_hours),
            start_time=start_time,
            end_time=end_time,
        )
        diet_records = [r for r in diet_records if day_key(r.date, self.tz) != key]
        diet_records.append(diet_record)
        self.store.save_diet_records(diet_records)

        weight_records = self.store.load_weight_records()
        weight_record = None
        if weight is not None:
            weight_record = self._upsert_weight(
                weight_records, start_of_day(day, self.tz), weight
            )
        else:
            weight_records = [
                r for r in weight_records if day_key(r.date, self.tz) != key
            ]
        self.store.save_weight_records(weight_records)

        logging.info(
            f"Saved edits for {day}: success={diet_record.success}, weight={weight}."
        )
        return diet_record, weight_record

    def clear_all(self):
        self.store.clear_all()

    def _upsert_weight(
        self, records: List[WeightRecord], moment: datetime, weight: float
    ) -> WeightRecord:
        key = day_key(moment, self.tz)
        for record in records:
            if day_key(record.date, self.tz) == key:
                record.weight = weight
                return record
        record = WeightRecord(date=moment, weight=weight)
        records.append(record)
        return record
