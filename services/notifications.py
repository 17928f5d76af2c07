# services/notifications.py
import logging
from datetime import datetime, timedelta, tzinfo
from typing import Dict, List, Optional

from pydantic import BaseModel

import config
from models.diet_record import DietRecord
from models.notification_settings import NotificationSettings
from models.weight_record import WeightRecord
from utils.day_key import as_local, default_timezone

FASTING_START_ID = "fastingStart"
FASTING_END_ID = "fastingEnd"
WEIGHT_RECORD_ID = "weightRecord"
FASTING_SUCCESS_ID = "fastingSuccess"


class ScheduledNotification(BaseModel):
    id: str
    fire_date: datetime
    title: str
    body: str


class NotificationDispatcher:
    """
    Delivers local reminders. The tracker only hands over absolute fire times;
    permissions and delivery belong to the platform.
    """

    def schedule_at(self, id: str, fire_date: datetime, title: str, body: str):
        raise NotImplementedError

    def cancel_all(self):
        raise NotImplementedError


class InMemoryNotificationDispatcher(NotificationDispatcher):
    """Keeps pending reminders in a dict. Scheduling an existing id replaces it."""

    def __init__(self):
        self.pending: Dict[str, ScheduledNotification] = {}
        self.delivered: List[ScheduledNotification] = []

    def schedule_at(self, id: str, fire_date: datetime, title: str, body: str):
        notification = ScheduledNotification(
            id=id, fire_date=fire_date, title=title, body=body
        )
        self.pending[id] = notification
        self.delivered.append(notification)

    def cancel_all(self):
        self.pending.clear()


class LoggingNotificationDispatcher(NotificationDispatcher):
    """Logs reminders instead of delivering them. Only the pending set is kept."""

    def __init__(self):
        self.pending: Dict[str, ScheduledNotification] = {}

    def schedule_at(self, id: str, fire_date: datetime, title: str, body: str):
        self.pending[id] = ScheduledNotification(
            id=id, fire_date=fire_date, title=title, body=body
        )
        logging.info(f"Scheduled '{id}' for {fire_date.isoformat()}: {title}")

    def cancel_all(self):
        self.pending.clear()
        logging.info("Cancelled all pending notifications.")


class ReminderPlanner:
    """Works out when each reminder should fire and hands them to a dispatcher."""

    def __init__(self, dispatcher: NotificationDispatcher, tz: Optional[tzinfo] = None):
        self.dispatcher = dispatcher
        self.tz = tz or default_timezone()

    def plan_fasting_start(
        self, now: datetime, diet_records: List[DietRecord]
    ) -> Optional[ScheduledNotification]:
        latest = self._latest_diet_record(diet_records)
        if latest is None or latest.end_time is None:
            return None
        fire_date = as_local(latest.end_time, self.tz) + timedelta(
            hours=config.FASTING_START_REMINDER_HOURS
        )
        return ScheduledNotification(
            id=FASTING_START_ID,
            fire_date=self._not_in_past(fire_date, now),
            title="Time to start fasting",
            body="Let's start your next fast!",
        )

    def plan_fasting_end(
        self, now: datetime, diet_records: List[DietRecord], duration_hours: float
    ) -> Optional[ScheduledNotification]:
        latest = self._latest_diet_record(diet_records)
        if latest is None or not latest.is_in_progress:
            return None
        fire_date = as_local(latest.start_time, self.tz) + timedelta(hours=duration_hours)
        return ScheduledNotification(
            id=FASTING_END_ID,
            fire_date=self._not_in_past(fire_date, now),
            title="Your fast is over",
            body=f"You completed your {duration_hours:g}-hour fast. Well done!",
        )

    def plan_weight_record(
        self, now: datetime, weight_records: List[WeightRecord]
    ) -> ScheduledNotification:
        if weight_records:
            last_date = max(as_local(record.date, self.tz) for record in weight_records)
            fire_date = last_date + timedelta(days=config.WEIGHT_REMINDER_DAYS)
        else:
            fire_date = as_local(now, self.tz)
        return ScheduledNotification(
            id=WEIGHT_RECORD_ID,
            fire_date=self._not_in_past(fire_date, now),
            title="Time to weigh in",
            body="It's been a week. Record your weight!",
        )

    def plan(
        self,
        now: datetime,
        diet_records: List[DietRecord],
        weight_records: List[WeightRecord],
        duration_hours: float,
    ) -> List[ScheduledNotification]:
        planned = [
            self.plan_fasting_start(now, diet_records),
            self.plan_fasting_end(now, diet_records, duration_hours),
            self.plan_weight_record(now, weight_records),
        ]
        return [notification for notification in planned if notification is not None]

    def refresh(
        self,
        now: datetime,
        diet_records: List[DietRecord],
        weight_records: List[WeightRecord],
        duration_hours: float,
    ) -> List[ScheduledNotification]:
        """Cancels everything pending and schedules the current plan."""
        self.dispatcher.cancel_all()
        planned = self.plan(now, diet_records, weight_records, duration_hours)
        for notification in planned:
            self._dispatch(notification)
        return planned

    def schedule_weight_reminder(
        self, now: datetime, weight_records: List[WeightRecord]
    ) -> ScheduledNotification:
        notification = self.plan_weight_record(now, weight_records)
        self._dispatch(notification)
        return notification

    def send_fasting_success(
        self, now: datetime, settings: NotificationSettings, duration_hours: float
    ) -> Optional[ScheduledNotification]:
        if not settings.fasting_success_notification:
            return None
        notification = ScheduledNotification(
            id=FASTING_SUCCESS_ID,
            fire_date=as_local(now, self.tz)
            + timedelta(seconds=config.SUCCESS_NOTIFICATION_DELAY_SECONDS),
            title=f"Fast complete! {settings.fasting_emoji}",
            body=f"You reached your {duration_hours:g}-hour goal. Amazing!",
        )
        self._dispatch(notification)
        return notification

    def _dispatch(self, notification: ScheduledNotification):
        self.dispatcher.schedule_at(
            notification.id, notification.fire_date, notification.title, notification.body
        )

    def _not_in_past(self, fire_date: datetime, now: datetime) -> datetime:
        now = as_local(now, self.tz)
        if fire_date > now:
            return fire_date
        return now + timedelta(hours=config.OVERDUE_REMINDER_DELAY_HOURS)

    def _latest_diet_record(self, records: List[DietRecord]) -> Optional[DietRecord]:
        if not records:
            return None
        return max(records, key=lambda record: as_local(record.date, self.tz))
