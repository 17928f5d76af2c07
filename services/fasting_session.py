# services/fasting_session.py
import logging
from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional

from models.diet_record import DietRecord, is_successful
from models.fasting_configuration import FastingConfiguration
from models.session import (
    FastingSession,
    SessionState,
    TickResult,
    TimerSnapshot,
    TimerState,
)
from exceptions import (
    CannotClearActiveSession,
    CannotStartWhileRunning,
    DayAlreadyRecorded,
    NoActiveSession,
    NoPersistedState,
    ReconfigureWhileRunning,
)
from services.notifications import NotificationDispatcher, ReminderPlanner
from services.record_store import RecordStore
from utils.day_key import as_local, day_key, default_timezone
from utils.time_format import format_remaining


def remaining(session: FastingSession, now: datetime) -> timedelta:
    """Time left until the scheduled end of the fast, never negative."""
    return max(session.end_time - now, timedelta(0))


class FastingSessionEngine:
    """
    Owns the fasting timer. The engine is either idle or running one session;
    a running session is persisted as a TimerState plus an in-progress
    DietRecord (start time set, end time empty) for the day it started.

    All time-dependent decisions are taken from the `now` passed in and the
    persisted start time, never from how many ticks were observed, so the
    engine tolerates any tick cadence and arbitrarily long pauses.
    """

    def __init__(
        self,
        store: RecordStore,
        dispatcher: NotificationDispatcher,
        tz: Optional[tzinfo] = None,
    ):
        self.store = store
        self.tz = tz or default_timezone()
        self.reminders = ReminderPlanner(dispatcher, self.tz)
        self._session: Optional[FastingSession] = None

    @property
    def state(self) -> SessionState:
        return SessionState.RUNNING if self._session is not None else SessionState.IDLE

    @property
    def session(self) -> Optional[FastingSession]:
        return self._session

    # --- Configuration ---

    def can_reconfigure(self) -> bool:
        return self.state == SessionState.IDLE

    def reconfigure(self, duration_hours: float) -> FastingConfiguration:
        """Changes the fasting duration used from the next fast on."""
        if not self.can_reconfigure():
            logging.warning(
                f"Rejected duration change to {duration_hours}h while a fast is running."
            )
            raise ReconfigureWhileRunning(
                "The fasting duration cannot be changed while a fast is running."
            )
        fasting_config = self.store.load_fasting_configuration()
        fasting_config.duration_hours = duration_hours
        self.store.save_fasting_configuration(fasting_config)
        logging.info(f"Fasting duration set to {duration_hours}h.")
        return fasting_config

    # --- Lifecycle ---

    def has_record_for(self, moment: datetime) -> bool:
        key = day_key(moment, self.tz)
        return any(
            day_key(record.date, self.tz) == key
            for record in self.store.load_diet_records()
        )

    def start(
        self,
        now: datetime,
        duration_hours: Optional[float] = None,
        overwrite: bool = True,
    ) -> FastingSession:
        """
        Starts a fast at `now`. Any record already stored for today is
        replaced unless `overwrite` is false, in which case DayAlreadyRecorded
        is raised and nothing changes.
        """
        now = as_local(now, self.tz)
        if self._session is not None or self._persisted_running():
            raise CannotStartWhileRunning("A fast is already running.")
        if duration_hours is None:
            duration_hours = self.store.load_fasting_duration()
        else:
            FastingConfiguration(duration_hours=duration_hours)  # range check

        key = day_key(now, self.tz)
        records = self.store.load_diet_records()
        same_day = [r for r in records if day_key(r.date, self.tz) == key]
        if same_day and not overwrite:
            raise DayAlreadyRecorded(f"A fasting record already exists for {now.date()}.")
        if same_day:
            logging.info(f"Replacing {len(same_day)} existing record(s) for {now.date()}.")

        records = [r for r in records if day_key(r.date, self.tz) != key]
        records.append(DietRecord(date=now, success=False, start_time=now))
        self.store.save_diet_records(records)

        session = FastingSession(start_time=now, duration_hours=duration_hours)
        self.store.save_timer_state(
            TimerState(is_running=True, start_time=now, duration_hours=duration_hours)
        )
        self._session = session
        logging.info(
            f"Fast started at {now.isoformat()}, scheduled to end at "
            f"{session.end_time.isoformat()}."
        )
        self._refresh_reminders(now, records, duration_hours)
        return session

    def tick(self, now: datetime) -> TickResult:
        """
        Reports the remaining time and completes the fast once the deadline
        has passed. Completion moves the engine to idle, so it happens once.
        """
        now = as_local(now, self.tz)
        if self._sync_with_store() is None:
            return TickResult(state=SessionState.IDLE, remaining=timedelta(0))
        left = remaining(self._session, now)
        if left > timedelta(0):
            return TickResult(state=SessionState.RUNNING, remaining=left)
        record = self.complete(now)
        return TickResult(
            state=SessionState.IDLE, remaining=timedelta(0), completed_record=record
        )

    def stop(self, now: datetime) -> DietRecord:
        """Ends the fast early. The record is kept, successful or not."""
        session = self._require_session()
        now = as_local(now, self.tz)
        end_time = max(now, session.start_time)
        success = is_successful(session.start_time, end_time, session.duration_hours)
        record = self._finish(session, end_time, success, now)
        logging.info(
            f"Fast stopped at {end_time.isoformat()} after "
            f"{end_time - session.start_time} (success={success})."
        )
        return record

    def complete(self, now: Optional[datetime] = None) -> DietRecord:
        """
        Finishes the fast at its scheduled end, whenever completion is
        detected, and sends the success notification when enabled.
        """
        session = self._require_session()
        now = as_local(now, self.tz) if now is not None else session.end_time
        record = self._finish(session, session.end_time, True, now)
        self.reminders.send_fasting_success(
            now, self.store.load_notification_settings(), session.duration_hours
        )
        logging.info(f"Fast completed at {session.end_time.isoformat()}.")
        return record

    def resume(self, now: datetime) -> Optional[FastingSession]:
        """
        Rebuilds the engine state after a restart. A fast whose deadline
        passed while the process was gone is completed right away.
        """
        now = as_local(now, self.tz)
        try:
            state = self._load_timer_state()
        except NoPersistedState:
            logging.info("No saved timer state, starting idle.")
            self._session = None
            return None

        if not state.is_running or state.start_time is None:
            self._session = None
            return None

        self._session = FastingSession(
            start_time=as_local(state.start_time, self.tz),
            duration_hours=state.duration_hours,
        )
        if now >= self._session.end_time:
            logging.info("Saved fast ended while the app was closed, completing it.")
            self.complete(now)
            return None
        logging.info(
            f"Resumed fast started at {state.start_time.isoformat()}, "
            f"{remaining(self._session, now)} remaining."
        )
        return self._session

    # --- Records ---

    def clear_day(self, day: date | datetime, now: datetime) -> bool:
        """
        Deletes the record for `day`. Returns False, leaving everything as is,
        when that record belongs to a fast still running today or when there
        is nothing to delete.
        """
        key = day_key(day, self.tz)
        records = self.store.load_diet_records()
        targets = [r for r in records if day_key(r.date, self.tz) == key]
        if not targets:
            return False
        if any(self._is_protected(record, key, now) for record in targets):
            logging.warning(f"Refusing to clear the running fast on {day}.")
            return False
        self.store.save_diet_records(
            [r for r in records if day_key(r.date, self.tz) != key]
        )
        logging.info(f"Cleared fasting record for {day}.")
        return True

    def clear_day_or_raise(self, day: date | datetime, now: datetime) -> bool:
        key = day_key(day, self.tz)
        for record in self.store.load_diet_records():
            if day_key(record.date, self.tz) == key and self._is_protected(record, key, now):
                raise CannotClearActiveSession(
                    "Today's fast is still running. Stop it before deleting the record."
                )
        return self.clear_day(day, now)

    # --- Presentation ---

    def snapshot(self, now: datetime) -> TimerSnapshot:
        if self._session is None:
            duration = timedelta(hours=self.store.load_fasting_duration())
            return TimerSnapshot(
                state=SessionState.IDLE,
                remaining=duration,
                remaining_text=format_remaining(duration),
                progress=0.0,
            )
        left = remaining(self._session, as_local(now, self.tz))
        progress = 1.0 - left / self._session.duration
        return TimerSnapshot(
            state=SessionState.RUNNING,
            remaining=left,
            remaining_text=format_remaining(left),
            progress=min(max(progress, 0.0), 1.0),
            start_time=self._session.start_time,
            end_time=self._session.end_time,
        )

    # --- Internals ---

    def _require_session(self) -> FastingSession:
        if self._sync_with_store() is None:
            raise NoActiveSession("No fast is running.")
        return self._session

    def _sync_with_store(self) -> Optional[FastingSession]:
        """
        Drops the in-memory session when the saved timer state no longer shows
        that fast running, e.g. after another engine stopped it.
        """
        if self._session is None:
            return None
        state = self.store.load_timer_state()
        if (
            state is None
            or not state.is_running
            or state.start_time is None
            or as_local(state.start_time, self.tz) != self._session.start_time
        ):
            logging.warning(
                f"Fast started at {self._session.start_time.isoformat()} is no longer "
                f"saved as running, going idle."
            )
            self._session = None
        return self._session

    def _persisted_running(self) -> bool:
        state = self.store.load_timer_state()
        return state is not None and state.is_running

    def _load_timer_state(self) -> TimerState:
        state = self.store.load_timer_state()
        if state is None:
            raise NoPersistedState("No timer state has been saved.")
        return state

    def _is_protected(self, record: DietRecord, key: int, now: datetime) -> bool:
        if not record.is_in_progress:
            return False
        if key == day_key(now, self.tz):
            return True
        return (
            self._session is not None
            and day_key(self._session.start_time, self.tz) == key
        )

    def _finish(
        self, session: FastingSession, end_time: datetime, success: bool, now: datetime
    ) -> DietRecord:
        key = day_key(session.start_time, self.tz)
        records = self.store.load_diet_records()
        record = next(
            (r for r in records if day_key(r.date, self.tz) == key), None
        )
        if record is None:
            record = DietRecord(date=session.start_time, start_time=session.start_time)
            records.append(record)
        record.start_time = record.start_time or session.start_time
        record.end_time = end_time
        record.success = success
        self.store.save_diet_records(records)
        self.store.clear_timer_state()
        self._session = None
        self._refresh_reminders(now, records, session.duration_hours)
        return record

    def _refresh_reminders(
        self, now: datetime, diet_records: List[DietRecord], duration_hours: float
    ):
        self.reminders.refresh(
            now, diet_records, self.store.load_weight_records(), duration_hours
        )
