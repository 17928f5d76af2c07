# services/record_store.py
import json
import logging
import os
import tempfile
from typing import Any, Dict, List, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

import config
from models.diet_record import DietRecord
from models.fasting_configuration import FastingConfiguration
from models.notification_settings import NotificationSettings
from models.premium_status import PremiumStatus
from models.session import TimerState
from models.weight_record import WeightRecord

ModelT = TypeVar("ModelT", bound=BaseModel)

_WEIGHT_RECORDS = TypeAdapter(List[WeightRecord])
_DIET_RECORDS = TypeAdapter(List[DietRecord])


class RecordStore:
    """
    Durable key-value persistence for the tracker. Every collection is read
    and written as a whole; there is no partial update and no locking, so the
    last writer wins.

    Decoding is permissive: missing or corrupt data degrades to an empty
    collection (or the model defaults) and is logged rather than raised.

    Subclasses implement the three raw accessors on JSON-compatible values.
    """

    def _get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def _set(self, key: str, value: Any):
        raise NotImplementedError

    def _delete(self, key: str):
        raise NotImplementedError

    # --- Weight Records ---

    def load_weight_records(self) -> List[WeightRecord]:
        return self._load_list(config.KEY_WEIGHT_RECORDS, _WEIGHT_RECORDS)

    def save_weight_records(self, records: List[WeightRecord]):
        self._set(
            config.KEY_WEIGHT_RECORDS,
            _WEIGHT_RECORDS.dump_python(records, by_alias=True, mode="json"),
        )

    # --- Diet Records ---

    def load_diet_records(self) -> List[DietRecord]:
        return self._load_list(config.KEY_DIET_RECORDS, _DIET_RECORDS)

    def save_diet_records(self, records: List[DietRecord]):
        self._set(
            config.KEY_DIET_RECORDS,
            _DIET_RECORDS.dump_python(records, by_alias=True, mode="json"),
        )

    # --- Fasting Configuration ---

    def load_fasting_duration(self) -> float:
        return self.load_fasting_configuration().duration_hours

    def save_fasting_duration(self, duration_hours: float):
        FastingConfiguration(duration_hours=duration_hours)  # range check
        self._set(config.KEY_FASTING_DURATION, float(duration_hours))

    def load_fasting_configuration(self) -> FastingConfiguration:
        raw = {
            "durationHours": self._get(config.KEY_FASTING_DURATION),
            "startHourOfDay": self._get(config.KEY_START_HOUR),
            "endHourOfDay": self._get(config.KEY_END_HOUR),
        }
        values = {key: value for key, value in raw.items() if value is not None}
        try:
            return FastingConfiguration.model_validate(values)
        except ValidationError as e:
            logging.error(f"Invalid fasting configuration {values}, using defaults: {e}")
            return FastingConfiguration()

    def save_fasting_configuration(self, fasting_config: FastingConfiguration):
        self._set(config.KEY_FASTING_DURATION, fasting_config.duration_hours)
        self._set(config.KEY_START_HOUR, fasting_config.start_hour_of_day)
        self._set(config.KEY_END_HOUR, fasting_config.end_hour_of_day)

    # --- Notification Settings ---

    def load_notification_settings(self) -> NotificationSettings:
        return self._load_model(
            config.KEY_NOTIFICATION_SETTINGS, NotificationSettings
        ) or NotificationSettings()

    def save_notification_settings(self, settings: NotificationSettings):
        self._set(
            config.KEY_NOTIFICATION_SETTINGS,
            settings.model_dump(by_alias=True, mode="json"),
        )

    # --- Timer State ---

    def load_timer_state(self) -> Optional[TimerState]:
        return self._load_model(config.KEY_TIMER_STATE, TimerState)

    def save_timer_state(self, state: TimerState):
        self._set(config.KEY_TIMER_STATE, state.model_dump(by_alias=True, mode="json"))

    def clear_timer_state(self):
        self._delete(config.KEY_TIMER_STATE)

    # --- Premium Status ---

    def load_premium_status(self) -> PremiumStatus:
        return self._load_model(config.KEY_PREMIUM_STATUS, PremiumStatus) or PremiumStatus()

    def save_premium_status(self, status: PremiumStatus):
        self._set(config.KEY_PREMIUM_STATUS, status.model_dump(by_alias=True, mode="json"))

    # --- Utility Methods ---

    def clear_all(self):
        """Removes every weight and diet record. Preferences are kept."""
        self._delete(config.KEY_WEIGHT_RECORDS)
        self._delete(config.KEY_DIET_RECORDS)
        logging.info("Cleared all weight and diet records.")

    def has_data(self) -> bool:
        return (
            self._get(config.KEY_WEIGHT_RECORDS) is not None
            or self._get(config.KEY_DIET_RECORDS) is not None
        )

    def _load_list(self, key: str, adapter: TypeAdapter) -> list:
        raw = self._get(key)
        if raw is None:
            return []
        try:
            return adapter.validate_python(raw)
        except ValidationError as e:
            logging.error(f"Error loading '{key}', falling back to empty: {e}")
            return []

    def _load_model(self, key: str, model: type[ModelT]) -> Optional[ModelT]:
        raw = self._get(key)
        if raw is None:
            return None
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            logging.error(f"Error loading '{key}', ignoring stored value: {e}")
            return None


class InMemoryRecordStore(RecordStore):
    """Keeps everything in a dict. Used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self.data: Dict[str, Any] = dict(initial or {})

    def _get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    def _set(self, key: str, value: Any):
        self.data[key] = value

    def _delete(self, key: str):
        self.data.pop(key, None)


class JsonFileRecordStore(RecordStore):
    """
    Stores all keys in a single JSON document on disk. The file is re-read on
    every access so edits from another part of the process are not clobbered,
    and replaced atomically on every write.
    """

    def __init__(self, path: str = config.STORE_PATH):
        self.path = path

    def _read_all(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logging.error(f"Could not read store at {self.path}, treating as empty: {e}")
            return {}
        if not isinstance(data, dict):
            logging.error(
                f"Store at {self.path} holds a {type(data).__name__}, treating as empty."
            )
            return {}
        return data

    def _write_all(self, data: Dict[str, Any]):
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def _get(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def _set(self, key: str, value: Any):
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def _delete(self, key: str):
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
