"""Tests for weigh-ins and manual day edits."""

from datetime import date, datetime, timedelta

import pytest

from exceptions import CannotClearActiveSession, InvalidWeightInput
from models.diet_record import DietRecord
from models.weight_record import WeightRecord
from services.notifications import WEIGHT_RECORD_ID
from tests.conftest import at

NOW = at(2024, 3, 14, 7, 30)


class TestAddWeight:
    def test_first_weigh_in_of_the_day(self, days, store):
        record = days.add_weight("70.4", NOW)

        assert record.weight == 70.4
        assert store.load_weight_records() == [record]

    def test_same_day_updates_in_place(self, days, store):
        first = days.add_weight("70.4", NOW)
        second = days.add_weight("69.9", NOW + timedelta(hours=10))

        records = store.load_weight_records()
        assert len(records) == 1
        assert records[0].id == first.id == second.id
        assert records[0].weight == 69.9

    def test_new_day_appends(self, days, store):
        days.add_weight("70.4", NOW)
        days.add_weight("70.1", NOW + timedelta(days=1))

        assert len(store.load_weight_records()) == 2

    @pytest.mark.parametrize("raw", ["", "abc", "-3", "0", "nan"])
    def test_invalid_input_is_not_persisted(self, days, store, raw):
        with pytest.raises(InvalidWeightInput):
            days.add_weight(raw, NOW)

        assert store.load_weight_records() == []

    def test_schedules_weight_reminder(self, days, dispatcher):
        days.add_weight("70.4", NOW)

        assert dispatcher.pending[WEIGHT_RECORD_ID].fire_date == NOW + timedelta(days=7)

    def test_lookup_by_day(self, days):
        days.add_weight("70.4", NOW)

        assert days.weight_for(date(2024, 3, 14)).weight == 70.4
        assert days.weight_for(date(2024, 3, 15)) is None


class TestEditDay:
    DAY = date(2024, 3, 10)

    def test_successful_fast_from_previous_evening(self, days, store):
        diet, weight = days.edit_day(
            self.DAY, at(2024, 3, 9, 18), at(2024, 3, 10, 10), "70.2"
        )

        assert diet.success is True
        assert diet.end_time == at(2024, 3, 10, 10)
        assert weight.weight == 70.2
        assert store.load_diet_records() == [diet]
        assert days.diet_record_for(self.DAY) == diet

    def test_naive_times_are_taken_as_local(self, days):
        diet, _ = days.edit_day(
            self.DAY, datetime(2024, 3, 9, 18), datetime(2024, 3, 10, 10)
        )

        assert diet.start_time == at(2024, 3, 9, 18)
        assert diet.success is True

    def test_short_fast_is_a_failure(self, days):
        diet, weight = days.edit_day(self.DAY, at(2024, 3, 10, 1), at(2024, 3, 10, 12))

        assert diet.success is False
        assert weight is None

    def test_success_follows_configured_duration(self, days, store):
        store.save_fasting_duration(12)

        diet, _ = days.edit_day(self.DAY, at(2024, 3, 9, 22), at(2024, 3, 10, 10))

        assert diet.success is True

    def test_replaces_existing_record(self, days, store):
        store.save_diet_records([DietRecord(date=at(2024, 3, 10, 9), success=True)])

        days.edit_day(self.DAY, at(2024, 3, 10, 1), at(2024, 3, 10, 2))

        records = store.load_diet_records()
        assert len(records) == 1
        assert records[0].success is False

    def test_empty_weight_removes_existing(self, days, store):
        store.save_weight_records([WeightRecord(date=at(2024, 3, 10, 7), weight=71.0)])

        days.edit_day(self.DAY, at(2024, 3, 9, 18), at(2024, 3, 10, 10), "")

        assert store.load_weight_records() == []

    def test_invalid_weight_leaves_everything_untouched(self, days, store):
        with pytest.raises(InvalidWeightInput):
            days.edit_day(self.DAY, at(2024, 3, 9, 18), at(2024, 3, 10, 10), "seventy")

        assert store.load_diet_records() == []

    @pytest.mark.parametrize(
        "start, end",
        [
            (at(2024, 3, 10, 12), at(2024, 3, 10, 8)),
            (at(2024, 3, 8, 12), at(2024, 3, 10, 8)),
            (at(2024, 3, 9, 12), at(2024, 3, 11, 8)),
        ],
    )
    def test_rejects_out_of_window_times(self, days, start, end):
        with pytest.raises(ValueError):
            days.edit_day(self.DAY, start, end)

    def test_running_fast_cannot_be_edited(self, days, engine):
        engine.start(at(2024, 3, 10, 8), 16)

        with pytest.raises(CannotClearActiveSession):
            days.edit_day(self.DAY, at(2024, 3, 9, 18), at(2024, 3, 10, 10))


class TestClearAll:
    def test_clear_all(self, days, store):
        days.add_weight("70.4", NOW)
        days.edit_day(date(2024, 3, 10), at(2024, 3, 9, 18), at(2024, 3, 10, 10))

        days.clear_all()

        assert store.load_weight_records() == []
        assert store.load_diet_records() == []
