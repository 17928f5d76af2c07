"""Tests for the command line entry point."""

import pytest

import main as cli
from models.session import SessionState
from services.notifications import InMemoryNotificationDispatcher
from services.record_store import InMemoryRecordStore, JsonFileRecordStore


@pytest.fixture
def app():
    return cli.App(InMemoryRecordStore(), InMemoryNotificationDispatcher())


def run(app, *argv):
    return cli.main(list(argv), app_factory=lambda args: app)


class TestParser:
    def test_history_defaults(self):
        args = cli.create_parser().parse_args(["history"])

        assert args.period == "week"
        assert args.offset == 0

    def test_history_rejects_large_offset(self):
        with pytest.raises(SystemExit):
            cli.create_parser().parse_args(["history", "--offset", "3"])

    def test_build_store(self, tmp_path):
        assert isinstance(cli.build_store("memory"), InMemoryRecordStore)
        store = cli.build_store("json", str(tmp_path / "s.json"))
        assert isinstance(store, JsonFileRecordStore)


class TestCommands:
    def test_start_status_stop(self, app, capsys):
        assert run(app, "start", "--force") == 0
        assert app.engine.state == SessionState.RUNNING

        assert run(app, "status") == 0
        assert "remaining" in capsys.readouterr().out

        assert run(app, "stop") == 0
        assert "not reached" in capsys.readouterr().out
        assert app.engine.state == SessionState.IDLE

    def test_start_declined_overwrite(self, app, monkeypatch, capsys):
        run(app, "start", "--force")
        run(app, "stop")
        monkeypatch.setattr("builtins.input", lambda prompt: "n")

        assert run(app, "start") == 0

        assert "Kept the existing record" in capsys.readouterr().out
        assert app.engine.state == SessionState.IDLE

    def test_weight_and_history(self, app, capsys):
        assert run(app, "weight", "70.5") == 0
        assert run(app, "history", "--period", "month") == 0

        assert "70.5 kg" in capsys.readouterr().out

    def test_invalid_weight(self, app, capsys):
        assert run(app, "weight", "heavy") == 1

        assert "not a valid weight" in capsys.readouterr().err

    def test_set_duration_while_running(self, app, capsys):
        run(app, "start", "--force")

        assert run(app, "set-duration", "20") == 1
        assert app.store.load_fasting_duration() == 16

    def test_set_duration_out_of_range(self, app, capsys):
        assert run(app, "set-duration", "30") == 1

        assert "Invalid input" in capsys.readouterr().err

    def test_clear_running_day(self, app, capsys):
        run(app, "start", "--force")
        today = app.engine.session.start_time.astimezone(app.tz).date().isoformat()

        assert run(app, "clear-day", today) == 1

    def test_calendar_and_chart(self, app, capsys):
        run(app, "weight", "70.5")

        assert run(app, "calendar") == 0
        assert run(app, "chart") == 0
        assert "70.5" in capsys.readouterr().out

    def test_clear_all(self, app):
        run(app, "weight", "70.5")

        assert run(app, "clear-all", "--yes") == 0
        assert app.store.load_weight_records() == []
