# main.py
import argparse
import logging
import sys
import time
from datetime import date, datetime, timezone
from typing import Callable, List, Optional

from pydantic import ValidationError

import config
from exceptions import FastingTrackerError
from models.history import Period
from models.session import SessionState
from services.ad_policy import AdPolicy
from services.day_records import DayRecordService
from services.fasting_session import FastingSessionEngine
from services.history_query import filter_records, interpolate_monthly, month_grid, range_for
from services.notifications import LoggingNotificationDispatcher, NotificationDispatcher
from services.record_store import InMemoryRecordStore, JsonFileRecordStore, RecordStore
from utils.day_key import default_timezone, local_date
from utils.time_format import format_hour_of_day

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)


def build_store(backend: str = config.STORE_BACKEND, path: str = config.STORE_PATH) -> RecordStore:
    if backend == "memory":
        return InMemoryRecordStore()
    if backend == "firestore":
        from services.firestore import FirestoreRecordStore

        return FirestoreRecordStore()
    return JsonFileRecordStore(path)


class App:
    """Wires the engines to one store and one dispatcher."""

    def __init__(self, store: RecordStore, dispatcher: NotificationDispatcher):
        self.store = store
        self.tz = default_timezone()
        self.engine = FastingSessionEngine(store, dispatcher, self.tz)
        self.days = DayRecordService(store, dispatcher, self.tz)
        self.ads = AdPolicy(store)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _confirm(question: str) -> bool:
    return input(f"{question} [y/N] ").strip().lower() in ("y", "yes")


def cmd_status(app: App, args) -> int:
    snapshot = app.engine.snapshot(_now())
    fasting_config = app.store.load_fasting_configuration()
    print(f"Fasting window: {fasting_config.duration_hours:g}h "
          f"({format_hour_of_day(fasting_config.start_hour_of_day)} - "
          f"{format_hour_of_day(fasting_config.end_hour_of_day)})")
    if snapshot.state == SessionState.RUNNING:
        print(f"Running since {snapshot.start_time.astimezone(app.tz):%Y-%m-%d %H:%M}, "
              f"{snapshot.remaining_text} remaining ({snapshot.progress:.0%}).")
    else:
        print("No fast running.")
    return 0


def cmd_start(app: App, args) -> int:
    now = _now()
    overwrite = True
    if not args.force and app.engine.has_record_for(now):
        overwrite = _confirm("Today already has a record. Overwrite it?")
        if not overwrite:
            print("Kept the existing record.")
            return 0
    session = app.engine.start(now, args.hours, overwrite=overwrite)
    print(f"Fast started. Ends at {session.end_time.astimezone(app.tz):%Y-%m-%d %H:%M}.")
    return 0


def cmd_stop(app: App, args) -> int:
    record = app.engine.stop(_now())
    print("Fast stopped: " + ("success" if record.success else "not reached"))
    return 0


def cmd_watch(app: App, args) -> int:
    try:
        while True:
            result = app.engine.tick(_now())
            if result.completed:
                print("\nFast complete!")
                return 0
            if result.state == SessionState.IDLE:
                print("No fast running.")
                return 0
            print(f"\r{app.engine.snapshot(_now()).remaining_text}", end="", flush=True)
            time.sleep(args.interval)
    except KeyboardInterrupt:
        print()
        return 0


def cmd_weight(app: App, args) -> int:
    record = app.days.add_weight(args.value, _now())
    print(f"Recorded {record.weight:.1f} kg.")
    return 0


def cmd_history(app: App, args) -> int:
    date_range = range_for(Period(args.period), args.offset, _now(), tz=app.tz)
    records = filter_records(app.store.load_weight_records(), date_range, app.tz)
    print(f"{date_range.start} - {date_range.end}")
    if not records:
        print("  No weight records.")
    for record in records:
        print(f"  {local_date(record.date, app.tz)}  {record.weight:.1f} kg")
    return 0


def cmd_chart(app: App, args) -> int:
    date_range = range_for(Period.MONTH, args.offset, _now(), tz=app.tz)
    samples = interpolate_monthly(
        app.store.load_weight_records(), date_range, args.step, app.tz
    )
    for sample in samples:
        print(f"  {local_date(sample.date, app.tz):%m/%d}  {sample.weight:.1f}")
    return 0


def cmd_calendar(app: App, args) -> int:
    month = datetime.strptime(args.month, "%Y-%m").date() if args.month else local_date(_now(), app.tz)
    settings = app.store.load_notification_settings()
    grid = month_grid(
        month, app.store.load_diet_records(), app.store.load_weight_records(), tz=app.tz
    )
    print(f"{grid.year}-{grid.month:02d}")
    for week in grid.weeks:
        cells = []
        for cell in week:
            if cell is None:
                cells.append("    ")
                continue
            mark = settings.fasting_emoji if cell.fasting_succeeded else " "
            if cell.has_weight_record:
                mark = settings.weight_emoji if mark == " " else mark
            cells.append(f"{cell.day.day:2d}{mark}")
        print(" ".join(cells))
    return 0


def cmd_clear_day(app: App, args) -> int:
    day = date.fromisoformat(args.day)
    if app.engine.clear_day_or_raise(day, _now()):
        print(f"Deleted the record for {day}.")
    else:
        print(f"No record for {day}.")
    return 0


def cmd_clear_all(app: App, args) -> int:
    if args.yes or _confirm("Delete all weight and fasting records?"):
        app.days.clear_all()
        print("All records deleted.")
    return 0


def cmd_set_duration(app: App, args) -> int:
    app.engine.reconfigure(args.hours)
    print(f"Fasting duration set to {args.hours:g} hours. Applies from the next fast.")
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fasting-tracker",
        description="Intermittent fasting timer with weight history.",
    )
    parser.add_argument(
        "--store",
        choices=["json", "memory", "firestore"],
        default=config.STORE_BACKEND,
        help=f"Storage backend (default: {config.STORE_BACKEND})",
    )
    parser.add_argument(
        "--path",
        default=config.STORE_PATH,
        help="Path of the JSON store file",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Show the timer").set_defaults(func=cmd_status)

    start = sub.add_parser("start", help="Start a fast now")
    start.add_argument("--hours", type=float, default=None, help="Override the fasting duration")
    start.add_argument("--force", action="store_true", help="Overwrite today's record without asking")
    start.set_defaults(func=cmd_start)

    sub.add_parser("stop", help="Stop the running fast").set_defaults(func=cmd_stop)

    watch = sub.add_parser("watch", help="Count down until the fast completes")
    watch.add_argument("--interval", type=float, default=1.0, help="Seconds between ticks")
    watch.set_defaults(func=cmd_watch)

    weight = sub.add_parser("weight", help="Record today's weight in kg")
    weight.add_argument("value")
    weight.set_defaults(func=cmd_weight)

    history = sub.add_parser("history", help="List weights for a week or month")
    history.add_argument("--period", choices=[p.value for p in Period], default=Period.WEEK.value)
    history.add_argument("--offset", type=int, choices=range(config.MAX_HISTORY_OFFSET + 1), default=0)
    history.set_defaults(func=cmd_history)

    chart = sub.add_parser("chart", help="Sampled monthly weight curve")
    chart.add_argument("--offset", type=int, choices=range(config.MAX_HISTORY_OFFSET + 1), default=0)
    chart.add_argument("--step", type=int, default=config.MONTHLY_SAMPLE_STEP_DAYS)
    chart.set_defaults(func=cmd_chart)

    cal = sub.add_parser("calendar", help="Show a month of records")
    cal.add_argument("--month", default=None, help="Month as YYYY-MM (default: current)")
    cal.set_defaults(func=cmd_calendar)

    clear_day = sub.add_parser("clear-day", help="Delete the fasting record of a day")
    clear_day.add_argument("day", help="Day as YYYY-MM-DD")
    clear_day.set_defaults(func=cmd_clear_day)

    clear_all = sub.add_parser("clear-all", help="Delete all records")
    clear_all.add_argument("--yes", action="store_true")
    clear_all.set_defaults(func=cmd_clear_all)

    duration = sub.add_parser("set-duration", help="Change the fasting duration")
    duration.add_argument("hours", type=float)
    duration.set_defaults(func=cmd_set_duration)

    return parser


def main(argv: Optional[List[str]] = None, app_factory: Optional[Callable[..., App]] = None) -> int:
    args = create_parser().parse_args(argv)
    if app_factory is None:
        app = App(build_store(args.store, args.path), LoggingNotificationDispatcher())
    else:
        app = app_factory(args)
    app.engine.resume(_now())
    try:
        return args.func(app, args)
    except FastingTrackerError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (ValidationError, ValueError) as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
