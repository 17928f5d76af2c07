from datetime import date, datetime, time, tzinfo
from zoneinfo import ZoneInfo

import config

# A calendar day, as the proleptic Gregorian ordinal in a fixed time zone.
DayKey = int


def default_timezone() -> tzinfo:
    return ZoneInfo(config.TIMEZONE)


def local_date(moment: datetime, tz: tzinfo) -> date:
    """Calendar date of `moment` in `tz`. Naive datetimes are taken as already local."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(tz).date()


def as_local(moment: datetime, tz: tzinfo) -> datetime:
    """Attaches `tz` to a naive datetime; aware datetimes are returned unchanged."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=tz)
    return moment


def day_key(moment: datetime | date, tz: tzinfo) -> DayKey:
    if isinstance(moment, datetime):
        return local_date(moment, tz).toordinal()
    return moment.toordinal()


def same_day(a: datetime | date, b: datetime | date, tz: tzinfo) -> bool:
    return day_key(a, tz) == day_key(b, tz)


def start_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: tzinfo) -> datetime:
    return datetime.combine(day, time.max, tzinfo=tz)
