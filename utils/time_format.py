from datetime import timedelta


def format_remaining(remaining: timedelta) -> str:
    """Formats a countdown as HH:MM:SS. Negative values render as zero."""
    total_seconds = max(int(remaining.total_seconds()), 0)
    hours = total_seconds // 3600
    minutes = total_seconds // 60 % 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_hour_of_day(hour: int) -> str:
    return f"{hour:02d}:00"
