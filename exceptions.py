# fasting_tracker/exceptions.py


class FastingTrackerError(Exception):
    """Base class for recoverable errors raised by the tracker."""


class InvalidWeightInput(FastingTrackerError):
    """The entered weight is not a positive number. Nothing is persisted."""

    def __init__(self, raw_value: str):
        self.raw_value = raw_value
        super().__init__(f"'{raw_value}' is not a valid weight.")


class CannotClearActiveSession(FastingTrackerError):
    """Today's record belongs to a fast that is still running."""


class NoPersistedState(FastingTrackerError):
    """Nothing was saved for the timer. Treated as idle by callers."""


class ReconfigureWhileRunning(FastingTrackerError):
    """The fasting duration cannot change while a fast is running."""


class CannotStartWhileRunning(FastingTrackerError):
    """A fast is already running and must be stopped first."""


class DayAlreadyRecorded(FastingTrackerError):
    """A record already exists for the day and the caller chose not to overwrite it."""


class NoActiveSession(FastingTrackerError):
    """Stop or complete was requested while no fast is running."""
