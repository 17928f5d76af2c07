# fasting_tracker/config.py
import os

# --- Fasting Window ---

# Length of a fast in hours. Users can pick anything between the bounds.
DEFAULT_FASTING_DURATION_HOURS = 16.0
MIN_FASTING_DURATION_HOURS = 12.0
MAX_FASTING_DURATION_HOURS = 24.0

# Eating window shown next to the timer, as hour of day.
DEFAULT_START_HOUR_OF_DAY = 10
DEFAULT_END_HOUR_OF_DAY = 22

# --- Calendar ---

# All day keys are computed in this time zone.
TIMEZONE = os.environ.get("FASTING_TIMEZONE", "UTC")

# First day of the week, Python numbering (Monday=0 ... Sunday=6).
FIRST_WEEKDAY = int(os.environ.get("FASTING_FIRST_WEEKDAY", "6"))

# How many periods back the history screen can go (0 = current, 1, 2).
MAX_HISTORY_OFFSET = 2

# Sample spacing for the monthly weight chart.
MONTHLY_SAMPLE_STEP_DAYS = 5

# --- Reminders ---

# Next fast reminder fires this long after the last fast ended.
FASTING_START_REMINDER_HOURS = 24
# Weight reminder fires this long after the last weigh-in.
WEIGHT_REMINDER_DAYS = 7
# A reminder whose time has already passed is pushed this far into the future.
OVERDUE_REMINDER_DELAY_HOURS = 1
# Success notification is delivered this many seconds after completion.
SUCCESS_NOTIFICATION_DELAY_SECONDS = 1

DEFAULT_FASTING_EMOJI = "🍽️"
DEFAULT_WEIGHT_EMOJI = "⚖️"
# 1=Sunday, 2=Monday, ...
DEFAULT_WEIGHT_RECORD_DAY_OF_WEEK = 2

# --- Ads ---

# Minimum number of seconds between two interstitial ads.
INTERSTITIAL_AD_INTERVAL_SECONDS = 60
AD_REMOVAL_PRODUCT_ID = "com.sixteenhourdiet.adremoval"

# --- Storage ---

# One of "json", "memory" or "firestore".
STORE_BACKEND = os.environ.get("FASTING_STORE_BACKEND", "json")
STORE_PATH = os.environ.get(
    "FASTING_STORE_PATH", os.path.join(os.path.expanduser("~"), ".fasting_tracker.json")
)
FIRESTORE_USER_ID = os.environ.get("FASTING_USER_ID", "default")
FIRESTORE_USERS_COLLECTION = "users"
FIRESTORE_STATE_COLLECTION = "appState"

KEY_WEIGHT_RECORDS = "weightRecords"
KEY_DIET_RECORDS = "dietRecords"
KEY_FASTING_DURATION = "fastingDuration"
KEY_START_HOUR = "startHour"
KEY_END_HOUR = "endHour"
KEY_NOTIFICATION_SETTINGS = "notificationSettings"
KEY_TIMER_STATE = "timerState"
KEY_PREMIUM_STATUS = "premiumStatus"
