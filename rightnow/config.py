"""Environment configuration for rightnow.

Values are read from the process environment (and a local `.env` file when present).
"""

import os
from dotenv import load_dotenv

from rightnow.models.constants import DEFAULT_AVAILABLE_MINUTES

load_dotenv()


def get_time_zone() -> str:
    """IANA time zone used to decide what "today" means."""
    return os.getenv("RIGHTNOW_TIME_ZONE", "UTC")


def get_default_available_minutes() -> int:
    """Fallback for available-minutes input that is not a usable number."""
    raw = os.getenv("RIGHTNOW_DEFAULT_AVAILABLE_MINUTES")
    if not raw:
        return DEFAULT_AVAILABLE_MINUTES
    try:
        return int(raw)
    except ValueError:
        return DEFAULT_AVAILABLE_MINUTES


def get_google_calendar_token_path() -> str:
    return os.getenv("GOOGLE_CALENDAR_TOKEN_PATH", "token.json")


def get_google_calendar_credentials_path() -> str:
    return os.getenv("GOOGLE_CALENDAR_CREDENTIALS_PATH", "credentials.json")


def get_google_calendar_id() -> str:
    return os.getenv("GOOGLE_CALENDAR_ID", "primary")
