'''
Runtime configuration for the Stay Calendar service.

Values are read from the environment (and from a local .env file when present).
'''
import os
from datetime import date

from dotenv import load_dotenv

load_dotenv()


def _env_date(name: str, default: str) -> date:
    '''Read an ISO date (YYYY-MM-DD) from the environment.'''
    return date.fromisoformat(os.getenv(name, default))


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # ------------------------
    # Supabase
    # ------------------------
    SUPABASE_URL = os.getenv("SUPABASE_URL")
    SUPABASE_KEY = os.getenv("SUPABASE_KEY")
    BOOKINGS_TABLE = os.getenv("BOOKINGS_TABLE", "bookings")
    REALTIME_ENABLED = _env_flag("REALTIME_ENABLED", "true")

    # ------------------------
    # Date selection sessions
    # ------------------------
    SELECTION_SESSION_LIMIT = int(os.getenv("SELECTION_SESSION_LIMIT", "1000"))

    # ------------------------
    # Owner access
    # ------------------------
    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "powder")

    # ------------------------
    # EmailJS notifications
    # ------------------------
    EMAILJS_SERVICE_ID = os.getenv("EMAILJS_SERVICE_ID")
    EMAILJS_TEMPLATE_ID = os.getenv("EMAILJS_TEMPLATE_ID")
    EMAILJS_PUBLIC_KEY = os.getenv("EMAILJS_PUBLIC_KEY")
    EMAILJS_API_URL = os.getenv("EMAILJS_API_URL", "https://api.emailjs.com/api/v1.0/email/send")
    NOTIFY_TIMEOUT_SECONDS = float(os.getenv("NOTIFY_TIMEOUT_SECONDS", "10"))

    # ------------------------
    # Season window (inclusive)
    # ------------------------
    SEASON_START = _env_date("SEASON_START", "2025-11-15")
    SEASON_END = _env_date("SEASON_END", "2026-04-15")

    # ------------------------
    # Logging
    # ------------------------
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
