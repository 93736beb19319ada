# Environment configuration; .env beside the app is loaded first.
import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
load_dotenv(BASE_DIR / ".env")

APP_NAME = os.environ.get("REFLECT_APP_NAME", "Bootcamp Reflections")
DB_PATH = Path(os.environ.get("REFLECT_DB_PATH") or BASE_DIR / "reflections.db")
LOG_LEVEL = os.environ.get("REFLECT_LOG_LEVEL", "INFO").upper()
MIN_PASSWORD_LENGTH = 8


def admin_emails() -> frozenset:
    raw = os.environ.get("REFLECT_ADMIN_EMAILS", "")
    return frozenset(e.strip().lower() for e in raw.split(",") if e.strip())
