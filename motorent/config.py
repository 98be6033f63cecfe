import os
from pathlib import Path

from motorent.utils.constants import DEFAULT_TIMEZONE

BASE_DIR = Path(__file__).resolve().parents[1]

APP_ENV = os.getenv("APP_ENV", "dev")
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
# empty DATA_PATH keeps everything in memory
DATA_PATH = os.getenv("DATA_PATH", str(BASE_DIR / "data.pkl"))
DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", DEFAULT_TIMEZONE)
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def as_dict() -> dict:
    return {
        "APP_ENV": APP_ENV,
        "SECRET_KEY": SECRET_KEY,
        "DATA_PATH": DATA_PATH,
        "DISPLAY_TIMEZONE": DISPLAY_TIMEZONE,
        "LOG_FILE": LOG_FILE,
        "LOG_LEVEL": LOG_LEVEL,
    }
