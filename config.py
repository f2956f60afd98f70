"""
config.py
---------
Central configuration module. Loads all environment variables
from the .env file and exposes them as typed constants.
LOG_LEVEL is read from the same environment by utils/logger.py.
The engine package never imports this module; services pass values in.
"""

import os
from dotenv import load_dotenv

load_dotenv()


# ── Telegram ──────────────────────────────────────────────
TELEGRAM_BOT_TOKEN: str = os.getenv("TELEGRAM_BOT_TOKEN", "")

# ── PostgreSQL ────────────────────────────────────────────
DB_HOST: str = os.getenv("DB_HOST", "localhost")
DB_PORT: int = int(os.getenv("DB_PORT", "5432"))
DB_NAME: str = os.getenv("DB_NAME", "arrears_alarm")
DB_USER: str = os.getenv("DB_USER", "arrears_user")
DB_PASS: str = os.getenv("DB_PASS", "")

DATABASE_URL: str = os.getenv(
    "DATABASE_URL",
    f"postgresql://{DB_USER}:{DB_PASS}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)

# ── Display ───────────────────────────────────────────────
CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "$")

# ── Reminders ─────────────────────────────────────────────
# Cadence assigned to new bills when none is given.
DEFAULT_REMINDER_CADENCE: str = os.getenv("DEFAULT_REMINDER_CADENCE", "one_day_before")

# Additional cadences on top of the built-in table, e.g. "two_weeks_before:14,four_days_before:4"
EXTRA_REMINDER_CADENCES: str = os.getenv("EXTRA_REMINDER_CADENCES", "")
