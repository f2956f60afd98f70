"""
main.py
-------
Entry point for the Arrears Alarm Telegram bot.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Configure and start the Telegram bot with all handlers.
"""

from telegram import BotCommand
from telegram.ext import Application, CommandHandler

from config import TELEGRAM_BOT_TOKEN
from db.connection import init_pool, close_pool
from db.init_db import create_tables
from handlers.start_handler import start_command, help_command
from handlers.payment_handler import (
    add_bill_command,
    add_recurring_command,
    alerts_command,
    bills_command,
    delete_bill_command,
    edit_bill_command,
    history_command,
    paid_command,
    week_command,
)
from utils.logger import get_logger

logger = get_logger(__name__)

COMMANDS = [
    ("start", "🚀 Start", start_command),
    ("help", "📖 Help", help_command),
    ("bills", "🧾 Upcoming bills", bills_command),
    ("add_bill", "➕ Add a one-time bill", add_bill_command),
    ("add_recurring", "🔁 Add a monthly bill", add_recurring_command),
    ("paid", "✅ Mark a bill paid", paid_command),
    ("edit_bill", "✏️ Edit a bill", edit_bill_command),
    ("delete_bill", "🗑️ Delete a bill", delete_bill_command),
    ("alerts", "⏰ Due in the next two days", alerts_command),
    ("week", "📆 Due this week", week_command),
    ("history", "📜 Paid bills", history_command),
]


async def set_bot_commands(application: Application) -> None:
    """Register bot commands menu in Telegram on startup."""
    await application.bot.set_my_commands(
        [BotCommand(name, description) for name, description, _ in COMMANDS]
    )
    logger.info("Bot commands menu registered successfully.")


def main() -> None:
    """Initialize and run the bot."""

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    create_tables()

    # ── 2. Build the Telegram application ─────────────────
    logger.info("Starting Telegram bot...")
    app = Application.builder().token(TELEGRAM_BOT_TOKEN).post_init(set_bot_commands).build()

    # ── 3. Register command handlers ──────────────────────
    for name, _, callback in COMMANDS:
        app.add_handler(CommandHandler(name, callback))

    # ── 4. Start polling ──────────────────────────────────
    logger.info("Arrears Alarm is running! Press Ctrl+C to stop.")
    app.run_polling(drop_pending_updates=True, allowed_updates=["message"])

    # ── 5. Cleanup on shutdown ────────────────────────────
    close_pool()
    logger.info("Arrears Alarm stopped.")


if __name__ == "__main__":
    main()
