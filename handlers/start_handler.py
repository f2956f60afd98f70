"""
handlers/start_handler.py
--------------------------
Handles /start and /help commands.
"""

from telegram import Update
from telegram.ext import ContextTypes

from engine.reminders import BUILTIN_CADENCES
from utils.logger import get_logger

logger = get_logger(__name__)

HELP_TEXT = (
    "⏰ Arrears Alarm - never miss a bill.\n\n"
    "Commands:\n"
    "/bills - upcoming bills, most urgent first\n"
    "/add_bill name | amount | YYYY-MM-DD [| reminder]\n"
    "/add_recurring name | amount | start YYYY-MM-DD [| reminder]\n"
    "/paid <id> - mark paid (recurring bills roll to next month)\n"
    "/edit_bill <id> | field | value\n"
    "/delete_bill <id>\n"
    "/alerts - what is due in the next two days\n"
    "/week - what is due this week\n"
    "/history - paid bills\n\n"
    "Reminders: " + ", ".join(BUILTIN_CADENCES)
)


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - show welcome message."""
    user = update.effective_user
    logger.info(f"User {user.id} ({user.first_name}) started the bot.")
    await update.message.reply_text(
        f"Hi {user.first_name}! 👋\n"
        f"I keep track of your bills and tell you what is due.\n\n"
        f"Send /help to see every command."
    )


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command - show all available commands."""
    await update.message.reply_text(HELP_TEXT)
