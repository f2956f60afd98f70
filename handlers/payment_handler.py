"""
handlers/payment_handler.py
---------------------------
Handles bill commands. Arguments use a pipe-separated format:
    /add_bill Rent | 800 | 2026-03-01
    /add_recurring Internet | 30 | 2026-03-15 | three_days_before
"""

from telegram import Update
from telegram.ext import ContextTypes

from services.payment_service import PaymentService
from utils.logger import get_logger

logger = get_logger(__name__)
payment_service = PaymentService()

_EDIT_FIELDS = {
    "name": "name",
    "amount": "amount",
    "min": "min_payment_amount",
    "due": "due_date",
    "tag": "category_tag",
    "reminder": "reminder_cadence",
}


def _parse_bill_args(text: str) -> dict | None:
    """
    Parse "name | amount | date [| cadence]".

    The amount may be left blank ("Gym | | 2026-03-01") when it is not
    tracked. Returns None when the name or date part is missing.
    """
    parts = [p.strip() for p in text.split("|")]
    if len(parts) < 3 or not parts[0] or not parts[2]:
        return None
    return {
        "name": parts[0],
        "amount": parts[1] or None,
        "date": parts[2],
        "reminder_cadence": parts[3] if len(parts) >= 4 and parts[3] else None,
    }


def _parse_edit_args(text: str) -> tuple[str, dict] | None:
    """Parse "<id> | field | value" into (id, patch)."""
    parts = [p.strip() for p in text.split("|")]
    if len(parts) != 3 or not parts[0]:
        return None
    field = _EDIT_FIELDS.get(parts[1].lower())
    if field is None:
        return None
    return parts[0], {field: parts[2] or None}


async def _reply(update: Update, result: dict) -> None:
    if result.get("success"):
        await update.message.reply_text(result["message"])
    else:
        await update.message.reply_text(f"⚠️ {result.get('error', 'Something went wrong.')}")


async def bills_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /bills - list unpaid bills, most urgent first."""
    await update.message.reply_text(payment_service.list_upcoming(update.effective_user.id))


async def add_bill_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add_bill name | amount | due date [| cadence]."""
    parsed = _parse_bill_args(" ".join(context.args or []))
    if parsed is None:
        await update.message.reply_text(
            "📝 Usage: /add_bill name | amount | YYYY-MM-DD [| reminder]\n"
            "Example: /add_bill Car insurance | 120 | 2026-03-01 | one_week_before"
        )
        return
    result = payment_service.add_payment(
        update.effective_user.id,
        parsed["name"],
        parsed["date"],
        parsed["amount"],
        reminder_cadence=parsed["reminder_cadence"],
    )
    await _reply(update, result)


async def add_recurring_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /add_recurring name | amount | start date [| cadence]."""
    parsed = _parse_bill_args(" ".join(context.args or []))
    if parsed is None:
        await update.message.reply_text(
            "📝 Usage: /add_recurring name | amount | start YYYY-MM-DD [| reminder]\n"
            "The bill repeats monthly on the start date's day."
        )
        return
    result = payment_service.add_payment(
        update.effective_user.id,
        parsed["name"],
        amount=parsed["amount"],
        is_recurring=True,
        start_date=parsed["date"],
        reminder_cadence=parsed["reminder_cadence"],
    )
    await _reply(update, result)


async def paid_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /paid <id> - toggle a bill between paid and upcoming."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /paid <bill id>")
        return
    await _reply(update, payment_service.toggle_paid(update.effective_user.id, context.args[0]))


async def edit_bill_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /edit_bill <id> | field | value."""
    parsed = _parse_edit_args(" ".join(context.args or []))
    if parsed is None:
        await update.message.reply_text(
            "⚠️ Usage: /edit_bill <bill id> | field | value\n"
            f"Fields: {', '.join(_EDIT_FIELDS)}"
        )
        return
    ref, patch = parsed
    await _reply(update, payment_service.edit_payment(update.effective_user.id, ref, patch))


async def delete_bill_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /delete_bill <id>."""
    if not context.args:
        await update.message.reply_text("⚠️ Usage: /delete_bill <bill id>")
        return
    await _reply(update, payment_service.delete_payment(update.effective_user.id, context.args[0]))


async def alerts_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /alerts - bills due in the next two days, per date."""
    await update.message.reply_text(payment_service.daily_alerts(update.effective_user.id))


async def week_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /week - what is due in the next seven days."""
    await update.message.reply_text(payment_service.week_summary(update.effective_user.id))


async def history_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /history - paid bills, newest first."""
    await update.message.reply_text(payment_service.history(update.effective_user.id))
