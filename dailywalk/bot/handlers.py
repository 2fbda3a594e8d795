"""Command handlers."""

import logging

from telegram import Update
from telegram.ext import ContextTypes

from dailywalk.bot.formatters import (
    format_help_message,
    format_settings,
    format_status,
    format_welcome_message,
)
from dailywalk.db.models import ClockTime
from dailywalk.db.repository import Repository
from dailywalk.engine.completion import CompletionTracker
from dailywalk.engine.legacy import request_and_schedule_daily_reminder
from dailywalk.engine.notifier import TelegramNotifier
from dailywalk.engine.scheduler import SchedulingEngine
from dailywalk.engine.streak import StreakCounter
from dailywalk.utils.constants import TONES
from dailywalk.utils.time_utils import today_str

logger = logging.getLogger(__name__)

PERMISSION_HINT = "I can't send you reminders yet. Please /start the bot first."


def _engine(context: ContextTypes.DEFAULT_TYPE) -> SchedulingEngine:
    return context.bot_data["engine"]


async def _current_streak(context: ContextTypes.DEFAULT_TYPE) -> int:
    engine = _engine(context)
    return await StreakCounter(engine.repo).current(today_str(engine.tz))


async def _apply_settings(
    update: Update, context: ContextTypes.DEFAULT_TYPE, **changes
) -> None:
    """Save setting changes, reschedule and echo the new settings."""
    engine = _engine(context)
    settings = await engine.repo.save_settings(**changes)

    if not await engine.recompute_schedule(await _current_streak(context)):
        await update.message.reply_text(PERMISSION_HINT)  # type: ignore
        return

    await update.message.reply_html(format_settings(settings))  # type: ignore


def _parse_switch(args: list[str] | None) -> bool | None:
    if not args or len(args) != 1:
        return None
    return {"on": True, "off": False}.get(args[0].lower())


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /start command - register this chat for reminders."""
    if not update.effective_chat or not update.message:
        return

    engine = _engine(context)
    notifier: TelegramNotifier = context.bot_data["notifier"]
    chat_id = update.effective_chat.id

    await engine.repo.set_chat_id(chat_id)
    notifier.chat_id = chat_id
    logger.info(f"Registered chat {chat_id}")

    await engine.recompute_schedule(await _current_streak(context))
    await update.message.reply_html(format_welcome_message())


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /help command."""
    if not update.message:
        return

    await update.message.reply_html(format_help_message())


async def done_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /done command - today's walk is complete."""
    if not update.message:
        return

    tracker: CompletionTracker = context.bot_data["tracker"]
    engine = tracker.engine
    today = today_str(engine.tz)

    streak = await StreakCounter(engine.repo).record_activity(today)
    await tracker.on_daily_completion(streak.current_streak)

    await update.message.reply_html(
        f"✓ Done for today. Streak: <b>{streak.current_streak}</b> "
        f"day{'s' if streak.current_streak != 1 else ''}."
    )


async def status_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /status command."""
    if not update.message:
        return

    engine = _engine(context)
    repo: Repository = engine.repo
    settings = await repo.get_settings()
    stored = await repo.get_streak()
    streak = await _current_streak(context)

    await update.message.reply_html(
        format_status(settings, streak, stored.longest_streak, engine.last_plan, engine.tz)
    )


async def remind_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /remind HH:MM command."""
    if not update.message:
        return

    if not context.args or len(context.args) != 1:
        await update.message.reply_text("Usage: /remind HH:MM")
        return

    try:
        clock = ClockTime.parse(context.args[0])
    except ValueError:
        await update.message.reply_text("Invalid time. Use 24-hour HH:MM, e.g. 07:30")
        return

    engine = _engine(context)
    if not await request_and_schedule_daily_reminder(engine, clock.hour, clock.minute):
        await update.message.reply_text(PERMISSION_HINT)
        return

    await update.message.reply_html(f"Daily reminder set for <b>{clock}</b>.")


async def evening_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /evening HH:MM|off command."""
    if not update.message:
        return

    if not context.args or len(context.args) != 1:
        await update.message.reply_text("Usage: /evening HH:MM or /evening off")
        return

    if context.args[0].lower() == "off":
        await _apply_settings(update, context, evening_reflection_enabled=False)
        return

    try:
        clock = ClockTime.parse(context.args[0])
    except ValueError:
        await update.message.reply_text("Invalid time. Use 24-hour HH:MM, e.g. 21:30")
        return

    await _apply_settings(
        update, context, evening_reflection_enabled=True, evening_reflection_time=clock
    )


async def nudge_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /nudge N|off command."""
    if not update.message:
        return

    if not context.args or len(context.args) != 1:
        await update.message.reply_text("Usage: /nudge <days per week 1-7> or /nudge off")
        return

    if context.args[0].lower() == "off":
        await _apply_settings(update, context, midday_nudge_enabled=False)
        return

    try:
        days = int(context.args[0])
    except ValueError:
        days = 0
    if not 1 <= days <= 7:
        await update.message.reply_text("Days per week must be a number from 1 to 7.")
        return

    await _apply_settings(
        update, context, midday_nudge_enabled=True, midday_nudge_days_per_week=days
    )


async def tone_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /tone gentle|accountable command."""
    if not update.message:
        return

    if not context.args or context.args[0].lower() not in TONES:
        await update.message.reply_text(f"Usage: /tone {'|'.join(TONES)}")
        return

    await _apply_settings(update, context, tone_preference=context.args[0].lower())


async def streakguard_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /streakguard on|off command."""
    if not update.message:
        return

    enabled = _parse_switch(context.args)
    if enabled is None:
        await update.message.reply_text("Usage: /streakguard on|off")
        return

    await _apply_settings(update, context, streak_protection_enabled=enabled)


async def comeback_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Handle /comeback on|off command."""
    if not update.message:
        return

    enabled = _parse_switch(context.args)
    if enabled is None:
        await update.message.reply_text("Usage: /comeback on|off")
        return

    await _apply_settings(update, context, reengagement_enabled=enabled)
