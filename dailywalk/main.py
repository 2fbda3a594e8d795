"""Main entry point for the dailywalk reminder bot."""

import logging
import sys
from datetime import time
from zoneinfo import ZoneInfo

from telegram.ext import Application, CommandHandler, ContextTypes

from dailywalk.bot.handlers import (
    comeback_command,
    done_command,
    evening_command,
    help_command,
    nudge_command,
    remind_command,
    start_command,
    status_command,
    streakguard_command,
    tone_command,
)
from dailywalk.config import Config
from dailywalk.db.migrations import run_migrations
from dailywalk.db.repository import Repository
from dailywalk.engine.completion import CompletionTracker
from dailywalk.engine.notifier import TelegramNotifier, ensure_initialized
from dailywalk.engine.scheduler import SchedulingEngine
from dailywalk.engine.streak import StreakCounter
from dailywalk.utils.error_handler import error_handler
from dailywalk.utils.time_utils import today_str

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, Config.LOG_LEVEL),
    stream=sys.stdout,
)

logger = logging.getLogger(__name__)

# Shortly after local midnight the horizon moves forward a day
ROLLOVER_TIME = time(0, 5)


async def recompute(engine: SchedulingEngine) -> bool:
    streak = await StreakCounter(engine.repo).current(today_str(engine.tz))
    return await engine.recompute_schedule(streak)


async def rollover_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Job callback for the daily horizon rollover."""
    engine: SchedulingEngine = context.bot_data["engine"]
    await recompute(engine)


async def post_init(application: Application) -> None:
    """Initialize bot resources after application is created."""
    await run_migrations(Config.DATABASE_PATH)

    repo = Repository(Config.DATABASE_PATH)
    await repo.connect()

    ensure_initialized()
    notifier = TelegramNotifier(application, await repo.get_chat_id())
    engine = SchedulingEngine(repo, notifier, Config.TIMEZONE, Config.probe_hours())

    application.bot_data["repo"] = repo
    application.bot_data["notifier"] = notifier
    application.bot_data["engine"] = engine
    application.bot_data["tracker"] = CompletionTracker(engine)

    # Jobs don't survive a restart; rebuild them from stored state
    if await recompute(engine):
        logger.info("Startup schedule rebuilt")

    application.job_queue.run_daily(  # type: ignore
        rollover_job,
        time=ROLLOVER_TIME.replace(tzinfo=ZoneInfo(Config.TIMEZONE)),
        name="rollover",
    )

    logger.info("dailywalk initialized successfully")


async def post_shutdown(application: Application) -> None:
    """Cleanup resources on shutdown."""
    repo: Repository = application.bot_data.get("repo")
    if repo:
        await repo.close()

    logger.info("dailywalk shut down")


def main() -> None:
    """Start the bot."""
    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    application = (
        Application.builder()
        .token(Config.TELEGRAM_BOT_TOKEN)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )

    application.add_handler(CommandHandler("start", start_command))
    application.add_handler(CommandHandler("help", help_command))
    application.add_handler(CommandHandler("done", done_command))
    application.add_handler(CommandHandler("status", status_command))

    # Settings commands
    application.add_handler(CommandHandler("remind", remind_command))
    application.add_handler(CommandHandler("evening", evening_command))
    application.add_handler(CommandHandler("nudge", nudge_command))
    application.add_handler(CommandHandler("tone", tone_command))
    application.add_handler(CommandHandler("streakguard", streakguard_command))
    application.add_handler(CommandHandler("comeback", comeback_command))

    application.add_error_handler(error_handler)

    logger.info("Starting dailywalk bot...")
    application.run_polling(allowed_updates=["message"])


if __name__ == "__main__":
    main()
