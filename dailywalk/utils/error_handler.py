"""Global error handler for the bot."""

import logging
import traceback

from telegram import Update
from telegram.error import TelegramError
from telegram.ext import ContextTypes

logger = logging.getLogger(__name__)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Log the failure and tell the user their reminders are still safe."""
    logger.error("Exception while handling an update:", exc_info=context.error)

    tb_list = traceback.format_exception(None, context.error, context.error.__traceback__)  # type: ignore
    logger.error(f"Traceback:\n{''.join(tb_list)}")

    if isinstance(update, Update) and update.effective_message:
        try:
            await update.effective_message.reply_text(
                "😅 Something went wrong on my side.\n\n"
                "Your existing reminders are unchanged. Please try again in a moment."
            )
        except TelegramError as e:
            logger.error(f"Failed to send error message to user: {e}")
