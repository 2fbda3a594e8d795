"""Boundary to whatever actually delivers notifications.

The engine only talks to a `Notifier`. `TelegramNotifier` implements it on
top of the python-telegram-bot job queue: one `run_once` job per
notification, named by its identifier.
"""

import logging
import threading
from typing import Protocol

from telegram.error import TelegramError
from telegram.ext import Application, ContextTypes, JobQueue

from dailywalk.db.models import ScheduledNotification
from dailywalk.utils.constants import CHANNEL_ROUTINE, CHANNELS, ChannelConfig

logger = logging.getLogger(__name__)


class SchedulingError(Exception):
    """A single notification could not be handed to the notifier."""


class Notifier(Protocol):
    async def request_permission(self) -> bool: ...

    async def schedule(self, notification: ScheduledNotification) -> str: ...

    async def cancel(self, identifier: str) -> None: ...

    async def list_scheduled(self) -> list[str]: ...


class _ChannelSetup:
    """Registers delivery channels at most once per process."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._channels: dict[str, ChannelConfig] | None = None

    def ensure_initialized(self) -> dict[str, ChannelConfig]:
        with self._lock:
            if self._channels is None:
                self._channels = dict(CHANNELS)
                for key, channel in self._channels.items():
                    logger.info(
                        f"Registered channel '{key}' ({channel.name}, {channel.importance})"
                    )
            return self._channels


_setup = _ChannelSetup()


def ensure_initialized() -> dict[str, ChannelConfig]:
    """Configure delivery channels; safe to call any number of times."""
    return _setup.ensure_initialized()


def channel_config(channel: str) -> ChannelConfig:
    channels = ensure_initialized()
    return channels.get(channel, channels[CHANNEL_ROUTINE])


def format_notification(notification: ScheduledNotification) -> str:
    return f"<b>{notification.title}</b>\n{notification.body}"


async def deliver_job(context: ContextTypes.DEFAULT_TYPE) -> None:
    """Job callback: send a scheduled notification to its chat."""
    job = context.job
    notification: ScheduledNotification = job.data  # type: ignore
    channel = channel_config(notification.channel)

    try:
        await context.bot.send_message(
            chat_id=job.chat_id,  # type: ignore
            text=format_notification(notification),
            parse_mode="HTML",
            disable_notification=channel.importance == "low",
        )
        logger.info(f"Delivered {notification.identifier}")
    except TelegramError as e:
        logger.error(f"Failed to deliver {notification.identifier}: {e}")


class TelegramNotifier:
    """Notifier backed by the bot's JobQueue and a single registered chat."""

    def __init__(self, application: Application, chat_id: int | None = None):
        if application.job_queue is None:
            raise RuntimeError("JobQueue unavailable; install python-telegram-bot[job-queue]")
        self.application = application
        self.chat_id = chat_id

    @property
    def job_queue(self) -> JobQueue:
        return self.application.job_queue  # type: ignore

    async def request_permission(self) -> bool:
        """A chat must be registered and reachable."""
        if self.chat_id is None:
            logger.info("No chat registered; notifications not permitted")
            return False
        try:
            await self.application.bot.get_chat(self.chat_id)
        except TelegramError as e:
            logger.warning(f"Chat {self.chat_id} unreachable: {e}")
            return False
        ensure_initialized()
        return True

    async def schedule(self, notification: ScheduledNotification) -> str:
        """Queue one delivery job, replacing any job with the same identifier."""
        await self.cancel(notification.identifier)
        try:
            self.job_queue.run_once(
                deliver_job,
                when=notification.fire_at,
                data=notification,
                name=notification.identifier,
                chat_id=self.chat_id,
            )
        except (ValueError, RuntimeError) as e:
            raise SchedulingError(f"{notification.identifier}: {e}") from e
        return notification.identifier

    async def cancel(self, identifier: str) -> None:
        for job in self.job_queue.get_jobs_by_name(identifier):
            job.schedule_removal()

    async def list_scheduled(self) -> list[str]:
        return [job.name for job in self.job_queue.jobs() if job.name and not job.removed]
