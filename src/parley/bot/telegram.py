"""
Telegram transport — python-telegram-bot Application wiring.

Translates updates into InboundEvents for the CommandRouter and binds
replies to the originating message. Everything Telegram-specific lives
here; the router and services never see an Update.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Iterable

from telegram import BotCommand, Update
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    ApplicationBuilder,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from parley.bot.router import EventKind, InboundEvent
from parley.media.download import DownloadError

if TYPE_CHECKING:
    from telegram import Bot

    from parley.bot.router import CommandRouter
    from parley.core.config import TelegramConfig

logger = logging.getLogger(__name__)

BOT_COMMANDS = [
    BotCommand("teach", "Start conversation"),
    BotCommand("reset", "Reset session"),
]

Hook = Callable[[], Awaitable[None]]


class TelegramFileResolver:
    """Resolves a voice file_id to a downloadable URL."""

    def __init__(self, bot: "Bot") -> None:
        self._bot = bot

    async def get_file_link(self, file_id: str) -> str:
        try:
            tg_file = await self._bot.get_file(file_id)
        except TelegramError as exc:
            raise DownloadError(f"file lookup failed: {exc}") from exc
        if not tg_file.file_path:
            raise DownloadError(f"Telegram returned no file path for {file_id}")
        return tg_file.file_path


def event_from_update(update: Update, kind: EventKind) -> InboundEvent:
    message = update.effective_message
    user = update.effective_user
    sender_id = user.id if user is not None else None

    text = ""
    file_id = ""
    if message is not None:
        text = message.text or ""
        if message.voice is not None:
            file_id = message.voice.file_id

    return InboundEvent(kind=kind, sender_id=sender_id, text=text, file_id=file_id)


def make_handler(router: "CommandRouter", kind: EventKind):
    async def handle(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        message = update.effective_message
        if message is None:
            return
        await router.dispatch(event_from_update(update, kind), message.reply_text)

    return handle


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Unhandled error while processing update", exc_info=context.error)


def build_application(
    tg_config: "TelegramConfig",
    startup: Iterable[Hook] = (),
    shutdown: Iterable[Hook] = (),
) -> Application:
    """Create the Application; handlers are attached by register_handlers."""
    startup = list(startup)
    shutdown = list(shutdown)

    async def post_init(application: Application) -> None:
        for hook in startup:
            await hook()
        await application.bot.set_my_commands(BOT_COMMANDS)
        logger.info("Bot commands registered")

    async def post_shutdown(application: Application) -> None:
        for hook in shutdown:
            await hook()

    return (
        ApplicationBuilder()
        .token(tg_config.token)
        .concurrent_updates(tg_config.concurrent_updates)
        .post_init(post_init)
        .post_shutdown(post_shutdown)
        .build()
    )


def register_handlers(application: Application, router: "CommandRouter") -> None:
    application.add_handler(CommandHandler("start", make_handler(router, EventKind.START)))
    application.add_handler(CommandHandler("teach", make_handler(router, EventKind.TEACH)))
    application.add_handler(CommandHandler("reset", make_handler(router, EventKind.RESET)))
    application.add_handler(
        MessageHandler(filters.TEXT & ~filters.COMMAND, make_handler(router, EventKind.TEXT))
    )
    application.add_handler(
        MessageHandler(filters.VOICE, make_handler(router, EventKind.VOICE))
    )
    application.add_error_handler(on_error)
