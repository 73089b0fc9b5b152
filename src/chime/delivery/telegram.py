"""Telegram delivery using aiogram."""

from __future__ import annotations

import logging
from typing import Any

from aiogram import Bot
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramAPIError, TelegramBadRequest

from chime.delivery.base import Deliverer

logger = logging.getLogger(__name__)

LOG_PREVIEW_MAX_LEN = 80


def _truncate(text: str, max_len: int = LOG_PREVIEW_MAX_LEN) -> str:
    """Truncate text for logging (first line only, max length)."""
    first_line, *rest = text.split("\n", 1)
    truncated = len(first_line) > max_len or bool(rest)
    return first_line[:max_len] + "..." if truncated else first_line


def _chat_id(chat_id: str) -> int | str:
    """Numeric chat ids go to Telegram as ints, @usernames as-is."""
    try:
        return int(chat_id)
    except ValueError:
        return chat_id


class TelegramDeliverer(Deliverer):
    """Delivers reminders through the Telegram Bot API."""

    def __init__(self, bot_token: str | None = None, *, bot: Any = None) -> None:
        if bot is None:
            if not bot_token:
                raise ValueError("A Telegram bot token is required")
            bot = Bot(token=bot_token)
        self._bot = bot

    @property
    def name(self) -> str:
        return "telegram"

    async def deliver(self, chat_id: str, text: str) -> bool:
        try:
            await self._send_with_fallback(_chat_id(chat_id), text)
        except TelegramAPIError as e:
            logger.warning(
                "telegram_delivery_failed",
                extra={"messaging.chat_id": chat_id, "error.message": str(e)},
            )
            return False

        logger.debug(
            "message_sent",
            extra={"messaging.chat_id": chat_id, "message.preview": _truncate(text)},
        )
        return True

    async def _send_with_fallback(self, chat_id: int | str, text: str) -> None:
        try:
            await self._bot.send_message(
                chat_id=chat_id, text=text, parse_mode=ParseMode.MARKDOWN
            )
        except TelegramBadRequest as e:
            if "can't parse" not in str(e).lower():
                raise
            logger.debug(f"Markdown parsing failed, sending as plain text: {e}")
            await self._bot.send_message(chat_id=chat_id, text=text, parse_mode=None)

    async def close(self) -> None:
        await self._bot.session.close()
