"""Telegram typing indicator — sends chat action every N seconds while a block runs."""
import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from telegram import Bot
from telegram.constants import ChatAction

from src.constants import MSG_TYPING_FAILED, TELEGRAM_TYPING_INTERVAL

logger = logging.getLogger(__name__)


async def _keep_typing(bot: Bot, chat_id: str, stop: asyncio.Event) -> None:
    while not stop.is_set():
        try:
            await bot.send_chat_action(chat_id=int(chat_id), action=ChatAction.TYPING)
        except Exception as exc:
            logger.debug(MSG_TYPING_FAILED, exc)
        try:
            await asyncio.wait_for(stop.wait(), TELEGRAM_TYPING_INTERVAL)
        except asyncio.TimeoutError:
            pass


@asynccontextmanager
async def typing_indicator(bot: Bot, chat_id: str) -> AsyncIterator[None]:
    stop = asyncio.Event()
    task = asyncio.create_task(_keep_typing(bot, chat_id, stop))
    try:
        yield
    finally:
        stop.set()
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
