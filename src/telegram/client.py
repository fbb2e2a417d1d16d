"""TelegramClient — meal journal front end via python-telegram-bot."""
import asyncio
import logging
from typing import Awaitable, Callable, Optional

from telegram import Update
from telegram.ext import Application, CommandHandler, ContextTypes
from telegram.ext import MessageHandler as TGMessageHandler
from telegram.ext import filters

from src.config import Config
from src.constants import (
    CMD_CANCEL,
    CMD_DELETE,
    CMD_HELP,
    CMD_JOURNAL,
    CMD_SAVE,
    CMD_START,
    MSG_ANALYSIS_BUSY,
    MSG_ANALYSIS_CANCELLED,
    MSG_ANALYSIS_CANCELLED_LOG,
    MSG_ANALYSIS_CRASHED,
    MSG_ANALYSIS_FAILED,
    MSG_ANALYSIS_FAILED_LOG,
    MSG_BLOCKED_CHAT,
    MSG_DELETE_NOT_FOUND,
    MSG_DELETE_USAGE,
    MSG_DELETED,
    MSG_DOWNLOAD_FAILED,
    MSG_HELP,
    MSG_NOTHING_TO_CANCEL,
    MSG_NOTHING_TO_SAVE,
    MSG_SAVE_HINT,
    MSG_SAVED,
    MSG_SEND_BEFORE_RUN,
    MSG_SEND_FAIL,
)
from src.journal_store import MealJournalStore
from src.meal import MealAnalysis
from src.presenter import format_analysis, format_journal, resolve_entry_number
from src.telegram.typing import typing_indicator
from src.vision.client import VisionClient
from src.vision.errors import MealAnalysisError

logger = logging.getLogger(__name__)

# (sender, command args) -> reply
CommandCallback = Callable[[str, list[str]], str]


class TelegramClient:

    def __init__(
        self,
        config: Config,
        vision_client: VisionClient,
        journal: MealJournalStore,
    ) -> None:
        self._token = config.telegram_bot_token
        self._allowed_chat_id = config.allowed_chat_id
        self._app: Optional[Application] = None
        self._vision_client = vision_client
        self._journal = journal
        self._pending: dict[str, MealAnalysis] = {}
        self._in_flight: dict[str, asyncio.Task] = {}

    def run(self) -> None:
        self._app = (
            Application.builder().token(self._token).concurrent_updates(True).build()
        )
        self._app.add_handler(TGMessageHandler(filters.PHOTO, self._make_photo_handler()))
        self._app.add_handler(
            TGMessageHandler(filters.Document.IMAGE, self._make_photo_handler())
        )
        commands: dict[str, CommandCallback] = {
            CMD_SAVE: lambda sender, _: self.handle_save(sender),
            CMD_JOURNAL: lambda sender, _: self.handle_journal(),
            CMD_DELETE: lambda sender, args: self.handle_delete(args),
            CMD_CANCEL: lambda sender, _: self.handle_cancel(sender),
            CMD_HELP: lambda sender, _: MSG_HELP,
            CMD_START: lambda sender, _: MSG_HELP,
        }
        for name, callback in commands.items():
            self._app.add_handler(CommandHandler(name, self._make_command_handler(callback)))
        self._app.run_polling()

    async def send_message(self, to: str, text: str) -> bool:
        match self._app:
            case None:
                logger.error(MSG_SEND_BEFORE_RUN)
                return False
            case app:
                try:
                    await app.bot.send_message(chat_id=int(to), text=text)
                    return True
                except Exception as exc:
                    logger.error(MSG_SEND_FAIL, exc)
                    return False

    # ── command logic (also used in tests) ───────────────────────────────────

    def handle_save(self, sender: str) -> str:
        match self._pending.pop(sender, None):
            case None:
                return MSG_NOTHING_TO_SAVE
            case analysis:
                self._journal.add(analysis)
                return MSG_SAVED % analysis.name

    def handle_journal(self) -> str:
        return format_journal(self._journal.grouped_by_day())

    def handle_delete(self, args: list[str]) -> str:
        match args:
            case [raw] if raw.isdigit():
                number = int(raw)
            case _:
                return MSG_DELETE_USAGE
        entry = resolve_entry_number(self._journal.grouped_by_day(), number)
        match entry:
            case None:
                return MSG_DELETE_NOT_FOUND % number
            case _:
                self._journal.delete(entry.id)
                return MSG_DELETED % entry.analysis.name

    def handle_cancel(self, sender: str) -> str:
        match self._in_flight.get(sender):
            case None:
                return MSG_NOTHING_TO_CANCEL
            case task:
                task.cancel()
                return MSG_ANALYSIS_CANCELLED

    async def analyze_for(self, sender: str, image_bytes: bytes) -> str | None:
        """Run one analysis for ``sender`` and return the reply text.

        At most one analysis per chat is in flight. Returns None when the
        analysis was cancelled with /cancel; its result is dropped.
        """
        match self._in_flight.get(sender):
            case None:
                pass
            case _:
                return MSG_ANALYSIS_BUSY

        task = asyncio.create_task(self._vision_client.analyze(image_bytes))
        self._in_flight[sender] = task
        try:
            analysis = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info(MSG_ANALYSIS_CANCELLED_LOG, sender)
            return None
        except MealAnalysisError as exc:
            logger.warning(MSG_ANALYSIS_FAILED_LOG, exc)
            return str(exc)
        except Exception:
            logger.exception(MSG_ANALYSIS_CRASHED)
            return MSG_ANALYSIS_FAILED
        finally:
            self._in_flight.pop(sender, None)

        self._pending[sender] = analysis
        return f"{format_analysis(analysis)}\n\n{MSG_SAVE_HINT}"

    # ── helpers (also used in tests) ─────────────────────────────────────────

    def _is_allowed(self, update: Update) -> bool:
        if update.effective_chat is None:
            return False
        return str(update.effective_chat.id).strip() == self._allowed_chat_id.strip()

    def _check_allowed(self, update: Update) -> str | None:
        """Sender chat id, or None (logged) for chats other than ALLOWED_CHAT_ID."""
        match self._is_allowed(update):
            case False:
                chat_id = update.effective_chat.id if update.effective_chat else "?"
                logger.warning(MSG_BLOCKED_CHAT, chat_id)
                return None
            case True:
                return str(update.effective_chat.id)

    # ── internal handler factory ──────────────────────────────────────────────

    def _make_command_handler(self, callback: CommandCallback) -> Callable:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._check_allowed(update):
                case None:
                    return
                case sender:
                    await self.send_message(sender, callback(sender, list(context.args or [])))

        return _handler

    def _make_photo_handler(self) -> Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]:
        async def _handler(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
            match self._check_allowed(update):
                case None:
                    return
                case sender:
                    pass

            message = update.message
            match message:
                case None:
                    return
                case _ if message.photo:
                    source = message.photo[-1]
                case _ if message.document is not None:
                    source = message.document
                case _:
                    return

            try:
                tg_file = await source.get_file()
                image_bytes = bytes(await tg_file.download_as_bytearray())
            except Exception:
                logger.exception(MSG_DOWNLOAD_FAILED)
                await self.send_message(sender, MSG_ANALYSIS_FAILED)
                return

            async with typing_indicator(context.bot, sender):
                reply = await self.analyze_for(sender, image_bytes)
            match reply:
                case None:
                    return
                case text:
                    await self.send_message(sender, text)

        return _handler
