from __future__ import annotations
import logging
from typing import Awaitable, Callable, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update, WebAppInfo
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from . import messages
from .managers.game import GameEngine
from .managers.store import default_display_name
from .normalizer import starts_with_letter
from .schemas import GameState

logger = logging.getLogger(__name__)

BOT_TURN_SECONDS = 20

OnChange = Callable[[str, Optional[GameState]], Awaitable[None]]


def display_name(user) -> str:
    full = f"{user.first_name or ''} {user.last_name or ''}".strip()
    return full or user.username or default_display_name(str(user.id))


class WordChainBot:
    """Maps chat commands and plain words onto engine calls."""

    def __init__(self, engine: GameEngine, webapp_url: str, on_change: Optional[OnChange] = None):
        self.engine = engine
        self.webapp_url = webapp_url
        self.on_change = on_change

    async def _changed(self, session_id: str, game: Optional[GameState]):
        if self.on_change:
            await self.on_change(session_id, game)

    def webapp_link(self, chat_id) -> str:
        return f"{self.webapp_url}?chatId={chat_id}"

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        chat_id = update.effective_chat.id
        keyboard = InlineKeyboardMarkup([[
            InlineKeyboardButton(messages.OPEN_WEBAPP, web_app=WebAppInfo(url=self.webapp_link(chat_id))),
        ]])
        await update.effective_message.reply_text(messages.WELCOME, reply_markup=keyboard)
        await update.effective_message.reply_text(messages.QUICK_START)
        await self._join(update)

    async def new_game(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        session_id = str(update.effective_chat.id)
        game = self.engine.new_game(session_id, mode='team', turn_seconds=BOT_TURN_SECONDS)
        await self._changed(session_id, game)
        await update.effective_message.reply_text(messages.NEW_GAME_STARTED)

    async def join(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        name = await self._join(update)
        await update.effective_message.reply_text(messages.joined(name))

    async def _join(self, update: Update) -> str:
        session_id = str(update.effective_chat.id)
        user = update.effective_user
        name = display_name(user)
        game = self.engine.join(session_id, str(user.id), name)
        await self._changed(session_id, game)
        return name

    async def state(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        snapshot = self.engine.state(str(update.effective_chat.id))
        await update.effective_message.reply_text(messages.describe_state(snapshot))

    async def word(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        text = (update.effective_message.text or '').strip()
        if not starts_with_letter(text):
            return
        session_id = str(update.effective_chat.id)
        result = self.engine.submit(session_id, str(update.effective_user.id), text)
        if result.outcome != 'not_your_turn':
            await self._changed(session_id, result.game or self.engine.state(session_id).game)
        await update.effective_message.reply_text(messages.describe_result(result))

    async def callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        await update.callback_query.answer(text=messages.CALLBACK_ACK)

    async def error(self, update: object, context: ContextTypes.DEFAULT_TYPE):
        logger.error("Bot update failed: %s", update, exc_info=context.error)

    def build_application(self, token: str) -> Application:
        application = Application.builder().token(token).build()
        application.add_handler(CommandHandler('start', self.start))
        application.add_handler(CommandHandler('new', self.new_game))
        application.add_handler(CommandHandler('join', self.join))
        application.add_handler(CommandHandler('state', self.state))
        application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, self.word))
        application.add_handler(CallbackQueryHandler(self.callback))
        application.add_error_handler(self.error)
        return application


async def start_polling(application: Application):
    await application.initialize()
    await application.start()
    await application.updater.start_polling()
    logger.info("Telegram bot polling started")


async def stop_polling(application: Application):
    await application.updater.stop()
    await application.stop()
    await application.shutdown()
