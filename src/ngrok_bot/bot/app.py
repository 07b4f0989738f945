"""Telegram transport for the command dispatcher."""

from telegram import (
    BotCommand,
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    Message,
    ReplyKeyboardMarkup,
    Update,
)
from telegram.error import TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from ..common.logging import get_logger
from ..config import BotConfig
from .commands import Command, CommandResponse
from .dispatcher import CommandDispatcher, InboundEvent
from .keyboard import Keyboard, KeyboardKind

logger = get_logger(__name__)

DISPATCHER_KEY = "dispatcher"


def to_reply_markup(
    keyboard: Keyboard | None,
) -> InlineKeyboardMarkup | ReplyKeyboardMarkup | None:
    """Render a keyboard as Telegram markup."""
    if keyboard is None:
        return None

    if keyboard.kind == KeyboardKind.INLINE:
        return InlineKeyboardMarkup(
            [
                [
                    InlineKeyboardButton(button.text, callback_data=button.callback_data)
                    for button in row
                ]
                for row in keyboard.rows
            ]
        )

    return ReplyKeyboardMarkup(
        [[button.text for button in row] for row in keyboard.rows],
        resize_keyboard=keyboard.resize,
    )


def event_from_update(
    update: Update, payload: str | None, bot_username: str | None = None
) -> InboundEvent | None:
    """Build an inbound event from a Telegram update, None if it has no chat."""
    chat = update.effective_chat
    if chat is None:
        return None

    user = update.effective_user
    return InboundEvent(
        chat_id=chat.id,
        user_id=user.id if user else None,
        user_name=user.full_name if user else None,
        payload=payload,
        bot_username=bot_username,
    )


async def reply(message: Message, response: CommandResponse) -> None:
    try:
        await message.reply_text(
            response.message, reply_markup=to_reply_markup(response.keyboard)
        )
    except TelegramError as e:
        logger.error("Can't send a message", error=str(e))


async def on_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    message = update.effective_message
    if message is None:
        return

    event = event_from_update(update, message.text, context.bot.username)
    if event is None:
        return

    dispatcher: CommandDispatcher = context.bot_data[DISPATCHER_KEY]
    response = await dispatcher.handle_message(event)
    if response is not None:
        await reply(message, response)


async def on_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query = update.callback_query
    if query is None:
        return

    try:
        await query.answer()
    except TelegramError as e:
        logger.warning("Can't answer callback query", error=str(e))

    data = query.data if isinstance(query.data, str) else None
    event = event_from_update(update, data)
    if event is None:
        return

    dispatcher: CommandDispatcher = context.bot_data[DISPATCHER_KEY]
    response = await dispatcher.handle_callback(event)

    if response.edit_message:
        try:
            await query.edit_message_text(response.message)
        except TelegramError as e:
            logger.error("Can't edit a message", error=str(e))
    elif isinstance(query.message, Message):
        await reply(query.message, response)


async def on_error(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    logger.error("Update handling failed", exc_info=context.error)


async def _post_init(application: Application) -> None:
    commands = [BotCommand(command.value, command.description) for command in Command]
    try:
        await application.bot.set_my_commands(commands)
    except TelegramError as e:
        logger.warning("Can't register bot commands", error=str(e))


async def _post_shutdown(application: Application) -> None:
    dispatcher: CommandDispatcher = application.bot_data[DISPATCHER_KEY]
    await dispatcher.ngrok.shutdown()


def build_application(config: BotConfig, dispatcher: CommandDispatcher) -> Application:
    """Create the Telegram application wired to the dispatcher.

    Args:
        config: Bot configuration with the bot key
        dispatcher: Dispatcher answering every update

    Returns:
        Application ready for ``run_polling``
    """
    application = (
        Application.builder()
        .token(config.bot_key)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )
    application.bot_data[DISPATCHER_KEY] = dispatcher

    application.add_handler(MessageHandler(filters.TEXT, on_message))
    application.add_handler(CallbackQueryHandler(on_callback))
    application.add_error_handler(on_error)
    return application
