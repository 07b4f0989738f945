"""Tests for the Telegram transport."""

from unittest.mock import AsyncMock, Mock

import pytest
from telegram import InlineKeyboardMarkup, Message, ReplyKeyboardMarkup
from telegram.error import TelegramError
from telegram.ext import CallbackQueryHandler, MessageHandler

from ngrok_bot.bot import app
from ngrok_bot.bot.commands import CommandResponse
from ngrok_bot.bot.dispatcher import CommandDispatcher
from ngrok_bot.bot.keyboard import make_ngrok_cmd_keyboard, make_startup_keyboard


def make_update(chat_id=100, user_id=1, text="/start"):
    update = Mock()
    update.effective_chat.id = chat_id
    update.effective_user.id = user_id
    update.effective_user.full_name = "Test User"
    update.effective_message.text = text
    update.effective_message.reply_text = AsyncMock()
    return update


def make_context(dispatcher):
    context = Mock()
    context.bot.username = "ngrok_bot"
    context.bot_data = {app.DISPATCHER_KEY: dispatcher}
    return context


@pytest.fixture
def dispatcher():
    dispatcher = Mock(spec=CommandDispatcher)
    dispatcher.handle_message = AsyncMock(return_value=CommandResponse(message="hello"))
    dispatcher.handle_callback = AsyncMock(return_value=CommandResponse(message="hello"))
    return dispatcher


class TestReplyMarkup:
    def test_no_keyboard(self):
        assert app.to_reply_markup(None) is None

    def test_inline_keyboard(self, profiles):
        markup = app.to_reply_markup(make_ngrok_cmd_keyboard(list(enumerate(profiles))))

        assert isinstance(markup, InlineKeyboardMarkup)
        assert len(markup.inline_keyboard) == 2
        assert markup.inline_keyboard[1][0].text == "SSH"
        assert markup.inline_keyboard[1][0].callback_data == '{"type":"Ngrok","cmd_idx":1}'

    def test_reply_keyboard(self):
        markup = app.to_reply_markup(make_startup_keyboard())

        assert isinstance(markup, ReplyKeyboardMarkup)
        assert markup.resize_keyboard is True
        assert [button.text for button in markup.keyboard[0]] == ["/ngrok", "/killngrok"]


class TestEventFromUpdate:
    def test_event_fields(self):
        event = app.event_from_update(make_update(chat_id=-5, user_id=7), "/ngrok")

        assert event.chat_id == -5
        assert event.user_id == 7
        assert event.user_name == "Test User"
        assert event.payload == "/ngrok"

    def test_without_chat(self):
        update = make_update()
        update.effective_chat = None

        assert app.event_from_update(update, "/ngrok") is None

    def test_without_user(self):
        update = make_update()
        update.effective_user = None

        event = app.event_from_update(update, "/ngrok")

        assert event.user_id is None
        assert event.user_name is None


class TestOnMessage:
    """Test text message handling."""

    @pytest.mark.asyncio
    async def test_dispatches_and_replies(self, dispatcher):
        update = make_update(text="/help")

        await app.on_message(update, make_context(dispatcher))

        event = dispatcher.handle_message.await_args.args[0]
        assert event.payload == "/help"
        assert event.bot_username == "ngrok_bot"
        update.effective_message.reply_text.assert_awaited_once_with(
            "hello", reply_markup=None
        )

    @pytest.mark.asyncio
    async def test_send_failure_is_logged(self, dispatcher):
        """Failed send should not propagate into the handler loop"""
        update = make_update()
        update.effective_message.reply_text.side_effect = TelegramError("Forbidden")

        await app.on_message(update, make_context(dispatcher))

        dispatcher.handle_message.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_silent_when_not_addressed(self, dispatcher):
        """Commands for other bots get no reply"""
        dispatcher.handle_message.return_value = None
        update = make_update(text="/help@other_bot")

        await app.on_message(update, make_context(dispatcher))

        update.effective_message.reply_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_ignores_update_without_message(self, dispatcher):
        update = make_update()
        update.effective_message = None

        await app.on_message(update, make_context(dispatcher))

        dispatcher.handle_message.assert_not_called()


class TestOnCallback:
    """Test inline button handling."""

    def make_callback_update(self, data='{"type":"Ngrok","cmd_idx":0}'):
        update = make_update()
        query = Mock()
        query.data = data
        query.answer = AsyncMock()
        query.edit_message_text = AsyncMock()
        query.message = Mock(spec=Message)
        query.message.reply_text = AsyncMock()
        update.callback_query = query
        return update

    @pytest.mark.asyncio
    async def test_success_edits_menu(self, dispatcher):
        dispatcher.handle_callback.return_value = CommandResponse(
            message="tunnel up", edit_message=True
        )
        update = self.make_callback_update()

        await app.on_callback(update, make_context(dispatcher))

        query = update.callback_query
        query.answer.assert_awaited_once()
        query.edit_message_text.assert_awaited_once_with("tunnel up")
        query.message.reply_text.assert_not_called()

    @pytest.mark.asyncio
    async def test_failure_replies_with_new_message(self, dispatcher):
        update = self.make_callback_update()

        await app.on_callback(update, make_context(dispatcher))

        query = update.callback_query
        query.edit_message_text.assert_not_called()
        query.message.reply_text.assert_awaited_once_with("hello", reply_markup=None)

    @pytest.mark.asyncio
    async def test_non_string_data_becomes_missing_payload(self, dispatcher):
        update = self.make_callback_update(data=None)

        await app.on_callback(update, make_context(dispatcher))

        event = dispatcher.handle_callback.await_args.args[0]
        assert event.payload is None

    @pytest.mark.asyncio
    async def test_answer_failure_still_dispatches(self, dispatcher):
        update = self.make_callback_update()
        update.callback_query.answer.side_effect = TelegramError("Query is too old")

        await app.on_callback(update, make_context(dispatcher))

        dispatcher.handle_callback.assert_awaited_once()


class TestApplication:
    """Test Telegram application wiring."""

    def test_build_application(self, bot_config, dispatcher):
        application = app.build_application(bot_config, dispatcher)

        assert application.bot_data[app.DISPATCHER_KEY] is dispatcher
        handler_types = [type(handler) for handler in application.handlers[0]]
        assert handler_types == [MessageHandler, CallbackQueryHandler]

    @pytest.mark.asyncio
    async def test_post_init_registers_commands(self):
        application = Mock()
        application.bot.set_my_commands = AsyncMock()

        await app._post_init(application)

        commands = application.bot.set_my_commands.await_args.args[0]
        assert [command.command for command in commands] == [
            "start",
            "ngrok",
            "killngrok",
            "help",
        ]

    @pytest.mark.asyncio
    async def test_post_shutdown_stops_ngrok(self, dispatcher):
        """Ngrok should not outlive the bot"""
        dispatcher.ngrok = Mock()
        dispatcher.ngrok.shutdown = AsyncMock()
        application = Mock()
        application.bot_data = {app.DISPATCHER_KEY: dispatcher}

        await app._post_shutdown(application)

        dispatcher.ngrok.shutdown.assert_awaited_once()
