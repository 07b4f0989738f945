"""Routing of inbound bot events through the access gates to handlers."""

import asyncio

from pydantic import BaseModel, ConfigDict

from ..common.exceptions import (
    InvalidSelectionIndexError,
    ProcessError,
    SelectionError,
    TunnelError,
)
from ..common.logging import get_logger
from ..config import BotConfig, TunnelProfile
from ..ngrok.discovery import TunnelDiscoveryClient
from ..ngrok.process import NgrokProcess
from . import responses
from .access import check_chat_access, check_user_access
from .commands import (
    Command,
    CommandResponse,
    error_cmd,
    help_cmd,
    is_addressed_to_other_bot,
    kill_ngrok_cmd,
    list_ngrok_cmd,
    start_cmd,
)
from .keyboard import ButtonQuery, parse_button_query

logger = get_logger(__name__)


class InboundEvent(BaseModel):
    """Transport independent description of a message or button press."""

    model_config = ConfigDict(frozen=True)

    chat_id: int
    user_id: int | None = None
    user_name: str | None = None
    payload: str | None = None
    bot_username: str | None = None


class CommandDispatcher:
    """Applies chat and command access checks and runs the matching handler."""

    def __init__(
        self,
        config: BotConfig,
        ngrok: NgrokProcess,
        discovery: TunnelDiscoveryClient,
    ):
        self.config = config
        self.ngrok = ngrok
        self.discovery = discovery
        # held from spawn to discovery so a report and its cleanup belong to one child
        self._tunnel_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: BotConfig) -> "CommandDispatcher":
        """Create the dispatcher together with its supervisor and discovery client."""
        settings = config.ngrok
        ngrok = NgrokProcess(binary=settings.binary)
        discovery = TunnelDiscoveryClient(
            ngrok, api_url=settings.api_url, timeout=settings.api_timeout
        )
        return cls(config, ngrok, discovery)

    @property
    def profiles(self) -> list[TunnelProfile]:
        return self.config.ngrok_cmds

    async def handle_message(self, event: InboundEvent) -> CommandResponse | None:
        """Answer a text message or command.

        Returns None for commands addressed to another bot in a group chat.
        """
        logger.info(
            "Bot called",
            chat_id=event.chat_id,
            user_id=event.user_id,
            user_name=event.user_name,
        )

        decision = check_chat_access(event.chat_id, self.config.permitted_chats)
        if not decision.granted:
            logger.warning("Chat declined", chat_id=event.chat_id)
            return CommandResponse(message=decision.reason or responses.BAD_CHAT_ID)

        if is_addressed_to_other_bot(event.payload, event.bot_username):
            logger.debug("Command for another bot ignored", payload=event.payload)
            return None

        command = Command.parse(event.payload, event.bot_username)
        if command == Command.START:
            return start_cmd()
        if command == Command.NGROK:
            return list_ngrok_cmd(event.user_id, self.profiles)
        if command == Command.KILL_NGROK:
            return kill_ngrok_cmd(self.ngrok)
        if command == Command.HELP:
            return help_cmd()
        return error_cmd()

    async def handle_callback(self, event: InboundEvent) -> CommandResponse:
        """Answer an inline button press.

        A successful selection edits the menu message in place with the
        outcome. Every failure is answered with a new message and never
        reaches the supervisor.
        """
        logger.info(
            "Command called",
            chat_id=event.chat_id,
            user_id=event.user_id,
            user_name=event.user_name,
        )

        decision = check_chat_access(event.chat_id, self.config.permitted_chats)
        if not decision.granted:
            logger.warning("Chat declined", chat_id=event.chat_id)
            return CommandResponse(message=decision.reason or responses.BAD_CHAT_ID)

        try:
            query = parse_button_query(event.payload)
            profile = self.resolve_profile(query)
        except SelectionError as e:
            logger.warning("Bad button query", payload=event.payload, error=str(e))
            return CommandResponse(message=str(e))

        # buttons are re-checked, a menu might have been offered to someone else
        decision = check_user_access(event.user_id, profile)
        if not decision.granted:
            logger.warning(
                "User declined", user_id=event.user_id, profile=profile.description
            )
            return CommandResponse(message=decision.reason or responses.UNKNOWN_USER)

        message = await self.start_tunnel(profile)
        return CommandResponse(message=message, edit_message=True)

    def resolve_profile(self, query: ButtonQuery) -> TunnelProfile:
        """Look up the profile a button refers to.

        Raises:
            InvalidSelectionIndexError: If the index is out of range
        """
        if query.cmd_idx >= len(self.profiles):
            raise InvalidSelectionIndexError(responses.BAD_OPTION_SELECTED)
        return self.profiles[query.cmd_idx]

    async def start_tunnel(self, profile: TunnelProfile) -> str:
        """Start ngrok for a profile and report its public URL.

        A tunnel whose URL cannot be discovered is killed again. Selections
        made while another one is settling wait for it to finish.
        """
        logger.info("Chosen ngrok config", profile=profile.model_dump())
        async with self._tunnel_lock:
            return await self._start_and_discover(profile)

    async def _start_and_discover(self, profile: TunnelProfile) -> str:
        settings = self.config.ngrok
        try:
            report = await self.ngrok.start(
                profile.connection_type,
                profile.port,
                profile.domain,
                kill_on_start=settings.kill_on_start,
            )
        except ProcessError as e:
            logger.error("Ngrok start failed", error=str(e))
            return str(e)

        await asyncio.sleep(settings.settle_delay)
        logger.info("Ngrok started!")

        try:
            info = await self.discovery.fetch_public_url()
        except TunnelError as e:
            self.ngrok.kill()
            message = responses.NGROK_API_CONNECTION_ERROR.format(error_description=e)
            logger.error("Ngrok tunnel discovery failed", error=str(e))
            return message

        return responses.NGROK_TUNNEL_OBTAINED.format(
            connection_report=report,
            url=info.public_url,
            host=info.host,
            port=info.port if info.port is not None else "-",
            howto=profile.howto or responses.DEFAULT_HOWTO,
        )
