"""Bot commands and their responses."""

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..config import TunnelProfile
from ..ngrok.process import NgrokProcess
from . import responses
from .access import allowed_profiles
from .keyboard import Keyboard, make_ngrok_cmd_keyboard, make_startup_keyboard


class Command(str, Enum):
    """Supported bot commands."""

    START = "start"
    NGROK = "ngrok"
    KILL_NGROK = "killngrok"
    HELP = "help"

    @property
    def description(self) -> str:
        return COMMAND_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, text: str | None, bot_username: str | None = None) -> "Command | None":
        """Parse ``/command`` or ``/command@botname`` text, ignoring arguments.

        Commands addressed to a bot other than ``bot_username`` parse as None.
        """
        if is_addressed_to_other_bot(text, bot_username):
            return None
        token = _command_token(text)
        if token is None:
            return None
        name = token.split("@", 1)[0].lower()
        try:
            return cls(name)
        except ValueError:
            return None


def _command_token(text: str | None) -> str | None:
    parts = text.split() if text else []
    if not parts or not parts[0].startswith("/"):
        return None
    return parts[0][1:]


def is_addressed_to_other_bot(text: str | None, bot_username: str | None) -> bool:
    """Check for a ``/command@otherbot`` suffix naming another bot."""
    token = _command_token(text)
    if token is None or not bot_username:
        return False
    _, _, addressee = token.partition("@")
    return bool(addressee) and addressee.lower() != bot_username.lower()


COMMAND_DESCRIPTIONS = {
    Command.START: "Start",
    Command.NGROK: "Launch ngrok",
    Command.KILL_NGROK: "Kill ngrok",
    Command.HELP: "Help me",
}


class CommandResponse(BaseModel):
    """Message for the transport to send, optionally with a keyboard."""

    model_config = ConfigDict(frozen=True)

    message: str
    keyboard: Keyboard | None = None
    edit_message: bool = False


def gather_commands_as_str() -> str:
    return ", ".join(f"/{command.value}" for command in Command)


def start_cmd() -> CommandResponse:
    return CommandResponse(message=responses.START, keyboard=make_startup_keyboard())


def list_ngrok_cmd(user_id: int | None, profiles: Sequence[TunnelProfile]) -> CommandResponse:
    """Offer the profiles this user may start.

    Profiles without access are hidden rather than shown disabled.
    """
    if user_id is None:
        return CommandResponse(message=responses.UNKNOWN_USER)

    allowed = allowed_profiles(user_id, profiles)
    if not allowed:
        return CommandResponse(message=responses.NO_PROFILES)

    return CommandResponse(
        message=responses.CHOOSE_PROFILE, keyboard=make_ngrok_cmd_keyboard(allowed)
    )


def kill_ngrok_cmd(ngrok: NgrokProcess) -> CommandResponse:
    if ngrok.is_run():
        ngrok.kill()
        return CommandResponse(message=responses.NGROK_KILLED)
    return CommandResponse(message=responses.NGROK_ALREADY_DEAD)


def help_cmd() -> CommandResponse:
    return CommandResponse(message=responses.HELP.format(commands=gather_commands_as_str()))


def error_cmd() -> CommandResponse:
    return CommandResponse(
        message=responses.UNKNOWN_COMMAND.format(commands=gather_commands_as_str())
    )
