"""Bot commands, access control and dispatch."""

from .access import Access, AccessDecision, check_chat_access, check_user_access
from .commands import Command, CommandResponse
from .dispatcher import CommandDispatcher, InboundEvent
from .keyboard import ButtonQuery, Keyboard, KeyboardKind, NgrokButtonQuery

__all__ = [
    "Access",
    "AccessDecision",
    "check_chat_access",
    "check_user_access",
    "Command",
    "CommandResponse",
    "CommandDispatcher",
    "InboundEvent",
    "ButtonQuery",
    "NgrokButtonQuery",
    "Keyboard",
    "KeyboardKind",
]
