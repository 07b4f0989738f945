"""Chat and command level access checks."""

from collections.abc import Sequence
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..config import TunnelProfile
from .responses import ACCESS_DECLINED, BAD_CHAT_ID


class Access(str, Enum):
    """Access check outcome."""

    GRANTED = "granted"
    DECLINED = "declined"


class AccessDecision(BaseModel):
    """Result of an access check with the reason to show on decline."""

    model_config = ConfigDict(frozen=True)

    access: Access
    reason: str | None = None

    @property
    def granted(self) -> bool:
        return self.access == Access.GRANTED

    @classmethod
    def grant(cls) -> "AccessDecision":
        return cls(access=Access.GRANTED)

    @classmethod
    def decline(cls, reason: str) -> "AccessDecision":
        return cls(access=Access.DECLINED, reason=reason)


def check_chat_access(chat_id: int, permitted_chats: Sequence[int]) -> AccessDecision:
    """Check that the chat is on the allow-list."""
    if chat_id in permitted_chats:
        return AccessDecision.grant()
    return AccessDecision.decline(BAD_CHAT_ID)


def check_user_access(user_id: int | None, profile: TunnelProfile) -> AccessDecision:
    """Check that the user may start this particular tunnel profile.

    Every profile carries its own allow-list, so a user can be permitted to
    start one profile and not another.
    """
    if user_id is not None and user_id in profile.permitted_users:
        return AccessDecision.grant()
    return AccessDecision.decline(ACCESS_DECLINED.format(accessed_cmd=profile.description))


def allowed_profiles(
    user_id: int | None, profiles: Sequence[TunnelProfile]
) -> list[tuple[int, TunnelProfile]]:
    """List profiles the user may start, keeping their configuration index and order."""
    return [
        (index, profile)
        for index, profile in enumerate(profiles)
        if check_user_access(user_id, profile).granted
    ]
