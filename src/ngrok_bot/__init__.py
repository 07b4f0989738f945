"""ngrok bot - expose local services through ngrok from a Telegram chat."""

from .bot import (
    Access,
    AccessDecision,
    CommandDispatcher,
    CommandResponse,
    InboundEvent,
    check_chat_access,
    check_user_access,
)

# Common utilities
from .common.exceptions import (
    AlreadyRunningError,
    ConfigurationError,
    DiscoveryEmptyError,
    DiscoveryMalformedError,
    DiscoveryUnreachableError,
    InvalidPublicUrlError,
    InvalidSelectionIndexError,
    NgrokBotError,
    NotRunningError,
    ProcessError,
    SelectionError,
    SpawnError,
    TunnelError,
    UnparseablePayloadError,
)
from .common.logging import get_logger, setup_logging

# Configuration
from .config import BotConfig, NgrokSettings, TunnelProfile, load_config

# ngrok supervision
from .ngrok import NgrokProcess, TunnelDiscoveryClient, TunnelInfo, build_args

# Setup logging on package initialization
setup_logging(level="INFO")

# Package level logger
logger = get_logger(__name__)

__version__ = "0.1.0"


__all__ = [
    # Configuration
    "BotConfig",
    "NgrokSettings",
    "TunnelProfile",
    "load_config",
    # ngrok
    "build_args",
    "NgrokProcess",
    "TunnelDiscoveryClient",
    "TunnelInfo",
    # Bot
    "Access",
    "AccessDecision",
    "check_chat_access",
    "check_user_access",
    "CommandDispatcher",
    "CommandResponse",
    "InboundEvent",
    # Exceptions
    "NgrokBotError",
    "ConfigurationError",
    "ProcessError",
    "SpawnError",
    "AlreadyRunningError",
    "TunnelError",
    "NotRunningError",
    "DiscoveryUnreachableError",
    "DiscoveryMalformedError",
    "DiscoveryEmptyError",
    "InvalidPublicUrlError",
    "SelectionError",
    "UnparseablePayloadError",
    "InvalidSelectionIndexError",
    # Utilities
    "get_logger",
    "setup_logging",
]
