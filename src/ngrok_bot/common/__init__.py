"""Common utilities and shared functionality."""

from .exceptions import (
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
from .logging import get_logger, setup_logging
from .utils import MAX_PORT, MIN_PORT, mask_sensitive_data, sanitize_log_data

__all__ = [
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
    # Logging
    "get_logger",
    "setup_logging",
    # Utils
    "mask_sensitive_data",
    "sanitize_log_data",
    "MIN_PORT",
    "MAX_PORT",
]
