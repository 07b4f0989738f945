"""Custom exceptions for ngrok bot."""


class NgrokBotError(Exception):
    """Base exception for all ngrok bot errors."""
    pass


class ConfigurationError(NgrokBotError):
    """Raised when configuration is missing or invalid."""
    pass


class ProcessError(NgrokBotError):
    """Raised when ngrok process operations fail."""
    pass


class SpawnError(ProcessError):
    """Raised when the ngrok binary cannot be spawned."""
    pass


class AlreadyRunningError(ProcessError):
    """Raised when a start is refused because ngrok is already running."""
    pass


class TunnelError(NgrokBotError):
    """Base exception for tunnel discovery failures."""
    pass


class NotRunningError(TunnelError):
    """Raised when discovery is requested while ngrok is not running."""
    pass


class DiscoveryUnreachableError(TunnelError):
    """Raised when the ngrok status API cannot be reached."""
    pass


class DiscoveryMalformedError(TunnelError):
    """Raised when the ngrok status API returns an unexpected payload."""
    pass


class DiscoveryEmptyError(TunnelError):
    """Raised when ngrok has not established any tunnel yet."""
    pass


class InvalidPublicUrlError(TunnelError):
    """Raised when the tunnel public URL cannot be parsed."""
    pass


class SelectionError(NgrokBotError):
    """Base exception for menu selection failures.

    The exception message is safe to show to the chat user.
    """
    pass


class UnparseablePayloadError(SelectionError):
    """Raised when callback data is missing or cannot be decoded."""
    pass


class InvalidSelectionIndexError(SelectionError):
    """Raised when callback data points outside the configured profiles."""
    pass
