"""Error types shared across the chat application.

Taxonomy:
    - ConfigurationError: missing or invalid service credentials (fatal at startup)
    - AuthError: rejected credentials, duplicate account, expired session
    - CompletionError: network or provider failure during a chat turn
"""


class BootstrapChatError(Exception):
    """Base class for application errors."""

    pass


class ConfigurationError(BootstrapChatError):
    """Raised when required external-service configuration is missing."""

    pass


class AuthError(BootstrapChatError):
    """Raised when the identity service rejects a request.

    Attributes:
        message: Human-readable message suitable for showing to the user.
        status_code: HTTP status returned by the service, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class CompletionError(BootstrapChatError):
    """Raised when the completion service fails to produce a response."""

    pass
