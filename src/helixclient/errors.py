class HelixError(Exception):
    """Base class for every error raised by the Twitch client."""


class ConfigurationError(HelixError):
    """A required credential (client ID or OAuth token) is not configured."""


class PreconditionError(HelixError, ValueError):
    """The caller supplied invalid input, detected before any request is made."""


class AuthorizationError(HelixError):
    """An operation that needs an authenticated user was attempted without a token."""


class TransportError(HelixError):
    """The request could not be delivered (network failure, curl not found...)."""


class DecodeError(HelixError):
    """The response body was not the JSON we expected."""


class PlatformError(HelixError):
    """Twitch answered with a structured error payload."""

    def __init__(self, status: int, error: str, message: str | None = None) -> None:
        self.status = status
        self.error = error
        self.message = message
        detail = f"{status} {error}"
        if message:
            detail = f"{detail}: {message}"
        super().__init__(detail)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status={self.status!r}, error={self.error!r}, message={self.message!r})"
