"""Exception types shared across stepchat."""


class StepchatError(Exception):
    """Base exception for stepchat."""


class ValidationFailure(StepchatError, ValueError):
    """Raised when a step or pipeline payload fails validation."""


class TextGenerationError(StepchatError):
    """Raised when the external text generation call fails."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(TextGenerationError):
    """Raised when the text generation service answers with "too many requests"."""

    def __init__(self, message: str = "Too many requests") -> None:
        super().__init__(message, status_code=429)


class AuthenticationError(StepchatError):
    """Raised when a request carries no valid access token."""
