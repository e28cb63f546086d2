from studybot.errors import ConfigurationError, StudyBotError

__all__ = [
    "ConfigurationError",
    "MalformedResponseError",
    "NormalizationError",
    "UpstreamError",
]


class NormalizationError(StudyBotError):
    """Raised when normalization fails."""


class UpstreamError(NormalizationError):
    """Raised when the AI provider call fails.

    ``status_code`` holds the HTTP status for non-2xx responses and is None
    for network failures and timeouts.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponseError(NormalizationError):
    """Raised by validators when a structured field does not match its schema.

    Never escapes the normalizer: the field falls back to its placeholder.
    """
