class StudyBotError(Exception):
    """Base exception for every error scoped to a single user action."""


class InputValidationError(StudyBotError):
    """Raised when required user input is missing or invalid.

    The message is user-facing and is shown verbatim in a notification.
    """


class ConfigurationError(StudyBotError):
    """Raised when settings are missing or invalid, before any I/O is attempted."""
