import logging
import sys

# Libraries that log every HTTP request or every malformed PDF object at INFO/WARNING.
_NOISY_LOGGERS = ("httpx", "openai", "pdfminer", "docx")


class Log:
    """Process-wide logger for studybot.

    Keyword arguments are appended to the message as ``key=value`` pairs,
    so ids and counts stay greppable in plain-text logs.
    """

    _logger: logging.Logger = logging.getLogger("studybot")

    @classmethod
    def configure(cls, log_level: str) -> None:
        """Set the level, attach a stdout handler once, and quiet chatty libraries."""
        cls._logger.setLevel(log_level.upper())
        if not cls._logger.handlers:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(
                logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
            )
            cls._logger.addHandler(handler)
        cls._logger.propagate = False
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.ERROR)

    @classmethod
    def info(cls, message: str, **context: object) -> None:
        cls._logger.info(cls._render(message, context))

    @classmethod
    def error(cls, message: str, **context: object) -> None:
        cls._logger.error(cls._render(message, context))

    @classmethod
    def warning(cls, message: str, **context: object) -> None:
        cls._logger.warning(cls._render(message, context))

    @classmethod
    def debug(cls, message: str, **context: object) -> None:
        cls._logger.debug(cls._render(message, context))

    @staticmethod
    def _render(message: str, context: dict[str, object]) -> str:
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} ({pairs})"
