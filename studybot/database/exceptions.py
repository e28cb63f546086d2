from studybot.errors import StudyBotError


class PersistenceError(StudyBotError):
    """Raised when the backing store rejects or fails an operation."""


class ArtifactNotFoundError(PersistenceError):
    """Raised when a row does not exist or is not visible to the caller."""
