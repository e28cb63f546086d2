from typing import ClassVar

from studybot.database.models import QuizRecord
from studybot.database.repositories.base_repository import BaseRepository


class QuizzesRepository(BaseRepository[QuizRecord]):
    """Database operations for the quizzes table."""

    table: ClassVar[str] = "quizzes"
    record_type: ClassVar[type] = QuizRecord
    columns: ClassVar[tuple[str, ...]] = (
        "id",
        "user_id",
        "note_id",
        "title",
        "status",
        "questions",
        "score",
        "total_questions",
        "completed",
        "error_message",
        "created_at",
    )
    json_columns: ClassVar[frozenset[str]] = frozenset({"questions"})
