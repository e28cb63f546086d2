from typing import ClassVar

from studybot.database.models import PastPaperRecord
from studybot.database.repositories.base_repository import BaseRepository


class PastPapersRepository(BaseRepository[PastPaperRecord]):
    """Database operations for the past_papers table."""

    table: ClassVar[str] = "past_papers"
    record_type: ClassVar[type] = PastPaperRecord
    columns: ClassVar[tuple[str, ...]] = (
        "id",
        "user_id",
        "title",
        "status",
        "topics",
        "predictions",
        "analysis",
        "file_name",
        "file_path",
        "error_message",
        "created_at",
    )
    json_columns: ClassVar[frozenset[str]] = frozenset({"predictions"})
