from typing import ClassVar

from studybot.database.models import NoteRecord
from studybot.database.repositories.base_repository import BaseRepository


class NotesRepository(BaseRepository[NoteRecord]):
    """Database operations for the notes table."""

    table: ClassVar[str] = "notes"
    record_type: ClassVar[type] = NoteRecord
    columns: ClassVar[tuple[str, ...]] = (
        "id",
        "user_id",
        "title",
        "status",
        "original_text",
        "summary",
        "keywords",
        "mindmap",
        "file_name",
        "file_path",
        "error_message",
        "created_at",
        "updated_at",
    )
    json_columns: ClassVar[frozenset[str]] = frozenset({"mindmap"})
    touches_updated_at: ClassVar[bool] = True
