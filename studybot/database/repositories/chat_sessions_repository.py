from typing import ClassVar

from studybot.context import UserContext
from studybot.database.models import ChatSessionRecord
from studybot.database.repositories.base_repository import BaseRepository


class ChatSessionsRepository(BaseRepository[ChatSessionRecord]):
    """Database operations for the chat_sessions table."""

    table: ClassVar[str] = "chat_sessions"
    record_type: ClassVar[type] = ChatSessionRecord
    columns: ClassVar[tuple[str, ...]] = (
        "id",
        "user_id",
        "title",
        "messages",
        "created_at",
        "updated_at",
    )
    json_columns: ClassVar[frozenset[str]] = frozenset({"messages"})
    touches_updated_at: ClassVar[bool] = True

    def find_latest(self, user: UserContext) -> ChatSessionRecord | None:
        """Most recently created session of *user*, if any."""
        sessions = self.find_all(user, descending=True, limit=1)
        return sessions[0] if sessions else None
