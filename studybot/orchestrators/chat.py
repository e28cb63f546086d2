from studybot.context import UserContext
from studybot.database.models import ChatSessionRecord
from studybot.database.repositories.chat_sessions_repository import ChatSessionsRepository
from studybot.errors import InputValidationError
from studybot.logging.logger import Log
from studybot.normalization.base import BaseNormalizer
from studybot.normalization.models import ChatMessage

DEFAULT_SESSION_TITLE = "New Chat"
SESSION_TITLE_LENGTH = 50


class ChatOrchestrator:
    """Tutoring chat: each message sends the whole session history to the AI.

    The user's message is stored before the AI is called, so it survives a
    failed provider call.
    """

    def __init__(self, normalizer: BaseNormalizer, sessions_repo: ChatSessionsRepository) -> None:
        self._normalizer = normalizer
        self._sessions_repo = sessions_repo

    def open_session(self, user: UserContext) -> ChatSessionRecord:
        """Most recent session, or a fresh one when the user has none."""
        latest = self._sessions_repo.find_latest(user)
        if latest is not None:
            return latest
        return self.new_session(user)

    def new_session(self, user: UserContext) -> ChatSessionRecord:
        session = self._sessions_repo.create(
            user, {"title": DEFAULT_SESSION_TITLE, "messages": []}
        )
        Log.info(f"Started chat session {session.id}")
        return session

    def send_message(
        self,
        user: UserContext,
        session_id: str,
        content: str,
    ) -> ChatSessionRecord:
        """Append *content* and the assistant's reply to the session.

        Raises:
            InputValidationError: *content* is blank.
            UpstreamError: the AI provider call failed; the user message is kept.
        """
        content = content.strip()
        if not content:
            raise InputValidationError("Please enter a message")
        session = self._sessions_repo.find_by_id(user, session_id)
        messages = [*session.messages, {"role": "user", "content": content}]
        values: dict[str, object] = {"messages": messages}
        if session.title == DEFAULT_SESSION_TITLE and not any(
            message.get("role") == "user" for message in session.messages
        ):
            values["title"] = content[:SESSION_TITLE_LENGTH]
        self._sessions_repo.update(user, session_id, values)

        reply = self._normalizer.chat(
            [ChatMessage(role=m["role"], content=m["content"]) for m in messages]
        )
        messages = [*messages, {"role": "assistant", "content": reply.reply}]
        Log.info(f"Chat session {session_id} now has {len(messages)} messages")
        return self._sessions_repo.update(user, session_id, {"messages": messages})

    def list_sessions(self, user: UserContext) -> list[ChatSessionRecord]:
        return self._sessions_repo.find_all(user)

    def delete_session(self, user: UserContext, session_id: str) -> None:
        self._sessions_repo.delete(user, session_id)
        Log.info(f"Deleted chat session {session_id}")
