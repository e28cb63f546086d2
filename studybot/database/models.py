from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class ArtifactStatus(str, Enum):
    """Lifecycle of an AI-generated artifact row."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class ProfileRecord:
    """Represents a row from the profiles table."""

    id: str
    email: str
    full_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class NoteRecord:
    """Represents a row from the notes table."""

    id: str
    user_id: str
    title: str
    status: str = ArtifactStatus.READY.value
    original_text: str | None = None
    summary: str | None = None
    keywords: list[str] | None = None
    mindmap: dict[str, Any] | None = None
    file_name: str | None = None
    file_path: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class QuizRecord:
    """Represents a row from the quizzes table.

    ``questions`` holds ``{question, options, correct_answer, explanation}``
    objects.
    """

    id: str
    user_id: str
    title: str
    status: str = ArtifactStatus.READY.value
    note_id: str | None = None
    questions: list[dict[str, Any]] = field(default_factory=list)
    score: int | None = None
    total_questions: int | None = None
    completed: bool = False
    error_message: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class PastPaperRecord:
    """Represents a row from the past_papers table."""

    id: str
    user_id: str
    title: str
    status: str = ArtifactStatus.READY.value
    topics: list[str] | None = None
    predictions: list[dict[str, Any]] | None = None
    analysis: str | None = None
    file_name: str | None = None
    file_path: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class StudyPlanRecord:
    """Represents a row from the study_plans table."""

    id: str
    user_id: str
    title: str
    status: str = ArtifactStatus.READY.value
    description: str | None = None
    topics: list[str] | None = None
    exam_date: date | None = None
    schedule: list[dict[str, Any]] | None = None
    completed: bool = False
    error_message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class StudyTaskRecord:
    """Represents a row from the study_tasks table."""

    id: str
    user_id: str
    title: str
    date: date
    description: str | None = None
    completed: bool = False
    plan_id: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ChatSessionRecord:
    """Represents a row from the chat_sessions table.

    ``messages`` holds ``{role, content}`` objects in conversation order.
    """

    id: str
    user_id: str
    title: str = "New Chat"
    messages: list[dict[str, str]] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None
