from abc import ABC, abstractmethod
from datetime import date

from studybot.normalization.models import (
    ChatMessage,
    ChatReply,
    NoteResult,
    PaperAnalysisResult,
    QuizResult,
    StudyPlanResult,
)


class BaseNormalizer(ABC):
    """Contract for all normalization adapters.

    Every method sends exactly one request to the AI provider. Fields the
    provider fails to generate come back as placeholders listed in the
    result's ``degraded_fields``.

    Raises (all methods):
        UpstreamError: the provider call failed.
    """

    @abstractmethod
    def process_note(self, title: str, text: str) -> NoteResult:
        """Summarize study material into summary, keywords and a mindmap."""

    @abstractmethod
    def generate_quiz(self, topic: str, question_count: int, context: str = "") -> QuizResult:
        """Generate multiple-choice questions about *topic*."""

    @abstractmethod
    def analyze_paper(self, title: str, text: str) -> PaperAnalysisResult:
        """Extract topics, predictions and an analysis from a past paper."""

    @abstractmethod
    def generate_study_plan(self, topic: str, exam_date: date, today: date) -> StudyPlanResult:
        """Plan dated study tasks from *today* up to *exam_date*."""

    @abstractmethod
    def chat(self, messages: list[ChatMessage]) -> ChatReply:
        """Answer the last user message of a tutoring conversation."""
