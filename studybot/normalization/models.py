from dataclasses import dataclass, field
from datetime import date
from enum import Enum


class Task(str, Enum):
    """AI tasks the normalizer can run."""

    NOTE = "note"
    QUIZ = "quiz"
    PAPER = "paper"
    PLAN = "plan"
    CHAT = "chat"


@dataclass(frozen=True)
class MindmapNode:
    """Single mindmap node; level 0 is the central topic."""

    id: str
    label: str
    level: int = 0


@dataclass(frozen=True)
class Mindmap:
    nodes: list[MindmapNode] = field(default_factory=list)


@dataclass(frozen=True)
class NoteResult:
    """Summary, keywords and mindmap generated for a note."""

    summary: str
    keywords: list[str] = field(default_factory=list)
    mindmap: Mindmap | None = None
    degraded_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class QuizQuestion:
    """Multiple-choice question; correct_answer indexes into options."""

    question: str
    options: list[str]
    correct_answer: int
    explanation: str = ""


@dataclass(frozen=True)
class QuizResult:
    questions: list[QuizQuestion] = field(default_factory=list)
    degraded_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class TopicPrediction:
    """Topic likely to appear on the next paper."""

    topic: str
    likelihood: str = "medium"  # "high", "medium" or "low"
    rationale: str = ""


@dataclass(frozen=True)
class PaperAnalysisResult:
    analysis: str
    topics: list[str] = field(default_factory=list)
    predictions: list[TopicPrediction] = field(default_factory=list)
    degraded_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class PlannedTask:
    title: str
    date: date
    description: str = ""


@dataclass(frozen=True)
class StudyPlanResult:
    tasks: list[PlannedTask] = field(default_factory=list)
    degraded_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChatMessage:
    role: str  # "user" or "assistant"
    content: str


@dataclass(frozen=True)
class ChatReply:
    reply: str
    degraded_fields: tuple[str, ...] = ()


NormalizationResult = NoteResult | QuizResult | PaperAnalysisResult | StudyPlanResult | ChatReply
