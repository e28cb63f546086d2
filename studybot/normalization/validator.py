"""Builds typed task results from parsed AI output, one field at a time.

A field that is missing or does not match its schema falls back to its
placeholder and is recorded in ``degraded_fields``; the other fields keep
their generated values. List items that are malformed are dropped
individually.
"""

from collections.abc import Callable
from datetime import date
from typing import Any, TypeVar

from studybot.logging.logger import Log
from studybot.normalization.exceptions import MalformedResponseError
from studybot.normalization.models import (
    ChatReply,
    Mindmap,
    MindmapNode,
    NormalizationResult,
    NoteResult,
    PaperAnalysisResult,
    PlannedTask,
    QuizQuestion,
    QuizResult,
    StudyPlanResult,
    Task,
    TopicPrediction,
)

NOTE_SUMMARY_PLACEHOLDER = "Could not generate summary"
PAPER_ANALYSIS_PLACEHOLDER = "Could not generate analysis"
CHAT_REPLY_PLACEHOLDER = "Sorry, I could not generate a response. Please try again."

_MAX_KEYWORDS = 20
_MAX_QUESTIONS = 50
_MAX_TASKS = 366
_MIN_OPTIONS = 2
_VALID_LIKELIHOODS = frozenset({"high", "medium", "low"})
_DEFAULT_LIKELIHOOD = "medium"

T = TypeVar("T")


class _FieldCollector:
    """Reads fields from one payload and remembers which ones degraded."""

    def __init__(self, data: dict[str, Any]) -> None:
        self._data = data
        self.degraded: list[str] = []

    def required(self, name: str, build: Callable[[Any], T], fallback: T) -> T:
        if name not in self._data:
            return self._degrade(name, "missing", fallback)
        try:
            return build(self._data[name])
        except MalformedResponseError as exc:
            return self._degrade(name, str(exc), fallback)

    def optional(self, name: str, build: Callable[[Any], T], fallback: T) -> T:
        raw = self._data.get(name)
        if raw is None:
            return fallback
        try:
            return build(raw)
        except MalformedResponseError as exc:
            return self._degrade(name, str(exc), fallback)

    def _degrade(self, name: str, reason: str, fallback: T) -> T:
        Log.warning(f"AI field '{name}' replaced by placeholder: {reason}")
        self.degraded.append(name)
        return fallback


# ----------------------------------------------------------------------
# Task results
# ----------------------------------------------------------------------


def build_note_result(data: dict[str, Any]) -> NoteResult:
    fields = _FieldCollector(data)
    summary = fields.required("summary", _build_text, NOTE_SUMMARY_PLACEHOLDER)
    keywords = fields.required("keywords", _build_keywords, [])
    mindmap = fields.optional("mindmap", _build_mindmap, None)
    return NoteResult(
        summary=summary,
        keywords=keywords,
        mindmap=mindmap,
        degraded_fields=tuple(fields.degraded),
    )


def build_quiz_result(data: dict[str, Any]) -> QuizResult:
    fields = _FieldCollector(data)
    questions = fields.required("questions", _build_questions, [])
    return QuizResult(questions=questions, degraded_fields=tuple(fields.degraded))


def build_paper_result(data: dict[str, Any]) -> PaperAnalysisResult:
    fields = _FieldCollector(data)
    topics = fields.required("topics", _build_topics, [])
    predictions = fields.required("predictions", _build_predictions, [])
    analysis = fields.required("analysis", _build_text, PAPER_ANALYSIS_PLACEHOLDER)
    return PaperAnalysisResult(
        analysis=analysis,
        topics=topics,
        predictions=predictions,
        degraded_fields=tuple(fields.degraded),
    )


def build_study_plan_result(data: dict[str, Any]) -> StudyPlanResult:
    fields = _FieldCollector(data)
    tasks = fields.required("tasks", _build_tasks, [])
    return StudyPlanResult(tasks=tasks, degraded_fields=tuple(fields.degraded))


def build_chat_reply(content: str | None) -> ChatReply:
    reply = (content or "").strip()
    if not reply:
        Log.warning("AI returned an empty chat reply, using placeholder")
        return ChatReply(reply=CHAT_REPLY_PLACEHOLDER, degraded_fields=("reply",))
    return ChatReply(reply=reply)


def placeholder_result(task: Task) -> NormalizationResult:
    """Result for *task* with every field set to its placeholder."""
    if task is Task.NOTE:
        return NoteResult(
            summary=NOTE_SUMMARY_PLACEHOLDER,
            degraded_fields=("summary", "keywords"),
        )
    if task is Task.QUIZ:
        return QuizResult(degraded_fields=("questions",))
    if task is Task.PAPER:
        return PaperAnalysisResult(
            analysis=PAPER_ANALYSIS_PLACEHOLDER,
            degraded_fields=("topics", "predictions", "analysis"),
        )
    if task is Task.PLAN:
        return StudyPlanResult(degraded_fields=("tasks",))
    return ChatReply(reply=CHAT_REPLY_PLACEHOLDER, degraded_fields=("reply",))


# ----------------------------------------------------------------------
# Field builders
# ----------------------------------------------------------------------


def _build_text(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedResponseError("must be a non-empty string")
    return raw.strip()


def _build_string_list(raw: Any, limit: int) -> list[str]:
    if not isinstance(raw, list):
        raise MalformedResponseError("must be a list of strings")
    seen: set[str] = set()
    items: list[str] = []
    for item in raw:
        if not isinstance(item, str) or not item.strip():
            continue
        value = item.strip()
        if value.lower() in seen:
            continue
        seen.add(value.lower())
        items.append(value)
    if raw and not items:
        raise MalformedResponseError("no usable strings")
    return items[:limit]


def _build_keywords(raw: Any) -> list[str]:
    return _build_string_list(raw, _MAX_KEYWORDS)


def _build_topics(raw: Any) -> list[str]:
    return _build_string_list(raw, _MAX_KEYWORDS)


def _build_mindmap(raw: Any) -> Mindmap:
    if not isinstance(raw, dict) or not isinstance(raw.get("nodes"), list):
        raise MalformedResponseError("must be an object with a 'nodes' list")
    nodes: list[MindmapNode] = []
    for index, item in enumerate(raw["nodes"]):
        if not isinstance(item, dict):
            continue
        label = item.get("label")
        if not isinstance(label, str) or not label.strip():
            continue
        node_id = item.get("id")
        level = _as_int(item.get("level", 0))
        nodes.append(
            MindmapNode(
                id=str(node_id) if node_id not in (None, "") else str(index + 1),
                label=label.strip(),
                level=max(0, level) if level is not None else 0,
            )
        )
    return Mindmap(nodes=nodes)


def _build_questions(raw: Any) -> list[QuizQuestion]:
    if not isinstance(raw, list):
        raise MalformedResponseError("must be a list")
    questions: list[QuizQuestion] = []
    for index, item in enumerate(raw[:_MAX_QUESTIONS]):
        try:
            questions.append(_build_question(item, index))
        except MalformedResponseError as exc:
            Log.warning(f"Dropping quiz question at index {index}: {exc}")
    if raw and not questions:
        raise MalformedResponseError("no usable questions")
    return questions


def _build_question(raw: Any, index: int) -> QuizQuestion:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"question {index} must be an object")
    text = raw.get("question")
    if not isinstance(text, str) or not text.strip():
        raise MalformedResponseError(f"question {index}: 'question' must be a non-empty string")
    options = raw.get("options")
    if (
        not isinstance(options, list)
        or len(options) < _MIN_OPTIONS
        or not all(isinstance(o, str) and o.strip() for o in options)
    ):
        raise MalformedResponseError(
            f"question {index}: 'options' must hold at least {_MIN_OPTIONS} non-empty strings"
        )
    answer = _as_int(raw.get("correct_answer"))
    if answer is None or not 0 <= answer < len(options):
        raise MalformedResponseError(
            f"question {index}: 'correct_answer' must index into options, "
            f"got {raw.get('correct_answer')!r}"
        )
    explanation = raw.get("explanation")
    return QuizQuestion(
        question=text.strip(),
        options=[o.strip() for o in options],
        correct_answer=answer,
        explanation=explanation.strip() if isinstance(explanation, str) else "",
    )


def _build_predictions(raw: Any) -> list[TopicPrediction]:
    if not isinstance(raw, list):
        raise MalformedResponseError("must be a list")
    predictions: list[TopicPrediction] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        topic = item.get("topic")
        if not isinstance(topic, str) or not topic.strip():
            continue
        likelihood = item.get("likelihood")
        if not isinstance(likelihood, str) or likelihood.lower() not in _VALID_LIKELIHOODS:
            likelihood = _DEFAULT_LIKELIHOOD
        rationale = item.get("rationale")
        predictions.append(
            TopicPrediction(
                topic=topic.strip(),
                likelihood=likelihood.lower(),
                rationale=rationale.strip() if isinstance(rationale, str) else "",
            )
        )
    if raw and not predictions:
        raise MalformedResponseError("no usable predictions")
    return predictions


def _build_tasks(raw: Any) -> list[PlannedTask]:
    if not isinstance(raw, list):
        raise MalformedResponseError("must be a list")
    tasks: list[PlannedTask] = []
    for index, item in enumerate(raw[:_MAX_TASKS]):
        try:
            tasks.append(_build_task(item, index))
        except MalformedResponseError as exc:
            Log.warning(f"Dropping study task at index {index}: {exc}")
    if raw and not tasks:
        raise MalformedResponseError("no usable tasks")
    return tasks


def _build_task(raw: Any, index: int) -> PlannedTask:
    if not isinstance(raw, dict):
        raise MalformedResponseError(f"task {index} must be an object")
    title = raw.get("title")
    if not isinstance(title, str) or not title.strip():
        raise MalformedResponseError(f"task {index}: 'title' must be a non-empty string")
    raw_date = raw.get("date")
    try:
        task_date = date.fromisoformat(str(raw_date)[:10])
    except ValueError as exc:
        raise MalformedResponseError(
            f"task {index}: 'date' must be YYYY-MM-DD, got {raw_date!r}"
        ) from exc
    description = raw.get("description")
    return PlannedTask(
        title=title.strip(),
        date=task_date,
        description=description.strip() if isinstance(description, str) else "",
    )


def _as_int(value: Any) -> int | None:
    """Return *value* as an int when it is an integral JSON number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None
