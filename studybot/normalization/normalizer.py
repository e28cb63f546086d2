"""AI-powered study material normalizer."""

import json
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, cast

from studybot.logging.logger import Log
from studybot.normalization.base import BaseNormalizer
from studybot.normalization.client_base import (
    BaseCompletionClient,
    CompletionResponse,
    FunctionSpec,
)
from studybot.normalization.models import (
    ChatMessage,
    ChatReply,
    NormalizationResult,
    NoteResult,
    PaperAnalysisResult,
    QuizResult,
    StudyPlanResult,
    Task,
)
from studybot.normalization.prompt_loader import load_json_schema, load_prompt_template
from studybot.normalization.validator import (
    build_chat_reply,
    build_note_result,
    build_paper_result,
    build_quiz_result,
    build_study_plan_result,
    placeholder_result,
)


@dataclass(frozen=True)
class _TaskSpec:
    task: Task
    function_name: str
    description: str
    build: Callable[[dict[str, Any]], NormalizationResult]

    @property
    def prompt_file(self) -> str:
        return f"{self.task.value}_prompt.txt"

    @property
    def schema_file(self) -> str:
        return f"{self.task.value}_schema.json"


_STRUCTURED_TASKS: tuple[_TaskSpec, ...] = (
    _TaskSpec(Task.NOTE, "create_study_note", "Create structured study notes", build_note_result),
    _TaskSpec(Task.QUIZ, "create_quiz", "Create a multiple-choice quiz", build_quiz_result),
    _TaskSpec(
        Task.PAPER,
        "analyze_past_paper",
        "Analyze a past exam paper",
        build_paper_result,
    ),
    _TaskSpec(
        Task.PLAN,
        "create_study_plan",
        "Create a dated study plan",
        build_study_plan_result,
    ),
)


class Normalizer(BaseNormalizer):
    """Turns study material into structured study aids using an AI provider."""

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        model: str,
        temperature: float = 0.3,
        prompt_dir: Path | None = None,
    ) -> None:
        self._client = client
        self._model = model
        self._temperature = max(0.0, min(1.0, temperature))
        self._system_prompt = load_prompt_template("system_prompt.txt", prompt_dir)
        self._chat_system_prompt = load_prompt_template("chat_system_prompt.txt", prompt_dir)
        self._specs = {spec.task: spec for spec in _STRUCTURED_TASKS}
        self._templates = {
            spec.task: load_prompt_template(spec.prompt_file, prompt_dir)
            for spec in _STRUCTURED_TASKS
        }
        self._functions = {
            spec.task: FunctionSpec(
                name=spec.function_name,
                description=spec.description,
                parameters=load_json_schema(spec.schema_file, prompt_dir),
            )
            for spec in _STRUCTURED_TASKS
        }

    def process_note(self, title: str, text: str) -> NoteResult:
        result = cast(NoteResult, self._run(Task.NOTE, title=title, text=text))
        Log.info(
            f"Note processing complete: {len(result.keywords)} keywords, "
            f"{len(result.mindmap.nodes) if result.mindmap else 0} mindmap nodes"
        )
        return result

    def generate_quiz(self, topic: str, question_count: int, context: str = "") -> QuizResult:
        source = f"\nBase the questions on this material:\n{context}\n" if context else ""
        result = cast(
            QuizResult,
            self._run(Task.QUIZ, topic=topic, question_count=question_count, context=source),
        )
        Log.info(f"Quiz generation complete: {len(result.questions)} questions")
        return result

    def analyze_paper(self, title: str, text: str) -> PaperAnalysisResult:
        result = cast(PaperAnalysisResult, self._run(Task.PAPER, title=title, text=text))
        Log.info(
            f"Paper analysis complete: {len(result.topics)} topics, "
            f"{len(result.predictions)} predictions"
        )
        return result

    def generate_study_plan(self, topic: str, exam_date: date, today: date) -> StudyPlanResult:
        result = cast(
            StudyPlanResult,
            self._run(
                Task.PLAN,
                topic=topic,
                exam_date=exam_date.isoformat(),
                today=today.isoformat(),
            ),
        )
        Log.info(f"Study plan generation complete: {len(result.tasks)} tasks")
        return result

    def chat(self, messages: list[ChatMessage]) -> ChatReply:
        payload = [{"role": "system", "content": self._chat_system_prompt}]
        payload.extend({"role": m.role, "content": m.content} for m in messages)
        Log.debug(f"Chat request with {len(messages)} messages")
        response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            messages=payload,
        )
        Log.debug(f"AI raw response:\n{response}")
        return build_chat_reply(response.content)

    def _run(self, task: Task, **fields: object) -> NormalizationResult:
        prompt = self._templates[task].format(**fields)
        Log.debug(f"Normalization prompt ({task.value}):\n{prompt}")

        response = self._client.create_chat_completion(
            model=self._model,
            temperature=self._temperature,
            messages=[
                {"role": "system", "content": self._system_prompt},
                {"role": "user", "content": prompt},
            ],
            function=self._functions[task],
        )
        Log.debug(f"AI raw response:\n{response}")

        data = self._parse_arguments(response)
        if data is None:
            Log.warning(f"AI returned no structured {task.value} result, using placeholders")
            return placeholder_result(task)
        return self._specs[task].build(data)

    @staticmethod
    def _parse_arguments(response: CompletionResponse) -> dict[str, Any] | None:
        """Return the structured payload, or None when the AI answered in free text.

        Some OpenAI-compatible providers ignore the forced function call and
        put the JSON object in the message content, sometimes fenced.
        """
        raw = response.arguments if response.arguments is not None else response.content
        if not raw:
            return None
        cleaned = raw.strip()
        if cleaned.startswith("```"):
            lines = cleaned.splitlines()
            if lines and lines[0].startswith("```"):
                lines = lines[1:]
            if lines and lines[-1].strip() == "```":
                lines = lines[:-1]
            cleaned = "\n".join(lines)

        try:
            parsed = json.loads(cleaned)
        except json.JSONDecodeError:
            return None
        if not isinstance(parsed, dict):
            return None
        return parsed
