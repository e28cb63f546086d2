"""Example completion client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseCompletionClient and register the provider in NormalizerFactory.
"""

import json
from datetime import date, timedelta
from typing import ClassVar

from studybot.normalization.client_base import (
    BaseCompletionClient,
    CompletionResponse,
    FunctionSpec,
)


class ExampleClientAdapter(BaseCompletionClient):
    """Example adapter that returns fixed, valid payloads for every task.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "create_study_note": {
            "summary": "Example summary of the study material.",
            "keywords": ["example", "study"],
            "mindmap": {"nodes": [{"id": "1", "label": "Example", "level": 0}]},
        },
        "create_quiz": {
            "questions": [
                {
                    "question": "Which option is correct?",
                    "options": ["This one", "Not this", "Nor this", "Neither"],
                    "correct_answer": 0,
                    "explanation": "The first option is always correct here.",
                },
            ],
        },
        "analyze_past_paper": {
            "topics": ["Example topic"],
            "predictions": [
                {"topic": "Example topic", "likelihood": "high", "rationale": "Appears every year."},
            ],
            "analysis": "Example analysis of the paper.",
        },
    }
    CHAT_REPLY: ClassVar[str] = "This is an example tutor reply."

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        messages: list[dict[str, str]],
        function: FunctionSpec | None = None,
    ) -> CompletionResponse:
        _ = model, temperature, messages
        if function is None:
            return CompletionResponse(content=self.CHAT_REPLY)
        if function.name == "create_study_plan":
            return CompletionResponse(arguments=json.dumps(self._study_plan()))
        payload = self.DEFAULT_RESPONSES.get(function.name, {})
        return CompletionResponse(arguments=json.dumps(payload))

    @staticmethod
    def _study_plan() -> dict[str, object]:
        tomorrow = date.today() + timedelta(days=1)
        return {
            "tasks": [
                {
                    "title": "Review the core material",
                    "description": "Read through your notes once.",
                    "date": tomorrow.isoformat(),
                },
            ],
        }
