from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from studybot.context import UserContext
from studybot.extraction.models import Document
from studybot.logging.logger import Log
from studybot.normalization.models import NormalizationResult


@dataclass(slots=True)
class PipelineContext:
    user: UserContext
    title: str = ""
    text: str = ""
    upload: Document | None = None
    inputs: dict[str, Any] = field(default_factory=dict)
    source_text: str = ""
    pending_values: dict[str, Any] = field(default_factory=dict)
    artifact_id: str | None = None
    result: NormalizationResult | None = None
    final_values: dict[str, Any] = field(default_factory=dict)
    record: Any = None
    finalized: bool = False
    error_message: str = ""


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError


class Pipeline:
    """Runs steps in order; on failure before finalize runs the failed steps and re-raises.

    Each failed step runs on its own, so one that raises does not stop the
    rest. Once the row is finalized a later failure leaves it untouched.
    """

    def __init__(self, steps: list[PipelineStep], failed_steps: list[PipelineStep]) -> None:
        self._steps = steps
        self._failed_steps = failed_steps

    def run(self, context: PipelineContext) -> PipelineContext:
        for step in self._steps:
            try:
                context = step.run(context)
            except Exception as exc:
                context.error_message = str(exc)
                Log.error(f"{type(step).__name__} failed: {exc}", user=context.user.user_id)
                if context.finalized:
                    Log.warning(f"Row {context.artifact_id} is already ready, leaving it as is")
                elif context.artifact_id is not None:
                    self._run_failed_steps(context)
                raise
        return context

    def _run_failed_steps(self, context: PipelineContext) -> None:
        for step in self._failed_steps:
            try:
                step.run(context)
            except Exception as exc:  # noqa: BLE001
                Log.warning(
                    f"{type(step).__name__} could not clean up after {context.artifact_id}: {exc}"
                )
