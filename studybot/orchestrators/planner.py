from collections.abc import Callable
from datetime import date

from studybot.context import UserContext
from studybot.database.models import StudyPlanRecord, StudyTaskRecord
from studybot.database.repositories.study_plans_repository import StudyPlansRepository
from studybot.database.repositories.study_tasks_repository import StudyTasksRepository
from studybot.errors import InputValidationError
from studybot.logging.logger import Log
from studybot.normalization.base import BaseNormalizer
from studybot.normalization.models import PlannedTask, StudyPlanResult
from studybot.orchestrators.pipeline import Pipeline, PipelineContext, PipelineStep
from studybot.orchestrators.steps import (
    FinalizeStep,
    MarkFailedStep,
    ReloadStep,
    WritePendingStep,
)


class ValidatePlanInputStep(PipelineStep):
    def run(self, context: PipelineContext) -> PipelineContext:
        context.title = context.title.strip()
        exam_date: date | None = context.inputs.get("exam_date")
        today: date = context.inputs["today"]
        if not context.title or exam_date is None:
            raise InputValidationError("Please provide topic and exam date")
        if exam_date < today:
            raise InputValidationError("The exam date cannot be in the past")
        context.pending_values.update(
            description=f"Study plan for {context.title} until {exam_date.isoformat()}",
            topics=[context.title],
            exam_date=exam_date,
            schedule=[],
        )
        return context


class NormalizePlanStep(PipelineStep):
    def __init__(self, normalizer: BaseNormalizer) -> None:
        self._normalizer = normalizer

    def run(self, context: PipelineContext) -> PipelineContext:
        exam_date: date = context.inputs["exam_date"]
        today: date = context.inputs["today"]
        result = self._normalizer.generate_study_plan(context.title, exam_date, today)
        tasks = [task for task in result.tasks if today <= task.date <= exam_date]
        if len(tasks) < len(result.tasks):
            Log.warning(
                f"Dropped {len(result.tasks) - len(tasks)} study tasks dated outside "
                f"{today.isoformat()}..{exam_date.isoformat()}"
            )
        context.result = StudyPlanResult(tasks=tasks, degraded_fields=result.degraded_fields)
        context.final_values["schedule"] = [_schedule_entry(task) for task in tasks]
        return context


class CreatePlanTasksStep(PipelineStep):
    def __init__(self, tasks_repo: StudyTasksRepository) -> None:
        self._tasks_repo = tasks_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if not isinstance(context.result, StudyPlanResult):
            raise ValueError("PipelineContext.result must be a StudyPlanResult before task creation")
        created = self._tasks_repo.create_many(
            context.user,
            [
                {
                    "plan_id": context.artifact_id,
                    "title": task.title,
                    "description": task.description,
                    "date": task.date,
                }
                for task in context.result.tasks
            ],
        )
        Log.info(f"Created {len(created)} study tasks for plan {context.artifact_id}")
        return context


class DiscardPlanTasksStep(PipelineStep):
    """Deletes the tasks of a plan that never became ready."""

    def __init__(self, tasks_repo: StudyTasksRepository) -> None:
        self._tasks_repo = tasks_repo

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.artifact_id is not None:
            removed = self._tasks_repo.delete_for_plan(context.user, context.artifact_id)
            if removed:
                Log.info(f"Removed {removed} study tasks of failed plan {context.artifact_id}")
        return context


def _schedule_entry(task: PlannedTask) -> dict[str, str]:
    return {"title": task.title, "description": task.description, "date": task.date.isoformat()}


class PlannerOrchestrator:
    """Planner: AI-generated study plans plus hand-managed study tasks."""

    def __init__(
        self,
        normalizer: BaseNormalizer,
        plans_repo: StudyPlansRepository,
        tasks_repo: StudyTasksRepository,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._plans_repo = plans_repo
        self._tasks_repo = tasks_repo
        self._today = today
        self._pipeline = Pipeline(
            steps=[
                ValidatePlanInputStep(),
                WritePendingStep(plans_repo),
                NormalizePlanStep(normalizer),
                CreatePlanTasksStep(tasks_repo),
                FinalizeStep(plans_repo),
                ReloadStep(plans_repo),
            ],
            failed_steps=[MarkFailedStep(plans_repo), DiscardPlanTasksStep(tasks_repo)],
        )

    def generate_plan(
        self,
        user: UserContext,
        topic: str,
        exam_date: date | None,
    ) -> StudyPlanRecord:
        """Generate a plan for *topic* and one study task per planned day.

        Tasks dated before today or after *exam_date* are discarded.
        """
        context = self._pipeline.run(
            PipelineContext(
                user=user,
                title=topic,
                inputs={"exam_date": exam_date, "today": self._today()},
            )
        )
        return context.record  # type: ignore[no-any-return]

    def list_plans(self, user: UserContext) -> list[StudyPlanRecord]:
        return self._plans_repo.find_all(user)

    def delete_plan(self, user: UserContext, plan_id: str) -> None:
        """Delete a plan; its tasks go with it."""
        self._plans_repo.delete(user, plan_id)
        Log.info(f"Deleted study plan {plan_id}")

    def add_task(
        self,
        user: UserContext,
        title: str,
        task_date: date | None,
        description: str = "",
    ) -> StudyTaskRecord:
        if not title.strip() or task_date is None:
            raise InputValidationError("Please provide title and date")
        return self._tasks_repo.create(
            user,
            {"title": title.strip(), "date": task_date, "description": description},
        )

    def toggle_task(self, user: UserContext, task_id: str) -> StudyTaskRecord:
        task = self._tasks_repo.find_by_id(user, task_id)
        return self._tasks_repo.update(user, task_id, {"completed": not task.completed})

    def update_task(
        self,
        user: UserContext,
        task_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        task_date: date | None = None,
    ) -> StudyTaskRecord:
        values: dict[str, object] = {}
        if title is not None:
            if not title.strip():
                raise InputValidationError("Please provide a title")
            values["title"] = title.strip()
        if description is not None:
            values["description"] = description
        if task_date is not None:
            values["date"] = task_date
        return self._tasks_repo.update(user, task_id, values)

    def delete_task(self, user: UserContext, task_id: str) -> None:
        self._tasks_repo.delete(user, task_id)

    def list_tasks(self, user: UserContext) -> list[StudyTaskRecord]:
        return self._tasks_repo.find_all(user, order_by="date", descending=False)

    def upcoming_tasks(self, user: UserContext) -> list[StudyTaskRecord]:
        """Incomplete tasks dated today or later."""
        return self._tasks_repo.find_upcoming(user, self._today())

    def completed_tasks(self, user: UserContext) -> list[StudyTaskRecord]:
        return self._tasks_repo.find_all(
            user, order_by="date", descending=False, completed=True
        )
