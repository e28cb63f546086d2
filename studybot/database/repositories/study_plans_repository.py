from typing import ClassVar

from studybot.database.models import StudyPlanRecord
from studybot.database.repositories.base_repository import BaseRepository


class StudyPlansRepository(BaseRepository[StudyPlanRecord]):
    """Database operations for the study_plans table.

    Deleting a plan cascades to its study_tasks in the database.
    """

    table: ClassVar[str] = "study_plans"
    record_type: ClassVar[type] = StudyPlanRecord
    columns: ClassVar[tuple[str, ...]] = (
        "id",
        "user_id",
        "title",
        "status",
        "description",
        "topics",
        "exam_date",
        "schedule",
        "completed",
        "error_message",
        "created_at",
        "updated_at",
    )
    json_columns: ClassVar[frozenset[str]] = frozenset({"schedule"})
    touches_updated_at: ClassVar[bool] = True
