from collections.abc import Mapping, Sequence
from datetime import date
from typing import Any, ClassVar

from studybot.context import UserContext
from studybot.database.models import StudyTaskRecord
from studybot.database.repositories.base_repository import BaseRepository


class StudyTasksRepository(BaseRepository[StudyTaskRecord]):
    """Database operations for the study_tasks table."""

    table: ClassVar[str] = "study_tasks"
    record_type: ClassVar[type] = StudyTaskRecord
    columns: ClassVar[tuple[str, ...]] = (
        "id",
        "user_id",
        "plan_id",
        "title",
        "description",
        "date",
        "completed",
        "created_at",
    )
    default_order: ClassVar[str] = "date"

    def create_many(
        self,
        user: UserContext,
        rows: Sequence[Mapping[str, Any]],
    ) -> list[StudyTaskRecord]:
        """Insert several tasks in a single transaction.

        Either every row is stored or none is.
        """
        if not rows:
            return []
        for values in rows:
            self._check_writable(values)
        created: list[StudyTaskRecord] = []
        with self._cursor(user) as cur:
            for values in rows:
                row_values = {**values, self.owner_column: user.user_id}
                names = list(row_values)
                cur.execute(
                    f"""
                    INSERT INTO {self.table} ({", ".join(names)})
                    VALUES ({", ".join(["%s"] * len(names))})
                    RETURNING {self._select_list()}
                    """,
                    [row_values[name] for name in names],
                )
                row = cur.fetchone()
                if row is not None:
                    created.append(self._to_record(row))
        return created

    def find_upcoming(self, user: UserContext, today: date) -> list[StudyTaskRecord]:
        """Incomplete tasks dated *today* or later, soonest first."""
        with self._cursor(user) as cur:
            cur.execute(
                f"""
                SELECT {self._select_list()}
                FROM {self.table}
                WHERE {self.owner_column} = %s AND completed = false AND date >= %s
                ORDER BY date ASC
                """,
                (user.user_id, today),
            )
            rows = cur.fetchall()
        return [self._to_record(row) for row in rows]

    def delete_for_plan(self, user: UserContext, plan_id: str) -> int:
        """Delete every task of one plan and return how many were removed."""
        with self._cursor(user) as cur:
            cur.execute(
                f"DELETE FROM {self.table} WHERE plan_id = %s AND {self.owner_column} = %s",
                (plan_id, user.user_id),
            )
            return cur.rowcount
