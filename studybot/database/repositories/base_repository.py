"""Owner-scoped CRUD shared by every artifact table.

Table and column names are class-level constants; caller-supplied column
names are checked against them before any SQL is built, so only values
travel as query parameters.
"""

import uuid
from collections.abc import Generator, Mapping
from contextlib import contextmanager
from typing import Any, ClassVar, Generic, TypeVar

import psycopg
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from studybot.context import UserContext
from studybot.database.connection import get_connection
from studybot.database.exceptions import ArtifactNotFoundError, PersistenceError

R = TypeVar("R")


class BaseRepository(Generic[R]):
    """Typed create/read/update/delete for one owner-scoped table."""

    table: ClassVar[str]
    record_type: ClassVar[type]
    columns: ClassVar[tuple[str, ...]]
    json_columns: ClassVar[frozenset[str]] = frozenset()
    owner_column: ClassVar[str] = "user_id"
    default_order: ClassVar[str] = "created_at"
    touches_updated_at: ClassVar[bool] = False

    _READ_ONLY: ClassVar[frozenset[str]] = frozenset({"id", "created_at", "updated_at"})

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def create(self, user: UserContext, values: Mapping[str, Any]) -> R:
        """Insert a row owned by *user* and return it."""
        self._check_writable(values)
        row_values = {**values, self.owner_column: user.user_id}
        names = list(row_values)
        with self._cursor(user) as cur:
            cur.execute(
                f"""
                INSERT INTO {self.table} ({", ".join(names)})
                VALUES ({", ".join(["%s"] * len(names))})
                RETURNING {self._select_list()}
                """,
                [self._adapt(name, row_values[name]) for name in names],
            )
            row = cur.fetchone()
        if row is None:
            raise PersistenceError(f"Insert into {self.table} returned no row")
        return self._to_record(row)

    def find_by_id(self, user: UserContext, record_id: str) -> R:
        """Return one row owned by *user*.

        Raises:
            ArtifactNotFoundError: if the row does not exist or belongs to someone else.
        """
        self._check_id(record_id)
        with self._cursor(user) as cur:
            cur.execute(
                f"""
                SELECT {self._select_list()}
                FROM {self.table}
                WHERE id = %s AND {self.owner_column} = %s
                """,
                (record_id, user.user_id),
            )
            row = cur.fetchone()
        if row is None:
            raise ArtifactNotFoundError(f"{self._label()} {record_id} not found")
        return self._to_record(row)

    def find_all(
        self,
        user: UserContext,
        *,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
        **filters: Any,
    ) -> list[R]:
        """Return rows owned by *user*, optionally filtered by column equality."""
        order_column = order_by or self.default_order
        self._check_columns([order_column, *filters])
        where = [f"{self.owner_column} = %s", *(f"{name} = %s" for name in filters)]
        params: list[Any] = [user.user_id, *filters.values()]
        query = (
            f"SELECT {self._select_list()} FROM {self.table} "
            f"WHERE {' AND '.join(where)} "
            f"ORDER BY {order_column} {'DESC' if descending else 'ASC'}"
        )
        if limit is not None:
            query += " LIMIT %s"
            params.append(limit)
        with self._cursor(user) as cur:
            cur.execute(query, params)
            rows = cur.fetchall()
        return [self._to_record(row) for row in rows]

    def update(self, user: UserContext, record_id: str, values: Mapping[str, Any]) -> R:
        """Overwrite only the supplied columns and return the updated row.

        Raises:
            ArtifactNotFoundError: if the row does not exist or belongs to someone else.
        """
        self._check_id(record_id)
        if not values:
            return self.find_by_id(user, record_id)
        self._check_writable(values)
        assignments = [f"{name} = %s" for name in values]
        if self.touches_updated_at:
            assignments.append("updated_at = NOW()")
        params = [self._adapt(name, value) for name, value in values.items()]
        with self._cursor(user) as cur:
            cur.execute(
                f"""
                UPDATE {self.table}
                SET {", ".join(assignments)}
                WHERE id = %s AND {self.owner_column} = %s
                RETURNING {self._select_list()}
                """,
                [*params, record_id, user.user_id],
            )
            row = cur.fetchone()
        if row is None:
            raise ArtifactNotFoundError(f"{self._label()} {record_id} not found")
        return self._to_record(row)

    def delete(self, user: UserContext, record_id: str) -> None:
        """Hard-delete one row owned by *user*.

        Raises:
            ArtifactNotFoundError: if the row does not exist or belongs to someone else.
        """
        self._check_id(record_id)
        with self._cursor(user) as cur:
            cur.execute(
                f"DELETE FROM {self.table} WHERE id = %s AND {self.owner_column} = %s",
                (record_id, user.user_id),
            )
            if cur.rowcount == 0:
                raise ArtifactNotFoundError(f"{self._label()} {record_id} not found")

    def count(self, user: UserContext, **filters: Any) -> int:
        """Count rows owned by *user*."""
        self._check_columns(filters)
        where = [f"{self.owner_column} = %s", *(f"{name} = %s" for name in filters)]
        with self._cursor(user) as cur:
            cur.execute(
                f"SELECT COUNT(*) AS total FROM {self.table} WHERE {' AND '.join(where)}",
                [user.user_id, *filters.values()],
            )
            row = cur.fetchone()
        return int(row["total"]) if row is not None else 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @contextmanager
    def _cursor(
        self,
        user: UserContext,
    ) -> Generator[psycopg.Cursor[dict[str, Any]], None, None]:
        """Yield a dict-row cursor scoped to *user*; commit when the block succeeds."""
        try:
            with get_connection(user) as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    yield cur
                conn.commit()
        except PersistenceError:
            raise
        except psycopg.Error as exc:
            raise PersistenceError(f"{self.table}: {exc}") from exc

    def _select_list(self) -> str:
        return ", ".join(self.columns)

    def _check_columns(self, names: Any) -> None:
        unknown = [name for name in names if name not in self.columns]
        if unknown:
            raise ValueError(f"Unknown {self.table} columns: {unknown}")

    def _check_id(self, record_id: str) -> None:
        try:
            uuid.UUID(str(record_id))
        except ValueError as exc:
            raise ArtifactNotFoundError(f"{self._label()} {record_id} not found") from exc

    def _check_writable(self, values: Mapping[str, Any]) -> None:
        self._check_columns(values)
        blocked = [
            name for name in values if name in self._READ_ONLY or name == self.owner_column
        ]
        if blocked:
            raise ValueError(f"Columns are not writable on {self.table}: {blocked}")

    def _adapt(self, name: str, value: Any) -> Any:
        if name in self.json_columns and value is not None:
            return Jsonb(value)
        return value

    def _to_record(self, row: Mapping[str, Any]) -> R:
        values = {
            name: str(row[name]) if isinstance(row[name], uuid.UUID) else row[name]
            for name in self.columns
        }
        return self.record_type(**values)  # type: ignore[no-any-return]

    def _label(self) -> str:
        return self.record_type.__name__.removesuffix("Record")
