from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional
from uuid import UUID, uuid4

from .exceptions import StorageError
from .models import TaskEntity, next_updated_at, validate_task
from .repositories import Repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    status: str = "status"
    due_date: str = "due_date"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open task database: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("Task store operation failed: %s", e)
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.status} TEXT NOT NULL,
                    {_COLS.due_date} TEXT NULL,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        def parse_dt(s: Optional[str]) -> Optional[datetime]:
            if s is None:
                return None
            return datetime.fromisoformat(s)

        return {
            "id": UUID(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": row[_COLS.description],
            "status": str(row[_COLS.status]),
            "due_date": parse_dt(row[_COLS.due_date]),
            "created_at": parse_dt(row[_COLS.created_at]),
            "updated_at": parse_dt(row[_COLS.updated_at]),
        }

    def _select(self, conn: sqlite3.Connection, task_id: UUID) -> Optional[sqlite3.Row]:
        return conn.execute(
            f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (str(task_id),)
        ).fetchone()

    def find_by_id(self, task_id: UUID) -> Optional[TaskEntity]:
        with self._conn() as conn:
            row = self._select(conn, task_id)
            return self._row_to_entity(row) if row else None

    def find_all(self) -> List[TaskEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.created_at} ASC"
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def _now(self) -> datetime:
        return datetime.now()

    def save(self, task: TaskEntity) -> TaskEntity:
        validate_task(task)
        now = self._now()
        due = task["due_date"].isoformat() if task["due_date"] else None
        with self._conn() as conn:
            existing = self._select(conn, task["id"]) if task["id"] is not None else None
            if existing is None:
                task_id = task["id"] or uuid4()
                stamp = now.isoformat(timespec="microseconds")
                conn.execute(
                    f"""
                    INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.title}, {_COLS.description},
                        {_COLS.status}, {_COLS.due_date}, {_COLS.created_at}, {_COLS.updated_at})
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    (str(task_id), task["title"], task["description"], task["status"], due, stamp, stamp),
                )
            else:
                task_id = task["id"]
                previous = datetime.fromisoformat(existing[_COLS.updated_at])
                stamp = next_updated_at(previous, now).isoformat(timespec="microseconds")
                conn.execute(
                    f"""
                    UPDATE {_COLS.table}
                    SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.status} = ?,
                        {_COLS.due_date} = ?, {_COLS.updated_at} = ?
                    WHERE {_COLS.id} = ?
                    """,
                    (task["title"], task["description"], task["status"], due, stamp, str(task_id)),
                )
            row = self._select(conn, task_id)
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, task: TaskEntity) -> None:
        with self._conn() as conn:
            conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (str(task["id"]),))
