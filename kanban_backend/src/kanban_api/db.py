from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .models import CategoryEntity, TaskEntity
from .repositories import CategoryRepository, Clock, Storage, TaskQuery, TaskRepository


@dataclass(frozen=True)
class _CategoryCols:
    table: str = "categories"
    id: str = "id"
    type: str = "type"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


@dataclass(frozen=True)
class _TaskCols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    status: str = "status"
    user_id: str = "user_id"
    category_id: str = "category_id"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_C = _CategoryCols()
_T = _TaskCols()


class SQLiteDatabase:
    """
    A SQLite file holding the categories and tasks tables.

    A fresh connection is opened per unit of work and committed on success.
    Foreign keys are enforced, so deleting a category cascades to its tasks.
    """

    def __init__(self, db_path: str, clock: Clock = datetime.now) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self.clock = clock
        self._init_db()

    @contextmanager
    def conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def now(self) -> str:
        return self.clock().isoformat()

    def _init_db(self) -> None:
        with self.conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_C.table} (
                    {_C.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_C.type} TEXT NOT NULL,
                    {_C.created_at} TEXT NOT NULL,
                    {_C.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_T.table} (
                    {_T.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_T.title} TEXT NOT NULL,
                    {_T.description} TEXT NOT NULL,
                    {_T.status} INTEGER NOT NULL DEFAULT 0,
                    {_T.user_id} INTEGER NOT NULL,
                    {_T.category_id} INTEGER NOT NULL
                        REFERENCES {_C.table}({_C.id}) ON DELETE CASCADE,
                    {_T.created_at} TEXT NOT NULL,
                    {_T.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_T.table}_category_id ON {_T.table}({_T.category_id})"
            )


def _category_from_row(row: sqlite3.Row) -> CategoryEntity:
    return {
        "id": int(row[_C.id]),
        "type": str(row[_C.type]),
        "created_at": datetime.fromisoformat(row[_C.created_at]),
        "updated_at": datetime.fromisoformat(row[_C.updated_at]),
    }


def _task_from_row(row: sqlite3.Row) -> TaskEntity:
    return {
        "id": int(row[_T.id]),
        "title": str(row[_T.title]),
        "description": str(row[_T.description]),
        "status": bool(row[_T.status]),
        "user_id": int(row[_T.user_id]),
        "category_id": int(row[_T.category_id]),
        "created_at": datetime.fromisoformat(row[_T.created_at]),
        "updated_at": datetime.fromisoformat(row[_T.updated_at]),
    }


class SQLiteCategoryRepository(CategoryRepository):
    """
    SQLite implementation of the CategoryRepository interface.
    """

    def __init__(self, db: SQLiteDatabase) -> None:
        self._db = db

    def list(self) -> List[CategoryEntity]:
        with self._db.conn() as conn:
            rows = conn.execute(f"SELECT * FROM {_C.table} ORDER BY {_C.id}").fetchall()
            return [_category_from_row(r) for r in rows]

    def get(self, category_id: int) -> Optional[CategoryEntity]:
        with self._db.conn() as conn:
            row = conn.execute(f"SELECT * FROM {_C.table} WHERE {_C.id} = ?", (category_id,)).fetchone()
            return _category_from_row(row) if row else None

    def create(self, type_: str) -> CategoryEntity:
        now = self._db.now()
        with self._db.conn() as conn:
            cur = conn.execute(
                f"INSERT INTO {_C.table} ({_C.type}, {_C.created_at}, {_C.updated_at}) VALUES (?, ?, ?)",
                (type_, now, now),
            )
            row = conn.execute(f"SELECT * FROM {_C.table} WHERE {_C.id} = ?", (cur.lastrowid,)).fetchone()
            assert row is not None
            return _category_from_row(row)

    def save(self, category: CategoryEntity) -> Optional[CategoryEntity]:
        with self._db.conn() as conn:
            cur = conn.execute(
                f"UPDATE {_C.table} SET {_C.type} = ?, {_C.updated_at} = ? WHERE {_C.id} = ?",
                (category["type"], self._db.now(), category["id"]),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(f"SELECT * FROM {_C.table} WHERE {_C.id} = ?", (category["id"],)).fetchone()
            assert row is not None
            return _category_from_row(row)

    def delete(self, category_id: int) -> bool:
        with self._db.conn() as conn:
            cur = conn.execute(f"DELETE FROM {_C.table} WHERE {_C.id} = ?", (category_id,))
            return cur.rowcount > 0


class SQLiteTaskRepository(TaskRepository):
    """
    SQLite implementation of the TaskRepository interface.
    """

    def __init__(self, db: SQLiteDatabase) -> None:
        self._db = db

    def list(self, query: Optional[TaskQuery] = None) -> List[TaskEntity]:
        q = query or TaskQuery()
        clauses = []
        params: list = []

        if q.status is not None:
            clauses.append(f"{_T.status} = ?")
            params.append(1 if q.status else 0)
        if q.category_id is not None:
            clauses.append(f"{_T.category_id} = ?")
            params.append(q.category_id)

        where_sql = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self._db.conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_T.table} {where_sql} ORDER BY {_T.id}", params
            ).fetchall()
            return [_task_from_row(r) for r in rows]

    def get(self, task_id: int) -> Optional[TaskEntity]:
        with self._db.conn() as conn:
            row = conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (task_id,)).fetchone()
            return _task_from_row(row) if row else None

    def create(self, title: str, description: str, user_id: int, category_id: int) -> TaskEntity:
        now = self._db.now()
        with self._db.conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_T.table} ({_T.title}, {_T.description}, {_T.status}, {_T.user_id},
                    {_T.category_id}, {_T.created_at}, {_T.updated_at})
                VALUES (?, ?, 0, ?, ?, ?, ?)
                """,
                (title, description, user_id, category_id, now, now),
            )
            row = conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (cur.lastrowid,)).fetchone()
            assert row is not None
            return _task_from_row(row)

    def save(self, task: TaskEntity) -> Optional[TaskEntity]:
        with self._db.conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_T.table}
                SET {_T.title} = ?, {_T.description} = ?, {_T.status} = ?,
                    {_T.category_id} = ?, {_T.updated_at} = ?
                WHERE {_T.id} = ?
                """,
                (
                    task["title"],
                    task["description"],
                    1 if task["status"] else 0,
                    task["category_id"],
                    self._db.now(),
                    task["id"],
                ),
            )
            if cur.rowcount == 0:
                return None
            row = conn.execute(f"SELECT * FROM {_T.table} WHERE {_T.id} = ?", (task["id"],)).fetchone()
            assert row is not None
            return _task_from_row(row)

    def delete(self, task_id: int) -> bool:
        with self._db.conn() as conn:
            cur = conn.execute(f"DELETE FROM {_T.table} WHERE {_T.id} = ?", (task_id,))
            return cur.rowcount > 0

    def delete_by_category(self, category_id: int) -> int:
        with self._db.conn() as conn:
            cur = conn.execute(f"DELETE FROM {_T.table} WHERE {_T.category_id} = ?", (category_id,))
            return cur.rowcount


# PUBLIC_INTERFACE
def sqlite_storage(db_path: str, clock: Clock = datetime.now) -> Storage:
    """Return a Storage whose repositories share the SQLite file at db_path."""
    db = SQLiteDatabase(db_path, clock)
    return Storage(categories=SQLiteCategoryRepository(db), tasks=SQLiteTaskRepository(db))
