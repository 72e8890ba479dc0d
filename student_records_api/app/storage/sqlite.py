"""
SQLite storage backend and simple migration system.

Records are kept in an embedded database file.  A new connection is
opened for every operation and closed afterwards, so the adapter is
safe to call from FastAPI's worker threads.  Each write is a single
statement, which SQLite applies atomically.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.  Only
additive changes (new tables, columns or indices) belong here.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from ..core.exceptions import RecordNotFoundError, ServiceUnavailableError, StorageError
from ..schemas.student import StudentFields, StudentRead
from .base import StorageAdapter, fold_case, is_storable_id, normalize_query, parse_id_query, utcnow

logger = logging.getLogger(__name__)

MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        -- AUTOINCREMENT keeps SQLite from reusing the id of a deleted row.
        CREATE TABLE IF NOT EXISTS students (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            age INTEGER NOT NULL,
            gender TEXT NOT NULL,
            midterm REAL NOT NULL,
            final REAL NOT NULL,
            created_at TEXT NOT NULL
        );
        """,
    ),
    # Migration 2: index for the default "most recent first" listing
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_students_created_at ON students(created_at);
        """,
    ),
]

_COLUMNS = "id, name, age, gender, midterm, final, created_at"


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SQLiteStorage(StorageAdapter):
    """Embedded file database backend."""

    name = "sqlite"

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)
        self.init_db()

    def describe(self) -> str:
        return f"sqlite ({os.path.basename(self.path)})"

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------
    def get_connection(self) -> sqlite3.Connection:
        """Create and return a new SQLite connection.

        Rows are returned as ``sqlite3.Row`` so columns can be accessed
        by name, and a ``casefold`` SQL function is registered for
        case-insensitive name search.
        """
        try:
            conn = sqlite3.connect(self.path)
        except sqlite3.OperationalError as exc:
            raise ServiceUnavailableError(f"Cannot open database file {self.path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        conn.create_function("casefold", 1, fold_case, deterministic=True)
        return conn

    @contextmanager
    def get_cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, commit on success and always close the connection."""
        conn = self.get_connection()
        try:
            yield conn.cursor()
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(f"SQLite error: {exc}") from exc
        finally:
            conn.close()

    def init_db(self) -> None:
        """Create the migrations table and apply pending migrations."""
        with self.get_cursor() as cursor:
            cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            cursor.execute("SELECT MAX(version) AS version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    cursor.executescript(sql)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    logger.info("Applied SQLite migration %s to %s", version, self.path)
                    current_version = version

    @staticmethod
    def _row_to_student(row: sqlite3.Row) -> StudentRead:
        return StudentRead(
            id=row["id"],
            name=row["name"],
            age=row["age"],
            gender=row["gender"],
            midterm=row["midterm"],
            final=row["final"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------
    def list(self, query: Optional[str] = None) -> List[StudentRead]:
        query = normalize_query(query)
        sql = f"SELECT {_COLUMNS} FROM students"
        params: tuple = ()
        if query is not None:
            sql += " WHERE instr(casefold(name), ?) > 0 OR id = ?"
            params = (query.casefold(), parse_id_query(query))
        sql += " ORDER BY created_at DESC, id DESC"
        with self.get_cursor() as cursor:
            rows = cursor.execute(sql, params).fetchall()
        return [self._row_to_student(row) for row in rows]

    def get(self, record_id: int) -> StudentRead:
        if not is_storable_id(record_id):
            raise RecordNotFoundError(record_id)
        with self.get_cursor() as cursor:
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM students WHERE id = ?",
                (record_id,),
            ).fetchone()
        if row is None:
            raise RecordNotFoundError(record_id)
        return self._row_to_student(row)

    def create(self, fields: StudentFields) -> StudentRead:
        created_at = _format_timestamp(utcnow())
        with self.get_cursor() as cursor:
            cursor.execute(
                """
                INSERT INTO students (name, age, gender, midterm, final, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (fields.name, fields.age, fields.gender, fields.midterm, fields.final, created_at),
            )
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM students WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
        return self._row_to_student(row)

    def update(self, record_id: int, fields: StudentFields) -> StudentRead:
        if not is_storable_id(record_id):
            raise RecordNotFoundError(record_id)
        with self.get_cursor() as cursor:
            cursor.execute(
                """
                UPDATE students
                SET name = ?, age = ?, gender = ?, midterm = ?, final = ?
                WHERE id = ?
                """,
                (fields.name, fields.age, fields.gender, fields.midterm, fields.final, record_id),
            )
            if cursor.rowcount == 0:
                raise RecordNotFoundError(record_id)
            row = cursor.execute(
                f"SELECT {_COLUMNS} FROM students WHERE id = ?",
                (record_id,),
            ).fetchone()
        return self._row_to_student(row)

    def delete(self, record_id: int) -> None:
        if not is_storable_id(record_id):
            raise RecordNotFoundError(record_id)
        with self.get_cursor() as cursor:
            cursor.execute("DELETE FROM students WHERE id = ?", (record_id,))
            affected = cursor.rowcount
        if not affected:
            raise RecordNotFoundError(record_id)
