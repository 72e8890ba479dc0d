"""
Managed relational database backend (SQLAlchemy).

The engine is built from ``DATABASE_URL`` and nothing is connected
until the first request.  ``pool_pre_ping`` lets the pool replace dead
connections opportunistically; there is no reconnect timer and no
retry loop.  The record service calls ``is_available`` before every
operation, and driver-level connection failures inside an operation
surface as ``ServiceUnavailableError`` rather than falling back to any
other store.

Name search folds case with Python's ``casefold`` on SQLite, matching the
other backends.  Other dialects fold with their own ``lower()``, which
folds Unicode letters one to one, so ``"ß"`` only matches itself there.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import Column, DateTime, Float, Integer, String, create_engine, event, func, or_, text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from ..core.exceptions import RecordNotFoundError, ServiceUnavailableError, StorageError
from ..schemas.student import StudentFields, StudentRead
from .base import StorageAdapter, fold_case, is_storable_id, normalize_query, parse_id_query, utcnow

logger = logging.getLogger(__name__)

Base = declarative_base()


class Student(Base):
    __tablename__ = "students"
    # Keep SQLite from reusing deleted ids; other dialects use sequences.
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    age = Column(Integer, nullable=False)
    gender = Column(String(10), nullable=False)
    midterm = Column(Float, nullable=False)
    final = Column(Float, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime columns; values are always written in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _register_casefold(dbapi_connection, connection_record) -> None:
    dbapi_connection.create_function("casefold", 1, fold_case, deterministic=True)


def _to_read(row: Student) -> StudentRead:
    return StudentRead(
        id=row.id,
        name=row.name,
        age=row.age,
        gender=row.gender,
        midterm=row.midterm,
        final=row.final,
        created_at=_as_utc(row.created_at),
    )


class RelationalStorage(StorageAdapter):
    """SQLAlchemy-backed store for PostgreSQL, MySQL or any supported dialect."""

    name = "relational"

    def __init__(self, database_url: str, **engine_kwargs) -> None:
        engine_kwargs.setdefault("pool_pre_ping", True)
        self.engine = create_engine(database_url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            event.listen(self.engine, "connect", _register_casefold)
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=self.engine
        )
        self._schema_ready = False

    def describe(self) -> str:
        url = self.engine.url
        if url.database:
            return f"{url.get_backend_name()} ({url.database})"
        return url.get_backend_name()

    def _ensure_schema(self) -> None:
        if not self._schema_ready:
            Base.metadata.create_all(bind=self.engine)
            self._schema_ready = True

    def is_available(self) -> bool:
        """Run ``SELECT 1`` and create the schema on first success."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            self._ensure_schema()
        except SQLAlchemyError as exc:
            logger.warning("Database probe failed for %s: %s", self.describe(), exc)
            return False
        return True

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session, commit on success and map driver errors to domain errors."""
        session = self.SessionLocal()
        try:
            self._ensure_schema()
            yield session
            session.commit()
        except (OperationalError, InterfaceError) as exc:
            session.rollback()
            raise ServiceUnavailableError(f"Database is unavailable: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(f"Database error: {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def list(self, query: Optional[str] = None) -> List[StudentRead]:
        query = normalize_query(query)
        with self.session_scope() as session:
            q = session.query(Student)
            if query is not None:
                if self.engine.dialect.name == "sqlite":
                    folded, needle = func.casefold(Student.name, type_=String), query.casefold()
                else:
                    folded, needle = func.lower(Student.name, type_=String), query.lower()
                condition = folded.contains(needle, autoescape=True)
                wanted_id = parse_id_query(query)
                if wanted_id is not None:
                    condition = or_(condition, Student.id == wanted_id)
                q = q.filter(condition)
            rows = q.order_by(Student.created_at.desc(), Student.id.desc()).all()
            return [_to_read(row) for row in rows]

    def get(self, record_id: int) -> StudentRead:
        if not is_storable_id(record_id):
            raise RecordNotFoundError(record_id)
        with self.session_scope() as session:
            row = session.get(Student, record_id)
            if row is None:
                raise RecordNotFoundError(record_id)
            return _to_read(row)

    def create(self, fields: StudentFields) -> StudentRead:
        with self.session_scope() as session:
            row = Student(**fields.model_dump(), created_at=utcnow())
            session.add(row)
            session.flush()
            return _to_read(row)

    def update(self, record_id: int, fields: StudentFields) -> StudentRead:
        if not is_storable_id(record_id):
            raise RecordNotFoundError(record_id)
        with self.session_scope() as session:
            # One UPDATE statement; created_at is not in the SET list.
            affected = (
                session.query(Student)
                .filter(Student.id == record_id)
                .update(fields.model_dump(), synchronize_session=False)
            )
            if not affected:
                raise RecordNotFoundError(record_id)
            row = session.get(Student, record_id)
            return _to_read(row)

    def delete(self, record_id: int) -> None:
        if not is_storable_id(record_id):
            raise RecordNotFoundError(record_id)
        with self.session_scope() as session:
            affected = (
                session.query(Student)
                .filter(Student.id == record_id)
                .delete(synchronize_session=False)
            )
            if not affected:
                raise RecordNotFoundError(record_id)

    def close(self) -> None:
        self.engine.dispose()
