"""Record store: the only owner of persisted person records.

Lifecycle is explicit. Build a store (usually with `PersonStore.from_settings()`),
call `start()` once at process start, `close()` at process stop. Hand the
instance to whoever needs it instead of importing a global.

Every operation runs in its own transaction: commit on success, rollback on any
exception (cancellation included), so callers never observe a half-written
record. Nickname uniqueness is the database's unique constraint, which makes
two concurrent creates with the same nickname end in exactly one success.
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from peoplebase.common.logging import get_logger
from peoplebase.common.settings import Settings, get_settings
from peoplebase.database.core.main import Base, build_engine, make_session_factory
from peoplebase.database.repos._mapping import to_domain_person
from peoplebase.database.repos.people_repo import SqlAlchemyPeopleRepo
from peoplebase.domain.entities.person import Person, PersonInput
from peoplebase.domain.errors import ConflictError, NotFoundError, StorageError

logger = get_logger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the failed statement broke a unique constraint (the nickname one here)."""
    sqlstate = getattr(exc.orig, "sqlstate", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION
    # sqlite3 carries no SQLSTATE, only the message
    message = str(exc.orig)
    return "UNIQUE constraint failed" in message or "uq_person_nickname" in message


class PersonStore:
    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._sessions = make_session_factory(engine)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PersonStore":
        cfg = settings or get_settings()
        return cls(build_engine(settings=cfg))

    # -------- lifecycle --------

    def start(self) -> "PersonStore":
        """Prepare the database and create the person table if missing. Idempotent."""
        try:
            with self.engine.begin() as conn:
                if conn.dialect.name == "postgresql":
                    schema = Base.metadata.schema
                    if schema:
                        conn.execute(text(f'CREATE SCHEMA IF NOT EXISTS "{schema}"'))
                    conn.execute(text("CREATE EXTENSION IF NOT EXISTS pg_trgm"))
                Base.metadata.create_all(bind=conn)
        except SQLAlchemyError as exc:
            logger.exception("person store failed to start")
            raise StorageError("start", str(exc)) from exc
        logger.info("person store started (%s)", self.engine.url.render_as_string(hide_password=True))
        return self

    def close(self) -> None:
        self.engine.dispose()
        logger.info("person store closed")

    def __enter__(self) -> "PersonStore":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        try:
            with self._sessions.begin() as session:
                yield session
        except IntegrityError as exc:
            if is_unique_violation(exc):
                raise
            logger.exception("integrity failure during %s", operation)
            raise StorageError(operation, str(exc)) from exc
        except SQLAlchemyError as exc:
            logger.exception("storage failure during %s", operation)
            raise StorageError(operation, str(exc)) from exc

    # -------- operations --------

    def create(self, person: PersonInput) -> Person:
        try:
            with self._transaction("create") as session:
                row = SqlAlchemyPeopleRepo(session).add(person)
                created = to_domain_person(row)
        except IntegrityError as exc:
            logger.info("nickname %r already taken", person.nickname)
            raise ConflictError(person.nickname) from exc
        return created

    def get_by_id(self, person_id: int) -> Person:
        with self._transaction("get_by_id") as session:
            row = SqlAlchemyPeopleRepo(session).get(person_id)
            if row is None:
                raise NotFoundError("person", person_id)
            return to_domain_person(row)

    def count(self) -> int:
        with self._transaction("count") as session:
            return SqlAlchemyPeopleRepo(session).count()

    def find_by_search_key(self, needle: str, limit: int) -> Iterator[Person]:
        """
        Persons whose search key contains `needle`, oldest first, at most `limit`.
        `needle` must already be normalized (see person_search.normalize_term).
        Rows are read in one transaction and mapped before it closes.
        """
        with self._transaction("search") as session:
            found: List[Person] = [
                to_domain_person(row)
                for row in SqlAlchemyPeopleRepo(session).iter_search_key_containing(needle, limit)
            ]
        return iter(found)
