from __future__ import annotations
from typing import Iterator, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from peoplebase.database.models.person import Person as DBPerson
from peoplebase.domain.entities.person import PersonInput
from peoplebase.domain.policies.person_search import build_search_key


class SqlAlchemyPeopleRepo:
    """
    Session-bound queries on the person table. Does not commit: the caller
    owns the transaction (see PersonStore).
    """

    def __init__(self, session: Session) -> None:
        self.db = session

    def get(self, person_id: int) -> Optional[DBPerson]:
        return self.db.get(DBPerson, person_id)

    def add(self, person: PersonInput) -> DBPerson:
        obj = DBPerson(
            nickname=person.nickname,
            name=person.name,
            date_of_birth=person.date_of_birth,
            tags=list(person.tags),
            search_key=build_search_key(person.nickname, person.name, person.tags),
        )
        self.db.add(obj)
        self.db.flush()  # unique violation surfaces here; also assigns id
        return obj

    def count(self) -> int:
        stmt = select(func.count()).select_from(DBPerson)
        return int(self.db.execute(stmt).scalar_one() or 0)

    def iter_search_key_containing(self, needle: str, limit: int) -> Iterator[DBPerson]:
        """Rows whose search_key contains `needle` literally (% and _ escaped), oldest first."""
        stmt = (
            select(DBPerson)
            .where(DBPerson.search_key.contains(needle, autoescape=True))
            .order_by(DBPerson.id.asc())
            .limit(limit)
        )
        yield from self.db.execute(stmt).scalars()
