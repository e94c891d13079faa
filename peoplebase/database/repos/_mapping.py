# peoplebase/database/repos/_mapping.py
from __future__ import annotations
from peoplebase.database.models.person import Person as DBPerson
from peoplebase.domain.entities.person import Person as DomainPerson


def to_domain_person(row: DBPerson) -> DomainPerson:
    return DomainPerson(
        id=row.id,
        nickname=row.nickname,
        name=row.name,
        date_of_birth=row.date_of_birth,
        tags=tuple(row.tags or ()),
        date_created=getattr(row, "date_created", None),
    )
