# peoplebase/database/models/person.py
from __future__ import annotations

from datetime import date
from typing import List

from sqlalchemy import JSON, Date, Index, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from peoplebase.database.core.main import Base
from peoplebase.database.core.service_object import ServiceObject
from peoplebase.domain.entities.person import NAME_MAX_LENGTH, NICKNAME_MAX_LENGTH, TAG_MAX_LENGTH


# VARCHAR[] on Postgres, JSON list elsewhere; both come back as a Python list
TagsType = JSON().with_variant(ARRAY(String(TAG_MAX_LENGTH)), "postgresql")


class Person(ServiceObject, Base):
    """
    One registered person.
      - nickname is unique (case-sensitive, enforced by uq_person_nickname)
      - tags keep insertion order ("stacks" in the original payloads)
      - search_key is derived at insert time, see domain.policies.person_search
    """
    __tablename__ = "person"
    __table_args__ = (
        UniqueConstraint("nickname", name="uq_person_nickname"),
        Index(
            "ix_person_search_key_trgm",
            "search_key",
            postgresql_ops={"search_key": "gin_trgm_ops"},
            postgresql_using="gin",
        ),
    )

    nickname: Mapped[str] = mapped_column(String(NICKNAME_MAX_LENGTH), nullable=False)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    tags: Mapped[List[str]] = mapped_column(TagsType, nullable=False, default=list)
    search_key: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Person id={self.id} nickname={self.nickname!r}>"
