# peoplebase/domain/entities/person.py
from __future__ import annotations

from dataclasses import dataclass, asdict, field
from datetime import date, datetime
from typing import Optional, Tuple

NICKNAME_MAX_LENGTH = 32
NAME_MAX_LENGTH = 100
TAG_MAX_LENGTH = 32


def _check_fields(nickname: str, name: str, date_of_birth: date, tags: Tuple[str, ...]) -> None:
    if not isinstance(nickname, str) or not nickname.strip():
        raise ValueError("nickname is required")
    if not isinstance(name, str) or not name.strip():
        raise ValueError("name is required")
    if not isinstance(date_of_birth, date) or isinstance(date_of_birth, datetime):
        raise ValueError("date_of_birth must be a calendar date")
    for t in tags:
        if not isinstance(t, str) or not t.strip():
            raise ValueError("tags must be non-empty strings")


@dataclass(frozen=True)
class PersonInput:
    """
    A creation request that already went through validation. Only the
    entity-level invariants are re-checked here (presence and types); length
    bounds and date range are the validation layer's job.
    """
    nickname: str
    name: str
    date_of_birth: date
    tags: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags or ()))
        _check_fields(self.nickname, self.name, self.date_of_birth, self.tags)


@dataclass(frozen=True)
class Person:
    """
    A registered person. `id` grows with creation order, so sorting by id is
    sorting by "who registered first". Nickname is unique and case-sensitive
    ("Ana" and "ana" are two different people).
    """
    id: int
    nickname: str
    name: str
    date_of_birth: date
    tags: Tuple[str, ...] = ()

    # Persistence (optional)
    date_created: Optional[datetime] = field(default=None, compare=False)

    def __post_init__(self):
        if not isinstance(self.id, int) or isinstance(self.id, bool):
            raise ValueError("id must be an integer")
        object.__setattr__(self, "tags", tuple(self.tags or ()))
        _check_fields(self.nickname, self.name, self.date_of_birth, self.tags)

    def as_dict(self) -> dict:
        d = asdict(self)
        d["tags"] = list(self.tags)
        return d
