# peoplebase/services/schemas/people.py
from __future__ import annotations

import re
from datetime import date, datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, AliasChoices, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from peoplebase.domain.entities.person import NAME_MAX_LENGTH, NICKNAME_MAX_LENGTH, TAG_MAX_LENGTH
from peoplebase.domain.policies.person_search import has_control_chars

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


def _printable(v: str) -> str:
    # NUL cannot be stored in Postgres text; \x1f is the search key separator
    if has_control_chars(v):
        raise ValueError("must not contain control characters")
    return v


TagStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1, max_length=TAG_MAX_LENGTH),
    AfterValidator(_printable),
]


# ---------- Person (input) ----------

class PersonCreate(BaseModel):
    """
    Creation payload. Accepts both the English field names and the Portuguese
    ones the original service used (apelido, nome, nascimento, stack).
    """
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    nickname: str = Field(
        ..., min_length=1, max_length=NICKNAME_MAX_LENGTH,
        validation_alias=AliasChoices("nickname", "apelido"),
    )
    name: str = Field(
        ..., min_length=1, max_length=NAME_MAX_LENGTH,
        validation_alias=AliasChoices("name", "nome"),
    )
    date_of_birth: date = Field(
        ..., validation_alias=AliasChoices("dateOfBirth", "date_of_birth", "nascimento"),
    )
    tags: Optional[List[TagStr]] = Field(
        default=None, validation_alias=AliasChoices("tags", "stack"),
    )

    @field_validator("nickname", "name")
    @classmethod
    def _no_control_chars(cls, v: str) -> str:
        return _printable(v)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def _iso_date_only(cls, v):
        # datetime is a date subclass; a timestamp is not a birth date
        if isinstance(v, date) and not isinstance(v, datetime):
            return v
        if isinstance(v, str) and _ISO_DATE.fullmatch(v.strip()):
            return date.fromisoformat(v.strip())
        raise ValueError("must be a date in YYYY-MM-DD format")

    @field_validator("date_of_birth")
    @classmethod
    def _not_in_future(cls, v: date) -> date:
        if v > date.today():
            raise ValueError("must not be in the future")
        return v


# ---------- Person (output) ----------

class PersonRead(BaseModel):
    """Read model; `model_dump(by_alias=True)` gives the original wire names."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    nickname: str = Field(serialization_alias="apelido")
    name: str = Field(serialization_alias="nome")
    date_of_birth: date = Field(serialization_alias="nascimento")
    tags: List[str] = Field(default_factory=list, serialization_alias="stack")
