# peoplebase/services/validation/people.py
from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List

import pydantic

from peoplebase.domain.entities.person import PersonInput
from peoplebase.domain.errors import FieldViolation, ValidationError
from peoplebase.services.schemas.people import PersonCreate

# every accepted input key -> the label reported back to callers
FIELD_LABELS = {
    "nickname": "nickname",
    "apelido": "nickname",
    "name": "name",
    "nome": "name",
    "dateOfBirth": "dateOfBirth",
    "date_of_birth": "dateOfBirth",
    "nascimento": "dateOfBirth",
    "tags": "tags",
    "stack": "tags",
}


def _label(loc: tuple) -> str:
    if not loc:
        return "body"
    head, *rest = loc
    label = FIELD_LABELS.get(str(head), str(head))
    for part in rest:
        label += f"[{part}]" if isinstance(part, int) else f".{part}"
    return label


def _message(err: dict) -> str:
    msg = err.get("msg", "invalid value")
    # pydantic prefixes messages raised from our own validators
    return msg.removeprefix("Value error, ")


def _violations(exc: pydantic.ValidationError) -> List[FieldViolation]:
    return [FieldViolation(_label(tuple(e.get("loc", ()))), _message(e)) for e in exc.errors()]


def validate_person(raw: Any) -> PersonInput:
    """
    Check a raw creation payload and return the normalized PersonInput.

    Raises ValidationError listing every failed field; the payload never
    reaches the store in that case.
    """
    if not isinstance(raw, Mapping):
        raise ValidationError([FieldViolation("body", "must be an object")])
    try:
        payload = PersonCreate.model_validate(dict(raw))
    except pydantic.ValidationError as exc:
        raise ValidationError(_violations(exc)) from exc

    return PersonInput(
        nickname=payload.nickname,
        name=payload.name,
        date_of_birth=payload.date_of_birth,
        tags=tuple(payload.tags or ()),
    )
