# peoplebase/domain/policies/person_search.py
"""
Matching rule for "search people by term".

A person matches when the term, compared case-insensitively (Unicode
casefold), is a substring of the nickname, the name, or any single tag.

To let the database answer this with one LIKE, every record stores a search
key: its casefolded fields joined by the ASCII unit separator. Terms may not
contain control characters, so a term can never match across two fields.
"""
from __future__ import annotations

import unicodedata
from typing import Iterable

from peoplebase.domain.entities.person import Person
from peoplebase.domain.errors import FieldViolation, ValidationError

SEPARATOR = "\x1f"


def _fold(s: str) -> str:
    return s.casefold()


def build_search_key(nickname: str, name: str, tags: Iterable[str] = ()) -> str:
    parts = [nickname, name, *tags]
    return SEPARATOR.join(_fold(p) for p in parts)


def has_control_chars(s: str) -> bool:
    return any(unicodedata.category(ch) == "Cc" for ch in s)


def normalize_term(term: object) -> str:
    """Validate a search term and return its casefolded form."""
    if not isinstance(term, str):
        raise ValidationError([FieldViolation("term", "must be a string")])
    if not term.strip():
        raise ValidationError([FieldViolation("term", "must not be empty")])
    if has_control_chars(term):
        raise ValidationError([FieldViolation("term", "must not contain control characters")])
    return _fold(term)


def matches(person: Person, term: str) -> bool:
    needle = normalize_term(term)
    return any(needle in _fold(field) for field in (person.nickname, person.name, *person.tags))
