# peoplebase/services/search/matcher.py
from __future__ import annotations

from typing import Iterator, Optional

from peoplebase.common.settings import get_settings
from peoplebase.domain.entities.person import Person
from peoplebase.domain.errors import FieldViolation, ValidationError
from peoplebase.domain.policies.person_search import normalize_term
from peoplebase.domain.ports.people import PersonStorePort


class SearchResults:
    """
    Lazy, restartable view over one search. Nothing is queried until the
    first iteration; every new iteration runs the query again, so it sees
    people created in between (still capped at `limit`).
    """

    def __init__(self, store: PersonStorePort, needle: str, limit: int) -> None:
        self._store = store
        self.needle = needle
        self.limit = limit

    def __iter__(self) -> Iterator[Person]:
        return self._store.find_by_search_key(self.needle, self.limit)

    def __repr__(self) -> str:
        return f"<SearchResults needle={self.needle!r} limit={self.limit}>"


class PersonSearchMatcher:
    """
    Answers "which people match this term": case-insensitive substring of
    nickname, name or any tag, oldest registration first.
    """

    def __init__(
        self,
        store: PersonStorePort,
        default_limit: Optional[int] = None,
        max_limit: Optional[int] = None,
    ) -> None:
        cfg = get_settings().search
        self.store = store
        self.max_limit = cfg.max_limit if max_limit is None else max_limit
        if not _is_positive_int(self.max_limit):
            raise ValidationError([FieldViolation("max_limit", "must be a positive integer")])
        self.default_limit = self._check_limit(
            cfg.default_limit if default_limit is None else default_limit, "default_limit"
        )

    def _check_limit(self, limit: object, field: str = "limit") -> int:
        if not _is_positive_int(limit):
            raise ValidationError([FieldViolation(field, "must be a positive integer")])
        if limit > self.max_limit:
            raise ValidationError([FieldViolation(field, f"must be at most {self.max_limit}")])
        return limit

    def search(self, term: str, limit: Optional[int] = None) -> SearchResults:
        needle = normalize_term(term)
        limit = self.default_limit if limit is None else self._check_limit(limit)
        return SearchResults(self.store, needle, limit)


def _is_positive_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool) and v > 0
