from __future__ import annotations

from typing import Any, List, Optional

from peoplebase.common.logging import get_logger
from peoplebase.database.store import PersonStore
from peoplebase.domain.entities.person import Person
from peoplebase.services.search.matcher import PersonSearchMatcher
from peoplebase.services.validation.people import validate_person

logger = get_logger(__name__)


class PeopleService:
    """
    What an HTTP layer calls, one method per endpoint of the original API:

        POST /pessoas            -> create(raw)
        GET  /pessoas/{id}       -> get(person_id)
        GET  /pessoas?t=term     -> search(term)
        GET  /contagem-pessoas   -> count()

    Errors are raised as-is (see domain.errors); each knows its HTTP status.
    """

    def __init__(self, store: PersonStore, matcher: Optional[PersonSearchMatcher] = None) -> None:
        self.store = store
        self.matcher = matcher or PersonSearchMatcher(store)

    def create(self, raw: Any) -> Person:
        person_in = validate_person(raw)
        created = self.store.create(person_in)
        logger.debug("created person id=%s nickname=%r", created.id, created.nickname)
        return created

    def get(self, person_id: int) -> Person:
        return self.store.get_by_id(person_id)

    def search(self, term: str, limit: Optional[int] = None) -> List[Person]:
        return list(self.matcher.search(term, limit))

    def count(self) -> int:
        return self.store.count()
