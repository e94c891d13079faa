from __future__ import annotations
from typing import Iterator, Protocol
from peoplebase.domain.entities.person import Person, PersonInput


class PersonStorePort(Protocol):
    def create(self, person: PersonInput) -> Person: ...
    def get_by_id(self, person_id: int) -> Person: ...
    def count(self) -> int: ...
    # needle is an already-normalized search key fragment
    def find_by_search_key(self, needle: str, limit: int) -> Iterator[Person]: ...
