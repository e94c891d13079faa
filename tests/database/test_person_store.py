# tests/database/test_person_store.py
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError

from peoplebase.database.store import PersonStore, is_unique_violation
from peoplebase.domain.entities.person import Person, PersonInput
from peoplebase.domain.errors import ConflictError, NotFoundError, StorageError


def _joao(**overrides) -> PersonInput:
    data = dict(nickname="joaosilva", name="João Silva", date_of_birth=date(1990, 1, 1), tags=("java", "go"))
    data.update(overrides)
    return PersonInput(**data)


def test_create_returns_person_with_new_id(store):
    p = store.create(_joao())
    assert isinstance(p, Person)
    assert p.id is not None
    assert p.nickname == "joaosilva"
    assert p.name == "João Silva"
    assert p.date_of_birth == date(1990, 1, 1)
    assert p.tags == ("java", "go")


def test_create_same_nickname_conflicts(store):
    store.create(_joao())
    with pytest.raises(ConflictError) as ei:
        store.create(_joao(name="Outro João"))
    assert ei.value.nickname == "joaosilva"
    assert store.count() == 1


def test_nickname_uniqueness_is_case_sensitive(store):
    store.create(_joao())
    other = store.create(_joao(nickname="JoaoSilva"))
    assert other.nickname == "JoaoSilva"
    assert store.count() == 2


def test_ids_follow_creation_order(store):
    ids = [store.create(_joao(nickname=f"user{i}")).id for i in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_create_without_tags_stores_empty_list(store):
    p = store.create(_joao(tags=()))
    assert store.get_by_id(p.id).tags == ()


def test_get_by_id_missing_raises_not_found(store):
    with pytest.raises(NotFoundError) as ei:
        store.get_by_id(987654)
    assert ei.value.resource == "person"
    assert ei.value.resource_id == 987654


def test_get_by_id_is_idempotent(store):
    created = store.create(_joao())
    first = store.get_by_id(created.id)
    second = store.get_by_id(created.id)
    assert first == second == created
    assert first.as_dict() == second.as_dict()


def test_count(store):
    assert store.count() == 0
    store.create(_joao())
    store.create(_joao(nickname="maria"))
    assert store.count() == 2


def test_find_by_search_key_oldest_first(store):
    a = store.create(_joao(nickname="silva1"))
    store.create(_joao(nickname="other", name="Ana Lima", tags=("rust",)))
    c = store.create(_joao(nickname="silva2"))

    found = list(store.find_by_search_key("silva", limit=10))
    assert [p.id for p in found] == [a.id, c.id]
    assert list(store.find_by_search_key("silva", limit=1)) == [a]


def test_concurrent_creates_same_nickname_exactly_one_wins(store):
    barrier = threading.Barrier(2)

    def _attempt(i: int):
        barrier.wait()
        try:
            return store.create(_joao(name=f"Racer {i}"))
        except ConflictError as e:
            return e

    with ThreadPoolExecutor(max_workers=2) as pool:
        results = list(pool.map(_attempt, range(2)))

    wins = [r for r in results if isinstance(r, Person)]
    conflicts = [r for r in results if isinstance(r, ConflictError)]
    assert len(wins) == 1
    assert len(conflicts) == 1
    assert store.count() == 1


def test_failed_create_leaves_nothing_behind(store):
    store.create(_joao())
    with pytest.raises(ConflictError):
        store.create(_joao())
    # the store keeps serving after a conflict
    p = store.create(_joao(nickname="next"))
    assert store.get_by_id(p.id).nickname == "next"
    assert store.count() == 2


def test_non_unique_integrity_failure_is_storage_error(store, monkeypatch):
    # a NULL search key breaks NOT NULL, not the nickname constraint
    monkeypatch.setattr(
        "peoplebase.database.repos.people_repo.build_search_key", lambda *a, **k: None
    )
    with pytest.raises(StorageError) as ei:
        store.create(_joao())
    assert ei.value.operation == "create"
    assert store.count() == 0


class _DriverError(Exception):
    def __init__(self, message, sqlstate=None):
        super().__init__(message)
        self.sqlstate = sqlstate


@pytest.mark.parametrize(
    "orig, expected",
    [
        (_DriverError("duplicate key", sqlstate="23505"), True),
        (_DriverError("null value in column", sqlstate="23502"), False),
        (_DriverError("violates foreign key", sqlstate="23503"), False),
        (Exception("UNIQUE constraint failed: person.nickname"), True),
        (Exception("NOT NULL constraint failed: person.search_key"), False),
    ],
)
def test_is_unique_violation(orig, expected):
    exc = IntegrityError("INSERT INTO person ...", {}, orig)
    assert is_unique_violation(exc) is expected


def test_unreachable_database_raises_storage_error(tmp_path):
    # a directory is not a database file
    engine = create_engine(f"sqlite:///{tmp_path}")
    s = PersonStore(engine)
    with pytest.raises(StorageError) as ei:
        s.count()
    assert ei.value.operation == "count"
    s.close()


def test_start_is_idempotent(store):
    store.create(_joao())
    store.start()
    assert store.count() == 1


def test_store_as_context_manager(database_url):
    from peoplebase.database.core.main import build_engine
    from peoplebase.database.models import Base

    with PersonStore(build_engine(database_url)) as s:
        try:
            assert s.count() == 0
        finally:
            Base.metadata.drop_all(bind=s.engine)


def test_from_settings_uses_configured_url(tmp_path):
    from peoplebase.common.settings import Settings

    cfg = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'people.db'}")
    with PersonStore.from_settings(cfg) as s:
        assert s.engine.url.database.endswith("people.db")
        assert s.count() == 0
