# tests/conftest.py
from __future__ import annotations
import pytest
from testcontainers.postgres import PostgresContainer

from peoplebase.common.settings import get_settings
from peoplebase.database.core.main import build_engine
from peoplebase.database.models import Base  # <-- imports models/metadata
from peoplebase.database.store import PersonStore


@pytest.fixture(scope="session")
def database_url(tmp_path_factory):
    """
    USE_TESTCONTAINERS=1 runs the suite against a throwaway Postgres;
    otherwise a SQLite file under the pytest tmp dir.
    """
    cfg = get_settings()
    if cfg.use_testcontainers:
        with PostgresContainer(cfg.test_db_image) as pg:
            # Force psycopg (v3) driver in the URL returned by testcontainers
            yield pg.get_connection_url().replace("psycopg2", "psycopg")
    else:
        yield f"sqlite:///{tmp_path_factory.mktemp('db') / 'people.sqlite3'}"


@pytest.fixture()
def store(database_url) -> PersonStore:
    """A started PersonStore on an empty person table; tables dropped afterwards."""
    s = PersonStore(build_engine(database_url)).start()
    try:
        yield s
    finally:
        Base.metadata.drop_all(bind=s.engine)
        s.close()
