# tests/database/conftest.py
from __future__ import annotations

import pytest
from sqlalchemy.orm import Session


@pytest.fixture()
def db(store) -> Session:
    """
    Per-test SQLAlchemy Session bound to a transaction (rolled back after each test).
    Uses the engine of the store fixture, so the person table already exists.
    """
    connection = store.engine.connect()
    trans = connection.begin()

    session = Session(bind=connection, future=True)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()
