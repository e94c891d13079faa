# peoplebase/database/core/main.py
from __future__ import annotations

from typing import Optional

from sqlalchemy import MetaData, create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from peoplebase.common.settings import Settings, get_settings

_settings = get_settings()

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    # Schema stays None for "public" so the same models run on SQLite
    metadata = MetaData(
        schema=_settings.db_schema,
        naming_convention=NAMING_CONVENTION,
    )


def build_engine(url: Optional[str] = None, settings: Optional[Settings] = None) -> Engine:
    """
    Create an Engine from settings. No engine exists at import time; whoever
    owns the store builds one and disposes it on shutdown.
    """
    cfg = settings or get_settings()
    database_url = url or cfg.database_url
    backend = make_url(database_url).get_backend_name()

    kwargs = {"echo": cfg.db.echo, "future": True}
    if backend == "sqlite":
        # pooled connections move between request threads
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs.update(
            pool_size=cfg.db.pool_size,
            max_overflow=cfg.db.max_overflow,
            pool_pre_ping=cfg.db.pool_pre_ping,
            pool_recycle=cfg.db.pool_recycle,
        )
    engine = create_engine(database_url, **kwargs)

    # Ensure the app schema is first, then public (so extensions remain visible)
    schema = cfg.db_schema
    if schema and backend == "postgresql":
        @event.listens_for(engine, "connect")
        def _set_search_path(dbapi_conn, _):
            with dbapi_conn.cursor() as cur:
                cur.execute(f'SET search_path TO "{schema}", public')

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False, future=True, autoflush=False)
