"""Database engine helpers for the local SQLite storage backend.

Production deployments store petitions in Supabase; this module is only
used when `PETITION_STORAGE=sqlite`. Engines are cached per URL so that
each request does not reopen the database file.
"""

from functools import lru_cache

from sqlmodel import SQLModel, create_engine

from . import models  # noqa: F401  registers PetitionRecord on the metadata


@lru_cache(maxsize=8)
def get_engine(db_url: str):
    """Return an engine for `db_url`, creating tables on first use."""
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    engine = create_engine(db_url, echo=False, connect_args=connect_args)
    create_db_and_tables(engine)
    return engine


def create_db_and_tables(engine):
    """Create database tables using SQLModel metadata.

    Intended for local development; the hosted table is managed in
    Supabase.
    """
    SQLModel.metadata.create_all(engine)
