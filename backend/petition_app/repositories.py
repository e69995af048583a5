"""Repository classes that persist petition submissions.

Each repository exposes a single `insert` operation. Backend failures
are reported as `StorageInsertError` carrying the backend's message so
the route can surface it to the caller.
"""

import json
import logging
from typing import Protocol

from postgrest.exceptions import APIError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from supabase import Client, create_client

from . import models
from .config import Settings
from .database import get_engine
from .errors import ConfigurationError, StorageInsertError
from .schemas import PetitionSubmission

logger = logging.getLogger("petition.storage")


class PetitionRepository(Protocol):
    def insert(self, submission: PetitionSubmission) -> None:
        ...


class SupabasePetitionRepository:
    """Append petition rows to the hosted Supabase table."""
    def __init__(self, client: Client, table: str = "basvurular"):
        self.client = client
        self.table = table

    @classmethod
    def from_settings(cls, settings: Settings) -> "SupabasePetitionRepository":
        url, service_key = settings.require_supabase()
        return cls(create_client(url, service_key), table=settings.PETITION_TABLE)

    def insert(self, submission: PetitionSubmission) -> None:
        """Insert one row; any error reported by PostgREST becomes `StorageInsertError`."""
        try:
            response = self.client.table(self.table).insert([submission.to_row()]).execute()
        except APIError as exc:
            message = getattr(exc, "message", None) or str(exc)
            logger.warning("insert_failed %s", json.dumps({"table": self.table, "error": message}, ensure_ascii=True))
            raise StorageInsertError(message) from exc
        error = getattr(response, "error", None)
        if error:
            message = getattr(error, "message", None) or str(error)
            logger.warning("insert_failed %s", json.dumps({"table": self.table, "error": message}, ensure_ascii=True))
            raise StorageInsertError(message)
        logger.info("insert_done %s", json.dumps({"table": self.table, "ogrno": submission.student_number}, ensure_ascii=True))


class SqlPetitionRepository:
    """Store petitions in a local database through SQLModel."""
    def __init__(self, session: Session):
        self.session = session

    def insert(self, submission: PetitionSubmission) -> models.PetitionRecord:
        """Persist the submission and return the managed record."""
        record = models.PetitionRecord(**submission.to_row())
        try:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("insert_failed %s", json.dumps({"table": "basvurular", "error": str(exc)}, ensure_ascii=True))
            raise StorageInsertError(str(exc)) from exc
        return record


class _SessionScopedRepository:
    """Open a short-lived session around each insert."""
    def __init__(self, db_url: str):
        self.db_url = db_url

    def insert(self, submission: PetitionSubmission) -> None:
        with Session(get_engine(self.db_url)) as session:
            SqlPetitionRepository(session).insert(submission)


def open_repository(settings: Settings) -> PetitionRepository:
    """Build the storage backend selected by `PETITION_STORAGE`.

    Raises `ConfigurationError` before any network call when the
    Supabase credentials are missing.
    """
    if settings.PETITION_STORAGE == "supabase":
        return SupabasePetitionRepository.from_settings(settings)
    if settings.PETITION_STORAGE == "sqlite":
        return _SessionScopedRepository(settings.PETITION_DB_URL)
    raise ConfigurationError(f"Unsupported PETITION_STORAGE: {settings.PETITION_STORAGE}")


def get_repository_factory():
    """FastAPI dependency returning the repository factory (overridable in tests)."""
    return open_repository
