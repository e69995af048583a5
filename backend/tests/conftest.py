import pytest

from petition_app.errors import StorageInsertError
from petition_app.main import app
from petition_app.repositories import get_repository_factory

ENV_VARS = (
    "SUPABASE_URL",
    "SUPABASE_SERVICE_ROLE_KEY",
    "API_KEY",
    "PETITION_STORAGE",
    "PETITION_TABLE",
    "PETITION_DB_URL",
    "PDF_FONT_PATH",
    "PDF_BOLD_FONT_PATH",
)


class FakeRepository:
    """Records inserted submissions; optionally reports a storage error."""

    def __init__(self, error=None):
        self.error = error
        self.inserted = []
        self.calls = 0

    def insert(self, submission):
        self.calls += 1
        if self.error:
            raise StorageInsertError(self.error)
        self.inserted.append(submission)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test from an environment without deployment variables."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def fake_repo():
    return FakeRepository()


@pytest.fixture
def use_repo():
    """Route storage to the given repository for the duration of a test."""
    def _use(repo):
        app.dependency_overrides[get_repository_factory] = lambda: (lambda settings: repo)
        return repo
    yield _use
    app.dependency_overrides.clear()


@pytest.fixture
def failing_repo():
    return FakeRepository(error='duplicate key value violates unique constraint "basvurular_pkey"')
