from datetime import date

import pytest

from petition_app.config import Settings
from petition_app.errors import StorageInsertError
from petition_app.schemas import PetitionSubmission
from petition_app.services import PetitionService


def test_submit_stores_then_renders(fake_repo):
    submission = PetitionSubmission.model_validate({"ad": "Zeynep", "soyad": "Demir", "ogrno": "22052007"})
    doc = PetitionService(fake_repo, Settings()).submit(submission, today=date(2026, 1, 5))
    assert fake_repo.inserted == [submission]
    assert doc.filename == "Dilekce_22052007_Zeynep_Demir.pdf"
    assert doc.content.startswith(b"%PDF")


def test_failed_insert_skips_rendering(failing_repo, monkeypatch):
    service = PetitionService(failing_repo, Settings())
    rendered = []
    monkeypatch.setattr(service, "render", lambda *args, **kwargs: rendered.append(args))
    with pytest.raises(StorageInsertError):
        service.submit(PetitionSubmission())
    assert rendered == []
