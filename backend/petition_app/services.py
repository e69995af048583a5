"""Business logic for the petition submission workflow.

The service persists the normalized submission and then renders the
petition document. Insert failures stop the workflow before any
document is produced; a rendering failure after a successful insert
leaves the stored row in place.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from .config import Settings
from .repositories import PetitionRepository
from .schemas import PetitionSubmission
from .utils.filenames import petition_filename
from .utils.petition_pdf import build_petition_pdf


@dataclass
class PetitionDocument:
    filename: str
    content: bytes


class PetitionService:
    """Store a submission and produce its downloadable document."""
    def __init__(self, repository: PetitionRepository, settings: Settings):
        self.repository = repository
        self.settings = settings

    def store(self, submission: PetitionSubmission) -> None:
        """Insert the submission; raises `StorageInsertError` on backend failure."""
        self.repository.insert(submission)

    def render(self, submission: PetitionSubmission, today: Optional[date] = None) -> PetitionDocument:
        content = build_petition_pdf(submission, self.settings, today=today)
        return PetitionDocument(filename=petition_filename(submission), content=content)

    def submit(self, submission: PetitionSubmission, today: Optional[date] = None) -> PetitionDocument:
        self.store(submission)
        return self.render(submission, today)
