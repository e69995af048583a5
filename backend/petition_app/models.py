"""SQLModel data models.

`PetitionRecord` mirrors the columns of the hosted `basvurular` table so
the local SQLite backend stores the same row shape as Supabase.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


class PetitionRecord(SQLModel, table=True):
    """One stored petition submission.

    `dersler_json` holds the course conflict list as JSON.
    """
    __tablename__ = "basvurular"

    id: Optional[int] = Field(default=None, primary_key=True)
    ad: str = ""
    soyad: str = ""
    ogrno: str = Field(default="", index=True)
    mail: str = ""
    telefon: str = ""
    bolum: str = ""
    aciklama: str = ""
    dersler_json: List[Any] = Field(default_factory=list, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
