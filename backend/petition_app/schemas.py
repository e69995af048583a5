"""Pydantic request schemas for the petition form.

The public form posts Turkish field names; they are kept as aliases so
the rest of the code can use descriptive attribute names. Every field is
optional and falls back to an empty string, `courses` to an empty list.
"""

from typing import Any, List

from pydantic import BaseModel, Field, field_validator


def as_text(value: Any) -> str:
    """Coerce a loosely typed form value to a string.

    Missing and falsy values (``None``, ``False``, ``0``, ``""``) as well
    as nested lists/objects become ``""``. Integer-valued floats drop the
    fractional part, so ``1.0`` reads ``"1"``.
    """
    if not value or isinstance(value, (list, dict)):
        return ""
    if value is True:
        return "true"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CourseConflict(BaseModel):
    """One taken course and the course whose exam clashes with it."""
    taken_course: str = Field(default="", alias="alinanAdKod")
    taken_section: str = Field(default="", alias="alinanGrup")
    taken_instructor: str = Field(default="", alias="alinanHoca")
    taken_schedule: str = Field(default="", alias="alinanTarihSaat")
    conflicting_course: str = Field(default="", alias="cakisanAdKod")
    conflicting_section: str = Field(default="", alias="cakisanGrup")
    conflicting_instructor: str = Field(default="", alias="cakisanHoca")
    conflicting_schedule: str = Field(default="", alias="cakisanTarihSaat")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        return as_text(value)


class PetitionSubmission(BaseModel):
    """Normalized petition form data for one request."""
    given_name: str = Field(default="", alias="ad")
    family_name: str = Field(default="", alias="soyad")
    student_number: str = Field(default="", alias="ogrno")
    email: str = Field(default="", alias="mail")
    phone: str = Field(default="", alias="telefon")
    department: str = Field(default="", alias="bolum")
    description: str = Field(default="", alias="aciklama")
    courses: List[CourseConflict] = Field(default_factory=list, alias="dersler")

    @field_validator(
        "given_name", "family_name", "student_number", "email",
        "phone", "department", "description", mode="before",
    )
    @classmethod
    def _coerce_text(cls, value):
        return as_text(value)

    @field_validator("courses", mode="before")
    @classmethod
    def _coerce_courses(cls, value):
        if not isinstance(value, list):
            return []
        # items that are not objects still count as a (blank) course row
        return [item if isinstance(item, dict) else {} for item in value]

    @property
    def full_name(self) -> str:
        return f"{self.given_name} {self.family_name}"

    def to_row(self) -> dict:
        """Return the storage row using the form's column names."""
        return {
            "ad": self.given_name,
            "soyad": self.family_name,
            "ogrno": self.student_number,
            "mail": self.email,
            "telefon": self.phone,
            "bolum": self.department,
            "aciklama": self.description,
            "dersler_json": [c.model_dump(by_alias=True) for c in self.courses],
        }
