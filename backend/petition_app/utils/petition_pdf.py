"""Fixed-layout petition document.

`layout_petition` decides which text goes where on a single A4 page;
`render_pdf` hands the positioned lines to reportlab. The layout is a
top-down cursor: every written line moves the cursor down by its font
size plus a fixed leading. There is no pagination, so content that runs
past the bottom edge is clipped.
"""

from __future__ import annotations

import io
import json
import logging
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from ..config import Settings
from ..schemas import CourseConflict, PetitionSubmission

_LOGGER = logging.getLogger("petition.pdf")

PAGE_SIZE = (595.28, 841.89)  # A4 portrait, points
LEFT_MARGIN = 50
TOP_Y = 800
LEADING = 6
BODY_SIZE = 11
COURSE_SIZE = 9
HEADER_SIZE = 12

HEADER_LINES = (
    (280, "T.C."),
    (175, "YILDIZ TEKNİK ÜNİVERSİTESİ"),
    (155, "İSTATİSTİK BÖLÜM BAŞKANLIĞINA"),
)


@dataclass(frozen=True)
class TextLine:
    x: float
    y: float
    text: str
    size: int = BODY_SIZE
    bold: bool = False


class _Cursor:
    """Collects positioned lines while moving down the page."""

    def __init__(self):
        self.y = TOP_Y
        self.lines: List[TextLine] = []

    def write(self, text: str, size: int = BODY_SIZE, bold: bool = False) -> None:
        self.lines.append(TextLine(LEFT_MARGIN, self.y, str(text or ""), size, bold))
        self.y -= size + LEADING

    def place(self, x: float, text: str, step: float, size: int = HEADER_SIZE, bold: bool = True) -> None:
        self.lines.append(TextLine(x, self.y, text, size, bold))
        self.y -= step

    def skip(self, amount: float) -> None:
        self.y -= amount


def _or_dash(value: str) -> str:
    return value or "-"


def course_lines(index: int, course: CourseConflict) -> Tuple[str, str]:
    """Return the taken-course and conflicting-course lines for one entry (1-based)."""
    taken = (
        f"Alınan: {_or_dash(course.taken_course)} | Grup: {_or_dash(course.taken_section)} | "
        f"Hoca: {_or_dash(course.taken_instructor)} | {_or_dash(course.taken_schedule)}"
    )
    conflicting = (
        f"Çakışan: {_or_dash(course.conflicting_course)} | Grup: {_or_dash(course.conflicting_section)} | "
        f"Hoca: {_or_dash(course.conflicting_instructor)} | {_or_dash(course.conflicting_schedule)}"
    )
    return f"{index}) {taken}", f"   {conflicting}"


def format_date(day: date) -> str:
    """Format a date the way the tr-TR locale prints it (dd.mm.yyyy)."""
    return day.strftime("%d.%m.%Y")


def layout_petition(submission: PetitionSubmission, today: Optional[date] = None) -> List[TextLine]:
    """Lay out the petition letter as positioned text lines."""
    today = today or date.today()
    s = submission
    cur = _Cursor()

    cur.write(f"Tarih: {format_date(today)}")
    cur.skip(10)

    for i, (x, text) in enumerate(HEADER_LINES):
        cur.place(x, text, step=30 if i == len(HEADER_LINES) - 1 else 18)

    cur.write(f"Ben {s.given_name} {s.family_name} (Öğrenci No: {s.student_number}), "
              f"{s.department} bölümünde öğrenim görmekteyim.")
    cur.write("Çakışan ders sınavları nedeniyle mazeret sınavına alınmayı talep ediyorum.")
    cur.skip(10)

    cur.write("Ders Bilgileri:", bold=True)
    cur.skip(6)
    for i, course in enumerate(s.courses, start=1):
        taken, conflicting = course_lines(i, course)
        cur.write(taken, COURSE_SIZE)
        cur.write(conflicting, COURSE_SIZE)
        cur.skip(4)

    cur.skip(6)
    cur.write("Açıklama:", bold=True)
    cur.write(_or_dash(s.description))
    cur.skip(10)

    cur.write("Gereğini arz ederim.")
    cur.skip(30)

    cur.write("İletişim:", bold=True)
    cur.write(f"YTÜ Mail: {_or_dash(s.email)}")
    cur.write(f"Telefon: {_or_dash(s.phone)}")
    cur.skip(20)

    cur.write(f"{s.full_name} - İmza")
    return cur.lines


@lru_cache(maxsize=8)
def _register_ttf(path: str) -> str:
    name = f"PetitionFont{len(pdfmetrics.getRegisteredFontNames())}"
    pdfmetrics.registerFont(TTFont(name, path))
    return name


def bundled_font_paths() -> Tuple[str, str]:
    """Return the DejaVu Sans regular/bold files shipped with matplotlib."""
    ttf_dir = Path(matplotlib.get_data_path()) / "fonts" / "ttf"
    return str(ttf_dir / "DejaVuSans.ttf"), str(ttf_dir / "DejaVuSans-Bold.ttf")


def resolve_fonts(regular_path: str = "", bold_path: str = "") -> Tuple[str, str]:
    """Register the document fonts and return their (regular, bold) names.

    Without a configured font the bundled DejaVu Sans pair is used; it
    covers the Turkish letters (ı, ş, ğ, İ) the built-in PDF fonts lack.
    A configured regular font without a bold file is used for both.
    """
    if not regular_path:
        regular_path, default_bold = bundled_font_paths()
        bold_path = bold_path or default_bold
    regular = _register_ttf(regular_path)
    bold = _register_ttf(bold_path) if bold_path else regular
    return regular, bold


def render_pdf(lines: List[TextLine], fonts: Optional[Tuple[str, str]] = None, title: str = "Dilekçe") -> bytes:
    """Draw `lines` on a single A4 page and return the PDF bytes."""
    regular, bold = fonts or resolve_fonts()
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=PAGE_SIZE)
    c.setTitle(title)
    for line in lines:
        c.setFont(bold if line.bold else regular, line.size)
        c.drawString(line.x, line.y, line.text)
    c.showPage()
    c.save()
    return buffer.getvalue()


def build_petition_pdf(submission: PetitionSubmission, settings: Optional[Settings] = None,
                       today: Optional[date] = None) -> bytes:
    if settings is not None:
        fonts = resolve_fonts(settings.PDF_FONT_PATH, settings.PDF_BOLD_FONT_PATH)
    else:
        fonts = resolve_fonts()
    lines = layout_petition(submission, today)
    clipped = sum(1 for line in lines if line.y < 0)
    if clipped:
        _LOGGER.warning("layout_overflow %s", json.dumps({"lines": len(lines), "clipped": clipped}, ensure_ascii=True))
    return render_pdf(lines, fonts, title=f"Dilekçe - {submission.full_name}".strip())
