# Cursor MCP Servers
# File: clients/pdf.py
# Version: v2

"""Local PDF processing: text/form extraction, form filling, text layout.

Reading and form filling use pypdf; new documents are laid out with
reportlab using a fixed US-Letter grid:

- page 612 x 792 pt, 50 pt margin on every side
- Helvetica 12, 18 pt line height
- floor((792 - 2 * 50) / 18) = 38 lines per page

Lines are split on newlines only. There is no word wrap, so a line wider
than the page runs past the right margin.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError
from reportlab.pdfgen import canvas

from ..models import PdfContent

logger = logging.getLogger(__name__)

PAGE_WIDTH = 612
PAGE_HEIGHT = 792
MARGIN = 50
FONT_NAME = "Helvetica"
FONT_SIZE = 12
LINE_HEIGHT = 18
LINES_PER_PAGE = math.floor((PAGE_HEIGHT - 2 * MARGIN) / LINE_HEIGHT)

DATA_URL_PREFIX = "data:application/pdf;base64,"
RAW_BASE64_MIN_LENGTH = 500


class PdfInputError(ValueError):
    """The input could not be turned into PDF bytes."""


# ---------------------------------------------------------------------------
# Input handling
# ---------------------------------------------------------------------------


def load_pdf_bytes(source: str, *, what: str = "File") -> bytes:
    """Resolve a data URL, raw base64 string or file path into PDF bytes.

    Anything longer than 500 characters without the data-URL prefix is
    taken to be base64; shorter strings are file paths.
    """
    if source.startswith(DATA_URL_PREFIX):
        return _b64decode(source[len(DATA_URL_PREFIX):])
    if len(source) > RAW_BASE64_MIN_LENGTH:
        return _b64decode(source)

    path = Path(source).expanduser()
    if not path.is_file():
        raise PdfInputError(f"{what} not found: {source}")
    return path.read_bytes()


def _b64decode(data: str) -> bytes:
    try:
        return base64.b64decode("".join(data.split()), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PdfInputError(f"Invalid base64 PDF data: {exc}") from exc


# ---------------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------------


def _open(data: bytes) -> PdfReader:
    try:
        return PdfReader(io.BytesIO(data))
    except PdfReadError as exc:
        raise PdfInputError(f"Not a readable PDF: {exc}") from exc


def _field_value(field: Mapping[str, Any]) -> str:
    value = field.get("/V")
    if value is None:
        return ""
    return str(value)


def read_pdf(data: bytes) -> PdfContent:
    reader = _open(data)
    text = "\n\n".join((page.extract_text() or "") for page in reader.pages)
    fields = reader.get_fields() or {}
    return PdfContent(
        page_count=len(reader.pages),
        text=text,
        form_fields={name: _field_value(field) for name, field in fields.items()},
    )


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def paginate_lines(text: str, lines_per_page: int = LINES_PER_PAGE) -> List[List[str]]:
    """Split text on newlines and chunk it into pages by simple counting."""
    lines = text.split("\n")
    return [lines[i:i + lines_per_page] for i in range(0, len(lines), lines_per_page)]


def line_baseline(index: int) -> float:
    """y coordinate of the index-th line on a page (0 = top line)."""
    return PAGE_HEIGHT - MARGIN - index * LINE_HEIGHT


def render_text_pdf(text: str) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    for page in paginate_lines(text):
        pdf.setFont(FONT_NAME, FONT_SIZE)
        for index, line in enumerate(page):
            pdf.drawString(MARGIN, line_baseline(index), line or " ")
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def empty_pdf() -> bytes:
    buffer = io.BytesIO()
    PdfWriter().write(buffer)
    return buffer.getvalue()


def fill_form(template: bytes, values: Mapping[str, Any]) -> Tuple[bytes, List[str]]:
    """Set named form fields on a copy of ``template``.

    Returns the new document and the names that do not exist in the form;
    those are logged and skipped.
    """
    reader = _open(template)
    existing = reader.get_fields() or {}

    known: Dict[str, str] = {}
    skipped: List[str] = []
    for name, value in values.items():
        if name in existing:
            known[name] = "" if value is None else str(value)
        else:
            logger.warning("Form field %r not found in template, skipping", name)
            skipped.append(name)

    writer = PdfWriter(clone_from=reader)
    if known:
        for page in writer.pages:
            if "/Annots" in page:
                writer.update_page_form_field_values(page, known, auto_regenerate=False)

    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue(), skipped


def write_pdf(
    text: Optional[str] = None,
    form_fields: Optional[Mapping[str, Any]] = None,
    template: Optional[bytes] = None,
) -> Tuple[bytes, List[str]]:
    """Build a document: a filled template, laid-out text, or an empty PDF.

    With a template the text content is ignored.
    """
    if template is not None:
        if text:
            logger.info("Template given; text content is ignored")
        return fill_form(template, form_fields or {})

    if form_fields:
        logger.warning("Form fields given without a template, ignoring: %s", ", ".join(form_fields))
    if text:
        return render_text_pdf(text), []
    return empty_pdf(), []


def save_pdf(data: bytes, output_path: str) -> Path:
    path = Path(output_path).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def to_data_url(data: bytes) -> str:
    return DATA_URL_PREFIX + base64.b64encode(data).decode("ascii")
