"""
PDF export of assistant answers and saved projects.
"""

from __future__ import annotations

import io
import logging
import re
import unicodedata
from functools import lru_cache
from pathlib import Path
from urllib.parse import quote
from xml.sax.saxutils import escape

from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from sulama.core.errors import NotFoundError, ValidationError
from sulama.repositories import json_storage

logger = logging.getLogger(__name__)

MARGIN = 40
FONT_NAME = "SulamaSans"
FALLBACK_FONT = "Helvetica"
FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
)
_UNSAFE_CHARS = re.compile(r"[^\wığüşöçİĞÜŞÖÇ\- ]+")
_PARAGRAPH_BREAK = re.compile(r"\n{2,}")
_ASCII_MAP = str.maketrans("ıİ", "iI")


@lru_cache
def body_font(configured_path: str = "") -> str:
    """Register a TTF font with Turkish glyphs; Helvetica lacks ğ, ş and ı."""
    candidates = [configured_path] if configured_path else []
    candidates.extend(FONT_CANDIDATES)
    for candidate in candidates:
        if candidate and Path(candidate).is_file():
            try:
                pdfmetrics.registerFont(TTFont(FONT_NAME, candidate))
                return FONT_NAME
            except Exception:
                logger.warning("PDF fontu yüklenemedi: %s", candidate)
    logger.warning("Türkçe karakterli font bulunamadı, %s kullanılıyor.", FALLBACK_FONT)
    return FALLBACK_FONT


def safe_file_stem(title: str) -> str:
    return _UNSAFE_CHARS.sub("_", title)[:80] or "proje"


def ascii_file_name(file_name: str) -> str:
    normalized = unicodedata.normalize("NFKD", file_name.translate(_ASCII_MAP))
    return normalized.encode("ascii", "ignore").decode("ascii").replace('"', "") or "proje.pdf"


def content_disposition(file_name: str) -> str:
    return f"attachment; filename=\"{ascii_file_name(file_name)}\"; filename*=UTF-8''{quote(file_name)}"


def _paragraph_markup(text: str) -> str:
    return escape(text.strip()).replace("\n", "<br/>")


def render_pdf(title: str, content: str, font_path: str = "") -> bytes:
    font = body_font(font_path)
    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "SulamaTitle",
        parent=styles["Title"],
        fontName=font,
        fontSize=18,
        leading=22,
        alignment=TA_CENTER,
        spaceAfter=12,
    )
    body_style = ParagraphStyle(
        "SulamaBody",
        parent=styles["Normal"],
        fontName=font,
        fontSize=11,
        leading=15,
    )

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=MARGIN,
        rightMargin=MARGIN,
        topMargin=MARGIN,
        bottomMargin=MARGIN,
        title=title,
    )
    story = [Paragraph(_paragraph_markup(title), title_style), Spacer(1, 12)]
    for block in _PARAGRAPH_BREAK.split(str(content)):
        if not block.strip():
            continue
        story.append(Paragraph(_paragraph_markup(block), body_style))
        story.append(Spacer(1, 8))
    doc.build(story)
    return buffer.getvalue()


def export_pdf(email: str | None, title: str | None, content: str | None, font_path: str = "") -> tuple[str, bytes]:
    """Return ``(file_name, pdf_bytes)`` for a registered user's document."""
    if not email or not title or not content:
        raise ValidationError("email, title ve content zorunlu.")
    users = json_storage.load_users()
    if not json_storage.find_user(users, email):
        raise NotFoundError("Kullanıcı bulunamadı.")
    title = str(title)
    return f"{safe_file_stem(title)}.pdf", render_pdf(title, str(content), font_path)
