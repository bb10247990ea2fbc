from __future__ import annotations

import html
from io import BytesIO
import logging
import re

from docx import Document
from docx.shared import Pt
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from app.schemas.analysis import ExportFormat

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "improved_resume"

MEDIA_TYPES: dict[str, str] = {
    "pdf": "application/pdf",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "rtf": "application/rtf",
}

_HEADER_MARKERS = ("EXPERIENCE", "EDUCATION", "SKILLS", "SUMMARY", "CONTACT")
_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9._ -]+")


def is_header_line(line: str) -> bool:
    stripped = line.strip()
    if not stripped or len(stripped) >= 50:
        return False
    if stripped == stripped.upper() and any(ch.isalpha() for ch in stripped):
        return True
    return any(marker in stripped for marker in _HEADER_MARKERS)


def download_filename(name: str | None, extension: str) -> str:
    base = (name or "").strip()
    if base.lower().endswith(f".{extension}"):
        base = base[: -(len(extension) + 1)]
    base = _UNSAFE_FILENAME_RE.sub("", base).strip(" .")[:120]
    return f"{base or DEFAULT_FILENAME}.{extension}"


def render_pdf(resume_text: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=20 * mm,
        rightMargin=20 * mm,
        topMargin=20 * mm,
        bottomMargin=20 * mm,
        title="Resume",
    )
    styles = getSampleStyleSheet()
    body = ParagraphStyle("ResumeBody", parent=styles["Normal"], fontName="Helvetica", fontSize=11, leading=16)
    header = ParagraphStyle("ResumeHeader", parent=body, fontName="Helvetica-Bold", fontSize=13, leading=18, spaceBefore=6)

    story = []
    for line in resume_text.splitlines():
        if not line.strip():
            story.append(Spacer(1, 6))
            continue
        style = header if is_header_line(line) else body
        story.append(Paragraph(html.escape(line), style))
    if not story:
        story.append(Spacer(1, 6))

    doc.build(story)
    return buffer.getvalue()


def render_docx(resume_text: str) -> bytes:
    document = Document()
    for line in resume_text.split("\n"):
        if not line.strip():
            document.add_paragraph("")
            continue
        header = is_header_line(line)
        run = document.add_paragraph().add_run(line)
        run.bold = header
        run.font.size = Pt(14 if header else 12)

    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _rtf_escape(text: str) -> str:
    parts: list[str] = []
    for ch in text:
        if ch in "\\{}":
            parts.append("\\" + ch)
        elif ord(ch) > 127:
            # RTF \u takes signed 16-bit UTF-16 code units
            raw = ch.encode("utf-16-le")
            for index in range(0, len(raw), 2):
                code = int.from_bytes(raw[index : index + 2], "little")
                parts.append(f"\\u{code if code < 32768 else code - 65536}?")
        else:
            parts.append(ch)
    return "".join(parts)


def render_rtf(resume_text: str) -> bytes:
    body = "\\par ".join(_rtf_escape(line) for line in resume_text.split("\n"))
    rtf = "{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 Times New Roman;}}\n\\f0\\fs24 " + body + "\n}"
    return rtf.encode("ascii")


_RENDERERS = {
    "pdf": render_pdf,
    "docx": render_docx,
    "rtf": render_rtf,
}


def export_resume(resume_text: str, fmt: ExportFormat) -> bytes:
    renderer = _RENDERERS.get(fmt)
    if renderer is None:
        raise ValueError(f"Unsupported export format '{fmt}'.")
    content = renderer(resume_text)
    logger.info("resume_export_completed format=%s bytes=%s", fmt, len(content))
    return content
