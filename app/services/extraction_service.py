from __future__ import annotations

import codecs
from dataclasses import dataclass, field
from io import BytesIO
import logging
from typing import Any, Literal
from zipfile import ZipFile

import defusedxml.ElementTree as ET

from app.normalize.normalize_text import normalize_text
from app.services.file_security import (
    GENERIC_CONTENT_TYPES,
    extension_from_content_type,
    extension_from_filename,
    validate_upload_signature,
)

logger = logging.getLogger(__name__)

SourceType = Literal["pdf", "word", "text"]

_SOURCE_BY_EXTENSION: dict[str, SourceType] = {
    "pdf": "pdf",
    "docx": "word",
    "doc": "word",
    "txt": "text",
}


class ExtractionError(ValueError):
    """Typed failure for unsupported or unreadable resume uploads."""


@dataclass(frozen=True)
class ExtractedText:
    filename: str
    source_type: SourceType
    text: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def characters(self) -> int:
        return len(self.text)


def resolve_extension(filename: str, content_type: str | None) -> str:
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime not in GENERIC_CONTENT_TYPES:
        ext = extension_from_content_type(mime)
        if ext not in _SOURCE_BY_EXTENSION:
            raise ExtractionError(f"Unsupported file format: {mime}")
        return ext
    ext = extension_from_filename(filename)
    if ext not in _SOURCE_BY_EXTENSION:
        raise ExtractionError(f"Unsupported file format: .{ext or 'unknown'}")
    return ext


def _extract_pdf(content: bytes, details: dict[str, Any]) -> str:
    from pypdf import PdfReader

    reader = PdfReader(BytesIO(content))
    page_chunks: list[str] = []
    for page in reader.pages:
        page_text = page.extract_text() or ""
        if page_text.strip():
            page_chunks.append(page_text)
    details["pages"] = len(reader.pages)
    return "\n\n".join(page_chunks)


def _extract_docx_text_fallback(content: bytes) -> tuple[str, int]:
    with ZipFile(BytesIO(content)) as archive:
        raw = archive.read("word/document.xml")
    root = ET.fromstring(raw)
    paragraphs: list[str] = []
    paragraph_count = 0
    for paragraph in root.iter():
        if not paragraph.tag.endswith("}p"):
            continue
        paragraph_count += 1
        texts: list[str] = []
        for node in paragraph.iter():
            if node.tag.endswith("}t") and node.text:
                value = node.text.strip()
                if value:
                    texts.append(value)
        if texts:
            paragraphs.append(" ".join(texts))
    return "\n".join(paragraphs), paragraph_count


def _extract_docx(content: bytes, details: dict[str, Any]) -> str:
    try:
        from docx import Document

        doc = Document(BytesIO(content))
        text = "\n".join(paragraph.text for paragraph in doc.paragraphs if paragraph.text.strip())
        details["paragraphs"] = len(doc.paragraphs)
        details["parser"] = "python-docx"
        return text
    except Exception:
        text, paragraph_count = _extract_docx_text_fallback(content)
        details["paragraphs"] = paragraph_count
        details["parser"] = "zipxml-fallback"
        return text


_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def _plain_text_encodings(content: bytes) -> tuple[str, ...]:
    # utf-16 only with a byte-order mark; latin-1 always decodes
    if content.startswith(_UTF16_BOMS):
        return ("utf-16", "utf-8", "cp1252", "latin-1")
    return ("utf-8", "cp1252", "latin-1")


def _extract_plain_text(content: bytes, details: dict[str, Any]) -> str:
    for encoding in _plain_text_encodings(content):
        try:
            text = content.decode(encoding)
            details["encoding"] = encoding
            return text
        except UnicodeDecodeError:
            continue
    return ""


def extract_resume_text(*, filename: str, content_type: str | None, content: bytes) -> ExtractedText:
    """Extract and normalize resume text from an uploaded document.

    Raises ExtractionError for unsupported types, mismatched signatures and
    unreadable documents. An empty string is a valid result; callers decide
    whether to reject it.
    """
    ext = resolve_extension(filename, content_type)
    try:
        validate_upload_signature(extension=ext, content=content)
    except ValueError as exc:
        raise ExtractionError(str(exc)) from exc

    source_type = _SOURCE_BY_EXTENSION[ext]
    details: dict[str, Any] = {"extension": ext}

    if source_type == "pdf":
        try:
            raw_text = _extract_pdf(content, details)
        except Exception as exc:
            logger.warning("resume_extraction_failed filename=%s type=pdf: %s", filename, exc)
            raise ExtractionError("Failed to extract text from pdf file") from exc
    elif source_type == "word":
        try:
            raw_text = _extract_docx(content, details)
        except Exception as exc:
            logger.warning("resume_extraction_failed filename=%s type=docx: %s", filename, exc)
            raise ExtractionError(
                "Failed to parse DOCX file. Please ensure it's a valid Word document."
            ) from exc
    else:
        raw_text = _extract_plain_text(content, details)

    text = normalize_text(raw_text)
    if not text:
        details["warning"] = "No readable text found. Image-based documents are not supported."
    logger.info(
        "resume_extraction_completed filename=%s type=%s characters=%s",
        filename,
        source_type,
        len(text),
    )
    return ExtractedText(filename=filename, source_type=source_type, text=text, details=details)
