from __future__ import annotations

from io import BytesIO
import mimetypes
from zipfile import ZipFile

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
MSWORD_MIME = "application/msword"
TEXT_MIME = "text/plain"

RESUME_CONTENT_TYPE_EXTENSION_HINTS = {
    PDF_MIME: "pdf",
    DOCX_MIME: "docx",
    MSWORD_MIME: "doc",
    TEXT_MIME: "txt",
}

GENERIC_CONTENT_TYPES = {"", "application/octet-stream", "binary/octet-stream"}

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
        return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)
    except Exception:
        return False


def _is_probably_text_payload(content: bytes) -> bool:
    if not content:
        return False
    sample = content[:4096]
    if b"\x00" in sample:
        return False
    printable = 0
    for byte in sample:
        if byte in (9, 10, 13) or 32 <= byte <= 126:
            printable += 1
    return (printable / len(sample)) >= 0.75


def is_ooxml_word_payload(content: bytes) -> bool:
    return _is_zip_payload(content) and _zip_has_paths(content, ("word/",))


def extension_from_filename(filename: str) -> str:
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].strip().lower()[:20]


def extension_from_content_type(content_type: str) -> str:
    sanitized = (content_type or "").split(";")[0].strip().lower()
    if not sanitized:
        return ""
    explicit = RESUME_CONTENT_TYPE_EXTENSION_HINTS.get(sanitized)
    if explicit:
        return explicit
    guessed = mimetypes.guess_extension(sanitized) or ""
    return guessed.lstrip(".").lower()


def validate_upload_signature(*, extension: str, content: bytes) -> None:
    """Reject payloads whose magic bytes disagree with the declared type."""
    if extension == "pdf":
        if not content.startswith(PDF_MAGIC):
            raise ValueError("File signature does not match .pdf content.")
        return

    if extension in {"docx", "doc"}:
        if not is_ooxml_word_payload(content):
            if extension == "doc":
                raise ValueError("Legacy .doc is not supported. Convert to .docx.")
            raise ValueError("File signature does not match .docx content.")
        return

    if extension == "txt":
        if not _is_probably_text_payload(content):
            raise ValueError("File signature does not match .txt text content.")
