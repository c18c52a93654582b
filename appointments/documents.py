"""Read uploaded documents into OCR text."""

from __future__ import annotations

import logging
from io import BytesIO
from pathlib import Path

from django.conf import settings
from pypdf import PdfReader
from pypdf.errors import PdfReadError

from .extraction.errors import DocumentReadError

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {".txt", ".text"}
PDF_EXTENSIONS = {".pdf"}
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS | PDF_EXTENSIONS


def _decode_text(data: bytes) -> str:
    for encoding in ("utf-8-sig", "cp1252"):
        try:
            return data.decode(encoding)
        except UnicodeDecodeError:
            continue
    return data.decode("latin-1")


def pdf_to_text(data: bytes) -> str:
    try:
        reader = PdfReader(BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except (PdfReadError, ValueError) as exc:
        raise DocumentReadError(f"Could not read PDF: {exc}") from exc
    text = "\n".join(page.strip() for page in pages if page.strip())
    if not text:
        raise DocumentReadError("PDF has no text layer.")
    return text


def read_upload(upload) -> str:
    """Return the text of an uploaded .txt or .pdf file."""
    suffix = Path(upload.name or "").suffix.lower()
    if suffix not in SUPPORTED_EXTENSIONS:
        raise DocumentReadError(f"Unsupported file type: {suffix or 'none'}")
    max_bytes = int(getattr(settings, "DOCUMENT_MAX_UPLOAD_BYTES", 10 * 1024 * 1024))
    if upload.size and upload.size > max_bytes:
        raise DocumentReadError("File is too large.")

    data = upload.read()
    if suffix in PDF_EXTENSIONS:
        text = pdf_to_text(data)
    else:
        text = _decode_text(data)
    logger.debug("Read %d characters from %s", len(text), upload.name)
    return text
