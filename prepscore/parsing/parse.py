from __future__ import annotations

import logging
from io import BytesIO
from zipfile import BadZipFile, ZipFile

from docx import Document as load_docx
from pypdf import PdfReader

from prepscore.core.errors import DocumentDecodeError, UnsupportedFormatError

from .models import ACCEPTED_MIME_TYPES, Document

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"
ZIP_MAGICS = (b"PK\x03\x04", b"PK\x05\x06", b"PK\x07\x08")


def _is_zip_payload(content: bytes) -> bool:
    return any(content.startswith(prefix) for prefix in ZIP_MAGICS)


def _zip_has_paths(content: bytes, prefixes: tuple[str, ...]) -> bool:
    try:
        with ZipFile(BytesIO(content)) as archive:
            names = archive.namelist()
    except BadZipFile:
        return False
    return any(any(name.startswith(prefix) for prefix in prefixes) for name in names)


def sniff_source_type(document: Document) -> str:
    """Check the declared MIME type and the byte signature agree; return pdf or docx."""
    source_type = document.source_type
    if source_type is None:
        accepted = ", ".join(sorted(ACCEPTED_MIME_TYPES))
        raise UnsupportedFormatError(
            f"Unsupported MIME type '{document.mime_type}'. Accepted types: {accepted}"
        )

    content = document.content
    if source_type == "pdf" and not content.lstrip()[:1024].startswith(PDF_MAGIC):
        raise UnsupportedFormatError("Declared PDF but the byte signature does not match.")
    if source_type == "docx" and not (_is_zip_payload(content) and _zip_has_paths(content, ("word/",))):
        raise UnsupportedFormatError("Declared DOCX but the byte signature does not match.")
    return source_type


def _decode_pdf(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    text_parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            text_parts.append(page_text)
    return "\n".join(text_parts)


def _decode_docx(content: bytes) -> str:
    document = load_docx(BytesIO(content))
    parts = [paragraph.text for paragraph in document.paragraphs]
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text and cell.text.strip()]
            if cells:
                parts.append(" | ".join(cells))
    return "\n".join(parts)


def decode_document(document: Document) -> str:
    source_type = sniff_source_type(document)
    decoder = _decode_pdf if source_type == "pdf" else _decode_docx
    try:
        text = decoder(document.content)
    except Exception as exc:
        logger.info("document_decode_failed source_type=%s error=%s", source_type, type(exc).__name__)
        raise DocumentDecodeError(f"Could not decode {source_type.upper()} document: {exc}") from exc

    logger.debug("document_decoded source_type=%s chars=%s", source_type, len(text))
    return text
