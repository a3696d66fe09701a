from .models import ACCEPTED_MIME_TYPES, DOCX_MIME, PDF_MIME, Document
from .parse import decode_document, sniff_source_type

__all__ = [
    "ACCEPTED_MIME_TYPES",
    "DOCX_MIME",
    "PDF_MIME",
    "Document",
    "decode_document",
    "sniff_source_type",
]
