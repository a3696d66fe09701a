import sys
import unittest
from io import BytesIO
from pathlib import Path
from zipfile import ZipFile

from docx import Document as DocxDocument
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from prepscore.core.errors import DocumentDecodeError, UnsupportedFormatError  # noqa: E402
from prepscore.parsing import DOCX_MIME, PDF_MIME, Document, decode_document, sniff_source_type  # noqa: E402


def _docx_bytes(paragraphs, table_row=None) -> bytes:
    document = DocxDocument()
    for text in paragraphs:
        document.add_paragraph(text)
    if table_row:
        table = document.add_table(rows=1, cols=len(table_row))
        for cell, text in zip(table.rows[0].cells, table_row):
            cell.text = text
    buffer = BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def _blank_pdf_bytes() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buffer = BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def _zip_bytes(entries: dict) -> bytes:
    buffer = BytesIO()
    with ZipFile(buffer, "w") as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


class DecodeDocumentTests(unittest.TestCase):
    def test_docx_paragraphs_and_table_rows_are_decoded(self):
        content = _docx_bytes(["Jane Doe", "Experience"], table_row=["Skills", "Python"])
        text = decode_document(Document(content=content, mime_type=DOCX_MIME))
        lines = text.splitlines()
        self.assertLess(lines.index("Jane Doe"), lines.index("Experience"))
        self.assertIn("Skills | Python", lines)

    def test_blank_pdf_decodes_to_empty_text(self):
        document = Document(content=_blank_pdf_bytes(), mime_type=PDF_MIME)
        self.assertEqual(sniff_source_type(document), "pdf")
        self.assertEqual(decode_document(document).strip(), "")

    def test_mime_parameters_are_ignored(self):
        document = Document(content=_blank_pdf_bytes(), mime_type="Application/PDF; charset=binary")
        self.assertEqual(document.mime_type, PDF_MIME)
        self.assertEqual(document.source_type, "pdf")


class RejectionTests(unittest.TestCase):
    def test_unsupported_mime_type(self):
        with self.assertRaises(UnsupportedFormatError) as ctx:
            decode_document(Document(content=b"plain text", mime_type="text/plain"))
        self.assertEqual(ctx.exception.status_code, 415)

    def test_pdf_mime_with_docx_bytes(self):
        content = _docx_bytes(["Jane Doe"])
        with self.assertRaises(UnsupportedFormatError):
            decode_document(Document(content=content, mime_type=PDF_MIME))

    def test_docx_mime_with_non_word_zip(self):
        content = _zip_bytes({"hello.txt": "hi"})
        with self.assertRaises(UnsupportedFormatError):
            decode_document(Document(content=content, mime_type=DOCX_MIME))

    def test_corrupt_pdf_is_a_decode_error(self):
        with self.assertRaises(DocumentDecodeError) as ctx:
            decode_document(Document(content=b"%PDF-1.4\nthis is not a pdf body", mime_type=PDF_MIME))
        self.assertEqual(ctx.exception.status_code, 422)

    def test_corrupt_docx_is_a_decode_error(self):
        content = _zip_bytes({"word/document.xml": "<broken"})
        with self.assertRaises(DocumentDecodeError):
            decode_document(Document(content=content, mime_type=DOCX_MIME))


if __name__ == "__main__":
    unittest.main()
