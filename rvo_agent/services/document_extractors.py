"""Text extraction for downloaded documents.

Each extractor takes the raw bytes of one document and returns its text.
Extractors never raise: a corrupt or unsupported buffer yields ``""`` so a
single bad download cannot abort the crawl.
"""

import io
from typing import Callable

import logfire
from docx import Document
from openpyxl import load_workbook
from pypdf import PdfReader

from rvo_agent.models.scraper_models import DocumentType

Extractor = Callable[[bytes], str]


def extract_pdf_text(data: bytes) -> str:
    """Extract text from PDF ``data`` using :mod:`pypdf`."""
    try:
        reader = PdfReader(io.BytesIO(data))
        pages: list[str] = []
        for page in reader.pages:
            text = page.extract_text() or ""
            if text.strip():
                pages.append(text.strip())
    except Exception as e:
        logfire.warning("PDF text extraction failed", error=str(e), size=len(data))
        return ""
    return "\n\n".join(pages)


def extract_docx_text(data: bytes) -> str:
    """Extract paragraph and table text from a Word document."""
    try:
        document = Document(io.BytesIO(data))
        parts = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    parts.append("\t".join(cells))
    except Exception as e:
        logfire.warning("DOCX text extraction failed", error=str(e), size=len(data))
        return ""
    return "\n".join(parts)


def extract_xlsx_text(data: bytes) -> str:
    """Render every sheet of a workbook as tab-separated rows.

    Each sheet is prefixed with ``=== Sheet: <name> ===``.
    """
    try:
        workbook = load_workbook(io.BytesIO(data), read_only=True, data_only=True)
        text = ""
        for sheet in workbook.worksheets:
            rows = []
            for row in sheet.iter_rows(values_only=True):
                values = ["" if value is None else str(value) for value in row]
                if any(values):
                    rows.append("\t".join(values))
            text += f"\n=== Sheet: {sheet.title} ===\n" + "\n".join(rows) + "\n"
        workbook.close()
    except Exception as e:
        logfire.warning("XLSX text extraction failed", error=str(e), size=len(data))
        return ""
    return text


def extract_no_text(data: bytes) -> str:
    """Extractor for formats without a text extractor."""
    return ""


_EXTRACTORS: dict[DocumentType, Extractor] = {
    DocumentType.PDF: extract_pdf_text,
    DocumentType.DOCX: extract_docx_text,
    DocumentType.XLSX: extract_xlsx_text,
}


def get_extractor(document_type: DocumentType) -> Extractor:
    """Return the extractor for *document_type* (no-op for pptx/unknown)."""
    return _EXTRACTORS.get(document_type, extract_no_text)
