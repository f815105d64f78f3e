"""Tests for document text extraction."""

import io

import pytest
from docx import Document
from openpyxl import Workbook

from rvo_agent.models.scraper_models import DocumentType
from rvo_agent.services.document_extractors import (
    extract_docx_text,
    extract_no_text,
    extract_pdf_text,
    extract_xlsx_text,
    get_extractor,
)


def build_pdf(text: str) -> bytes:
    """Single-page PDF with *text* in Helvetica and a correct xref table."""
    stream = f"BT /F1 24 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Contents 4 0 R /Resources << /Font << /F1 5 0 R >> >> >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    out = io.BytesIO()
    out.write(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(out.tell())
        out.write(b"%d 0 obj\n" % number + body + b"\nendobj\n")
    xref_offset = out.tell()
    out.write(b"xref\n0 %d\n" % (len(objects) + 1))
    out.write(b"0000000000 65535 f \n")
    for offset in offsets:
        out.write(b"%010d 00000 n \n" % offset)
    out.write(
        b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n"
        % (len(objects) + 1, xref_offset)
    )
    return out.getvalue()


def build_docx() -> bytes:
    document = Document()
    document.add_paragraph("Aanvraagformulier")
    document.add_paragraph("")
    table = document.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Veld"
    table.cell(0, 1).text = "Waarde"
    table.cell(1, 0).text = "KvK"
    table.cell(1, 1).text = "12345678"
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def build_xlsx() -> bytes:
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = "Begroting"
    sheet.append(["Post", "Bedrag"])
    sheet.append(["Personeel", 1000])
    workbook.create_sheet("Leeg")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


class TestPdfExtraction:
    """Tests for extract_pdf_text."""

    def test_extracts_page_text(self):
        text = extract_pdf_text(build_pdf("KvK-nummer verplicht"))

        assert "KvK-nummer verplicht" in text

    def test_corrupt_pdf_returns_empty(self):
        """Garbage bytes never raise."""
        assert extract_pdf_text(b"not a pdf at all") == ""

    def test_empty_buffer_returns_empty(self):
        assert extract_pdf_text(b"") == ""


class TestDocxExtraction:
    """Tests for extract_docx_text."""

    def test_extracts_paragraphs_and_tables(self):
        text = extract_docx_text(build_docx())

        assert "Aanvraagformulier" in text
        assert "Veld\tWaarde" in text
        assert "KvK\t12345678" in text

    def test_skips_blank_paragraphs(self):
        lines = extract_docx_text(build_docx()).split("\n")

        assert "" not in lines

    def test_corrupt_docx_returns_empty(self):
        assert extract_docx_text(b"PK\x03\x04 broken zip") == ""


class TestXlsxExtraction:
    """Tests for extract_xlsx_text."""

    def test_renders_every_sheet_with_header(self):
        text = extract_xlsx_text(build_xlsx())

        assert "=== Sheet: Begroting ===" in text
        assert "=== Sheet: Leeg ===" in text
        assert "Post\tBedrag" in text
        assert "Personeel\t1000" in text

    def test_corrupt_xlsx_returns_empty(self):
        assert extract_xlsx_text(b"\x00\x01\x02") == ""


class TestGetExtractor:
    """Tests for extractor dispatch."""

    @pytest.mark.parametrize(
        "document_type,expected",
        [
            (DocumentType.PDF, extract_pdf_text),
            (DocumentType.DOCX, extract_docx_text),
            (DocumentType.XLSX, extract_xlsx_text),
            (DocumentType.PPTX, extract_no_text),
            (DocumentType.UNKNOWN, extract_no_text),
        ],
    )
    def test_dispatch(self, document_type, expected):
        assert get_extractor(document_type) is expected

    def test_no_text_extractor_ignores_input(self):
        assert extract_no_text(b"anything") == ""
