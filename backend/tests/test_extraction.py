"""Tests for document text extraction."""

import asyncio
from io import BytesIO
from unittest.mock import MagicMock

import pytest
from docx import Document as DocxDocument

from legal_dashboard.app_api.documents.extraction import (
    DOCX_CONTENT_TYPE,
    TextExtractor,
    is_analysis_supported,
)
from legal_dashboard.shared.errors import (
    ExtractionError,
    ExtractionTimeoutError,
    UnsupportedDocumentError,
)


def make_extractor(textract=None, max_attempts=5):
    return TextExtractor(
        textract_client=textract or MagicMock(),
        documents_bucket="legal-documents",
        poll_interval=0,
        max_attempts=max_attempts,
    )


def make_docx() -> bytes:
    doc = DocxDocument()
    doc.add_paragraph("Medical report for John Doe")
    table = doc.add_table(rows=2, cols=2)
    table.cell(0, 0).text = "Date"
    table.cell(0, 1).text = "Provider"
    table.cell(1, 0).text = "2024-03-01"
    table.cell(1, 1).text = "St. Luke's"
    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


@pytest.mark.parametrize("content_type,supported", [
    ("application/pdf", True),
    (DOCX_CONTENT_TYPE, True),
    ("text/plain; charset=utf-8", True),
    ("application/json", True),
    ("image/png", False),
    (None, False),
])
def test_is_analysis_supported(content_type, supported):
    assert is_analysis_supported(content_type) is supported


class TestDispatch:

    def test_plain_text_is_decoded(self):
        text = asyncio.run(make_extractor().extract(b"Hello\nWorld", "text/plain", "notes.txt", "k"))
        assert text == "Hello\nWorld"

    def test_invalid_utf8_is_replaced(self):
        text = asyncio.run(make_extractor().extract(b"Caf\xe9 accident report", "text/plain", "notes.txt", "k"))
        assert text == "Caf\ufffd accident report"

    def test_extension_used_when_content_type_is_generic(self):
        text = asyncio.run(make_extractor().extract(b"# Title", "application/octet-stream", "README.md", "k"))
        assert text == "# Title"

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedDocumentError, match="Unsupported file type: image/png"):
            asyncio.run(make_extractor().extract(b"\x89PNG", "image/png", "scan.png", "k"))

    def test_docx_paragraphs_and_tables(self):
        text = asyncio.run(make_extractor().extract(make_docx(), DOCX_CONTENT_TYPE, "report.docx", "k"))

        lines = text.split("\n")
        assert "Medical report for John Doe" in lines
        assert "Date\tProvider" in lines
        assert "2024-03-01\tSt. Luke's" in lines

    def test_corrupt_docx(self):
        with pytest.raises(ExtractionError, match="Failed to extract text from Word document"):
            make_extractor().extract_docx(b"not a zip file")


class TestTextract:

    def test_polls_until_succeeded_and_follows_pages(self):
        textract = MagicMock()
        textract.start_document_text_detection.return_value = {"JobId": "job-1"}
        textract.get_document_text_detection.side_effect = [
            {"JobStatus": "IN_PROGRESS"},
            {
                "JobStatus": "SUCCEEDED",
                "NextToken": "page-2",
                "Blocks": [
                    {"BlockType": "PAGE"},
                    {"BlockType": "LINE", "Text": "First line"},
                ],
            },
            {"Blocks": [{"BlockType": "LINE", "Text": "Second line"}, {"BlockType": "WORD", "Text": "Second"}]},
        ]

        text = asyncio.run(make_extractor(textract).extract(b"", "application/pdf", "a.pdf", "docs/a.pdf"))

        assert text == "First line\nSecond line"
        textract.start_document_text_detection.assert_called_once_with(
            DocumentLocation={"S3Object": {"Bucket": "legal-documents", "Name": "docs/a.pdf"}}
        )
        assert textract.get_document_text_detection.call_args_list[-1].kwargs == {
            "JobId": "job-1", "NextToken": "page-2"
        }

    def test_failed_job(self):
        textract = MagicMock()
        textract.start_document_text_detection.return_value = {"JobId": "job-1"}
        textract.get_document_text_detection.return_value = {"JobStatus": "FAILED", "StatusMessage": "bad pdf"}

        with pytest.raises(ExtractionError, match="bad pdf"):
            asyncio.run(make_extractor(textract).extract_pdf("docs/a.pdf"))

    def test_timeout_after_max_attempts(self):
        textract = MagicMock()
        textract.start_document_text_detection.return_value = {"JobId": "job-1"}
        textract.get_document_text_detection.return_value = {"JobStatus": "IN_PROGRESS"}

        with pytest.raises(ExtractionTimeoutError, match="timeout"):
            asyncio.run(make_extractor(textract, max_attempts=3).extract_pdf("docs/a.pdf"))
        assert textract.get_document_text_detection.call_count == 3

    def test_image_only_pdf(self):
        textract = MagicMock()
        textract.start_document_text_detection.return_value = {"JobId": "job-1"}
        textract.get_document_text_detection.return_value = {"JobStatus": "SUCCEEDED", "Blocks": []}

        with pytest.raises(ExtractionError, match="No text found in PDF"):
            asyncio.run(make_extractor(textract).extract_pdf("docs/a.pdf"))

    def test_missing_key(self):
        with pytest.raises(ExtractionError, match="Failed to extract text from PDF"):
            asyncio.run(make_extractor().extract_pdf(None))
