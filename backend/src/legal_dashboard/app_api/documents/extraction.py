"""Text extraction for uploaded documents.

PDFs go through an asynchronous Textract text-detection job on the object
already stored in S3. Word documents are read with python-docx, and plain
text formats are decoded as UTF-8.
"""

import asyncio
import logging
from io import BytesIO
from typing import Any, List, Optional

from docx import Document as DocxDocument

from legal_dashboard.shared.aws_clients import get_textract_client
from legal_dashboard.shared.config import (
    TEXTRACT_MAX_POLL_ATTEMPTS,
    TEXTRACT_POLL_INTERVAL_SECONDS,
    get_settings,
)
from legal_dashboard.shared.errors import (
    ExtractionError,
    ExtractionTimeoutError,
    UnsupportedDocumentError,
)

logger = logging.getLogger(__name__)

DOCX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

SUPPORTED_CONTENT_TYPES = (
    "application/pdf",
    DOCX_CONTENT_TYPE,
    "text/plain",
    "text/markdown",
    "application/json",
    "application/xml",
    "text/xml",
)

_TEXT_EXTENSIONS = (".txt", ".md", ".json", ".xml")


def is_analysis_supported(content_type: Optional[str]) -> bool:
    """True when the content type contains the subtype of a supported type."""
    if not content_type:
        return False
    lowered = content_type.lower()
    return any(supported.split("/", 1)[1] in lowered for supported in SUPPORTED_CONTENT_TYPES)


class TextExtractor:
    """Dispatches extraction on content type, falling back to the file extension."""

    def __init__(
        self,
        textract_client: Any = None,
        documents_bucket: Optional[str] = None,
        poll_interval: float = TEXTRACT_POLL_INTERVAL_SECONDS,
        max_attempts: int = TEXTRACT_MAX_POLL_ATTEMPTS,
    ):
        self._textract = textract_client or get_textract_client()
        self.documents_bucket = documents_bucket or get_settings().documents_bucket
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts

    async def extract(self, body: bytes, content_type: Optional[str], file_name: str, s3_key: Optional[str]) -> str:
        """
        Extract plain text from a document.

        Args:
            body: Raw bytes of the original (unused for PDFs, which Textract reads from S3)
            content_type: MIME type recorded at upload
            file_name: Original file name, used when the content type is vague
            s3_key: Key of the original in the documents bucket

        Raises:
            UnsupportedDocumentError: No extraction strategy for this type
            ExtractionError: The strategy failed
        """
        content_type = (content_type or "").lower()
        name = (file_name or "").lower()

        if "pdf" in content_type or name.endswith(".pdf"):
            return await self.extract_pdf(s3_key)

        if "wordprocessingml" in content_type or name.endswith(".docx"):
            return self.extract_docx(body)

        if (
            "text" in content_type
            or "plain" in content_type
            or content_type in ("application/json", "application/xml")
            or name.endswith(_TEXT_EXTENSIONS)
        ):
            return body.decode("utf-8", errors="replace")

        raise UnsupportedDocumentError(
            f"Unsupported file type: {content_type or 'unknown'}. "
            "Supported types: PDF, Word (.docx), and text files."
        )

    def extract_docx(self, body: bytes) -> str:
        try:
            doc = DocxDocument(BytesIO(body))
            parts: List[str] = [p.text for p in doc.paragraphs]

            for table in doc.tables:
                for row in table.rows:
                    line = "\t".join(cell.text.strip() for cell in row.cells)
                    if line.strip():
                        parts.append(line)

            return "\n".join(parts)
        except Exception as e:
            raise ExtractionError(f"Failed to extract text from Word document: {e}") from e

    async def extract_pdf(self, s3_key: Optional[str]) -> str:
        try:
            if not s3_key:
                raise ExtractionError("Document has no S3 key")
            return await self._run_text_detection(s3_key)
        except ExtractionTimeoutError as e:
            raise ExtractionTimeoutError(f"Failed to extract text from PDF: {e}") from e
        except Exception as e:
            raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

    async def _run_text_detection(self, s3_key: str) -> str:
        response = self._textract.start_document_text_detection(
            DocumentLocation={"S3Object": {"Bucket": self.documents_bucket, "Name": s3_key}}
        )
        job_id = response["JobId"]
        logger.info(f"Started Textract job {job_id} for s3://{self.documents_bucket}/{s3_key}")

        result = None
        job_status = "IN_PROGRESS"
        attempts = 0
        while job_status == "IN_PROGRESS" and attempts < self.max_attempts:
            await asyncio.sleep(self.poll_interval)
            result = self._textract.get_document_text_detection(JobId=job_id)
            job_status = result["JobStatus"]
            attempts += 1

        if job_status == "FAILED":
            raise ExtractionError(f"Textract job failed: {result.get('StatusMessage', 'Unknown error')}")

        if job_status == "IN_PROGRESS":
            logger.warning(f"Textract job {job_id} still running after {attempts} attempts")
            raise ExtractionTimeoutError(
                "Document analysis timeout - extraction is taking too long. Please try again."
            )

        blocks = list(result.get("Blocks", []))
        next_token = result.get("NextToken")
        while next_token:
            page = self._textract.get_document_text_detection(JobId=job_id, NextToken=next_token)
            blocks.extend(page.get("Blocks", []))
            next_token = page.get("NextToken")

        if not blocks:
            raise ExtractionError(
                "No text found in PDF. The document may be an image-only scan without text layer."
            )

        lines = [block.get("Text", "") for block in blocks if block.get("BlockType") == "LINE"]
        logger.info(f"Textract job {job_id} returned {len(lines)} lines")
        return "\n".join(lines)
