"""S3 key layout for original documents and their derived artifacts.

Everything for a matter lives under ``clients/{clientId}/file-numbers/{fileNumber}/``.
Documents created before clientId/fileNumber were recorded fall back to the
older top-level ``extracted-text/``, ``analysis/`` and ``chat/`` prefixes.
"""

import logging
import os
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")


def sanitize_file_name(file_name: str) -> str:
    """Strip directory components and replace unsafe characters with underscores."""
    base_name = os.path.basename(file_name.replace("\\", "/"))
    return _UNSAFE_CHARS.sub("_", base_name)


def get_file_number_prefix(client_id: str, file_number: str) -> str:
    return f"clients/{client_id}/file-numbers/{file_number}"


def build_document_key(client_id: str, file_number: str, file_name: str) -> str:
    """Key for an uploaded original document."""
    safe_name = sanitize_file_name(file_name)
    return f"{get_file_number_prefix(client_id, file_number)}/docs/{safe_name}"


def build_extracted_text_key(client_id: str, file_number: str, document_id: str) -> str:
    return f"{get_file_number_prefix(client_id, file_number)}/extracted-text/{document_id}.txt.gz"


def build_analysis_key(client_id: str, file_number: str, document_id: str) -> str:
    return f"{get_file_number_prefix(client_id, file_number)}/analysis/{document_id}.txt.gz"


def build_chat_history_key(client_id: str, file_number: str, document_id: str) -> str:
    return f"{get_file_number_prefix(client_id, file_number)}/chat/{document_id}.json.gz"


def _matter_ids(document: Optional[Dict[str, Any]]):
    document = document or {}
    return document.get("clientId"), document.get("fileNumber")


def resolve_extracted_text_key(file_id: str, document_id: str, document: Optional[Dict[str, Any]]) -> str:
    client_id, file_number = _matter_ids(document)
    if client_id and file_number:
        return build_extracted_text_key(client_id, file_number, document_id)
    logger.warning(
        f"Document {document_id} has no clientId/fileNumber - using legacy extracted text path"
    )
    return f"extracted-text/{file_id}/{document_id}.txt.gz"


def resolve_analysis_key(file_id: str, document_id: str, document: Optional[Dict[str, Any]]) -> str:
    client_id, file_number = _matter_ids(document)
    if client_id and file_number:
        return build_analysis_key(client_id, file_number, document_id)
    logger.warning(
        f"Document {document_id} has no clientId/fileNumber - using legacy analysis path"
    )
    return f"analysis/{file_id}/{document_id}.txt.gz"


def resolve_chat_history_key(file_id: str, document_id: str, document: Optional[Dict[str, Any]]) -> str:
    client_id, file_number = _matter_ids(document)
    if client_id and file_number:
        return build_chat_history_key(client_id, file_number, document_id)
    logger.warning(
        f"Document {document_id} has no clientId/fileNumber - using legacy chat path"
    )
    return f"chat/{file_id}/{document_id}.json.gz"
