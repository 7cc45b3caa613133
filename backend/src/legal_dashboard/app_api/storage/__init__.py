"""Storage utilities for S3-backed document artifacts"""

from .paths import (
    sanitize_file_name,
    build_document_key,
    resolve_extracted_text_key,
    resolve_analysis_key,
    resolve_chat_history_key,
)
from .text_store import TextStore

__all__ = [
    "sanitize_file_name",
    "build_document_key",
    "resolve_extracted_text_key",
    "resolve_analysis_key",
    "resolve_chat_history_key",
    "TextStore",
]
