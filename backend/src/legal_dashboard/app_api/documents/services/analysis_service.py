"""Document text, AI analysis and chat.

Derived artifacts are stored gzip-compressed in S3 so large documents never
push a DynamoDB item past its size limit. Older documents still carry
``extractedText`` / ``conversationHistory`` inline; those are moved to S3
the first time they are read.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from legal_dashboard.shared.config import (
    ANALYSIS_PREVIEW_LENGTH,
    MAX_BACKGROUND_ANALYSIS_CHARS,
)
from legal_dashboard.shared.dynamodb import now_iso
from ...agent.service import BedrockAgentService, epoch_millis, get_agent_service
from ...file_numbers.repository import FileNumberRepository, get_file_number_repository
from ...storage import (
    TextStore,
    resolve_analysis_key,
    resolve_chat_history_key,
    resolve_extracted_text_key,
)
from ..extraction import TextExtractor
from ..models import Document
from ..repository import DocumentRepository, get_document_repository
from .storage_service import DocumentStorageService, get_storage_service

logger = logging.getLogger(__name__)


def make_preview(text: str, limit: int = ANALYSIS_PREVIEW_LENGTH) -> str:
    """First ``limit`` characters, with an ellipsis when truncated."""
    if len(text) > limit:
        return f"{text[:limit]}…"
    return text


def build_analysis_prompt(file_name: str, text: str, legal_context: Optional[str]) -> str:
    query = "Please analyze the following document"
    if legal_context:
        query += f" in the context of this legal matter: {legal_context}"
    query += f"\n\nDocument Name: {file_name}\n\nDocument Content:\n{text}"
    return query


def build_chat_prompt(
    file_name: str,
    text: str,
    message: str,
    history: List[Dict[str, Any]],
    legal_context: Optional[str],
) -> str:
    """Reviewer preamble, prior turns, the full document, then the new question."""
    query = "You are assisting a legal professional review a document. "
    query += "You have access to the full document text below. "
    if legal_context:
        query += f"This is for the following legal matter: {legal_context}. "

    history_text = "\n".join(
        f"{'User' if msg.get('role') == 'user' else 'Assistant'}: {msg.get('content', '')}"
        for msg in history
    )
    if history_text:
        query += f"\n\nPrevious conversation:\n{history_text}\n\n"

    query += f"\n\nDocument Name: {file_name}\n"
    query += f"Document Content:\n{text}\n\n"
    query += f"User's current question: {message}"
    return query


class DocumentAnalysisService:
    """Extraction, S3 artifact bookkeeping and agent calls for one document at a time."""

    def __init__(
        self,
        documents: DocumentRepository,
        file_numbers: FileNumberRepository,
        storage: DocumentStorageService,
        text_store: TextStore,
        extractor: TextExtractor,
        agent: BedrockAgentService,
    ):
        self.documents = documents
        self.file_numbers = file_numbers
        self.storage = storage
        self.text_store = text_store
        self.extractor = extractor
        self.agent = agent

    async def get_legal_context(self, file_id: str) -> Optional[str]:
        """Description of the file number, used to frame agent prompts."""
        file_number = await self.file_numbers.get_by_id(file_id)
        return file_number.description if file_number else None

    async def extract_original(self, document: Document) -> str:
        """Download the original from S3 and extract its text."""
        body = self.storage.get_document(document.s3_key)
        return await self.extractor.extract(body, document.content_type, document.file_name, document.s3_key)

    async def _store_extracted_text(self, file_id: str, document: Document, text: str) -> str:
        key = resolve_extracted_text_key(file_id, document.document_id, document.to_dict())
        self.text_store.put_text(key, text)
        await self.documents.update(file_id, document.document_id, {
            "extractedTextS3Key": key,
            "extractedTextS3UpdatedAt": now_iso(),
            "extractedText": None,
        })
        document.extracted_text_s3_key = key
        document.extracted_text = None
        return key

    async def ensure_extracted_text(self, file_id: str, document: Document) -> str:
        """
        Return the document's full text, creating the S3 copy if needed.

        Order: existing S3 artifact, then legacy inline text (migrated to
        S3), then a fresh extraction of the original.
        """
        if document.extracted_text_s3_key:
            return self.text_store.get_text(document.extracted_text_s3_key)

        if document.extracted_text and document.extracted_text.strip():
            logger.warning(f"Migrating inline extracted text for document {document.document_id} to S3")
            text = document.extracted_text
            await self._store_extracted_text(file_id, document, text)
            return text

        text = await self.extract_original(document)
        await self._store_extracted_text(file_id, document, text)
        return text

    async def load_conversation_history(self, file_id: str, document: Document) -> List[Dict[str, Any]]:
        if document.conversation_history_s3_key:
            history = self.text_store.get_json(document.conversation_history_s3_key)
            return history if isinstance(history, list) else []

        if document.conversation_history:
            logger.warning(f"Migrating inline conversation history for document {document.document_id} to S3")
            history = list(document.conversation_history)
            await self.save_conversation_history(file_id, document, history)
            return history

        return []

    async def save_conversation_history(self, file_id: str, document: Document,
                                        history: List[Dict[str, Any]]) -> str:
        key = document.conversation_history_s3_key or resolve_chat_history_key(
            file_id, document.document_id, document.to_dict()
        )
        self.text_store.put_json(key, history)
        await self.documents.update(file_id, document.document_id, {
            "conversationHistoryS3Key": key,
            "conversationHistoryUpdatedAt": now_iso(),
            "conversationHistory": None,
        })
        document.conversation_history_s3_key = key
        document.conversation_history = None
        return key

    async def record_extraction(self, file_id: str, document: Document, text: str) -> Document:
        """
        Store freshly extracted text and a preview as the interim analysis.

        The preview stands in until the background agent analysis replaces it.
        """
        key = resolve_extracted_text_key(file_id, document.document_id, document.to_dict())
        self.text_store.put_text(key, text)

        now = now_iso()
        updated = await self.documents.update(file_id, document.document_id, {
            "extractedText": None,
            "extractedTextS3Key": key,
            "extractedTextS3UpdatedAt": now,
            "analysis": make_preview(text),
            "analysisS3Key": None,
            "analyzedAt": now,
        })
        return updated or document

    def should_run_background_analysis(self, text: str) -> bool:
        return self.agent.is_configured and len(text) < MAX_BACKGROUND_ANALYSIS_CHARS

    async def run_background_analysis(self, file_id: str, document: Document, text: str) -> None:
        """Ask the agent for a full analysis and store it. Failures are only logged."""
        try:
            legal_context = await self.get_legal_context(file_id)
            prompt = build_analysis_prompt(document.file_name, text, legal_context)
            analysis = await self.agent.invoke(
                prompt, session_id=f"doc-analysis-{epoch_millis()}", parse=False
            )

            key = resolve_analysis_key(file_id, document.document_id, document.to_dict())
            self.text_store.put_text(key, analysis)

            now = now_iso()
            await self.documents.update(file_id, document.document_id, {
                "analysis": make_preview(analysis),
                "analysisS3Key": key,
                "analysisS3UpdatedAt": now,
                "analyzedAt": now,
            })
            logger.info(f"Background analysis completed for document {document.document_id}")
        except Exception as e:
            logger.error(f"Background analysis failed for document {document.document_id}: {e}", exc_info=True)

    async def get_analysis(self, document: Document) -> Tuple[Optional[str], bool]:
        """
        Full analysis text when the agent has produced one, else the preview.

        Returns:
            (analysis text, whether it is the complete agent analysis)
        """
        if document.analysis_s3_key:
            return self.text_store.get_text(document.analysis_s3_key), True
        return document.analysis, False

    async def chat(self, file_id: str, document: Document, message: str, text: str) -> Dict[str, Any]:
        """
        Answer a question about the document and append the turn to its history.

        ``text`` is the document's full extracted text.
        """
        legal_context = await self.get_legal_context(file_id)
        history = await self.load_conversation_history(file_id, document)

        prompt = build_chat_prompt(document.file_name, text, message, history, legal_context)
        answer = await self.agent.invoke(
            prompt, session_id=f"doc-chat-{file_id}-{document.document_id}", parse=False
        )

        updated_history = history + [
            {"role": "user", "content": message, "timestamp": now_iso()},
            {"role": "assistant", "content": answer, "timestamp": now_iso()},
        ]
        await self.save_conversation_history(file_id, document, updated_history)

        return {
            "documentId": document.document_id,
            "userMessage": message,
            "assistantMessage": answer,
            "conversationHistory": updated_history,
        }


_service_instance: Optional[DocumentAnalysisService] = None


def get_analysis_service() -> DocumentAnalysisService:
    """Get or create the global DocumentAnalysisService instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DocumentAnalysisService(
            documents=get_document_repository(),
            file_numbers=get_file_number_repository(),
            storage=get_storage_service(),
            text_store=TextStore(),
            extractor=TextExtractor(),
            agent=get_agent_service(),
        )
    return _service_instance
