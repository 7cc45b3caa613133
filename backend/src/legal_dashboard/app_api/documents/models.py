"""Document data models."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from legal_dashboard.shared.dynamodb import now_iso


@dataclass
class Document:
    """
    An uploaded file attached to a file number.

    The original lives in the documents bucket at ``s3_key``. Derived
    artifacts (extracted text, full AI analysis, chat history) live in the
    extracted-text bucket and are referenced by their ``*_s3_key`` fields.
    ``extracted_text`` and ``conversation_history`` are legacy inline copies
    that are migrated to S3 the first time they are read.
    """

    file_id: str
    document_id: str
    file_name: str
    client_id: Optional[str] = None
    file_number: Optional[str] = None
    content_type: Optional[str] = None
    size: Optional[int] = None
    s3_key: Optional[str] = None
    latest_version_id: Optional[str] = None
    uploaded_by: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""
    deleted_at: Optional[str] = None
    deleted_by: Optional[str] = None

    # Derived artifacts
    extracted_text_s3_key: Optional[str] = None
    extracted_text_s3_updated_at: Optional[str] = None
    analysis: Optional[str] = None
    analysis_s3_key: Optional[str] = None
    analysis_s3_updated_at: Optional[str] = None
    analyzed_at: Optional[str] = None
    conversation_history_s3_key: Optional[str] = None
    conversation_history_updated_at: Optional[str] = None

    # Legacy inline fields
    extracted_text: Optional[str] = None
    conversation_history: Optional[List[Dict[str, Any]]] = field(default=None)

    @property
    def is_deleted(self) -> bool:
        return bool(self.deleted_at)

    @classmethod
    def new(cls, file_id: str, file_name: str, client_id: str, file_number: str,
            content_type: Optional[str], size: Optional[int], s3_key: str,
            uploaded_by: Optional[str], latest_version_id: Optional[str] = None) -> "Document":
        now = now_iso()
        return cls(
            file_id=file_id,
            document_id=str(uuid.uuid4()),
            file_name=file_name,
            client_id=client_id,
            file_number=file_number,
            content_type=content_type,
            size=size,
            s3_key=s3_key,
            latest_version_id=latest_version_id or None,
            uploaded_by=uploaded_by,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for DynamoDB storage. Unset artifact fields are omitted."""
        data = {
            "fileId": self.file_id,
            "documentId": self.document_id,
            "clientId": self.client_id,
            "fileNumber": self.file_number,
            "fileName": self.file_name,
            "contentType": self.content_type,
            "size": self.size,
            "s3Key": self.s3_key,
            "latestVersionId": self.latest_version_id,
            "uploadedBy": self.uploaded_by,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "deletedAt": self.deleted_at,
            "deletedBy": self.deleted_by,
        }
        optional = {
            "extractedTextS3Key": self.extracted_text_s3_key,
            "extractedTextS3UpdatedAt": self.extracted_text_s3_updated_at,
            "analysis": self.analysis,
            "analysisS3Key": self.analysis_s3_key,
            "analysisS3UpdatedAt": self.analysis_s3_updated_at,
            "analyzedAt": self.analyzed_at,
            "conversationHistoryS3Key": self.conversation_history_s3_key,
            "conversationHistoryUpdatedAt": self.conversation_history_updated_at,
            "extractedText": self.extracted_text,
            "conversationHistory": self.conversation_history,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        """Create from dictionary (DynamoDB item)."""
        return cls(
            file_id=data["fileId"],
            document_id=data["documentId"],
            file_name=data.get("fileName", ""),
            client_id=data.get("clientId"),
            file_number=data.get("fileNumber"),
            content_type=data.get("contentType"),
            size=data.get("size"),
            s3_key=data.get("s3Key"),
            latest_version_id=data.get("latestVersionId"),
            uploaded_by=data.get("uploadedBy"),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
            deleted_at=data.get("deletedAt"),
            deleted_by=data.get("deletedBy"),
            extracted_text_s3_key=data.get("extractedTextS3Key"),
            extracted_text_s3_updated_at=data.get("extractedTextS3UpdatedAt"),
            analysis=data.get("analysis"),
            analysis_s3_key=data.get("analysisS3Key"),
            analysis_s3_updated_at=data.get("analysisS3UpdatedAt"),
            analyzed_at=data.get("analyzedAt"),
            conversation_history_s3_key=data.get("conversationHistoryS3Key"),
            conversation_history_updated_at=data.get("conversationHistoryUpdatedAt"),
            extracted_text=data.get("extractedText"),
            conversation_history=data.get("conversationHistory"),
        )


# =============================================================================
# Request / response models
# =============================================================================

class PresignedUploadRequest(BaseModel):
    """Request body for a presigned upload URL"""
    model_config = ConfigDict(populate_by_name=True)

    file_name: Optional[str] = Field(None, alias="fileName")
    content_type: Optional[str] = Field(None, alias="contentType")
    client_id: Optional[str] = Field(None, alias="clientId")
    file_number: Optional[str] = Field(None, alias="fileNumber")


class PresignedUploadResponse(BaseModel):
    """Presigned PUT URL and the key the upload must land on"""
    model_config = ConfigDict(populate_by_name=True)

    upload_url: str = Field(..., alias="uploadUrl")
    s3_key: str = Field(..., alias="s3Key")
    file_name: str = Field(..., alias="fileName")


class ConfirmUploadRequest(BaseModel):
    """Request body sent after the browser finished a presigned upload"""
    model_config = ConfigDict(populate_by_name=True)

    file_name: Optional[str] = Field(None, alias="fileName")
    content_type: Optional[str] = Field(None, alias="contentType")
    size: Optional[int] = None
    s3_key: Optional[str] = Field(None, alias="s3Key")
    client_id: Optional[str] = Field(None, alias="clientId")
    file_number: Optional[str] = Field(None, alias="fileNumber")


class DocumentVersion(BaseModel):
    """One S3 object version of a document"""
    model_config = ConfigDict(populate_by_name=True)

    version_id: Optional[str] = Field(None, alias="versionId")
    is_latest: bool = Field(False, alias="isLatest")
    last_modified: Optional[str] = Field(None, alias="lastModified")
    size: Optional[int] = None


class DocumentVersionsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    file_name: str = Field(..., alias="fileName")
    versions: List[DocumentVersion] = Field(default_factory=list)


class AnalyzeDocumentResponse(BaseModel):
    """Immediate result of an analyze request (AI enrichment continues in background)"""
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    file_name: str = Field(..., alias="fileName")
    analysis: str
    analyzed_at: str = Field(..., alias="analyzedAt")


class ChatRequest(BaseModel):
    message: Optional[str] = None


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    user_message: str = Field(..., alias="userMessage")
    assistant_message: str = Field(..., alias="assistantMessage")
    conversation_history: List[Dict[str, Any]] = Field(..., alias="conversationHistory")


class ConversationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    conversation_history: List[Dict[str, Any]] = Field(..., alias="conversationHistory")


class AnalysisResponse(BaseModel):
    """Full analysis text for a document"""
    model_config = ConfigDict(populate_by_name=True)

    document_id: str = Field(..., alias="documentId")
    file_name: str = Field(..., alias="fileName")
    analysis: Optional[str] = None
    analyzed_at: Optional[str] = Field(None, alias="analyzedAt")
    complete: bool = Field(False, description="True when the full AI analysis is stored")
