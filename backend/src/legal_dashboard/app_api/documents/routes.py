"""Documents API routes

Document upload, versioning, text analysis and chat for a file number.
All routes are nested under ``/file-numbers/{file_id}/documents``.
"""

import logging
from typing import Optional

from fastapi import (
    APIRouter,
    BackgroundTasks,
    Depends,
    File,
    Form,
    HTTPException,
    UploadFile,
    status,
)
from fastapi.responses import JSONResponse

from legal_dashboard.shared.auth import User, get_current_user
from legal_dashboard.shared.errors import UnsupportedDocumentError
from ..storage import build_document_key, sanitize_file_name
from .extraction import is_analysis_supported
from .models import (
    AnalysisResponse,
    AnalyzeDocumentResponse,
    ChatRequest,
    ChatResponse,
    ConfirmUploadRequest,
    ConversationResponse,
    Document,
    DocumentVersionsResponse,
    PresignedUploadRequest,
    PresignedUploadResponse,
)
from .repository import DocumentRepository, get_document_repository
from .services.analysis_service import DocumentAnalysisService, get_analysis_service
from .services.storage_service import DocumentStorageService, get_storage_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/file-numbers/{file_id}/documents", tags=["documents"])


async def get_active_document(repository: DocumentRepository, file_id: str, document_id: str) -> Document:
    """Fetch a document, treating soft-deleted documents as missing."""
    document = await repository.get(file_id, document_id)
    if not document or document.is_deleted:
        raise HTTPException(status_code=404, detail="Document not found")
    return document


@router.get("")
async def list_documents(
    file_id: str,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
):
    """List the file number's documents (soft-deleted documents excluded)."""
    logger.info(f"GET /file-numbers/{file_id}/documents - User: {current_user.user_id}")

    try:
        documents = await repository.list_by_file_id(file_id)
        return [d.to_dict() for d in documents]
    except Exception as e:
        logger.error(f"Error listing documents for file {file_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve documents")


@router.post("")
async def upload_document(
    file_id: str,
    file: Optional[UploadFile] = File(None),
    client_id: Optional[str] = Form(None, alias="clientId"),
    file_number: Optional[str] = Form(None, alias="fileNumber"),
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    storage: DocumentStorageService = Depends(get_storage_service),
):
    """
    Upload a document through the API (multipart form).

    Re-uploading a file with the same name stores a new S3 version and
    updates the existing document record.

    Returns:
        200 with the updated document, or 201 with a new one

    Raises:
        HTTPException: 400 if the file, clientId or fileNumber is missing
    """
    logger.info(f"POST /file-numbers/{file_id}/documents - User: {current_user.user_id}")

    if file is None:
        raise HTTPException(status_code=400, detail="File is required")
    if not client_id or not file_number:
        raise HTTPException(status_code=400, detail="clientId and fileNumber are required")

    try:
        body = await file.read()
        safe_name = sanitize_file_name(file.filename or "upload")
        s3_key = build_document_key(client_id, file_number, safe_name)
        version_id = storage.put_document(s3_key, body, file.content_type, client_id, file_number)

        existing = await repository.find_by_file_name(file_id, safe_name)
        if existing:
            updated = await repository.update(file_id, existing.document_id, {
                "contentType": file.content_type,
                "size": len(body),
                "latestVersionId": version_id or existing.latest_version_id,
                "uploadedBy": current_user.user_id,
            })
            return JSONResponse(status_code=status.HTTP_200_OK, content=updated.to_dict())

        document = Document.new(
            file_id=file_id,
            file_name=safe_name,
            client_id=client_id,
            file_number=file_number,
            content_type=file.content_type,
            size=len(body),
            s3_key=s3_key,
            uploaded_by=current_user.user_id,
            latest_version_id=version_id,
        )
        await repository.create(document)
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=document.to_dict())
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error uploading document to file {file_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to upload document")


@router.post("/presigned-url", response_model=PresignedUploadResponse)
async def get_presigned_upload_url(
    file_id: str,
    request: PresignedUploadRequest,
    current_user: User = Depends(get_current_user),
    storage: DocumentStorageService = Depends(get_storage_service),
):
    """
    Generate a presigned URL for uploading directly to S3 (valid 5 minutes).

    The client uploads with PUT, then calls ``/confirm``.
    """
    logger.info(f"POST /file-numbers/{file_id}/documents/presigned-url - User: {current_user.user_id}")

    if not request.file_name or not request.content_type or not request.client_id or not request.file_number:
        raise HTTPException(
            status_code=400,
            detail="fileName, contentType, clientId, and fileNumber are required"
        )

    try:
        safe_name = sanitize_file_name(request.file_name)
        s3_key = build_document_key(request.client_id, request.file_number, safe_name)
        upload_url = storage.generate_upload_url(s3_key, request.content_type)
        return PresignedUploadResponse(upload_url=upload_url, s3_key=s3_key, file_name=safe_name)
    except Exception as e:
        logger.error(f"Error generating upload URL: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate upload URL")


@router.post("/confirm")
async def confirm_upload(
    file_id: str,
    request: ConfirmUploadRequest,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    storage: DocumentStorageService = Depends(get_storage_service),
):
    """
    Record a document after a presigned upload finished.

    Returns:
        200 with the updated document when the name already exists, else 201
    """
    logger.info(f"POST /file-numbers/{file_id}/documents/confirm - User: {current_user.user_id}")

    if not all([request.file_name, request.content_type, request.size, request.s3_key,
                request.client_id, request.file_number]):
        raise HTTPException(status_code=400, detail="All fields are required")

    try:
        existing = await repository.find_by_file_name(file_id, request.file_name)
        if existing:
            version_id = storage.get_version_id(request.s3_key)
            updated = await repository.update(file_id, existing.document_id, {
                "contentType": request.content_type,
                "size": request.size,
                "latestVersionId": version_id or existing.latest_version_id,
                "uploadedBy": current_user.user_id,
            })
            return JSONResponse(status_code=status.HTTP_200_OK, content=updated.to_dict())

        document = Document.new(
            file_id=file_id,
            file_name=request.file_name,
            client_id=request.client_id,
            file_number=request.file_number,
            content_type=request.content_type,
            size=request.size,
            s3_key=request.s3_key,
            uploaded_by=current_user.user_id,
        )
        await repository.create(document)

        version_id = storage.get_version_id(request.s3_key)
        if version_id:
            await repository.update(file_id, document.document_id, {"latestVersionId": version_id})
            document.latest_version_id = version_id

        return JSONResponse(status_code=status.HTTP_201_CREATED, content=document.to_dict())
    except Exception as e:
        logger.error(f"Error confirming upload for file {file_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to confirm upload")


@router.get("/{document_id}/versions", response_model=DocumentVersionsResponse)
async def list_document_versions(
    file_id: str,
    document_id: str,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    storage: DocumentStorageService = Depends(get_storage_service),
):
    logger.info(f"GET /file-numbers/{file_id}/documents/{document_id}/versions - User: {current_user.user_id}")

    try:
        document = await get_active_document(repository, file_id, document_id)
        versions = storage.list_versions(document.s3_key)
        return DocumentVersionsResponse.model_validate({
            "documentId": document.document_id,
            "fileName": document.file_name,
            "versions": versions,
        })
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error listing versions for document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to retrieve document versions")


@router.get("/{document_id}/download-url")
async def get_download_url(
    file_id: str,
    document_id: str,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    storage: DocumentStorageService = Depends(get_storage_service),
):
    """Presigned GET URL for the original (valid 30 minutes)."""
    logger.info(f"GET /file-numbers/{file_id}/documents/{document_id}/download-url - User: {current_user.user_id}")

    try:
        document = await get_active_document(repository, file_id, document_id)
        return {"url": storage.generate_download_url(document.s3_key)}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error generating download URL for document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to generate document URL")


@router.delete("/{document_id}")
async def delete_document(
    file_id: str,
    document_id: str,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
):
    """Soft delete: the record and every S3 version are kept."""
    logger.info(f"DELETE /file-numbers/{file_id}/documents/{document_id} - User: {current_user.user_id}")

    try:
        await get_active_document(repository, file_id, document_id)
        updated = await repository.soft_delete(file_id, document_id, current_user.user_id)
        if not updated:
            raise HTTPException(status_code=404, detail="Document not found")
        return updated.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to delete document")


@router.post("/{document_id}/analyze", response_model=AnalyzeDocumentResponse)
async def analyze_document(
    file_id: str,
    document_id: str,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    service: DocumentAnalysisService = Depends(get_analysis_service),
):
    """
    Extract the document's text and return a preview immediately.

    When the Bedrock agent is configured, a full AI analysis runs in the
    background and replaces the preview when it completes.

    Raises:
        HTTPException:
            - 400 if the content type cannot be analyzed
            - 404 if the document does not exist
            - 500 if the original cannot be read or extraction fails
    """
    logger.info(f"POST /file-numbers/{file_id}/documents/{document_id}/analyze - User: {current_user.user_id}")

    try:
        document = await get_active_document(repository, file_id, document_id)

        if not is_analysis_supported(document.content_type):
            raise HTTPException(status_code=400, detail={
                "error": "Unsupported document type",
                "message": "Only PDF, Word (.docx), and text files can be analyzed. Images require OCR processing.",
            })

        try:
            text = await service.extract_original(document)
        except Exception as e:
            logger.error(f"Error retrieving or parsing document {document_id}: {e}", exc_info=True)
            status_code = 400 if isinstance(e, UnsupportedDocumentError) else 500
            raise HTTPException(status_code=status_code, detail={
                "error": "Failed to retrieve document content",
                "details": str(e),
            })

        updated = await service.record_extraction(file_id, document, text)

        if service.should_run_background_analysis(text):
            background_tasks.add_task(service.run_background_analysis, file_id, document, text)

        return AnalyzeDocumentResponse(
            document_id=updated.document_id,
            file_name=updated.file_name,
            analysis=updated.analysis or "",
            analyzed_at=updated.analyzed_at or "",
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error analyzing document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": "Failed to analyze document", "details": str(e)})


@router.get("/{document_id}/analysis", response_model=AnalysisResponse)
async def get_document_analysis(
    file_id: str,
    document_id: str,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    service: DocumentAnalysisService = Depends(get_analysis_service),
):
    """Full AI analysis from S3, or the stored preview while it is still running."""
    logger.info(f"GET /file-numbers/{file_id}/documents/{document_id}/analysis - User: {current_user.user_id}")

    try:
        document = await get_active_document(repository, file_id, document_id)
        analysis, complete = await service.get_analysis(document)
        return AnalysisResponse(
            document_id=document.document_id,
            file_name=document.file_name,
            analysis=analysis,
            analyzed_at=document.analyzed_at,
            complete=complete,
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error loading analysis for document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load document analysis")


@router.get("/{document_id}/conversation", response_model=ConversationResponse)
async def get_conversation_history(
    file_id: str,
    document_id: str,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    service: DocumentAnalysisService = Depends(get_analysis_service),
):
    logger.info(f"GET /file-numbers/{file_id}/documents/{document_id}/conversation - User: {current_user.user_id}")

    try:
        document = await get_active_document(repository, file_id, document_id)
        history = await service.load_conversation_history(file_id, document)
        return ConversationResponse(document_id=document_id, conversation_history=history)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error loading conversation for document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to load conversation history")


@router.post("/{document_id}/chat", response_model=ChatResponse)
async def chat_about_document(
    file_id: str,
    document_id: str,
    request: ChatRequest,
    current_user: User = Depends(get_current_user),
    repository: DocumentRepository = Depends(get_document_repository),
    service: DocumentAnalysisService = Depends(get_analysis_service),
):
    """
    Ask the agent a question about one document.

    The full document text, the legal matter and the prior conversation
    are sent with every question.

    Raises:
        HTTPException:
            - 400 if the message is empty or the text cannot be extracted
            - 404 if the document does not exist
            - 503 if the Bedrock agent is not configured
    """
    logger.info(f"POST /file-numbers/{file_id}/documents/{document_id}/chat - User: {current_user.user_id}")

    if not request.message or not request.message.strip():
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    try:
        document = await get_active_document(repository, file_id, document_id)

        try:
            text = await service.ensure_extracted_text(file_id, document)
        except Exception as e:
            logger.error(f"Error loading/extracting text for chat on {document_id}: {e}", exc_info=True)
            raise HTTPException(status_code=400, detail={
                "error": "Cannot extract document text",
                "message": "Unable to extract text from document for chat.",
            })

        if not service.agent.is_configured:
            raise HTTPException(status_code=503, detail={
                "error": "AI chat not available",
                "message": "Bedrock agent not configured",
            })

        return await service.chat(file_id, document, request.message, text)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error chatting about document {document_id}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail={"error": "Failed to chat about document", "details": str(e)})
