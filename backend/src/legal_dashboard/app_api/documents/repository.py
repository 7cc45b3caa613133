"""Document repository for DynamoDB operations."""

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.dynamodb import now_iso, query_all
from legal_dashboard.shared.repository import DynamoDBRepository

from .models import Document

logger = logging.getLogger(__name__)


class DocumentRepository(DynamoDBRepository):
    """Documents table, hash key ``fileId`` and range key ``documentId``."""

    key_attributes = ("fileId", "documentId")

    def __init__(self, table_name: Optional[str] = None, table: Any = None):
        super().__init__(table_name or get_settings().documents_table, table)

    async def create(self, document: Document) -> Document:
        self._put_item(document.to_dict())
        logger.info(f"Created document {document.document_id} ({document.file_name}) in file {document.file_id}")
        return document

    async def get(self, file_id: str, document_id: str) -> Optional[Document]:
        item = self._get_item(self._key(file_id, document_id))
        return Document.from_dict(item) if item else None

    async def list_by_file_id(self, file_id: str) -> List[Document]:
        """List documents for a file number, excluding soft-deleted ones."""
        try:
            items = query_all(
                self._table,
                KeyConditionExpression="fileId = :fileId",
                ExpressionAttributeValues={":fileId": file_id},
            )
        except ClientError as e:
            logger.error(f"Error listing documents for file {file_id}: {e}")
            raise
        return [Document.from_dict(item) for item in items if not item.get("deletedAt")]

    async def find_by_file_name(self, file_id: str, file_name: str) -> Optional[Document]:
        for document in await self.list_by_file_id(file_id):
            if document.file_name == file_name:
                return document
        return None

    async def update(self, file_id: str, document_id: str, updates: Dict[str, Any]) -> Optional[Document]:
        """
        Update document attributes.

        An explicit ``None`` value is written as null, which is how legacy
        inline fields are cleared after migration.
        """
        item = self._update_item(self._key(file_id, document_id), updates)
        return Document.from_dict(item) if item else None

    async def soft_delete(self, file_id: str, document_id: str, deleted_by: str) -> Optional[Document]:
        logger.info(f"Soft deleting document {document_id} in file {file_id}")
        return await self.update(file_id, document_id, {
            "deletedAt": now_iso(),
            "deletedBy": deleted_by,
        })


_repository_instance: Optional[DocumentRepository] = None


def get_document_repository() -> DocumentRepository:
    """Get or create the global DocumentRepository instance."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = DocumentRepository()
    return _repository_instance
