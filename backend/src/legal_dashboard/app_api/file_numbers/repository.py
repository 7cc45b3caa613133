"""File number repository for DynamoDB operations."""

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.dynamodb import scan_all
from legal_dashboard.shared.repository import DynamoDBRepository

from .models import FileNumber

logger = logging.getLogger(__name__)


class FileNumberRepository(DynamoDBRepository):
    """File numbers table, keyed by ``fileId`` with a ``packageIdIndex`` GSI."""

    key_attributes = ("fileId",)

    def __init__(self, table_name: Optional[str] = None, table: Any = None):
        super().__init__(table_name or get_settings().file_numbers_table, table)

    async def create(self, file_number: FileNumber) -> FileNumber:
        self._put_item(file_number.to_dict())
        logger.info(f"Created file number: {file_number.file_id} ({file_number.file_number})")
        return file_number

    async def get_by_id(self, file_id: str) -> Optional[FileNumber]:
        item = self._get_item(self._key(file_id))
        return FileNumber.from_dict(item) if item else None

    async def list_by_client(self, client_id: str) -> List[FileNumber]:
        # No clientId GSI on this table
        try:
            items = scan_all(
                self._table,
                FilterExpression="clientId = :clientId",
                ExpressionAttributeValues={":clientId": client_id},
            )
        except ClientError as e:
            logger.error(f"Error scanning file numbers for client {client_id}: {e}")
            raise
        return [FileNumber.from_dict(item) for item in items]

    async def list_by_package(self, package_id: str) -> List[FileNumber]:
        items = self._query_index("packageIdIndex", "packageId", package_id)
        return [FileNumber.from_dict(item) for item in items]

    async def update(self, file_id: str, updates: Dict[str, Any]) -> Optional[FileNumber]:
        item = self._update_item(self._key(file_id), updates)
        return FileNumber.from_dict(item) if item else None

    async def delete(self, file_id: str) -> None:
        self._delete_item(self._key(file_id))
        logger.info(f"Deleted file number: {file_id}")


_repository_instance: Optional[FileNumberRepository] = None


def get_file_number_repository() -> FileNumberRepository:
    """Get or create the global FileNumberRepository instance."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = FileNumberRepository()
    return _repository_instance
