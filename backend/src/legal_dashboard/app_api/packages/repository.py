"""Package repository for DynamoDB operations."""

import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError

from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.dynamodb import scan_all
from legal_dashboard.shared.repository import DynamoDBRepository

from .models import Package

logger = logging.getLogger(__name__)

# Raised by DynamoDB when a table predates the fileNumberIdIndex GSI
_MISSING_INDEX_ERRORS = ("ValidationException", "ResourceNotFoundException")


class PackageRepository(DynamoDBRepository):
    """Packages table, keyed by ``packageId``."""

    key_attributes = ("packageId",)

    def __init__(self, table_name: Optional[str] = None, table: Any = None):
        super().__init__(table_name or get_settings().packages_table, table)

    async def create(self, package: Package) -> Package:
        self._put_item(package.to_dict())
        logger.info(f"Created package: {package.package_id}")
        return package

    async def get_by_id(self, package_id: str) -> Optional[Package]:
        item = self._get_item(self._key(package_id))
        return Package.from_dict(item) if item else None

    async def list_by_client(self, client_id: str) -> List[Package]:
        items = self._query_index("clientIdIndex", "clientId", client_id)
        return [Package.from_dict(item) for item in items]

    async def list_by_file_number(self, file_number_id: str) -> List[Package]:
        """
        List packages attached to a file number.

        Falls back to a filtered scan when the ``fileNumberIdIndex`` GSI
        does not exist on the table.
        """
        try:
            items = self._query_index("fileNumberIdIndex", "fileNumberId", file_number_id)
        except ClientError as e:
            if e.response["Error"]["Code"] not in _MISSING_INDEX_ERRORS:
                raise
            logger.warning(f"fileNumberIdIndex unavailable on {self.table_name}, scanning instead")
            items = scan_all(
                self._table,
                FilterExpression="fileNumberId = :fileNumberId",
                ExpressionAttributeValues={":fileNumberId": file_number_id},
            )
        return [Package.from_dict(item) for item in items]

    async def update(self, package_id: str, updates: Dict[str, Any]) -> Optional[Package]:
        item = self._update_item(self._key(package_id), updates)
        return Package.from_dict(item) if item else None

    async def delete(self, package_id: str) -> None:
        self._delete_item(self._key(package_id))
        logger.info(f"Deleted package: {package_id}")


_repository_instance: Optional[PackageRepository] = None


def get_package_repository() -> PackageRepository:
    """Get or create the global PackageRepository instance."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = PackageRepository()
    return _repository_instance
