"""Client repository for DynamoDB operations."""

import logging
from typing import Any, Dict, List, Optional

from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.repository import DynamoDBRepository

from .models import Client

logger = logging.getLogger(__name__)


class ClientRepository(DynamoDBRepository):
    """Clients table, keyed by ``clientId`` with a ``userIdIndex`` GSI."""

    key_attributes = ("clientId",)

    def __init__(self, table_name: Optional[str] = None, table: Any = None):
        super().__init__(table_name or get_settings().clients_table, table)

    async def create(self, client: Client) -> Client:
        self._put_item(client.to_dict())
        logger.info(f"Created client: {client.client_id}")
        return client

    async def get_by_id(self, client_id: str) -> Optional[Client]:
        item = self._get_item(self._key(client_id))
        return Client.from_dict(item) if item else None

    async def list_by_user(self, user_id: str) -> List[Client]:
        items = self._query_index("userIdIndex", "userId", user_id)
        return [Client.from_dict(item) for item in items]

    async def update(self, client_id: str, updates: Dict[str, Any]) -> Optional[Client]:
        item = self._update_item(self._key(client_id), updates)
        return Client.from_dict(item) if item else None

    async def delete(self, client_id: str) -> None:
        self._delete_item(self._key(client_id))
        logger.info(f"Deleted client: {client_id}")


_repository_instance: Optional[ClientRepository] = None


def get_client_repository() -> ClientRepository:
    """Get or create the global ClientRepository instance."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = ClientRepository()
    return _repository_instance
