"""Workflow repository for DynamoDB operations."""

import logging
from typing import Any, Dict, List, Optional

from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.repository import DynamoDBRepository

from .models import Workflow

logger = logging.getLogger(__name__)


class WorkflowRepository(DynamoDBRepository):
    """Workflows table, keyed by ``workflowId`` with a ``packageIdIndex`` GSI."""

    key_attributes = ("workflowId",)

    def __init__(self, table_name: Optional[str] = None, table: Any = None):
        super().__init__(table_name or get_settings().workflows_table, table)

    async def create(self, workflow: Workflow) -> Workflow:
        self._put_item(workflow.to_dict())
        logger.info(f"Created workflow: {workflow.workflow_id}")
        return workflow

    async def get_by_id(self, workflow_id: str) -> Optional[Workflow]:
        item = self._get_item(self._key(workflow_id))
        return Workflow.from_dict(item) if item else None

    async def list_by_package(self, package_id: str) -> List[Workflow]:
        items = self._query_index("packageIdIndex", "packageId", package_id)
        return [Workflow.from_dict(item) for item in items]

    async def update(self, workflow_id: str, updates: Dict[str, Any]) -> Optional[Workflow]:
        item = self._update_item(self._key(workflow_id), updates)
        return Workflow.from_dict(item) if item else None

    async def delete(self, workflow_id: str) -> None:
        self._delete_item(self._key(workflow_id))
        logger.info(f"Deleted workflow: {workflow_id}")


_repository_instance: Optional[WorkflowRepository] = None


def get_workflow_repository() -> WorkflowRepository:
    """Get or create the global WorkflowRepository instance."""
    global _repository_instance
    if _repository_instance is None:
        _repository_instance = WorkflowRepository()
    return _repository_instance
