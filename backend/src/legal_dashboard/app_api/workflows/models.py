"""Workflow data models."""

import uuid
from dataclasses import dataclass, field
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from legal_dashboard.shared.dynamodb import now_iso


@dataclass
class Workflow:
    """An ordered list of steps tracked against a package."""

    workflow_id: str
    package_id: str
    name: str
    description: Optional[str] = None
    status: str = "draft"
    steps: List[Any] = field(default_factory=list)
    current_step: int = 0
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, package_id: str, name: str, description: Optional[str] = None,
            status: Optional[str] = None, steps: Optional[List[Any]] = None,
            current_step: Optional[int] = None) -> "Workflow":
        now = now_iso()
        return cls(
            workflow_id=str(uuid.uuid4()),
            package_id=package_id,
            name=name,
            description=description or None,
            status=status or "draft",
            steps=steps or [],
            current_step=current_step or 0,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for DynamoDB storage."""
        return {
            "workflowId": self.workflow_id,
            "packageId": self.package_id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "steps": self.steps,
            "currentStep": self.current_step,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Workflow":
        """Create from dictionary (DynamoDB item)."""
        return cls(
            workflow_id=data["workflowId"],
            package_id=data.get("packageId", ""),
            name=data.get("name", ""),
            description=data.get("description"),
            status=data.get("status", "draft"),
            steps=data.get("steps") or [],
            current_step=data.get("currentStep", 0),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


class CreateWorkflowRequest(BaseModel):
    """Request body for creating a workflow"""
    model_config = ConfigDict(populate_by_name=True)

    package_id: Optional[str] = Field(None, alias="packageId")
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    steps: Optional[List[Any]] = None
    current_step: Optional[int] = Field(None, alias="currentStep")


class UpdateWorkflowRequest(BaseModel):
    """Request body for updating a workflow (only provided fields are updated)"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    steps: Optional[List[Any]] = None
    current_step: Optional[int] = Field(None, alias="currentStep")
