"""Package data models."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from legal_dashboard.shared.dynamodb import now_iso


def default_package_documents() -> Dict[str, List[Any]]:
    return {
        "medicalRecords": [],
        "accidentReports": [],
        "photographs": [],
    }


@dataclass
class Package:
    """A bundle of documents prepared for a recipient (e.g. a demand package)."""

    package_id: str
    client_id: str
    name: str
    file_number_id: Optional[str] = None
    description: Optional[str] = None
    recipient: Optional[str] = None
    type: str = "general"
    status: str = "draft"
    documents: Dict[str, Any] = field(default_factory=default_package_documents)
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, client_id: str, name: str, **fields: Any) -> "Package":
        now = now_iso()
        return cls(
            package_id=str(uuid.uuid4()),
            client_id=client_id,
            name=name,
            file_number_id=fields.get("file_number_id") or None,
            description=fields.get("description") or None,
            recipient=fields.get("recipient") or None,
            type=fields.get("type") or "general",
            status=fields.get("status") or "draft",
            documents=fields.get("documents") or default_package_documents(),
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for DynamoDB storage."""
        return {
            "packageId": self.package_id,
            "clientId": self.client_id,
            "fileNumberId": self.file_number_id,
            "name": self.name,
            "description": self.description,
            "recipient": self.recipient,
            "type": self.type,
            "status": self.status,
            "documents": self.documents,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Package":
        """Create from dictionary (DynamoDB item)."""
        return cls(
            package_id=data["packageId"],
            client_id=data.get("clientId", ""),
            name=data.get("name", ""),
            file_number_id=data.get("fileNumberId"),
            description=data.get("description"),
            recipient=data.get("recipient"),
            type=data.get("type", "general"),
            status=data.get("status", "draft"),
            documents=data.get("documents") or default_package_documents(),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


class CreatePackageRequest(BaseModel):
    """Request body for creating a package"""
    model_config = ConfigDict(populate_by_name=True)

    client_id: Optional[str] = Field(None, alias="clientId")
    file_number_id: Optional[str] = Field(None, alias="fileNumberId")
    name: Optional[str] = None
    description: Optional[str] = None
    recipient: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    documents: Optional[Dict[str, Any]] = None


class UpdatePackageRequest(BaseModel):
    """Request body for updating a package (only provided fields are updated)"""
    model_config = ConfigDict(populate_by_name=True)

    file_number_id: Optional[str] = Field(None, alias="fileNumberId")
    name: Optional[str] = None
    description: Optional[str] = None
    recipient: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None
    documents: Optional[Dict[str, Any]] = None
