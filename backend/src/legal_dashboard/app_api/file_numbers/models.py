"""File number (legal matter) data models."""

import uuid
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from legal_dashboard.shared.dynamodb import now_iso


@dataclass
class FileNumber:
    """A legal matter, identified to humans by ``file_number``."""

    file_id: str
    file_number: str
    package_id: Optional[str] = None
    client_id: Optional[str] = None
    description: Optional[str] = None
    status: str = "active"
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, file_number: str, package_id: Optional[str] = None, client_id: Optional[str] = None,
            description: Optional[str] = None, status: Optional[str] = None) -> "FileNumber":
        now = now_iso()
        return cls(
            file_id=str(uuid.uuid4()),
            file_number=file_number,
            package_id=package_id or None,
            client_id=client_id or None,
            description=description or None,
            status=status or "active",
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for DynamoDB storage."""
        return {
            "fileId": self.file_id,
            "packageId": self.package_id,
            "clientId": self.client_id,
            "fileNumber": self.file_number,
            "description": self.description,
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FileNumber":
        """Create from dictionary (DynamoDB item)."""
        return cls(
            file_id=data["fileId"],
            file_number=data.get("fileNumber", ""),
            package_id=data.get("packageId"),
            client_id=data.get("clientId"),
            description=data.get("description"),
            status=data.get("status", "active"),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


class CreateFileNumberRequest(BaseModel):
    """Request body for creating a file number"""
    model_config = ConfigDict(populate_by_name=True)

    package_id: Optional[str] = Field(None, alias="packageId")
    client_id: Optional[str] = Field(None, alias="clientId")
    file_number: Optional[str] = Field(None, alias="fileNumber")
    description: Optional[str] = None
    status: Optional[str] = None


class UpdateFileNumberRequest(BaseModel):
    """Request body for updating a file number (only provided fields are updated)"""
    model_config = ConfigDict(populate_by_name=True)

    package_id: Optional[str] = Field(None, alias="packageId")
    client_id: Optional[str] = Field(None, alias="clientId")
    file_number: Optional[str] = Field(None, alias="fileNumber")
    description: Optional[str] = None
    status: Optional[str] = None
