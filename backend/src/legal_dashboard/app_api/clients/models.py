"""Client data models."""

import uuid
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from legal_dashboard.shared.dynamodb import now_iso


@dataclass
class Client:
    """A client of the firm, owned by the user who created it."""

    client_id: str
    user_id: str
    name: str
    email: str
    phone: Optional[str] = None
    address: Optional[str] = None
    status: str = "active"
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, user_id: str, name: str, email: str, phone: Optional[str] = None,
            address: Optional[str] = None, status: Optional[str] = None) -> "Client":
        now = now_iso()
        return cls(
            client_id=str(uuid.uuid4()),
            user_id=user_id,
            name=name,
            email=email,
            phone=phone or None,
            address=address or None,
            status=status or "active",
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for DynamoDB storage."""
        return {
            "clientId": self.client_id,
            "userId": self.user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "status": self.status,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Client":
        """Create from dictionary (DynamoDB item)."""
        return cls(
            client_id=data["clientId"],
            user_id=data.get("userId", ""),
            name=data.get("name", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
            address=data.get("address"),
            status=data.get("status", "active"),
            created_at=data.get("createdAt", ""),
            updated_at=data.get("updatedAt", ""),
        )


class CreateClientRequest(BaseModel):
    """Request body for creating a client"""
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None


class UpdateClientRequest(BaseModel):
    """Request body for updating a client (only provided fields are updated)"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = Field(None, description="Client status, e.g. active or inactive")
