"""Admin user management models."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


MANAGED_GROUPS = ("user", "admin")


@dataclass
class PoolUser:
    """A Cognito user pool user with its group memberships."""

    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    enabled: bool = True
    created_at: Optional[str] = None
    groups: List[str] = field(default_factory=list)

    @property
    def is_pending(self) -> bool:
        """Signed up but not yet approved into any managed group."""
        return not any(group in self.groups for group in MANAGED_GROUPS)

    @classmethod
    def from_cognito(cls, user: Dict[str, Any], groups: Optional[List[str]] = None) -> "PoolUser":
        """Build from a ListUsers / AdminGetUser entry."""
        attributes = {
            attr["Name"]: attr["Value"]
            for attr in user.get("Attributes") or user.get("UserAttributes") or []
        }
        created = user.get("UserCreateDate")
        return cls(
            user_id=user["Username"],
            email=attributes.get("email"),
            name=attributes.get("name") or attributes.get("preferred_username"),
            status=user.get("UserStatus"),
            enabled=user.get("Enabled", True),
            created_at=created.isoformat() if hasattr(created, "isoformat") else created,
            groups=groups or [],
        )


class PoolUserResponse(BaseModel):
    """User as returned by the admin API"""
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
    email: Optional[str] = None
    name: Optional[str] = None
    status: Optional[str] = None
    enabled: bool = True
    created_at: Optional[str] = Field(None, alias="createdAt")
    groups: List[str] = Field(default_factory=list)

    @classmethod
    def from_pool_user(cls, user: PoolUser) -> "PoolUserResponse":
        return cls(
            user_id=user.user_id,
            email=user.email,
            name=user.name,
            status=user.status,
            enabled=user.enabled,
            created_at=user.created_at,
            groups=user.groups,
        )
