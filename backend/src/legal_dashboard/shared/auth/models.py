"""Authentication models shared across API projects."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


ADMIN_GROUP = "admin"


@dataclass
class User:
    """Authenticated user model."""
    user_id: str
    email: Optional[str]
    name: Optional[str]
    groups: List[str] = field(default_factory=list)
    picture: Optional[str] = None
    username: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return ADMIN_GROUP in self.groups

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "User":
        """Build a user from verified Cognito token claims."""
        return cls(
            user_id=claims["sub"],
            email=claims.get("email"),
            name=claims.get("name") or claims.get("preferred_username"),
            groups=list(claims.get("cognito:groups") or []),
            picture=claims.get("picture"),
            username=claims.get("cognito:username") or claims.get("username"),
        )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "email": self.email,
            "name": self.name,
            "picture": self.picture,
            "groups": self.groups,
            "isAdmin": self.is_admin,
        }
