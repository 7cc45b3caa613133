"""Cognito user pool administration."""

import logging
from typing import Any, List, Optional

from botocore.exceptions import ClientError

from legal_dashboard.shared.aws_clients import get_cognito_client
from legal_dashboard.shared.config import get_settings

from .models import MANAGED_GROUPS, PoolUser

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    """The user does not exist in the pool."""


class InvalidGroupError(ValueError):
    """The group is not one the admin API manages."""


def _raise_not_found(e: ClientError, user_id: str) -> None:
    if e.response["Error"]["Code"] == "UserNotFoundException":
        raise UserNotFoundError(f"User not found: {user_id}") from e


class UserAdminService:
    """
    Approves, promotes and removes users in the Cognito user pool.

    New sign-ups belong to no group and cannot use the app until an admin
    adds them to ``user`` (or ``admin``).
    """

    def __init__(self, user_pool_id: Optional[str] = None, client: Any = None):
        self.user_pool_id = user_pool_id or get_settings().cognito_user_pool_id
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_cognito_client()
        return self._client

    def _require_pool(self) -> str:
        if not self.user_pool_id:
            raise ValueError("COGNITO_USER_POOL_ID is not configured")
        return self.user_pool_id

    @staticmethod
    def validate_group(group_name: str) -> str:
        if group_name not in MANAGED_GROUPS:
            raise InvalidGroupError(
                f"Invalid group '{group_name}'. Must be one of: {', '.join(MANAGED_GROUPS)}"
            )
        return group_name

    async def list_groups_for_user(self, user_id: str) -> List[str]:
        pool_id = self._require_pool()
        groups = []
        kwargs = {"UserPoolId": pool_id, "Username": user_id}
        try:
            while True:
                response = self.client.admin_list_groups_for_user(**kwargs)
                groups.extend(g["GroupName"] for g in response.get("Groups", []))
                next_token = response.get("NextToken")
                if not next_token:
                    break
                kwargs["NextToken"] = next_token
        except ClientError as e:
            _raise_not_found(e, user_id)
            logger.error(f"Error listing groups for user {user_id}: {e}")
            raise
        return groups

    async def list_users(self) -> List[PoolUser]:
        """All pool users with their groups, following ListUsers pagination."""
        pool_id = self._require_pool()
        raw_users = []
        kwargs = {"UserPoolId": pool_id}
        try:
            while True:
                response = self.client.list_users(**kwargs)
                raw_users.extend(response.get("Users", []))
                token = response.get("PaginationToken")
                if not token:
                    break
                kwargs["PaginationToken"] = token
        except ClientError as e:
            logger.error(f"Error listing users in pool {pool_id}: {e}")
            raise

        users = []
        for raw in raw_users:
            groups = await self.list_groups_for_user(raw["Username"])
            users.append(PoolUser.from_cognito(raw, groups))
        return users

    async def list_pending_users(self) -> List[PoolUser]:
        return [user for user in await self.list_users() if user.is_pending]

    async def add_user_to_group(self, user_id: str, group_name: str) -> None:
        self.validate_group(group_name)
        try:
            self.client.admin_add_user_to_group(
                UserPoolId=self._require_pool(), Username=user_id, GroupName=group_name
            )
        except ClientError as e:
            _raise_not_found(e, user_id)
            logger.error(f"Error adding user {user_id} to group {group_name}: {e}")
            raise
        logger.info(f"Added user {user_id} to group {group_name}")

    async def remove_user_from_group(self, user_id: str, group_name: str) -> None:
        self.validate_group(group_name)
        try:
            self.client.admin_remove_user_from_group(
                UserPoolId=self._require_pool(), Username=user_id, GroupName=group_name
            )
        except ClientError as e:
            _raise_not_found(e, user_id)
            logger.error(f"Error removing user {user_id} from group {group_name}: {e}")
            raise
        logger.info(f"Removed user {user_id} from group {group_name}")

    async def delete_user(self, user_id: str) -> None:
        try:
            self.client.admin_delete_user(UserPoolId=self._require_pool(), Username=user_id)
        except ClientError as e:
            _raise_not_found(e, user_id)
            logger.error(f"Error deleting user {user_id}: {e}")
            raise
        logger.info(f"Deleted user {user_id}")


_service_instance: Optional[UserAdminService] = None


def get_user_admin_service() -> UserAdminService:
    """Get or create the global UserAdminService instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = UserAdminService()
    return _service_instance
