"""Admin API routes for Cognito user management."""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from legal_dashboard.shared.auth import User, require_admin

from .models import PoolUserResponse
from .service import (
    InvalidGroupError,
    UserAdminService,
    UserNotFoundError,
    get_user_admin_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-users"])


def _to_response(users) -> List[PoolUserResponse]:
    return [PoolUserResponse.from_pool_user(u) for u in users]


@router.get("/users", response_model=List[PoolUserResponse])
async def list_users(
    admin: User = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """
    List every user in the pool with their groups.

    Requires membership of the admin group.
    """
    logger.info(f"Admin {admin.email} listing users")

    try:
        return _to_response(await service.list_users())
    except Exception as e:
        logger.error(f"Error listing users: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list users")


@router.get("/pending-users", response_model=List[PoolUserResponse])
async def list_pending_users(
    admin: User = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """Users awaiting approval (in neither the user nor the admin group)."""
    logger.info(f"Admin {admin.email} listing pending users")

    try:
        return _to_response(await service.list_pending_users())
    except Exception as e:
        logger.error(f"Error listing pending users: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to list pending users")


async def _run_user_action(action, user_id: str, failure: str):
    try:
        await action
    except InvalidGroupError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except Exception as e:
        logger.error(f"{failure} ({user_id}): {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=failure)


@router.post("/users/{user_id}/groups/{group_name}")
async def add_user_to_group(
    user_id: str,
    group_name: str,
    admin: User = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """
    Add a user to a group (approve with ``user``, promote with ``admin``).

    Raises:
        HTTPException:
            - 400 if the group is not user or admin
            - 404 if the user does not exist
    """
    logger.info(f"Admin {admin.email} adding {user_id} to {group_name}")

    await _run_user_action(
        service.add_user_to_group(user_id, group_name), user_id, "Failed to add user to group"
    )
    return {"message": f"User added to group {group_name}", "userId": user_id, "groupName": group_name}


@router.delete("/users/{user_id}/groups/{group_name}")
async def remove_user_from_group(
    user_id: str,
    group_name: str,
    admin: User = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    logger.info(f"Admin {admin.email} removing {user_id} from {group_name}")

    await _run_user_action(
        service.remove_user_from_group(user_id, group_name), user_id, "Failed to remove user from group"
    )
    return {"message": f"User removed from group {group_name}", "userId": user_id, "groupName": group_name}


@router.delete("/users/{user_id}")
async def delete_user(
    user_id: str,
    admin: User = Depends(require_admin),
    service: UserAdminService = Depends(get_user_admin_service),
):
    """Permanently delete a user from the pool."""
    logger.info(f"Admin {admin.email} deleting user {user_id}")

    # Path ids are Cognito usernames; tokens carry both sub and username
    if user_id in (admin.username, admin.user_id):
        raise HTTPException(status_code=400, detail="Admins cannot delete their own account")

    await _run_user_action(service.delete_user(user_id), user_id, "Failed to delete user")
    return {"message": "User deleted", "userId": user_id}
