"""Tests for Cognito user administration."""

import asyncio
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from legal_dashboard.app_api.admin.users.service import (
    InvalidGroupError,
    UserAdminService,
    get_user_admin_service,
)
from legal_dashboard.shared.auth.dependencies import get_current_user
from legal_dashboard.shared.auth.models import User

POOL_ID = "us-east-1_Pool"


def cognito_user(username, email):
    return {
        "Username": username,
        "Attributes": [{"Name": "email", "Value": email}, {"Name": "name", "Value": username.title()}],
        "UserStatus": "CONFIRMED",
        "Enabled": True,
        "UserCreateDate": datetime(2024, 1, 2, tzinfo=timezone.utc),
    }


@pytest.fixture
def cognito():
    client = MagicMock()
    client.list_users.side_effect = [
        {"Users": [cognito_user("alice", "alice@example.com")], "PaginationToken": "next"},
        {"Users": [cognito_user("bob", "bob@example.com")]},
    ]
    groups = {"alice": ["admin"], "bob": []}
    client.admin_list_groups_for_user.side_effect = lambda UserPoolId, Username: {
        "Groups": [{"GroupName": g} for g in groups[Username]]
    }
    return client


@pytest.fixture
def service(app, cognito):
    service = UserAdminService(user_pool_id=POOL_ID, client=cognito)
    app.dependency_overrides[get_user_admin_service] = lambda: service
    return service


def user_not_found(operation):
    return ClientError({"Error": {"Code": "UserNotFoundException", "Message": "User does not exist."}}, operation)


class TestService:

    def test_list_users_follows_pagination(self, service, cognito):
        users = asyncio.run(service.list_users())

        assert [u.user_id for u in users] == ["alice", "bob"]
        assert users[0].groups == ["admin"]
        assert users[0].created_at == "2024-01-02T00:00:00+00:00"
        assert cognito.list_users.call_args_list[1].kwargs["PaginationToken"] == "next"

    def test_pending_users(self, service):
        pending = asyncio.run(service.list_pending_users())

        assert [u.user_id for u in pending] == ["bob"]

    def test_invalid_group(self, service):
        with pytest.raises(InvalidGroupError):
            asyncio.run(service.add_user_to_group("bob", "superuser"))


class TestRoutes:

    def test_list_users(self, admin_client, service):
        response = admin_client.get("/api/auth/admin/users")

        assert response.status_code == 200
        body = response.json()
        assert body[0]["userId"] == "alice"
        assert body[0]["email"] == "alice@example.com"
        assert body[0]["groups"] == ["admin"]
        assert body[1]["groups"] == []

    def test_list_pending_users(self, admin_client, service):
        response = admin_client.get("/api/auth/admin/pending-users")

        assert [u["userId"] for u in response.json()] == ["bob"]

    def test_approve_user(self, admin_client, service, cognito):
        response = admin_client.post("/api/auth/admin/users/bob/groups/user")

        assert response.status_code == 200
        assert response.json()["groupName"] == "user"
        cognito.admin_add_user_to_group.assert_called_once_with(
            UserPoolId=POOL_ID, Username="bob", GroupName="user"
        )

    def test_invalid_group_is_bad_request(self, admin_client, service, cognito):
        response = admin_client.post("/api/auth/admin/users/bob/groups/root")

        assert response.status_code == 400
        assert "Must be one of: user, admin" in response.json()["error"]
        cognito.admin_add_user_to_group.assert_not_called()

    def test_remove_from_unknown_user(self, admin_client, service, cognito):
        cognito.admin_remove_user_from_group.side_effect = user_not_found("AdminRemoveUserFromGroup")

        response = admin_client.delete("/api/auth/admin/users/ghost/groups/admin")

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"

    def test_delete_user(self, admin_client, service, cognito):
        response = admin_client.delete("/api/auth/admin/users/bob")

        assert response.status_code == 200
        cognito.admin_delete_user.assert_called_once_with(UserPoolId=POOL_ID, Username="bob")

    def test_cannot_delete_self(self, admin_client, service, cognito, admin_user):
        response = admin_client.delete(f"/api/auth/admin/users/{admin_user.user_id}")

        assert response.status_code == 400
        cognito.admin_delete_user.assert_not_called()

    def test_cannot_delete_self_by_username(self, app, admin_client, service, cognito):
        app.dependency_overrides[get_current_user] = lambda: User(
            user_id="4f1c-sub", email="alice@example.com", name="Alice", groups=["admin"], username="alice"
        )

        response = admin_client.delete("/api/auth/admin/users/alice")

        assert response.status_code == 400
        cognito.admin_delete_user.assert_not_called()

    def test_cognito_failure(self, admin_client, service, cognito):
        cognito.admin_delete_user.side_effect = ClientError(
            {"Error": {"Code": "TooManyRequestsException", "Message": "slow"}}, "AdminDeleteUser"
        )

        response = admin_client.delete("/api/auth/admin/users/bob")

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to delete user"
