"""Pytest configuration for test suite."""

import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add backend/src to Python path for imports
# This file is in backend/tests/, so we need to go up one level to backend/
BACKEND_DIR = Path(__file__).parent.parent
SRC_DIR = BACKEND_DIR / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from botocore.exceptions import ClientError  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from legal_dashboard.shared.auth import User, get_current_user  # noqa: E402
from legal_dashboard.shared.config import reset_settings  # noqa: E402

_AWS_ENV = (
    "AWS_ENDPOINT_URL",
    "BEDROCK_AGENT_ID",
    "BEDROCK_AGENT_ALIAS_ID",
    "S3_BUCKET_EXTRACTED_TEXT",
    "COGNITO_USER_POOL_ID",
    "COGNITO_REGION",
)


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Every test starts from a clean, AWS-free environment."""
    for name in _AWS_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("AWS_REGION", "us-east-1")
    monkeypatch.setenv("ENABLE_AUTHENTICATION", "true")
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def user():
    return User(user_id="user-123", email="user@example.com", name="Test User", groups=["user"])


@pytest.fixture
def admin_user():
    return User(user_id="admin-1", email="admin@example.com", name="Admin", groups=["admin"])


@pytest.fixture
def app():
    from legal_dashboard.app_api.main import app as fastapi_app

    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def api_client(app, user):
    """TestClient authenticated as a regular user."""
    app.dependency_overrides[get_current_user] = lambda: user
    return TestClient(app)


@pytest.fixture
def admin_client(app, admin_user):
    """TestClient authenticated as a member of the admin group."""
    app.dependency_overrides[get_current_user] = lambda: admin_user
    return TestClient(app)


def apply_update_expression(item: dict, **kwargs) -> dict:
    """Apply a ``SET #a0 = :v0, ...`` update to ``item`` the way DynamoDB would."""
    names = kwargs["ExpressionAttributeNames"]
    values = kwargs["ExpressionAttributeValues"]
    for assignment in kwargs["UpdateExpression"][len("SET "):].split(", "):
        name, value = assignment.split(" = ")
        item[names[name]] = values[value]
    return item


@pytest.fixture
def dynamo_table():
    """
    MagicMock DynamoDB table holding a single item in ``table.item``.

    put_item stores the item, get_item returns it when it is set, and
    update_item applies the SET expression to it and returns ALL_NEW.
    """
    table = MagicMock()
    table.item = None

    def _get_item(Key):
        return {"Item": dict(table.item)} if table.item else {}

    def _update_item(**kwargs):
        if table.item is None:
            raise ClientError(
                {"Error": {"Code": "ConditionalCheckFailedException", "Message": "missing"}},
                "UpdateItem",
            )
        apply_update_expression(table.item, **kwargs)
        return {"Attributes": dict(table.item)}

    def _put_item(Item):
        table.item = dict(Item)
        return {}

    table.get_item.side_effect = _get_item
    table.put_item.side_effect = _put_item
    table.update_item.side_effect = _update_item
    table.query.return_value = {"Items": []}
    table.scan.return_value = {"Items": []}
    return table
