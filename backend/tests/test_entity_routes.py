"""Tests for the client, package, file number and workflow routes."""

import pytest
from botocore.exceptions import ClientError
from fastapi.testclient import TestClient

from legal_dashboard.app_api.clients.repository import ClientRepository, get_client_repository
from legal_dashboard.app_api.file_numbers.repository import (
    FileNumberRepository,
    get_file_number_repository,
)
from legal_dashboard.app_api.packages.repository import PackageRepository, get_package_repository
from legal_dashboard.app_api.workflows.repository import WorkflowRepository, get_workflow_repository


def test_health(app):
    client = TestClient(app)
    assert client.get("/api/health").json() == {"status": "ok"}
    assert client.post("/api/health").json() == {"status": "ok"}


def test_unknown_route_uses_error_body(api_client):
    response = api_client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found", "code": "not_found"}


class TestClients:

    @pytest.fixture
    def repository(self, app, dynamo_table):
        repository = ClientRepository(table=dynamo_table)
        app.dependency_overrides[get_client_repository] = lambda: repository
        return repository

    def test_create_client(self, api_client, repository, dynamo_table, user):
        response = api_client.post("/api/clients", json={"name": "Jane Roe", "email": "jane@example.com"})

        assert response.status_code == 201
        body = response.json()
        assert body["userId"] == user.user_id
        assert body["status"] == "active"
        assert body["phone"] is None
        assert body["createdAt"] == body["updatedAt"]
        stored = dynamo_table.put_item.call_args.kwargs["Item"]
        assert stored["clientId"] == body["clientId"]

    def test_create_requires_name_and_email(self, api_client, repository):
        response = api_client.post("/api/clients", json={"name": "Jane Roe"})

        assert response.status_code == 400
        assert response.json()["error"] == "Name and email are required"

    def test_create_storage_failure(self, api_client, repository, dynamo_table):
        dynamo_table.put_item.side_effect = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "boom"}}, "PutItem"
        )

        response = api_client.post("/api/clients", json={"name": "A", "email": "a@b.c"})

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to create client"

    def test_list_uses_user_index(self, api_client, repository, dynamo_table, user):
        dynamo_table.query.return_value = {"Items": [{"clientId": "c1", "userId": user.user_id, "name": "A"}]}

        response = api_client.get("/api/clients")

        assert [c["clientId"] for c in response.json()] == ["c1"]
        kwargs = dynamo_table.query.call_args.kwargs
        assert kwargs["IndexName"] == "userIdIndex"
        assert kwargs["ExpressionAttributeValues"] == {":value": user.user_id}

    def test_get_missing_client(self, api_client, repository):
        response = api_client.get("/api/clients/missing")

        assert response.status_code == 404
        assert response.json() == {"error": "Client not found", "code": "not_found"}

    def test_update_client(self, api_client, repository, dynamo_table):
        dynamo_table.item = {"clientId": "c1", "userId": "u", "name": "Old", "email": "a@b.c"}

        response = api_client.put("/api/clients/c1", json={"phone": "555-0100"})

        assert response.status_code == 200
        assert response.json()["phone"] == "555-0100"
        assert response.json()["name"] == "Old"

    def test_update_missing_client(self, api_client, repository):
        response = api_client.put("/api/clients/missing", json={"name": "x"})

        assert response.status_code == 404

    def test_delete_client(self, api_client, repository, dynamo_table):
        response = api_client.delete("/api/clients/c1")

        assert response.status_code == 204
        dynamo_table.delete_item.assert_called_once_with(Key={"clientId": "c1"})


class TestPackages:

    @pytest.fixture
    def repository(self, app, dynamo_table):
        repository = PackageRepository(table=dynamo_table)
        app.dependency_overrides[get_package_repository] = lambda: repository
        return repository

    def test_create_package_defaults(self, api_client, repository):
        response = api_client.post("/api/packages", json={"clientId": "c1", "name": "Demand package"})

        assert response.status_code == 201
        body = response.json()
        assert body["type"] == "general"
        assert body["status"] == "draft"
        assert body["documents"] == {"medicalRecords": [], "accidentReports": [], "photographs": []}

    def test_create_requires_client_and_name(self, api_client, repository):
        response = api_client.post("/api/packages", json={"name": "No client"})

        assert response.status_code == 400
        assert response.json()["error"] == "ClientId and name are required"

    def test_list_by_file_number_falls_back_to_scan(self, api_client, repository, dynamo_table):
        dynamo_table.query.side_effect = ClientError(
            {"Error": {"Code": "ValidationException", "Message": "index not found"}}, "Query"
        )
        dynamo_table.scan.return_value = {"Items": [{"packageId": "p1", "clientId": "c1", "name": "P"}]}

        response = api_client.get("/api/packages/file-number/f1")

        assert response.status_code == 200
        assert [p["packageId"] for p in response.json()] == ["p1"]
        assert dynamo_table.scan.call_args.kwargs["ExpressionAttributeValues"] == {":fileNumberId": "f1"}

    def test_list_by_file_number_other_errors_fail(self, api_client, repository, dynamo_table):
        dynamo_table.query.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "no"}}, "Query"
        )

        response = api_client.get("/api/packages/file-number/f1")

        assert response.status_code == 500
        dynamo_table.scan.assert_not_called()

    def test_update_uses_camel_case_attributes(self, api_client, repository, dynamo_table):
        dynamo_table.item = {"packageId": "p1", "clientId": "c1", "name": "P"}

        response = api_client.put("/api/packages/p1", json={"fileNumberId": "f9", "status": "sent"})

        assert response.status_code == 200
        assert dynamo_table.item["fileNumberId"] == "f9"
        assert response.json()["status"] == "sent"


class TestFileNumbers:

    @pytest.fixture
    def repository(self, app, dynamo_table):
        repository = FileNumberRepository(table=dynamo_table)
        app.dependency_overrides[get_file_number_repository] = lambda: repository
        return repository

    def test_create_under_client(self, api_client, repository):
        response = api_client.post("/api/file-numbers", json={"clientId": "c1", "fileNumber": "FN-1"})

        assert response.status_code == 201
        assert response.json()["status"] == "active"
        assert response.json()["packageId"] is None

    @pytest.mark.parametrize("payload", [
        {"fileNumber": "FN-1"},
        {"clientId": "c1"},
    ])
    def test_create_validation(self, api_client, repository, payload):
        response = api_client.post("/api/file-numbers", json=payload)

        assert response.status_code == 400
        assert response.json()["error"] == "PackageId or clientId, and fileNumber are required"

    def test_list_by_client_scans(self, api_client, repository, dynamo_table):
        dynamo_table.scan.return_value = {"Items": [{"fileId": "f1", "fileNumber": "FN-1", "clientId": "c1"}]}

        response = api_client.get("/api/file-numbers/client/c1")

        assert [f["fileId"] for f in response.json()] == ["f1"]

    def test_get_missing(self, api_client, repository):
        response = api_client.get("/api/file-numbers/nope")

        assert response.status_code == 404
        assert response.json()["error"] == "File number not found"


class TestWorkflows:

    @pytest.fixture
    def repository(self, app, dynamo_table):
        repository = WorkflowRepository(table=dynamo_table)
        app.dependency_overrides[get_workflow_repository] = lambda: repository
        return repository

    def test_create_workflow_defaults(self, api_client, repository):
        response = api_client.post("/api/workflows", json={"packageId": "p1", "name": "Intake"})

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "draft"
        assert body["steps"] == []
        assert body["currentStep"] == 0

    def test_list_by_package(self, api_client, repository, dynamo_table):
        api_client.get("/api/workflows/package/p1")

        assert dynamo_table.query.call_args.kwargs["IndexName"] == "packageIdIndex"

    def test_update_missing(self, api_client, repository):
        response = api_client.put("/api/workflows/w1", json={"currentStep": 2})

        assert response.status_code == 404
        assert response.json()["error"] == "Workflow not found"
