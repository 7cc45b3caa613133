"""Tests for the Bedrock agent service and the /agent/query route."""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from botocore.exceptions import ClientError

from legal_dashboard.app_api.agent.service import (
    BedrockAgentService,
    consume_stream,
    extract_event_text,
    get_agent_service,
    parse_response,
)
from legal_dashboard.app_api.file_numbers.models import FileNumber
from legal_dashboard.app_api.file_numbers.repository import get_file_number_repository
from legal_dashboard.shared.errors import AgentInvocationError, AgentNotConfiguredError


def completion(*chunks):
    return {"completion": [{"chunk": {"bytes": c.encode("utf-8")}} for c in chunks]}


class TestStream:

    def test_chunk_bytes_and_delta_text(self):
        assert extract_event_text({"chunk": {"bytes": b"abc"}}) == "abc"
        assert extract_event_text({"contentBlockDelta": {"delta": {"text": "xyz"}}}) == "xyz"
        assert extract_event_text({"trace": {}}) is None
        assert extract_event_text("not an event") is None

    def test_consume_stream_concatenates(self):
        events = [
            {"chunk": {"bytes": b"Hello, "}},
            {"trace": {"orchestrationTrace": {}}},
            {"contentBlockDelta": {"delta": {"text": "world"}}},
        ]
        assert consume_stream(events) == "Hello, world"
        assert consume_stream(None) == ""


class TestParseResponse:

    def test_plain_text_unchanged(self):
        assert parse_response("Just an answer") == "Just an answer"

    def test_empty(self):
        assert parse_response("") == ""
        assert parse_response(None) == ""

    def test_output_field_wins_even_when_empty(self):
        assert parse_response(json.dumps({"output": "", "response": "ignored"})) == ""

    @pytest.mark.parametrize("field", ["response", "message", "content"])
    def test_text_fields(self, field):
        assert parse_response(json.dumps({field: "the answer"})) == "the answer"

    def test_other_json_is_pretty_printed(self):
        assert parse_response('{"cases": [1, 2]}') == json.dumps({"cases": [1, 2]}, indent=2)


class TestBedrockAgentService:

    def test_not_configured(self):
        service = BedrockAgentService(agent_id="", agent_alias_id="", client=MagicMock())

        assert service.is_configured is False
        with pytest.raises(AgentNotConfiguredError):
            asyncio.run(service.invoke("hi", session_id="s"))

    def test_invoke_parses_reply(self):
        client = MagicMock()
        client.invoke_agent.return_value = completion('{"output": ', '"Statute of limitations is 2 years"}')
        service = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)

        answer = asyncio.run(service.invoke("question", session_id="session-1"))

        assert answer == "Statute of limitations is 2 years"
        client.invoke_agent.assert_called_once_with(
            agentId="AGENT", agentAliasId="ALIAS", sessionId="session-1", inputText="question"
        )

    def test_invoke_raw(self):
        client = MagicMock()
        client.invoke_agent.return_value = completion('{"output": "x"}')
        service = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)

        assert asyncio.run(service.invoke("q", session_id="s", parse=False)) == '{"output": "x"}'

    def test_missing_completion_stream(self):
        client = MagicMock()
        client.invoke_agent.return_value = {}
        service = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)

        with pytest.raises(AgentInvocationError, match="No completion stream"):
            asyncio.run(service.invoke("q", session_id="s"))

    def test_client_error_is_wrapped(self):
        client = MagicMock()
        client.invoke_agent.side_effect = ClientError(
            {"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "InvokeAgent"
        )
        service = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)

        with pytest.raises(AgentInvocationError):
            asyncio.run(service.invoke("q", session_id="s"))


class TestQueryRoute:

    @pytest.fixture
    def file_numbers(self):
        repository = AsyncMock()
        repository.get_by_id.return_value = FileNumber.new(file_number="FN-2024-001", client_id="c1")
        return repository

    def _override(self, app, agent, file_numbers):
        app.dependency_overrides[get_agent_service] = lambda: agent
        app.dependency_overrides[get_file_number_repository] = lambda: file_numbers

    def test_validation_errors_are_joined(self, app, api_client, file_numbers):
        agent = BedrockAgentService(agent_id="", agent_alias_id="", client=MagicMock())
        self._override(app, agent, file_numbers)

        response = api_client.post("/api/agent/query", json={"query": "  "})

        assert response.status_code == 400
        assert response.json()["error"] == (
            "Query is required and cannot be empty; "
            "Bedrock agent configuration missing (BEDROCK_AGENT_ID or BEDROCK_AGENT_ALIAS_ID)"
        )

    def test_query_with_context(self, app, api_client, file_numbers):
        client = MagicMock()
        client.invoke_agent.return_value = completion("Two years.")
        agent = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)
        self._override(app, agent, file_numbers)

        response = api_client.post(
            "/api/agent/query",
            json={"query": "What is the deadline?", "clientId": "c1", "fileNumberId": "f1"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "answer": "Two years.",
            "query": "What is the deadline?",
            "clientId": "c1",
            "fileNumberId": "f1",
        }
        sent = client.invoke_agent.call_args.kwargs
        assert sent["inputText"] == (
            "Context: Client ID: c1, File Number: FN-2024-001\n\nQuery: What is the deadline?"
        )
        assert sent["sessionId"].startswith("session-")

    def test_file_number_lookup_failure_uses_raw_id(self, app, api_client, file_numbers):
        file_numbers.get_by_id.side_effect = RuntimeError("dynamo down")
        client = MagicMock()
        client.invoke_agent.return_value = completion("ok")
        agent = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)
        self._override(app, agent, file_numbers)

        response = api_client.post("/api/agent/query", json={"query": "q", "fileNumberId": "f1"})

        assert response.status_code == 200
        assert "clientId" not in response.json()
        assert client.invoke_agent.call_args.kwargs["inputText"] == "Context: File Number ID: f1\n\nQuery: q"

    def test_agent_failure(self, app, api_client, file_numbers):
        client = MagicMock()
        client.invoke_agent.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "InvokeAgent"
        )
        agent = BedrockAgentService(agent_id="AGENT", agent_alias_id="ALIAS", client=client)
        self._override(app, agent, file_numbers)

        response = api_client.post("/api/agent/query", json={"query": "q"})

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to process query"
        assert "slow down" in body["details"]
