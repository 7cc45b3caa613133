"""Bedrock agent invocation."""

import asyncio
import json
import logging
import time
from typing import Any, Iterable, Optional

from botocore.exceptions import BotoCoreError, ClientError

from legal_dashboard.shared.aws_clients import get_bedrock_agent_runtime_client
from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.errors import AgentInvocationError, AgentNotConfiguredError

logger = logging.getLogger(__name__)

_RESPONSE_TEXT_FIELDS = ("output", "response", "message", "content")


def epoch_millis() -> int:
    return int(time.time() * 1000)


def extract_event_text(event: Any) -> Optional[str]:
    """Text carried by one completion event, if any."""
    if not isinstance(event, dict):
        return None

    chunk_bytes = (event.get("chunk") or {}).get("bytes")
    if chunk_bytes:
        try:
            return chunk_bytes.decode("utf-8")
        except (AttributeError, UnicodeDecodeError) as e:
            logger.error(f"Failed to decode chunk bytes: {e}")
            return None

    delta_text = ((event.get("contentBlockDelta") or {}).get("delta") or {}).get("text")
    if delta_text:
        return delta_text

    return None


def consume_stream(stream: Optional[Iterable[Any]]) -> str:
    """Concatenate the text of every event in a completion stream."""
    if stream is None:
        return ""

    chunks = []
    for event in stream:
        text = extract_event_text(event)
        if text:
            chunks.append(text)
    return "".join(chunks)


def parse_response(response_text: Optional[str]) -> str:
    """
    Unwrap an agent reply.

    JSON replies are searched for a text field (output, response, message,
    content); JSON without one is pretty-printed. Anything else is returned
    unchanged.
    """
    if not response_text:
        return ""

    try:
        parsed = json.loads(response_text)
    except ValueError:
        return response_text

    if isinstance(parsed, dict):
        # An empty "output" is still a deliberate answer
        if isinstance(parsed.get("output"), str):
            return parsed["output"]
        for field_name in _RESPONSE_TEXT_FIELDS[1:]:
            value = parsed.get(field_name)
            if isinstance(value, str) and value:
                return value

    return json.dumps(parsed, indent=2)


class BedrockAgentService:
    """Thin wrapper around ``bedrock-agent-runtime.invoke_agent``."""

    def __init__(self, agent_id: Optional[str] = None, agent_alias_id: Optional[str] = None, client: Any = None):
        settings = get_settings()
        self.agent_id = agent_id if agent_id is not None else settings.bedrock_agent_id
        self.agent_alias_id = agent_alias_id if agent_alias_id is not None else settings.bedrock_agent_alias_id
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.agent_id and self.agent_alias_id)

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = get_bedrock_agent_runtime_client()
        return self._client

    def _invoke_sync(self, input_text: str, session_id: str) -> str:
        try:
            response = self.client.invoke_agent(
                agentId=self.agent_id,
                agentAliasId=self.agent_alias_id,
                sessionId=session_id,
                inputText=input_text,
            )
            stream = response.get("completion")
            if stream is None:
                raise AgentInvocationError("No completion stream in agent response")
            return consume_stream(stream)
        except (ClientError, BotoCoreError) as e:
            raise AgentInvocationError(str(e)) from e

    async def invoke(self, input_text: str, session_id: str, parse: bool = True) -> str:
        """
        Send a prompt to the agent and return its reply.

        With ``parse`` the reply is unwrapped by ``parse_response``; otherwise
        the streamed text is returned as is.

        Raises:
            AgentNotConfiguredError: agent id or alias id is missing
            AgentInvocationError: the call or the stream failed
        """
        if not self.is_configured:
            raise AgentNotConfiguredError("Bedrock agent not configured")

        logger.info(f"Invoking agent {self.agent_id} (session {session_id}, {len(input_text)} chars)")
        raw = await asyncio.to_thread(self._invoke_sync, input_text, session_id)
        return parse_response(raw) if parse else raw


_service_instance: Optional[BedrockAgentService] = None


def get_agent_service() -> BedrockAgentService:
    """Get or create the global BedrockAgentService instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = BedrockAgentService()
    return _service_instance
