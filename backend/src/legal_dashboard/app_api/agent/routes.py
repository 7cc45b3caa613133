"""Agent API routes

Answers free-form legal questions through the Bedrock agent and its
knowledge base, optionally scoped to a client and file number.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from legal_dashboard.shared.auth import User, get_current_user
from ..file_numbers.repository import FileNumberRepository, get_file_number_repository
from .models import AgentQueryRequest, AgentQueryResponse
from .service import BedrockAgentService, epoch_millis, get_agent_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agent", tags=["agent"])


def validate_query_request(request: AgentQueryRequest, agent: BedrockAgentService) -> List[str]:
    errors = []
    if not request.query or not request.query.strip():
        errors.append("Query is required and cannot be empty")
    if not agent.is_configured:
        errors.append("Bedrock agent configuration missing (BEDROCK_AGENT_ID or BEDROCK_AGENT_ALIAS_ID)")
    return errors


async def build_query_with_context(
    query: str,
    client_id: Optional[str],
    file_number_id: Optional[str],
    file_numbers: FileNumberRepository,
) -> str:
    """
    Prefix the query with the client and file number it concerns.

    The human-readable file number is looked up; the raw id is used when
    the lookup fails.
    """
    if not client_id and not file_number_id:
        return query

    context_parts = []
    if client_id:
        context_parts.append(f"Client ID: {client_id}")

    if file_number_id:
        label = f"File Number ID: {file_number_id}"
        try:
            record = await file_numbers.get_by_id(file_number_id)
            if record and record.file_number:
                label = f"File Number: {record.file_number}"
        except Exception as e:
            logger.error(f"Failed to fetch file number {file_number_id}: {e}")
        context_parts.append(label)

    return f"Context: {', '.join(context_parts)}\n\nQuery: {query}"


@router.post("/query", response_model=AgentQueryResponse, response_model_exclude_none=True)
async def query_agent(
    request: AgentQueryRequest,
    current_user: User = Depends(get_current_user),
    agent: BedrockAgentService = Depends(get_agent_service),
    file_numbers: FileNumberRepository = Depends(get_file_number_repository),
):
    """
    Ask the Bedrock agent a question.

    Raises:
        HTTPException:
            - 400 if the query is empty or the agent is not configured
            - 500 if the agent call fails
    """
    logger.info(f"POST /agent/query - User: {current_user.user_id}")

    errors = validate_query_request(request, agent)
    if errors:
        raise HTTPException(status_code=400, detail="; ".join(errors))

    try:
        full_query = await build_query_with_context(
            request.query, request.client_id, request.file_number_id, file_numbers
        )
        answer = await agent.invoke(full_query, session_id=f"session-{epoch_millis()}")
    except Exception as e:
        logger.error(f"Agent invocation error: {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to process query", "details": str(e)},
        )

    return AgentQueryResponse(
        answer=answer,
        query=request.query,
        client_id=request.client_id or None,
        file_number_id=request.file_number_id or None,
    )
