"""Agent query request/response models"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AgentQueryRequest(BaseModel):
    """Free-form question for the Bedrock agent, optionally scoped to a matter"""
    model_config = ConfigDict(populate_by_name=True)

    query: Optional[str] = Field(None, description="The user's question")
    client_id: Optional[str] = Field(None, alias="clientId", description="Client to use as context")
    file_number_id: Optional[str] = Field(None, alias="fileNumberId", description="File number (fileId) to use as context")


class AgentQueryResponse(BaseModel):
    """Agent answer with the original query echoed back"""
    model_config = ConfigDict(populate_by_name=True)

    answer: str
    query: str
    client_id: Optional[str] = Field(None, alias="clientId")
    file_number_id: Optional[str] = Field(None, alias="fileNumberId")
