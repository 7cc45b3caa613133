"""AWS client factory functions with connection pooling.

In development every client points at LocalStack with test credentials.
"""

import logging
from functools import lru_cache
from typing import Any, Dict

import boto3
from botocore.config import Config

from .config import get_settings

logger = logging.getLogger(__name__)

_RETRY_CONFIG = {"max_attempts": 5, "mode": "standard"}


def _client_kwargs(service_name: str) -> Dict[str, Any]:
    settings = get_settings()
    kwargs: Dict[str, Any] = {"region_name": settings.aws_region}

    endpoint = settings.endpoint_url
    if endpoint:
        logger.info(f"Using endpoint {endpoint} for {service_name}")
        kwargs["endpoint_url"] = endpoint
        kwargs["aws_access_key_id"] = "test"
        kwargs["aws_secret_access_key"] = "test"

    if service_name == "s3" and endpoint:
        kwargs["config"] = Config(retries=_RETRY_CONFIG, s3={"addressing_style": "path"})
    else:
        kwargs["config"] = Config(retries=_RETRY_CONFIG)
    return kwargs


@lru_cache(maxsize=1)
def get_dynamodb_resource() -> Any:
    """Get a cached DynamoDB resource instance."""
    return boto3.resource("dynamodb", **_client_kwargs("dynamodb"))


@lru_cache(maxsize=1)
def get_s3_client() -> Any:
    """Get a cached S3 client instance."""
    return boto3.client("s3", **_client_kwargs("s3"))


@lru_cache(maxsize=1)
def get_textract_client() -> Any:
    """Get a cached Textract client instance."""
    return boto3.client("textract", **_client_kwargs("textract"))


@lru_cache(maxsize=1)
def get_bedrock_agent_runtime_client() -> Any:
    """Get a cached Bedrock Agent Runtime client instance."""
    return boto3.client("bedrock-agent-runtime", **_client_kwargs("bedrock-agent-runtime"))


@lru_cache(maxsize=1)
def get_cognito_client() -> Any:
    """Get a cached Cognito Identity Provider client instance."""
    kwargs = _client_kwargs("cognito-idp")
    kwargs["region_name"] = get_settings().user_pool_region
    return boto3.client("cognito-idp", **kwargs)
