"""Application settings loaded from environment variables."""

import os
from dataclasses import dataclass, field
from typing import Optional


DEFAULT_LOCALSTACK_ENDPOINT = "http://localhost:4566"

# Textract polling
TEXTRACT_POLL_INTERVAL_SECONDS = 1.0
TEXTRACT_MAX_POLL_ATTEMPTS = 120

# Document analysis
ANALYSIS_PREVIEW_LENGTH = 500
MAX_BACKGROUND_ANALYSIS_CHARS = 100_000

# Presigned URL lifetimes
UPLOAD_URL_EXPIRES_IN = 300
DOWNLOAD_URL_EXPIRES_IN = 1800


def _optional_env(name: str) -> Optional[str]:
    value = os.environ.get(name)
    return value or None


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    app_env: str = field(default_factory=lambda: os.environ.get("APP_ENV", "production"))
    aws_region: str = field(default_factory=lambda: os.environ.get("AWS_REGION", "us-east-1"))
    aws_endpoint_url: Optional[str] = field(default_factory=lambda: _optional_env("AWS_ENDPOINT_URL"))

    # DynamoDB tables
    clients_table: str = field(
        default_factory=lambda: os.environ.get("DYNAMODB_TABLE_CLIENTS", "clients")
    )
    packages_table: str = field(
        default_factory=lambda: os.environ.get("DYNAMODB_TABLE_PACKAGES", "packages")
    )
    file_numbers_table: str = field(
        default_factory=lambda: os.environ.get("DYNAMODB_TABLE_FILE_NUMBERS", "file-numbers")
    )
    workflows_table: str = field(
        default_factory=lambda: os.environ.get("DYNAMODB_TABLE_WORKFLOWS", "workflows")
    )
    documents_table: str = field(
        default_factory=lambda: os.environ.get("DYNAMODB_TABLE_DOCUMENTS", "documents")
    )

    # S3 buckets
    documents_bucket: str = field(
        default_factory=lambda: os.environ.get("S3_BUCKET_DOCUMENTS", "legal-documents")
    )
    extracted_text_bucket: Optional[str] = field(
        default_factory=lambda: _optional_env("S3_BUCKET_EXTRACTED_TEXT")
    )

    # Bedrock agent
    bedrock_agent_id: Optional[str] = field(default_factory=lambda: _optional_env("BEDROCK_AGENT_ID"))
    bedrock_agent_alias_id: Optional[str] = field(
        default_factory=lambda: _optional_env("BEDROCK_AGENT_ALIAS_ID")
    )

    # Cognito
    cognito_user_pool_id: Optional[str] = field(
        default_factory=lambda: _optional_env("COGNITO_USER_POOL_ID")
    )
    cognito_region: Optional[str] = field(default_factory=lambda: _optional_env("COGNITO_REGION"))

    # Feature flags
    enable_authentication: bool = field(
        default_factory=lambda: os.environ.get("ENABLE_AUTHENTICATION", "true").lower() == "true"
    )

    log_level: str = field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper())

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings instance from environment variables."""
        return cls()

    @property
    def is_development(self) -> bool:
        return self.app_env.lower() == "development"

    @property
    def endpoint_url(self) -> Optional[str]:
        """Endpoint override for AWS clients (LocalStack in development)."""
        if self.aws_endpoint_url:
            return self.aws_endpoint_url
        if self.is_development:
            return DEFAULT_LOCALSTACK_ENDPOINT
        return None

    @property
    def user_pool_region(self) -> str:
        """Region of the Cognito user pool, derived from the pool id when not set."""
        if self.cognito_region:
            return self.cognito_region
        if self.cognito_user_pool_id and "_" in self.cognito_user_pool_id:
            return self.cognito_user_pool_id.split("_", 1)[0]
        return self.aws_region

    @property
    def agent_configured(self) -> bool:
        return bool(self.bedrock_agent_id and self.bedrock_agent_alias_id)


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
