#!/usr/bin/env python3
"""Create the DynamoDB tables and S3 buckets the API expects in LocalStack.

Usage:
    APP_ENV=development python backend/scripts/init_localstack.py

Tables and buckets that already exist are left alone.
"""

import logging
import os
import sys
from typing import Any, Dict, List, Optional

from botocore.exceptions import ClientError
from dotenv import load_dotenv

load_dotenv()
os.environ.setdefault("APP_ENV", "development")

from legal_dashboard.shared.aws_clients import get_dynamodb_resource, get_s3_client  # noqa: E402
from legal_dashboard.shared.config import Settings, get_settings  # noqa: E402

logger = logging.getLogger("init_localstack")


def _gsi(index_name: str, attribute: str) -> Dict[str, Any]:
    return {
        "IndexName": index_name,
        "KeySchema": [{"AttributeName": attribute, "KeyType": "HASH"}],
        "Projection": {"ProjectionType": "ALL"},
    }


def _table(
    name: str,
    hash_key: str,
    range_key: Optional[str] = None,
    indexes: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    key_schema = [{"AttributeName": hash_key, "KeyType": "HASH"}]
    attributes = {hash_key}
    if range_key:
        key_schema.append({"AttributeName": range_key, "KeyType": "RANGE"})
        attributes.add(range_key)

    definition = {
        "TableName": name,
        "KeySchema": key_schema,
        "BillingMode": "PAY_PER_REQUEST",
    }
    if indexes:
        definition["GlobalSecondaryIndexes"] = [_gsi(index, attr) for index, attr in indexes.items()]
        attributes.update(indexes.values())

    definition["AttributeDefinitions"] = [
        {"AttributeName": attr, "AttributeType": "S"} for attr in sorted(attributes)
    ]
    return definition


def table_definitions(settings: Settings) -> List[Dict[str, Any]]:
    """CreateTable requests for every table the repositories use."""
    return [
        _table(settings.clients_table, "clientId", indexes={"userIdIndex": "userId"}),
        _table(
            settings.packages_table,
            "packageId",
            indexes={"clientIdIndex": "clientId", "fileNumberIdIndex": "fileNumberId"},
        ),
        _table(settings.file_numbers_table, "fileId", indexes={"packageIdIndex": "packageId"}),
        _table(settings.workflows_table, "workflowId", indexes={"packageIdIndex": "packageId"}),
        _table(settings.documents_table, "fileId", range_key="documentId"),
    ]


def create_tables(dynamodb_client: Any, definitions: List[Dict[str, Any]]) -> List[str]:
    created = []
    for definition in definitions:
        name = definition["TableName"]
        try:
            dynamodb_client.create_table(**definition)
        except ClientError as e:
            if e.response["Error"]["Code"] == "ResourceInUseException":
                logger.info(f"Table already exists: {name}")
                continue
            raise
        logger.info(f"Created table: {name}")
        created.append(name)
    return created


def create_buckets(s3_client: Any, settings: Settings) -> List[str]:
    """Create the documents and extracted-text buckets; only documents is versioned."""
    created = []
    buckets = [(settings.documents_bucket, True)]
    if settings.extracted_text_bucket:
        buckets.append((settings.extracted_text_bucket, False))

    for bucket, versioned in buckets:
        try:
            s3_client.create_bucket(Bucket=bucket)
            logger.info(f"Created bucket: {bucket}")
            created.append(bucket)
        except ClientError as e:
            if e.response["Error"]["Code"] not in ("BucketAlreadyOwnedByYou", "BucketAlreadyExists"):
                raise
            logger.info(f"Bucket already exists: {bucket}")

        if versioned:
            s3_client.put_bucket_versioning(
                Bucket=bucket, VersioningConfiguration={"Status": "Enabled"}
            )
    return created


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    settings = get_settings()
    logger.info(f"Initializing LocalStack at {settings.endpoint_url}")

    try:
        create_tables(get_dynamodb_resource().meta.client, table_definitions(settings))
        create_buckets(get_s3_client(), settings)
    except ClientError as e:
        logger.error(f"Initialization failed: {e}")
        return 1

    if not settings.extracted_text_bucket:
        logger.warning("S3_BUCKET_EXTRACTED_TEXT not set - no extracted text bucket created")
    logger.info("LocalStack initialization complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())
