"""Gzip-compressed text artifacts in S3."""

import gzip
import json
import logging
from typing import Any, Optional, Tuple

from legal_dashboard.shared.aws_clients import get_s3_client
from legal_dashboard.shared.config import get_settings
from legal_dashboard.shared.errors import StorageConfigurationError

logger = logging.getLogger(__name__)


class TextStore:
    """
    Reads and writes UTF-8 text to the extracted-text bucket.

    Text is always gzip-compressed on write. On read it is decompressed
    when the object says so (ContentEncoding) or the key ends in ``.gz``.
    """

    def __init__(self, bucket: Optional[str] = None, s3_client: Any = None):
        self.bucket = bucket if bucket is not None else get_settings().extracted_text_bucket
        self._s3 = s3_client or get_s3_client()

    def _require_bucket(self) -> str:
        if not self.bucket:
            raise StorageConfigurationError(
                "S3_BUCKET_EXTRACTED_TEXT is not configured"
            )
        return self.bucket

    def put_text(self, key: str, text: str) -> Tuple[str, int]:
        """
        Compress and store text.

        Returns:
            (key, compressed size in bytes)
        """
        bucket = self._require_bucket()
        if not key:
            raise ValueError("S3 key is required")

        body = gzip.compress((text or "").encode("utf-8"))
        self._s3.put_object(
            Bucket=bucket,
            Key=key,
            Body=body,
            ContentType="text/plain; charset=utf-8",
            ContentEncoding="gzip",
        )
        logger.debug(f"Stored {len(body)} compressed bytes at s3://{bucket}/{key}")
        return key, len(body)

    def get_text(self, key: str) -> str:
        bucket = self._require_bucket()
        if not key:
            raise ValueError("S3 key is required")

        response = self._s3.get_object(Bucket=bucket, Key=key)
        raw = response["Body"].read()

        if response.get("ContentEncoding") == "gzip" or key.endswith(".gz"):
            raw = gzip.decompress(raw)
        return raw.decode("utf-8", errors="replace")

    def put_json(self, key: str, value: Any) -> Tuple[str, int]:
        return self.put_text(key, json.dumps(value))

    def get_json(self, key: str) -> Any:
        return json.loads(self.get_text(key))
