"""S3 operations on original documents (presigned URLs, uploads, versions)."""

import logging
from typing import Any, Dict, List, Optional

from legal_dashboard.shared.aws_clients import get_s3_client
from legal_dashboard.shared.config import (
    DOWNLOAD_URL_EXPIRES_IN,
    UPLOAD_URL_EXPIRES_IN,
    get_settings,
)

logger = logging.getLogger(__name__)


class DocumentStorageService:
    """Original uploads in the (versioned) documents bucket."""

    def __init__(self, bucket: Optional[str] = None, s3_client: Any = None):
        self.bucket = bucket or get_settings().documents_bucket
        self._s3 = s3_client or get_s3_client()

    def generate_upload_url(self, s3_key: str, content_type: str,
                            expires_in: int = UPLOAD_URL_EXPIRES_IN) -> str:
        """Presigned PUT URL; the browser must send the same Content-Type."""
        return self._s3.generate_presigned_url(
            "put_object",
            Params={"Bucket": self.bucket, "Key": s3_key, "ContentType": content_type},
            ExpiresIn=expires_in,
        )

    def generate_download_url(self, s3_key: str, expires_in: int = DOWNLOAD_URL_EXPIRES_IN) -> str:
        return self._s3.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": s3_key},
            ExpiresIn=expires_in,
        )

    def put_document(self, s3_key: str, body: bytes, content_type: Optional[str],
                     client_id: str, file_number: str) -> Optional[str]:
        """
        Store an uploaded original.

        Returns:
            The new S3 VersionId, or None when the bucket is unversioned
        """
        response = self._s3.put_object(
            Bucket=self.bucket,
            Key=s3_key,
            Body=body,
            ContentType=content_type or "application/octet-stream",
            Metadata={"clientid": client_id, "filenumber": file_number},
        )
        logger.info(f"Uploaded {len(body)} bytes to s3://{self.bucket}/{s3_key}")
        return response.get("VersionId")

    def get_document(self, s3_key: str) -> bytes:
        response = self._s3.get_object(Bucket=self.bucket, Key=s3_key)
        return response["Body"].read()

    def get_version_id(self, s3_key: str) -> Optional[str]:
        """VersionId of the current object, from a HEAD request."""
        response = self._s3.head_object(Bucket=self.bucket, Key=s3_key)
        return response.get("VersionId")

    def list_versions(self, s3_key: str) -> List[Dict[str, Any]]:
        """
        List every stored version of exactly ``s3_key``.

        The S3 prefix filter also matches longer keys, so results are
        narrowed to exact key matches.
        """
        response = self._s3.list_object_versions(Bucket=self.bucket, Prefix=s3_key)
        versions = []
        for version in response.get("Versions", []):
            if version.get("Key") != s3_key:
                continue
            last_modified = version.get("LastModified")
            versions.append({
                "versionId": version.get("VersionId"),
                "isLatest": bool(version.get("IsLatest")),
                "lastModified": last_modified.isoformat() if hasattr(last_modified, "isoformat") else last_modified,
                "size": version.get("Size"),
            })
        return versions


_service_instance: Optional[DocumentStorageService] = None


def get_storage_service() -> DocumentStorageService:
    """Get or create the global DocumentStorageService instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = DocumentStorageService()
    return _service_instance
