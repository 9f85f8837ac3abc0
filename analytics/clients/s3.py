"""
Amazon S3 client wrapper for reading result archives and writing CSV artifacts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import boto3
from boto3.exceptions import S3TransferFailedError
from botocore.exceptions import BotoCoreError, ClientError

from analytics.core.config import AWSSettings
from analytics.core.errors import ArchiveDownloadError, StorageWriteFailure


class S3Client:
    """Download archives and upload artifacts."""

    def __init__(self, settings: AWSSettings, client: Optional[Any] = None) -> None:
        self._settings = settings
        self._client = client or boto3.client(
            "s3",
            region_name=settings.region_name,
            endpoint_url=settings.endpoint_url,
        )

    def download_file(self, bucket: str, key: str, destination: Path) -> None:
        """Copy the object at ``bucket``/``key`` to a local path."""
        try:
            self._client.download_file(bucket, key, str(destination))
        except (BotoCoreError, ClientError, S3TransferFailedError) as exc:
            raise ArchiveDownloadError(
                f"Failed to download s3://{bucket}/{key}: {exc}", object_key=key
            ) from exc

    def put_bytes(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "text/csv",
    ) -> None:
        """Upload ``body`` as a whole object, replacing any existing one."""
        try:
            self._client.put_object(
                Bucket=bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageWriteFailure(
                f"Failed to upload s3://{bucket}/{key}: {exc}",
                sink="object_store",
                object_key=key,
            ) from exc


__all__ = ["S3Client"]
