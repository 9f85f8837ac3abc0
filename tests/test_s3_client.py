try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from pathlib import Path

import pytest
from boto3.exceptions import S3TransferFailedError
from botocore.exceptions import ClientError

from analytics.clients import S3Client
from analytics.core.config import AWSSettings
from analytics.core.errors import ArchiveDownloadError, StorageWriteFailure


def _client_error(code: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, operation)


class StubBotoS3:
    def __init__(self, error: Exception | None = None) -> None:
        self.downloads: list[tuple[str, str, str]] = []
        self.puts: list[dict] = []
        self._error = error

    def download_file(self, bucket: str, key: str, filename: str) -> None:
        if self._error is not None:
            raise self._error
        self.downloads.append((bucket, key, filename))

    def put_object(self, **kwargs) -> dict:
        if self._error is not None:
            raise self._error
        self.puts.append(kwargs)
        return {"ETag": '"abc"'}


def test_put_bytes_uploads_csv(tmp_path: Path) -> None:
    boto = StubBotoS3()
    client = S3Client(AWSSettings(), client=boto)

    client.put_bytes("bucket", "analytics/keyPhrases/job.csv", b"JobId,Phrase,Score\n")

    assert boto.puts == [
        {
            "Bucket": "bucket",
            "Key": "analytics/keyPhrases/job.csv",
            "Body": b"JobId,Phrase,Score\n",
            "ContentType": "text/csv",
        }
    ]


def test_download_file_targets_local_path(tmp_path: Path) -> None:
    boto = StubBotoS3()
    destination = tmp_path / "archive"

    S3Client(AWSSettings(), client=boto).download_file("bucket", "key", destination)

    assert boto.downloads == [("bucket", "key", str(destination))]


def test_download_errors_are_archive_errors(tmp_path: Path) -> None:
    client = S3Client(AWSSettings(), client=StubBotoS3(_client_error("404", "HeadObject")))

    with pytest.raises(ArchiveDownloadError) as excinfo:
        client.download_file("bucket", "key", tmp_path / "archive")

    assert excinfo.value.object_key == "key"


def test_upload_errors_are_storage_write_failures() -> None:
    client = S3Client(AWSSettings(), client=StubBotoS3(_client_error("AccessDenied", "PutObject")))

    with pytest.raises(StorageWriteFailure) as excinfo:
        client.put_bytes("bucket", "key.csv", b"")

    assert excinfo.value.sink == "object_store"


def test_transfer_failures_are_archive_errors(tmp_path: Path) -> None:
    error = S3TransferFailedError("Failed to download bucket/key: connection reset")
    client = S3Client(AWSSettings(), client=StubBotoS3(error))

    with pytest.raises(ArchiveDownloadError) as excinfo:
        client.download_file("bucket", "key", tmp_path / "archive")

    assert excinfo.value.__cause__ is error
