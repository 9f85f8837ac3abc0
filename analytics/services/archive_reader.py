"""
Fetch result archives from S3 and expose the single document they contain.

Archives are downloaded to a scratch directory that only lives for the
duration of one ``open_document`` block.
"""

from __future__ import annotations

import bz2
import gzip
import io
import logging
import lzma
import tarfile
import tempfile
import uuid
import zipfile
import zlib
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional, Tuple

from analytics.clients import S3Client
from analytics.core.errors import (
    CorruptArchive,
    EmptyArchive,
    UnsupportedArchive,
    UnsupportedCompression,
)

logger = logging.getLogger(__name__)

_Opener = Callable[[BinaryIO], BinaryIO]

_COMPRESSIONS: Tuple[Tuple[bytes, str, _Opener], ...] = (
    (b"\x1f\x8b", "gzip", lambda raw: gzip.GzipFile(fileobj=raw, mode="rb")),
    (b"BZh", "bzip2", lambda raw: bz2.BZ2File(raw)),
    (b"\xfd7zXZ\x00", "xz", lambda raw: lzma.LZMAFile(raw)),
)

_ZIP_MAGIC = b"PK\x03\x04"

_DECODE_ERRORS = (
    OSError,
    EOFError,
    zlib.error,
    lzma.LZMAError,
    tarfile.TarError,
    zipfile.BadZipFile,
)


class ArchiveReader:
    """Download, decompress and unwrap a single-entry result archive."""

    def __init__(self, s3_client: S3Client, temp_dir: Optional[str] = None) -> None:
        self._s3 = s3_client
        self._temp_dir = temp_dir

    @contextmanager
    def open_document(self, bucket: str, key: str) -> Iterator[BinaryIO]:
        """Yield a binary stream positioned at the start of the archive's entry."""
        logger.info("Downloading %s from bucket %s", key, bucket)
        with tempfile.TemporaryDirectory(prefix="analytics-", dir=self._temp_dir) as workdir:
            local_path = Path(workdir) / f"{uuid.uuid4()}.archive"
            self._s3.download_file(bucket, key, local_path)
            with ExitStack() as stack:
                raw = stack.enter_context(local_path.open("rb"))
                try:
                    decompressed = stack.enter_context(self._decompress(raw, key))
                    entry = self._first_entry(decompressed, key, stack)
                    yield entry
                except _DECODE_ERRORS as exc:
                    raise CorruptArchive(
                        f"Could not read archive {key}: {exc}", object_key=key
                    ) from exc

    fetch = open_document

    @staticmethod
    def _decompress(raw: BinaryIO, key: str) -> BinaryIO:
        magic = raw.read(6)
        raw.seek(0)
        for signature, name, opener in _COMPRESSIONS:
            if magic.startswith(signature):
                logger.debug("Detected %s compression", name, extra={"object_key": key})
                return opener(raw)
        raise UnsupportedCompression(
            f"Unrecognised compression format for {key}", object_key=key
        )

    @staticmethod
    def _first_entry(stream: BinaryIO, key: str, stack: ExitStack) -> BinaryIO:
        header = stream.read(len(_ZIP_MAGIC))
        stream.seek(0)

        if header == _ZIP_MAGIC:
            # Zip needs random access from the end, which compressed streams lack.
            archive = stack.enter_context(zipfile.ZipFile(io.BytesIO(stream.read())))
            for info in archive.infolist():
                if not info.is_dir():
                    return stack.enter_context(archive.open(info))
            raise EmptyArchive(f"Archive {key} contains no files", object_key=key)

        is_tar = tarfile.is_tarfile(stream)
        stream.seek(0)
        if is_tar:
            archive = stack.enter_context(tarfile.open(fileobj=stream, mode="r:"))
            for member in archive:
                if member.isfile():
                    extracted = archive.extractfile(member)
                    if extracted is not None:
                        return stack.enter_context(extracted)
            raise EmptyArchive(f"Archive {key} contains no files", object_key=key)

        raise UnsupportedArchive(f"Unrecognised archive format for {key}", object_key=key)


__all__ = ["ArchiveReader"]
