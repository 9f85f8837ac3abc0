"""
Exception hierarchy for the results pipeline.

Every error raised here is fatal for the single notification that caused it;
the dispatcher records it and moves on to the next notification.
"""

from __future__ import annotations

from typing import Optional


class AnalyticsError(Exception):
    """Base exception for all pipeline errors."""

    def __init__(self, message: str, *, object_key: Optional[str] = None) -> None:
        super().__init__(message)
        self.object_key = object_key


class ArchiveError(AnalyticsError):
    """The result archive could not be opened."""


class ArchiveDownloadError(ArchiveError):
    """The archive could not be fetched from object storage."""


class UnsupportedCompression(ArchiveError):
    """The outer compression layer was not recognised."""


class UnsupportedArchive(ArchiveError):
    """The container layer was not recognised."""


class EmptyArchive(ArchiveError):
    """The container holds no regular file entry."""


class CorruptArchive(ArchiveError):
    """Compressed data or container structure is damaged."""


class MalformedDocument(AnalyticsError):
    """A required field is missing or has the wrong type."""


class InvalidObjectKey(AnalyticsError):
    """The object key does not carry a job identifier where one is expected."""


class StorageWriteFailure(AnalyticsError):
    """The object store or the status table rejected a write."""

    def __init__(
        self, message: str, *, sink: str, object_key: Optional[str] = None
    ) -> None:
        super().__init__(message, object_key=object_key)
        self.sink = sink


__all__ = [
    "AnalyticsError",
    "ArchiveDownloadError",
    "ArchiveError",
    "CorruptArchive",
    "EmptyArchive",
    "InvalidObjectKey",
    "MalformedDocument",
    "StorageWriteFailure",
    "UnsupportedArchive",
    "UnsupportedCompression",
]
