"""
Event shapes delivered to the results Lambda.
"""

from __future__ import annotations

from typing import List, TypedDict


class S3Bucket(TypedDict):
    name: str


class S3Object(TypedDict, total=False):
    key: str
    size: int
    eTag: str


class S3Entity(TypedDict):
    bucket: S3Bucket
    object: S3Object


class S3EventRecord(TypedDict, total=False):
    """One record of an S3 event notification."""

    eventSource: str
    eventName: str
    s3: S3Entity


class SQSEventRecord(TypedDict, total=False):
    """An SQS message whose body carries an S3 event."""

    messageId: str
    body: str


class LambdaResponse(TypedDict):
    status: str
    processed: int
    skipped: int
    failed: int


__all__ = [
    "LambdaResponse",
    "S3EventRecord",
    "SQSEventRecord",
]
