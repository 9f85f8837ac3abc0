"""Expose constructed client wrappers."""

from .dynamodb import DynamoDBClient
from .s3 import S3Client

__all__ = [
    "DynamoDBClient",
    "S3Client",
]
