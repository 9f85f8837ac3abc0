"""
Utility wrapper for enriching job status rows in DynamoDB.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from analytics.core.config import AWSSettings
from analytics.core.errors import StorageWriteFailure


def _to_dynamo(value: Any) -> Any:
    """DynamoDB rejects floats; route numbers through Decimal."""
    return json.loads(json.dumps(value), parse_float=Decimal)


class DynamoDBClient:
    """Partial attribute updates against the status table."""

    def __init__(self, settings: AWSSettings, table: Optional[Any] = None) -> None:
        self._settings = settings
        if table is None:
            resource = boto3.resource(
                "dynamodb",
                region_name=settings.region_name,
                endpoint_url=settings.endpoint_url,
            )
            table = resource.Table(settings.status_table_name)
        self._table = table

    @property
    def table_name(self) -> str:
        return self._settings.status_table_name

    def update_attribute(self, key: Dict[str, Any], attribute: str, value: Any) -> None:
        """Replace one attribute of the item at ``key`` without touching the rest."""
        try:
            self._table.update_item(
                Key=key,
                UpdateExpression="SET #attr = :value",
                ExpressionAttributeNames={"#attr": attribute},
                ExpressionAttributeValues={":value": _to_dynamo(value)},
            )
        except (BotoCoreError, ClientError) as exc:
            raise StorageWriteFailure(
                f"Failed to update {attribute} on {key} in {self.table_name}: {exc}",
                sink="status_table",
            ) from exc


__all__ = ["DynamoDBClient"]
