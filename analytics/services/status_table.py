"""
Merge extracted results into the job status table.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Sequence

from analytics.clients import DynamoDBClient

logger = logging.getLogger(__name__)


class StatusTableUpdater:
    """Replace one attribute on the status row of a job.

    The write is unconditional: there is no read beforehand and the last
    write for a given job and attribute wins.
    """

    KEY_ATTRIBUTE = "id"

    def __init__(self, dynamodb_client: DynamoDBClient) -> None:
        self._dynamodb = dynamodb_client

    def update(
        self, job_id: str, attribute_name: str, values: Sequence[Dict[str, Any]]
    ) -> None:
        logger.info(
            "Updating %s on status record",
            attribute_name,
            extra={"job_id": job_id, "count": len(values)},
        )
        self._dynamodb.update_attribute(
            {self.KEY_ATTRIBUTE: job_id}, attribute_name, list(values)
        )


__all__ = ["StatusTableUpdater"]
