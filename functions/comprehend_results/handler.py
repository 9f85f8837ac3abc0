"""
AWS Lambda entrypoint for processing text-analytics result archives.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union
from urllib.parse import unquote_plus

from pydantic import ValidationError

from analytics.clients import DynamoDBClient, S3Client
from analytics.core.config import AppSettings, get_settings
from analytics.core.logging import configure_logging
from analytics.schemas import Notification
from analytics.services import (
    ArchiveReader,
    Dispatcher,
    RecordFormatter,
    ResultDecoder,
    StatusTableUpdater,
)
from functions.comprehend_results.models import (
    LambdaResponse,
    S3EventRecord,
    SQSEventRecord,
)

logger = logging.getLogger(__name__)

SUCCESS_TOKEN = "Ok"


def build_dispatcher(
    settings: AppSettings,
    *,
    s3_client: Optional[S3Client] = None,
    dynamodb_client: Optional[DynamoDBClient] = None,
) -> Dispatcher:
    """Wire the pipeline from explicit client handles."""
    s3_client = s3_client or S3Client(settings.aws)
    dynamodb_client = dynamodb_client or DynamoDBClient(settings.aws)
    return Dispatcher(
        archive_reader=ArchiveReader(s3_client, temp_dir=settings.pipeline.temp_dir),
        decoder=ResultDecoder(),
        formatter=RecordFormatter(settings.pipeline.output_prefix),
        s3_client=s3_client,
        status_table=StatusTableUpdater(dynamodb_client),
        output_bucket=settings.pipeline.output_bucket,
    )


@lru_cache()
def _default_dispatcher() -> Dispatcher:
    """Build the dispatcher once per warm Lambda container."""
    settings = get_settings()
    configure_logging(settings.log_level)
    return build_dispatcher(settings)


def parse_notifications(event: Mapping[str, Any]) -> List[Notification]:
    """Flatten S3 records, including ones wrapped in SQS messages."""
    return list(_iter_notifications(event.get("Records") or []))


def _iter_notifications(
    records: List[Union[S3EventRecord, SQSEventRecord]],
) -> Iterator[Notification]:
    for record in records:
        if "s3" in record:
            notification = _notification_from_s3(record)
            if notification is not None:
                yield notification
            continue

        body = record.get("body")
        if body is None:
            logger.error("Skipping record without s3 entity or body: %s", record)
            continue
        try:
            message = json.loads(body)
        except json.JSONDecodeError:
            logger.error("Skipping record with non-JSON body: %s", body)
            continue
        if not isinstance(message, dict):
            logger.error("Skipping record with unexpected body: %s", body)
            continue
        if message.get("Event") == "s3:TestEvent":
            logger.info("Ignoring S3 test event")
            continue
        yield from _iter_notifications(message.get("Records") or [])


def _notification_from_s3(record: S3EventRecord) -> Optional[Notification]:
    s3 = record.get("s3") or {}
    bucket = (s3.get("bucket") or {}).get("name")
    key = (s3.get("object") or {}).get("key")
    try:
        return Notification(bucket=bucket, object_key=unquote_plus(key or ""))
    except ValidationError:
        logger.error("Skipping S3 record without bucket or key: %s", record)
        return None


def lambda_handler(
    event: Dict[str, Any],
    context: Any,
    dispatcher: Optional[Dispatcher] = None,
) -> LambdaResponse:
    """
    AWS Lambda handler invoked by S3 notifications.

    Notifications are processed sequentially. The response always carries the
    ``Ok`` token; failures are reported through the ``failed`` count and logs
    and are retried only through redelivery.
    """
    dispatcher = dispatcher or _default_dispatcher()
    notifications = parse_notifications(event)
    if not notifications:
        logger.warning("No records found in event payload.")

    report = dispatcher.handle(notifications)
    if report.failed:
        logger.error(
            "%d of %d notifications failed",
            report.failed,
            len(report.outcomes),
            extra={
                "failed_keys": [
                    outcome.object_key
                    for outcome in report.outcomes
                    if outcome.status == "failed"
                ]
            },
        )

    return {
        "status": SUCCESS_TOKEN,
        "processed": report.processed,
        "skipped": report.skipped,
        "failed": report.failed,
    }


__all__ = ["build_dispatcher", "lambda_handler", "parse_notifications"]
