"""
Route storage notifications to the result pipeline.

For every notification the CSV artifact is uploaded before the status table
is touched. The two writes are not atomic: if the table update fails the CSV
stays in place and the row is stale until the notification is redelivered.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from analytics.clients import S3Client
from analytics.core.errors import AnalyticsError
from analytics.schemas import BatchReport, Notification, NotificationOutcome
from analytics.services.archive_reader import ArchiveReader
from analytics.services.kinds import KINDS, KindDescriptor
from analytics.services.record_formatter import RecordFormatter
from analytics.services.result_decoder import ResultDecoder
from analytics.services.status_table import StatusTableUpdater

logger = logging.getLogger(__name__)


class Dispatcher:
    """Classify notifications by key prefix and run each through its kind."""

    def __init__(
        self,
        *,
        archive_reader: ArchiveReader,
        decoder: ResultDecoder,
        formatter: RecordFormatter,
        s3_client: S3Client,
        status_table: StatusTableUpdater,
        output_bucket: Optional[str] = None,
        kinds: Optional[Dict[str, KindDescriptor]] = None,
    ) -> None:
        self._reader = archive_reader
        self._decoder = decoder
        self._formatter = formatter
        self._s3 = s3_client
        self._status_table = status_table
        self._output_bucket = output_bucket
        self._kinds = kinds if kinds is not None else KINDS

    def handle(self, notifications: Iterable[Notification]) -> BatchReport:
        """Process every notification; one failure never stops the batch."""
        logger.info("Processing S3 events.")
        report = BatchReport()
        for notification in notifications:
            report.outcomes.append(self._dispatch(notification))

        logger.info(
            "Finished batch: %d processed, %d skipped, %d failed",
            report.processed,
            report.skipped,
            report.failed,
        )
        return report

    def _dispatch(self, notification: Notification) -> NotificationOutcome:
        key = notification.object_key
        kind = self._kinds.get(notification.prefix)
        if kind is None:
            logger.warning(
                "Unknown event type %s", notification.prefix, extra={"object_key": key}
            )
            return NotificationOutcome(
                bucket=notification.bucket, object_key=key, status="skipped"
            )

        try:
            job_id = self._process(notification, kind)
        except AnalyticsError as exc:
            logger.error(
                "Failed processing %s: %s",
                key,
                exc,
                extra={"object_key": key, "kind": kind.kind.value},
            )
            return self._failed(notification, kind, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception(
                "Unexpected failure while processing %s",
                key,
                extra={"object_key": key, "kind": kind.kind.value},
            )
            return self._failed(notification, kind, exc)

        return NotificationOutcome(
            bucket=notification.bucket,
            object_key=key,
            status="processed",
            kind=kind.kind.value,
            job_id=job_id,
        )

    def _process(self, notification: Notification, kind: KindDescriptor) -> str:
        key = notification.object_key
        logger.info("Processing %s", kind.kind.value, extra={"object_key": key})

        with self._reader.open_document(notification.bucket, key) as stream:
            record = self._decoder.decode(stream, kind, key)

        artifact = self._formatter.to_csv(record, kind)
        self._s3.put_bytes(
            self._output_bucket or notification.bucket,
            artifact.key,
            artifact.to_bytes(),
        )

        if kind.table_attribute is not None and kind.table_values is not None:
            self._status_table.update(
                record.job_id, kind.table_attribute, kind.table_values(record)
            )
        return record.job_id

    @staticmethod
    def _failed(
        notification: Notification, kind: KindDescriptor, exc: Exception
    ) -> NotificationOutcome:
        return NotificationOutcome(
            bucket=notification.bucket,
            object_key=notification.object_key,
            status="failed",
            kind=kind.kind.value,
            error=f"{type(exc).__name__}: {exc}",
        )


__all__ = ["Dispatcher"]
