"""
Decode analysis documents into typed result records.
"""

from __future__ import annotations

import json
import logging
from typing import Any, BinaryIO, Dict

from pydantic import ValidationError

from analytics.core.errors import InvalidObjectKey, MalformedDocument
from analytics.schemas.results import AnalysisRecord
from analytics.services.kinds import KindDescriptor

logger = logging.getLogger(__name__)


def job_id_from_key(object_key: str) -> str:
    """Return the second path segment of ``<kind>/<jobId>/...``."""
    segments = object_key.split("/")
    if len(segments) < 3 or not segments[1]:
        raise InvalidObjectKey(
            f"Object key {object_key} does not contain a job identifier",
            object_key=object_key,
        )
    return segments[1]


class ResultDecoder:
    """Parse the archive entry and build the record for its kind."""

    def decode(
        self, stream: BinaryIO, kind: KindDescriptor, object_key: str
    ) -> AnalysisRecord:
        document = self._load_document(stream, object_key)
        payload: Dict[str, Any] = dict(document)

        if kind.job_id_from_key:
            payload["job_id"] = job_id_from_key(object_key)

        if kind.items_field is not None:
            items = document.get(kind.items_field)
            if not isinstance(items, list):
                items = []
            payload[kind.items_field] = items
            if not items:
                logger.info(kind.empty_message, extra={"object_key": object_key})

        try:
            return kind.record_model.model_validate(payload)  # type: ignore[return-value]
        except ValidationError as exc:
            raise MalformedDocument(
                f"{kind.kind.value} document {object_key} is malformed: "
                f"{exc.error_count()} invalid field(s): {_describe(exc)}",
                object_key=object_key,
            ) from exc

    @staticmethod
    def _load_document(stream: BinaryIO, object_key: str) -> Dict[str, Any]:
        try:
            text = stream.read().decode("utf-8-sig").lstrip()
            # The service writes JSON Lines; the first document is the result.
            document, end = json.JSONDecoder().raw_decode(text)
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise MalformedDocument(
                f"Document {object_key} is not valid JSON: {exc}", object_key=object_key
            ) from exc

        if text[end:].strip():
            logger.debug(
                "Ignoring content after the first document",
                extra={"object_key": object_key},
            )
        if not isinstance(document, dict):
            raise MalformedDocument(
                f"Document {object_key} is not a JSON object", object_key=object_key
            )
        return document


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )


__all__ = ["ResultDecoder", "job_id_from_key"]
