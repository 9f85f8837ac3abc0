"""
Render result records as CSV artifacts.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, List, Sequence, Tuple

from analytics.schemas.results import AnalysisRecord
from analytics.services.kinds import KindDescriptor


@dataclass(frozen=True)
class CsvArtifact:
    """A header plus rows, destined for a single object key."""

    key: str
    header: Tuple[str, ...]
    rows: List[Sequence[Any]] = field(default_factory=list)

    def render(self) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(self.header)
        writer.writerows(self.rows)
        return buffer.getvalue()

    def to_bytes(self) -> bytes:
        return self.render().encode("utf-8")


class RecordFormatter:
    """Lay out records using the fixed per-kind schema."""

    def __init__(self, output_prefix: str = "analytics") -> None:
        self._output_prefix = output_prefix.strip("/")

    def artifact_key(self, kind: KindDescriptor, job_id: str) -> str:
        """``<prefix>/<kind>/<jobId>.csv``"""
        parts = [self._output_prefix, kind.prefix, f"{job_id}.csv"]
        return "/".join(part for part in parts if part)

    def to_csv(self, record: AnalysisRecord, kind: KindDescriptor) -> CsvArtifact:
        return CsvArtifact(
            key=self.artifact_key(kind, record.job_id),
            header=kind.csv_header,
            rows=kind.rows(record),
        )


__all__ = ["CsvArtifact", "RecordFormatter"]
