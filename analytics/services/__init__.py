"""Service layer exports."""

from .archive_reader import ArchiveReader
from .dispatcher import Dispatcher
from .kinds import KINDS, KindDescriptor, ResultKind
from .record_formatter import CsvArtifact, RecordFormatter
from .result_decoder import ResultDecoder, job_id_from_key
from .status_table import StatusTableUpdater

__all__ = [
    "ArchiveReader",
    "CsvArtifact",
    "Dispatcher",
    "KINDS",
    "KindDescriptor",
    "RecordFormatter",
    "ResultDecoder",
    "ResultKind",
    "StatusTableUpdater",
    "job_id_from_key",
]
