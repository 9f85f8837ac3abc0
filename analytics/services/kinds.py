"""
Per-kind descriptors driving the single result pipeline.

Each descriptor says where the job identifier comes from, which model the
document decodes into, how CSV rows are laid out and which status-table
attribute (if any) receives the structured values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Type

from pydantic import BaseModel

from analytics.schemas.results import (
    EntitiesResult,
    KeyPhrasesResult,
    SentimentResult,
)


class ResultKind(str, Enum):
    """Category of analysis result."""

    KEY_PHRASES = "KeyPhrases"
    SENTIMENT = "Sentiment"
    ENTITIES = "Entities"


@dataclass(frozen=True)
class KindDescriptor:
    """Everything the pipeline needs to know about one result kind."""

    kind: ResultKind
    prefix: str
    record_model: Type[BaseModel]
    csv_header: Tuple[str, ...]
    rows: Callable[[Any], List[Sequence[Any]]]
    job_id_from_key: bool = True
    items_field: Optional[str] = None
    empty_message: str = ""
    table_attribute: Optional[str] = None
    table_values: Optional[Callable[[Any], List[Dict[str, Any]]]] = None


def _key_phrase_rows(record: KeyPhrasesResult) -> List[Sequence[Any]]:
    return [(record.job_id, phrase.text, phrase.score) for phrase in record.key_phrases]


def _key_phrase_values(record: KeyPhrasesResult) -> List[Dict[str, Any]]:
    return [{"Text": phrase.text, "Score": phrase.score} for phrase in record.key_phrases]


def _sentiment_rows(record: SentimentResult) -> List[Sequence[Any]]:
    scores = record.sentiment_score
    return [
        (
            record.job_id,
            record.sentiment,
            scores.mixed,
            scores.negative,
            scores.neutral,
            scores.positive,
        )
    ]


def _entity_rows(record: EntitiesResult) -> List[Sequence[Any]]:
    return [
        (record.job_id, entity.type, entity.text, entity.score)
        for entity in record.entities
    ]


def _entity_values(record: EntitiesResult) -> List[Dict[str, Any]]:
    return [
        {"Text": entity.text, "Type": entity.type, "Score": entity.score}
        for entity in record.entities
    ]


KEY_PHRASES = KindDescriptor(
    kind=ResultKind.KEY_PHRASES,
    prefix="keyPhrases",
    record_model=KeyPhrasesResult,
    csv_header=("JobId", "Phrase", "Score"),
    rows=_key_phrase_rows,
    items_field="KeyPhrases",
    empty_message="No phrases found.",
    table_attribute="KeyPhrases",
    table_values=_key_phrase_values,
)

SENTIMENT = KindDescriptor(
    kind=ResultKind.SENTIMENT,
    prefix="sentiment",
    record_model=SentimentResult,
    csv_header=("jobId", "Sentiment", "Mixed", "Negative", "Neutral", "Positive"),
    rows=_sentiment_rows,
    job_id_from_key=False,
)

ENTITIES = KindDescriptor(
    kind=ResultKind.ENTITIES,
    prefix="entities",
    record_model=EntitiesResult,
    csv_header=("jobId", "type", "text", "score"),
    rows=_entity_rows,
    items_field="Entities",
    empty_message="No entities found.",
    table_attribute="entities",
    table_values=_entity_values,
)

KINDS: Dict[str, KindDescriptor] = {
    descriptor.prefix: descriptor for descriptor in (KEY_PHRASES, SENTIMENT, ENTITIES)
}


__all__ = [
    "ENTITIES",
    "KEY_PHRASES",
    "KINDS",
    "KindDescriptor",
    "ResultKind",
    "SENTIMENT",
]
