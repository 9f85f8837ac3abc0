"""
Pydantic models for the documents written by the text-analytics service.

Field aliases mirror the service's PascalCase JSON keys.
"""

from typing import List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

JOB_ID_LENGTH = 36

SentimentLabel = Literal["POSITIVE", "NEGATIVE", "NEUTRAL", "MIXED"]


class _ResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", allow_inf_nan=False)


class KeyPhrase(_ResultModel):
    """A single phrase detected in the source text."""

    text: str = Field(..., alias="Text")
    score: float = Field(..., alias="Score", description="Confidence in [0, 1].")


class Entity(_ResultModel):
    """A named entity detected in the source text."""

    text: str = Field(..., alias="Text")
    type: str = Field(..., alias="Type", description="Entity category, e.g. PERSON.")
    score: float = Field(..., alias="Score")


class SentimentScore(_ResultModel):
    """Per-label confidences; expected to sum to roughly 1.0."""

    mixed: float = Field(..., alias="Mixed")
    negative: float = Field(..., alias="Negative")
    neutral: float = Field(..., alias="Neutral")
    positive: float = Field(..., alias="Positive")


class KeyPhrasesResult(_ResultModel):
    """Key phrases for one job, identified by the object key."""

    job_id: str
    key_phrases: List[KeyPhrase] = Field(default_factory=list, alias="KeyPhrases")


class EntitiesResult(_ResultModel):
    """Entities for one job, identified by the object key."""

    job_id: str
    entities: List[Entity] = Field(default_factory=list, alias="Entities")


class SentimentResult(_ResultModel):
    """Overall sentiment of one transcript."""

    sentiment: SentimentLabel = Field(..., alias="Sentiment")
    file: str = Field(..., alias="File", min_length=JOB_ID_LENGTH)
    sentiment_score: SentimentScore = Field(..., alias="SentimentScore")

    @property
    def job_id(self) -> str:
        """The input file name starts with the job's UUID."""
        return self.file[:JOB_ID_LENGTH]


AnalysisRecord = Union[KeyPhrasesResult, SentimentResult, EntitiesResult]


__all__ = [
    "AnalysisRecord",
    "EntitiesResult",
    "Entity",
    "JOB_ID_LENGTH",
    "KeyPhrase",
    "KeyPhrasesResult",
    "SentimentLabel",
    "SentimentResult",
    "SentimentScore",
]
