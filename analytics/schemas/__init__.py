"""Public schema exports."""

from .notifications import BatchReport, Notification, NotificationOutcome
from .results import (
    AnalysisRecord,
    EntitiesResult,
    Entity,
    KeyPhrase,
    KeyPhrasesResult,
    SentimentResult,
    SentimentScore,
)

__all__ = [
    "AnalysisRecord",
    "BatchReport",
    "EntitiesResult",
    "Entity",
    "KeyPhrase",
    "KeyPhrasesResult",
    "Notification",
    "NotificationOutcome",
    "SentimentResult",
    "SentimentScore",
]
