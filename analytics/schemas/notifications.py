"""
Models describing incoming storage notifications and their processing outcome.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field

OutcomeStatus = Literal["processed", "skipped", "failed"]


class Notification(BaseModel):
    """One completed analysis object announced by the trigger."""

    bucket: str = Field(..., min_length=1)
    object_key: str = Field(..., min_length=1)

    @property
    def prefix(self) -> str:
        """First path segment of the object key; empty when there is none."""
        head, sep, _ = self.object_key.partition("/")
        return head if sep else ""


class NotificationOutcome(BaseModel):
    """What happened to a single notification."""

    bucket: str
    object_key: str
    status: OutcomeStatus
    kind: Optional[str] = None
    job_id: Optional[str] = None
    error: Optional[str] = None


class BatchReport(BaseModel):
    """Per-notification results for one invocation."""

    outcomes: List[NotificationOutcome] = Field(default_factory=list)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def processed(self) -> int:
        return self._count("processed")

    @property
    def skipped(self) -> int:
        return self._count("skipped")

    @property
    def failed(self) -> int:
        return self._count("failed")


__all__ = [
    "BatchReport",
    "Notification",
    "NotificationOutcome",
    "OutcomeStatus",
]
