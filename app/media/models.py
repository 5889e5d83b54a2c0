from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# Job statuses, in the order a successful job moves through them.
RECEIVED = "received"
DOWNLOADED = "downloaded"
TRANSCRIBED = "transcribed"
EXTRACTED = "extracted"
PERSISTED = "persisted"
FAILED = "failed"

STATUS_ORDER = (RECEIVED, DOWNLOADED, TRANSCRIBED, EXTRACTED, PERSISTED)
TERMINAL_STATUSES = {PERSISTED, FAILED}

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_ITEM = "Unknown Item"

# Raw JSON object returned by the extraction model, before mapping.
RecordCandidate = Dict[str, Any]


@dataclass(frozen=True)
class VoiceNoteEvent:
    """Inbound event: a user sent a voice recording."""

    sender_id: int | str
    file_ref: str


@dataclass
class ExtractedRecord:
    """
    Finalized record, ready for the structured store.

    Fields:
        category: Free-text label, "Uncategorized" when missing.
        amount: Non-negative number, 0 when missing or non-numeric.
        item: Short title, "Unknown Item" when missing.
        date: "YYYY-MM-DD", today's UTC date when missing or unparseable.
        summary: Verbatim transcript, never taken from the model output.
    """

    category: str
    amount: float | int
    item: str
    date: str
    summary: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "amount": self.amount,
            "item": self.item,
            "date": self.date,
            "summary": self.summary,
        }


@dataclass
class VoiceJob:
    """
    One incoming voice note, tracked from receipt to a terminal outcome.

    Fields:
        sender_id: Telegram user id of the sender (chat-scoped).
        file_ref: Telegram file_id of the voice recording.
        local_artifact_path: Downloaded audio on local disk, owned by this job.
        transcript: Set once transcription succeeds.
        record: Set once extraction and mapping succeed.
        status: One of STATUS_ORDER or "failed".
        error: Description of the failure cause, if any.
    """

    sender_id: int | str
    file_ref: str

    local_artifact_path: Optional[str] = None
    transcript: Optional[str] = None
    record: Optional[ExtractedRecord] = None
    status: str = RECEIVED
    error: Optional[str] = None
    history: list = field(default_factory=lambda: [RECEIVED])

    @classmethod
    def from_event(cls, event: VoiceNoteEvent) -> "VoiceJob":
        return cls(sender_id=event.sender_id, file_ref=event.file_ref)

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def advance(self, status: str) -> None:
        """Move forward to ``status``; statuses never go backwards."""
        if self.finished:
            raise ValueError(f"Job already finished with status {self.status!r}")
        if status == FAILED:
            raise ValueError("Use fail() to move a job to 'failed'")
        if STATUS_ORDER.index(status) <= STATUS_ORDER.index(self.status):
            raise ValueError(f"Cannot move job from {self.status!r} to {status!r}")
        self.status = status
        self.history.append(status)

    def fail(self, error: str) -> None:
        if self.finished:
            raise ValueError(f"Job already finished with status {self.status!r}")
        self.status = FAILED
        self.error = error
        self.history.append(FAILED)
