"""Transcript models (AWS Transcribe output layout)."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class TranscriptAlternative:
    content: str
    confidence: float | None = None


@dataclass
class TranscriptItem:
    """A single word (`pronunciation`) or punctuation mark."""

    type: str
    alternatives: list[TranscriptAlternative] = field(default_factory=list)
    start: float | None = None
    end: float | None = None
    speaker_label: str | None = None

    @property
    def is_pronunciation(self) -> bool:
        return self.type == "pronunciation"

    @property
    def content(self) -> str:
        return self.alternatives[0].content if self.alternatives else ""

    @property
    def confidence(self) -> float | None:
        return self.alternatives[0].confidence if self.alternatives else None


@dataclass
class AudioSegment:
    """Speaker-labelled stretch of the conversation."""

    id: int
    speaker_label: str
    start: float
    end: float
    text: str
    item_ids: list[int] = field(default_factory=list)

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass
class TranscriptPayload:
    full_text: str
    segments: list[AudioSegment] = field(default_factory=list)
    items: list[TranscriptItem] = field(default_factory=list)
    job_name: str | None = None
    status: str | None = None
