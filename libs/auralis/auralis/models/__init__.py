"""Core data models for Auralis."""

from auralis.models.analysis import (
    AnalysisPayload,
    AnalysisSource,
    SegmentSentiment,
    SentimentLabel,
    SentimentScores,
)
from auralis.models.artifact import (
    NOT_READY,
    ArtifactKind,
    FetchFailed,
    FetchResult,
    NotReady,
    Ready,
)
from auralis.models.metrics import (
    EmotionalMoment,
    KeyMoment,
    LowConfidenceSegment,
    SentimentSummary,
    SpeakerStats,
    TranscriptMetrics,
)
from auralis.models.recording import Recording
from auralis.models.summary import SummaryPayload
from auralis.models.transcript import (
    AudioSegment,
    TranscriptAlternative,
    TranscriptItem,
    TranscriptPayload,
)

__all__ = [
    "AnalysisPayload",
    "AnalysisSource",
    "ArtifactKind",
    "AudioSegment",
    "EmotionalMoment",
    "FetchFailed",
    "FetchResult",
    "KeyMoment",
    "LowConfidenceSegment",
    "NOT_READY",
    "NotReady",
    "Ready",
    "Recording",
    "SegmentSentiment",
    "SentimentLabel",
    "SentimentScores",
    "SentimentSummary",
    "SpeakerStats",
    "SummaryPayload",
    "TranscriptAlternative",
    "TranscriptItem",
    "TranscriptMetrics",
    "TranscriptPayload",
]
