"""Derived, display-ready metrics (never persisted)."""

from __future__ import annotations

from dataclasses import dataclass, field

from auralis.models.analysis import SentimentScores


@dataclass
class SpeakerStats:
    speaker_id: str
    speaker_label: str
    duration: float
    percentage: float
    word_count: int


@dataclass
class LowConfidenceSegment:
    text: str
    time: float
    confidence: float


@dataclass
class KeyMoment:
    time: str
    label: str
    timestamp: float


@dataclass
class EmotionalMoment:
    time: str
    timestamp: float
    sentiment: str
    text: str
    score: float


@dataclass
class TranscriptMetrics:
    duration: float
    speaker_count: int
    word_count: int
    speaking_rate: int
    average_confidence: float
    quality: str
    conversation_balance: str
    speaker_stats: list[SpeakerStats] = field(default_factory=list)
    low_confidence_segments: list[LowConfidenceSegment] = field(default_factory=list)
    key_moments: list[KeyMoment] = field(default_factory=list)


@dataclass
class SentimentSummary:
    overall_sentiment: str
    percentages: SentimentScores
    duration: float
    insight: str
    key_moments: list[EmotionalMoment] = field(default_factory=list)
