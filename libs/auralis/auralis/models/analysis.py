"""Sentiment analysis models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class SentimentLabel(str, Enum):
    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"
    MIXED = "MIXED"


class AnalysisSource(str, Enum):
    COMPREHEND = "comprehend"
    CALL_ANALYTICS = "call_analytics"


@dataclass(frozen=True)
class SentimentScores:
    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0
    mixed: float = 0.0

    @property
    def dominant(self) -> float:
        return max(self.positive, self.negative, self.neutral, self.mixed)

    def to_dict(self) -> dict[str, float]:
        return {
            "Positive": self.positive,
            "Negative": self.negative,
            "Neutral": self.neutral,
            "Mixed": self.mixed,
        }


@dataclass
class SegmentSentiment:
    text: str
    sentiment: str
    scores: SentimentScores
    start: float
    end: float


@dataclass
class AnalysisPayload:
    overall_sentiment: str
    scores: SentimentScores
    segments: list[SegmentSentiment] = field(default_factory=list)
    duration: float = 0.0
    source: AnalysisSource = AnalysisSource.COMPREHEND
