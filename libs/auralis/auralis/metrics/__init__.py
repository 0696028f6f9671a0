"""Derived metrics over transcript and analysis payloads."""

from auralis.metrics.engine import (
    average_confidence,
    calculate_duration,
    compute_transcript_metrics,
    conversation_balance,
    key_moments,
    low_confidence_segments,
    quality_assessment,
    speaker_stats,
    speaking_rate,
    word_count,
)
from auralis.metrics.sentiment import (
    emotional_insight,
    key_emotional_moments,
    sentiment_percentages,
    summarize_sentiment,
)

__all__ = [
    "average_confidence",
    "calculate_duration",
    "compute_transcript_metrics",
    "conversation_balance",
    "emotional_insight",
    "key_emotional_moments",
    "key_moments",
    "low_confidence_segments",
    "quality_assessment",
    "sentiment_percentages",
    "speaker_stats",
    "speaking_rate",
    "summarize_sentiment",
    "word_count",
]
