"""Sentiment metrics and Call Analytics score conversion."""

from __future__ import annotations

from collections.abc import Sequence

from auralis.metrics.formatting import format_timestamp, round_half_up
from auralis.models.analysis import (
    AnalysisPayload,
    SegmentSentiment,
    SentimentLabel,
    SentimentScores,
)
from auralis.models.metrics import EmotionalMoment, SentimentSummary

DEFAULT_STRONG_SENTIMENT_THRESHOLD = 0.7

_EXCERPT_CHARS = 50


def _percent(value: float) -> float:
    return round_half_up(value * 1000) / 10


def sentiment_percentages(scores: SentimentScores) -> SentimentScores:
    """One-decimal percentages per channel; rounding drift is not renormalized."""
    return SentimentScores(
        positive=_percent(scores.positive),
        negative=_percent(scores.negative),
        neutral=_percent(scores.neutral),
        mixed=_percent(scores.mixed),
    )


def _excerpt(text: str) -> str:
    if len(text) > _EXCERPT_CHARS:
        return text[:_EXCERPT_CHARS] + "..."
    return text


def key_emotional_moments(
    segments: Sequence[SegmentSentiment],
    threshold: float = DEFAULT_STRONG_SENTIMENT_THRESHOLD,
) -> list[EmotionalMoment]:
    moments = [
        EmotionalMoment(
            time=format_timestamp(seg.start),
            timestamp=float(seg.start),
            sentiment=seg.sentiment,
            text=_excerpt(seg.text),
            score=seg.scores.dominant,
        )
        for seg in segments
        if seg.scores.dominant > threshold and seg.sentiment != SentimentLabel.NEUTRAL.value
    ]
    moments.sort(key=lambda m: m.timestamp)
    return moments


def _is_spike(seg: SegmentSentiment, label: SentimentLabel, threshold: float) -> bool:
    if seg.sentiment != label.value:
        return False
    score = seg.scores.negative if label is SentimentLabel.NEGATIVE else seg.scores.positive
    return score > threshold


def emotional_insight(
    overall_sentiment: str,
    segments: Sequence[SegmentSentiment],
    threshold: float = DEFAULT_STRONG_SENTIMENT_THRESHOLD,
) -> str:
    """One-sentence clinical reading of the sentiment timeline."""
    if not segments:
        return f"Overall emotional state: {overall_sentiment.lower()}"

    # The first segment only anchors the change count; spikes are counted from the second on.
    changes = sum(
        1 for prev, cur in zip(segments, segments[1:]) if cur.sentiment != prev.sentiment
    )
    negative_spikes = sum(
        1 for seg in segments[1:] if _is_spike(seg, SentimentLabel.NEGATIVE, threshold)
    )
    positive_spikes = sum(
        1 for seg in segments[1:] if _is_spike(seg, SentimentLabel.POSITIVE, threshold)
    )

    if overall_sentiment == SentimentLabel.POSITIVE.value and negative_spikes == 0:
        return "Patient maintained positive affect throughout conversation with stable emotional state."

    if overall_sentiment == SentimentLabel.NEGATIVE.value:
        plural = "" if negative_spikes == 1 else "s"
        return (
            "Patient expressed distress during conversation. "
            f"{negative_spikes} moment{plural} of heightened concern detected."
        )

    if changes > len(segments) * 0.5:
        return (
            f"Emotional state fluctuated throughout conversation with {changes} sentiment shifts. "
            "Consider follow-up on patient concerns."
        )

    if negative_spikes > 0 and positive_spikes > 0:
        first_negative = next(
            (s for s in segments if _is_spike(s, SentimentLabel.NEGATIVE, threshold)), None
        )
        last_positive = next(
            (s for s in reversed(segments) if _is_spike(s, SentimentLabel.POSITIVE, threshold)),
            None,
        )
        if first_negative and last_positive and last_positive.start > first_negative.start:
            return (
                f"Brief distress detected at {format_timestamp(first_negative.start)}, "
                f"resolved by {format_timestamp(last_positive.start)}. "
                "Patient showed emotional resilience."
            )
        return (
            "Mixed emotional responses noted. "
            "Patient expressed both concerns and positive reactions during visit."
        )

    if overall_sentiment == SentimentLabel.NEUTRAL.value:
        return (
            "Patient maintained neutral emotional state throughout conversation. "
            "No significant distress or elevated positive affect detected."
        )

    return "Emotional state remained stable throughout the conversation."


def call_analytics_label(score: float) -> str:
    """Call Analytics sentiment (-5..5) to a label."""
    if score >= 2:
        return SentimentLabel.POSITIVE.value
    if score <= -2:
        return SentimentLabel.NEGATIVE.value
    return SentimentLabel.NEUTRAL.value


def call_analytics_scores(score: float) -> SentimentScores:
    """Approximate a 4-way distribution from a single -5..5 score."""
    normalized = (score + 5) / 10
    if score >= 2:
        return SentimentScores(
            positive=normalized, negative=0.1, neutral=1 - normalized - 0.1, mixed=0.0
        )
    if score <= -2:
        return SentimentScores(
            positive=0.1, negative=1 - normalized, neutral=normalized - 0.1, mixed=0.0
        )
    return SentimentScores(positive=0.2, negative=0.2, neutral=0.6, mixed=0.0)


def summarize_sentiment(
    analysis: AnalysisPayload,
    *,
    strong_sentiment_threshold: float = DEFAULT_STRONG_SENTIMENT_THRESHOLD,
) -> SentimentSummary:
    return SentimentSummary(
        overall_sentiment=analysis.overall_sentiment,
        percentages=sentiment_percentages(analysis.scores),
        duration=analysis.duration,
        insight=emotional_insight(
            analysis.overall_sentiment, analysis.segments, threshold=strong_sentiment_threshold
        ),
        key_moments=key_emotional_moments(analysis.segments, threshold=strong_sentiment_threshold),
    )
