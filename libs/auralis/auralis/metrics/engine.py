"""Transcript metrics.

Pure functions over a parsed transcript. Every function is total: empty or
degenerate input gives zero/empty results, never an exception.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from auralis.metrics.formatting import format_speaker_label, format_timestamp, round_half_up
from auralis.models.metrics import (
    KeyMoment,
    LowConfidenceSegment,
    SpeakerStats,
    TranscriptMetrics,
)
from auralis.models.transcript import AudioSegment, TranscriptItem, TranscriptPayload

DEFAULT_LOW_CONFIDENCE_THRESHOLD = 0.8

MAX_KEY_MOMENTS = 8
MAX_INTERIOR_MOMENTS = 6

DOMINATED_SHARE = 70.0
LED_SHARE = 60.0


def ordered_segments(segments: Iterable[AudioSegment]) -> list[AudioSegment]:
    """Stable sort by start time (out-of-order payloads are tolerated, not rejected)."""
    return sorted(segments, key=lambda s: s.start)


def calculate_duration(segments: Sequence[AudioSegment]) -> float:
    if not segments:
        return 0.0
    return float(ordered_segments(segments)[-1].end)


def word_count(text: str) -> int:
    return len(str(text or "").split())


def speaker_stats(segments: Sequence[AudioSegment], total_duration: float) -> list[SpeakerStats]:
    talk: dict[str, float] = {}
    words: dict[str, int] = {}
    for seg in segments:
        talk[seg.speaker_label] = talk.get(seg.speaker_label, 0.0) + seg.duration
        words[seg.speaker_label] = words.get(seg.speaker_label, 0) + word_count(seg.text)

    stats = [
        SpeakerStats(
            speaker_id=speaker,
            speaker_label=format_speaker_label(speaker),
            duration=duration,
            percentage=(duration / total_duration * 100) if total_duration > 0 else 0.0,
            word_count=words[speaker],
        )
        for speaker, duration in talk.items()
    ]
    stats.sort(key=lambda s: s.duration, reverse=True)
    return stats


def speaking_rate(words: int, duration_seconds: float) -> int:
    """Words per minute."""
    if duration_seconds == 0:
        return 0
    return round_half_up(words / (duration_seconds / 60))


def average_confidence(items: Sequence[TranscriptItem]) -> float:
    values = [
        float(item.confidence)
        for item in items
        if item.is_pronunciation and item.confidence is not None
    ]
    if not values:
        return 0.0
    return sum(values) / len(values)


def low_confidence_segments(
    items: Sequence[TranscriptItem],
    threshold: float = DEFAULT_LOW_CONFIDENCE_THRESHOLD,
) -> list[LowConfidenceSegment]:
    out: list[LowConfidenceSegment] = []
    for item in items:
        if not item.is_pronunciation or item.confidence is None:
            continue
        if item.confidence < threshold:
            out.append(
                LowConfidenceSegment(
                    text=item.content,
                    time=float(item.start or 0.0),
                    confidence=float(item.confidence),
                )
            )
    return out


def key_moments(segments: Sequence[AudioSegment]) -> list[KeyMoment]:
    """Start, every speaker change, end; thinned to at most 8 entries."""
    if not segments:
        return []

    ordered = ordered_segments(segments)
    duration = float(ordered[-1].end)

    moments = [KeyMoment(time=format_timestamp(0), label="Conversation Start", timestamp=0.0)]
    previous = ordered[0].speaker_label
    for seg in ordered[1:]:
        if seg.speaker_label != previous:
            moments.append(
                KeyMoment(
                    time=format_timestamp(seg.start),
                    label=f"Speaker Change to {format_speaker_label(seg.speaker_label)}",
                    timestamp=float(seg.start),
                )
            )
        previous = seg.speaker_label
    moments.append(
        KeyMoment(time=format_timestamp(duration), label="Conversation End", timestamp=duration)
    )

    if len(moments) <= MAX_KEY_MOMENTS:
        return moments

    changes = moments[1:-1]
    step = len(changes) // MAX_INTERIOR_MOMENTS
    sampled = [m for i, m in enumerate(changes) if i % step == 0][:MAX_INTERIOR_MOMENTS]
    return [moments[0], *sampled, moments[-1]]


def conversation_balance(stats: Sequence[SpeakerStats]) -> str:
    if not stats:
        return "No data"
    if len(stats) == 1:
        return "Single speaker"

    top = stats[0]
    share = round_half_up(top.percentage)
    if top.percentage > DOMINATED_SHARE:
        return f"{top.speaker_label} dominated ({share}%)"
    if top.percentage > LED_SHARE:
        return f"{top.speaker_label} led conversation ({share}%)"
    return "Balanced conversation"


def quality_assessment(confidence: float) -> str:
    if confidence >= 0.9:
        return "Excellent"
    if confidence >= 0.8:
        return "Good"
    return "Fair"


def compute_transcript_metrics(
    payload: TranscriptPayload,
    *,
    low_confidence_threshold: float = DEFAULT_LOW_CONFIDENCE_THRESHOLD,
) -> TranscriptMetrics:
    segments = ordered_segments(payload.segments)
    duration = calculate_duration(segments)
    words = word_count(payload.full_text)
    stats = speaker_stats(segments, duration)
    confidence = average_confidence(payload.items)

    return TranscriptMetrics(
        duration=duration,
        speaker_count=len(stats),
        word_count=words,
        speaking_rate=speaking_rate(words, duration),
        average_confidence=confidence,
        quality=quality_assessment(confidence),
        conversation_balance=conversation_balance(stats),
        speaker_stats=stats,
        low_confidence_segments=low_confidence_segments(
            payload.items, threshold=low_confidence_threshold
        ),
        key_moments=key_moments(segments),
    )
