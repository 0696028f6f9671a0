from __future__ import annotations

import pytest

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
from auralis.models.serializers import deserialize_transcript
from auralis.models.transcript import AudioSegment, TranscriptAlternative, TranscriptItem


def _seg(i: int, speaker: str, start: float, end: float, text: str = "a b") -> AudioSegment:
    return AudioSegment(id=i, speaker_label=speaker, start=start, end=end, text=text)


def _word(content: str, confidence: float | None, start: float = 0.0) -> TranscriptItem:
    return TranscriptItem(
        type="pronunciation",
        alternatives=[TranscriptAlternative(content=content, confidence=confidence)],
        start=start,
    )


def test_degenerate_inputs_return_zero() -> None:
    assert calculate_duration([]) == 0
    assert speaking_rate(0, 0) == 0
    assert average_confidence([]) == 0
    assert speaker_stats([], 0) == []
    assert key_moments([]) == []
    assert low_confidence_segments([]) == []
    assert word_count("") == 0


def test_duration_and_speaker_shares() -> None:
    segments = [
        _seg(0, "spk_0", 0, 2, "Hello there."),
        _seg(1, "spk_0", 2, 6, "How are you feeling today?"),
        _seg(2, "spk_1", 6, 10, "Fine thanks."),
    ]
    assert calculate_duration(segments) == 10.0

    stats = speaker_stats(segments, 10.0)
    assert [s.speaker_id for s in stats] == ["spk_0", "spk_1"]
    assert stats[0].speaker_label == "Speaker 1"
    assert stats[0].duration == pytest.approx(6.0)
    assert stats[0].percentage == pytest.approx(60.0)
    assert stats[0].word_count == 7
    assert stats[1].percentage == pytest.approx(40.0)


def test_speaker_shares_sum_to_100_with_full_coverage() -> None:
    segments = [_seg(0, "spk_0", 0, 3), _seg(1, "spk_1", 3, 7), _seg(2, "spk_2", 7, 10)]
    stats = speaker_stats(segments, calculate_duration(segments))
    assert sum(s.percentage for s in stats) == pytest.approx(100.0)


def test_speaker_percentage_is_zero_without_duration() -> None:
    stats = speaker_stats([_seg(0, "spk_0", 0, 0)], 0)
    assert stats[0].percentage == 0


def test_speaking_rate_rounds_half_up() -> None:
    assert speaking_rate(150, 60) == 150
    # 5 words over 120s = 2.5 wpm
    assert speaking_rate(5, 120) == 3


def test_average_confidence_skips_missing_and_punctuation() -> None:
    items = [
        _word("a", 1.0),
        _word("b", 0.0),
        _word("c", None),
        TranscriptItem(type="punctuation", alternatives=[TranscriptAlternative(".", 0.2)]),
    ]
    assert average_confidence(items) == pytest.approx(0.5)


def test_low_confidence_segments_strictly_below_threshold() -> None:
    items = [_word("sure", 0.8, 1.0), _word("maybe", 0.79, 2.5), _word("no", None, 3.0)]
    low = low_confidence_segments(items)
    assert [(s.text, s.time, s.confidence) for s in low] == [("maybe", 2.5, 0.79)]
    assert low_confidence_segments(items, threshold=0.9)[0].text == "sure"


def test_key_moments_start_changes_end() -> None:
    segments = [_seg(0, "spk_0", 0, 5), _seg(1, "spk_1", 5, 65), _seg(2, "spk_1", 65, 70)]
    moments = key_moments(segments)
    assert [m.label for m in moments] == [
        "Conversation Start",
        "Speaker Change to Speaker 2",
        "Conversation End",
    ]
    assert [m.time for m in moments] == ["00:00", "00:05", "01:10"]


def test_key_moments_single_speaker_has_start_and_end_only() -> None:
    moments = key_moments([_seg(0, "spk_0", 0, 5), _seg(1, "spk_0", 5, 9)])
    assert [m.label for m in moments] == ["Conversation Start", "Conversation End"]


@pytest.mark.parametrize("n_segments", [12, 20, 50])
def test_key_moments_are_thinned_to_eight(n_segments: int) -> None:
    segments = [_seg(i, f"spk_{i % 2}", i * 10, i * 10 + 10) for i in range(n_segments)]
    moments = key_moments(segments)
    assert len(moments) <= 8
    assert moments[0].label == "Conversation Start"
    assert moments[-1].label == "Conversation End"
    assert moments[-1].timestamp == n_segments * 10
    assert [m.timestamp for m in moments] == sorted(m.timestamp for m in moments)


def test_out_of_order_segments_are_sorted_not_rejected() -> None:
    segments = [_seg(1, "spk_1", 5, 9), _seg(0, "spk_0", 0, 5)]
    assert calculate_duration(segments) == 9
    assert [m.label for m in key_moments(segments)][1] == "Speaker Change to Speaker 2"


def test_conversation_balance_messages() -> None:
    def stats(*durations: float):
        segs = [_seg(i, f"spk_{i}", sum(durations[:i]), sum(durations[: i + 1])) for i in range(len(durations))]
        return speaker_stats(segs, sum(durations))

    assert conversation_balance([]) == "No data"
    assert conversation_balance(stats(10)) == "Single speaker"
    assert conversation_balance(stats(75, 25)) == "Speaker 1 dominated (75%)"
    assert conversation_balance(stats(65, 35)) == "Speaker 1 led conversation (65%)"
    assert conversation_balance(stats(55, 45)) == "Balanced conversation"
    assert conversation_balance(stats(70, 30)) == "Speaker 1 led conversation (70%)"


def test_quality_assessment_bands() -> None:
    assert quality_assessment(0.95) == "Excellent"
    assert quality_assessment(0.9) == "Excellent"
    assert quality_assessment(0.8) == "Good"
    assert quality_assessment(0.5) == "Fair"


def test_compute_transcript_metrics(transcript_json) -> None:
    payload = deserialize_transcript(transcript_json)
    metrics = compute_transcript_metrics(payload)

    assert metrics.duration == 10.0
    assert metrics.speaker_count == 2
    assert metrics.word_count == 9
    assert metrics.speaking_rate == 54
    assert metrics.average_confidence == pytest.approx((0.99 + 0.6 + 0.9) / 3)
    assert metrics.quality == "Good"
    assert metrics.conversation_balance == "Balanced conversation"
    assert [s.text for s in metrics.low_confidence_segments] == ["there"]
    assert metrics.key_moments[1].label == "Speaker Change to Speaker 2"


def test_compute_transcript_metrics_threshold_is_configurable(transcript_json) -> None:
    payload = deserialize_transcript(transcript_json)
    metrics = compute_transcript_metrics(payload, low_confidence_threshold=0.95)
    assert [s.text for s in metrics.low_confidence_segments] == ["there", "fine"]
