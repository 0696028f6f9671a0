from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import pytest

from auralis.config import Settings
from auralis.exceptions import ArtifactNotFoundError
from auralis.storage.gateway import ArtifactGateway


class ScriptedGateway(ArtifactGateway):
    """Gateway whose `exists` answers come from a script.

    Each script entry is consumed by one `exists` call: True / False, or an
    exception instance to raise. The last entry repeats once the script runs out.
    """

    def __init__(self, script: list[Any], body: bytes = b"{}") -> None:
        self.script = list(script)
        self.body = body
        self.exists_calls = 0
        self.get_calls = 0
        self.vanish_on_get = False
        self.block: asyncio.Event | None = None

    async def exists(self, location: str) -> bool:  # noqa: ARG002
        step = self.script[min(self.exists_calls, len(self.script) - 1)]
        self.exists_calls += 1
        if self.block is not None:
            await self.block.wait()
        if isinstance(step, BaseException):
            raise step
        return bool(step)

    async def get(self, location: str) -> bytes:
        self.get_calls += 1
        if self.vanish_on_get:
            raise ArtifactNotFoundError(location)
        return self.body

    async def presigned_url(self, location: str, *, expires_in: int) -> str:
        return f"https://signed.example/{location}?expires={expires_in}"


class RecordedSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(float(delay))
        await asyncio.sleep(0)


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        artifact_store_backend="local",
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def scripted_gateway():
    def _make(script: list[Any], body: Any = None) -> ScriptedGateway:
        raw = body if isinstance(body, bytes) else json.dumps(body if body is not None else {}).encode()
        return ScriptedGateway(script, raw)

    return _make


@pytest.fixture()
def recorded_sleep() -> RecordedSleep:
    return RecordedSleep()


@pytest.fixture()
def write_artifact(settings: Settings):
    def _write(location: str, payload: Any) -> Path:
        path = Path(settings.data_dir) / location
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, bytes):
            path.write_bytes(payload)
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture()
def transcript_json() -> dict[str, Any]:
    return {
        "jobName": "1761448789852-call",
        "status": "COMPLETED",
        "results": {
            "transcripts": [{"transcript": "Hello there. How are you feeling today? Fine thanks."}],
            "audio_segments": [
                {
                    "id": 0,
                    "transcript": "Hello there.",
                    "start_time": "0.0",
                    "end_time": "2.0",
                    "speaker_label": "spk_0",
                    "items": [0, 1, 2],
                },
                {
                    "id": 1,
                    "transcript": "How are you feeling today?",
                    "start_time": "2.0",
                    "end_time": "6.0",
                    "speaker_label": "spk_0",
                    "items": [3, 4, 5, 6, 7, 8],
                },
                {
                    "id": 2,
                    "transcript": "Fine thanks.",
                    "start_time": "6.0",
                    "end_time": "10.0",
                    "speaker_label": "spk_1",
                    "items": [9, 10, 11],
                },
            ],
            "items": [
                {
                    "type": "pronunciation",
                    "alternatives": [{"content": "Hello", "confidence": "0.99"}],
                    "start_time": "0.0",
                    "end_time": "0.5",
                },
                {
                    "type": "pronunciation",
                    "alternatives": [{"content": "there", "confidence": "0.6"}],
                    "start_time": "0.5",
                    "end_time": "1.0",
                },
                {"type": "punctuation", "alternatives": [{"content": ".", "confidence": "0.0"}]},
                {
                    "type": "pronunciation",
                    "alternatives": [{"content": "fine", "confidence": "0.9"}],
                    "start_time": "6.0",
                    "end_time": "6.5",
                },
                {
                    "type": "pronunciation",
                    "alternatives": [{"content": "thanks", "confidence": ""}],
                    "start_time": "6.5",
                    "end_time": "7.0",
                },
            ],
        },
    }


@pytest.fixture()
def comprehend_analysis_json() -> dict[str, Any]:
    return {
        "sentiment_analysis": {
            "overall_sentiment": "POSITIVE",
            "sentiment_scores": {"Positive": 0.8125, "Negative": 0.0625, "Neutral": 0.1, "Mixed": 0.025},
            "segment_sentiments": [
                {
                    "text": "Hello there.",
                    "sentiment": "NEUTRAL",
                    "sentiment_score": {"Positive": 0.1, "Negative": 0.0, "Neutral": 0.9, "Mixed": 0.0},
                    "start_time": 0.0,
                    "end_time": 2.0,
                },
                {
                    "text": "Honestly I feel so much better than last week, the new routine works.",
                    "sentiment": "POSITIVE",
                    "sentiment_score": {"Positive": 0.95, "Negative": 0.01, "Neutral": 0.04, "Mixed": 0.0},
                    "start_time": 6.0,
                    "end_time": 10.0,
                },
            ],
        }
    }


@pytest.fixture()
def call_analytics_json() -> dict[str, Any]:
    return {
        "JobName": "1761448789852-call",
        "ConversationCharacteristics": {
            "TotalConversationDurationMillis": 120000,
            "Sentiment": {
                "OverallSentiment": {"AGENT": 2.5, "CUSTOMER": 0},
                "SentimentByPeriod": {
                    "QUARTER": {
                        "CUSTOMER": [
                            {"BeginOffsetMillis": 0, "EndOffsetMillis": 30000, "Score": 0.5},
                            {"BeginOffsetMillis": 30000, "EndOffsetMillis": 60000, "Score": -3.0},
                            {"BeginOffsetMillis": 60000, "EndOffsetMillis": 90000, "Score": 3.0},
                        ]
                    }
                },
            },
        },
    }
