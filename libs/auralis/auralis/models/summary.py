"""LLM summary artifact."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class SummaryPayload:
    summary: str
    file_name: str = ""
    generated_at: datetime | None = None
