"""Display formatting helpers shared by metrics and the API."""

from __future__ import annotations

import math
import re

_SPEAKER_RE = re.compile(r"spk_(\d+)")
_DIGITS_RE = re.compile(r"(\d+)")
_TIMESTAMP_PREFIX_RE = re.compile(r"^\d+-(.+)$")
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def round_half_up(value: float) -> int:
    """Round like the dashboard did (x.5 goes up, also for negatives)."""
    return int(math.floor(value + 0.5))


def format_timestamp(seconds: float) -> str:
    """`MM:SS`, or `H:MM:SS` once past the hour."""
    total = max(0.0, float(seconds))
    hours = int(total // 3600)
    mins = int((total % 3600) // 60)
    secs = int(total % 60)
    if hours > 0:
        return f"{hours}:{mins:02d}:{secs:02d}"
    return f"{mins:02d}:{secs:02d}"


def format_duration(seconds: float) -> str:
    total = max(0.0, float(seconds))
    return f"{int(total // 60)}:{int(total % 60):02d}"


def format_speaker_label(speaker_label: str) -> str:
    """`spk_0` -> `Speaker 1`; unknown labels pass through."""
    match = _SPEAKER_RE.search(speaker_label or "")
    if match:
        return f"Speaker {int(match.group(1)) + 1}"
    return speaker_label


def speaker_index(speaker_label: str) -> int:
    match = _DIGITS_RE.search(speaker_label or "")
    return int(match.group(1)) if match else 0


def format_file_size(size_bytes: int) -> str:
    if size_bytes <= 0:
        return "0 Bytes"
    i = min(int(math.floor(math.log(size_bytes, 1024))), len(_SIZE_UNITS) - 1)
    value = round(size_bytes / (1024**i), 2)
    return f"{value:g} {_SIZE_UNITS[i]}"


def extract_user_id_from_key(key: str) -> str:
    """`recordings/{userId}/...` -> userId, else `unknown`."""
    parts = str(key or "").split("/")
    if len(parts) >= 2 and parts[0] == "recordings":
        return parts[1]
    return "unknown"


def extract_file_name_from_key(key: str) -> str:
    """Last path segment with the `{epochMs}-` upload prefix removed."""
    name = str(key or "").split("/")[-1]
    match = _TIMESTAMP_PREFIX_RE.match(name)
    return match.group(1) if match else name
