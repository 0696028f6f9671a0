"""Uploaded recording (object under the recordings prefix)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Recording:
    key: str
    file_name: str
    last_modified: datetime
    size: int
    user_id: str

    def to_dict(self) -> dict[str, object]:
        return {
            "key": self.key,
            "file_name": self.file_name,
            "last_modified": self.last_modified.isoformat(),
            "size": int(self.size),
            "user_id": self.user_id,
        }
