"""S3 listing helpers."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any


def iter_objects(client: Any, *, bucket: str, prefix: str) -> Iterator[dict[str, Any]]:
    """Yield every `Contents` entry under `prefix`, following continuation tokens."""
    kwargs: dict[str, Any] = {"Bucket": bucket, "Prefix": prefix}
    while True:
        page: dict[str, Any] = dict(client.list_objects_v2(**kwargs))
        yield from page.get("Contents") or []

        token = str(page.get("NextContinuationToken") or "")
        if not page.get("IsTruncated") or not token:
            return
        kwargs["ContinuationToken"] = token
