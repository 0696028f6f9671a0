"""Artifact location derivation (pure, no I/O)."""

from __future__ import annotations

from auralis.models.artifact import ArtifactKind


def extract_base_file_name(resource_key: str) -> str:
    """Last path segment without its extension.

    `recordings/user123/1761448789852-WalterWhite2.mp4` -> `1761448789852-WalterWhite2`.
    A leading dot (`.env`) is part of the name, not an extension.
    """
    name = str(resource_key or "").split("/")[-1]
    dot = name.rfind(".")
    return name[:dot] if dot > 0 else name


def locate(resource_key: str, kind: ArtifactKind) -> str:
    return f"{kind.folder}/{extract_base_file_name(resource_key)}.json"
