"""Artifact kinds and fetch results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from auralis.error_codes import FetchErrorKind


class ArtifactKind(str, Enum):
    TRANSCRIPT = "transcript"
    ANALYSIS = "analysis"
    SUMMARY = "summary"

    @property
    def folder(self) -> str:
        return _FOLDERS[self]


_FOLDERS: dict[ArtifactKind, str] = {
    ArtifactKind.TRANSCRIPT: "transcript",
    ArtifactKind.ANALYSIS: "analysis",
    ArtifactKind.SUMMARY: "summaries",
}


@dataclass(frozen=True)
class Ready:
    """The artifact exists and its JSON body parsed."""

    data: Any


@dataclass(frozen=True)
class NotReady:
    """The producing job has not written the artifact yet."""


@dataclass(frozen=True)
class FetchFailed:
    kind: FetchErrorKind
    message: str = ""


FetchResult = Union[Ready, NotReady, FetchFailed]

NOT_READY = NotReady()
