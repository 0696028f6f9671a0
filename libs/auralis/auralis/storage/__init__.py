"""Storage backends (artifacts + recordings)."""

from auralis.config import Settings
from auralis.storage.gateway import ArtifactGateway, LocalArtifactGateway
from auralis.storage.locator import extract_base_file_name, locate
from auralis.storage.recordings import LocalRecordingStore, RecordingStore, S3RecordingStore
from auralis.storage.s3_gateway import S3ArtifactGateway


def get_artifact_gateway(settings: Settings) -> ArtifactGateway:
    if settings.uses_s3:
        return S3ArtifactGateway(settings.s3)
    return LocalArtifactGateway(settings.data_dir)


def get_recording_store(settings: Settings) -> RecordingStore:
    if settings.uses_s3:
        return S3RecordingStore(settings.s3)
    return LocalRecordingStore(settings.data_dir)


__all__ = [
    "ArtifactGateway",
    "LocalArtifactGateway",
    "LocalRecordingStore",
    "RecordingStore",
    "S3ArtifactGateway",
    "S3RecordingStore",
    "extract_base_file_name",
    "get_artifact_gateway",
    "get_recording_store",
    "locate",
]
