from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from auralis.config import Settings
from auralis.services.fetch_health import FetchHealthMonitor
from auralis.storage import get_artifact_gateway, get_recording_store

_API_ROOT = Path(__file__).resolve().parents[1]
if str(_API_ROOT) not in sys.path:
    sys.path.insert(0, str(_API_ROOT))


@pytest.fixture()
def settings(tmp_path) -> Settings:
    return Settings(
        artifact_store_backend="local",
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture()
def data_file(settings: Settings):
    def _write(location: str, payload: Any) -> Path:
        path = Path(settings.data_dir) / location
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, bytes):
            path.write_bytes(payload)
        else:
            path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def monitor(monkeypatch) -> FetchHealthMonitor:
    fresh = FetchHealthMonitor(redis=None, stale_after_s=3600)
    monkeypatch.setattr("auralis.services.fetch_health._FETCH_MONITOR", fresh)
    return fresh


@pytest.fixture()
def app(settings: Settings) -> FastAPI:
    from routes.health import router as health_router
    from routes.recordings import router as recordings_router
    from routes.uploads import router as uploads_router

    test_app = FastAPI()
    test_app.state.redis = None
    test_app.state.settings = settings
    test_app.state.artifact_gateway = get_artifact_gateway(settings)
    test_app.state.recording_store = get_recording_store(settings)
    test_app.include_router(recordings_router)
    test_app.include_router(uploads_router)
    test_app.include_router(health_router)
    return test_app


@pytest.fixture()
def client(app: FastAPI) -> TestClient:
    return TestClient(app)
