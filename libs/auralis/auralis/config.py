"""Configuration management using pydantic-settings."""

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from auralis.exceptions import ConfigurationError

_ENV_FILES = (".env", "../.env", "../../.env")

_REPO_ROOT = Path(__file__).resolve().parents[3]


class S3Config(BaseSettings):
    """Object storage configuration (recordings + artifact buckets)."""

    model_config = SettingsConfigDict(
        env_prefix="S3_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    region: str = "us-east-1"
    endpoint: str | None = None  # MinIO / localstack; None uses AWS
    access_key: str = ""
    secret_key: str = ""
    recordings_bucket: str = "auralis-recordings"
    artifacts_bucket: str = "auralis-transcript-output"
    view_url_expires_s: int = Field(default=3600, ge=1)
    artifact_url_expires_s: int = Field(default=3600, ge=1)
    upload_url_expires_s: int = Field(default=300, ge=1)


class PollingConfig(BaseSettings):
    """Artifact polling cadence and limits."""

    model_config = SettingsConfigDict(
        env_prefix="POLL_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    interval_s: float = Field(default=5.0, gt=0)
    max_attempts: int | None = Field(default=None, ge=1)
    max_duration_s: float | None = Field(default=None, gt=0)
    backoff_multiplier: float = Field(
        default=1.0,
        ge=1.0,
        description="1.0 keeps a constant interval; >1 grows the interval exponentially.",
    )
    max_interval_s: float = Field(default=60.0, gt=0)
    jitter_s: float = Field(default=0.0, ge=0)
    stop_on_unauthorized: bool = False

    @model_validator(mode="after")
    def _validate_intervals(self) -> "PollingConfig":
        if float(self.max_interval_s) < float(self.interval_s):
            raise ConfigurationError("POLL_MAX_INTERVAL_S must be >= POLL_INTERVAL_S")
        return self


class MetricsConfig(BaseSettings):
    """Thresholds used by the metrics engine."""

    model_config = SettingsConfigDict(
        env_prefix="METRICS_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    low_confidence_threshold: float = Field(default=0.8, ge=0, le=1)
    strong_sentiment_threshold: float = Field(default=0.7, ge=0, le=1)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=_ENV_FILES,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"
    console: bool = True
    file: str | None = None
    max_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    backup_count: int = Field(default=5, ge=0)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILES, env_file_encoding="utf-8", extra="ignore"
    )

    data_dir: str = "./data"
    log_dir: str = "./logs"

    # Artifacts
    artifact_store_backend: str = "s3"  # "local" | "s3"

    # Redis (optional; mirrors fetch health across processes)
    redis_url: str | None = None

    s3: S3Config = S3Config()
    polling: PollingConfig = PollingConfig()
    metrics: MetricsConfig = MetricsConfig()

    # Logging
    logging: LoggingSettings = LoggingSettings()

    def model_post_init(self, __context: Any) -> None:
        def _abs_dir(p: str) -> str:
            path = Path(p)
            if path.is_absolute():
                out = path
            else:
                out = (_REPO_ROOT / path).resolve()
            out.mkdir(parents=True, exist_ok=True)
            return str(out)

        self.data_dir = _abs_dir(self.data_dir)
        self.log_dir = _abs_dir(self.log_dir)

    @property
    def uses_s3(self) -> bool:
        return str(self.artifact_store_backend or "").strip().lower() == "s3"
