"""
CV Ingestion Configuration

Centralized configuration for the upload pipeline with environment variable support.
Values are read when the config object is built, so ``create_app`` (after
``load_dotenv``) and tests can control them through the environment.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_UPLOAD_DIR = Path("uploads") / "temp"


def _env_int(name: str, default: int) -> int:
    return int(os.getenv(name, str(default)))


def _env_float(name: str, default: float) -> float:
    return float(os.getenv(name, str(default)))


@dataclass
class UploadSettings:
    """Transient storage and size limits for incoming files."""

    upload_dir: Path = field(
        default_factory=lambda: Path(os.getenv("CV_UPLOAD_DIR", str(DEFAULT_UPLOAD_DIR)))
    )
    max_size_mb: int = field(default_factory=lambda: _env_int("CV_MAX_SIZE_MB", 10))
    allowed_extensions: tuple = (".pdf", ".doc", ".docx")

    @property
    def max_size_bytes(self) -> int:
        return self.max_size_mb * 1024 * 1024


@dataclass
class AiParserSettings:
    """Structured-extraction model and retry policy."""

    openai_api_key: Optional[str] = field(default_factory=lambda: os.getenv("OPENAI_API_KEY"))
    model: str = field(default_factory=lambda: os.getenv("CV_PARSER_MODEL", "gpt-4o-mini"))
    temperature: float = field(
        default_factory=lambda: _env_float("CV_PARSER_TEMPERATURE", 0.3)
    )
    timeout: float = field(default_factory=lambda: _env_float("CV_PARSER_TIMEOUT", 60.0))
    max_attempts: int = field(default_factory=lambda: _env_int("CV_PARSER_MAX_ATTEMPTS", 3))
    base_delay: float = field(
        default_factory=lambda: _env_float("CV_PARSER_BASE_DELAY", 1.0)
    )


@dataclass
class QuotaSettings:
    # 0 disables the limit
    upload_limit: int = field(default_factory=lambda: _env_int("CV_UPLOAD_LIMIT", 3))


@dataclass
class ExtractionSettings:
    phone_pattern: Optional[str] = field(
        default_factory=lambda: os.getenv("CV_PHONE_PATTERN") or None
    )


@dataclass
class IngestionConfig:
    """Complete ingestion configuration."""

    upload: UploadSettings = None
    ai_parser: AiParserSettings = None
    quota: QuotaSettings = None
    extraction: ExtractionSettings = None

    def __post_init__(self):
        if self.upload is None:
            self.upload = UploadSettings()
        if self.ai_parser is None:
            self.ai_parser = AiParserSettings()
        if self.quota is None:
            self.quota = QuotaSettings()
        if self.extraction is None:
            self.extraction = ExtractionSettings()

    def to_dict(self) -> dict:
        """Convert to dictionary for logging (the API key is never included)."""
        return {
            "upload": {
                "upload_dir": str(self.upload.upload_dir),
                "max_size_mb": self.upload.max_size_mb,
                "allowed_extensions": list(self.upload.allowed_extensions),
            },
            "ai_parser": {
                "model": self.ai_parser.model,
                "temperature": self.ai_parser.temperature,
                "timeout": self.ai_parser.timeout,
                "max_attempts": self.ai_parser.max_attempts,
                "base_delay": self.ai_parser.base_delay,
                "api_key_configured": bool(self.ai_parser.openai_api_key),
            },
            "quota": {"upload_limit": self.quota.upload_limit},
            "extraction": {"phone_pattern": self.extraction.phone_pattern},
        }


def load_config() -> IngestionConfig:
    return IngestionConfig()
