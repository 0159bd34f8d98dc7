"""
CV ingestion services package.

This package contains everything that turns an uploaded CV into a structured profile:
- Text extraction and normalization (PDF / Word)
- Markdown rendering and heuristic segmentation
- AI-assisted parsing with retry/backoff
- Quota checks, compression and persistence of upload records
"""

from .config import IngestionConfig, load_config
from .errors import (
    CvIngestionError,
    UnsupportedFormat,
    ExtractionFailure,
    QuotaExceeded,
    ConfigurationError,
    ServiceUnavailable,
    ParsingFailure,
    PersistenceFailure,
    CleanupFailure,
    CompressionError,
    DecompressionError,
)
from .pipeline import CvUploadPipeline, build_pipeline

__all__ = [
    # Configuration
    "IngestionConfig",
    "load_config",
    # Pipeline
    "CvUploadPipeline",
    "build_pipeline",
    # Errors
    "CvIngestionError",
    "UnsupportedFormat",
    "ExtractionFailure",
    "QuotaExceeded",
    "ConfigurationError",
    "ServiceUnavailable",
    "ParsingFailure",
    "PersistenceFailure",
    "CleanupFailure",
    "CompressionError",
    "DecompressionError",
]
