"""Error taxonomy for the CV ingestion pipeline.

Every failure the pipeline can surface is a ``CvIngestionError`` subclass that
carries a stable ``code`` and the HTTP status the API layer should answer with.
Heuristic steps (markdown, sections, keywords) never raise.
"""

from __future__ import annotations

from typing import Optional


class CvIngestionError(Exception):
    """Base class; unknown failures are wrapped in this type by the pipeline."""

    code = "CV_INGEST_000"
    http_status = 500
    retryable = False

    def __init__(self, message: str = "", *, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def __str__(self) -> str:
        return self.message or self.__class__.__name__


class UnsupportedFormat(CvIngestionError):
    """The file type is not PDF or Word; the user can fix this."""

    code = "CV_INGEST_001"
    http_status = 400


class ExtractionFailure(CvIngestionError):
    """The document is corrupt, encrypted or contains no text."""

    code = "CV_INGEST_002"


class QuotaExceeded(CvIngestionError):
    code = "CV_INGEST_003"
    http_status = 429


class ConfigurationError(CvIngestionError):
    """AI credentials are missing or rejected; an operator has to fix this."""

    code = "CV_INGEST_004"


class ServiceUnavailable(CvIngestionError):
    """The AI service stayed overloaded after every retry."""

    code = "CV_INGEST_005"
    http_status = 503
    retryable = True


class ParsingFailure(CvIngestionError):
    """The AI service answered, but not with a usable profile."""

    code = "CV_INGEST_006"


class PersistenceFailure(CvIngestionError):
    code = "CV_INGEST_007"


class CleanupFailure(CvIngestionError):
    """Only ever logged; losing a temp file must not fail an ingestion."""

    code = "CV_INGEST_008"


class CompressionError(CvIngestionError):
    code = "COMPRESS_001"


class DecompressionError(CvIngestionError):
    code = "COMPRESS_002"
