"""
CV upload pipeline.

This file handles complete CV processing:
1. Save the upload to the transient directory and check the user's quota
2. Compress the original and create a PENDING record
3. Extract and normalize text, render markdown
4. AI-assisted parse plus heuristic fallbacks, merged per field
5. Mark the record COMPLETED (or FAILED) and always remove the transient file
"""

import logging
import uuid
from pathlib import Path
from typing import Any, Dict, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from cvmate.models import CvUpload, ProcessingStatus

from .ai_parser import AiCvParser
from .compression import FileCompressionService
from .config import IngestionConfig, load_config
from .contact_keywords import (
    extract_contact_information,
    extract_keywords,
    generate_document_metadata,
)
from .errors import CleanupFailure, CvIngestionError, PersistenceFailure, QuotaExceeded
from .markdown_converter import convert_to_markdown
from .merge import merge_profiles
from .quota import UploadQuotaService
from .repository import CvUploadRepository
from .section_segmenter import extract_sections
from .text_extraction import TextExtractor, normalize_text

logger = logging.getLogger(__name__)


class CvUploadPipeline:
    """
    Orchestrates one upload from raw file to a COMPLETED or FAILED record.

    Collaborators are stateless and shared between requests; each call to
    ``process_upload`` owns its transient file and its record.
    """

    def __init__(
        self,
        config: Optional[IngestionConfig] = None,
        extractor: Optional[TextExtractor] = None,
        ai_parser: Optional[AiCvParser] = None,
        quota_service: Optional[UploadQuotaService] = None,
        repository: Optional[CvUploadRepository] = None,
        compressor: Optional[FileCompressionService] = None,
    ):
        self.config = config or load_config()
        self.repository = repository or CvUploadRepository()
        self.extractor = extractor or TextExtractor()
        self.ai_parser = ai_parser or AiCvParser(self.config.ai_parser)
        self.quota_service = quota_service or UploadQuotaService(
            self.config.quota, self.repository
        )
        self.compressor = compressor or FileCompressionService()

    def process_upload(self, upload: FileStorage, user_id: str) -> Dict[str, Any]:
        """
        Process an uploaded CV through the complete pipeline.

        Args:
            upload: Uploaded file object
            user_id: Owner of the upload

        Returns:
            ``{id, fileName, processingStatus, uploadDate, extractedData}``

        Raises:
            CvIngestionError (or a subclass) for every failure.
        """
        original_name = upload.filename or ""
        logger.info(f"CV upload started user={user_id} file={original_name}")

        file_path = self._save_upload(upload)
        record_id: Optional[str] = None
        try:
            decision = self.quota_service.check_upload_quota(user_id)
            if not decision.allowed:
                raise QuotaExceeded(decision.message)

            payload = file_path.read_bytes()
            compressed = self.compressor.compress(payload)
            ratio = self.compressor.compression_ratio(len(payload), len(compressed))
            logger.debug(
                f"Compressed upload original={len(payload)} compressed={len(compressed)} "
                f"savings={self.compressor.space_savings_percent(len(payload), len(compressed)):.1f}%"
            )

            record = self.repository.create(
                user_id=user_id,
                file_name=file_path.name,
                original_name=original_name,
                content_type=upload.mimetype or upload.content_type,
                original_size=len(payload),
                compressed_size=len(compressed),
                compression_ratio=ratio,
                file_data=compressed,
                file_path=str(file_path),
                processing_status=ProcessingStatus.PENDING.value,
            )
            record_id = record.id
            logger.info(f"Created CV upload record id={record_id} user={user_id}")

            try:
                extracted_text, markdown, extracted_data = self._analyze(file_path)
                record = self.repository.update(
                    record_id,
                    processing_status=ProcessingStatus.COMPLETED.value,
                    extracted_text=extracted_text,
                    markdown_content=markdown,
                    extracted_data=extracted_data,
                    error_message=None,
                    file_path=None,
                )
            except Exception as exc:
                self._mark_failed(record_id, exc)
                raise

            logger.info(f"CV processing completed id={record_id}")
            return {
                "id": record.id,
                "fileName": record.original_name,
                "processingStatus": record.processing_status,
                "uploadDate": record.upload_date.isoformat() if record.upload_date else None,
                "extractedData": record.extracted_data,
            }
        except CvIngestionError:
            raise
        except Exception as exc:
            logger.error(f"CV pipeline failed id={record_id}: {exc}")
            raise CvIngestionError(f"CV processing failed: {exc}") from exc
        finally:
            self._cleanup_file(file_path)

    def _analyze(self, file_path: Path):
        raw_text = self.extractor.extract(file_path)
        text = normalize_text(raw_text)
        logger.debug(f"Normalized text length={len(text)} preview={text[:200]!r}")

        markdown = convert_to_markdown(text)
        ai_profile = self.ai_parser.parse(text)

        heuristic = dict(extract_sections(text))
        heuristic["contactInfo"] = extract_contact_information(
            text, self.config.extraction.phone_pattern
        )
        extracted_data = merge_profiles(
            ai_profile,
            heuristic,
            keywords=extract_keywords(text),
            metadata=generate_document_metadata(text),
        )
        return text, markdown, extracted_data

    def _save_upload(self, upload: FileStorage) -> Path:
        upload_dir = Path(self.config.upload.upload_dir)
        upload_dir.mkdir(parents=True, exist_ok=True)
        safe_name = secure_filename(upload.filename or "") or "upload"
        file_path = upload_dir / f"{uuid.uuid4().hex}_{safe_name}"
        try:
            upload.save(str(file_path))
        except OSError as exc:
            logger.error(f"Failed to save upload to {file_path}: {exc}")
            self._cleanup_file(file_path)
            raise CvIngestionError(f"Upload could not be stored: {exc}") from exc
        logger.debug(f"Saved upload to {file_path}")
        return file_path

    def _mark_failed(self, record_id: str, exc: BaseException) -> None:
        logger.error(f"CV processing failed id={record_id}: {exc}")
        try:
            self.repository.update(
                record_id,
                processing_status=ProcessingStatus.FAILED.value,
                error_message=str(exc),
                file_path=None,
            )
        except PersistenceFailure as db_exc:
            logger.warning(f"Failed to mark id={record_id} as FAILED: {db_exc}")

    def _cleanup_file(self, file_path: Optional[Path]) -> None:
        if not file_path:
            return
        try:
            Path(file_path).unlink(missing_ok=True)
            logger.info(f"Cleaned up transient file {file_path}")
        except OSError as exc:
            failure = CleanupFailure(f"Could not delete {file_path}: {exc}")
            logger.warning(f"{failure.code} {failure}")

    def decompress_original(self, record: CvUpload) -> bytes:
        """Return the original upload bytes from the stored compressed copy."""
        return self.compressor.decompress(record.file_data)

    def delete_upload(self, record: CvUpload) -> None:
        """Remove a record and any transient file it still points at."""
        lingering = record.file_path
        self.repository.delete(record)
        if lingering:
            self._cleanup_file(Path(lingering))


def build_pipeline(config: Optional[IngestionConfig] = None) -> CvUploadPipeline:
    config = config or load_config()
    logger.info(f"Building CV upload pipeline config={config.to_dict()}")
    return CvUploadPipeline(config)
