# models.py

import enum
import uuid
from datetime import datetime, timezone

from cvmate.extensions import db


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProcessingStatus(str, enum.Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class CvUpload(db.Model):
    __tablename__ = "cv_uploads"

    id = db.Column(db.String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    user_id = db.Column(db.String, nullable=False, index=True)

    # File metadata
    file_name = db.Column(db.String, nullable=False)  # Stored (transient) name
    original_name = db.Column(db.String, nullable=False)  # Name from the client
    content_type = db.Column(db.String)
    original_size = db.Column(db.BigInteger, nullable=False, default=0)
    compressed_size = db.Column(db.BigInteger, nullable=False, default=0)
    compression_ratio = db.Column(db.Float, nullable=False, default=0.0)
    file_data = db.Column(db.LargeBinary)  # gzip copy of the original upload
    file_path = db.Column(db.String, nullable=True)  # Cleared once processing ends

    processing_status = db.Column(
        db.String(16),
        nullable=False,
        default=ProcessingStatus.PENDING.value,
        index=True,
    )
    error_message = db.Column(db.Text, nullable=True)

    extracted_text = db.Column(db.Text, nullable=True)
    markdown_content = db.Column(db.Text, nullable=True)
    extracted_data = db.Column(db.JSON, nullable=True)

    upload_date = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow)

    def __repr__(self):
        return f"<CvUpload {self.id} ({self.processing_status})>"

    def to_summary_dict(self) -> dict:
        """Shape used by the upload list endpoint."""
        return {
            "id": self.id,
            "originalName": self.original_name,
            "processingStatus": self.processing_status,
            "uploadDate": self.upload_date.isoformat() if self.upload_date else None,
            "originalSize": self.original_size,
            "compressedSize": self.compressed_size,
        }

    def to_status_dict(self) -> dict:
        """Shape used by the status endpoint (adds the structured result)."""
        return {
            "id": self.id,
            "originalName": self.original_name,
            "processingStatus": self.processing_status,
            "uploadDate": self.upload_date.isoformat() if self.upload_date else None,
            "extractedData": self.extracted_data,
        }
