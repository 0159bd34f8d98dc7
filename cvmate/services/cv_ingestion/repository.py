"""
Persistence for CV upload records.
Wraps the SQLAlchemy session so storage errors surface as ``PersistenceFailure``.
"""

import logging
from typing import Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from cvmate.extensions import db
from cvmate.models import CvUpload, ProcessingStatus

from .errors import PersistenceFailure

logger = logging.getLogger(__name__)


class CvUploadRepository:
    """Create/update/query ``CvUpload`` rows."""

    def create(self, **fields: Any) -> CvUpload:
        try:
            record = CvUpload(**fields)
            db.session.add(record)
            db.session.commit()
            return record
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to create CV upload record: {e}")
            raise PersistenceFailure(f"Failed to create upload record: {e}") from e

    def update(self, record_id: str, **fields: Any) -> CvUpload:
        try:
            record = db.session.get(CvUpload, record_id)
            if record is None:
                raise PersistenceFailure(f"CV upload {record_id} not found")
            for key, value in fields.items():
                setattr(record, key, value)
            db.session.commit()
            return record
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to update CV upload {record_id}: {e}")
            raise PersistenceFailure(f"Failed to update upload record: {e}") from e

    def get_for_user(self, record_id: str, user_id: str) -> Optional[CvUpload]:
        return CvUpload.query.filter_by(id=record_id, user_id=user_id).first()

    def list_for_user(self, user_id: str) -> List[CvUpload]:
        return (
            CvUpload.query.filter_by(user_id=user_id)
            .order_by(CvUpload.upload_date.desc())
            .all()
        )

    def count_active_for_user(self, user_id: str) -> int:
        """Uploads that count towards the quota (failed runs do not)."""
        return CvUpload.query.filter(
            CvUpload.user_id == user_id,
            CvUpload.processing_status != ProcessingStatus.FAILED.value,
        ).count()

    def delete(self, record: CvUpload) -> None:
        try:
            db.session.delete(record)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f"Failed to delete CV upload {record.id}: {e}")
            raise PersistenceFailure(f"Failed to delete upload record: {e}") from e
