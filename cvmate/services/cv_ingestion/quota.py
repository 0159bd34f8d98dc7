from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .config import QuotaSettings
from .repository import CvUploadRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    message: str


class UploadQuotaService:
    """Answers "may this user upload another CV?" and nothing more."""

    def __init__(
        self,
        settings: Optional[QuotaSettings] = None,
        repository: Optional[CvUploadRepository] = None,
    ):
        self.settings = settings or QuotaSettings()
        self.repository = repository or CvUploadRepository()

    def check_upload_quota(self, user_id: str) -> QuotaDecision:
        limit = self.settings.upload_limit
        if limit <= 0:
            return QuotaDecision(True, "Upload allowed")

        used = self.repository.count_active_for_user(user_id)
        if used >= limit:
            logger.warning(f"CV upload quota reached for user={user_id} ({used}/{limit})")
            return QuotaDecision(
                False,
                f"CV upload limit reached ({limit}). Delete an existing CV to upload a new one.",
            )
        return QuotaDecision(True, "Upload allowed")
