from __future__ import annotations

from cvmate.services.cv_ingestion.config import QuotaSettings
from cvmate.services.cv_ingestion.quota import UploadQuotaService


class CountingRepository:
    def __init__(self, count: int):
        self.count = count
        self.queried = []

    def count_active_for_user(self, user_id: str) -> int:
        self.queried.append(user_id)
        return self.count


def test_allows_uploads_below_the_limit() -> None:
    service = UploadQuotaService(QuotaSettings(upload_limit=3), CountingRepository(2))

    assert service.check_upload_quota("user-1").allowed


def test_rejects_uploads_at_the_limit() -> None:
    repository = CountingRepository(3)
    service = UploadQuotaService(QuotaSettings(upload_limit=3), repository)

    decision = service.check_upload_quota("user-1")

    assert not decision.allowed
    assert "(3)" in decision.message
    assert repository.queried == ["user-1"]


def test_zero_limit_means_unlimited() -> None:
    repository = CountingRepository(100)
    service = UploadQuotaService(QuotaSettings(upload_limit=0), repository)

    assert service.check_upload_quota("user-1").allowed
    assert repository.queried == []
