from __future__ import annotations

import io

import pytest

USER = {"X-User-Id": "user-1"}


@pytest.fixture
def client(app, make_pipeline, make_llm, ai_profile):
    make_pipeline(make_llm(ai_profile))
    return app.test_client()


def _post_cv(client, payload: bytes, filename: str = "cv.docx", headers=USER):
    return client.post(
        "/api/cv/upload",
        data={"cvFile": (io.BytesIO(payload), filename)},
        content_type="multipart/form-data",
        headers=headers,
    )


def test_upload_returns_created_profile(client, sample_docx) -> None:
    response = _post_cv(client, sample_docx)

    assert response.status_code == 201
    body = response.get_json()
    assert body["success"] is True
    assert body["data"]["processingStatus"] == "COMPLETED"
    assert body["data"]["fileName"] == "cv.docx"
    assert body["data"]["extractedData"]["personalInfo"]["fullName"] == "Jane Q. Public"


def test_missing_identity_is_unauthorized(client, sample_docx) -> None:
    response = _post_cv(client, sample_docx, headers={})

    assert response.status_code == 401
    assert response.get_json() == {"success": False, "message": "User not authenticated"}


def test_missing_file_is_bad_request(client) -> None:
    response = client.post("/api/cv/upload", data={}, headers=USER)

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_unsupported_format_is_bad_request(client) -> None:
    response = _post_cv(client, b"plain text", filename="cv.txt")

    assert response.status_code == 400
    assert "Unsupported" in response.get_json()["message"]


def test_quota_exceeded_is_too_many_requests(client, sample_docx, ingestion_config) -> None:
    for _ in range(ingestion_config.quota.upload_limit):
        assert _post_cv(client, sample_docx).status_code == 201

    response = _post_cv(client, sample_docx)

    assert response.status_code == 429
    assert response.get_json()["success"] is False


def test_corrupt_file_is_processing_failure(client) -> None:
    response = _post_cv(client, b"PK\x03\x04 broken")

    assert response.status_code == 500
    assert response.get_json()["success"] is False


def test_list_status_and_delete(client, sample_docx) -> None:
    upload_id = _post_cv(client, sample_docx).get_json()["data"]["id"]

    listing = client.get("/api/cv/uploads", headers=USER).get_json()
    assert [item["id"] for item in listing["data"]] == [upload_id]
    assert listing["data"][0]["originalName"] == "cv.docx"

    status = client.get(f"/api/cv/upload/status/{upload_id}", headers=USER)
    assert status.status_code == 200
    assert status.get_json()["data"]["processingStatus"] == "COMPLETED"

    # other users cannot see the upload
    other = client.get(f"/api/cv/upload/status/{upload_id}", headers={"X-User-Id": "user-2"})
    assert other.status_code == 404

    deleted = client.delete(f"/api/cv/uploads/{upload_id}", headers=USER)
    assert deleted.status_code == 200

    missing = client.delete(f"/api/cv/uploads/{upload_id}", headers=USER)
    assert missing.status_code == 404


def test_ping(app) -> None:
    response = app.test_client().get("/api/ping")

    assert response.get_json() == {"ok": True, "message": "pong"}
