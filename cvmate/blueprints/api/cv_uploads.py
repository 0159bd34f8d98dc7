from functools import wraps
from typing import Callable

from flask import current_app, g, jsonify, request
from cvmate.blueprints.api import api_bp
from cvmate.services.cv_ingestion import CvIngestionError, CvUploadPipeline
import logging

logger = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"


def require_user(fn: Callable) -> Callable:
    """Require the caller identity forwarded by the gateway in ``X-User-Id``."""

    @wraps(fn)
    def wrapped(*args, **kwargs):
        user_id = (request.headers.get(USER_HEADER) or "").strip()
        if not user_id:
            return _error("User not authenticated", 401)
        g.user_id = user_id
        return fn(*args, **kwargs)

    return wrapped


def _error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _pipeline() -> CvUploadPipeline:
    return current_app.extensions["cv_upload_pipeline"]


@api_bp.route("/cv/upload", methods=["POST"])
@require_user
def upload_cv():
    """Upload a CV and run the full ingestion pipeline synchronously"""
    if "cvFile" not in request.files:
        return _error("No file provided", 400)

    file = request.files["cvFile"]
    if file.filename == "":
        return _error("No file selected", 400)

    try:
        result = _pipeline().process_upload(file, g.user_id)
    except CvIngestionError as e:
        logger.error(f"CV upload failed user={g.user_id} code={e.code}: {e}")
        status = e.http_status if e.http_status in (400, 429) else 500
        return _error(str(e), status)

    return (
        jsonify(
            {
                "success": True,
                "message": "CV uploaded and processed successfully",
                "data": result,
            }
        ),
        201,
    )


@api_bp.route("/cv/uploads", methods=["GET"])
@require_user
def list_cv_uploads():
    """Get all CV uploads for the current user"""
    records = _pipeline().repository.list_for_user(g.user_id)
    return jsonify(
        {"success": True, "data": [record.to_summary_dict() for record in records]}
    )


@api_bp.route("/cv/upload/status/<string:upload_id>", methods=["GET"])
@require_user
def get_cv_upload_status(upload_id):
    record = _pipeline().repository.get_for_user(upload_id, g.user_id)
    if not record:
        return _error("CV upload not found", 404)
    return jsonify({"success": True, "data": record.to_status_dict()})


@api_bp.route("/cv/uploads/<string:upload_id>", methods=["DELETE"])
@require_user
def delete_cv_upload(upload_id):
    pipeline = _pipeline()
    record = pipeline.repository.get_for_user(upload_id, g.user_id)
    if not record:
        return _error("CV upload not found", 404)

    try:
        pipeline.delete_upload(record)
    except CvIngestionError as e:
        logger.error(f"Failed to delete CV upload {upload_id}: {e}")
        return _error(f"Failed to delete CV upload: {e}", 500)

    return jsonify({"success": True, "message": "CV upload deleted"})
