import logging
import os

from flask import Blueprint, current_app, jsonify, request

from cvportal.extensions import db
from cvportal.models import Candidate, DEFAULT_TAG
from cvportal.services.cv_parser import ALLOWED_MEDIA_TYPES, extract_cv_text
from cvportal.services.intake import (
    candidate_name_from_filename,
    generate_reference_code,
    stored_cv_filename,
)

logger = logging.getLogger(__name__)

cv_bp = Blueprint("cv", __name__)


# public intake: no token required
@cv_bp.route("/upload", methods=["POST"])
def upload_cv():
    cv_file = request.files.get("cv")
    if cv_file is None or not cv_file.filename:
        return jsonify({"error": "CV file is required"}), 400

    media_type = cv_file.mimetype
    if media_type not in ALLOWED_MEDIA_TYPES:
        return jsonify({"error": "Only PDF, DOCX and TXT files are allowed"}), 400

    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_folder, exist_ok=True)
    file_path = os.path.join(upload_folder, stored_cv_filename(cv_file.filename))

    try:
        cv_file.save(file_path)
        logger.info("CV saved: %s", file_path)

        cv_text = extract_cv_text(file_path, media_type, cv_file.filename)
        candidate_name = candidate_name_from_filename(cv_file.filename)
        reference_code = generate_reference_code()

        candidate = Candidate(
            reference_code=reference_code,
            name=candidate_name,
            cv_file_path=file_path,
            original_filename=cv_file.filename,
            media_type=media_type,
            cv_text=cv_text,
            tag=DEFAULT_TAG,
        )
        db.session.add(candidate)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Upload failed for %s", cv_file.filename)
        if os.path.exists(file_path):
            os.remove(file_path)
        return jsonify({"error": "CV upload failed"}), 500

    logger.info("Candidate %s created from %s", reference_code, cv_file.filename)
    return jsonify({
        "success": True,
        "referenceCode": reference_code,
        "candidateName": candidate_name,
        "message": "CV uploaded successfully",
    }), 200
