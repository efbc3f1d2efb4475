import logging
import os

from flask import Blueprint, jsonify, send_file
from flask_jwt_extended import jwt_required

from cvportal import databases
from cvportal.extensions import db
from cvportal.models import CANDIDATE_TAGS, DEFAULT_TAG, Candidate, Job
from cvportal.payloads import json_object, non_string_fields
from cvportal.services.cv_parser import download_extension

logger = logging.getLogger(__name__)

hr_bp = Blueprint("hr_api", __name__)

JOB_REQUIRED_FIELDS = ("title", "description", "requirements")
JOB_OPTIONAL_FIELDS = ("location", "department", "experience_level", "employment_type", "salary_range")
CANDIDATE_OPTIONAL_FIELDS = ("email", "phone", "notes")


def _job_payload():
    """Validated job fields from the JSON body, or (None, error message)."""
    data = json_object()
    if data is None:
        return None, "Request body must be a JSON object"

    wrong_type = non_string_fields(data, JOB_REQUIRED_FIELDS + JOB_OPTIONAL_FIELDS)
    if wrong_type:
        return None, f"Fields must be strings: {', '.join(wrong_type)}"

    missing = [f for f in JOB_REQUIRED_FIELDS if not (data.get(f) or "").strip()]
    if missing:
        return None, f"Missing required fields: {', '.join(missing)}"

    payload = {f: data[f].strip() for f in JOB_REQUIRED_FIELDS}
    for f in JOB_OPTIONAL_FIELDS:
        payload[f] = data.get(f)
    return payload, None


def _invalid_tag_response(tag):
    return jsonify({
        "error": f"Invalid tag '{tag}'",
        "allowed_tags": list(CANDIDATE_TAGS),
    }), 400


# JOB POSTING ROUTES
@hr_bp.route("/jobs", methods=["GET"])
@jwt_required()
def get_jobs_list():
    return jsonify(databases.get_all_jobs())


@hr_bp.route("/jobs", methods=["POST"])
@jwt_required()
def create_job():
    payload, error = _job_payload()
    if error:
        return jsonify({"error": error}), 400

    try:
        job = Job(**payload)
        db.session.add(job)
        db.session.commit()
    except Exception:
        db.session.rollback()  # rollback in case commit failed
        logger.exception("Failed to create job")
        return jsonify({"error": "Failed to create job"}), 500

    logger.info("Job %s created: %s", job.id, job.title)
    return jsonify({"id": job.id, "message": "Job created successfully"}), 201


@hr_bp.route("/jobs/<int:job_id>", methods=["GET"])
@jwt_required()
def get_job(job_id):
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({"error": "Job not found"}), 404
    return jsonify(databases.job_to_dict(job))


@hr_bp.route("/jobs/<int:job_id>", methods=["PUT"])
@jwt_required()
def update_job(job_id):
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({"error": "Job not found"}), 404

    payload, error = _job_payload()
    if error:
        return jsonify({"error": error}), 400

    try:
        for field, value in payload.items():
            setattr(job, field, value)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update job %s", job_id)
        return jsonify({"error": "Job could not be updated"}), 500

    return jsonify({"success": True, "message": "Job updated successfully"})


@hr_bp.route("/jobs/<int:job_id>", methods=["DELETE"])
@jwt_required()
def delete_job(job_id):
    job = db.session.get(Job, job_id)
    if not job:
        return jsonify({"error": "Job not found"}), 404

    try:
        # reports keep existing with job_id set to NULL
        db.session.delete(job)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete job %s", job_id)
        return jsonify({"error": "Job could not be deleted"}), 500

    return jsonify({"success": True, "message": "Job deleted successfully"})


# CANDIDATE ROUTES
@hr_bp.route("/candidate-tags", methods=["GET"])
@jwt_required()
def get_candidate_tags():
    return jsonify(list(CANDIDATE_TAGS))


@hr_bp.route("/candidates", methods=["GET"])
@jwt_required()
def get_candidates_list():
    return jsonify(databases.get_all_candidates())


@hr_bp.route("/candidates/<int:candidate_id>", methods=["GET"])
@jwt_required()
def get_candidate_detail(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({"error": "Candidate not found"}), 404
    return jsonify(databases.candidate_to_dict(candidate))


@hr_bp.route("/candidates/<int:candidate_id>", methods=["PUT"])
@jwt_required()
def update_candidate(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({"error": "Candidate not found"}), 404

    data = json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return jsonify({"error": "Name cannot be empty"}), 400

    wrong_type = non_string_fields(data, CANDIDATE_OPTIONAL_FIELDS)
    if wrong_type:
        return jsonify({"error": f"Fields must be strings: {', '.join(wrong_type)}"}), 400

    tag = data.get("tag") or DEFAULT_TAG
    if not isinstance(tag, str) or tag not in CANDIDATE_TAGS:
        return _invalid_tag_response(tag)

    try:
        candidate.name = name.strip()
        candidate.tag = tag
        for field in CANDIDATE_OPTIONAL_FIELDS:
            if field in data:
                setattr(candidate, field, data[field])
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update candidate %s", candidate_id)
        return jsonify({"error": "Candidate could not be updated"}), 500

    return jsonify({"success": True})


@hr_bp.route("/candidates/<int:candidate_id>/tag", methods=["PUT"])
@jwt_required()
def update_candidate_tag(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({"error": "Candidate not found"}), 404

    data = json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    tag = data.get("tag")
    if not isinstance(tag, str) or tag not in CANDIDATE_TAGS:
        return _invalid_tag_response(tag)

    try:
        candidate.tag = tag
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update tag of candidate %s", candidate_id)
        return jsonify({"error": "Tag could not be updated"}), 500

    return jsonify({"success": True})


@hr_bp.route("/candidates/<int:candidate_id>", methods=["DELETE"])
@jwt_required()
def delete_candidate(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({"error": "Candidate not found"}), 404

    cv_path = candidate.cv_file_path
    try:
        # reports keep existing with candidate_id set to NULL
        db.session.delete(candidate)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete candidate %s", candidate_id)
        return jsonify({"error": "Candidate could not be deleted"}), 500

    # file removal is a separate step, the row is already gone
    if cv_path and os.path.exists(cv_path):
        os.remove(cv_path)
        logger.info("CV file deleted: %s", cv_path)

    return jsonify({"success": True, "message": "Candidate deleted successfully"})


@hr_bp.route("/candidates/<int:candidate_id>/download", methods=["GET"])
@jwt_required()
def download_candidate_cv(candidate_id):
    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({"error": "Candidate not found"}), 404

    cv_path = candidate.cv_file_path
    if not cv_path or not os.path.exists(cv_path):
        return jsonify({"error": "CV file not found"}), 404

    ext = download_extension(candidate.original_filename, candidate.media_type, cv_path)
    download_name = f"{candidate.name or 'CV'}{ext}"
    return send_file(
        os.path.abspath(cv_path),
        mimetype=candidate.media_type,
        as_attachment=True,
        download_name=download_name,
    )
