import logging
import os

from flask import Blueprint, current_app, jsonify, request, send_file
from flask_jwt_extended import jwt_required

from cvportal import databases
from cvportal.extensions import db
from cvportal.models import AnalysisReport, Candidate, Job
from cvportal.payloads import json_object
from cvportal.services import report_renderer
from cvportal.services.assessment import GENERIC_JOB
from cvportal.services.cv_parser import extract_text, media_type_for

logger = logging.getLogger(__name__)

report_bp = Blueprint("report_api", __name__)


def _as_int(value):
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _current_cv_text(candidate):
    """Re-read the stored CV; fall back to the text captured at upload time."""
    try:
        text = extract_text(candidate.cv_file_path, candidate.media_type or media_type_for(candidate.cv_file_path))
    except Exception:
        logger.exception("Re-extraction failed for candidate %s", candidate.id)
        text = ""
    if text and text.strip():
        return text
    return candidate.cv_text or ""


@report_bp.route("/analyze", methods=["POST"])
@jwt_required()
def analyze_cv():
    data = json_object()
    if data is None:
        return jsonify({"error": "Request body must be a JSON object"}), 400

    candidate_id = _as_int(data.get("candidateId"))
    if candidate_id is None:
        return jsonify({"error": "candidateId is required"}), 400

    candidate = db.session.get(Candidate, candidate_id)
    if not candidate:
        return jsonify({"error": "Candidate not found"}), 404

    job = None
    job_id = None
    if data.get("jobId") not in (None, ""):
        job_id = _as_int(data.get("jobId"))
        if job_id is None:
            return jsonify({"error": "jobId must be an integer"}), 400
        job = db.session.get(Job, job_id)
        if not job:
            return jsonify({"error": "Job not found"}), 404

    if job:
        job_title, job_description, job_requirements = job.title, job.description, job.requirements
    else:
        job_title = GENERIC_JOB["title"]
        job_description = GENERIC_JOB["description"]
        job_requirements = GENERIC_JOB["requirements"]

    assessor = current_app.extensions["fit_assessor"]
    reports_folder = current_app.config["REPORTS_FOLDER"]
    pdf_path = None

    try:
        cv_text = _current_cv_text(candidate)
        result = assessor.assess(cv_text, job_title, job_description, job_requirements)
        analysis_data = result.model_dump()

        report = AnalysisReport(
            candidate_id=candidate.id,
            job_id=job_id,
            analysis_result=result.model_dump_json(),
        )
        db.session.add(report)
        db.session.flush()  # report id names the PDF

        pdf_bytes = report_renderer.render_report_pdf(analysis_data, candidate.name, job_title)
        pdf_filename = report_renderer.build_report_filename(report.id, candidate.name, job_title)
        pdf_path = report_renderer.write_report_pdf(pdf_bytes, reports_folder, pdf_filename)

        report.pdf_filename = pdf_filename
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("CV analysis failed for candidate %s", candidate_id)
        if pdf_path and os.path.exists(pdf_path):
            os.remove(pdf_path)
        return jsonify({"error": "CV analysis failed"}), 500

    logger.info("Report %s created for candidate %s", report.id, candidate.reference_code)
    return jsonify({
        "success": True,
        "analysisId": report.id,
        "pdfFilename": pdf_filename,
        "analysisData": analysis_data,
        "message": "CV analysis completed",
    })


@report_bp.route("/reports", methods=["GET"])
@jwt_required()
def get_reports():
    search = request.args.get("search", "").strip()
    tags = databases.parse_list_param(request.args.get("tags"))
    try:
        score_ranges = databases.parse_score_ranges(request.args.get("scores"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    reports = databases.list_reports(search=search or None, tags=tags, score_ranges=score_ranges)
    return jsonify(reports)


@report_bp.route("/reports/<int:report_id>", methods=["GET"])
@jwt_required()
def get_report(report_id):
    report = databases.get_report_detail(report_id)
    if not report:
        return jsonify({"error": "Report not found"}), 404
    return jsonify(report)


@report_bp.route("/reports/<int:report_id>/download", methods=["GET"])
@jwt_required()
def download_report(report_id):
    report = db.session.get(AnalysisReport, report_id)
    if not report:
        return jsonify({"error": "Report not found"}), 404

    if not report.pdf_filename:
        return jsonify({"error": "PDF file not found"}), 404
    pdf_path = os.path.join(current_app.config["REPORTS_FOLDER"], report.pdf_filename)
    if not os.path.exists(pdf_path):
        return jsonify({"error": "PDF file not found"}), 404

    return send_file(
        os.path.abspath(pdf_path),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=report.pdf_filename,
    )


@report_bp.route("/reports/<int:report_id>", methods=["DELETE"])
@jwt_required()
def delete_report(report_id):
    report = db.session.get(AnalysisReport, report_id)
    if not report:
        return jsonify({"error": "Report not found"}), 404

    pdf_filename = report.pdf_filename
    try:
        db.session.delete(report)
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete report %s", report_id)
        return jsonify({"error": "Report could not be deleted"}), 500

    if pdf_filename:
        pdf_path = os.path.join(current_app.config["REPORTS_FOLDER"], pdf_filename)
        if os.path.exists(pdf_path):
            os.remove(pdf_path)
            logger.info("Report PDF deleted: %s", pdf_path)

    return jsonify({"success": True, "message": "Report deleted successfully"})
