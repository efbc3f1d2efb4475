import json

from sqlalchemy import or_

from cvportal.extensions import db
from cvportal.models import AnalysisReport, Candidate, Job


def _iso(value):
    return value.isoformat() if value else None


def get_all_jobs():
    """All job postings, newest first."""
    jobs = Job.query.order_by(Job.created_at.desc(), Job.id.desc()).all()
    return [job_to_dict(j) for j in jobs]


def get_all_candidates():
    candidates = Candidate.query.order_by(Candidate.uploaded_at.desc(), Candidate.id.desc()).all()
    return [candidate_to_dict(c, include_text=False) for c in candidates]


def extract_score(analysis_result):
    """Read overall_score out of a stored assessment blob; None when absent or unreadable."""
    try:
        data = json.loads(analysis_result or "")
    except (TypeError, ValueError):
        return None
    if not isinstance(data, dict):
        return None
    score = data.get("overall_score")
    if isinstance(score, bool) or not isinstance(score, (int, float)):
        return None
    return score


def parse_score_ranges(raw):
    """
    Parse "60-100,0-39" into [(60.0, 100.0), (0.0, 39.0)].

    Raises ValueError for anything that is not a min-max pair of numbers.
    """
    ranges = []
    for part in (raw or "").split(","):
        part = part.strip()
        if not part:
            continue
        bounds = part.split("-")
        if len(bounds) != 2:
            raise ValueError(f"Invalid score range: {part}")
        low, high = (float(b.strip()) for b in bounds)
        if low > high:
            raise ValueError(f"Invalid score range: {part}")
        ranges.append((low, high))
    return ranges


def parse_list_param(raw):
    return [item.strip() for item in (raw or "").split(",") if item.strip()]


def _reports_query():
    return (
        db.session.query(AnalysisReport, Candidate, Job)
        .outerjoin(Candidate, AnalysisReport.candidate_id == Candidate.id)
        .outerjoin(Job, AnalysisReport.job_id == Job.id)
    )


def list_reports(search=None, tags=None, score_ranges=None):
    """
    Reports joined with candidate and job, newest first.

    search matches candidate name, reference code or job title (case-insensitive),
    tags restricts to candidates carrying one of the tags, score_ranges keeps
    reports whose stored score falls inside any (min, max) pair.
    """
    query = _reports_query()

    if search:
        term = f"%{search}%"
        query = query.filter(
            or_(
                Candidate.name.ilike(term),
                Candidate.reference_code.ilike(term),
                Job.title.ilike(term),
            )
        )

    if tags:
        query = query.filter(Candidate.tag.in_(tags))

    rows = query.order_by(AnalysisReport.created_at.desc(), AnalysisReport.id.desc()).all()

    # score lives inside the JSON blob, so this filter runs in Python
    if score_ranges:
        filtered = []
        for row in rows:
            score = extract_score(row[0].analysis_result)
            if score is not None and any(low <= score <= high for low, high in score_ranges):
                filtered.append(row)
        rows = filtered

    return [report_to_dict(report, candidate, job) for report, candidate, job in rows]


def get_report_detail(report_id):
    row = _reports_query().filter(AnalysisReport.id == report_id).first()
    if not row:
        return None
    report, candidate, job = row
    return report_to_dict(report, candidate, job, include_analysis=True)


# ==================== HELPER FUNCTIONS ====================

def job_to_dict(job: Job):
    return {
        "id": job.id,
        "title": job.title,
        "description": job.description,
        "requirements": job.requirements,
        "location": job.location,
        "department": job.department,
        "experience_level": job.experience_level,
        "employment_type": job.employment_type,
        "salary_range": job.salary_range,
        "created_at": _iso(job.created_at),
    }


def candidate_to_dict(c: Candidate, include_text=True):
    data = {
        "id": c.id,
        "reference_code": c.reference_code,
        "name": c.name,
        "email": c.email,
        "phone": c.phone,
        "cv_file_path": c.cv_file_path,
        "original_filename": c.original_filename,
        "media_type": c.media_type,
        "uploaded_at": _iso(c.uploaded_at),
        "tag": c.tag,
        "notes": c.notes,
    }
    if include_text:
        data["cv_text"] = c.cv_text
    return data


def report_to_dict(report: AnalysisReport, candidate=None, job=None, include_analysis=False):
    data = {
        "id": report.id,
        "candidate_id": report.candidate_id,
        "job_id": report.job_id,
        "analysis_result": report.analysis_result,
        "overall_score": extract_score(report.analysis_result),
        "pdf_filename": report.pdf_filename,
        "created_at": _iso(report.created_at),
        "candidate_name": candidate.name if candidate else None,
        "reference_code": candidate.reference_code if candidate else None,
        "tag": candidate.tag if candidate else None,
        "job_title": job.title if job else None,
    }
    if include_analysis:
        try:
            data["analysis"] = json.loads(report.analysis_result)
        except ValueError:
            data["analysis"] = None
    return data
