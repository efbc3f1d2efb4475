import logging
import os
import re
from datetime import datetime

from jinja2 import Environment, FileSystemLoader, select_autoescape

from cvportal.errors import ReportRenderError

# Configure logging
logger = logging.getLogger(__name__)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "templates")
REPORT_TEMPLATE = "analysis_report.html"

LIST_FIELDS = (
    "matched_skills",
    "partial_skills",
    "missing_skills",
    "language_skills",
    "strengths",
    "weaknesses",
    "ats_feedback",
)

PDF_STYLESHEET = "@page { size: A4; margin: 20mm; }"

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def render_report_html(analysis, candidate_name, job_title, generated_at=None):
    """Render the assessment into the report HTML. Missing list fields render empty."""
    data = dict(analysis or {})
    for field in LIST_FIELDS:
        data[field] = data.get(field) or []

    template = _env.get_template(REPORT_TEMPLATE)
    return template.render(
        analysis=data,
        candidate_name=candidate_name or "",
        job_title=job_title or "",
        generated_at=(generated_at or datetime.now()).strftime("%d.%m.%Y %H:%M"),
    )


def rasterize_html(html):
    """Print the HTML to PDF bytes with WeasyPrint."""
    # imported here so the API still starts on hosts without pango/cairo
    from weasyprint import CSS, HTML

    try:
        return HTML(string=html).write_pdf(stylesheets=[CSS(string=PDF_STYLESHEET)])
    except Exception as e:
        raise ReportRenderError(f"PDF rendering failed: {e}") from e


def render_report_pdf(analysis, candidate_name, job_title, generated_at=None):
    html = render_report_html(analysis, candidate_name, job_title, generated_at)
    return rasterize_html(html)


def _slug(value, fallback):
    slug = re.sub(r"[^A-Za-z0-9]+", "_", value or "").strip("_")
    return slug[:60] or fallback


def build_report_filename(report_id, candidate_name, job_title):
    """Report files are keyed by the report id, the names only make them readable."""
    return f"report_{report_id}_{_slug(candidate_name, 'candidate')}_{_slug(job_title, 'job')}.pdf"


def write_report_pdf(pdf_bytes, reports_folder, filename):
    os.makedirs(reports_folder, exist_ok=True)
    output_path = os.path.join(reports_folder, filename)
    with open(output_path, "wb") as f:
        f.write(pdf_bytes)
    logger.info("Report PDF written: %s", output_path)
    return output_path
