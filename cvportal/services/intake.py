# cvportal/services/intake.py
import os
import random
import re
import time
from datetime import datetime

from werkzeug.utils import secure_filename

from cvportal.models import Candidate

REFERENCE_CODE_PATTERN = re.compile(r"^CND-\d{4}-\d{6}$")
MAX_REFERENCE_ATTEMPTS = 20


def make_reference_code(year=None, rng=random):
    year = year or datetime.now().year
    return f"CND-{year}-{rng.randint(0, 999999):06d}"


def generate_reference_code(rng=random):
    """Return a reference code not yet present in the candidates table."""
    for _ in range(MAX_REFERENCE_ATTEMPTS):
        code = make_reference_code(rng=rng)
        exists = Candidate.query.filter_by(reference_code=code).first()
        if not exists:
            return code
    raise RuntimeError("Could not generate a unique reference code")


def candidate_name_from_filename(filename):
    """
    Derive a display name from an uploaded file name.

    "Jane_Doe-CV.pdf" -> "Jane Doe CV"
    """
    name = os.path.basename(filename or "")
    stem, ext = os.path.splitext(name)
    if stem and ext:
        name = stem
    name = re.sub(r"[_-]", " ", name).strip()
    return name or "Unnamed Candidate"


def stored_cv_filename(original_filename):
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    safe_name = secure_filename(original_filename or "") or "cv"
    return f"cv-{unique_suffix}-{safe_name}"
