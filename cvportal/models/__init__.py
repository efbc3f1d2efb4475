from .hr_user import HRUser
from .job import Job
from .candidate import Candidate, CANDIDATE_TAGS, DEFAULT_TAG
from .analysis_report import AnalysisReport

__all__ = [
    "HRUser",
    "Job",
    "Candidate",
    "AnalysisReport",
    "CANDIDATE_TAGS",
    "DEFAULT_TAG",
]
