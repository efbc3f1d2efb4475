from cvportal.extensions import db
from datetime import datetime

# workflow labels an HR user can attach to a candidate
CANDIDATE_TAGS = ("Pending", "First Interview", "Not Suitable", "On Hold", "Approved")
DEFAULT_TAG = "Pending"


class Candidate(db.Model):
    __tablename__ = "candidates"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    reference_code = db.Column(db.String(32), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255))
    email = db.Column(db.String(255))
    phone = db.Column(db.String(50))
    cv_file_path = db.Column(db.String(512), nullable=False)
    original_filename = db.Column(db.String(255))
    media_type = db.Column(db.String(100))
    cv_text = db.Column(db.Text)
    uploaded_at = db.Column(db.DateTime, default=datetime.utcnow)

    tag = db.Column(
        db.Enum(*CANDIDATE_TAGS, name="candidate_tag", validate_strings=True),
        default=DEFAULT_TAG,
        nullable=False,
    )
    notes = db.Column(db.Text)

    reports = db.relationship("AnalysisReport", back_populates="candidate")
