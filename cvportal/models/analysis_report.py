from cvportal.extensions import db
from datetime import datetime


class AnalysisReport(db.Model):
    __tablename__ = "analysis_reports"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    # both references survive deletion of the row they point at (set to NULL)
    candidate_id = db.Column(db.Integer, db.ForeignKey("candidates.id", ondelete="SET NULL"), nullable=True)
    job_id = db.Column(db.Integer, db.ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True)
    analysis_result = db.Column(db.Text, nullable=False)
    pdf_filename = db.Column(db.String(255))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    candidate = db.relationship("Candidate", back_populates="reports")
    job = db.relationship("Job", back_populates="reports")
