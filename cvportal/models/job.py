from cvportal.extensions import db
from datetime import datetime


class Job(db.Model):
    __tablename__ = "jobs"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    requirements = db.Column(db.Text, nullable=False)
    location = db.Column(db.String(255))
    department = db.Column(db.String(255))
    experience_level = db.Column(db.String(100))
    employment_type = db.Column(db.String(100))
    salary_range = db.Column(db.String(100))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    reports = db.relationship("AnalysisReport", back_populates="job")
