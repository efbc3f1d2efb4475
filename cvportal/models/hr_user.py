from ..extensions import db
from datetime import datetime


class HRUser(db.Model):
    __tablename__ = "hr_users"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # for string representation
    def __repr__(self):
        return f"<HRUser {self.email}>"
