# cvportal/services/auth.py
import logging

from flask_jwt_extended import create_access_token

from cvportal.extensions import db, bcrypt
from cvportal.models import HRUser

logger = logging.getLogger(__name__)


class AuthService:
    @staticmethod
    def authenticate_user(email, password):
        """
        Check email & password using bcrypt.
        Return (token, user, None) if valid, (None, None, error) otherwise.
        """
        logger.info("🔐 Login attempt: %s", email)

        user = HRUser.query.filter_by(email=email).first()

        if not user or not bcrypt.check_password_hash(user.password, password):
            logger.info("❌ Invalid credentials for %s", email)
            return None, None, "Invalid credentials"

        # expiry comes from JWT_ACCESS_TOKEN_EXPIRES
        access_token = create_access_token(
            identity=str(user.id),
            additional_claims={"email": user.email},
        )

        logger.info("✅ Login successful for %s", email)
        return access_token, user, None

    @staticmethod
    def ensure_hr_user(email, password):
        """Create the HR account when it does not exist yet. Returns True if created."""
        if HRUser.query.filter_by(email=email).first():
            return False

        hashed_password = bcrypt.generate_password_hash(password).decode("utf-8")
        db.session.add(HRUser(email=email, password=hashed_password))
        db.session.commit()
        logger.info("✅ HR user %s created", email)
        return True
