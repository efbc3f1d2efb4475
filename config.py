import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv() # load variables from .env

DEFAULT_JWT_SECRET = 'your-jwt-secret-key'


class Config:
    PORT = int(os.getenv('PORT', 3000))
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # Single relational file by default; any SQLAlchemy URL works
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///database.sqlite')
    SQLALCHEMY_TRACK_MODIFICATIONS = False  # disables overhead warning

    # Bearer tokens: shared secret, fixed expiry, no refresh
    JWT_SECRET_KEY = os.getenv('JWT_SECRET', DEFAULT_JWT_SECRET)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=24)
    JWT_TOKEN_LOCATION = ['headers']

    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'uploads/cvs')
    REPORTS_FOLDER = os.getenv('REPORTS_FOLDER', 'uploads/reports')
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB

    # Fit assessment model
    ASSESSMENT_PROVIDER = os.getenv('ASSESSMENT_PROVIDER', 'openai')
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_MODEL = os.getenv('OPENAI_MODEL', 'gpt-3.5-turbo')
    GEMINI_API_KEY = os.getenv('GEMINI_API_KEY')
    GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'models/gemini-2.5-flash')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

    # HR account created at startup when missing
    SEED_HR_EMAIL = os.getenv('SEED_HR_EMAIL', 'admin@ik.com')
    SEED_HR_PASSWORD = os.getenv('SEED_HR_PASSWORD', 'admin123')
