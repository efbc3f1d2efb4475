import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from config import Config, DEFAULT_JWT_SECRET
from .extensions import bcrypt, cors, db, jwt, migrate
from . import models  # noqa: F401
from .routes.auth_routes import auth_bp
from .routes.cv_routes import cv_bp
from .routes.hr_routes import hr_bp
from .routes.report_routes import report_bp
from .database.seed.seed_all import seed_all
from .services.assessment import build_assessor
from .services.auth import AuthService

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    if app.config.get("JWT_SECRET_KEY") == DEFAULT_JWT_SECRET:
        logger.warning("⚠️ JWT_SECRET is not set, tokens are signed with the built-in default secret")

    # Allow CORS for the HR panel
    cors.init_app(app, resources={r"/api/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # extensions initialization
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    bcrypt.init_app(app)

    register_jwt_handlers()
    register_error_handlers(app)

    app.register_blueprint(cv_bp, url_prefix="/api/cv")
    app.register_blueprint(auth_bp, url_prefix="/api/hr")
    app.register_blueprint(hr_bp, url_prefix="/api/hr")
    app.register_blueprint(report_bp, url_prefix="/api/hr")

    app.cli.add_command(seed_all)

    # model backend is swappable, tests replace this entry
    app.extensions["fit_assessor"] = build_assessor(app.config)

    with app.app_context():
        db.create_all()
        AuthService.ensure_hr_user(app.config["SEED_HR_EMAIL"], app.config["SEED_HR_PASSWORD"])

    return app


def register_jwt_handlers():
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({"error": "Access token required"}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({"error": "Invalid or expired token"}), 403

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({"error": "Invalid or expired token"}), 403


def register_error_handlers(app):
    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception("Unhandled error")
        return jsonify({"error": "Internal server error"}), 500
