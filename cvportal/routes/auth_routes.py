import logging

from flask import Blueprint, jsonify

from cvportal.payloads import json_object
from cvportal.services.auth import AuthService

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = json_object()
    if not data:
        return jsonify({"error": "No JSON data provided"}), 400

    email = data.get("email")
    password = data.get("password")

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        return jsonify({"error": "Email and password are required"}), 400

    try:
        token, user, error = AuthService.authenticate_user(email, password)
    except Exception:
        logger.exception("Login error")
        return jsonify({"error": "Internal server error"}), 500

    if not token:
        return jsonify({"error": error}), 401

    return jsonify({"token": token, "user": {"id": user.id, "email": user.email}}), 200
