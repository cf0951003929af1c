# routes/auth.py
from flask import current_app, jsonify, request
from flask_login import login_user, logout_user, login_required, current_user
from marshmallow import ValidationError

from . import auth_bp, validation_error
from ..schemas.user_schemas import LoginSchema
from ..services.session_service import SessionService

from clinic import logger


@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Password sign-in. On success the four session collections are already
    loaded when the response is sent.
    ---
    tags:
      - Auth
    responses:
      200:
        description: Signed in
      401:
        description: Invalid credentials
      503:
        description: Backend unreachable (connection-error screen)
    """
    try:
        credentials = LoginSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    session_user = SessionService.start_session(credentials['email'], credentials['password'])
    if current_user.is_authenticated:
        # Signing in again on the same cookie replaces the previous session
        current_app.extensions['clinic_sessions'].discard(current_user.get_id())
    login_user(session_user)
    return jsonify({"message": "Signed in", "user": session_user.profile}), 200


@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    session_user = current_user._get_current_object()
    SessionService.end_session(session_user)
    logout_user()
    return jsonify({"message": "Signed out"}), 200


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return jsonify(current_user.profile), 200
