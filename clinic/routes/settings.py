# routes/settings.py
from urllib.parse import quote

from flask import jsonify, request
from flask_login import login_required, current_user
from marshmallow import ValidationError

from . import settings_bp, current_state, validation_error
from ..constants import DEFAULT_APPEARANCE
from ..schemas.user_schemas import UserSchema, AppearanceSchema

from clinic import logger


def _default_avatar(name):
    return f"https://ui-avatars.com/api/?name={quote(name)}&background=random"


@settings_bp.route("/profile", methods=["GET"])
@login_required
def get_profile():
    return jsonify(current_user.profile), 200


@settings_bp.route("/profile", methods=["PUT"])
@login_required
def update_profile():
    """
    Update the signed-in user's own profile. Role and active flag are kept
    as they are.
    """
    try:
        data = UserSchema(partial=True).load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    profile = dict(current_user.profile)
    for field in ('name', 'email', 'avatar', 'specialty'):
        if field in data:
            profile[field] = data[field]

    saved = current_state().users.save(profile)
    current_user.profile = saved
    logger.info(f"Profile updated for {saved['id']}")
    return jsonify({"message": "Profile updated successfully", "user": saved}), 200


@settings_bp.route("/employees", methods=["GET"])
@login_required
def list_employees():
    return jsonify(current_state().users.all()), 200


@settings_bp.route("/employees", methods=["POST"])
@login_required
def create_employee():
    try:
        data = UserSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    data['active'] = True
    data['avatar'] = data.get('avatar') or _default_avatar(data['name'])
    employee = current_state().users.save(data)
    return jsonify({"message": "Employee created successfully", "user": employee}), 201


@settings_bp.route("/employees/<user_id>", methods=["PUT"])
@login_required
def replace_employee(user_id):
    state = current_state()
    state.users.require(user_id)
    try:
        data = UserSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = user_id
    data['avatar'] = data.get('avatar') or _default_avatar(data['name'])
    employee = state.users.save(data)
    if user_id == current_user.profile.get('id'):
        current_user.profile = employee
    return jsonify({"message": "Employee updated successfully", "user": employee}), 200


@settings_bp.route("/employees/<user_id>", methods=["DELETE"])
@login_required
def delete_employee(user_id):
    if user_id == current_user.profile.get('id'):
        return jsonify({"error": "You cannot remove your own profile."}), 409
    current_state().users.delete(user_id)
    return jsonify({"message": "Employee deleted"}), 200


@settings_bp.route("/appearance", methods=["GET"])
@login_required
def get_appearance():
    return jsonify(current_state().appearance), 200


@settings_bp.route("/appearance", methods=["PUT"])
@login_required
def update_appearance():
    try:
        data = AppearanceSchema().load(request.get_json() or {})
    except ValidationError as e:
        return validation_error(e)

    state = current_state()
    state.appearance = data
    return jsonify(state.appearance), 200


@settings_bp.route("/appearance", methods=["DELETE"])
@login_required
def reset_appearance():
    state = current_state()
    state.appearance = dict(DEFAULT_APPEARANCE)
    return jsonify(state.appearance), 200
