# routes/session.py
from flask import jsonify
from flask_login import login_required, current_user

from . import session_bp, current_state
from ..constants import SESSION_COLLECTIONS


@session_bp.route("", methods=["GET"])
@login_required
def bootstrap():
    """Signed-in user, appearance and the collections loaded at sign-in"""
    state = current_state()
    payload = {
        "user": current_user.profile,
        "appearance": state.appearance,
    }
    for name in SESSION_COLLECTIONS:
        payload[name] = state.collection(name).all()
    return jsonify(payload), 200
