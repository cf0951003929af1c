from flask import Blueprint, jsonify
from flask_login import current_user

# Authentication routes
auth_bp = Blueprint('auth', __name__)

# Session bootstrap (collections loaded at sign-in)
session_bp = Blueprint('session', __name__)

# One blueprint per dashboard view
dashboard_bp = Blueprint('dashboard', __name__)
clients_bp = Blueprint('clients', __name__)
calendar_bp = Blueprint('calendar', __name__)
funnel_bp = Blueprint('funnel', __name__)
finance_bp = Blueprint('finance', __name__)
chat_bp = Blueprint('chat', __name__)
marketing_bp = Blueprint('marketing', __name__)
settings_bp = Blueprint('settings', __name__)
suppliers_bp = Blueprint('suppliers', __name__)
analytics_bp = Blueprint('analytics', __name__)
reports_bp = Blueprint('reports', __name__)

# Local uploads of the SQL driver
media_bp = Blueprint('media', __name__)


def current_state():
    """State container of the signed-in session"""
    return current_user.state


def validation_error(e):
    return jsonify({"error": e.messages}), 400


# Import route handlers to register routes
from . import (  # noqa: E402,F401
    auth,
    session,
    dashboard,
    clients,
    calendar,
    funnel,
    finance,
    chat,
    marketing,
    settings,
    suppliers,
    analytics,
    reports,
    media
)
