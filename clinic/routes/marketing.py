# routes/marketing.py
from flask import jsonify
from flask_login import login_required

from . import marketing_bp, current_state
from ..fixtures import PlaceholderData
from ..services.analytics_service import lead_source_conversion


@marketing_bp.route("", methods=["GET"])
@login_required
def overview():
    return jsonify({
        "lead_sources": lead_source_conversion(current_state().clients.all()),
        "campaigns": PlaceholderData.campaigns(),
    }), 200
