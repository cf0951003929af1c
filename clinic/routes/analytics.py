# routes/analytics.py
from flask import jsonify
from flask_login import login_required

from . import analytics_bp, current_state
from ..services.analytics_service import client_analytics, insight_context
from ..services.insight_service import InsightService


@analytics_bp.route("", methods=["GET"])
@login_required
def overview():
    """Age cohorts, spend tiers, procedure ranking and average LTV"""
    state = current_state()
    return jsonify(client_analytics(state.clients.all(), state.appointments.all())), 200


@analytics_bp.route("/insights", methods=["POST"])
@login_required
def insights():
    state = current_state()
    context = insight_context(state.clients.all(), state.appointments.all())
    with state.insight_call('analytics'):
        text = InsightService.from_config().get_smart_insights(context)
    return jsonify({"insight": text}), 200
