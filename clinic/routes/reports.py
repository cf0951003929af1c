# routes/reports.py
from flask import current_app, jsonify
from flask_login import login_required

from . import reports_bp, current_state
from ..fixtures import PlaceholderData
from ..services.insight_service import InsightService
from ..services.report_service import (
    occupancy_metrics,
    professional_breakdown,
    report_context,
    status_breakdown
)


def _operational_report(state):
    appointments = state.appointments.all()
    occupancy = occupancy_metrics(
        appointments,
        current_app.config['OCCUPANCY_CAPACITY_SLOTS'],
        current_app.config['NO_SHOW_ESTIMATE_RATIO']
    )
    occupancy['scheduled'] = len([a for a in appointments if a.get('status') == 'SCHEDULED'])
    return appointments, occupancy, professional_breakdown(appointments, state.users.all())


@reports_bp.route("", methods=["GET"])
@login_required
def overview():
    appointments, occupancy, professionals = _operational_report(current_state())
    return jsonify({
        "occupancy": occupancy,
        "professionals": professionals,
        "statuses": status_breakdown(appointments),
        "trend": PlaceholderData.trend_series(),
    }), 200


@reports_bp.route("/insights", methods=["POST"])
@login_required
def insights():
    state = current_state()
    appointments, occupancy, professionals = _operational_report(state)
    with state.insight_call('reports'):
        text = InsightService.from_config().get_smart_insights(
            report_context(appointments, occupancy, professionals)
        )
    return jsonify({"insight": text}), 200
