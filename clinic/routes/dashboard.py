# routes/dashboard.py
from flask import jsonify
from flask_login import login_required

from . import dashboard_bp, current_state
from ..fixtures import PlaceholderData
from ..services.analytics_service import procedure_ranking
from ..services.reminder_service import reminders_due


@dashboard_bp.route("", methods=["GET"])
@login_required
def overview():
    """
    Home panel: record-derived stats, procedure mix and the reminders due.
    ---
    The performance chart has no backing collection and is served as a
    placeholder series.
    """
    state = current_state()
    clients = state.clients.all()
    appointments = state.appointments.all()
    transactions = state.transactions.all()

    active = len([c for c in clients if c.get('status') == 'ACTIVE'])
    conversion_rate = round(active / len(clients) * 100, 1) if clients else 0
    paid_income = sum(
        float(t.get('value') or 0) for t in transactions
        if t.get('type') == 'INCOME' and t.get('status') == 'PAID'
    )

    return jsonify({
        "stats": {
            "total_clients": len(clients),
            "conversion_rate": conversion_rate,
            "paid_income": paid_income,
            "total_appointments": len(appointments),
        },
        "procedure_mix": procedure_ranking(appointments),
        "reminders_due": reminders_due(appointments),
        "performance": PlaceholderData.performance_series(),
    }), 200
