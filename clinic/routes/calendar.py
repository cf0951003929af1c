# routes/calendar.py
from datetime import date

from flask import current_app, jsonify, request
from flask_login import login_required
from marshmallow import ValidationError

from . import calendar_bp, current_state, validation_error
from ..schemas.appointment_schema import AppointmentSchema, RescheduleSchema
from ..services import calendar_service
from ..services.calendar_service import CalendarService, VIEW_MODES
from ..services.reminder_service import (
    ReminderService,
    is_within_24h_window,
    is_reminder_eligible,
    reminders_due
)

from clinic import logger


def _selected_day():
    value = request.args.get('date')
    if not value:
        return date.today()
    return calendar_service.parse_day(value)


def _bad_date():
    return jsonify({"error": {"date": ["Use the YYYY-MM-DD format."]}}), 400


def _with_reminder_flags(appointment):
    return dict(
        appointment,
        in_reminder_window=is_within_24h_window(appointment),
        needs_reminder=is_reminder_eligible(appointment)
    )


@calendar_bp.route("/<mode>", methods=["GET"])
@login_required
def view(mode):
    """Day, week or month view of the selected ``date`` (defaults to today)"""
    if mode not in VIEW_MODES:
        return jsonify({"error": f"Unknown view mode: {mode}"}), 404
    try:
        day = _selected_day()
    except ValueError:
        return _bad_date()

    appointments = [_with_reminder_flags(a) for a in current_state().appointments.all()]
    return jsonify(calendar_service.render_view(mode, appointments, day)), 200


@calendar_bp.route("/navigate", methods=["GET"])
@login_required
def navigate():
    mode = request.args.get('mode', 'day')
    direction = request.args.get('direction', 'next')
    if mode not in VIEW_MODES or direction not in ('prev', 'next'):
        return jsonify({"error": "mode must be day/week/month and direction prev/next"}), 400
    try:
        day = _selected_day()
    except ValueError:
        return _bad_date()
    return jsonify({"mode": mode, "date": calendar_service.navigate(day, mode, direction).isoformat()}), 200


@calendar_bp.route("/month/select", methods=["GET"])
@login_required
def select_month_day():
    """Which view a click on a month cell leads to"""
    try:
        day = _selected_day()
    except ValueError:
        return _bad_date()
    return jsonify(calendar_service.select_month_day(current_state().appointments.all(), day)), 200


@calendar_bp.route("/appointments/new", methods=["GET"])
@login_required
def new_appointment_form():
    try:
        day = _selected_day()
    except ValueError:
        return _bad_date()
    return jsonify(CalendarService.new_appointment_defaults(current_state(), day, request.args.get('time'))), 200


@calendar_bp.route("/appointments", methods=["POST"])
@login_required
def create_appointment():
    try:
        data = AppointmentSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = None
    appointment = current_state().appointments.save(data)
    logger.info(f"Appointment created: {appointment['id']}")
    return jsonify({"message": "Appointment created successfully", "appointment": appointment}), 201


@calendar_bp.route("/appointments/<appointment_id>", methods=["PUT"])
@login_required
def replace_appointment(appointment_id):
    state = current_state()
    state.appointments.require(appointment_id)
    try:
        data = AppointmentSchema().load(request.get_json() or {})
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        return validation_error(e)

    data['id'] = appointment_id
    appointment = state.appointments.save(data)
    return jsonify({"message": "Appointment updated successfully", "appointment": appointment}), 200


@calendar_bp.route("/appointments/<appointment_id>", methods=["DELETE"])
@login_required
def delete_appointment(appointment_id):
    current_state().appointments.delete(appointment_id)
    return jsonify({"message": "Appointment deleted"}), 200


@calendar_bp.route("/appointments/<appointment_id>/reschedule", methods=["POST"])
@login_required
def reschedule(appointment_id):
    """Drop of an appointment card on a day-view slot"""
    try:
        data = RescheduleSchema().load(request.get_json() or {})
    except ValidationError as e:
        return validation_error(e)

    appointment = CalendarService.reschedule(current_state(), appointment_id, data['time'])
    return jsonify({"appointment": appointment}), 200


@calendar_bp.route("/appointments/<appointment_id>/reminder", methods=["POST"])
@login_required
def send_reminder(appointment_id):
    result = ReminderService.send_reminder(
        current_state(),
        appointment_id,
        clinic_name=current_app.config['CLINIC_NAME']
    )
    return jsonify(result), 200


@calendar_bp.route("/appointments/<appointment_id>/professional-alert", methods=["GET"])
@login_required
def professional_alert(appointment_id):
    return jsonify(ReminderService.professional_alert(current_state(), appointment_id)), 200


@calendar_bp.route("/reminders", methods=["GET"])
@login_required
def pending_reminders():
    """Appointments starting within 24 hours that were not reminded yet"""
    return jsonify(reminders_due(current_state().appointments.all())), 200
