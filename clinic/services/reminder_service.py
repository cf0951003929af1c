# services/reminder_service.py
"""
WhatsApp compose links and appointment reminders.

Nothing is delivered from here: a reminder is "sent" once its compose link
has been handed out, and there is no receipt to wait for.
"""
from datetime import datetime, timedelta
from urllib.parse import quote

from clinic import logger
from ..errors import ActionConflict, RecordNotFound
from ..utils.helpers import digits_only

REMINDER_WINDOW = timedelta(hours=24)
COUNTRY_CODE = '55'

MONTH_NAMES = (
    'janeiro', 'fevereiro', 'março', 'abril', 'maio', 'junho',
    'julho', 'agosto', 'setembro', 'outubro', 'novembro', 'dezembro'
)


def generate_whatsapp_link(phone, text):
    # Same unreserved set as JavaScript's encodeURIComponent
    encoded_text = quote(text, safe="-_.!~*'()")
    return f"https://wa.me/{COUNTRY_CODE}{digits_only(phone)}?text={encoded_text}"


def format_long_date(date_str):
    """``2023-11-25`` -> ``25 de novembro``"""
    day = datetime.strptime(date_str, '%Y-%m-%d')
    return f"{day.day:02d} de {MONTH_NAMES[day.month - 1]}"


def get_reminder_message(client_name, procedure, date_str, time_str, clinic_name):
    return (
        f"Olá {client_name}! ✨ Passando para confirmar seu procedimento de *{procedure}* "
        f"amanhã, dia *{format_long_date(date_str)}* às *{time_str}* na {clinic_name}. "
        f"Podemos confirmar sua presença? 🌸"
    )


def get_professional_alert_message(professional_name, client_name, procedure, time_str):
    return (
        f"Olá {professional_name}! 🗓️ Lembrete de Agenda: Amanhã às *{time_str}* você tem "
        f"um atendimento de *{procedure}* com o(a) paciente *{client_name}*."
    )


def appointment_start(appointment):
    """Scheduled start as a naive local datetime, or None when unparseable"""
    try:
        return datetime.strptime(f"{appointment.get('date')} {appointment.get('time')}", '%Y-%m-%d %H:%M')
    except (TypeError, ValueError):
        return None


def is_within_24h_window(appointment, now=None):
    """True when the start lies in (now, now + 24h]"""
    start = appointment_start(appointment)
    if start is None:
        return False
    delta = start - (now or datetime.now())
    return timedelta(0) < delta <= REMINDER_WINDOW


def is_reminder_eligible(appointment, now=None):
    return not appointment.get('reminder_sent') and is_within_24h_window(appointment, now)


def reminders_due(appointments, now=None):
    return [a for a in appointments if is_reminder_eligible(a, now)]


class ReminderService:

    @staticmethod
    def send_reminder(state, appointment_id, clinic_name, now=None):
        """
        Build the client's reminder link and flag the appointment as reminded.

        Returns:
            dict: ``{"link", "message", "appointment"}``

        Raises:
            RecordNotFound: unknown appointment or client
            ActionConflict: outside the 24h window or already reminded
        """
        appointment = state.appointments.require(appointment_id)
        if appointment.get('reminder_sent'):
            raise ActionConflict("Lembrete já enviado para este agendamento.")
        if not is_within_24h_window(appointment, now):
            raise ActionConflict("O agendamento não está dentro da janela de 24 horas.")

        client = state.clients.get(appointment.get('client_id'))
        if client is None:
            raise RecordNotFound(f"Client {appointment.get('client_id')} not found")

        message = get_reminder_message(
            client.get('name'),
            appointment.get('procedure'),
            appointment.get('date'),
            appointment.get('time'),
            clinic_name
        )
        link = generate_whatsapp_link(client.get('phone'), message)

        appointment['reminder_sent'] = True
        saved = state.appointments.save(appointment)
        logger.info(f"Reminder link issued for appointment {appointment_id}")
        return {'link': link, 'message': message, 'appointment': saved}

    @staticmethod
    def professional_alert(state, appointment_id):
        appointment = state.appointments.require(appointment_id)
        professional = state.users.get(appointment.get('professional_id'))
        client = state.clients.get(appointment.get('client_id'))
        if professional is None or client is None:
            raise RecordNotFound("Professional or client of this appointment not found")
        return {
            'message': get_professional_alert_message(
                professional.get('name'),
                client.get('name'),
                appointment.get('procedure'),
                appointment.get('time')
            )
        }
