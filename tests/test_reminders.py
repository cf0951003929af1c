"""
Reminder eligibility and WhatsApp compose links.
"""
from datetime import datetime, timedelta
from urllib.parse import unquote

from clinic.services.reminder_service import (
    format_long_date,
    generate_whatsapp_link,
    get_reminder_message,
    is_reminder_eligible,
    is_within_24h_window,
    reminders_due,
)

NOW = datetime(2024, 3, 12, 9, 0)


def _appointment_at(moment, **fields):
    appointment = {'date': moment.strftime('%Y-%m-%d'), 'time': moment.strftime('%H:%M'), 'reminder_sent': False}
    appointment.update(fields)
    return appointment


class TestReminderWindow:

    def test_exactly_24h_ahead_is_eligible(self):
        assert is_reminder_eligible(_appointment_at(NOW + timedelta(hours=24)), NOW)

    def test_one_minute_past_24h_is_not(self):
        assert not is_reminder_eligible(_appointment_at(NOW + timedelta(hours=24, minutes=1)), NOW)

    def test_started_appointment_is_not(self):
        assert not is_reminder_eligible(_appointment_at(NOW - timedelta(minutes=1)), NOW)
        assert not is_within_24h_window(_appointment_at(NOW), NOW)

    def test_already_reminded_is_never_eligible(self):
        appointment = _appointment_at(NOW + timedelta(hours=23), reminder_sent=True)
        assert is_within_24h_window(appointment, NOW)
        assert not is_reminder_eligible(appointment, NOW)

    def test_23h_ahead_is_eligible(self):
        assert is_reminder_eligible(_appointment_at(NOW + timedelta(hours=23)), NOW)

    def test_reminders_due_filters_collection(self):
        due = _appointment_at(NOW + timedelta(hours=2), id='a1')
        later = _appointment_at(NOW + timedelta(days=3), id='a2')
        broken = {'id': 'a3', 'date': 'amanhã', 'time': '10h'}
        assert reminders_due([due, later, broken], NOW) == [due]


class TestWhatsappLink:

    def test_link_uses_country_code_and_digits(self):
        link = generate_whatsapp_link('(11) 98765-4321', 'Olá!')
        assert link.startswith('https://wa.me/5511987654321?text=')

    def test_text_is_encoded_like_encode_uri_component(self):
        link = generate_whatsapp_link('11987654321', "Olá Ana! (confirmado) *Botox* às 10:00")
        text = link.split('?text=', 1)[1]

        assert ' ' not in text
        assert '%20' in text
        assert '(confirmado)' in text
        assert '*Botox*' in text
        assert '%3A' in text
        assert unquote(text) == "Olá Ana! (confirmado) *Botox* às 10:00"

    def test_reminder_message(self):
        message = get_reminder_message('Ana', 'Botox', '2023-11-25', '14:00', 'Clínica Teste')
        assert format_long_date('2023-11-25') == '25 de novembro'
        assert '*25 de novembro*' in message
        assert '*Botox*' in message
        assert 'Clínica Teste' in message


class TestReminderRoutes:

    def test_send_reminder_once(self, auth_client, make_client, make_appointment):
        start = datetime.now() + timedelta(hours=2)
        client = make_client(phone='11987654321')
        appointment = make_appointment(client['id'], date=start.strftime('%Y-%m-%d'), time=start.strftime('%H:%M'))

        pending = auth_client.get('/calendar/reminders').get_json()
        assert [a['id'] for a in pending] == [appointment['id']]

        response = auth_client.post(f"/calendar/appointments/{appointment['id']}/reminder")
        assert response.status_code == 200
        body = response.get_json()
        assert body['link'].startswith('https://wa.me/5511987654321?text=')
        assert body['appointment']['reminder_sent'] is True

        again = auth_client.post(f"/calendar/appointments/{appointment['id']}/reminder")
        assert again.status_code == 409
        assert auth_client.get('/calendar/reminders').get_json() == []

    def test_reminder_outside_window_is_refused(self, auth_client, make_client, make_appointment):
        appointment = make_appointment(make_client()['id'], date='2020-01-01')
        response = auth_client.post(f"/calendar/appointments/{appointment['id']}/reminder")
        assert response.status_code == 409

    def test_professional_alert(self, auth_client, make_client, make_appointment):
        appointment = make_appointment(make_client(name='Beatriz Costa')['id'])
        response = auth_client.get(f"/calendar/appointments/{appointment['id']}/professional-alert")
        assert response.status_code == 200
        assert 'Beatriz Costa' in response.get_json()['message']
        assert 'Dra. Elena Ramos' in response.get_json()['message']

    def test_compose_link(self, auth_client):
        response = auth_client.post('/chat/compose', json={'phone': '11 98765-4321', 'text': 'Oi'})
        assert response.status_code == 200
        assert response.get_json()['link'] == 'https://wa.me/5511987654321?text=Oi'
