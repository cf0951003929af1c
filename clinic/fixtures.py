"""
Placeholder data for dashboard panels that have no backing collection yet.

Every payload built here carries ``"placeholder": True`` so callers never
mistake it for figures derived from clinic records.
"""

PERFORMANCE_SERIES = (
    {'name': 'Jan', 'sales': 4200, 'leads': 2800},
    {'name': 'Fev', 'sales': 3800, 'leads': 1900},
    {'name': 'Mar', 'sales': 5100, 'leads': 4200},
    {'name': 'Abr', 'sales': 4900, 'leads': 3100},
    {'name': 'Mai', 'sales': 5800, 'leads': 4500},
    {'name': 'Jun', 'sales': 6200, 'leads': 5100},
)

CAMPAIGNS = (
    {'id': 1, 'name': 'Lembretes Automáticos 24h', 'status': 'Ativa', 'sent': 124, 'opens': 118, 'type': 'WhatsApp API'},
    {'id': 2, 'name': 'Reativação de Leads (30d)', 'status': 'Ativa', 'sent': 45, 'opens': 32, 'type': 'WhatsApp API'},
    {'id': 3, 'name': 'Promoção Verão Botox', 'status': 'Enviada', 'sent': 850, 'opens': 620, 'type': 'WhatsApp API'},
)

CONVERSATIONS = (
    {'id': '1', 'name': 'Beatriz Costa', 'last_message': 'Tudo bem, aguardo você.', 'time': '10:30', 'unread': 2, 'online': True},
    {'id': '2', 'name': 'Renata Souza', 'last_message': 'Qual o valor do botox?', 'time': '09:45', 'unread': 0, 'online': False},
    {'id': '3', 'name': 'Maria Helena', 'last_message': 'Confirmado para amanhã às 14h.', 'time': 'Ontem', 'unread': 0, 'online': True},
)

# Fifteen days of bookings vs. attended appointments
TREND_SERIES = tuple(
    {'day': day, 'agendamentos': 5 + (day * 7) % 10, 'efetivacao': 4 + (day * 5) % 8}
    for day in range(1, 16)
)


def _placeholder(items):
    return {'placeholder': True, 'items': [dict(item) for item in items]}


class PlaceholderData:

    @staticmethod
    def performance_series():
        return _placeholder(PERFORMANCE_SERIES)

    @staticmethod
    def campaigns():
        return _placeholder(CAMPAIGNS)

    @staticmethod
    def conversations(term=None):
        items = CONVERSATIONS
        if term:
            items = [c for c in CONVERSATIONS if term.lower() in c['name'].lower()]
        return _placeholder(items)

    @staticmethod
    def trend_series():
        return _placeholder(TREND_SERIES)
