# services/analytics_service.py
"""
Read-only summaries over the in-memory collections, recomputed on every call.
"""
from datetime import date

from ..constants import LEAD_SOURCES

AGE_BANDS = ('Sub 25', '25-35', '36-45', '46-60', '60+')
SPEND_TIERS = ('Novos', 'Recorrentes', 'Fidelizados', 'VIPs')
TOP_PROCEDURES = 6


def _birth_year(birth_date):
    try:
        return int(str(birth_date)[:4])
    except (TypeError, ValueError):
        return None


def age_band(birth_date, current_year):
    """
    Band of ``current_year - birth year``; month and day are ignored.
    Unparseable birth dates fall through to the last band.
    """
    year = _birth_year(birth_date)
    if year is None:
        return AGE_BANDS[-1]
    age = current_year - year
    if age < 25:
        return 'Sub 25'
    if age <= 35:
        return '25-35'
    if age <= 45:
        return '36-45'
    if age <= 60:
        return '46-60'
    return '60+'


def age_cohorts(clients, today=None):
    current_year = (today or date.today()).year
    counts = dict.fromkeys(AGE_BANDS, 0)
    for client in clients:
        counts[age_band(client.get('birth_date'), current_year)] += 1
    return [{'name': name, 'value': value} for name, value in counts.items()]


def spend_tier(total_spent):
    spent = float(total_spent or 0)
    if spent < 1000:
        return 'Novos'
    if spent < 3000:
        return 'Recorrentes'
    if spent < 5000:
        return 'Fidelizados'
    return 'VIPs'


def spend_tiers(clients):
    counts = dict.fromkeys(SPEND_TIERS, 0)
    for client in clients:
        counts[spend_tier(client.get('total_spent'))] += 1
    return [{'name': name, 'value': value} for name, value in counts.items()]


def procedure_ranking(appointments, limit=TOP_PROCEDURES):
    """Most booked procedures; equal counts keep first-encountered order"""
    counts = {}
    for appointment in appointments:
        procedure = appointment.get('procedure')
        counts[procedure] = counts.get(procedure, 0) + 1
    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [{'name': name, 'value': value} for name, value in ranked[:limit]]


def lead_source_conversion(clients):
    result = []
    for source in LEAD_SOURCES:
        source_clients = [c for c in clients if c.get('source') == source]
        total = len(source_clients)
        if total == 0:
            continue
        converted = len([c for c in source_clients if c.get('status') == 'ACTIVE'])
        result.append({
            'name': source,
            'total': total,
            'converted': converted,
            'rate': round(converted / total * 100, 1)
        })
    return result


def average_lifetime_value(clients):
    if not clients:
        return 0
    return sum(float(c.get('total_spent') or 0) for c in clients) / len(clients)


def client_analytics(clients, appointments, today=None):
    return {
        'total_clients': len(clients),
        'average_ltv': round(average_lifetime_value(clients), 2),
        'age_cohorts': age_cohorts(clients, today),
        'spend_tiers': spend_tiers(clients),
        'top_procedures': procedure_ranking(appointments),
    }


def insight_context(clients, appointments):
    top = ', '.join(item['name'] or '' for item in procedure_ranking(appointments))
    return (
        f"Análise de Pacientes: {len(clients)} totais. Top procedimentos: {top}. "
        f"LTV Médio: R$ {average_lifetime_value(clients):.2f}"
    )

