# services/report_service.py
"""Operational indicators of the appointment book"""
import math

DONE_STATUSES = ('COMPLETED', 'CONFIRMED')


def occupancy_metrics(appointments, capacity_slots, no_show_ratio):
    """
    Occupancy is measured against a configured capacity. The no-show figure is
    an estimate derived from cancellations and is flagged as such.
    """
    canceled = len([a for a in appointments if a.get('status') == 'CANCELED'])
    completed = len([a for a in appointments if a.get('status') in DONE_STATUSES])
    rate = (len(appointments) / capacity_slots * 100) if capacity_slots else 0
    return {
        'rate': round(rate, 1),
        'capacity_slots': capacity_slots,
        'completed': completed,
        'canceled': canceled,
        'no_show': {'value': math.floor(canceled * no_show_ratio), 'estimate': True},
    }


def professional_breakdown(appointments, users):
    rows = []
    for user in users:
        own = [a for a in appointments if a.get('professional_id') == user.get('id')]
        rows.append({
            'name': (user.get('name') or '').split(' ')[0],
            'total': len(own),
            'completed': len([a for a in own if a.get('status') in DONE_STATUSES]),
            'canceled': len([a for a in own if a.get('status') == 'CANCELED']),
        })
    return rows


def status_breakdown(appointments):
    counts = {
        'Concluídos': len([a for a in appointments if a.get('status') in DONE_STATUSES]),
        'Cancelados': len([a for a in appointments if a.get('status') == 'CANCELED']),
        'Agendados': len([a for a in appointments if a.get('status') == 'SCHEDULED']),
    }
    return [{'name': name, 'value': value} for name, value in counts.items()]


def report_context(appointments, occupancy, professionals):
    productive = ', '.join(f"{p['name']} ({p['total']})" for p in professionals)
    return (
        "Relatório Operacional da Clínica: "
        f"Total de agendamentos: {len(appointments)}. "
        f"Taxa de ocupação: {occupancy['rate']:.1f}%. "
        f"Agendamentos concluídos: {occupancy['completed']}. "
        f"Agendamentos cancelados: {occupancy['canceled']}. "
        f"Profissionais mais produtivos: {productive}."
    )
