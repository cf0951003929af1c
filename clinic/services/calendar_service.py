# services/calendar_service.py
"""
Time-grid view model of the calendar: day slots, Sunday-first weeks and
six-week month grids, plus drag-and-drop rescheduling.
"""
import calendar
from datetime import date, timedelta

from clinic import logger

FIRST_SLOT_HOUR = 8
LAST_SLOT_HOUR = 21
MONTH_GRID_CELLS = 42

VIEW_MODES = ('day', 'week', 'month')


def _build_day_slots():
    slots = []
    for hour in range(FIRST_SLOT_HOUR, LAST_SLOT_HOUR + 1):
        slots.append(f"{hour:02d}:00")
        slots.append(f"{hour:02d}:30")
    return tuple(slots)


# 08:00, 08:30, ... 21:30
DAY_SLOTS = _build_day_slots()


def parse_day(value):
    """Parse ``YYYY-MM-DD``; raises ValueError on anything else"""
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def appointments_on(appointments, day):
    day_str = day.isoformat()
    return [a for a in appointments if a.get('date') == day_str]


def day_view(appointments, day):
    """
    Slots of one day with the appointments whose date and time equal the slot
    exactly. Several appointments may share a slot.
    """
    todays = appointments_on(appointments, day)
    return {
        'mode': 'day',
        'date': day.isoformat(),
        'slots': [
            {'time': slot, 'appointments': [a for a in todays if a.get('time') == slot]}
            for slot in DAY_SLOTS
        ]
    }


def week_days(day):
    """The seven dates of ``day``'s week, starting on Sunday"""
    start = day - timedelta(days=(day.weekday() + 1) % 7)
    return [start + timedelta(days=offset) for offset in range(7)]


def week_view(appointments, day):
    return {
        'mode': 'week',
        'date': day.isoformat(),
        'days': [
            {
                'date': d.isoformat(),
                'selected': d == day,
                'appointments': sorted(appointments_on(appointments, d), key=lambda a: a.get('time') or '')
            }
            for d in week_days(day)
        ]
    }


def month_grid(year, month):
    """
    Always 42 cells: the trailing days of the previous month up to the first
    Sunday, the month itself, then days of the next month.

    Returns:
        list[tuple[date, bool]]: (day, belongs to the requested month)
    """
    first = date(year, month, 1)
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    return [
        (cell, cell.month == month)
        for cell in (start + timedelta(days=offset) for offset in range(MONTH_GRID_CELLS))
    ]


def month_view(appointments, day, today=None):
    today = today or date.today()
    cells = []
    for cell, current_month in month_grid(day.year, day.month):
        day_apps = appointments_on(appointments, cell)
        cells.append({
            'date': cell.isoformat(),
            'current_month': current_month,
            'today': cell == today,
            'selected': cell == day,
            'appointment_count': len(day_apps),
            'client_ids': [a.get('client_id') for a in day_apps[:3]],
            'overflow': max(len(day_apps) - 3, 0)
        })
    return {'mode': 'month', 'date': day.isoformat(), 'cells': cells}


def render_view(mode, appointments, day):
    if mode == 'day':
        return day_view(appointments, day)
    if mode == 'week':
        return week_view(appointments, day)
    if mode == 'month':
        return month_view(appointments, day)
    raise ValueError(f"Unknown view mode: {mode}")


def add_months(day, months):
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def navigate(day, mode, direction):
    """Move the selected date one day, week or month forward or back"""
    step = 1 if direction == 'next' else -1
    if mode == 'day':
        return day + timedelta(days=step)
    if mode == 'week':
        return day + timedelta(days=7 * step)
    if mode == 'month':
        return add_months(day, step)
    raise ValueError(f"Unknown view mode: {mode}")


def select_month_day(appointments, day):
    """Clicking a month cell opens the day view only when the day has appointments"""
    mode = 'day' if appointments_on(appointments, day) else 'month'
    return {'mode': mode, 'date': day.isoformat()}


class CalendarService:
    """Appointment changes made from the calendar"""

    @staticmethod
    def reschedule(state, appointment_id, slot):
        """
        Move an appointment to another slot of its day. Only the time changes;
        collisions with other appointments are allowed.
        """
        if slot not in DAY_SLOTS:
            raise ValueError(f"{slot} is not a calendar slot")
        appointment = state.appointments.require(appointment_id)
        previous = appointment.get('time')
        appointment['time'] = slot
        saved = state.appointments.save(appointment)
        logger.info(f"Rescheduled appointment {appointment_id} from {previous} to {slot}")
        return saved

    @staticmethod
    def new_appointment_defaults(state, day, slot=None):
        """Prefilled form for the add-appointment modal"""
        users = state.users.all()
        clients = state.clients.all()
        return {
            'date': day.isoformat(),
            'time': slot or DAY_SLOTS[0],
            'status': 'SCHEDULED',
            'professional_id': users[0]['id'] if users else '',
            'client_id': clients[0]['id'] if clients else '',
            'procedure': '',
            'reminder_sent': False
        }
