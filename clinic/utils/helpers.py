import re
import uuid
from datetime import datetime


def generate_id(prefix):
    """Client-side identifier assigned when a record is first saved"""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def today_iso():
    return datetime.now().date().isoformat()


def digits_only(value):
    return re.sub(r'[^0-9]', '', value or '')


def matches_term(record, term, fields):
    """Case-insensitive substring match of ``term`` against any of ``fields``"""
    if not term:
        return True
    needle = term.lower()
    return any(needle in str(record.get(field) or '').lower() for field in fields)


def format_brl(value):
    """
    Format a number the way pt-BR locale formatting does: dot thousands
    separator, comma decimals, trailing zero decimals dropped.
    """
    text = f"{float(value or 0):,.2f}"
    integer, decimals = text.split('.')
    integer = integer.replace(',', '.')
    decimals = decimals.rstrip('0')
    return f"{integer},{decimals}" if decimals else integer
