"""
French locale formatting helpers.

Pure functions: every helper that depends on "now" accepts an optional
``now`` so callers with an injected clock get deterministic output.
Dates are rendered in Europe/Paris time.
"""

import calendar
import logging
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

from rentdesk.core.timezone import DateLike, now_paris, parse_datetime_paris, to_paris

logger = logging.getLogger(__name__)

FRENCH_MONTHS = [
    "janvier", "février", "mars", "avril", "mai", "juin",
    "juillet", "août", "septembre", "octobre", "novembre", "décembre",
]

FRENCH_MONTH_NAMES = [
    "Janvier", "Février", "Mars", "Avril", "Mai", "Juin",
    "Juillet", "Août", "Septembre", "Octobre", "Novembre", "Décembre",
]

# Sunday = 0, as the dashboard expects
FRENCH_DAY_NAMES = [
    "Dimanche", "Lundi", "Mardi", "Mercredi", "Jeudi", "Vendredi", "Samedi",
]

GROUP_SEPARATOR = "\u202f"
CURRENCY_SEPARATOR = "\u00a0"
CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£", "CHF": "CHF"}


def _now(now: Optional[datetime]) -> datetime:
    return to_paris(now) if now is not None else now_paris()


def format_french_date(value: DateLike) -> str:
    """Format a date as '15 janvier 2024'."""
    dt = parse_datetime_paris(value)
    if dt is None:
        return "Date invalide"
    return f"{dt.day} {FRENCH_MONTHS[dt.month - 1]} {dt.year}"


def format_french_datetime(value: DateLike) -> str:
    """Format a date and time as '15 janvier 2024 à 14:30'."""
    dt = parse_datetime_paris(value)
    if dt is None:
        return "Date et heure invalides"
    return f"{dt.day} {FRENCH_MONTHS[dt.month - 1]} {dt.year} à {dt:%H:%M}"


def format_french_time(value: DateLike) -> str:
    """Format a time as '14:30'."""
    dt = parse_datetime_paris(value)
    if dt is None:
        return "Heure invalide"
    return f"{dt:%H:%M}"


def get_current_french_date(now: Optional[datetime] = None) -> str:
    return format_french_date(_now(now))


def get_current_french_datetime(now: Optional[datetime] = None) -> str:
    return format_french_datetime(_now(now))


def get_current_french_time(now: Optional[datetime] = None) -> str:
    return format_french_time(_now(now))


def get_relative_french_time(value: DateLike, now: Optional[datetime] = None) -> str:
    """Relative time in French, e.g. 'Il y a 2 heures'."""
    dt = parse_datetime_paris(value)
    if dt is None:
        return "Date invalide"

    seconds = int((_now(now) - dt).total_seconds())
    if seconds < 60:
        return "À l'instant"
    if seconds < 3600:
        minutes = seconds // 60
        return f"Il y a {minutes} minute{'s' if minutes > 1 else ''}"
    if seconds < 86400:
        hours = seconds // 3600
        return f"Il y a {hours} heure{'s' if hours > 1 else ''}"
    if seconds < 2592000:
        days = seconds // 86400
        return f"Il y a {days} jour{'s' if days > 1 else ''}"
    return format_french_date(dt)


def get_french_month_name(month_index: int) -> str:
    """Month name for a 0-based index."""
    if 0 <= month_index < len(FRENCH_MONTH_NAMES):
        return FRENCH_MONTH_NAMES[month_index]
    return "Mois invalide"


def get_french_day_name(day_index: int) -> str:
    """Day name for a 0-based index starting on Sunday."""
    if 0 <= day_index < len(FRENCH_DAY_NAMES):
        return FRENCH_DAY_NAMES[day_index]
    return "Jour invalide"


def is_today(value: DateLike, now: Optional[datetime] = None) -> bool:
    dt = parse_datetime_paris(value)
    if dt is None:
        return False
    return dt.date() == _now(now).date()


def get_days_until_due(due_date: DateLike, now: Optional[datetime] = None) -> Optional[int]:
    """
    Calendar days from today to the due date (negative once past due).

    Time of day is dropped on both sides, so a bill due today is 0 whatever
    the hour. Returns None when the due date cannot be parsed.
    """
    due = parse_datetime_paris(due_date)
    if due is None:
        return None
    return (due.date() - _now(now).date()).days


def is_overdue(due_date: DateLike, now: Optional[datetime] = None) -> bool:
    """True when the due date falls on a calendar day before today."""
    days = get_days_until_due(due_date, now)
    return days is not None and days < 0


def _to_decimal(amount: Union[int, float, str, Decimal, None]) -> Decimal:
    if amount is None or amount == "":
        return Decimal("0")
    return Decimal(str(amount))


def format_french_currency(amount: Union[int, float, str, Decimal, None], currency: str = "EUR") -> str:
    """Format an amount the fr-FR way: '1 234,50 €'."""
    try:
        value = _to_decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        if not value.is_finite():
            raise InvalidOperation(amount)
    except InvalidOperation:
        logger.warning("Could not format amount %r as currency", amount)
        return f"{amount} €"

    sign = "-" if value < 0 else ""
    integer_part, decimal_part = f"{abs(value):.2f}".split(".")
    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)

    symbol = CURRENCY_SYMBOLS.get(currency.upper(), currency.upper())
    return f"{sign}{GROUP_SEPARATOR.join(groups)},{decimal_part}{CURRENCY_SEPARATOR}{symbol}"


def format_plain_amount(amount: Union[int, float, str, Decimal, None]) -> str:
    """Render an amount without currency formatting: 100, 99.5."""
    try:
        value = _to_decimal(amount)
        if not value.is_finite():
            raise InvalidOperation(amount)
    except InvalidOperation:
        return str(amount)
    if value == value.to_integral_value():
        return str(int(value))
    return format(value.normalize(), "f")


def get_current_month(now: Optional[datetime] = None) -> str:
    """Current month as YYYY-MM."""
    return f"{_now(now):%Y-%m}"


def get_current_date(now: Optional[datetime] = None) -> str:
    """Current date as YYYY-MM-DD."""
    return f"{_now(now):%Y-%m-%d}"


def get_next_month(now: Optional[datetime] = None) -> str:
    """Next month as YYYY-MM."""
    current = _now(now)
    first_of_next = (current.replace(day=1) + timedelta(days=32)).replace(day=1)
    return f"{first_of_next:%Y-%m}"


def get_due_date(now: Optional[datetime] = None) -> str:
    """Last day of the current month as YYYY-MM-DD."""
    current = _now(now)
    last_day = calendar.monthrange(current.year, current.month)[1]
    return f"{current.year:04d}-{current.month:02d}-{last_day:02d}"
