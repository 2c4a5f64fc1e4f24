"""Time coefficient for a chosen service date.

The coefficient scales labor only: short notice and weekends cost more,
booking weeks ahead costs less, and major US holidays (plus the Saturday or
Sunday that makes them a long weekend) are charged at the short-notice rate.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional

ANYTIME_IN_A_MONTH = "Anytime in a Month"
ANYTIME_COEFFICIENT = 1.0
HOLIDAY_COEFFICIENT = 1.5


@dataclass(frozen=True)
class TimeQuote:
    """Coefficient and display details for one bookable date."""

    day: Optional[date]
    label: str
    coefficient: float
    holiday_name: str = ""

    def labor_price(self, labor_subtotal: float) -> float:
        return labor_subtotal * self.coefficient


def _thanksgiving(year: int) -> date:
    """Fourth Thursday of November."""
    first = date(year, 11, 1)
    first_thursday = first + timedelta(days=(3 - first.weekday()) % 7)
    return first_thursday + timedelta(weeks=3)


def holidays_for_year(year: int) -> Dict[date, str]:
    """Major holidays of a year, extended to the adjacent weekend day.

    A Friday holiday also makes the Saturday a holiday; a Monday holiday also
    makes the Sunday one.
    """
    base = {
        date(year, 7, 4): "Independence Day",
        _thanksgiving(year): "Thanksgiving Day",
        date(year, 12, 25): "Christmas Day",
    }
    extended = dict(base)
    for day, name in base.items():
        if day.weekday() == 4:
            extended[day + timedelta(days=1)] = f"{name} (long weekend)"
        elif day.weekday() == 0:
            extended[day - timedelta(days=1)] = f"{name} (long weekend)"
    return extended


def holiday_name(day: date) -> str:
    return holidays_for_year(day.year).get(day, "")


def _base_coefficient(days_from_tomorrow: int) -> float:
    if days_from_tomorrow == 0:
        return 1.5
    if days_from_tomorrow == 1:
        return 1.3
    if days_from_tomorrow <= 5:
        return 1.25
    if days_from_tomorrow <= 14:
        return 1.0
    if days_from_tomorrow <= 29:
        return 0.95
    return 0.9


def date_label(day: date) -> str:
    """"Sat, 5 Jul 2025"."""
    return f"{day.strftime('%a')}, {day.day} {day.strftime('%b %Y')}"


def quote_service_date(day: date, today: Optional[date] = None) -> Optional[TimeQuote]:
    """Coefficient for booking the work on ``day``.

    Args:
        day: Requested service date.
        today: Reference date (defaults to the current date).

    Returns:
        The quote, or None when the day is before tomorrow.
    """
    today = today or date.today()
    tomorrow = today + timedelta(days=1)
    days_from_tomorrow = (day - tomorrow).days
    if days_from_tomorrow < 0:
        return None

    coefficient = _base_coefficient(days_from_tomorrow)

    if day.weekday() >= 5:
        if days_from_tomorrow > 30:
            coefficient = 1.05
        else:
            coefficient += 0.1

    name = holiday_name(day)
    if name and coefficient < HOLIDAY_COEFFICIENT:
        coefficient = HOLIDAY_COEFFICIENT

    return TimeQuote(day=day, label=date_label(day), coefficient=round(coefficient, 2), holiday_name=name)


def anytime_quote() -> TimeQuote:
    """Flexible booking: no surcharge or discount."""
    return TimeQuote(day=None, label=ANYTIME_IN_A_MONTH, coefficient=ANYTIME_COEFFICIENT)


def quote_month(year: int, month: int, today: Optional[date] = None) -> List[TimeQuote]:
    """Quotes for every bookable day of a calendar month."""
    day = date(year, month, 1)
    quotes = []
    while day.month == month:
        quote = quote_service_date(day, today)
        if quote is not None:
            quotes.append(quote)
        day += timedelta(days=1)
    return quotes
