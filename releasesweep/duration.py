"""
ISO-8601 duration parsing for the max-age input.

Supports the designator form ``PnYnMnWnDTnHnMnS``:
    P1W       one week
    P30D      thirty days
    P1M       one calendar month
    PT12H     twelve hours
    P1Y2M3DT4H5M6S

Years and months are calendar units and must be whole numbers. Weeks, days
and the time components accept decimal fractions (``P1.5D``, ``PT0,5H``).
"""

import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

DURATION_RE = re.compile(
    r'^P(?!$)'
    r'(?:(?P<years>\d+(?:[.,]\d+)?)Y)?'
    r'(?:(?P<months>\d+(?:[.,]\d+)?)M)?'
    r'(?:(?P<weeks>\d+(?:[.,]\d+)?)W)?'
    r'(?:(?P<days>\d+(?:[.,]\d+)?)D)?'
    r'(?:T(?=\d)'
    r'(?:(?P<hours>\d+(?:[.,]\d+)?)H)?'
    r'(?:(?P<minutes>\d+(?:[.,]\d+)?)M)?'
    r'(?:(?P<seconds>\d+(?:[.,]\d+)?)S)?'
    r')?$'
)


@dataclass(frozen=True)
class Duration:
    """
    A parsed ISO-8601 duration.

    Calendar units (months) are kept apart from the fixed-length part so
    that subtracting ``P1M`` from March 31st lands on the last day of
    February rather than an approximate 30 days earlier.
    """
    months: int = 0
    delta: timedelta = timedelta(0)

    def subtract_from(self, moment: datetime) -> datetime:
        """
        Return ``moment`` minus this duration.

        The time and day part is applied first, then calendar months,
        clamping the day of month when the target month is shorter.
        """
        result = moment - self.delta
        if self.months:
            result = _shift_months(result, -self.months)
        return result


def _number(value: Optional[str]) -> float:
    if not value:
        return 0.0
    return float(value.replace(',', '.'))


def _whole(value: Optional[str], unit: str, duration: str) -> int:
    amount = _number(value)
    if amount != int(amount):
        raise ValueError(f"Fractional {unit} are not supported in duration: {duration}")
    return int(amount)


def _shift_months(moment: datetime, months: int) -> datetime:
    month_index = moment.year * 12 + (moment.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def parse_duration(value: str) -> Duration:
    """
    Parse an ISO-8601 duration string.

    Args:
        value: Duration such as "P1W" or "P1DT12H"

    Returns:
        Duration

    Raises:
        ValueError: If value is not a valid ISO-8601 duration
    """
    text = (value or '').strip().upper()
    match = DURATION_RE.match(text)
    if not match:
        raise ValueError(f"Invalid ISO-8601 duration: {value!r}")

    parts = match.groupdict()
    years = _whole(parts['years'], 'years', value)
    months = _whole(parts['months'], 'months', value)

    delta = timedelta(
        weeks=_number(parts['weeks']),
        days=_number(parts['days']),
        hours=_number(parts['hours']),
        minutes=_number(parts['minutes']),
        seconds=_number(parts['seconds']),
    )
    return Duration(months=years * 12 + months, delta=delta)
