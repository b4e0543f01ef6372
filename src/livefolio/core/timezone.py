"""Timezone utilities for export timestamps and cache clocks."""

from datetime import datetime, timedelta
from typing import Optional

import pytz
from dateutil import parser as date_parser

UTC = pytz.utc
EXPORT_TZ = pytz.timezone("Europe/Warsaw")

# Day zero of the spreadsheet serial date system (1899-12-30)
_EXCEL_EPOCH = datetime(1899, 12, 30)


def now_utc() -> datetime:
    """Return current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_utc(dt: datetime) -> datetime:
    """Convert a datetime to UTC. Naive values are assumed to be UTC already."""
    if dt.tzinfo is None:
        return UTC.localize(dt)
    return dt.astimezone(UTC)


def parse_export_datetime(
    value: object,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> Optional[datetime]:
    """
    Parse a timestamp cell from a brokerage export.

    Accepts spreadsheet serial day numbers (int/float or numeric strings) and
    date strings such as "2024-03-01 09:15:02.123". Naive values are localized
    to the export timezone. Returns None for empty or unparseable input.
    """
    tz = tz or EXPORT_TZ
    if value is None:
        return None

    if isinstance(value, (int, float)):
        return _from_serial(float(value), tz)

    text = str(value).strip()
    if not text:
        return None
    try:
        serial = float(text)
    except ValueError:
        pass
    else:
        return _from_serial(serial, tz)

    try:
        dt = date_parser.parse(text)
    except (ValueError, OverflowError):
        return None
    if dt.tzinfo is None:
        dt = tz.localize(dt)
    return dt


def _from_serial(serial: float, tz: pytz.BaseTzInfo) -> Optional[datetime]:
    """Spreadsheet serial day number to an aware datetime."""
    try:
        return tz.localize(_EXCEL_EPOCH + timedelta(days=serial))
    except (OverflowError, ValueError):
        return None
