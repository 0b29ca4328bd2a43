from datetime import date, datetime
from typing import Optional

DATE_FORMAT = "%Y-%m-%d"

def today() -> date:
    return date.today()

def format_date(d: Optional[date]) -> str:
    """Render a date as YYYY-MM-DD; empty string when absent."""
    if d is None:
        return ""
    return d.strftime(DATE_FORMAT)

def parse_date(value) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string strictly.
    Accepts date instances as-is. Returns None for anything that does not
    match the fixed format (including datetimes rendered with a time part).
    """
    if isinstance(value, datetime):
        return None
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    s = value.strip()
    if len(s) != 10:
        return None
    try:
        return datetime.strptime(s, DATE_FORMAT).date()
    except ValueError:
        return None

def is_future(d: date, reference: Optional[date] = None) -> bool:
    """True when d is strictly after the reference day (today by default)."""
    return d > (reference or today())
