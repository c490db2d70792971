# =============================================================================
# SALES ORDERS v1.0 - UTILS/DATES
# =============================================================================
# Date parsing and formatting helpers
# =============================================================================

import re
from datetime import date, datetime
from typing import Any, Optional


_DATE_ONLY = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    Parse a date/datetime value.

    Supported inputs:
    - datetime (returned as is)
    - date (midnight)
    - ISO strings: YYYY-MM-DD, YYYY-MM-DDTHH:MM[:SS[.fff]] with optional Z/offset

    Returns:
        datetime, or None when the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    if _DATE_ONLY.match(text):
        try:
            return datetime.strptime(text, '%Y-%m-%d')
        except ValueError:
            return None

    # fromisoformat only accepts the Z suffix from Python 3.11
    if text.endswith('Z') or text.endswith('z'):
        text = text[:-1] + '+00:00'

    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def is_valid_date(value: Any) -> bool:
    """True when parse_datetime understands the value."""
    return parse_datetime(value) is not None


def month_bucket(moment: datetime) -> str:
    """Month key YYYY-MM."""
    return moment.strftime('%Y-%m')
