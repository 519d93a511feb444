"""
Date parsing for statement dates

Statement dates are kept as the original text; this module turns them into
calendar dates for monthly aggregation.
"""
from datetime import date, datetime
from typing import Optional

DATE_FORMATS = (
    '%Y-%m-%d',      # 2024-01-15
    '%Y/%m/%d',      # 2024/01/15
    '%m/%d/%Y',      # 01/15/2024
    '%m/%d/%y',      # 1/15/24
    '%m-%d-%Y',      # 01-15-2024
    '%m-%d-%y',      # 01-15-24
    '%b %d, %Y',     # Jan 15, 2024
    '%b %d %Y',      # Jan 15 2024
    '%B %d, %Y',     # January 15, 2024
    '%B %d %Y',      # January 15 2024
    '%d %b %Y',      # 15 Jan 2024
    '%d %B %Y',      # 15 January 2024
    '%Y-%m-%dT%H:%M:%S',
    '%Y-%m-%d %H:%M:%S',
)


def parse_date(date_str: Optional[str]) -> Optional[date]:
    """
    Parse a statement date

    Args:
        date_str: Date text as it appeared in the source

    Returns:
        The calendar date, or None when no known format matches
    """
    if not date_str:
        return None

    text = ' '.join(date_str.split())
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def month_key(value: date) -> str:
    """YYYY-MM key; zero padding keeps string order chronological"""
    return f"{value.year:04d}-{value.month:02d}"
