"""
Helper functions for the Asylum Timeline library.
"""

import re
import logging
from datetime import date, datetime, timedelta
from typing import Optional, Union
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

PARTIAL_DATE_DEFAULT = datetime(2000, 1, 1)


def parse_date(date_input: Union[str, date, datetime, None]) -> Optional[date]:
    """
    Validate and convert date input to a calendar date.

    Args:
        date_input: Date as string, date/datetime object, or None

    Returns:
        date object or None if input is None or empty

    Raises:
        ValueError: If date string cannot be parsed
    """
    if date_input is None:
        return None

    if isinstance(date_input, datetime):
        return date_input.date()

    if isinstance(date_input, date):
        return date_input

    if isinstance(date_input, str):
        if not date_input.strip():
            return None
        try:
            return date_parser.isoparse(date_input.strip()).date()
        except (ValueError, TypeError):
            pass
        try:
            # Missing parts come from a fixed default, not from the clock
            return date_parser.parse(date_input, default=PARTIAL_DATE_DEFAULT).date()
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"Invalid date format: {date_input}") from e

    raise ValueError(f"Unsupported date type: {type(date_input)}")


def format_iso(value: Optional[date]) -> Optional[str]:
    """Serialize a date as YYYY-MM-DD (None passes through)."""
    return value.isoformat() if value else None


def format_date(value: date) -> str:
    """Long, human-readable form used in alert messages."""
    return f"{value.strftime('%A, %B')} {value.day}, {value.year}"


def add_days(value: date, days: int) -> date:
    return value + timedelta(days=days)


def add_months(value: date, months: int) -> date:
    """
    Calendar month arithmetic; the day is clamped to the end of short months.

    Args:
        value: Starting date
        months: Number of months to add (negative to subtract)

    Returns:
        Shifted date
    """
    return value + relativedelta(months=months)


def add_years(value: date, years: int) -> date:
    """Calendar year arithmetic (Feb 29 + 1 year lands on Feb 28)."""
    return value + relativedelta(years=years)


def sanitize_text(text: str) -> str:
    """
    Clean free-text answers coming from intake forms.

    Args:
        text: Raw text to sanitize

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    text = re.sub(r'\s+', ' ', text.strip())

    # Normalize quotes
    text = re.sub(r'[“”]', '"', text)
    text = re.sub(r'[‘’]', "'", text)

    return text.strip()


def to_snake_case(key: str) -> str:
    """
    Convert camelCase intake keys (``hasFiledI589``) to snake_case.

    Args:
        key: Key as produced by the intake UI

    Returns:
        snake_case key (``has_filed_i589``)
    """
    if not key:
        return ""
    key = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', key)
    key = key.replace("-", "_")
    return key.lower()


def setup_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """
    Set up a logger for the library.

    Args:
        name: Logger name
        level: Logging level

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
