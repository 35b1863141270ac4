"""Utility functions shared across the scoring and aggregation modules.

Includes lenient date parsing and numeric coercion.  Upstream records
come from an external data layer and may carry missing or malformed
values; these helpers turn them into safe defaults instead of raising.
"""

import datetime
import logging
import math

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Date parsing
# ------------------------------------------------------------------

def parse_datetime(value) -> datetime.datetime | None:
    """Parse an ISO date or datetime into a naive UTC ``datetime``.

    Accepts ``datetime.datetime``, ``datetime.date`` and ISO-8601
    strings (``YYYY-MM-DD``, ``YYYY-MM-DDTHH:MM:SS``, with or without an
    offset or a trailing ``Z``).  Timezone-aware values are converted to
    UTC and stripped of their tzinfo so that they compare with naive
    values.

    Returns ``None`` when the value cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.datetime.fromisoformat(text)
        except ValueError:
            logger.debug("Unparseable timestamp: %r", value)
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(datetime.timezone.utc).replace(tzinfo=None)
    return parsed


def parse_date(value) -> datetime.date | None:
    """Parse an ISO date or datetime into a calendar ``datetime.date``.

    Examples::

        >>> parse_date("2024-03-05")
        datetime.date(2024, 3, 5)
        >>> parse_date("2024-03-05T22:10:00")
        datetime.date(2024, 3, 5)
        >>> parse_date("yesterday") is None
        True
    """
    if isinstance(value, datetime.date) and not isinstance(
        value, datetime.datetime
    ):
        return value
    parsed = parse_datetime(value)
    return parsed.date() if parsed is not None else None


# ------------------------------------------------------------------
# Numeric coercion
# ------------------------------------------------------------------

def to_number(value) -> float:
    """Coerce *value* to a finite ``float``, falling back to ``0.0``.

    ``None``, non-numeric strings, NaN and infinities all become 0 so
    that averages and ratios never propagate NaN.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0

    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp *value* into the closed interval [*low*, *high*]."""
    return max(low, min(high, value))


def mean(values) -> float | None:
    """Return the arithmetic mean of *values* (coerced), or ``None`` if empty."""
    numbers = [to_number(v) for v in values]
    if not numbers:
        return None
    return sum(numbers) / len(numbers)
