import logging
import re
from datetime import date, datetime, timezone


# Custom logging formatter to support colors
class ColoredFormatter(logging.Formatter):
    # Define color codes
    COLORS = {
        'DEBUG': '\033[94m',   # Blue
        'INFO': '\033[92m',    # Green
        'WARNING': '\033[93m', # Yellow
        'ERROR': '\033[91m',   # Red
        'CRITICAL': '\033[95m' # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        levelname = record.levelname
        if levelname in self.COLORS:
            record.levelname = f"{self.COLORS[levelname]}{levelname}{self.RESET}"

        return super().format(record)


# Filter to remove date from http access logs
class FilterRemoveDateFromWerkzeugLogs(logging.Filter):
    # '192.168.0.102 - - [30/Jun/2024 01:14:03] "%s" %s %s' -> '192.168.0.102 - "%s" %s %s'
    pattern: re.Pattern = re.compile(r' - - \[.+?] "')

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self.pattern.sub(' - "', record.msg)
        return True


def now_utc():
    """Returns current datetime in UTC (aware)"""
    return datetime.now(timezone.utc)


def today_utc():
    """Returns the current calendar date in UTC"""
    return now_utc().date()


def ensure_utc(dt):
    """
    Ensure a datetime object is aware and in UTC.
    Naive datetimes (as returned by SQLite) are assumed to already be UTC.
    """
    if dt is None:
        return None

    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt.replace('Z', '+00:00'))
        except (ValueError, TypeError, AttributeError):
            return None

    if not hasattr(dt, 'tzinfo'):
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def isoformat_or_none(value):
    """Serialize a date/datetime for JSON output"""
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_utc(value).isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def dedupe_preserving_order(values):
    """Return the values as a list with repeats dropped, first occurrence wins"""
    seen = set()
    result = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        result.append(value)
    return result
