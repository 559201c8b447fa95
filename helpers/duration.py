import re

# seconds per unit; a bare number means milliseconds
UNITS = {
    "ms": 0.001, "msec": 0.001, "msecs": 0.001, "millisecond": 0.001, "milliseconds": 0.001,
    "s": 1, "sec": 1, "secs": 1, "second": 1, "seconds": 1,
    "m": 60, "min": 60, "mins": 60, "minute": 60, "minutes": 60,
    "h": 3600, "hr": 3600, "hrs": 3600, "hour": 3600, "hours": 3600,
    "d": 86400, "day": 86400, "days": 86400,
    "w": 604800, "week": 604800, "weeks": 604800,
    "y": 31557600, "yr": 31557600, "yrs": 31557600, "year": 31557600, "years": 31557600,
}

_DURATION = re.compile(r"(-?(?:\d+)?\.?\d+)\s*([a-z]*)", re.IGNORECASE)

# longest duration accepted, in seconds
MAX_SECONDS = 366 * 86400


def parse_duration(text: str | None) -> float | None:
    """Return the duration in seconds for strings like ``10m`` or ``1.5h``."""
    if not text:
        return None
    m = _DURATION.fullmatch(text.strip())
    if not m:
        return None
    number, unit = m.groups()
    unit = (unit or "ms").lower()
    if unit not in UNITS:
        return None
    seconds = float(number) * UNITS[unit]
    if seconds <= 0 or seconds > MAX_SECONDS:
        return None
    return seconds
