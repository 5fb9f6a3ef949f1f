"""Obsidian-compatible date pattern formatting.

Supports the moment.js-style tokens Obsidian uses in daily-note formats:
``YYYY YY MMMM MMM MM M DD D dddd ddd HH H mm m``. Any other character is
copied through literally.
"""

from datetime import datetime

_MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]

# Sunday first, matching moment.js day indices
_WEEKDAYS = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

# Longest tokens first so "MMMM" is never read as two "MM".
_TOKENS = (
    "YYYY",
    "MMMM",
    "dddd",
    "MMM",
    "ddd",
    "MM",
    "DD",
    "HH",
    "mm",
    "YY",
    "M",
    "D",
    "H",
    "m",
)


def _token_values(moment: datetime) -> dict[str, str]:
    year = f"{moment.year:04d}"
    month = _MONTHS[moment.month - 1]
    weekday = _WEEKDAYS[moment.isoweekday() % 7]
    return {
        "YYYY": year,
        "YY": year[2:],
        "MMMM": month,
        "MMM": month[:3],
        "MM": f"{moment.month:02d}",
        "M": str(moment.month),
        "DD": f"{moment.day:02d}",
        "D": str(moment.day),
        "dddd": weekday,
        "ddd": weekday[:3],
        "HH": f"{moment.hour:02d}",
        "H": str(moment.hour),
        "mm": f"{moment.minute:02d}",
        "m": str(moment.minute),
    }


def format_date(moment: datetime, pattern: str) -> str:
    """
    Format a datetime using an Obsidian date pattern.

    Args:
        moment: Date and time to format
        pattern: Pattern such as ``YYYY-MM-DD`` or ``MMMM DD, YYYY``

    Returns:
        Formatted string
    """
    values = _token_values(moment)
    out: list[str] = []
    i = 0
    while i < len(pattern):
        for token in _TOKENS:
            if pattern.startswith(token, i):
                out.append(values[token])
                i += len(token)
                break
        else:
            out.append(pattern[i])
            i += 1
    return "".join(out)


def format_hour_minute(moment: datetime) -> str:
    """Return ``HH:MM`` for moment."""
    return f"{moment.hour:02d}:{moment.minute:02d}"
