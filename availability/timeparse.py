"""Best-effort conversion of free-text time input to an absolute instant."""

from __future__ import annotations

from datetime import datetime, time, timedelta

RELATIVE_DAY_KEYWORDS = ("morgen", "tomorrow")
DEFAULT_TIME_OF_DAY = time(9, 0)

# Tried in order; the first format that parses the whole input wins.
TIME_ONLY_FORMAT = "%H:%M"
DATE_FORMATS = [
    TIME_ONLY_FORMAT,
    "%d.%m.%Y %H:%M",
    "%d.%m.%Y",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
]


def _parse_time_of_day(text: str) -> time | None:
    try:
        return datetime.strptime(text, TIME_ONLY_FORMAT).time()
    except ValueError:
        return None


def parse_when(text: str, now: datetime) -> datetime | None:
    """Resolve ``text`` to a datetime in ``now``'s timezone, or ``None``.

    Accepted input, first match wins:

    - ``morgen`` / ``tomorrow``, optionally followed by ``HH:MM`` (default 09:00)
    - ``HH:MM`` (today)
    - ``DD.MM.YYYY HH:MM``, ``DD.MM.YYYY``
    - ``YYYY-MM-DD HH:MM``, ``YYYY-MM-DD``
    """
    if not text:
        return None
    cleaned = " ".join(text.strip().lower().split())
    tz = now.tzinfo

    for keyword in RELATIVE_DAY_KEYWORDS:
        if cleaned.startswith(keyword):
            rest = cleaned[len(keyword):].strip()
            tod = _parse_time_of_day(rest) if rest else DEFAULT_TIME_OF_DAY
            if tod is None:
                return None
            tomorrow = now.date() + timedelta(days=1)
            return datetime.combine(tomorrow, tod, tzinfo=tz)

    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
        if fmt == TIME_ONLY_FORMAT:
            return datetime.combine(now.date(), parsed.time(), tzinfo=tz)
        return parsed.replace(tzinfo=tz)

    return None
