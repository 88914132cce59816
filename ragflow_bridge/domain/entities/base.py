from datetime import datetime
from typing import Any, Optional


def isoformat_or_none(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def parse_remote_time(value: Any) -> Optional[datetime]:
    """Parse a RAGFlow timestamp.

    RAGFlow reports ``create_time``/``update_time`` as epoch milliseconds and
    ``create_date``/``update_date`` as RFC 1123 or ISO strings.
    """
    if value is None or value == "":
        return None

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000 if value > 10_000_000_000 else value
        return datetime.utcfromtimestamp(seconds)

    if isinstance(value, str):
        for fmt in ("%a, %d %b %Y %H:%M:%S GMT", "%Y-%m-%d %H:%M:%S"):
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            return None

    return None
