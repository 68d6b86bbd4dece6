"""Field normalizers for imported watchlist data.

Import sources are messy, so every function here is permissive: bad input
turns into a safe default (``None`` or a canonical fallback) and nothing is
ever raised. Structural problems are the schema layer's job.
"""

import json
import logging
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from ..core.models.watchlist import WatchStatus

logger = logging.getLogger(__name__)

# ─── Status ───────────────────────────────────────────────────

_STATUS_SYNONYMS: Dict[WatchStatus, List[str]] = {
    WatchStatus.COMPLETED: [
        "completed",
        "complete",
        "watched",
        "done",
        "finished",
        "saw",
        "seen",
    ],
    WatchStatus.WATCHING: [
        "watching",
        "in progress",
        "in-progress",
        "in_progress",
        "started",
        "currently watching",
        "ongoing",
    ],
    WatchStatus.NOT_WATCHED: [
        "not watched",
        "not_watched",
        "not started",
        "unwatched",
        "to watch",
        "plan to watch",
        "want to watch",
        "planned",
        "ptw",
        "backlog",
    ],
}

_STATUS_LOOKUP: Dict[str, WatchStatus] = {
    synonym: status for status, synonyms in _STATUS_SYNONYMS.items() for synonym in synonyms
}


def normalize_status(raw: Any) -> WatchStatus:
    """Map a free-text status onto a canonical watch status.

    "Watched" → completed, "in progress" → watching, "to watch" →
    not_watched. Unknown, empty or missing input → not_watched.

    Args:
        raw: Status value from the import.

    Returns:
        Canonical watch status.
    """
    if isinstance(raw, WatchStatus):
        return raw
    if raw is None:
        return WatchStatus.NOT_WATCHED

    key = str(raw).strip().lower()
    status = _STATUS_LOOKUP.get(key)
    if status is None:
        if key:
            logger.debug(f"Unrecognized status '{raw}', defaulting to not_watched")
        return WatchStatus.NOT_WATCHED
    return status


# ─── Streaming providers ──────────────────────────────────────

_PROVIDER_DELIMITERS = (",", ";", "|")


def _unique_tokens(tokens: Iterable[str]) -> List[str]:
    seen: List[str] = []
    for token in tokens:
        token = token.strip().lower()
        if token and token not in seen:
            seen.append(token)
    return seen


def parse_providers(raw: Any) -> List[str]:
    """Parse streaming providers from a list or a loosely formatted string.

    Strings are tried as a JSON array first (only when bracket-delimited),
    then split on the first delimiter present out of comma, semicolon and
    pipe, else kept as a single token.

    Args:
        raw: Provider data in any supported shape.

    Returns:
        Lower-cased, trimmed, de-duplicated provider names in input order.
    """
    if raw is None:
        return []

    if isinstance(raw, (list, tuple)):
        return _unique_tokens(p for p in raw if isinstance(p, str))

    if not isinstance(raw, str):
        logger.debug(f"Ignoring provider value of type {type(raw).__name__}")
        return []

    trimmed = raw.strip()
    if not trimmed:
        return []

    if trimmed.startswith("[") and trimmed.endswith("]"):
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return parse_providers(parsed)

    for delimiter in _PROVIDER_DELIMITERS:
        if delimiter in trimmed:
            return _unique_tokens(trimmed.split(delimiter))

    return [trimmed.lower()]


# ─── Dates ────────────────────────────────────────────────────

_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}")
_SLASH_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_DOTTED_DATE_PATTERN = re.compile(r"^(\d{1,2})[.\-](\d{1,2})[.\-](\d{4})$")

_FALLBACK_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
    "%B %d %Y",
    "%b %d %Y",
)

# Epoch values above this are taken to be milliseconds.
_EPOCH_MILLIS_THRESHOLD = 1e11


def as_utc(value: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision."""
    value = as_utc(value)
    millis = value.microsecond // 1000
    return f"{value.year:04d}-{value.strftime('%m-%dT%H:%M:%S')}.{millis:03d}Z"


def _parse_date_string(text: str) -> Optional[datetime]:
    if _ISO_DATE_PATTERN.match(text):
        if len(text) == 10:
            return datetime.strptime(text, "%Y-%m-%d")
        return datetime.fromisoformat(text.replace("Z", "+00:00").replace("z", "+00:00"))

    m = _SLASH_DATE_PATTERN.match(text)
    if m:
        first, second, year = (int(part) for part in m.groups())
        # Month/day unless the first part cannot be a month
        if first > 12:
            return datetime(year, second, first)
        return datetime(year, first, second)

    m = _DOTTED_DATE_PATTERN.match(text)
    if m:
        day, month, year = (int(part) for part in m.groups())
        return datetime(year, month, day)

    for fmt in _FALLBACK_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue

    return datetime.fromisoformat(text)


def _coerce_datetime(raw: Any) -> Optional[datetime]:
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if isinstance(raw, (int, float)):
        if math.isnan(raw) or math.isinf(raw):
            return None
        seconds = raw / 1000 if abs(raw) >= _EPOCH_MILLIS_THRESHOLD else raw
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    if isinstance(raw, str):
        text = raw.strip()
        return _parse_date_string(text) if text else None
    return None


def normalize_date(raw: Any) -> Optional[str]:
    """Normalize a date-like value to an ISO-8601 UTC timestamp string.

    Accepts datetimes, dates, epoch numbers (seconds, or milliseconds for
    large values) and strings in ISO, US (MM/DD/YYYY) or EU (DD.MM.YYYY,
    DD/MM/YYYY) shapes. Slash dates are read month-first unless the first
    part is larger than 12.

    Args:
        raw: Date value from the import.

    Returns:
        Timestamp such as "2024-01-15T00:00:00.000Z", or None if the value
        cannot be read as a date.
    """
    if raw is None or isinstance(raw, bool) or raw == "" or raw == 0:
        return None

    try:
        parsed = _coerce_datetime(raw)
        return format_timestamp(parsed) if parsed is not None else None
    except (ValueError, TypeError, OverflowError, OSError) as e:
        logger.debug(f"Could not parse date {raw!r}: {e}")
        return None


# ─── Ratings ──────────────────────────────────────────────────


def normalize_rating(raw: Any, scale: int = 10) -> Optional[int]:
    """Rescale a rating to an integer between 0 and 10.

    5-point and 100-point inputs are rescaled linearly, rounded half-up and
    clamped, e.g. (4.5, 5) → 9, (85, 100) → 9, (7.8, 10) → 8, (15, 10) → 10.

    Args:
        raw: Rating value (number or numeric string).
        scale: Scale of the input rating, typically 5, 10 or 100.

    Returns:
        Rating between 0 and 10, or None if the input is not a number.
    """
    if raw is None or isinstance(raw, bool):
        return None

    try:
        value = float(raw)
    except (TypeError, ValueError):
        logger.debug(f"Could not parse rating {raw!r}")
        return None

    if math.isnan(value):
        return None

    if scale == 5:
        value = (value / 5) * 10
    elif scale == 100:
        value = value / 10
    elif scale > 0 and scale != 10:
        value = (value / scale) * 10

    if math.isinf(value):
        return 10 if value > 0 else 0

    rounded = math.floor(value + 0.5)
    return max(0, min(10, int(rounded)))
