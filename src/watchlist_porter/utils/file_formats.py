"""Reading import files and rendering exports.

Import files are CSV (with a header row) or JSON. Column names are matched
loosely ("Watch Status", "My Rating", "Providers" ...) and mapped onto raw
row keys. Values are only coerced here, never validated: the schema layer
decides what is acceptable.
"""

import csv
import io
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.models import ExportResponse
from .exceptions import FileFormatError
from .normalizers import normalize_rating

logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json")

_COLUMN_ALIASES: Dict[str, List[str]] = {
    "title": ["title", "name", "movie", "show", "movietitle", "showtitle", "series"],
    "year": ["year", "releaseyear", "released", "yearreleased"],
    "status": ["status", "watchstatus", "state", "progress"],
    "rating": ["rating", "score", "myrating", "userrating", "stars"],
    "notes": ["notes", "note", "comment", "comments", "review"],
    "dateAdded": ["dateadded", "added", "addedat", "addedon", "createdat", "created", "date"],
    "streamingProviders": [
        "streamingproviders",
        "providers",
        "provider",
        "streaming",
        "services",
        "watchon",
        "platforms",
    ],
}

_ALIAS_LOOKUP: Dict[str, str] = {
    alias: canonical for canonical, aliases in _COLUMN_ALIASES.items() for alias in aliases
}

_YEAR_PATTERN = re.compile(r"^\d{4}$")

EXPORT_CSV_COLUMNS = [
    "title",
    "year",
    "mediaKind",
    "status",
    "rating",
    "notes",
    "dateAdded",
    "dateWatched",
    "streamingProviders",
    "catalogId",
    "posterRef",
]


def _header_key(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


def _coerce_number(value: Any) -> Any:
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return value
        return int(number) if number.is_integer() else number
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def canonicalize_record(record: Dict[str, Any], rating_scale: int = 10) -> Dict[str, Any]:
    """Map an input record onto raw row keys.

    Args:
        record: One row as read from the file.
        rating_scale: Scale of the rating column (5, 10 or 100).

    Returns:
        Record keyed by raw row field names. Unknown columns are kept as-is.
    """
    canonical: Dict[str, Any] = {}

    for key, value in record.items():
        if key is None:
            # Extra cells beyond the header row
            continue
        if isinstance(value, str) and not value.strip():
            continue
        if value is None:
            continue

        field = _ALIAS_LOOKUP.get(_header_key(str(key)), str(key))
        if field in canonical:
            continue
        canonical[field] = value

    year = canonical.get("year")
    if isinstance(year, str) and _YEAR_PATTERN.match(year.strip()):
        canonical["year"] = int(year.strip())

    if "rating" in canonical:
        rating = _coerce_number(canonical["rating"])
        if isinstance(rating, (int, float)) and not isinstance(rating, bool):
            # Out-of-range 10-point ratings are left for the schema to reject
            if rating_scale != 10 or 0 <= rating <= 10:
                rating = normalize_rating(rating, rating_scale)
        canonical["rating"] = rating

    return canonical


def detect_format(path: Path, content: Optional[str] = None) -> str:
    """Guess the import format from a file suffix, falling back to content.

    Args:
        path: Import file path.
        content: File content, used when the suffix is not conclusive.

    Returns:
        "csv" or "json".
    """
    suffix = path.suffix.lower().lstrip(".")
    if suffix in SUPPORTED_FORMATS:
        return suffix
    if content is not None and content.lstrip("\ufeff \t\r\n")[:1] in ("[", "{"):
        return "json"
    return "csv"


def _parse_json_rows(content: str) -> List[Any]:
    try:
        data = json.loads(content)
    except ValueError as e:
        raise FileFormatError(f"Invalid JSON import file: {e}") from e

    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in ("entries", "items", "rows"):
            if isinstance(data.get(key), list):
                return data[key]
    raise FileFormatError("JSON import must be a list of rows or an object with 'entries'")


def _parse_csv_rows(content: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(content))
    if not reader.fieldnames:
        raise FileFormatError("CSV import file has no header row")

    try:
        rows = [
            row
            for row in reader
            if any(v.strip() for v in row.values() if isinstance(v, str))
        ]
    except csv.Error as e:
        raise FileFormatError(f"Invalid CSV import file: {e}") from e
    return rows


def parse_import_content(content: str, fmt: str, rating_scale: int = 10) -> List[Any]:
    """Parse import file content into raw row records.

    Args:
        content: File content.
        fmt: "csv" or "json".
        rating_scale: Scale of the rating values in the file.

    Returns:
        One record per row, keyed by raw row field names. Rows that are not
        objects are passed through for the schema layer to reject.

    Raises:
        FileFormatError: If the content cannot be read in the given format.
    """
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise FileFormatError(f"Unsupported import format: {fmt}")

    content = content.lstrip("\ufeff")
    rows = _parse_json_rows(content) if fmt == "json" else _parse_csv_rows(content)

    records = [
        canonicalize_record(row, rating_scale) if isinstance(row, dict) else row for row in rows
    ]
    logger.info(f"Read {len(records)} row(s) from {fmt.upper()} import")
    return records


def render_export(response: ExportResponse, fmt: str = "json") -> str:
    """Render an export envelope as JSON or CSV.

    Args:
        response: Export to render.
        fmt: "json" for the full envelope, "csv" for one row per entry.

    Returns:
        Rendered text.

    Raises:
        FileFormatError: If the format is not supported.
    """
    fmt = fmt.lower()
    if fmt == "json":
        return json.dumps(response.to_wire(), indent=2, ensure_ascii=False)
    if fmt != "csv":
        raise FileFormatError(f"Unsupported export format: {fmt}")

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=EXPORT_CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for entry in response.entries:
        row = entry.to_wire()
        row["streamingProviders"] = ", ".join(row.get("streamingProviders") or [])
        writer.writerow(
            {
                column: "" if row.get(column) is None else row[column]
                for column in EXPORT_CSV_COLUMNS
            }
        )
    return output.getvalue()
