"""Unit tests for import field normalizers."""

from datetime import date, datetime, timezone

import pytest

from watchlist_porter.core.models import WatchStatus
from watchlist_porter.utils import (
    format_timestamp,
    normalize_date,
    normalize_rating,
    normalize_status,
    parse_providers,
)

# ─── Status ───────────────────────────────────────────────────


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, expected",
    [
        ("completed", WatchStatus.COMPLETED),
        ("Watched", WatchStatus.COMPLETED),
        ("DONE", WatchStatus.COMPLETED),
        ("  finished ", WatchStatus.COMPLETED),
        ("seen", WatchStatus.COMPLETED),
        ("watching", WatchStatus.WATCHING),
        ("in progress", WatchStatus.WATCHING),
        ("In-Progress", WatchStatus.WATCHING),
        ("ongoing", WatchStatus.WATCHING),
        ("to watch", WatchStatus.NOT_WATCHED),
        ("Plan to Watch", WatchStatus.NOT_WATCHED),
        ("planned", WatchStatus.NOT_WATCHED),
        ("backlog", WatchStatus.NOT_WATCHED),
        ("not_watched", WatchStatus.NOT_WATCHED),
    ],
)
def test_normalize_status_synonyms(raw, expected):
    """Test that every synonym maps to its canonical status."""
    assert normalize_status(raw) == expected


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["xyz", "", "   ", None, 42])
def test_normalize_status_unknown_defaults_to_not_watched(raw):
    """Test that unknown or empty input never fails."""
    assert normalize_status(raw) == WatchStatus.NOT_WATCHED


# ─── Providers ────────────────────────────────────────────────


@pytest.mark.unit
def test_parse_providers_comma_list():
    """Test parsing a comma separated provider string."""
    assert parse_providers("Netflix, Hulu") == ["netflix", "hulu"]


@pytest.mark.unit
def test_parse_providers_json_array():
    """Test parsing a bracketed JSON array string."""
    assert parse_providers('["NETFLIX","HULU"]') == ["netflix", "hulu"]


@pytest.mark.unit
def test_parse_providers_malformed_json_falls_back_to_delimiters():
    """Test that broken JSON is split like any other string."""
    assert parse_providers("[Netflix, Hulu]") == ["[netflix", "hulu]"]


@pytest.mark.unit
def test_parse_providers_first_delimiter_wins():
    """Test that only the first delimiter found is used."""
    assert parse_providers("Netflix; Hulu, Max") == ["netflix; hulu", "max"]
    assert parse_providers("Netflix; Hulu") == ["netflix", "hulu"]
    assert parse_providers("Netflix | Hulu | Disney+") == ["netflix", "hulu", "disney+"]


@pytest.mark.unit
def test_parse_providers_single_token():
    """Test that a string without delimiters is one provider."""
    assert parse_providers("  Apple TV+ ") == ["apple tv+"]


@pytest.mark.unit
def test_parse_providers_list_input():
    """Test that lists are cleaned, lower-cased and de-duplicated."""
    assert parse_providers([" Netflix", "netflix", "", "Hulu", None, 3]) == ["netflix", "hulu"]


@pytest.mark.unit
@pytest.mark.parametrize("raw", [None, "", "   ", [], 12, {"name": "Netflix"}])
def test_parse_providers_empty_input(raw):
    """Test that empty or unsupported input yields no providers."""
    assert parse_providers(raw) == []


@pytest.mark.unit
def test_parse_providers_filters_blank_tokens():
    """Test that blank tokens between delimiters are dropped."""
    assert parse_providers("Netflix,, ,Hulu,") == ["netflix", "hulu"]


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["Netflix, Hulu", '["Max","Netflix"]', "Prime Video | Netflix", "Disney+", ["Hulu", "HULU"]],
)
def test_parse_providers_idempotent(raw):
    """Test that re-parsing the joined output gives the same providers."""
    parsed = parse_providers(raw)
    assert parse_providers(",".join(parsed)) == parsed


# ─── Dates ────────────────────────────────────────────────────


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw",
    ["2024-01-15", "01/15/2024", "1/15/2024", "15.01.2024", "15-01-2024", "15/01/2024"],
)
def test_normalize_date_formats_agree(raw):
    """Test that ISO, US and EU shapes all land on the same day."""
    assert normalize_date(raw) == "2024-01-15T00:00:00.000Z"


@pytest.mark.unit
def test_normalize_date_us_order_for_ambiguous_slash_dates():
    """Test that ambiguous slash dates are read month first."""
    assert normalize_date("03/04/2024") == "2024-03-04T00:00:00.000Z"


@pytest.mark.unit
def test_normalize_date_iso_datetime_with_offset():
    """Test that offsets are converted to UTC."""
    assert normalize_date("2024-01-15T10:30:00+02:00") == "2024-01-15T08:30:00.000Z"
    assert normalize_date("2024-01-15T10:30:00.250Z") == "2024-01-15T10:30:00.250Z"


@pytest.mark.unit
def test_normalize_date_native_values():
    """Test datetime and date objects."""
    assert normalize_date(date(2024, 1, 15)) == "2024-01-15T00:00:00.000Z"
    assert (
        normalize_date(datetime(2024, 1, 15, 9, 0, tzinfo=timezone.utc))
        == "2024-01-15T09:00:00.000Z"
    )


@pytest.mark.unit
def test_normalize_date_epoch_numbers():
    """Test epoch seconds and milliseconds."""
    assert normalize_date(1705276800) == "2024-01-15T00:00:00.000Z"
    assert normalize_date(1705276800000) == "2024-01-15T00:00:00.000Z"


@pytest.mark.unit
def test_normalize_date_named_month():
    """Test long-form dates."""
    assert normalize_date("15 January 2024") == "2024-01-15T00:00:00.000Z"
    assert normalize_date("Jan 15, 2024") == "2024-01-15T00:00:00.000Z"


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw", ["not-a-date", "", None, "13/13/2024", "2024-02-30", "31.02.2024", True, [], 0]
)
def test_normalize_date_invalid_returns_none(raw):
    """Test that unparseable input returns None without raising."""
    assert normalize_date(raw) is None


@pytest.mark.unit
def test_format_timestamp_naive_is_utc():
    """Test that naive datetimes are treated as UTC."""
    assert format_timestamp(datetime(2024, 1, 15, 1, 2, 3, 456789)) == "2024-01-15T01:02:03.456Z"


@pytest.mark.unit
def test_normalize_date_pads_early_years():
    """Test that years below 1000 keep four digits."""
    assert normalize_date("0999-01-01") == "0999-01-01T00:00:00.000Z"
    assert format_timestamp(datetime(5, 6, 7)) == "0005-06-07T00:00:00.000Z"


@pytest.mark.unit
@pytest.mark.parametrize("raw", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:00:00-05:00"])
def test_normalize_date_out_of_range_after_utc_returns_none(raw):
    """Test offsets that push the UTC value outside the datetime range."""
    assert normalize_date(raw) is None


# ─── Ratings ──────────────────────────────────────────────────


@pytest.mark.unit
@pytest.mark.parametrize(
    "raw, scale, expected",
    [
        (5, 5, 10),
        (4.5, 5, 9),
        (2.5, 5, 5),
        (85, 100, 9),
        (84, 100, 8),
        (7.8, 10, 8),
        (7.5, 10, 8),
        (7.4, 10, 7),
        (-5, 10, 0),
        (15, 10, 10),
        ("8", 10, 8),
        ("3.5", 5, 7),
    ],
)
def test_normalize_rating(raw, scale, expected):
    """Test rescaling, half-up rounding and clamping."""
    assert normalize_rating(raw, scale) == expected


@pytest.mark.unit
@pytest.mark.parametrize("raw", [None, float("nan"), "great", True, [8]])
def test_normalize_rating_invalid_returns_none(raw):
    """Test that non-numeric input returns None."""
    assert normalize_rating(raw) is None


@pytest.mark.unit
def test_normalize_rating_infinity_is_clamped():
    """Test that infinities clamp to the ends of the scale."""
    assert normalize_rating(float("inf")) == 10
    assert normalize_rating(float("-inf")) == 0
