"""Test match confidence scoring and title helpers."""

import pytest

from watchlist_porter.utils import (
    calculate_match_confidence,
    normalize_title,
    titles_match,
    word_overlap,
)


@pytest.mark.unit
def test_normalize_title():
    """Test title normalization."""
    assert normalize_title("  The   Matrix ") == "the matrix"
    assert normalize_title("Ocean's Eleven") == "oceans eleven"
    assert normalize_title("Spider-Man: No Way Home") == "spiderman no way home"
    assert normalize_title("") == ""


@pytest.mark.unit
def test_titles_match_ignores_case_and_punctuation():
    """Test that titles compare equal after normalization."""
    assert titles_match("Breaking Bad", "breaking bad")
    assert titles_match("Ocean's Eleven", "Oceans Eleven")
    assert not titles_match("The Matrix", "Matrix")


@pytest.mark.unit
def test_word_overlap():
    """Test the Dice coefficient over word sets."""
    assert word_overlap("the matrix", "the matrix") == 1.0
    assert word_overlap("the matrix", "matrix") == pytest.approx(2 / 3)
    assert word_overlap("inception", "breaking bad") == 0.0


@pytest.mark.unit
def test_exact_match_with_year_and_poster_is_full_confidence():
    """Test that a perfect candidate scores 1.0."""
    assert calculate_match_confidence("Inception", 2010, "Inception", 2010, True) == 1.0


@pytest.mark.unit
def test_exact_match_without_poster_gets_bonus():
    """Test that a strong match receives the bonus."""
    confidence = calculate_match_confidence("Inception", 2010, "inception", 2010, False)

    assert confidence == pytest.approx(0.95)


@pytest.mark.unit
def test_year_off_by_one_gets_partial_credit():
    """Test near-year scoring."""
    confidence = calculate_match_confidence("Inception", 2011, "Inception", 2010)

    assert confidence == pytest.approx(0.65)


@pytest.mark.unit
def test_distant_year_gets_no_year_credit():
    """Test that years further apart add nothing."""
    confidence = calculate_match_confidence("Inception", 2013, "Inception", 2010)

    assert confidence == pytest.approx(0.5)


@pytest.mark.unit
def test_candidate_without_year_gets_no_year_credit():
    """Test that an unknown candidate year adds nothing when the user gave one."""
    confidence = calculate_match_confidence("Inception", None, "Inception", 2010)

    assert confidence == pytest.approx(0.5)


@pytest.mark.unit
def test_partial_title_match():
    """Test scoring of overlapping but different titles."""
    confidence = calculate_match_confidence("The Matrix", 1999, "Matrix", 1999, True)

    assert confidence == pytest.approx(0.55)


@pytest.mark.unit
def test_unrelated_title_scores_zero():
    """Test that unrelated titles with mismatched years score nothing."""
    assert calculate_match_confidence("Breaking Bad", 2008, "Inception", 2010) == 0.0


@pytest.mark.unit
def test_exact_title_outranks_partial_title():
    """Test that the exact title wins over a longer one."""
    exact = calculate_match_confidence("The Matrix", 1999, "The Matrix", None, True)
    partial = calculate_match_confidence("The Matrix Reloaded", 2003, "The Matrix", None, True)

    assert exact > partial


@pytest.mark.unit
@pytest.mark.parametrize(
    "candidate, candidate_year, original, original_year, poster",
    [
        ("Inception", 2010, "Inception", 2010, True),
        ("Inception", 2010, "Inception", None, True),
        ("The Matrix Reloaded", 2003, "Matrix", 2003, True),
        ("Breaking Bad", None, "Breaking Bad", None, False),
        ("", None, "", None, False),
    ],
)
def test_confidence_is_bounded(candidate, candidate_year, original, original_year, poster):
    """Test that confidence always lies between 0 and 1."""
    confidence = calculate_match_confidence(
        candidate, candidate_year, original, original_year, poster
    )

    assert 0.0 <= confidence <= 1.0
