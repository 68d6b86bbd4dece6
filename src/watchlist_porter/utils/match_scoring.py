"""Catalog match confidence scoring."""

from typing import Optional

from .text_utils import normalize_title, word_overlap

EXACT_TITLE_SCORE = 0.5
PARTIAL_TITLE_WEIGHT = 0.3
EXACT_YEAR_SCORE = 0.3
NEAR_YEAR_SCORE = 0.15
MISSING_YEAR_SCORE = 0.15
POSTER_SCORE = 0.05
STRONG_MATCH_THRESHOLD = 0.7
STRONG_MATCH_BONUS = 0.15


def calculate_match_confidence(
    candidate_title: str,
    candidate_year: Optional[int],
    original_title: str,
    original_year: Optional[int],
    has_poster: bool = False,
) -> float:
    """Score how likely a catalog candidate is the title the user meant.

    Components are added in a fixed order: title (0.5 for an exact
    normalized match, else up to 0.3 by word overlap), year (0.3 exact,
    0.15 off by one, 0.15 when the user gave no year), poster (0.05), then
    a 0.15 bonus once the running score reaches 0.7. The total is capped
    at 1.0.

    Args:
        candidate_title: Title from the catalog.
        candidate_year: Year from the catalog.
        original_title: Title from the import.
        original_year: Year from the import.
        has_poster: Whether the candidate has a poster.

    Returns:
        Confidence between 0.0 and 1.0.
    """
    score = 0.0

    norm_candidate = normalize_title(candidate_title)
    norm_original = normalize_title(original_title)

    if norm_candidate == norm_original:
        score += EXACT_TITLE_SCORE
    else:
        score += word_overlap(norm_candidate, norm_original) * PARTIAL_TITLE_WEIGHT

    if original_year and candidate_year:
        year_diff = abs(candidate_year - original_year)
        if year_diff == 0:
            score += EXACT_YEAR_SCORE
        elif year_diff == 1:
            score += NEAR_YEAR_SCORE
    elif not original_year:
        score += MISSING_YEAR_SCORE

    if has_poster:
        score += POSTER_SCORE

    if score >= STRONG_MATCH_THRESHOLD:
        score += STRONG_MATCH_BONUS

    return min(score, 1.0)
