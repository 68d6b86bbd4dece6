"""Text processing utilities."""

import re

_PUNCTUATION = re.compile(r"[^\w\s]|_")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Normalize a title for comparison.

    Lower-cases, drops punctuation (so "Ocean's" and "Oceans" compare equal)
    and collapses whitespace.

    Args:
        title: Original title.

    Returns:
        Normalized title.
    """
    if not title:
        return ""

    title = title.lower()
    title = _PUNCTUATION.sub("", title)
    title = _WHITESPACE.sub(" ", title)
    return title.strip()


def word_overlap(text1: str, text2: str) -> float:
    """Dice coefficient over the word sets of two normalized titles.

    Args:
        text1: First normalized title.
        text2: Second normalized title.

    Returns:
        2 * |common words| / (|words1| + |words2|), between 0.0 and 1.0.
    """
    words1 = set(text1.split(" "))
    words2 = set(text2.split(" "))
    common = words1 & words2
    return (2 * len(common)) / (len(words1) + len(words2))


def titles_match(title1: str, title2: str) -> bool:
    """Check whether two titles are equal after normalization."""
    return normalize_title(title1) == normalize_title(title2)
