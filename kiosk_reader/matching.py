"""
Fuzzy matching of noisy OCR text against closed vocabularies.

All functions here are pure and safe to call from several threads at once.
"""

from typing import Iterable, Optional, Sequence, Tuple

from rapidfuzz.distance import Levenshtein

from .config import DEFAULT_MAX_DISTANCE
from .exceptions import NoCloseMatch
from .utils import Fragment


def distance(a: str, b: str) -> float:
    """Case-insensitive normalized edit distance between 0.0 and 1.0."""
    return Levenshtein.normalized_distance(a, b, processor=str.lower)


def closest(candidate: str, vocabulary: Iterable[str]) -> Tuple[Optional[str], float]:
    """
    Find the vocabulary entry nearest to candidate.

    Ties keep the first minimal entry in iteration order.

    Returns:
        (closest_entry, distance), or (None, 1.0) for an empty vocabulary
    """
    best_entry = None
    best_distance = 1.0

    for entry in vocabulary:
        d = distance(candidate, entry)
        if best_entry is None or d < best_distance:
            best_entry = entry
            best_distance = d

    return best_entry, best_distance


def spell_check(
    candidate: str,
    vocabulary: Iterable[str],
    max_distance: float = DEFAULT_MAX_DISTANCE
) -> str:
    """
    Correct candidate to the closest vocabulary entry.

    Args:
        candidate: Noisy OCR text
        vocabulary: Known-good strings
        max_distance: Largest normalized distance accepted as a match

    Returns:
        The matching vocabulary entry, exactly as it appears in vocabulary

    Raises:
        NoCloseMatch: vocabulary is empty or no entry is within max_distance
    """
    entry, d = closest(candidate, vocabulary)

    if entry is None:
        raise NoCloseMatch(candidate, f"Empty vocabulary for '{candidate}'")
    if d > max_distance:
        raise NoCloseMatch(
            candidate,
            f"Closest entry to '{candidate}' is '{entry}' at distance {d:.2f} (> {max_distance})"
        )

    return entry


def find_fragment_closest_to(fragments: Sequence[Fragment], text: str) -> Fragment:
    """
    Return the fragment whose text is textually closest to text.

    Unlike spell_check this never rejects a weak match; it only fails when
    there is nothing to choose from.
    """
    best_fragment = None
    best_distance = 1.0

    for fragment in fragments:
        d = distance(fragment.text, text)
        if best_fragment is None or d < best_distance:
            best_fragment = fragment
            best_distance = d

    if best_fragment is None:
        raise NoCloseMatch(text, f"No fragments to search for '{text}'")

    return best_fragment
