"""Edit-distance lookup against gazetteer keys."""

from __future__ import annotations

from typing import Iterable, Optional

from rapidfuzz.distance import Levenshtein


def _clean(text: str) -> str:
    """Upper-case and collapse whitespace so that matching ignores case and spacing."""
    return " ".join(text.split()).upper()


def closest_match(
    candidate: str, keys: Iterable[str], max_distance: int
) -> Optional[str]:
    """Return the key closest to *candidate* within *max_distance* edits.

    The smallest Levenshtein distance wins; among equally distant keys the
    one that comes first in *keys* is returned.  ``None`` when nothing is
    close enough or *candidate* is blank.
    """
    query = _clean(candidate)
    if not query:
        return None

    best: Optional[str] = None
    best_distance = max_distance + 1
    for key in keys:
        # score_cutoff makes rapidfuzz return cutoff + 1 for anything worse.
        distance = Levenshtein.distance(
            query, _clean(key), score_cutoff=best_distance - 1
        )
        if distance < best_distance:
            best, best_distance = key, distance
            if distance == 0:
                break
    return best
