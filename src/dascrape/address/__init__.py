"""Address normalisation.

Public API
----------
- :func:`normalize_address` — raw address → address ending in ``SUBURB SA POSTCODE``
- :func:`load_gazetteer` / :class:`Gazetteer` — street, suffix, suburb and hundred tables
- :func:`closest_match` — bounded edit-distance lookup
"""

from .fuzzy import closest_match
from .gazetteer import Gazetteer, load_gazetteer, mount_aliases
from .normalize import (
    StreetMatch,
    choose_suburb,
    expand_abbreviations,
    format_street,
    normalize_address,
    split_address,
)

__all__ = [
    "Gazetteer",
    "StreetMatch",
    "choose_suburb",
    "closest_match",
    "expand_abbreviations",
    "format_street",
    "load_gazetteer",
    "mount_aliases",
    "normalize_address",
    "split_address",
]
