"""Address normalisation against the gazetteer.

Addresses in the council PDFs are comma separated and typically shaped
like ``<lot/section>, <number street>, <suburb>, <hundred>`` with zero to
two leading tokens.  Normalisation finds the street, works out the most
likely suburb from every locality hint available, and rebuilds the
address ending in the canonical ``SUBURB SA POSTCODE`` string.

Nothing here raises: an address that cannot be understood is returned as
it stands.  Re-normalising an already normalised address is not
guaranteed to be a no-op.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..config import ExtractionConfig
from .fuzzy import closest_match
from .gazetteer import Gazetteer

log = logging.getLogger(__name__)

_TERRACE_ABBREVIATIONS = (
    (" TCE NTH", " TERRACE NORTH"),
    (" TCE STH", " TERRACE SOUTH"),
    (" TCE EAST", " TERRACE EAST"),
    (" TCE WEST", " TERRACE WEST"),
)

_HUNDRED_PREFIX = "HD "

# Street position counted from the end of the comma tokens, most likely first.
_STREET_POSITIONS = (3, 2, 4)


@dataclass
class StreetMatch:
    """A recognised street: the rebuilt street text and its candidate suburbs."""

    street_name: str
    suburbs: Tuple[str, ...]


def split_address(address: str, marker: str = "ü") -> str:
    """Pick one address out of two interleaved with *marker*.

    For example ``5ü5A RALSTONüRALSTON STüST, PENOLAüPENOLA, PENOLA``
    encodes ``5 RALSTON ST, PENOLA, PENOLA`` and
    ``5A RALSTON ST, PENOLA, PENOLA``.  The longer reconstruction is
    returned since it is the one most likely to hold a street name.
    """
    if marker not in address:
        return address

    first: List[str] = []
    second: List[str] = []
    for token in address.split(","):
        if marker not in token:
            first.append(token)
            second.append(token)
            continue
        words1: List[str] = []
        words2: List[str] = []
        for item in token.split(" "):
            parts = item.split(marker)
            words1.append(parts[0])
            if len(parts) >= 2:
                words2.append(parts[1])
        first.append(" " + " ".join(words1).strip())
        second.append(" " + " ".join(words2).strip())

    address1 = ",".join(first)
    address2 = ",".join(second)
    return address1 if len(address1) > len(address2) else address2


def expand_abbreviations(address: str) -> str:
    for short, full in _TERRACE_ABBREVIATIONS:
        address = address.replace(short, full)
    return address


def expand_suffix(
    token: str, gazetteer: Gazetteer, settings: ExtractionConfig
) -> Optional[str]:
    """Full street suffix for *token* (``ST`` and ``STREET`` both give ``STREET``).

    Falls back to the closest full suffix so that a misspelt suffix still
    identifies a street.
    """
    full = gazetteer.suffixes.get(token)
    if full is not None:
        return full
    if token in gazetteer.full_suffixes:
        return token
    return closest_match(token, gazetteer.suffix_names, settings.suffix_max_distance)


def format_street(
    text: Optional[str], gazetteer: Gazetteer, settings: ExtractionConfig
) -> Optional[StreetMatch]:
    """Recognise a street in *text* (house number and prefix text retained).

    The last two to four words, with the suffix expanded, must name a
    known street, exactly or within ``street_max_distance`` edits.
    """
    if text is None:
        return None
    tokens = text.strip().upper().split()
    if not tokens:
        return None

    suffix = expand_suffix(tokens[-1], gazetteer, settings)
    if suffix is None:
        return None
    tokens[-1] = suffix

    sizes = [n for n in (4, 3, 2) if n <= len(tokens)]
    for n in sizes:
        suburbs = gazetteer.street_suburbs.get(" ".join(tokens[-n:]))
        if suburbs:
            return StreetMatch(" ".join(tokens), suburbs)

    for n in sizes:
        match = closest_match(
            " ".join(tokens[-n:]), gazetteer.street_names, settings.street_max_distance
        )
        if match is not None:
            return StreetMatch(
                " ".join(tokens[:-n] + [match]), gazetteer.street_suburbs[match]
            )
    return None


def _strip_hundred_prefix(token: str) -> str:
    token = token.strip().upper()
    if token.startswith(_HUNDRED_PREFIX):
        token = token[len(_HUNDRED_PREFIX):].strip()
    return token


def _hundred_suburbs(
    token: str, gazetteer: Gazetteer, settings: ExtractionConfig
) -> Tuple[str, ...]:
    match = closest_match(
        _strip_hundred_prefix(token),
        gazetteer.hundred_names,
        settings.locality_max_distance,
    )
    if match is None:
        log.debug("Unrecognised hundred: %r", token)
        return ()
    return gazetteer.hundred_suburbs[match]


def _suburb_candidates(
    token: str, gazetteer: Gazetteer, settings: ExtractionConfig
) -> Tuple[str, ...]:
    match = closest_match(token, gazetteer.suburb_names, settings.locality_max_distance)
    if match is None:
        log.debug("Unrecognised suburb: %r", token)
        return ()
    return (match,)


def choose_suburb(
    street_suburbs: Sequence[str], *hints: Sequence[str]
) -> str:
    """First street suburb consistent with every non-empty hint.

    Empty hints are ignored.  When the hints rule out every suburb the
    street's first suburb is used.
    """
    candidates = list(street_suburbs)
    for hint in hints:
        if hint:
            candidates = [s for s in candidates if s in hint]
    return candidates[0] if candidates else street_suburbs[0]


def _locality_hints(
    remaining: List[str], gazetteer: Gazetteer, settings: ExtractionConfig
) -> List[Tuple[str, ...]]:
    """Suburb hints from the tokens following the street.

    The last token is a hundred.  With two or more tokens the one before
    it is a suburb, or a second hundred when prefixed with ``HD``.
    """
    hints = [_hundred_suburbs(remaining[-1], gazetteer, settings)]
    if len(remaining) >= 2:
        token = remaining[-2].strip().upper()
        if token.startswith(_HUNDRED_PREFIX):
            hints.append(_hundred_suburbs(token, gazetteer, settings))
        else:
            hints.append(_suburb_candidates(token, gazetteer, settings))
    return hints


def normalize_address(
    raw: str, gazetteer: Gazetteer, settings: Optional[ExtractionConfig] = None
) -> str:
    """Rebuild *raw* with a recognised street and canonical suburb, state and postcode.

    Returns the (de-interleaved, abbreviation-expanded) address unchanged
    when no street can be recognised.
    """
    settings = settings or ExtractionConfig()

    address = expand_abbreviations(raw)
    if settings.deinterleave_addresses and settings.deinterleave_marker in address:
        address = split_address(address, settings.deinterleave_marker)

    tokens = address.split(",")
    street: Optional[StreetMatch] = None
    index = -1
    for position in _STREET_POSITIONS:
        index = len(tokens) - position
        if index < 0:
            continue
        street = format_street(tokens[index], gazetteer, settings)
        if street is not None:
            break
    if street is None:
        log.debug("No street recognised in address %r", address)
        return address

    remaining = tokens[index + 1:]
    hints = _locality_hints(remaining, gazetteer, settings)
    suburb = choose_suburb(street.suburbs, *hints)
    locality = gazetteer.suburbs.get(suburb, suburb)

    prefix = [t.strip() for t in tokens[:index] if t.strip()]
    return ", ".join(prefix + [street.street_name, locality])
