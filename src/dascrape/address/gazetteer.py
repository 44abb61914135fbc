"""Street, suffix, suburb and hundred lookup tables.

The gazetteer is read once from three comma-separated text files and is
immutable afterwards; every normalisation call receives it explicitly.

``streetnames.txt``
    ``STREET_NAME,SUBURB_NAME`` — repeated for streets in several suburbs.
``streetsuffixes.txt``
    ``ABBREVIATION,FULL_SUFFIX``
``suburbnames.txt``
    ``SUBURB_NAME,CANONICAL_STRING,HUNDRED_NAME[;HUNDRED_NAME...]``
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

log = logging.getLogger(__name__)

STREET_NAMES_FILE = "streetnames.txt"
STREET_SUFFIXES_FILE = "streetsuffixes.txt"
SUBURB_NAMES_FILE = "suburbnames.txt"

_MOUNT = "MOUNT "
_MOUNT_ALIASES = ("MT ", "MT.", "MT. ")


def mount_aliases(name: str) -> List[str]:
    """Return *name* plus its abbreviated forms when it starts with ``MOUNT``."""
    if not name.startswith(_MOUNT):
        return [name]
    rest = name[len(_MOUNT):]
    return [name] + [alias + rest for alias in _MOUNT_ALIASES]


def _append_unique(table: Dict[str, List[str]], key: str, value: str) -> None:
    values = table.setdefault(key, [])
    if value not in values:
        values.append(value)


def _split_line(line: str) -> List[str]:
    return [part.strip() for part in line.upper().split(",")]


def _content_lines(lines: Iterable[str]) -> Iterable[str]:
    for line in lines:
        line = line.replace("\r", "").strip()
        if line:
            yield line


@dataclass(frozen=True)
class Gazetteer:
    """Read-only address lookup tables.

    Suburb lists keep file order: where several suburbs remain possible the
    first one listed is chosen.
    """

    street_suburbs: Mapping[str, Tuple[str, ...]]
    suffixes: Mapping[str, str]
    suburbs: Mapping[str, str]
    hundred_suburbs: Mapping[str, Tuple[str, ...]]
    full_suffixes: FrozenSet[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "full_suffixes", frozenset(self.suffixes.values()))

    # Key lists in file order, used as fuzzy-match candidates.

    @property
    def street_names(self) -> Tuple[str, ...]:
        return tuple(self.street_suburbs)

    @property
    def suburb_names(self) -> Tuple[str, ...]:
        return tuple(self.suburbs)

    @property
    def hundred_names(self) -> Tuple[str, ...]:
        return tuple(self.hundred_suburbs)

    @property
    def suffix_names(self) -> Tuple[str, ...]:
        return tuple(dict.fromkeys(self.suffixes.values()))

    @classmethod
    def from_lines(
        cls,
        street_lines: Iterable[str],
        suffix_lines: Iterable[str],
        suburb_lines: Iterable[str],
    ) -> "Gazetteer":
        """Build a gazetteer from the raw lines of the three source files."""
        streets: Dict[str, List[str]] = {}
        for line in _content_lines(street_lines):
            parts = _split_line(line)
            if len(parts) < 2:
                log.warning("Ignoring malformed street line: %r", line)
                continue
            _append_unique(streets, parts[0], parts[1])

        suffixes: Dict[str, str] = {}
        for line in _content_lines(suffix_lines):
            parts = _split_line(line)
            if len(parts) < 2:
                log.warning("Ignoring malformed suffix line: %r", line)
                continue
            suffixes[parts[0]] = parts[1]

        suburbs: Dict[str, str] = {}
        hundreds: Dict[str, List[str]] = {}
        for line in _content_lines(suburb_lines):
            parts = _split_line(line)
            if len(parts) < 2:
                log.warning("Ignoring malformed suburb line: %r", line)
                continue
            suburb_name, canonical = parts[0], parts[1]
            for alias in mount_aliases(suburb_name):
                suburbs[alias] = canonical
            hundred_field = parts[2] if len(parts) > 2 else ""
            for hundred_name in hundred_field.split(";"):
                hundred_name = hundred_name.strip()
                if not hundred_name:
                    continue
                for alias in mount_aliases(hundred_name):
                    _append_unique(hundreds, alias, suburb_name)

        return cls(
            street_suburbs=MappingProxyType({k: tuple(v) for k, v in streets.items()}),
            suffixes=MappingProxyType(suffixes),
            suburbs=MappingProxyType(suburbs),
            hundred_suburbs=MappingProxyType(
                {k: tuple(v) for k, v in hundreds.items()}
            ),
        )


def load_gazetteer(directory: Path | str) -> Gazetteer:
    """Load the three gazetteer files from *directory*.

    Raises
    ------
    FileNotFoundError
        When any of the files is missing.
    """
    directory = Path(directory)

    def _read(name: str) -> List[str]:
        return (directory / name).read_text(encoding="utf-8").splitlines()

    gazetteer = Gazetteer.from_lines(
        _read(STREET_NAMES_FILE),
        _read(STREET_SUFFIXES_FILE),
        _read(SUBURB_NAMES_FILE),
    )
    log.info(
        "Loaded gazetteer from %s: %d streets, %d suffixes, %d suburbs, %d hundreds",
        directory,
        len(gazetteer.street_suburbs),
        len(gazetteer.suffixes),
        len(gazetteer.suburbs),
        len(gazetteer.hundred_suburbs),
    )
    return gazetteer
