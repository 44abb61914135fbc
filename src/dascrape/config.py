from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, Optional


class ConfigValidationError(ValueError):
    """Raised when an ExtractionConfig field has an invalid value."""


def _check_range(
    name: str, value: float, lo: float, hi: float, *, inclusive: bool = True
) -> None:
    if inclusive:
        if not (lo <= value <= hi):
            raise ConfigValidationError(f"{name}={value} out of range [{lo}, {hi}]")
    else:
        if not (lo < value < hi):
            raise ConfigValidationError(f"{name}={value} out of range ({lo}, {hi})")


def _check_positive(name: str, value: float) -> None:
    if value <= 0:
        raise ConfigValidationError(f"{name}={value} must be > 0")


def _check_non_negative(name: str, value: float) -> None:
    if value < 0:
        raise ConfigValidationError(f"{name}={value} must be >= 0")


@dataclass
class HeaderLabels:
    """Column heading labels, matched exactly against trimmed cell text.

    ``identifier`` and ``address`` are required on every page; the rest are
    optional and may be set to ``None`` for layouts that lack the column.
    """

    identifier: str = "DA NUMBER"
    address: str = "LOCATION"
    description: Optional[str] = "DESCRIPTION"
    assessment: Optional[str] = "ASSESS"
    decision_date: Optional[str] = "DECISION"
    received_date: Optional[str] = None
    vg_number: Optional[str] = "VG NUMBER"
    applicant: Optional[str] = "APPLICANT"
    owner: Optional[str] = "OWNER"
    builder: Optional[str] = "BUILDER"
    valuation: Optional[str] = "VALUATION"
    area: Optional[str] = "AREA"

    def items(self) -> Dict[str, str]:
        """Return ``{column_key: label}`` for every configured column."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name)
        }


UPSERT_POLICIES = ("ignore", "replace")


@dataclass
class ExtractionConfig:
    """Tunables for table reconstruction, address normalisation and I/O."""

    # ── Line extraction ───────────────────────────────────────────────
    # A drawn rectangle is a line when one side is at most this thick.
    line_thickness_max: float = 2.0
    # Lines shorter than this are serifs/underlines, not table borders.
    line_length_min: float = 10.0

    # ── Grid reconstruction ───────────────────────────────────────────
    # Endpoints closer than this (squared distance) are the same point.
    point_merge_distance_sq: float = 1.0
    # Axis tolerance when looking for right/down neighbour points.
    neighbour_tolerance: float = 1.0
    # Cells whose y differs by less than this share a row.
    cell_row_tolerance: float = 2.0
    # Text elements whose y differs by less than this share a line.
    element_row_tolerance: float = 1.0

    # ── Overhang splitting / column matching ──────────────────────────
    # Elements within this y distance of an overhang element are re-parsed with it.
    aligned_element_tolerance: float = 5.0
    # Minimum horizontal overlap (percent) for a cell to belong to a header column.
    column_overlap_min: float = 90.0
    # Runs of at least this many spaces separate merged columns.
    column_split_spaces: int = 3

    # ── Address normalisation ─────────────────────────────────────────
    street_max_distance: int = 1
    suffix_max_distance: int = 1
    locality_max_distance: int = 2
    deinterleave_addresses: bool = True
    deinterleave_marker: str = "ü"

    # ── Record extraction ─────────────────────────────────────────────
    default_description: str = "NO DESCRIPTION PROVIDED"
    labels: HeaderLabels = field(default_factory=HeaderLabels)

    # ── PDF content adapter ───────────────────────────────────────────
    # Horizontal gap (pts) beyond which characters start a new text run.
    text_run_break_gap: float = 40.0
    # Fraction of the font size treated as one space when filling gaps.
    text_space_width: float = 0.25

    # ── Fetching / storage ────────────────────────────────────────────
    index_url: str = "https://www.wattlerange.sa.gov.au/page.aspx?u=1158"
    comment_url: str = "mailto:council@wattlerange.sa.gov.au"
    pdf_link_selector: str = "td.u6ListTD a[href$='.pdf']"
    # Delay after each request is request_delay_min + randint(0, steps - 1) seconds.
    request_delay_min: float = 2.0
    request_delay_steps: int = 5
    request_timeout: float = 60.0
    upsert_policy: str = "ignore"

    def __post_init__(self) -> None:
        """Validate field ranges to catch misconfiguration early."""
        _pos_floats = [
            "line_thickness_max",
            "point_merge_distance_sq",
            "neighbour_tolerance",
            "cell_row_tolerance",
            "element_row_tolerance",
            "aligned_element_tolerance",
            "text_run_break_gap",
            "text_space_width",
            "request_timeout",
        ]
        for name in _pos_floats:
            _check_positive(name, getattr(self, name))

        _nn_floats = ["line_length_min", "request_delay_min"]
        for name in _nn_floats:
            _check_non_negative(name, getattr(self, name))

        _check_range("column_overlap_min", self.column_overlap_min, 0.0, 100.0)

        for name in (
            "street_max_distance",
            "suffix_max_distance",
            "locality_max_distance",
        ):
            _check_non_negative(name, getattr(self, name))

        if self.column_split_spaces < 2:
            raise ConfigValidationError(
                f"column_split_spaces={self.column_split_spaces} must be >= 2"
            )
        if self.request_delay_steps < 1:
            raise ConfigValidationError(
                f"request_delay_steps={self.request_delay_steps} must be >= 1"
            )
        if self.upsert_policy not in UPSERT_POLICIES:
            raise ConfigValidationError(
                f"upsert_policy={self.upsert_policy!r} must be one of {UPSERT_POLICIES}"
            )
        if self.deinterleave_addresses and not self.deinterleave_marker:
            raise ConfigValidationError(
                "deinterleave_marker must be non-empty when deinterleave_addresses is set"
            )
        if not self.labels.identifier or not self.labels.address:
            raise ConfigValidationError(
                "labels.identifier and labels.address are required"
            )
