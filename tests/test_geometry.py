"""Tests for dascrape.geometry and the model helpers."""

import pytest

from dascrape.geometry import (
    area,
    contains,
    horizontal_overlap_percentage,
    intersect,
    vertical_overlap_percentage,
)
from dascrape.models import Cell, Element, Rectangle


class TestRectangle:
    def test_edges(self):
        r = Rectangle(10, 20, 30, 40)
        assert r.right == 40
        assert r.bottom == 60
        assert r.bbox() == (10, 20, 40, 60)
        assert r.area() == 1200

    def test_cell_text_joins_in_order(self):
        cell = Cell(0, 0, 100, 20)
        cell.elements = [Element(0, 0, 10, 5, text="12 MAIN"), Element(0, 6, 10, 5, text=" ST")]
        assert cell.text() == "12 MAIN ST"
        assert cell.text("|") == "12 MAIN| ST"


class TestIntersect:
    def test_overlap(self):
        r = intersect(Rectangle(0, 0, 10, 10), Rectangle(5, 5, 10, 10))
        assert (r.x, r.y, r.width, r.height) == (5, 5, 5, 5)

    def test_disjoint_is_zero(self):
        r = intersect(Rectangle(0, 0, 10, 10), Rectangle(20, 20, 5, 5))
        assert (r.x, r.y, r.width, r.height) == (0, 0, 0, 0)
        assert area(r) == 0

    def test_touching_edges_have_zero_area(self):
        r = intersect(Rectangle(0, 0, 10, 10), Rectangle(10, 0, 10, 10))
        assert area(r) == 0

    @pytest.mark.parametrize(
        "outer, inner",
        [
            (Rectangle(0, 0, 100, 50), Rectangle(10, 10, 20, 5)),
            (Rectangle(0, 0, 100, 50), Rectangle(0, 0, 100, 50)),
            (Rectangle(5.5, 2.25, 10, 10), Rectangle(6, 3, 9.5, 9.25)),
        ],
    )
    def test_contains_implies_intersection_is_inner(self, outer, inner):
        assert contains(outer, inner)
        r = intersect(outer, inner)
        assert (r.x, r.y, r.width, r.height) == (inner.x, inner.y, inner.width, inner.height)


class TestContains:
    def test_edges_inclusive(self):
        assert contains(Rectangle(0, 0, 10, 10), Rectangle(0, 0, 10, 10))

    def test_overhanging(self):
        assert not contains(Rectangle(0, 0, 10, 10), Rectangle(5, 2, 10, 2))


class TestHorizontalOverlap:
    def test_identical_spans(self):
        assert horizontal_overlap_percentage(
            Rectangle(10, 0, 50, 5), Rectangle(10, 100, 50, 20)
        ) == 100.0

    def test_disjoint(self):
        assert horizontal_overlap_percentage(
            Rectangle(0, 0, 10, 5), Rectangle(20, 0, 10, 5)
        ) == 0.0

    def test_zero_width(self):
        assert horizontal_overlap_percentage(
            Rectangle(5, 0, 0, 5), Rectangle(0, 0, 10, 5)
        ) == 0.0

    def test_partial_is_relative_to_union(self):
        # spans [0, 10] and [5, 15]: overlap 5, union 15
        pct = horizontal_overlap_percentage(Rectangle(0, 0, 10, 1), Rectangle(5, 0, 10, 1))
        assert pct == pytest.approx(100 / 3)

    def test_missing_rectangle(self):
        assert horizontal_overlap_percentage(None, Rectangle(0, 0, 10, 5)) == 0.0
        assert horizontal_overlap_percentage(Rectangle(0, 0, 10, 5), None) == 0.0

    @pytest.mark.parametrize("dx", [-20, -5, 0, 3, 9, 25])
    def test_bounded(self, dx):
        pct = horizontal_overlap_percentage(Rectangle(0, 0, 10, 1), Rectangle(dx, 0, 7, 1))
        assert 0.0 <= pct <= 100.0


class TestVerticalOverlap:
    def test_relative_to_reference_height(self):
        # candidate covers half of the 10-high reference
        assert vertical_overlap_percentage(
            Rectangle(0, 5, 1, 20), Rectangle(0, 0, 1, 10)
        ) == 50.0

    def test_capped_at_100(self):
        assert vertical_overlap_percentage(
            Rectangle(0, 0, 1, 100), Rectangle(0, 10, 1, 10)
        ) == 100.0

    def test_disjoint(self):
        assert vertical_overlap_percentage(
            Rectangle(0, 0, 1, 5), Rectangle(0, 10, 1, 5)
        ) == 0.0
