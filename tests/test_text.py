"""Tests for dascrape.text — transform composition and element extraction."""

import pytest

from dascrape.config import ExtractionConfig
from dascrape.text import (
    IDENTITY,
    TextItem,
    extract_elements,
    item_to_element,
    multiply_transforms,
)

FLIP_800 = (1.0, 0.0, 0.0, -1.0, 0.0, 800.0)


class TestMultiplyTransforms:
    def test_identity(self):
        m = (2.0, 0.5, -0.5, 3.0, 10.0, 20.0)
        assert multiply_transforms(IDENTITY, m) == m
        assert multiply_transforms(m, IDENTITY) == m

    def test_translation_then_scale(self):
        scale = (2.0, 0.0, 0.0, 2.0, 0.0, 0.0)
        translate = (1.0, 0.0, 0.0, 1.0, 5.0, 7.0)
        # translate applied first, then scaled
        assert multiply_transforms(scale, translate) == (2.0, 0.0, 0.0, 2.0, 10.0, 14.0)


class TestItemToElement:
    def test_baseline_to_top_edge(self):
        item = TextItem("DA NUMBER", (8.0, 0.0, 0.0, 8.0, 100.0, 700.0), 45.0)
        e = item_to_element(item, FLIP_800)
        assert e.x == 100.0
        assert e.height == pytest.approx(8.0)
        assert e.y == pytest.approx(92.0)
        assert e.width == 45.0
        assert e.text == "DA NUMBER"

    def test_height_from_transform_scale(self):
        # 10pt text under a 1.5x viewport scale
        item = TextItem("X", (10.0, 0.0, 0.0, 10.0, 0.0, 0.0), 5.0)
        scale_viewport = (1.5, 0.0, 0.0, -1.5, 0.0, 1200.0)
        e = item_to_element(item, scale_viewport)
        assert e.height == pytest.approx(15.0)
        assert e.y == pytest.approx(1185.0)


class TestExtractElements:
    def test_sorted_rows_then_x(self):
        items = [
            TextItem("second-line", (8, 0, 0, 8, 10, 680), 40),
            TextItem("right", (8, 0, 0, 8, 200, 700.5), 20),
            TextItem("left", (8, 0, 0, 8, 10, 700), 20),
        ]
        elements = extract_elements(items, FLIP_800, ExtractionConfig())
        assert [e.text for e in elements] == ["left", "right", "second-line"]

    def test_empty(self):
        assert extract_elements([], FLIP_800) == []
