"""Unit tests for dimension resolution priority."""
import pytest

from svgreel.models import Dimensions
from svgreel.probe.dimensions import (
    DEFAULT_DIMENSIONS,
    dimensions_from_query,
    parse_length,
    parse_viewbox,
    resolve_dimensions,
)

from conftest import FakePage


def _query(**overrides):
    raw = {
        "viewBox": None,
        "width": None,
        "height": None,
        "parentWidth": 800,
        "parentHeight": 600,
        "bbox": {"width": 10.2, "height": 20.7},
    }
    raw.update(overrides)
    return raw


class TestParsers:
    def test_viewbox_spaces(self):
        assert parse_viewbox("0 0 400 300") == (400.0, 300.0)

    def test_viewbox_commas(self):
        assert parse_viewbox("0,0,64,32") == (64.0, 32.0)

    @pytest.mark.parametrize("value", [None, "", "0 0 400", "0 0 0 300", "a b c d", "0 0 -5 10"])
    def test_viewbox_invalid(self, value):
        assert parse_viewbox(value) is None

    def test_length_absolute(self):
        assert parse_length("400px", 1000) == 400.0

    def test_length_percentage(self):
        assert parse_length("50%", 200) == 100.0

    def test_length_percentage_without_parent(self):
        assert parse_length("50%", None) is None


class TestDimensionsFromQuery:
    def test_viewbox_wins_over_attributes(self):
        raw = _query(viewBox="0 0 400 300", width="1000", height="1000")
        assert dimensions_from_query(raw) == Dimensions(400, 300)

    def test_viewbox_wins_over_percentage_width(self):
        raw = _query(viewBox="0 0 100 50", width="50%", height="50%", parentWidth=200, parentHeight=200)
        assert dimensions_from_query(raw) == Dimensions(100, 50)

    def test_attributes_when_no_viewbox(self):
        assert dimensions_from_query(_query(width="320", height="240px")) == Dimensions(320, 240)

    def test_percentage_attributes_resolve_against_parent(self):
        raw = _query(width="50%", height="25%", parentWidth=200, parentHeight=400)
        assert dimensions_from_query(raw) == Dimensions(100, 100)

    def test_bbox_rounded_up(self):
        assert dimensions_from_query(_query(width="auto")) == Dimensions(11, 21)

    def test_empty_bbox_falls_back_to_default(self):
        assert dimensions_from_query(_query(bbox={"width": 0, "height": 0})) == DEFAULT_DIMENSIONS

    def test_no_svg_root(self):
        assert dimensions_from_query(None) == Dimensions(1280, 720)


class TestResolveDimensions:
    def test_resolves_from_page(self):
        page = FakePage(size_query=_query(viewBox="0 0 400 300"))
        assert resolve_dimensions(page) == Dimensions(400, 300)
        assert page.calls == ["size"]

    def test_page_without_svg(self):
        assert resolve_dimensions(FakePage(size_query=None)) == DEFAULT_DIMENSIONS


class TestDimensionsModel:
    def test_viewport_rounds_up(self):
        assert Dimensions(100.2, 50.9).viewport() == {"width": 101, "height": 51}

    def test_scaled(self):
        assert Dimensions(100, 50).scaled(2) == (200, 100)

    def test_scaled_even(self):
        assert Dimensions(101, 51).scaled_even(1) == (102, 52)
