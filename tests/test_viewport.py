"""Tests for rendering width detection."""

import pytest

from blog_archiver.config import MAX_WIDTH, MIN_WIDTH
from blog_archiver.viewport import ViewportResolver, recommend_width

from conftest import FakeSurface


@pytest.mark.parametrize(
    "widths, expected",
    [
        ((0, 0, 0), MIN_WIDTH),
        ((), MIN_WIDTH),
        ((10000, 0, 0), MAX_WIDTH),
        ((1000,), 1050),
        ((700, 900, 1000), 1050),
        ((None, "garbage", -50), MIN_WIDTH),
        ((float("nan"), float("inf")), MAX_WIDTH),
        ((1333,), MAX_WIDTH),
    ],
)
def test_recommend_width_is_padded_and_clamped(widths, expected):
    assert recommend_width(*widths) == expected


def test_recommend_width_rounds_up():
    # 801 * 1.05 = 841.05
    assert recommend_width(801) == 842


def test_resolve_uses_widest_measurement(fake_surface):
    decision = ViewportResolver().resolve(fake_surface, "https://example.com")

    assert decision.content_width == 700
    assert decision.document_width == 900
    assert decision.scroll_width == 1000
    assert decision.recommended_width == 1050


def test_resolve_passes_selectors_and_does_not_style_page():
    seen = {}

    def metrics(selectors):
        seen["selectors"] = selectors
        return {"contentWidth": 0, "documentWidth": 0, "scrollWidth": 0}

    surface = FakeSurface(responses={"viewport_metrics": metrics})
    decision = ViewportResolver(selectors=["article"]).resolve(surface, "https://example.com")

    assert seen["selectors"] == ["article"]
    assert decision.recommended_width == MIN_WIDTH
    assert surface.styles == []


def test_resolve_handles_missing_metrics():
    surface = FakeSurface(responses={"viewport_metrics": None})
    assert ViewportResolver().resolve(surface, "https://example.com").recommended_width == MIN_WIDTH
