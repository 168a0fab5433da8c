"""Tests for the per-job rendering sequence."""

import dataclasses

from blog_archiver.renderer import ArchiveRenderer
from blog_archiver.stabilizer import ContentStabilizer
from blog_archiver.stylesheets import PRINT_STYLESHEET


def test_render_runs_steps_in_order(fake_surface, settings):
    rendered = ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    calls = fake_surface.calls
    navigate_at = calls.index(("navigate", "https://example.com/post"))
    metrics_at = calls.index(("evaluate", "viewport_metrics"))
    scroll_at = calls.index(("evaluate", "scroll_height"))
    headings_at = calls.index(("evaluate", "headings"))
    style_at = calls.index("inject_style")
    overflow_at = calls.index(("evaluate", "overflow_check"))
    pdf_at = calls.index("render_to_pdf")

    assert navigate_at < metrics_at < scroll_at < headings_at < style_at < overflow_at < pdf_at
    assert fake_surface.styles == [PRINT_STYLESHEET]
    assert rendered.title == "Sample Post"
    assert [h.text for h in rendered.headings] == ["Intro", "Details"]
    assert rendered.pdf_bytes.startswith(b"%PDF")


def test_render_measures_wide_then_applies_recommended_width(fake_surface, settings):
    rendered = ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    assert fake_surface.viewports == [(1920, 1080, 2), (1050, 720, 1)]
    assert rendered.viewport.recommended_width == 1050


def test_width_override_skips_detection(fake_surface, settings):
    settings = dataclasses.replace(settings, width_override=1024)

    rendered = ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    assert fake_surface.viewports == [(1024, 720, 1)]
    assert "viewport_metrics" not in fake_surface.probe_names()
    assert rendered.viewport is None


def test_full_page_mode_sizes_the_page_to_the_document(fake_surface, settings):
    settings = dataclasses.replace(settings, full_page=True)
    fake_surface.responses["settle_layout"] = 5400

    ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    options = fake_surface.pdf_options
    assert "format" not in options
    assert options["height"] == "5400px"
    assert options["width"] == "1050px"
    assert options["margin"]["top"] == options["margin"]["bottom"] == "0mm"
    assert options["prefer_css_page_size"] is False


def test_full_page_mode_uses_manual_width(fake_surface, settings):
    settings = dataclasses.replace(settings, full_page=True, width_override=900)
    fake_surface.responses["settle_layout"] = 3000

    ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    assert fake_surface.pdf_options["width"] == "900px"
    assert fake_surface.pdf_options["height"] == "3000px"


def test_paginated_mode_uses_a4(fake_surface, settings):
    ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    assert fake_surface.pdf_options["format"] == "A4"
    assert fake_surface.pdf_options["margin"]["top"] == "15mm"


def test_render_stabilizes_before_the_print_layer(fake_surface, settings, monkeypatch):
    seen = []
    original = ContentStabilizer.stabilize

    def recording_stabilize(self, surface):
        seen.append(list(surface.styles))
        return original(self, surface)

    monkeypatch.setattr(ContentStabilizer, "stabilize", recording_stabilize)

    ArchiveRenderer(fake_surface, settings).render("https://example.com/post")

    assert seen == [[]]
    assert fake_surface.styles == [PRINT_STYLESHEET]
