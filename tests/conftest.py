"""Shared fixtures for the blog_archiver test suite."""

from __future__ import annotations

import io

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from blog_archiver.config import ArchiveSettings
from blog_archiver.errors import NavigationTimeout
from blog_archiver.surface import RenderSurface


def make_pdf(pages: int) -> bytes:
    """Build a content PDF with the given number of pages."""
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    for number in range(1, pages + 1):
        c.drawString(72, 720, f"Content page {number}")
        c.showPage()
    c.save()
    return buffer.getvalue()


class FakeSurface(RenderSurface):
    """Scripted surface that answers probes by name and records every call."""

    def __init__(self, responses=None, pdf_pages: int = 3, title: str = "Sample Post",
                 timeout_urls=()):
        self.responses = dict(responses or {})
        self.pdf_pages = pdf_pages
        self._title = title
        self.timeout_urls = set(timeout_urls)
        self.calls = []
        self.styles = []
        self.viewports = []
        self.waits = []
        self.pdf_options = None
        self.closed = False

    def set_viewport(self, width, height, scale_factor=1):
        self.viewports.append((width, height, scale_factor))
        self.calls.append("set_viewport")

    def navigate(self, url, timeout_ms):
        self.calls.append(("navigate", url))
        if url in self.timeout_urls:
            raise NavigationTimeout(url, timeout_ms)
        self.styles = []

    def wait_for_idle(self):
        self.calls.append("wait_for_idle")

    def evaluate(self, probe, arg=None):
        self.calls.append(("evaluate", probe.name))
        response = self.responses.get(probe.name)
        if callable(response):
            return response(arg)
        return response

    def inject_style(self, css):
        self.calls.append("inject_style")
        self.styles.append(css)

    def render_to_pdf(self, options):
        self.calls.append("render_to_pdf")
        self.pdf_options = options
        return make_pdf(self.pdf_pages)

    def title(self):
        return self._title

    def wait(self, ms):
        self.waits.append(ms)

    def close(self):
        self.closed = True

    def probe_names(self) -> list:
        return [call[1] for call in self.calls if isinstance(call, tuple) and call[0] == "evaluate"]


@pytest.fixture()
def fake_surface() -> FakeSurface:
    return FakeSurface(responses={
        "viewport_metrics": {"contentWidth": 700, "documentWidth": 900, "scrollWidth": 1000},
        "scroll_height": 250,
        "headings": [
            {"level": 1, "text": "Intro", "id": "intro"},
            {"level": 2, "text": "Details", "id": ""},
        ],
        "overflow_check": {"hasOverflow": False, "offenders": []},
    })


@pytest.fixture()
def settings(tmp_path) -> ArchiveSettings:
    return ArchiveSettings(
        output_dir=tmp_path / "archive",
        delay_ms=0,
        settle_ms=0,
        layout_settle_ms=0,
    )
