"""
renderer.py - Page to content PDF

Runs one job's steps strictly in order on a single surface:
navigate -> measure width -> stabilize -> extract headings -> style -> PDF.
"""

from . import probes
from .config import (
    FINAL_VIEWPORT_HEIGHT, REFERENCE_VIEWPORT, ArchiveSettings, pdf_options
)
from .headings import HeadingExtractor
from .models import RenderedPage
from .stabilizer import ContentStabilizer
from .stylesheets import PRINT_STYLESHEET
from .viewport import ViewportResolver


class ArchiveRenderer:
    def __init__(self, surface, settings: ArchiveSettings = None,
                 resolver: ViewportResolver = None, extractor: HeadingExtractor = None):
        self.surface = surface
        self.settings = settings or ArchiveSettings()
        self.resolver = resolver or ViewportResolver()
        self.extractor = extractor or HeadingExtractor()

    def _stabilizer(self) -> ContentStabilizer:
        return ContentStabilizer(
            settle_ms=self.settings.settle_ms,
            layout_settle_ms=self.settings.layout_settle_ms,
        )

    def render(self, url: str) -> RenderedPage:
        """Load url and return its content PDF, headings and title."""
        surface = self.surface
        settings = self.settings
        override = settings.width_override

        # Every job starts from a known viewport
        if override:
            surface.set_viewport(width=override, height=FINAL_VIEWPORT_HEIGHT, scale_factor=1)
        else:
            surface.set_viewport(**REFERENCE_VIEWPORT)

        print(f"🌐 Loading {url}")
        surface.navigate(url, timeout_ms=settings.navigation_timeout_ms)
        surface.wait(settings.settle_ms)

        decision = None
        if override:
            print(f"   📐 Using manual width {override}px")
        else:
            decision = self.resolver.resolve(surface, url)
            surface.set_viewport(
                width=decision.recommended_width, height=FINAL_VIEWPORT_HEIGHT, scale_factor=1
            )

        stabilizer = self._stabilizer()
        stabilizer.stabilize(surface)

        headings = self.extractor.extract(surface)
        title = (surface.title() or "").strip()

        surface.inject_style(PRINT_STYLESHEET)
        surface.evaluate(probes.SETTLE_LAYOUT)
        surface.wait(settings.layout_settle_ms)
        stabilizer.correct_overflow(surface)

        if settings.full_page:
            # Measured after every style layer is in
            height = surface.evaluate(probes.SETTLE_LAYOUT)
            width = override or decision.recommended_width
            options = pdf_options(True, content_height=height, content_width=width)
        else:
            options = pdf_options()

        print("📄 Generating PDF for offline reading...")
        pdf_bytes = surface.render_to_pdf(options)

        return RenderedPage(
            pdf_bytes=pdf_bytes,
            headings=tuple(headings),
            title=title,
            url=url,
            viewport=decision,
        )
