"""Heading extraction from the rendered page."""

from . import probes
from .models import HeadingRecord


class HeadingExtractor:
    def extract(self, surface) -> list:
        """Return every h1-h6 of the page in document order.

        Headings without an id get `heading-<index>` assigned in the live
        document. An empty list is a valid result.
        """
        print("📑 Extracting headings for TOC...")
        raw = surface.evaluate(probes.HEADINGS) or []
        headings = [HeadingRecord.from_probe(item, index) for index, item in enumerate(raw)]
        print(f"   ✓ Found {len(headings)} heading(s)")
        return headings
