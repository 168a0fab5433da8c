"""
viewport.py - Rendering width detection

Measures the loaded page at a wide reference viewport and recommends the
narrowest width that still fits the content.
"""

import math

from . import probes
from .config import MAX_WIDTH, MIN_WIDTH, WIDTH_PADDING
from .models import ViewportDecision

# Checked in priority order; every match counts towards the widest container
CONTENT_SELECTORS = (
    "main article",
    "article",
    "main",
    '[role="main"]',
    ".post-content",
    ".entry-content",
    ".article-content",
    ".markdown-body",
    ".docs-content",
    ".page-content",
    ".content",
    "#content",
)


def _as_px(value) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if math.isnan(number) or number <= 0:
        return 0
    if math.isinf(number):
        return MAX_WIDTH
    return int(math.ceil(number))


def recommend_width(*widths) -> int:
    """Pad the widest measurement by 5% and clamp it to [MIN_WIDTH, MAX_WIDTH]."""
    widest = max([_as_px(w) for w in widths] or [0])
    padded = math.ceil(widest * WIDTH_PADDING)
    return min(max(padded, MIN_WIDTH), MAX_WIDTH)


class ViewportResolver:
    def __init__(self, selectors=CONTENT_SELECTORS):
        self.selectors = tuple(selectors)

    def resolve(self, surface, url: str) -> ViewportDecision:
        """Measure the current DOM of surface; the page is not modified."""
        metrics = surface.evaluate(probes.VIEWPORT_METRICS, list(self.selectors)) or {}

        content_width = _as_px(metrics.get("contentWidth"))
        document_width = _as_px(metrics.get("documentWidth"))
        scroll_width = _as_px(metrics.get("scrollWidth"))
        recommended = recommend_width(content_width, document_width, scroll_width)

        print(f"   📐 Width for {url}: content {content_width}px, "
              f"document {document_width}px, scroll {scroll_width}px -> {recommended}px")

        return ViewportDecision(
            content_width=content_width,
            document_width=document_width,
            scroll_width=scroll_width,
            recommended_width=recommended,
        )
