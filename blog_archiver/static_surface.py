"""
static_surface.py - Render surface without a browser

Fetches the page over HTTP, probes the parsed HTML with BeautifulSoup and
typesets the main content with ReportLab. No JavaScript runs, so width
detection, lazy loading and overflow correction have nothing to act on;
headings and the table of contents still work.

Requirements:
    pip install requests beautifulsoup4 reportlab
"""

import io
import re

import requests
from bs4 import BeautifulSoup
from reportlab.lib import colors
from reportlab.lib.enums import TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    ListFlowable, ListItem, Paragraph, Preformatted, SimpleDocTemplate, Spacer
)

from .config import USER_AGENT
from .errors import ArchiverError, NavigationTimeout
from .stylesheets import HIDDEN_SELECTORS
from .surface import RenderSurface

HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

CONTENT_SELECTORS = [
    "main article",
    "main .content",
    "article",
    "main",
    ".docs-content",
    ".markdown-body",
    ".post-content",
    ".entry-content",
    ".article-content",
    ".page-content",
    '[role="main"]',
]

STRIPPED_TAGS = ["script", "style", "noscript", "template", "header", "footer", "aside"]

HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
BLOCK_TAGS = HEADING_TAGS + ["p", "ul", "ol", "pre", "blockquote"]


def _escape(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _escape_attr(text: str) -> str:
    return _escape(text).replace('"', "&quot;")


def _length(value: str, default: float) -> float:
    """Convert '15mm' style lengths to points."""
    match = re.match(r"^\s*([\d.]+)\s*mm\s*$", str(value or ""))
    return float(match.group(1)) * mm if match else default


class StaticSurface(RenderSurface):
    """HTTP + BeautifulSoup implementation of the RenderSurface capability."""

    def __init__(self, session=None):
        self.session = session or requests
        self.url = None
        self.soup = None
        self.styles = []
        self.viewport = None
        self._root = None

    def set_viewport(self, width: int, height: int, scale_factor: float = 1):
        self.viewport = {"width": width, "height": height, "scale_factor": scale_factor}

    def navigate(self, url: str, timeout_ms: int):
        try:
            response = self.session.get(url, headers=HEADERS, timeout=timeout_ms / 1000)
            response.raise_for_status()
        except requests.Timeout as e:
            raise NavigationTimeout(url, timeout_ms) from e
        except requests.RequestException as e:
            raise ArchiverError(f"Failed to fetch {url}: {e}") from e

        self.url = url
        self.styles = []
        self.soup = BeautifulSoup(response.text, "html.parser")
        for tag in self.soup.find_all(STRIPPED_TAGS):
            if not tag.decomposed:
                tag.decompose()
        # Always printing, so the print layer's hidden elements go right away
        for selector in HIDDEN_SELECTORS:
            for element in self.soup.select(selector):
                if not element.decomposed:
                    element.decompose()
        self._root = self._find_content_root()

    def _find_content_root(self):
        for selector in CONTENT_SELECTORS:
            candidate = self.soup.select_one(selector)
            if candidate and len(candidate.get_text(strip=True)) > 100:
                return candidate
        return self.soup.body or self.soup

    def _require_page(self):
        if self.soup is None:
            raise ArchiverError("No page loaded; call navigate() first")

    def wait_for_idle(self):
        pass

    def evaluate(self, probe, arg=None):
        self._require_page()
        handler = getattr(self, f"_probe_{probe.name}", None)
        if handler is None:
            raise ArchiverError(f"Probe '{probe.name}' is not supported without a browser")
        return handler(arg)

    def _probe_viewport_metrics(self, arg):
        return {"contentWidth": 0, "documentWidth": 0, "scrollWidth": 0}

    def _probe_scroll_height(self, arg):
        return 0

    def _probe_scroll_by(self, arg):
        return 0

    def _probe_scroll_to_top(self, arg):
        return 0

    def _probe_fonts_ready(self, arg):
        return True

    def _probe_settle_layout(self, arg):
        return 0

    def _probe_overflow_check(self, arg):
        return {"hasOverflow": False, "scrollWidth": 0, "clientWidth": 0, "offenders": []}

    def _probe_headings(self, arg):
        headings = []
        for index, element in enumerate(self._root.find_all(HEADING_TAGS)):
            if not element.get("id"):
                element["id"] = f"heading-{index}"
            headings.append({
                "level": int(element.name[1]),
                "text": element.get_text(separator=" ", strip=True),
                "id": element["id"],
            })
        return headings

    def inject_style(self, css: str):
        self._require_page()
        self.styles.append(css)

    def title(self) -> str:
        self._require_page()
        if self.soup.title and self.soup.title.string:
            return self.soup.title.string.strip()
        h1 = self.soup.find("h1")
        return h1.get_text(separator=" ", strip=True) if h1 else ""

    def wait(self, ms: int):
        pass

    def render_to_pdf(self, options: dict) -> bytes:
        self._require_page()
        margin = options.get("margin", {})
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=_length(margin.get("left"), 10 * mm),
            rightMargin=_length(margin.get("right"), 10 * mm),
            topMargin=_length(margin.get("top"), 15 * mm),
            bottomMargin=_length(margin.get("bottom"), 15 * mm),
            title=self.title(),
        )
        doc.build(self._story())
        return buffer.getvalue()

    def _story(self) -> list:
        styles = getSampleStyleSheet()
        heading_styles = {
            1: ParagraphStyle("ArchiveH1", parent=styles["Heading1"], fontSize=18,
                              spaceAfter=16, textColor=colors.HexColor("#1a1a2e")),
            2: ParagraphStyle("ArchiveH2", parent=styles["Heading2"], fontSize=14,
                              spaceBefore=14, spaceAfter=10, textColor=colors.HexColor("#16213e")),
            3: ParagraphStyle("ArchiveH3", parent=styles["Heading3"], fontSize=12,
                              spaceBefore=12, spaceAfter=8, textColor=colors.HexColor("#0f3460")),
        }
        body_style = ParagraphStyle("ArchiveBody", parent=styles["Normal"], fontSize=11,
                                    leading=16, spaceBefore=6, spaceAfter=6,
                                    alignment=TA_JUSTIFY, fontName="Times-Roman")
        url_style = ParagraphStyle("ArchiveUrl", parent=styles["Normal"], fontSize=8,
                                   textColor=colors.HexColor("#666666"), spaceAfter=20)
        code_style = ParagraphStyle("ArchiveCode", parent=styles["Code"], fontSize=8,
                                    leading=10, backColor=colors.HexColor("#f5f5f5"),
                                    borderPadding=6, spaceBefore=8, spaceAfter=8)
        quote_style = ParagraphStyle("ArchiveQuote", parent=body_style, fontName="Times-Italic",
                                     textColor=colors.HexColor("#555555"),
                                     leftIndent=20, rightIndent=20)

        story = [Paragraph(f"Source: {_escape(self.url)}", url_style), Spacer(1, 6)]

        for element in self._root.find_all(BLOCK_TAGS):
            # Nested blocks are rendered by their outermost block
            if element.find_parent(["ul", "ol", "pre", "blockquote"]):
                continue

            tag = element.name
            if tag in HEADING_TAGS:
                text = _escape(element.get_text(separator=" ", strip=True))
                level = min(int(tag[1]), 3)
                anchor = (element.get("id") or "").strip()
                # ReportLab rejects blank anchor names
                if anchor:
                    text = f'<a name="{_escape_attr(anchor)}"/>{text}'
                story.append(Paragraph(text, heading_styles[level]))

            elif tag == "p":
                text = element.get_text(separator=" ", strip=True)
                if text:
                    story.append(Paragraph(_escape(text), body_style))

            elif tag in ("ul", "ol"):
                items = [
                    ListItem(Paragraph(_escape(li.get_text(separator=" ", strip=True)), body_style))
                    for li in element.find_all("li", recursive=False)
                    if li.get_text(strip=True)
                ]
                if items:
                    story.append(ListFlowable(items, bulletType="1" if tag == "ol" else "bullet"))

            elif tag == "pre":
                text = element.get_text()
                if text.strip():
                    story.append(Preformatted(text.rstrip(), code_style, maxLineLength=110))

            elif tag == "blockquote":
                text = element.get_text(separator=" ", strip=True)
                if text:
                    story.append(Paragraph(f"<i>{_escape(text)}</i>", quote_style))

        return story
