"""
config.py - Runtime settings for the archiver

Defaults live in module constants; a .env file or the process environment
can override the ones exposed as ARCHIVER_* variables.
"""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Browser
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-web-security",
    "--disable-features=IsolateOrigins,site-per-process",
]

# Wide viewport used while measuring content width
REFERENCE_VIEWPORT = {"width": 1920, "height": 1080, "scale_factor": 2}
FINAL_VIEWPORT_HEIGHT = 720
DEFAULT_WIDTH = 1280

MIN_WIDTH = 768
MAX_WIDTH = 1400
WIDTH_PADDING = 1.05

# Lazy-load scrolling
SCROLL_STEP_PX = 100
SCROLL_INTERVAL_MS = 100
MAX_SCROLL_STEPS = int(os.getenv("ARCHIVER_MAX_SCROLL_STEPS", "500"))

# Timing
DEFAULT_DELAY_MS = 2000
NAVIGATION_TIMEOUT_MS = 60000
SETTLE_MS = 2000
LAYOUT_SETTLE_MS = 1000

DEFAULT_OUTPUT_DIR = "./archive"

# TrueType font for TOC text Helvetica cannot encode
TOC_FONT_PATH = os.getenv("ARCHIVER_TOC_FONT")

PDF_OPTIONS = {
    "format": "A4",
    "margin": {"top": "15mm", "bottom": "15mm", "left": "10mm", "right": "10mm"},
    "print_background": True,
    "display_header_footer": False,
    "scale": 1,
    "prefer_css_page_size": True,
    "width": "210mm",
    "height": "297mm",
}


def pdf_options(full_page: bool = False, content_height: int = None, content_width: int = None) -> dict:
    """Return the page.pdf() options.

    Full-page mode sizes a single page to the measured document instead of
    A4, with no vertical margins so the content fits on it.
    """
    options = dict(PDF_OPTIONS)
    options["margin"] = dict(PDF_OPTIONS["margin"])
    if full_page:
        options.pop("height", None)
        options.pop("format", None)
        options["prefer_css_page_size"] = False
        options["margin"]["top"] = options["margin"]["bottom"] = "0mm"
        if content_width:
            options["width"] = f"{int(content_width)}px"
        if content_height:
            options["height"] = f"{int(content_height)}px"
    return options


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ArchiveSettings:
    """Per-run knobs shared by the CLI, the batch runner and the server."""

    output_dir: Path = field(default_factory=lambda: Path(DEFAULT_OUTPUT_DIR))
    delay_ms: int = DEFAULT_DELAY_MS
    navigation_timeout_ms: int = NAVIGATION_TIMEOUT_MS
    settle_ms: int = SETTLE_MS
    layout_settle_ms: int = LAYOUT_SETTLE_MS
    width_override: int = None
    full_page: bool = False
    static: bool = False
    headless: bool = True

    @classmethod
    def from_env(cls, **overrides) -> "ArchiveSettings":
        """Build settings from ARCHIVER_* variables; non-None overrides win."""
        settings = cls(
            output_dir=Path(os.getenv("ARCHIVER_OUTPUT_DIR", DEFAULT_OUTPUT_DIR)),
            delay_ms=int(os.getenv("ARCHIVER_DELAY_MS", DEFAULT_DELAY_MS)),
            navigation_timeout_ms=int(
                os.getenv("ARCHIVER_NAV_TIMEOUT_MS", NAVIGATION_TIMEOUT_MS)
            ),
            settle_ms=int(os.getenv("ARCHIVER_SETTLE_MS", SETTLE_MS)),
            headless=_env_bool("ARCHIVER_HEADLESS", True),
        )
        known = {f.name for f in fields(cls)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown setting: {key}")
            if value is not None:
                setattr(settings, key, value)
        settings.output_dir = Path(settings.output_dir)
        return settings
