"""
surface.py - Render surfaces

A RenderSurface is one controllable page-rendering session: it navigates,
runs probes inside the page, takes style layers and prints the page to PDF
bytes. PlaywrightSurface drives headless Chromium through the sync API.

Requirements:
    pip install playwright && playwright install chromium
"""

from .config import BROWSER_ARGS, REFERENCE_VIEWPORT, USER_AGENT
from .errors import ArchiverError, NavigationTimeout, SurfaceLaunchError


class RenderSurface:
    """Capability interface consumed by the pipeline."""

    def set_viewport(self, width: int, height: int, scale_factor: float = 1):
        raise NotImplementedError

    def navigate(self, url: str, timeout_ms: int):
        """Load url and wait for DOM-ready and network-idle.

        Raises NavigationTimeout when the page is not ready in time.
        """
        raise NotImplementedError

    def wait_for_idle(self):
        raise NotImplementedError

    def evaluate(self, probe, arg=None):
        raise NotImplementedError

    def inject_style(self, css: str):
        raise NotImplementedError

    def render_to_pdf(self, options: dict) -> bytes:
        raise NotImplementedError

    def title(self) -> str:
        raise NotImplementedError

    def wait(self, ms: int):
        raise NotImplementedError

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()


class PlaywrightSurface(RenderSurface):
    """Headless Chromium session.

    The browser lives for the whole run, but every navigation gets a fresh
    browser context, so cookies, injected styles and viewport changes from
    one job never reach the next.
    """

    def __init__(self, headless: bool = True):
        self.headless = headless
        self._playwright = None
        self._browser = None
        self._context = None
        self._page = None
        self._viewport = dict(REFERENCE_VIEWPORT)

    def start(self) -> "PlaywrightSurface":
        try:
            from playwright.sync_api import sync_playwright
        except ImportError as e:
            raise SurfaceLaunchError(
                "Playwright not installed. Run: "
                "pip install playwright && playwright install chromium"
            ) from e

        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self.headless, args=BROWSER_ARGS
            )
        except Exception as e:
            self.close()
            raise SurfaceLaunchError(
                f"Error starting browser: {e} (try: playwright install chromium)"
            ) from e
        return self

    @property
    def page(self):
        if self._page is None:
            raise ArchiverError("No page loaded; call navigate() first")
        return self._page

    def set_viewport(self, width: int, height: int, scale_factor: float = 1):
        self._viewport = {"width": int(width), "height": int(height), "scale_factor": scale_factor}
        # Device scale factor is fixed per context; it applies from the next navigation
        if self._page is not None:
            self._page.set_viewport_size({"width": int(width), "height": int(height)})

    def _new_page(self):
        self._close_context()
        self._context = self._browser.new_context(
            user_agent=USER_AGENT,
            viewport={"width": self._viewport["width"], "height": self._viewport["height"]},
            device_scale_factor=self._viewport["scale_factor"],
        )
        self._page = self._context.new_page()
        self._page.emulate_media(media="print")

    def navigate(self, url: str, timeout_ms: int):
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        if self._browser is None:
            raise ArchiverError("Browser not started")

        self._new_page()
        try:
            self._page.goto(url, wait_until="networkidle", timeout=timeout_ms)
            self._page.wait_for_load_state("domcontentloaded", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(url, timeout_ms) from e

    def wait_for_idle(self):
        from playwright.sync_api import TimeoutError as PlaywrightTimeoutError

        try:
            self.page.wait_for_load_state("networkidle", timeout=10000)
        except PlaywrightTimeoutError:
            # Long-polling pages never go fully idle
            pass

    def evaluate(self, probe, arg=None):
        return self.page.evaluate(probe.script, arg)

    def inject_style(self, css: str):
        self.page.add_style_tag(content=css)

    def render_to_pdf(self, options: dict) -> bytes:
        return self.page.pdf(**options)

    def title(self) -> str:
        return self.page.title()

    def wait(self, ms: int):
        if ms > 0:
            self.page.wait_for_timeout(ms)

    def _close_context(self):
        if self._context is not None:
            try:
                self._context.close()
            finally:
                self._context = None
                self._page = None

    def close(self):
        try:
            self._close_context()
            if self._browser is not None:
                self._browser.close()
        finally:
            self._browser = None
            if self._playwright is not None:
                self._playwright.stop()
                self._playwright = None


def launch(settings) -> PlaywrightSurface:
    """Start a browser-backed surface for a run."""
    print("🚀 Launching headless browser...")
    return PlaywrightSurface(headless=settings.headless).start()
