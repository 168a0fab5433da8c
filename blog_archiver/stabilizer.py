"""
stabilizer.py - Lazy-load triggering and overflow correction

Scrolls the page to the bottom so deferred content loads, then (after the
print layer is in) checks for content wider than the viewport and clamps
it with a second style layer.
"""

from . import probes
from .config import (
    LAYOUT_SETTLE_MS, MAX_SCROLL_STEPS, SCROLL_INTERVAL_MS, SCROLL_STEP_PX, SETTLE_MS
)
from .stylesheets import OVERFLOW_STYLESHEET, WATCHED_SELECTORS

MAX_REPORTED_OFFENDERS = 10


class ContentStabilizer:
    """One instance per job; remembers whether the corrective layer went in."""

    def __init__(self, step_px: int = SCROLL_STEP_PX, interval_ms: int = SCROLL_INTERVAL_MS,
                 max_steps: int = MAX_SCROLL_STEPS, settle_ms: int = SETTLE_MS,
                 layout_settle_ms: int = LAYOUT_SETTLE_MS):
        self.step_px = step_px
        self.interval_ms = interval_ms
        self.max_steps = max_steps
        self.settle_ms = settle_ms
        self.layout_settle_ms = layout_settle_ms
        self.corrected = False

    def trigger_lazy_load(self, surface) -> int:
        """Scroll down until the (possibly growing) scroll height is reached.

        Returns the number of scroll steps taken.
        """
        position = 0
        steps = 0
        while steps < self.max_steps:
            # Re-read every round; loaded content makes the page taller
            scroll_height = surface.evaluate(probes.SCROLL_HEIGHT) or 0
            if position >= scroll_height:
                break
            surface.evaluate(probes.SCROLL_BY, self.step_px)
            position += self.step_px
            steps += 1
            surface.wait(self.interval_ms)

        if steps >= self.max_steps:
            print(f"   ⚠️ Stopped scrolling after {steps} steps (page keeps growing)")

        surface.evaluate(probes.SCROLL_TO_TOP)
        return steps

    def wait_for_settle(self, surface):
        """Let fonts and late network requests finish."""
        surface.wait_for_idle()
        surface.evaluate(probes.FONTS_READY)
        surface.wait(self.settle_ms)

    def correct_overflow(self, surface) -> bool:
        """Inject the overflow layer if anything sticks out horizontally.

        Returns True when the corrective layer was applied by this call.
        """
        report = surface.evaluate(probes.OVERFLOW_CHECK, list(WATCHED_SELECTORS)) or {}
        offenders = report.get("offenders") or []
        if not report.get("hasOverflow") and not offenders:
            return False

        print(f"   ⚠️ Horizontal overflow: scrollWidth {report.get('scrollWidth')}px, "
              f"clientWidth {report.get('clientWidth')}px, {len(offenders)} element(s) too wide")
        for offender in offenders[:MAX_REPORTED_OFFENDERS]:
            label = offender.get("tag", "?")
            if offender.get("id"):
                label += f"#{offender['id']}"
            if offender.get("className"):
                label += "." + ".".join(offender["className"].split())
            print(f"      - <{label}> width {offender.get('width')}px, right edge {offender.get('right')}px")
        if len(offenders) > MAX_REPORTED_OFFENDERS:
            print(f"      ... and {len(offenders) - MAX_REPORTED_OFFENDERS} more")

        if self.corrected:
            print("   ⚠️ Overflow persists after correction; rendering as is")
            return False

        surface.inject_style(OVERFLOW_STYLESHEET)
        self.corrected = True
        surface.wait(self.layout_settle_ms)
        print("   🔧 Applied overflow correction")
        return True

    def stabilize(self, surface) -> int:
        """Load deferred content and wait for the page to settle.

        Overflow depends on the print layer, so correct_overflow() is a
        separate step run once that layer is injected.
        """
        steps = self.trigger_lazy_load(surface)
        self.wait_for_settle(surface)
        return steps
