"""Tests for lazy-load scrolling and overflow correction."""

from blog_archiver.stabilizer import ContentStabilizer
from blog_archiver.stylesheets import OVERFLOW_STYLESHEET, PRINT_STYLESHEET

from conftest import FakeSurface


def test_scroll_loop_rereads_growing_height():
    heights = iter([300, 300, 600, 600, 600, 600, 600, 600, 600])
    surface = FakeSurface(responses={"scroll_height": lambda _: next(heights)})

    steps = ContentStabilizer(step_px=100, interval_ms=0).trigger_lazy_load(surface)

    assert steps == 6
    names = surface.probe_names()
    assert names.count("scroll_by") == 6
    assert names[-1] == "scroll_to_top"


def test_scroll_loop_on_empty_page_only_returns_to_top():
    surface = FakeSurface(responses={"scroll_height": 0})

    assert ContentStabilizer().trigger_lazy_load(surface) == 0
    assert surface.probe_names() == ["scroll_height", "scroll_to_top"]


def test_scroll_loop_stops_at_step_cap(capsys):
    surface = FakeSurface(responses={"scroll_height": 10 ** 9})

    steps = ContentStabilizer(max_steps=5, interval_ms=0).trigger_lazy_load(surface)

    assert steps == 5
    assert surface.probe_names()[-1] == "scroll_to_top"
    assert "Stopped scrolling" in capsys.readouterr().out


def test_no_overflow_leaves_styles_untouched():
    surface = FakeSurface(responses={"overflow_check": {"hasOverflow": False, "offenders": []}})

    assert ContentStabilizer().correct_overflow(surface) is False
    assert surface.styles == []


def test_overflow_is_logged_and_corrected_additively(capsys):
    report = {
        "hasOverflow": True,
        "scrollWidth": 1600,
        "clientWidth": 1050,
        "offenders": [{"tag": "table", "id": "prices", "className": "wide data", "width": 1500, "right": 1580}],
    }
    surface = FakeSurface(responses={"overflow_check": report})
    surface.inject_style(PRINT_STYLESHEET)

    assert ContentStabilizer(layout_settle_ms=0).correct_overflow(surface) is True

    assert surface.styles == [PRINT_STYLESHEET, OVERFLOW_STYLESHEET]
    out = capsys.readouterr().out
    assert "<table#prices.wide.data>" in out
    assert "1500px" in out


def test_offending_element_alone_triggers_correction():
    report = {"hasOverflow": False, "offenders": [{"tag": "img", "width": 2000, "right": 2000}]}
    surface = FakeSurface(responses={"overflow_check": report})

    assert ContentStabilizer().correct_overflow(surface) is True
    assert surface.styles == [OVERFLOW_STYLESHEET]


def test_correction_is_applied_at_most_once():
    responses = iter([
        {"hasOverflow": True, "offenders": []},
        {"hasOverflow": True, "offenders": []},
    ])
    surface = FakeSurface(responses={"overflow_check": lambda _: next(responses)})
    stabilizer = ContentStabilizer()

    assert stabilizer.correct_overflow(surface) is True
    assert stabilizer.correct_overflow(surface) is False
    assert surface.styles.count(OVERFLOW_STYLESHEET) == 1


def test_stabilize_loads_content_and_leaves_overflow_alone():
    surface = FakeSurface(responses={
        "scroll_height": 250,
        "overflow_check": {"hasOverflow": True, "offenders": []},
    })
    stabilizer = ContentStabilizer(step_px=100, interval_ms=0, settle_ms=0, layout_settle_ms=0)

    assert stabilizer.stabilize(surface) == 3

    assert "wait_for_idle" in surface.calls
    assert "overflow_check" not in surface.probe_names()
    assert surface.styles == []
