from __future__ import annotations

import io

from linearctl.bulk import ProgressReporter


def _tty() -> io.StringIO:
    stream = io.StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


def test_render_with_glyphs_and_plain_labels() -> None:
    glyphs = ProgressReporter(4, stream=_tty(), color_enabled=True)
    plain = ProgressReporter(4, stream=_tty(), color_enabled=False)
    assert glyphs.render(1, 1, 0) == "⏳ Processing: 1/4 (25%) - ✓ 1 ✗ 0"
    assert plain.render(3, 2, 1) == "Processing: 3/4 (75%) - OK: 2 Failed: 1"


def test_percent_rounds_half_up() -> None:
    reporter = ProgressReporter(8, stream=_tty(), color_enabled=False)
    assert "(13%)" in reporter.render(1, 1, 0)  # 12.5
    reporter = ProgressReporter(3, stream=_tty(), color_enabled=False)
    assert "(67%)" in reporter.render(2, 2, 0)
    assert "(33%)" in reporter.render(1, 1, 0)


def test_update_overwrites_line_without_newline() -> None:
    stream = _tty()
    reporter = ProgressReporter(2, stream=stream, color_enabled=False)
    reporter.update(1, 1, 0)
    reporter.update(2, 2, 0)
    assert stream.getvalue() == (
        "\rProcessing: 1/2 (50%) - OK: 1 Failed: 0"
        "\rProcessing: 2/2 (100%) - OK: 2 Failed: 0"
    )
    assert "\n" not in stream.getvalue()


def test_clear_only_after_output() -> None:
    stream = _tty()
    reporter = ProgressReporter(2, stream=stream)
    reporter.clear()
    assert stream.getvalue() == ""
    reporter.update(1, 1, 0)
    reporter.clear()
    assert stream.getvalue().endswith("\r" + " " * 80 + "\r")


def test_inactive_when_disabled_empty_or_not_a_tty() -> None:
    for reporter in (
        ProgressReporter(3, stream=_tty(), enabled=False),
        ProgressReporter(0, stream=_tty()),
        ProgressReporter(3, stream=io.StringIO()),
    ):
        reporter.update(1, 1, 0)
        reporter.clear()
        assert not reporter.active
        assert reporter.stream.getvalue() == ""  # type: ignore[attr-defined]
