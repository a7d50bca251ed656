import io
import os
from unittest import mock

import pytest

from wandelt.diagnostics import (
    DEFAULT_TERMINAL_WIDTH,
    MAX_CAPTURED,
    MAX_MESSAGE_LENGTH,
    Diagnostics,
    Severity,
    terminal_width,
)
from wandelt.source_file import SourceFile
from wandelt.tokens import Span


def _file(content, name="a.wdt"):
    return SourceFile(content=content, name=name)


def test_format_plain_error_exact():
    diag = Diagnostics()
    text = diag.format_at_location(Span(4, 5), _file("int x = 5;"), "bad", Severity.ERROR, 80, False)
    assert text == "a.wdt:1:5: error: bad\n 1 | int x = 5;\n   |     ^\n"


def test_format_caret_width_matches_span():
    diag = Diagnostics()
    content = "fn void main() {}"
    text = diag.format_at_location(Span(3, 7), _file(content), "m", Severity.NOTE, 80, False)
    lines = text.splitlines()
    caret_line = lines[2]
    source_line = lines[1]
    caret_col = caret_line.index("^")
    assert source_line[caret_col : caret_col + 4] == content[3:7]
    assert caret_line.count("~") == 3


def test_format_expands_tabs_and_aligns_caret():
    diag = Diagnostics()
    text = diag.format_at_location(Span(1, 2), _file("\tx"), "m", Severity.WARNING, 80, False)
    lines = text.splitlines()
    assert "\t" not in text
    assert lines[1].index("x") == lines[2].index("^")
    assert lines[0].startswith("a.wdt:1:5: warning:")


def test_format_shows_previous_line_for_empty_line():
    diag = Diagnostics()
    text = diag.format_at_location(Span(4, 4), _file("abc\n\nxyz"), "m", Severity.ERROR, 80, False)
    lines = text.splitlines()
    assert lines[1] == " 1 | abc"
    assert lines[2] == " 2 | "
    assert lines[3].endswith("^")


def test_format_clips_long_lines():
    diag = Diagnostics()
    content = "a" * 150 + "X" + "a" * 49
    width = 60
    text = diag.format_at_location(Span(150, 151), _file(content), "m", Severity.ERROR, width, False)
    lines = text.splitlines()
    assert lines[1].count("...") == 2
    assert len(lines[1]) <= width
    assert lines[1].index("X") == lines[2].index("^")


def test_format_with_colors_uses_severity_color():
    diag = Diagnostics()
    file = _file("x;")
    error = diag.format_at_location(Span(0, 1), file, "m", Severity.ERROR, 80, True)
    warning = diag.format_at_location(Span(0, 1), file, "m", Severity.WARNING, 80, True)
    note = diag.format_at_location(Span(0, 1), file, "m", Severity.NOTE, 80, True)
    assert "\x1b[31m" in error
    assert "\x1b[33m" in warning
    assert "\x1b[34m" in note
    assert "\x1b[0m" in error


def test_reporting_counts_and_prints():
    out = io.StringIO()
    diag = Diagnostics(use_color=False, stream=out)
    file = _file("x;")
    diag.report_note(Span(0, 1), file, "a note")
    diag.report_warning(Span(0, 1), file, "a warning")
    diag.report_error(Span(0, 1), file, "an error")
    assert diag.error_count == 1
    assert diag.warning_count == 1
    assert diag.has_errors() and diag.has_warnings()
    printed = out.getvalue()
    assert "note: a note" in printed
    assert "warning: a warning" in printed
    assert "error: an error" in printed


def test_reset_clears_counts():
    diag = Diagnostics(stream=io.StringIO())
    diag.report_error(Span(0, 1), _file("x"), "e")
    diag.reset()
    assert not diag.has_errors()
    assert diag.error_count == 0


def test_capture_records_entries_and_resets():
    out = io.StringIO()
    diag = Diagnostics(stream=out)
    file = _file("ab\ncd")
    with diag.capture():
        diag.report_error(Span(4, 5), file, "oops")
        assert diag.error_count == 1
        assert diag.captured_count == 1
    entry = diag.captured(0)
    assert entry.severity is Severity.ERROR
    assert (entry.line, entry.col) == (2, 2)
    assert entry.message == "oops"
    assert diag.error_count == 0
    assert diag.capture_enabled is False
    assert out.getvalue() == ""


def test_capture_is_bounded_but_counts_all():
    diag = Diagnostics()
    file = _file("x")
    with diag.capture():
        for _ in range(MAX_CAPTURED + 6):
            diag.report_warning(Span(0, 1), file, "w")
        assert diag.captured_count == MAX_CAPTURED
        assert diag.warning_count == MAX_CAPTURED + 6


def test_captured_message_is_truncated():
    diag = Diagnostics()
    with diag.capture():
        diag.report_error(Span(0, 1), _file("x"), "m" * (MAX_MESSAGE_LENGTH + 40))
    assert len(diag.captured(0).message) == MAX_MESSAGE_LENGTH


def test_captured_out_of_range():
    diag = Diagnostics()
    with pytest.raises(IndexError):
        diag.captured(0)


def test_enable_capture_clears_previous_entries():
    diag = Diagnostics()
    diag.enable_capture()
    diag.report_error(Span(0, 1), _file("x"), "e")
    diag.enable_capture()
    assert diag.captured_count == 0


def test_terminal_width_falls_back():
    with mock.patch("os.get_terminal_size", side_effect=OSError):
        assert terminal_width() == DEFAULT_TERMINAL_WIDTH


def test_terminal_width_uses_reported_columns():
    with mock.patch("os.get_terminal_size", return_value=os.terminal_size((132, 40))):
        assert terminal_width() == 132