"""Collecting, counting and rendering compiler diagnostics."""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, TextIO

from wandelt.source_file import SourceFile, TAB_WIDTH, advance_display_offset
from wandelt.tokens import Span

MAX_CAPTURED = 64
MAX_MESSAGE_LENGTH = 255
DEFAULT_TERMINAL_WIDTH = 80

_COLOR_RED = "\x1b[31m"
_COLOR_YELLOW = "\x1b[33m"
_COLOR_BLUE = "\x1b[34m"
_COLOR_WHITE = "\x1b[37m"
_COLOR_BOLD = "\x1b[1m"
_COLOR_RESET = "\x1b[0m"

# Minimum number of columns left for source text when clipping a line.
_MIN_AVAILABLE = 20
_MIN_MARGIN = 8
_ELLIPSIS = "..."


class Severity(Enum):
    NOTE = "note"
    WARNING = "warning"
    ERROR = "error"


_SEVERITY_COLORS = {
    Severity.NOTE: _COLOR_BLUE,
    Severity.WARNING: _COLOR_YELLOW,
    Severity.ERROR: _COLOR_RED,
}


@dataclass(frozen=True)
class Entry:
    """A diagnostic recorded while capture is enabled."""

    severity: Severity
    line: int
    col: int
    message: str


def terminal_width() -> int:
    """Return the width of the terminal on standard output, or 80."""
    try:
        columns = os.get_terminal_size(sys.stdout.fileno()).columns
    except (OSError, ValueError, AttributeError):
        return DEFAULT_TERMINAL_WIDTH
    return columns if columns > 0 else DEFAULT_TERMINAL_WIDTH


def _display_width(text: str) -> int:
    width = 0
    for char in text:
        width = advance_display_offset(width, char)
    return width


def _expand_range(text: str, display_start: float, display_end: float) -> str:
    """Render ``text`` between two display columns, expanding tabs to spaces."""
    parts = []
    width = 0
    for char in text:
        next_width = advance_display_offset(width, char)
        if next_width <= display_start:
            width = next_width
            continue
        if width >= display_end:
            break
        if char == "\t":
            pad_start = max(width, display_start)
            pad_end = min(next_width, display_end)
            parts.append(" " * int(pad_end - pad_start))
        else:
            parts.append(char)
        width = next_width
    return "".join(parts)


class Diagnostics:
    """Counts diagnostics and either prints them or captures them."""

    def __init__(self, use_color: bool = True, stream: Optional[TextIO] = None) -> None:
        self.use_color = use_color
        self.stream = stream
        self.error_count = 0
        self.warning_count = 0
        self.capture_enabled = False
        self._captured: list[Entry] = []

    @property
    def captured_count(self) -> int:
        return len(self._captured)

    def report_note(self, span: Span, file: SourceFile, message: str) -> None:
        self._emit(Severity.NOTE, span, file, message)

    def report_warning(self, span: Span, file: SourceFile, message: str) -> None:
        self._emit(Severity.WARNING, span, file, message)

    def report_error(self, span: Span, file: SourceFile, message: str) -> None:
        self._emit(Severity.ERROR, span, file, message)

    def has_errors(self) -> bool:
        return self.error_count > 0

    def has_warnings(self) -> bool:
        return self.warning_count > 0

    def reset(self) -> None:
        """Clear the error and warning counts."""
        self.error_count = 0
        self.warning_count = 0

    def enable_capture(self) -> None:
        """Start recording diagnostics instead of printing them."""
        self.capture_enabled = True
        self._captured.clear()

    def disable_capture(self) -> None:
        self.capture_enabled = False

    def captured(self, index: int) -> Entry:
        """Return a captured entry; IndexError when out of range."""
        if not 0 <= index < len(self._captured):
            raise IndexError(f"captured diagnostic index {index} out of range")
        return self._captured[index]

    @contextmanager
    def capture(self) -> Iterator[Diagnostics]:
        """Capture diagnostics for the duration of a ``with`` block."""
        self.reset()
        self.enable_capture()
        try:
            yield self
        finally:
            self.disable_capture()
            self.reset()

    def _emit(self, severity: Severity, span: Span, file: SourceFile, message: str) -> None:
        if severity is Severity.WARNING:
            self.warning_count += 1
        elif severity is Severity.ERROR:
            self.error_count += 1

        if self.capture_enabled:
            if len(self._captured) < MAX_CAPTURED:
                loc = file.resolve_location(span.begin)
                self._captured.append(
                    Entry(severity, loc.row, loc.col, message[:MAX_MESSAGE_LENGTH])
                )
            return

        formatted = self.format_at_location(
            span, file, message, severity, terminal_width(), self.use_color
        )
        stream = self.stream if self.stream is not None else sys.stdout
        stream.write(formatted)

    def format_at_location(
        self,
        span: Span,
        file: SourceFile,
        message: str,
        severity: Severity,
        term_width: int,
        use_color: bool,
    ) -> str:
        """Render a diagnostic with its source line and a caret under the span."""
        color = _SEVERITY_COLORS[severity] if use_color else ""
        bold = _COLOR_BOLD if use_color else ""
        white = _COLOR_WHITE if use_color else ""
        reset = _COLOR_RESET if use_color else ""

        loc = file.resolve_location(span.begin)
        src = file.content
        begin = min(span.begin, len(src))

        line_start = src.rfind("\n", 0, begin) + 1
        line_end = src.find("\n", begin)
        if line_end == -1:
            line_end = len(src)

        out = [
            f"{bold}{white}{file.name}:{loc.row}:{loc.col}: "
            f"{color}{severity.value}:{reset} {bold}{message}{reset}\n"
        ]

        gutter_width = len(str(loc.row))

        if line_start == line_end and line_start > 0:
            prev_end = line_start - 1
            prev_start = src.rfind("\n", 0, prev_end) + 1
            prev_text = _expand_range(src[prev_start:prev_end], 0, float("inf"))
            out.append(" " + " " * (gutter_width - 1) + f"{loc.row - 1} | {prev_text}\n")

        line_text = src[line_start:line_end]
        col_offset = _display_width(src[line_start:begin])
        span_end = min(span.end, line_end)
        span_len = _display_width(src[begin:span_end]) or 1

        line_len = _display_width(line_text)
        available = max(term_width - (gutter_width + 4), _MIN_AVAILABLE)

        view_start, view_end = 0, line_len
        clip_left = clip_right = False

        if line_len > available:
            margin = max(int((available - span_len) / 2), _MIN_MARGIN)
            view_start = max(col_offset - margin, 0)
            view_end = view_start + available
            if view_start > 0:
                view_start += len(_ELLIPSIS)
                clip_left = True
            if view_end < line_len:
                view_end -= len(_ELLIPSIS)
                clip_right = True
            view_end = min(view_end, line_len)

        shown = _expand_range(line_text, view_start, view_end)
        out.append(
            f" {loc.row} | "
            + (_ELLIPSIS if clip_left else "")
            + shown
            + (_ELLIPSIS if clip_right else "")
            + "\n"
        )

        display_offset = col_offset - view_start
        view_width = view_end - view_start
        tildes = max(0, min(span_len - 1, view_width - display_offset - 1))
        out.append(
            " "
            + " " * gutter_width
            + " | "
            + (" " * len(_ELLIPSIS) if clip_left else "")
            + color
            + bold
            + " " * display_offset
            + "^"
            + "~" * tildes
            + reset
            + "\n"
        )

        return "".join(out)


__all__ = [
    "DEFAULT_TERMINAL_WIDTH",
    "Diagnostics",
    "Entry",
    "MAX_CAPTURED",
    "MAX_MESSAGE_LENGTH",
    "Severity",
    "TAB_WIDTH",
    "terminal_width",
]