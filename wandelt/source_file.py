"""Source files and mapping offsets to display rows and columns."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

TAB_WIDTH = 4
IN_MEMORY_PATH = "<in-memory>"


def advance_display_offset(offset: int, char: str) -> int:
    """Return the display column after ``char`` when starting at ``offset``."""
    if char == "\t":
        return offset + (TAB_WIDTH - offset % TAB_WIDTH)
    return offset + 1


@dataclass(frozen=True)
class FileLocation:
    """A one-based row and display column."""

    row: int
    col: int


@dataclass(frozen=True)
class SourceFile:
    """The text of a source file with its name and path."""

    content: str
    name: str
    path: str = IN_MEMORY_PATH

    @classmethod
    def load(cls, path: str | os.PathLike[str]) -> SourceFile:
        """Read a file from disk, keeping its line endings as they are."""
        file_path = Path(path)
        with open(file_path, encoding="utf-8", newline="") as handle:
            content = handle.read()
        return cls(content=content, name=file_path.name, path=str(path))

    def resolve_location(self, offset: int) -> FileLocation:
        """Map an offset to a row and a tab-expanded column."""
        if offset < 0:
            raise ValueError(f"offset must not be negative: {offset}")
        text = self.content
        limit = min(offset, len(text))
        row, col = 1, 1
        i = 0
        while i < limit:
            char = text[i]
            if char == "\r":
                row += 1
                col = 1
                if i + 1 < limit and text[i + 1] == "\n":
                    i += 1
            elif char == "\n":
                row += 1
                col = 1
            else:
                col = advance_display_offset(col - 1, char) + 1
            i += 1
        return FileLocation(row, col)

    def slice(self, offset: int, length: int) -> str:
        """Return ``length`` characters of the content starting at ``offset``."""
        if offset < 0 or length < 0 or offset + length > len(self.content):
            raise IndexError("requested content part is out of bounds of the file content")
        return self.content[offset : offset + length]

    def describe(self) -> str:
        """Return a short human-readable summary of the file."""
        size = len(self.content.encode("utf-8"))
        return (
            f"File '{self.name}' info:\n"
            f"- Path: {self.path}\n"
            f"- Size: {size} bytes\n"
            f"- Content:\n{self.content}\n"
        )


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Return whether something exists at ``path``."""
    return os.path.exists(path)