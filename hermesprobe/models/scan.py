"""
Pattern scanning models.

Describe the text patterns searched for in decompiled sources and the sections
produced by a scan.
"""

from __future__ import annotations

import re
from enum import Enum

from pydantic import BaseModel, Field


class ScanMode(str, Enum):
    """What a category reports for each hit."""

    FILES = "files"
    LINES = "lines"


class PatternCategory(BaseModel):
    """A named group of regular expressions searched in decompiled output."""

    name: str = Field(description="Section title, e.g. API_FILES")
    group: str = Field(default="native", description="Selector used to filter categories")
    patterns: tuple[str, ...] = Field(min_length=1, description="Regexes, any may match")
    require: str | None = Field(default=None, description="Regex a hit line must also match")
    exclude: str | None = Field(default=None, description="Regex that discards a hit line")
    limit: int = Field(default=30, ge=1, description="Maximum hits reported")
    mode: ScanMode = Field(default=ScanMode.FILES)
    anchor: str | None = Field(
        default=None, description="Regex whose first hit restricts the search to the lines after it"
    )
    window: int = Field(default=1000, ge=0, description="Lines searched after the anchor line")

    model_config = {"frozen": True}

    def compile(self) -> re.Pattern[str]:
        """Join the patterns into a single alternation."""
        return re.compile("|".join(f"(?:{p})" for p in self.patterns))

    def accepts(self, line: str, compiled: re.Pattern[str] | None = None) -> bool:
        """Check a single line against the patterns and the require/exclude filters."""
        pattern = compiled or self.compile()
        if not pattern.search(line):
            return False
        if self.require and not re.search(self.require, line):
            return False
        if self.exclude and re.search(self.exclude, line):
            return False
        return True

    def in_window(self, lineno: int, anchor_line: int | None) -> bool:
        """True when no anchor was found or lineno falls inside the anchored window."""
        if anchor_line is None:
            return True
        return anchor_line <= lineno <= anchor_line + self.window


class ScanSection(BaseModel):
    """Hits for one category."""

    name: str
    matches: list[str] = Field(default_factory=list)
    truncated: bool = Field(default=False, description="More hits existed than the limit")

    @property
    def is_empty(self) -> bool:
        return not self.matches

    def render(self) -> list[str]:
        """Render as report lines with a section header."""
        lines = [f"--- {self.name} ---"]
        if self.is_empty:
            lines.append("(none)")
        else:
            lines.extend(self.matches)
        return lines
