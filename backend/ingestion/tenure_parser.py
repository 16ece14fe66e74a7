"""
Parse pasted tenure CSV into TenureRecords. One record per non-blank line:
  "<role>","<start YYYY-MM-DD>","<end YYYY-MM-DD>"
Quotes are optional; whitespace around commas is tolerated.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field

from scoring.errors import InvalidRangeError, ParseError
from scoring.roles import Role, role_from_label
from scoring.timeline import month_index

_LINE_PATTERN = re.compile(
    r'"?(.*?)"?\s*,\s*"?(\d{4}-\d{2}-\d{2})"?\s*,\s*"?(\d{4}-\d{2}-\d{2})"?'
)


@dataclass(frozen=True)
class TenureRecord:
    role: Role
    start: str
    end: str

    # Derived once from start/end
    start_index: int = field(init=False, repr=False, compare=False)
    end_index: int = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_index", month_index(self.start))
        object.__setattr__(self, "end_index", month_index(self.end))

    def covers(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index


def split_record_lines(text: str) -> list[str]:
    """Stripped non-blank lines (handles \\r\\n)."""
    return [ln.strip() for ln in (text or "").splitlines() if ln.strip()]


def parse_tenure_line(line: str, line_number: int) -> TenureRecord:
    """
    Parse one record. line_number is 1-based among non-blank lines and is only
    used for the error message.
    """
    m = _LINE_PATTERN.match(line)
    if not m:
        raise ParseError(line_number, line)
    label, start, end = m.group(1), m.group(2), m.group(3)
    role = role_from_label(label)
    # Plain string order; equals date order only for zero-padded YYYY-MM-DD
    if end < start:
        raise InvalidRangeError(label, start, end)
    return TenureRecord(role, start, end)


def parse_tenure_csv(text: str) -> list[TenureRecord]:
    """Parse all records in input order. Raises on the first bad line; never returns a partial list."""
    return [parse_tenure_line(line, i + 1) for i, line in enumerate(split_record_lines(text))]
