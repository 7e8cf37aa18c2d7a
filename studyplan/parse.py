"""
Positional flag parsing.

Command arguments carry short markers directly followed by a value:

    CS2113y/1t/2m/4     ->  head="CS2113", year=1, term=2, credits=4
    y/2 t/1             ->  head="",       year=2, term=1

Important rules:
- markers are case-sensitive: y/ (year), t/ (term), m/ (credits)
- each caller passes the order in which markers are allowed to appear;
  a marker out of that order, or repeated, makes the whole argument invalid
- values are trimmed before integer conversion
- missing markers are simply None; the caller decides what is required
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Sequence


YEAR = "y/"
TERM = "t/"
CREDITS = "m/"

MARKERS = (YEAR, TERM, CREDITS)

_MARKER_RE = re.compile("|".join(re.escape(m) for m in MARKERS))

_FIELD_BY_MARKER = {YEAR: "year", TERM: "term", CREDITS: "credits"}


@dataclass
class FlagArgs:
    """
    Structured result of parse_flags().
    """

    head: str
    year: Optional[int] = None
    term: Optional[int] = None
    credits: Optional[int] = None


def _split_segments(text: str) -> tuple[str, list[tuple[str, str]]]:
    """
    Split text into the part before the first marker and (marker, value) pairs.
    """
    matches = list(_MARKER_RE.finditer(text))
    if not matches:
        return text, []

    head = text[: matches[0].start()]
    segments: list[tuple[str, str]] = []
    for i, m in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        segments.append((m.group(0), text[m.end() : end]))
    return head, segments


def _to_int(value: str) -> Optional[int]:
    value = value.strip()
    try:
        return int(value)
    except ValueError:
        return None


def parse_flags(text: str, order: Sequence[str]) -> Optional[FlagArgs]:
    """
    Parse text containing markers that must appear in the given order.

    Returns None if a marker is out of order, repeated, not allowed,
    or carries a non-integer value.
    """
    head, segments = _split_segments(text)
    result = FlagArgs(head=head.strip())

    # position in `order` of the last marker seen; next marker must come later
    last_pos = -1
    for marker, value in segments:
        if marker not in order:
            return None
        pos = list(order).index(marker)
        if pos <= last_pos:
            return None
        last_pos = pos

        number = _to_int(value)
        if number is None:
            return None
        setattr(result, _FIELD_BY_MARKER[marker], number)

    return result
