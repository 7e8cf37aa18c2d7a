"""
Shared course list (code -> name, credits).

The list is a cache of course metadata shared by all timetables:

    data/CourseList.csv       code,name,credits

Lookups work cache-aside: a hit returns the stored entry, a miss asks a
"name resolver" for the course name and appends the new entry, so the same
code never has to be typed in twice. The resolver is injectable so tests can
script the answers instead of reading from the console.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console

from studyplan.config import COURSE_LIST_FIELDS, COURSE_LIST_FILENAME, DELIMITER
from studyplan.storage import copy_bundled

logger = logging.getLogger(__name__)

NameResolver = Callable[[str], str]


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    credits: int


def console_name_resolver(console: Optional[Console] = None) -> NameResolver:
    """
    Build a resolver that asks the user for the course name on the console.
    """
    con = console or Console()

    def resolve(code: str) -> str:
        return con.input(f"{code} is not in the course list yet. Please enter the course name: ")

    return resolve


def _parse_entry(line: str) -> Optional[tuple[str, CatalogEntry]]:
    parts = line.rstrip("\r\n").split(DELIMITER)
    if len(parts) != COURSE_LIST_FIELDS:
        return None
    try:
        credits = int(parts[2].strip())
    except ValueError:
        return None
    return parts[0].strip().upper(), CatalogEntry(name=parts[1].strip(), credits=credits)


class CourseCatalog:
    """
    Lookup with interactive fallback creation over CourseList.csv.
    """

    def __init__(self, data_dir: str | Path, name_resolver: Optional[NameResolver] = None) -> None:
        self.path = Path(data_dir) / COURSE_LIST_FILENAME
        self._resolve_name = name_resolver or console_name_resolver()

    def _ensure_file(self) -> None:
        if not self.path.exists():
            copy_bundled(COURSE_LIST_FILENAME, self.path)

    def lookup(self, code: str) -> Optional[CatalogEntry]:
        """
        Scan the course list for a code. Returns None on a miss or if the
        list cannot be read.
        """
        self._ensure_file()
        code = code.strip().upper()
        try:
            with self.path.open(encoding="utf-8") as f:
                for line in f:
                    parsed = _parse_entry(line)
                    if parsed is None:
                        continue
                    entry_code, entry = parsed
                    if entry_code == code:
                        return entry
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Failed searching the course list %s: %s", self.path, exc)
        return None

    def resolve(self, code: str, fallback_credits: int) -> CatalogEntry:
        """
        Return (name, credits) for a code.

        On a hit, fallback_credits is ignored. On a miss the name is asked
        for, the entry is created with fallback_credits and appended to the
        shared list.
        """
        code = code.strip().upper()
        entry = self.lookup(code)
        if entry is not None:
            return entry

        logger.info("%s not in course list, asking for its name", code)
        entry = CatalogEntry(name=self._ask_name(code), credits=fallback_credits)
        self._append(code, entry)
        return entry

    def _ask_name(self, code: str) -> str:
        while True:
            name = self._resolve_name(code).strip()
            if DELIMITER not in name:
                return name
            logger.warning("Course name must not contain %r, please try again", DELIMITER)

    def _append(self, code: str, entry: CatalogEntry) -> None:
        line = DELIMITER.join([code, entry.name, str(entry.credits)]) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            # keep records on separate lines if the file lacks a final newline
            if self.path.exists() and self.path.stat().st_size > 0:
                with self.path.open("rb") as f:
                    f.seek(-1, 2)
                    if f.read(1) != b"\n":
                        line = "\n" + line
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)
        except OSError as exc:
            logger.warning("Failed writing %s to the course list: %s", code, exc)
