"""
Persistent storage for timetables.

This module manages the files inside the data directory:

    data/myTimetable<index>.csv   the user's own plans (one per index)
    data/<MAJOR>.csv              recommended plans, copied from the package
    data/CourseList.csv           shared course list (see catalog.py)

Design rationale:
- every save rewrites the whole file, there is no partial write path
- loading is line-by-line: a corrupted line is skipped with a warning,
  the rest of the file still loads
- which user file is "active" is held by a Session object that is passed
  around explicitly instead of living in a global
"""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from studyplan.config import (
    BUNDLED_DATA_DIR,
    DEFAULT_DATA_DIR,
    DELIMITER,
    FILE_SUFFIX,
    PLAN_FIELDS,
    USER_FIELDS,
    USER_TIMETABLE_MARKER,
)
from studyplan.model import Course, DuplicateCourseError, Timetable

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """
    Holds the data directory and the index of the active user timetable.
    """

    data_dir: Path = DEFAULT_DATA_DIR
    timetable_index: int = 0

    def __post_init__(self) -> None:
        self.data_dir = Path(self.data_dir)

    @property
    def user_timetable_name(self) -> str:
        return f"{USER_TIMETABLE_MARKER}{self.timetable_index}"

    @property
    def user_timetable_path(self) -> Path:
        return self.data_dir / f"{self.user_timetable_name}{FILE_SUFFIX}"

    def plan_path(self, name: str) -> Path:
        return self.data_dir / f"{name}{FILE_SUFFIX}"


def is_user_timetable(name: str) -> bool:
    return USER_TIMETABLE_MARKER in name


def copy_bundled(filename: str, target: Path) -> bool:
    """
    Copy a template shipped with the package into the data directory.

    Returns False (and logs a warning) if the template does not exist
    or cannot be copied.
    """
    source = BUNDLED_DATA_DIR / filename
    if not source.is_file():
        logger.warning("No bundled template named %s", filename)
        return False
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)
    except OSError as exc:
        logger.warning("Could not copy %s to %s: %s", filename, target, exc)
        return False
    return True


# ---------------------------------------------------------------------------
# Line codec
# ---------------------------------------------------------------------------


def parse_course_line(line: str, with_grade: bool) -> Optional[Course]:
    """
    Parse one line into a Course.

    Expected formats:
        code,name,credits,year,term          (with_grade=False)
        code,name,credits,year,term,grade    (with_grade=True, grade may be empty)

    Returns None for a wrong field count or a non-numeric numeric field.
    """
    parts = line.rstrip("\r\n").split(DELIMITER)
    expected = USER_FIELDS if with_grade else PLAN_FIELDS
    if len(parts) != expected:
        return None

    code, name = parts[0].strip(), parts[1].strip()
    if not code:
        return None

    try:
        credits = int(parts[2].strip())
        year = int(parts[3].strip())
        term = int(parts[4].strip())
    except ValueError:
        return None

    grade = parts[5].strip() if with_grade else ""
    return Course(code=code, name=name, credits=credits, year=year, term=term, grade=grade or None)


def format_course_line(course: Course, with_grade: bool) -> str:
    fields = [course.code, course.name, str(course.credits), str(course.year), str(course.term)]
    if with_grade:
        fields.append(course.grade or "")
    return DELIMITER.join(fields)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def _ensure_file(name: str, path: Path) -> bool:
    """
    Make sure the file behind a timetable name exists.

    User timetables start out empty; recommended plans are copied from
    the bundled templates.
    """
    if path.exists():
        return True

    if is_user_timetable(name):
        logger.warning("%s not found, creating an empty timetable", path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.touch()
        except OSError as exc:
            logger.warning("Could not create %s: %s", path, exc)
            return False
        return True

    return copy_bundled(f"{name}{FILE_SUFFIX}", path)


def load_timetable(name: str, session: Session) -> Timetable:
    """
    Load a timetable by name.

    Names containing "myTimetable" resolve to the active user timetable of
    the session; anything else is a recommended plan such as "CEG".

    Never raises for I/O problems: a missing or unreadable file yields an
    empty timetable, and corrupted lines are skipped with a warning.
    """
    timetable = Timetable()
    with_grade = is_user_timetable(name)
    path = session.user_timetable_path if with_grade else session.plan_path(name)

    if not _ensure_file(name, path):
        return timetable

    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Failed to read %s: %s", path, exc)
        return timetable

    for line_number, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        course = parse_course_line(line, with_grade)
        if course is None:
            logger.warning("Corrupted data at line %d of %s, skipping", line_number, path)
            continue
        try:
            timetable.add_course(course)
        except DuplicateCourseError:
            logger.warning("Duplicate course %s at line %d of %s, skipping", course.code, line_number, path)

    return timetable


def save_timetable(
    timetable: Timetable,
    session: Session,
    path: str | Path | None = None,
    with_grade: bool = True,
) -> bool:
    """
    Rewrite a timetable file in full.

    Defaults to the session's active user timetable. Returns False (and logs
    a warning) if the file cannot be written.
    """
    target = Path(path) if path is not None else session.user_timetable_path
    text = "".join(format_course_line(c, with_grade) + "\n" for c in timetable)

    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
    except OSError as exc:
        logger.warning("Failed writing timetable to %s: %s", target, exc)
        return False
    return True
