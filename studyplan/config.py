"""
Configuration constants.

Everything that describes the on-disk format or the academic calendar lives
here, so the parsing, storage and report modules share one definition.
"""

from __future__ import annotations

from pathlib import Path


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

PACKAGE_DIR = Path(__file__).resolve().parent

# Templates shipped with the package (course list + recommended plans)
BUNDLED_DATA_DIR = PACKAGE_DIR / "data"

# Working directory for user files, overridable with --data-dir
DEFAULT_DATA_DIR = Path("data")

COURSE_LIST_FILENAME = "CourseList.csv"
FILE_SUFFIX = ".csv"

# Any timetable name containing this marker refers to the user's own plan
USER_TIMETABLE_MARKER = "myTimetable"


# ---------------------------------------------------------------------------
# File format
# ---------------------------------------------------------------------------

DELIMITER = ","

# code,name,credits,year,term[,grade]
PLAN_FIELDS = 5
USER_FIELDS = 6
# code,name,credits
COURSE_LIST_FIELDS = 3


# ---------------------------------------------------------------------------
# Academic calendar
# ---------------------------------------------------------------------------

DEFAULT_CREDITS = 4

MIN_YEAR, MAX_YEAR = 1, 6
MIN_TERM, MAX_TERM = 1, 4


# ---------------------------------------------------------------------------
# Grades
# ---------------------------------------------------------------------------

# 5-point scale. Letters missing here (S, U, CS, CU, IP, ...) are kept in the
# timetable but do not count towards the grade point average.
GRADE_POINTS: dict[str, float] = {
    "A+": 5.0,
    "A": 5.0,
    "A-": 4.5,
    "B+": 4.0,
    "B": 3.5,
    "B-": 3.0,
    "C+": 2.5,
    "C": 2.0,
    "D+": 1.5,
    "D": 1.0,
    "F": 0.0,
}
