"""
Central data model definitions used across the project.

This module defines the canonical structure of Course and Timetable objects so that:
- storage, commands and reports share the same field names
- the "one entry per course code" rule is enforced in exactly one place
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from studyplan.config import DEFAULT_CREDITS


class DuplicateCourseError(ValueError):
    """Raised when a course code is already present in a timetable."""

    def __init__(self, code: str) -> None:
        super().__init__(f"{code} is already in the timetable.")
        self.code = code


@dataclass
class Course:
    """
    Represents one course scheduled in a given year and term.

    The grade stays None until the user explicitly assigns one.
    """

    code: str
    name: str
    credits: int = DEFAULT_CREDITS
    year: int = 1
    term: int = 1
    grade: Optional[str] = None

    def __post_init__(self) -> None:
        self.code = self.code.strip().upper()
        if self.grade is not None:
            self.grade = self.grade.strip().upper() or None


class Timetable:
    """
    A set of courses keyed by course code.

    Iteration follows insertion order, which is also the order used
    when the timetable is written back to disk.
    """

    def __init__(self) -> None:
        self._courses: dict[str, Course] = {}

    def __len__(self) -> int:
        return len(self._courses)

    def __iter__(self) -> Iterator[Course]:
        return iter(list(self._courses.values()))

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._courses

    def get(self, code: str) -> Optional[Course]:
        return self._courses.get(code.strip().upper())

    def courses(self, year: Optional[int] = None, term: Optional[int] = None) -> list[Course]:
        """
        Return courses matching the optional year/term filter.
        """
        out: list[Course] = []
        for c in self._courses.values():
            if year is not None and c.year != year:
                continue
            if term is not None and c.term != term:
                continue
            out.append(c)
        return out

    def add_course(self, course: Course) -> None:
        """
        Insert a course. Raises DuplicateCourseError if the code already exists;
        the existing entry is left untouched in that case.
        """
        if course.code in self._courses:
            raise DuplicateCourseError(course.code)
        self._courses[course.code] = course

    def remove_course(self, code: str) -> bool:
        return self._courses.pop(code.strip().upper(), None) is not None

    def add_grade(self, code: str, grade: str) -> bool:
        """
        Set (or overwrite) the grade of an existing course.
        Returns False if the course is not in the timetable.
        """
        course = self.get(code)
        if course is None:
            return False
        course.grade = grade.strip().upper()
        return True

    def remove_grade(self, code: str) -> bool:
        """
        Clear the grade of a course. Returns False if the course is absent
        or has no grade yet.
        """
        course = self.get(code)
        if course is None or course.grade is None:
            return False
        course.grade = None
        return True

    def search_grade(self, code: str) -> Optional[str]:
        course = self.get(code)
        return course.grade if course is not None else None

    def replace_with(self, other: Timetable) -> None:
        """
        Drop all current courses and copy in the courses of another timetable.
        """
        self._courses = {c.code: c for c in other}
