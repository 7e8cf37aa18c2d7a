"""
Read-only views over a timetable: the plan listing and the grade point average.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Optional

from studyplan.config import GRADE_POINTS
from studyplan.model import Course, Timetable


def _course_line(c: Course) -> str:
    bits = [c.code, c.name, f"{c.credits} MCs"]
    if c.grade:
        bits.append(f"grade {c.grade}")
    return " | ".join(bits)


def format_plan(timetable: Timetable, year: Optional[int] = None, term: Optional[int] = None) -> str:
    """
    List courses grouped by year and term.

    Groups are sorted; within a group courses keep insertion order.
    """
    courses = timetable.courses(year=year, term=term)
    if not courses:
        return "No courses found."

    groups: dict[tuple[int, int], list[Course]] = defaultdict(list)
    for c in courses:
        groups[(c.year, c.term)].append(c)

    lines: list[str] = []
    current_year = None
    for (y, t) in sorted(groups):
        if y != current_year:
            if lines:
                lines.append("")
            lines.append(f"Year {y}")
            current_year = y
        lines.append(f"  Term {t}")
        for c in groups[(y, t)]:
            lines.append(f"    {_course_line(c)}")

    return "\n".join(lines)


def grade_point_average(
    timetable: Timetable, year: Optional[int] = None, term: Optional[int] = None
) -> Optional[float]:
    """
    Credit-weighted mean of grade points over the matching graded courses.

    Ungraded courses and grades without a point value (S/U etc.) are left
    out of both sums. Returns None if nothing qualifies.
    """
    total_points = 0.0
    total_credits = 0
    for c in timetable.courses(year=year, term=term):
        if c.grade is None or c.grade not in GRADE_POINTS:
            continue
        total_points += GRADE_POINTS[c.grade] * c.credits
        total_credits += c.credits

    if total_credits == 0:
        return None
    return total_points / total_credits


def format_gpa(timetable: Timetable, year: Optional[int] = None, term: Optional[int] = None) -> str:
    gpa = grade_point_average(timetable, year=year, term=term)
    if gpa is None:
        return "No graded courses found."

    scope = ""
    if year is not None:
        scope = f" for year {year}"
        if term is not None:
            scope += f" term {term}"
    return f"Your GPA{scope} is {gpa:.2f}"
