"""
Unit tests for the Course / Timetable model.

Timetable contract:
- course codes are unique (upper-cased)
- adding an existing code fails and leaves the first entry untouched
- "not found" is reported as False / None, never raised
"""

import unittest

from studyplan.model import Course, DuplicateCourseError, Timetable


def _timetable(*courses: Course) -> Timetable:
    t = Timetable()
    for c in courses:
        t.add_course(c)
    return t


class TestCourse(unittest.TestCase):
    def test_code_and_grade_are_normalized(self) -> None:
        c = Course(code=" cs2113 ", name="Software Engineering", grade="b+")
        self.assertEqual(c.code, "CS2113")
        self.assertEqual(c.grade, "B+")
        self.assertEqual(c.credits, 4)

    def test_blank_grade_means_ungraded(self) -> None:
        self.assertIsNone(Course(code="CS1010", name="Programming", grade="  ").grade)


class TestTimetable(unittest.TestCase):
    def test_duplicate_code_is_rejected(self) -> None:
        t = _timetable(Course("CS1010", "Programming Methodology", 4, 1, 1))

        with self.assertRaises(DuplicateCourseError):
            t.add_course(Course("cs1010", "Something Else", 2, 3, 2))

        self.assertEqual(len(t), 1)
        kept = t.get("CS1010")
        assert kept is not None
        self.assertEqual(kept.name, "Programming Methodology")
        self.assertEqual((kept.year, kept.term), (1, 1))

    def test_remove_course_reports_outcome(self) -> None:
        t = _timetable(Course("CS1010", "Programming", 4, 1, 1))
        self.assertTrue(t.remove_course("cs1010"))
        self.assertFalse(t.remove_course("CS1010"))
        self.assertEqual(len(t), 0)

    def test_grades(self) -> None:
        t = _timetable(Course("CS1010", "Programming", 4, 1, 1))

        self.assertFalse(t.add_grade("CS9999", "A"))
        self.assertFalse(t.remove_grade("CS1010"))
        self.assertIsNone(t.search_grade("CS1010"))

        self.assertTrue(t.add_grade("CS1010", "a-"))
        self.assertEqual(t.search_grade("CS1010"), "A-")

        # overwrite
        self.assertTrue(t.add_grade("CS1010", "B"))
        self.assertEqual(t.search_grade("cs1010"), "B")

        self.assertTrue(t.remove_grade("CS1010"))
        self.assertIsNone(t.search_grade("CS1010"))
        self.assertIsNone(t.search_grade("CS9999"))

    def test_iteration_keeps_insertion_order(self) -> None:
        t = _timetable(
            Course("CS2113", "SE", 4, 2, 1),
            Course("CS1010", "Programming", 4, 1, 1),
            Course("MA1511", "Calculus", 2, 1, 1),
        )
        self.assertEqual([c.code for c in t], ["CS2113", "CS1010", "MA1511"])

    def test_courses_filter(self) -> None:
        t = _timetable(
            Course("A1", "a", 4, 1, 1),
            Course("A2", "b", 4, 1, 2),
            Course("A3", "c", 4, 2, 1),
        )
        self.assertEqual([c.code for c in t.courses(year=1)], ["A1", "A2"])
        self.assertEqual([c.code for c in t.courses(year=1, term=2)], ["A2"])
        self.assertEqual([c.code for c in t.courses(term=1)], ["A1", "A3"])
        self.assertEqual(t.courses(year=5), [])

    def test_replace_with(self) -> None:
        t = _timetable(Course("OLD1", "old", 4, 1, 1))
        other = _timetable(Course("NEW1", "new", 4, 1, 1), Course("NEW2", "new", 4, 1, 2))

        t.replace_with(other)

        self.assertNotIn("OLD1", t)
        self.assertIn("NEW1", t)
        self.assertEqual(len(t), 2)


if __name__ == "__main__":
    unittest.main()
