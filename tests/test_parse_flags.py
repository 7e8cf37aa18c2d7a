"""
Unit tests for the positional flag parser (y/ t/ m/ markers).
"""

import unittest

from studyplan.parse import CREDITS, TERM, YEAR, parse_flags


class TestParseFlags(unittest.TestCase):
    def test_compact_argument(self) -> None:
        flags = parse_flags("CS2113y/1t/2m/6", (YEAR, TERM, CREDITS))

        self.assertIsNotNone(flags)
        assert flags is not None

        self.assertEqual(flags.head, "CS2113")
        self.assertEqual(flags.year, 1)
        self.assertEqual(flags.term, 2)
        self.assertEqual(flags.credits, 6)

    def test_spaced_filters_without_head(self) -> None:
        flags = parse_flags("y/2 t/1", (YEAR, TERM))

        self.assertIsNotNone(flags)
        assert flags is not None

        self.assertEqual(flags.head, "")
        self.assertEqual((flags.year, flags.term), (2, 1))
        self.assertIsNone(flags.credits)

    def test_values_are_trimmed(self) -> None:
        flags = parse_flags("y/ 3 ", (YEAR, TERM))
        assert flags is not None
        self.assertEqual(flags.year, 3)

    def test_optional_markers_may_be_missing(self) -> None:
        flags = parse_flags("y/4", (YEAR, TERM))
        assert flags is not None
        self.assertEqual(flags.year, 4)
        self.assertIsNone(flags.term)

    def test_no_markers(self) -> None:
        flags = parse_flags("CS1010", (YEAR, TERM))
        assert flags is not None
        self.assertEqual(flags.head, "CS1010")
        self.assertIsNone(flags.year)

    def test_out_of_order_returns_none(self) -> None:
        self.assertIsNone(parse_flags("t/1 y/2", (YEAR, TERM)))

    def test_repeated_marker_returns_none(self) -> None:
        self.assertIsNone(parse_flags("y/1 y/2", (YEAR, TERM)))

    def test_marker_not_allowed_returns_none(self) -> None:
        self.assertIsNone(parse_flags("y/1 m/4", (YEAR, TERM)))

    def test_non_integer_value_returns_none(self) -> None:
        self.assertIsNone(parse_flags("y/one t/2", (YEAR, TERM)))
        self.assertIsNone(parse_flags("y/1 t/", (YEAR, TERM)))

    def test_markers_are_case_sensitive(self) -> None:
        # "T/" is not a term marker, so it ends up inside the year value
        self.assertIsNone(parse_flags("y/1 T/2", (YEAR, TERM)))


if __name__ == "__main__":
    unittest.main()
