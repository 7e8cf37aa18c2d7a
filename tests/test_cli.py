"""
Tests for the CLI entry point and the interactive session loop.

The session is driven by a scripted list of input lines and writes to an
in-memory console, so no real terminal or user data is involved.
"""

import io
import tempfile
import unittest
from pathlib import Path

from rich.console import Console

from studyplan.catalog import CourseCatalog
from studyplan.cli import main, run_session
from studyplan.commands import CommandInterpreter
from studyplan.model import Course, Timetable
from studyplan.storage import Session, load_timetable, save_timetable


def _reader(*lines: str):
    it = iter(lines)

    def read_line() -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None

    return read_line


class TestCLI(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.data_dir = Path(self._tmp.name)
        self.session = Session(data_dir=self.data_dir)
        self.interpreter = CommandInterpreter(
            self.session, CourseCatalog(self.data_dir, name_resolver=lambda code: "Unused")
        )
        self.buf = io.StringIO()
        self.out = Console(file=self.buf, width=200)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_cli_rejects_bad_arguments(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main(["--timetable", "x"])
        self.assertNotEqual(ctx.exception.code, 0)

        with self.assertRaises(SystemExit) as ctx:
            main(["--timetable", "-1"])
        self.assertNotEqual(ctx.exception.code, 0)

    def test_session_runs_until_bye(self) -> None:
        reader = _reader(
            "add course CS1010 y/1 t/1",
            "",
            "bogus",
            "add grade CS1010 A",
            "bye",
            "add course CS1231 y/1 t/1",
        )

        run_session(self.session, self.interpreter, read_line=reader, out=self.out)

        output = self.buf.getvalue()
        self.assertIn("Invalid command", output)
        self.assertIn("Bye", output)

        saved = load_timetable("myTimetable", self.session)
        self.assertEqual([c.code for c in saved], ["CS1010"])
        self.assertEqual(saved.search_grade("CS1010"), "A")

    def test_end_of_input_saves(self) -> None:
        t = Timetable()
        t.add_course(Course("CS1010", "Programming Methodology", 4, 1, 1))
        save_timetable(t, self.session)

        run_session(self.session, self.interpreter, read_line=_reader("rm course CS1010"), out=self.out)

        self.assertEqual(len(load_timetable("myTimetable", self.session)), 0)
        self.assertIn("Bye", self.buf.getvalue())

    def test_interrupted_name_prompt_aborts_command_only(self) -> None:
        def interrupted(code: str) -> str:
            raise EOFError

        interpreter = CommandInterpreter(self.session, CourseCatalog(self.data_dir, name_resolver=interrupted))

        run_session(
            self.session,
            interpreter,
            read_line=_reader("add course XX9999 y/1 t/1", "add course CS1010 y/1 t/1", "bye"),
            out=self.out,
        )

        output = self.buf.getvalue()
        self.assertIn("Command aborted", output)
        self.assertIn("Bye", output)
        saved = load_timetable("myTimetable", self.session)
        self.assertEqual([c.code for c in saved], ["CS1010"])

    def test_switching_timetable_reloads(self) -> None:
        other = Timetable()
        other.add_course(Course("CS2113", "Software Engineering", 4, 2, 1, grade="B"))
        self.session.timetable_index = 1
        save_timetable(other, self.session)
        self.session.timetable_index = 0

        run_session(
            self.session,
            self.interpreter,
            read_line=_reader("change timetable 1", "rm grade CS2113", "bye"),
            out=self.out,
        )

        self.assertIn("Loaded timetable 1 (1 courses)", self.buf.getvalue())
        self.session.timetable_index = 1
        reloaded = load_timetable("myTimetable", self.session)
        self.assertIn("CS2113", reloaded)
        self.assertIsNone(reloaded.search_grade("CS2113"))


if __name__ == "__main__":
    unittest.main()
