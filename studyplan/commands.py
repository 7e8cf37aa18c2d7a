"""
Command interpreter.

Turns one line of user input into a change of (or a query on) the active
timetable, e.g.:

    add course CS2113 y/1 t/2 m/4
    add grade CS2113 A
    move CS2113 y/2 t/1
    check y/2 t/1
    view y/1
    change timetable 1
    bye

Two kinds of outcome:
- malformed input raises CommandError; every verb/noun has its own message
  so the user can tell which syntax was wrong. Nothing is mutated.
- "not found" is not an error: it comes back as a CommandResult with
  succeeded=False.

Every command that mutates the timetable ends with a full rewrite of the
active timetable file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from studyplan.catalog import CourseCatalog
from studyplan.config import DEFAULT_CREDITS, DELIMITER, MAX_TERM, MAX_YEAR, MIN_TERM, MIN_YEAR
from studyplan.model import Course, DuplicateCourseError, Timetable
from studyplan.parse import CREDITS, TERM, YEAR, FlagArgs, parse_flags
from studyplan.reports import format_gpa, format_plan
from studyplan.storage import Session, is_user_timetable, load_timetable, save_timetable

logger = logging.getLogger(__name__)


HELP_TEXT = """\
Commands:
  init <MAJOR>                          start your timetable from a recommended plan (e.g. init CEG)
  add course <CODE> y/<YEAR> t/<TERM> [m/<MCS>]
                                        add a course (credits default to 4)
  add grade <CODE> <GRADE>              set the grade of a course
  rm course <CODE>                      remove a course
  rm grade <CODE>                       remove the grade of a course
  move <CODE> y/<YEAR> t/<TERM>         move a course to another year/term, keeping its grade
  change grade <CODE> <GRADE>           change the grade of a course
  change timetable <INDEX>              switch to another of your timetables
  check [y/<YEAR>] [t/<TERM>]           show your GPA, optionally for one year or term
  view [y/<YEAR>] [t/<TERM>]            show your plan, optionally for one year or term
  display <MAJOR>                       show a recommended plan without changing yours
  help                                  show this message
  bye                                   save and exit"""


class ErrorKind(Enum):
    INVALID_COMMAND = "Invalid command. Type 'help' to see the list of commands."
    MISSING_MAJOR = "Please specify a major, e.g. init CEG"
    MISSING_MAJOR_DISPLAY = "Please specify the timetable to display, e.g. display CEG"
    INVALID_ADD = "Invalid add command. Use 'add course ...' or 'add grade ...'"
    INVALID_ADD_COURSE = "Invalid add course command. Use: add course <CODE> y/<YEAR> t/<TERM> [m/<MCS>]"
    INVALID_ADD_GRADE = "Invalid add grade command. Use: add grade <CODE> <GRADE>"
    INVALID_REMOVE = "Invalid rm command. Use 'rm course ...' or 'rm grade ...'"
    INVALID_REMOVE_COURSE = "Invalid rm course command. Use: rm course <CODE>"
    INVALID_REMOVE_GRADE = "Invalid rm grade command. Use: rm grade <CODE>"
    INVALID_MOVE_COURSE = "Invalid move command. Use: move <CODE> y/<YEAR> t/<TERM>"
    INVALID_CHANGE = "Invalid change command. Use 'change grade ...' or 'change timetable ...'"
    INVALID_CHANGE_GRADE = "Invalid change grade command. Use: change grade <CODE> <GRADE>"
    INVALID_CHANGE_TIMETABLE = "Invalid change timetable command. Use: change timetable <INDEX>"
    INVALID_CHECK_YEAR_GRADE = "Invalid check command. Use: check y/<YEAR>"
    INVALID_CHECK_TERM_GRADE = "Invalid check command. Use: check y/<YEAR> t/<TERM>"
    YEAR_OUT_OF_RANGE = f"Year provided is not from {MIN_YEAR} to {MAX_YEAR}"
    TERM_OUT_OF_RANGE = f"Term provided is not from {MIN_TERM} to {MAX_TERM}"
    INVALID_VIEW_YEAR_PLAN = "Invalid view command. Use: view y/<YEAR>"
    INVALID_VIEW_TERM_PLAN = "Invalid view command. Use: view y/<YEAR> t/<TERM>"
    DUPLICATE_COURSE = "This course is already in your timetable."


class CommandError(Exception):
    """
    Raised for malformed input. The message is fixed per ErrorKind unless
    a more specific one is given.
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None) -> None:
        super().__init__(message or kind.value)
        self.kind = kind


@dataclass
class CommandResult:
    should_exit: bool = False
    message: str = ""
    succeeded: bool = True


def _not_found(message: str) -> CommandResult:
    return CommandResult(message=message, succeeded=False)


def _parse_filters(tokens: list[str], year_kind: ErrorKind, term_kind: ErrorKind) -> FlagArgs:
    """
    Parse the optional "y/<year> [t/<term>]" filter used by check and view.
    """
    kind = year_kind if len(tokens) == 1 else term_kind
    flags = parse_flags(" ".join(tokens), (YEAR, TERM))
    if flags is None or flags.head or flags.year is None:
        raise CommandError(kind)
    if len(tokens) > 1 and flags.term is None:
        raise CommandError(kind)
    return flags


class CommandInterpreter:
    """
    Dispatches one input line to the matching command handler.
    """

    def __init__(self, session: Session, catalog: CourseCatalog) -> None:
        self.session = session
        self.catalog = catalog
        self._handlers: dict[str, Callable[[list[str], Timetable], CommandResult]] = {
            "init": self._cmd_init,
            "add": self._cmd_add,
            "rm": self._cmd_remove,
            "move": self._cmd_move,
            "change": self._cmd_change,
            "check": self._cmd_check,
            "view": self._cmd_view,
            "display": self._cmd_display,
            "help": self._cmd_help,
            "bye": self._cmd_bye,
        }

    def execute(self, line: str, timetable: Timetable) -> CommandResult:
        tokens = line.split()
        if not tokens:
            raise CommandError(ErrorKind.INVALID_COMMAND)

        logger.info("Processing command: %s", line.strip())
        handler = self._handlers.get(tokens[0].lower())
        if handler is None:
            logger.warning("Invalid command format: %s", line.strip())
            raise CommandError(ErrorKind.INVALID_COMMAND)
        return handler(tokens, timetable)

    def _save(self, timetable: Timetable) -> None:
        save_timetable(timetable, self.session)

    def _timetable_name(self, raw: str) -> str:
        return raw if is_user_timetable(raw) else raw.upper()

    # -----------------------------------------------------------------------
    # init / display / help / bye
    # -----------------------------------------------------------------------

    def _cmd_init(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        if len(tokens) < 2:
            raise CommandError(ErrorKind.MISSING_MAJOR)

        name = self._timetable_name(tokens[1])
        recommended = load_timetable(name, self.session)
        if len(recommended) == 0:
            return _not_found(f"No recommended timetable found for {name}.")

        if not is_user_timetable(name):
            save_timetable(recommended, self.session, path=self.session.plan_path(name), with_grade=False)
        timetable.replace_with(recommended)
        self._save(timetable)
        return CommandResult(message=f"Your timetable now follows the recommended plan for {name}.")

    def _cmd_display(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        if len(tokens) < 2:
            raise CommandError(ErrorKind.MISSING_MAJOR_DISPLAY)
        other = load_timetable(self._timetable_name(tokens[1]), self.session)
        return CommandResult(message=format_plan(other))

    def _cmd_help(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        return CommandResult(message=HELP_TEXT)

    def _cmd_bye(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        self._save(timetable)
        logger.info("Exiting")
        return CommandResult(should_exit=True, message="Bye. Your timetable has been saved.")

    # -----------------------------------------------------------------------
    # add / rm / change
    # -----------------------------------------------------------------------

    def _noun(self, tokens: list[str]) -> str:
        if len(tokens) < 2:
            logger.warning("Missing target in command: %s", " ".join(tokens))
            raise CommandError(ErrorKind.INVALID_COMMAND)
        return tokens[1].lower()

    def _cmd_add(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        noun = self._noun(tokens)
        if noun == "course":
            return self._add_course(tokens, timetable)
        if noun == "grade":
            return self._set_grade(tokens, timetable, ErrorKind.INVALID_ADD_GRADE)
        raise CommandError(ErrorKind.INVALID_ADD)

    def _cmd_remove(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        noun = self._noun(tokens)
        if noun == "course":
            if len(tokens) != 3:
                raise CommandError(ErrorKind.INVALID_REMOVE_COURSE)
            code = tokens[2].upper()
            if not timetable.remove_course(code):
                return _not_found(f"{code} is not in your timetable.")
            self._save(timetable)
            return CommandResult(message=f"Removed {code} from your timetable.")

        if noun == "grade":
            if len(tokens) != 3:
                raise CommandError(ErrorKind.INVALID_REMOVE_GRADE)
            code = tokens[2].upper()
            if not timetable.remove_grade(code):
                return _not_found(f"No grade to remove: {code} is not in your timetable or has no grade yet.")
            self._save(timetable)
            return CommandResult(message=f"Removed the grade of {code}.")

        raise CommandError(ErrorKind.INVALID_REMOVE)

    def _cmd_change(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        noun = self._noun(tokens)
        if noun == "grade":
            return self._set_grade(tokens, timetable, ErrorKind.INVALID_CHANGE_GRADE)

        if noun == "timetable":
            if len(tokens) != 3:
                raise CommandError(ErrorKind.INVALID_CHANGE_TIMETABLE)
            try:
                index = int(tokens[2].strip())
            except ValueError:
                raise CommandError(ErrorKind.INVALID_CHANGE_TIMETABLE) from None
            if index < 0:
                raise CommandError(ErrorKind.INVALID_CHANGE_TIMETABLE)
            self.session.timetable_index = index
            logger.info("Active timetable is now %s", self.session.user_timetable_name)
            return CommandResult(message=f"Switched to timetable {index}.")

        raise CommandError(ErrorKind.INVALID_CHANGE)

    def _add_course(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        # everything after "add course" forms one argument: CODE y/Y t/T [m/M]
        arg = " ".join(tokens[2:])
        flags = parse_flags(arg, (YEAR, TERM, CREDITS)) or parse_flags(arg, (YEAR, CREDITS, TERM))
        if flags is None or not flags.head or flags.year is None or flags.term is None:
            raise CommandError(ErrorKind.INVALID_ADD_COURSE)
        # the code is a single token
        if len(flags.head.split()) != 1 or DELIMITER in flags.head:
            raise CommandError(ErrorKind.INVALID_ADD_COURSE)
        if flags.credits is not None and flags.credits <= 0:
            raise CommandError(ErrorKind.INVALID_ADD_COURSE)

        code = flags.head.upper()
        if code in timetable:
            raise CommandError(ErrorKind.DUPLICATE_COURSE, f"{code} is already in your timetable.")

        fallback = flags.credits if flags.credits is not None else DEFAULT_CREDITS
        entry = self.catalog.resolve(code, fallback)
        course = Course(code=code, name=entry.name, credits=entry.credits, year=flags.year, term=flags.term)
        try:
            timetable.add_course(course)
        except DuplicateCourseError as exc:
            raise CommandError(ErrorKind.DUPLICATE_COURSE, str(exc)) from exc

        self._save(timetable)
        return CommandResult(message=f"Added {code} ({entry.name}) to year {flags.year} term {flags.term}.")

    def _set_grade(self, tokens: list[str], timetable: Timetable, kind: ErrorKind) -> CommandResult:
        if len(tokens) != 4 or DELIMITER in tokens[3]:
            raise CommandError(kind)

        code, grade = tokens[2].upper(), tokens[3].upper()
        if not timetable.add_grade(code, grade):
            return _not_found(f"{code} is not in your timetable, grade not set.")

        self._save(timetable)
        return CommandResult(message=f"Grade of {code} is now {grade}.")

    # -----------------------------------------------------------------------
    # move
    # -----------------------------------------------------------------------

    def _cmd_move(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        if len(tokens) < 3:
            raise CommandError(ErrorKind.INVALID_MOVE_COURSE)

        code = tokens[1].upper()
        flags = parse_flags(" ".join(tokens[2:]), (YEAR, TERM))
        if flags is None or flags.head or flags.year is None or flags.term is None:
            logger.warning("Invalid command format: move course")
            raise CommandError(ErrorKind.INVALID_MOVE_COURSE)

        current = timetable.get(code)
        if current is None:
            return _not_found(f"{code} is not in your timetable.")

        # resolve first: the name prompt may be aborted before anything changes
        entry = self.catalog.resolve(code, current.credits)

        grade = timetable.search_grade(code)
        timetable.remove_course(code)
        timetable.add_course(Course(code=code, name=entry.name, credits=entry.credits, year=flags.year, term=flags.term))
        if grade is not None:
            timetable.add_grade(code, grade)

        self._save(timetable)
        return CommandResult(message=f"Moved {code} to year {flags.year} term {flags.term}.")

    # -----------------------------------------------------------------------
    # check / view
    # -----------------------------------------------------------------------

    def _cmd_check(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        filters = tokens[1:]
        if not filters:
            return CommandResult(message=format_gpa(timetable))

        flags = _parse_filters(filters, ErrorKind.INVALID_CHECK_YEAR_GRADE, ErrorKind.INVALID_CHECK_TERM_GRADE)
        if not MIN_YEAR <= flags.year <= MAX_YEAR:
            logger.warning("Year provided is not from %d to %d", MIN_YEAR, MAX_YEAR)
            raise CommandError(ErrorKind.YEAR_OUT_OF_RANGE)
        if flags.term is not None and not MIN_TERM <= flags.term <= MAX_TERM:
            logger.warning("Term provided is not from %d to %d", MIN_TERM, MAX_TERM)
            raise CommandError(ErrorKind.TERM_OUT_OF_RANGE)

        return CommandResult(message=format_gpa(timetable, year=flags.year, term=flags.term))

    def _cmd_view(self, tokens: list[str], timetable: Timetable) -> CommandResult:
        filters = tokens[1:]
        if not filters:
            return CommandResult(message=format_plan(timetable))

        # no range check here, out-of-range filters just match nothing
        flags = _parse_filters(filters, ErrorKind.INVALID_VIEW_YEAR_PLAN, ErrorKind.INVALID_VIEW_TERM_PLAN)
        return CommandResult(message=format_plan(timetable, year=flags.year, term=flags.term))
