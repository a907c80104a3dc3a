import re
from logging import getLogger
from typing import Iterable, Iterator, Optional

from .model import BuildProblems, strip_last
from ..common.errors import MalformedLogError

log = getLogger(__name__)

FIX_COMMAND_PREFIX = 'buildozer '

BUILDING = 'Building'
COMPILING = 'Compiling Java headers'
NO_SYMBOL = 'error: cannot find symbol'

RX_BUILDING = re.compile(BUILDING + r' lib(.*?)\.jar ')
RX_COMPILING = re.compile(COMPILING + r' lib(.*?)-hjar\.jar ')
RX_NO_PACKAGE = re.compile(r'package (.*) does not exist')
RX_IMPORT = re.compile(r'import (.*);')
RX_IMPORT_STATIC = re.compile(r'import static (.*);')


class LogParser:
    """Scans a bazel build log for the rule being built and the classes it is missing

    The log is consumed strictly forward. Compiler errors about missing imports
    are reported on two lines: the error itself, then the offending source line,
    so those triggers consume the line following them.
    """

    def __init__(self):
        self.problems = BuildProblems()

    def parse(self, lines: Iterable[str]) -> BuildProblems:
        it = iter(lines)
        for line in it:
            # Easiest: bazel's own suggestion, the log will not contain anything else
            if line.startswith(FIX_COMMAND_PREFIX):
                log.info('Found ready-made fix command in the build log')
                self.problems.fix_command = line
                break

            if BUILDING in line:
                self.__set_rule(RX_BUILDING, line)
            elif COMPILING in line:
                self.__set_rule(RX_COMPILING, line)
            elif RX_NO_PACKAGE.search(line) is not None:
                self.__parse_import(self.__next_line(it), allow_static=True)
            elif NO_SYMBOL in line:
                self.__parse_import(self.__next_line(it), allow_static=False)

        return self.problems

    def __set_rule(self, rx: re.Pattern, line: str):
        m = rx.search(line)
        if m is None:
            raise MalformedLogError(f'Expected rule but got: {line}')

        rule = m.group(1)
        log.info(f'Using package name {rule}')
        self.problems.bazel_rule = rule

    def __parse_import(self, line: Optional[str], allow_static: bool):
        if line is None:
            return

        if allow_static:
            m = RX_IMPORT_STATIC.search(line)
            if m is not None:
                member = m.group(1)
                if '.' not in member:
                    log.warning(f'Skipping static import without class: {member}')
                    return
                # Convert the imported member to its class
                self.problems.add(strip_last(member))
                return

        m = RX_IMPORT.search(line)
        if m is not None:
            self.problems.add(m.group(1))

    @staticmethod
    def __next_line(it: Iterator[str]) -> Optional[str]:
        return next(it, None)


def parse_problems(lines: Iterable[str]) -> BuildProblems:
    return LogParser().parse(lines)
