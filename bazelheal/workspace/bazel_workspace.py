from logging import getLogger
from subprocess import Popen, PIPE
from typing import List, Optional, Tuple

from .workspace import Workspace
from ..common.config import C
from ..common.errors import QueryError
from ..common.util import split_to_lines_and_clean

log = getLogger(__name__)


class BazelWorkspace(Workspace):

    def __init__(self, workspace_dir: str = '', bazel: str = ''):
        self.workspace_dir: str = workspace_dir or C.WORKSPACE_DIR
        self.bazel: str = bazel or C.BAZEL

    def run_command(self, action: str, command: List[str]) -> Tuple[int, str]:
        log.info(f'Command to {action}: {" ".join(command)} in {self.workspace_dir}')
        try:
            process = Popen(command, cwd=self.workspace_dir, stdout=PIPE, stderr=PIPE)
        except OSError as e:
            raise QueryError(f'Failed to {action}: {command!r}\nError: {e}') from e

        output, errors = process.communicate()
        if process.returncode:
            log.debug(f'Exit code {process.returncode}, error output:\n{errors.decode("utf-8", "replace")}')
        return process.returncode, output.decode('utf-8', 'replace')

    def must_run_command(self, action: str, command: List[str]) -> str:
        exit_code, output = self.run_command(action, command)
        if exit_code:
            raise QueryError(f'Failed to {action}: {command!r}\nExit code: {exit_code}\nOutput:\n{output}')
        return output

    def query(self, action: str, command: List[str]) -> Optional[str]:
        """Runs a query which may legitimately find nothing, returns None in that case"""
        exit_code, output = self.run_command(action, command)
        if exit_code == C.NOT_FOUND_EXIT_CODE:
            return None
        if exit_code:
            raise QueryError(f'Failed to {action}: {command!r}\nExit code: {exit_code}\nOutput:\n{output}')
        return output

    def output_base(self) -> str:
        output = self.must_run_command('get output base', [self.bazel, 'info', 'output_base'])
        lines = split_to_lines_and_clean(output)
        if len(lines) != 1:
            raise QueryError(f'Expected exactly one line but got {lines!r}')
        return lines[0]

    def list_external_dependencies(self) -> List[str]:
        # Might trigger dependency resolution
        expression = f'kind({C.EXTERNAL_DEPENDENCY_KIND}, {C.EXTERNAL_PREFIX}all)'
        output = self.must_run_command('list external dependencies', [self.bazel, 'query', expression])
        return split_to_lines_and_clean(output)

    def rule_exists(self, rule: str) -> bool:
        return self.query('check rule exists', [self.bazel, 'query', rule]) is not None

    def find_rule_of_kind(self, name: str, kind: str) -> Optional[str]:
        output = self.query(f'find {kind} rule', [self.bazel, 'query', name, '--output=label_kind'])
        if output is None:
            return None

        want = f'{kind} rule {C.ROOT_PACKAGE_PREFIX}{name}'
        lines = split_to_lines_and_clean(output)
        if len(lines) == 1 and lines[0] == want:
            return name
        return None

    def find_rule_with_sources(self, pattern: str) -> Optional[str]:
        # Java package dots act as regex wildcards and match the / in source paths
        expression = f"attr('srcs', {pattern}, :all)"
        exit_code, output = self.run_command('find rule with sources', [self.bazel, 'query', expression])
        if exit_code:
            return None

        lines = split_to_lines_and_clean(output)
        if len(lines) == 1 and lines[0].startswith(C.ROOT_PACKAGE_PREFIX):
            return lines[0]
        return None
