import argparse
import os
import sys
from logging import DEBUG, INFO, getLogger
from typing import Optional, List

from ..catalog.catalog import Catalog
from ..catalog.providers import build_catalog
from ..common.config import C, WORKSPACE_CONFIG_NAME
from ..common.errors import HealError
from ..common.util import init_logger, read_lines, decoding_stream
from ..java.log_parser import parse_problems
from ..resolver.resolver import Resolver
from ..workspace.bazel_workspace import BazelWorkspace

log = getLogger(__name__)


class ArgParser(argparse.ArgumentParser):

    def __init__(self, add_subparsers=True, **kwargs):
        super().__init__(description='Suggests buildozer commands fixing missing Java dependencies of a Bazel build', **kwargs)
        self.subparsers = None

        if add_subparsers:
            # Common arguments
            self.add_argument('-v', '--verbose', action='count', default=0, help='Verbose logging')
            self.add_argument('-c', '--config', default='', help='Path to a configuration file [~/.bazelheal/config.toml]')
            self.add_argument('-w', '--workspace', default='', help='Bazel workspace [current directory]')
            self.add_argument('-f', '--cachefile', default='', help='Name of the class cache file [.healdb]')

            # Subcommands
            self.subparsers = self.add_subparsers(dest='command', help='Subcommand')
            self.subparsers.required = True

            self.subparsers.add_parser('update', help='Update the class cache and exit', add_subparsers=False)

            resolve_parser = self.subparsers.add_parser('resolve', help='Read a build log and print the fixes', add_subparsers=False)
            resolve_parser.add_argument('-l', '--log', dest='log_file', default='', help='Build log to read [standard input]')

    def format_help(self):
        subcommand_helps = [super().format_help()]

        if self.subparsers:
            for name, subparser in self.subparsers.choices.items():
                subcommand_helps.append(f"{subparser.format_usage()[len('usage: '):].strip().replace('[-h] ', '', 1)}")
                subcommand_helps.append('  ' + subparser.format_help().partition('show this help message and exit\n')[2].strip())
                subcommand_helps.append('')

        return '\n'.join(subcommand_helps)


def main(argv: Optional[List[str]] = None):
    if argv is None:
        argv = sys.argv[1:]

    parser = ArgParser()
    args = parser.parse_args(argv)

    config_path = args.config
    if config_path:
        if not os.path.exists(config_path):
            raise IOError(f'Missing configuration file: {config_path}')
        C.load(config_path)

    workspace_dir = args.workspace or C.WORKSPACE_DIR or '.'

    workspace_config_path = os.path.join(workspace_dir, WORKSPACE_CONFIG_NAME)
    if os.path.exists(workspace_config_path):
        C.load(workspace_config_path)

        # The explicitly given configuration wins over the workspace one
        if config_path:
            C.load(config_path)

    if args.verbose:
        C.VERBOSE = True

    init_logger(loglevel=DEBUG if C.VERBOSE else INFO)

    if not os.path.isdir(workspace_dir):
        print(f'The path "{workspace_dir}" is not a valid directory.', file=sys.stderr)
        sys.exit(1)

    # Relative to the workspace unless given explicitly
    cache_path = args.cachefile or os.path.join(workspace_dir, C.CACHE_FILE)

    subparser = parser.subparsers.choices[args.command]
    subparser_argument_names = [action.dest for action in subparser._actions if action.__class__.__name__.startswith('_Store')]
    try:
        COMMANDS[args.command](workspace_dir, cache_path, **{name: getattr(args, name) for name in subparser_argument_names})
    except HealError as e:
        log.error(f'[{e.__class__.__name__}] {e}')
        sys.exit(1)


def command_update(workspace_dir: str, cache_path: str):
    # Bazel build and these internal bazel commands cannot run in parallel,
    # so the cache is updated in a separate run
    workspace = BazelWorkspace(workspace_dir)
    catalog = build_catalog(workspace_dir, workspace)
    catalog.save(cache_path)


def command_resolve(workspace_dir: str, cache_path: str, log_file: str):
    catalog = Catalog.load(cache_path)
    log.info(f'Cache contains {len(catalog)} dependencies')

    if log_file:
        with open(log_file, 'rt', encoding='utf-8', errors='replace') as f:
            problems = parse_problems(read_lines(f))
    else:
        problems = parse_problems(read_lines(decoding_stream(sys.stdin)))

    if problems.fix_command is not None:
        print(problems.fix_command)
        return

    log.info(f'Build problems: {problems}')

    resolution = Resolver(catalog, BazelWorkspace(workspace_dir)).resolve(problems)
    for command in resolution.commands:
        print(command)

    log.info(f'Resolved {len(resolution.fixes)}, skipped {len(resolution.skipped)}, unresolved {len(resolution.unresolved)} missing classes')


COMMANDS = {
    'update': command_update,
    'resolve': command_resolve,
}

if __name__ == '__main__':
    main()
