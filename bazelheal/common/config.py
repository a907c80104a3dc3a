import os
from typing import Iterable

import toml

BAZELHEAL_PACKAGE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..'))


class Config:
    # Common flags
    VERBOSE = False

    # Bazel workspace and the class cache built from it
    WORKSPACE_DIR: str = os.getenv('BAZELHEAL_WORKSPACE_DIR', '.')
    CACHE_FILE: str = os.getenv('BAZELHEAL_CACHE_FILE', '.healdb')

    # External tools
    BAZEL: str = os.getenv('BAZELHEAL_BAZEL', 'bazel')
    BUILDOZER: str = os.getenv('BAZELHEAL_BUILDOZER', 'buildozer')

    # Exit code of bazel query if the target does not exist
    NOT_FOUND_EXIT_CODE: int = 7

    # Rule naming
    EXTERNAL_PREFIX: str = '//external:'
    ROOT_PACKAGE_PREFIX: str = '//:'
    ROOT_PACKAGE_TARGET: str = '__pkg__'

    # Rule kinds
    EXTERNAL_DEPENDENCY_KIND: str = os.getenv('BAZELHEAL_EXTERNAL_DEPENDENCY_KIND', 'maven_jar')
    GENERATED_RULE_KIND: str = os.getenv('BAZELHEAL_GENERATED_RULE_KIND', 'genrule')

    # Maven source layout
    SOURCE_EXTENSION: str = '.java'
    SOURCE_LAYOUT: str = '/src/main/java/'

    def save(self, path: str):
        with open(path, 'wt') as f:
            toml.dump({name: getattr(self, name) for name in self}, f)

    def load(self, path: str):
        with open(path, 'rt') as f:
            data = toml.load(f)

        for name in self:
            if name in data:
                setattr(self, name, data[name])

    def __iter__(self) -> Iterable[str]:
        for name in dir(self):
            if not name.startswith('_') and name == name.upper():
                yield name


CONFIG_DIR = os.path.expanduser('~/.bazelheal')
CONFIG_PATH = os.path.join(CONFIG_DIR, 'config.toml')

# Per workspace overrides, relative to the workspace directory
WORKSPACE_CONFIG_NAME = '.bazelheal.toml'

C = Config()

if os.path.exists(CONFIG_PATH):
    C.load(CONFIG_PATH)
