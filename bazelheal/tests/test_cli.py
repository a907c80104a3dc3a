import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from logging import getLogger, DEBUG, INFO
from unittest import mock

from bazelheal.catalog.catalog import Catalog
from bazelheal.cli.cli import main
from bazelheal.common.config import C
from bazelheal.java.model import Dependency
from bazelheal.tests.data import FakeWorkspace, BAZEL_LOG, BAZEL_LOG_WITH_FIX, write_file


class TestCli(unittest.TestCase):

    def setUp(self):
        super().setUp()
        self.tmp = tempfile.TemporaryDirectory()
        self.dir = self.tmp.name
        self.cache_path = os.path.join(self.dir, C.CACHE_FILE)
        self.log_path = os.path.join(self.dir, 'bazel.log')
        self.workspace = FakeWorkspace(base=self.dir, sources={'com.shop.model.Order': '//:core'})
        self.handlers = list(getLogger().handlers)
        self.level = getLogger().level
        self.config = {name: getattr(C, name) for name in C}

    def tearDown(self):
        root = getLogger()
        for handler in list(root.handlers):
            if handler not in self.handlers:
                root.removeHandler(handler)
        root.setLevel(self.level)
        for name, value in self.config.items():
            setattr(C, name, value)
        self.tmp.cleanup()
        super().tearDown()

    def run_main(self, *argv: str) -> str:
        output = io.StringIO()
        with mock.patch('bazelheal.cli.cli.BazelWorkspace', return_value=self.workspace), redirect_stdout(output):
            main(['-w', self.dir] + list(argv))
        return output.getvalue()

    def write_cache(self):
        Catalog(dependencies=[
            Dependency(name='ext_x', external_reference='ext/x/src/main/java/', resources=['com.google.common.base.Strings']),
        ]).save(self.cache_path)

    def test_update(self):
        write_file(os.path.join(self.dir, 'core', 'src', 'main', 'java', 'com', 'shop', 'model', 'Order.java'))
        write_file(os.path.join(self.dir, 'ui', 'src', 'main', 'java', 'com', 'shop', 'ui', 'Page.java'))

        self.assertEqual('', self.run_main('update'))

        catalog = Catalog.load(self.cache_path)
        self.assertEqual(['core', 'ui'], [d.name for d in catalog.dependencies])
        self.assertEqual('ui/src/main/java/', catalog.dependencies[1].external_reference)
        self.assertEqual([('output_base',), ('list_external_dependencies',)], self.workspace.queries)

    def test_resolve_log_file(self):
        self.write_cache()
        write_file(self.log_path, BAZEL_LOG)

        output = self.run_main('resolve', '--log', self.log_path)

        self.assertEqual([
            "buildozer 'new java_library ext_x' __pkg__",
            """buildozer 'set srcs glob(["ext/x/src/main/java/**/*.java"])' ext_x""",
            "buildozer 'add deps //:core' app",
        ], output.splitlines())

    def test_resolve_stdin(self):
        self.write_cache()
        with mock.patch('sys.stdin', io.StringIO(BAZEL_LOG)):
            output = self.run_main('resolve')
        self.assertIn("buildozer 'add deps //:core' app", output.splitlines())

    def test_fix_command_from_log(self):
        self.write_cache()
        write_file(self.log_path, BAZEL_LOG_WITH_FIX)

        output = self.run_main('resolve', '-l', self.log_path)

        self.assertEqual("buildozer 'add deps //external:junit' //:app\n", output)
        self.assertEqual([], self.workspace.queries)

    def test_missing_cache(self):
        write_file(self.log_path, BAZEL_LOG)
        with self.assertRaises(SystemExit) as context:
            self.run_main('resolve', '--log', self.log_path)
        self.assertEqual(1, context.exception.code)

    def test_malformed_log(self):
        self.write_cache()
        write_file(self.log_path, 'Building nothing useful\n')
        with self.assertRaises(SystemExit) as context:
            self.run_main('resolve', '--log', self.log_path)
        self.assertEqual(1, context.exception.code)

    def test_missing_config(self):
        self.assertRaises(IOError, lambda: self.run_main('-c', os.path.join(self.dir, 'missing.toml'), 'update'))

    def test_resolve_stdin_with_undecodable_bytes(self):
        self.write_cache()
        log = b'Building libapp.jar (1 source file)\nsrc/Caf\xe9.java:1: error: package com.shop.model does not exist\nimport com.shop.model.Order;\n'
        with mock.patch('sys.stdin', io.TextIOWrapper(io.BytesIO(log), encoding='utf-8')):
            output = self.run_main('resolve')
        self.assertEqual("buildozer 'add deps //:core' app\n", output)

    def test_resolve_log_file_with_undecodable_bytes(self):
        self.write_cache()
        with open(self.log_path, 'wb') as f:
            f.write(b'Building libapp.jar (1 source file)\nsrc/Caf\xe9.java:1: error: package com.shop.model does not exist\nimport com.shop.model.Order;\n')
        self.assertEqual("buildozer 'add deps //:core' app\n", self.run_main('resolve', '--log', self.log_path))

    def test_workspace_config(self):
        write_file(os.path.join(self.dir, '.bazelheal.toml'), 'CACHE_FILE = "classes.json"\n')

        self.run_main('update')

        self.assertTrue(os.path.isfile(os.path.join(self.dir, 'classes.json')))
        self.assertFalse(os.path.exists(self.cache_path))

    def test_explicit_config_wins_over_workspace_config(self):
        write_file(os.path.join(self.dir, '.bazelheal.toml'), 'CACHE_FILE = "workspace.json"\nBUILDOZER = "workspace-buildozer"\n')
        config_path = os.path.join(self.dir, 'explicit.toml')
        write_file(config_path, 'CACHE_FILE = "explicit.json"\n')

        self.run_main('-c', config_path, 'update')

        self.assertTrue(os.path.isfile(os.path.join(self.dir, 'explicit.json')))
        self.assertFalse(os.path.exists(os.path.join(self.dir, 'workspace.json')))

        # Values the explicit configuration does not set still come from the workspace
        self.assertEqual('workspace-buildozer', C.BUILDOZER)

    def test_cachefile_argument_wins(self):
        write_file(os.path.join(self.dir, '.bazelheal.toml'), 'CACHE_FILE = "workspace.json"\n')
        cache_path = os.path.join(self.dir, 'given.json')

        self.run_main('-f', cache_path, 'update')

        self.assertTrue(os.path.isfile(cache_path))
        self.assertFalse(os.path.exists(os.path.join(self.dir, 'workspace.json')))

    def test_verbose(self):
        self.run_main('update')
        self.assertEqual(INFO, getLogger().level)

        self.run_main('-v', 'update')
        self.assertEqual(DEBUG, getLogger().level)
        self.assertTrue(C.VERBOSE)
