#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import logging
from unittest import TestCase, main

from click.testing import CliRunner

from anydb_sql.cli import cli


class CliTest(TestCase):

    def setUp(self):
        self.runner = CliRunner()

    def tearDown(self):
        # Handlers keep the streams of the runner, closed by now
        root = logging.getLogger()
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def _invoke(self, *args):
        with self.runner.isolated_filesystem():
            return self.runner.invoke(cli, list(args))

    def test_dialect(self):
        result = self._invoke('dialect', 'sqlite3:///data.db')
        self.assertEqual(0, result.exit_code)
        self.assertIn('sqlite', result.output)

    def test_query(self):
        result = self._invoke('query', '-u', 'sqlite3://', 'SELECT ? AS x, 1 AS one', 'a')
        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn('{"x": "a", "one": 1}', result.output)

    def test_statement_without_rows(self):
        result = self._invoke('query', '-u', 'sqlite3://', 'CREATE TABLE t (x INTEGER)')
        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn('row(s) affected', result.output)

    def test_query_error(self):
        result = self._invoke('query', '-u', 'sqlite3://', 'SELECT * FROM missing')
        self.assertEqual(1, result.exit_code)
        self.assertIn('no such table: missing', result.output)

    def test_check(self):
        result = self._invoke('check', '--url', 'sqlite3://')
        self.assertEqual(0, result.exit_code, result.output)
        self.assertIn('OK: sqlite', result.output)

    def test_log_level(self):
        self.addCleanup(logging.getLogger('anydb_sql').setLevel, logging.NOTSET)
        result = self._invoke('-l', 'anydb_sql', 'DEBUG', 'check', '-u', 'sqlite3://')
        self.assertEqual(0, result.exit_code, result.output)
        self.assertEqual(logging.DEBUG, logging.getLogger('anydb_sql').level)


if __name__ == '__main__':
    main()
