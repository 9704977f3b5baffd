#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import json
import os
import tempfile
from unittest import TestCase, main, mock

from anydb_sql.commons import config, constants
from anydb_sql.commons.errors import ConfigurationError


class LoadTest(TestCase):

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.missing = os.path.join(self.directory.name, 'missing.json')
        environ = mock.patch.dict(os.environ)
        environ.start()
        self.addCleanup(environ.stop)
        os.environ.pop(constants.CONFIG_ENV_VAR, None)
        location = mock.patch.object(constants, 'CONFIG_LOCATION', self.missing)
        location.start()
        self.addCleanup(location.stop)

    def tearDown(self):
        self.directory.cleanup()

    def _write(self, content):
        path = os.path.join(self.directory.name, 'anydb_sql.json')
        with open(path, 'w') as config_file:
            config_file.write(content)
        return path

    def test_defaults(self):
        loaded = config.load()
        self.assertEqual(constants.DEFAULT_CONFIG, loaded)
        loaded['connections']['max'] = 100
        self.assertEqual(5, constants.DEFAULT_CONNECTIONS['max'])

    def test_path(self):
        path = self._write(json.dumps({'url': 'sqlite3:///blog.db'}))
        loaded = config.load(path)
        self.assertEqual('sqlite3:///blog.db', loaded['url'])
        self.assertEqual(constants.DEFAULT_CONNECTIONS, loaded['connections'])

    def test_environment_variable(self):
        path = self._write(json.dumps({'url': 'postgres://u@h/db'}))
        os.environ[constants.CONFIG_ENV_VAR] = path
        self.assertEqual('postgres://u@h/db', config.load()['url'])

    def test_unreadable_file(self):
        with self.assertRaises(ConfigurationError):
            config.load(self.missing)

    def test_malformed_file(self):
        with self.assertRaises(ConfigurationError):
            config.load(self._write('{"url": '))


class PoolSettingsTest(TestCase):

    def test_defaults(self):
        self.assertEqual(constants.DEFAULT_CONNECTIONS, config.pool_settings())

    def test_merge(self):
        settings = config.pool_settings({'max': 10, 'timeout': 5})
        self.assertEqual(10, settings['max'])
        self.assertEqual(5, settings['timeout'])
        self.assertEqual(1, settings['min'])

    def test_bad_sizes(self):
        for connections in ({'min': 4, 'max': 2}, {'max': 0}, {'min': -1}, {'max': '5'}):
            with self.assertRaises(ConfigurationError):
                config.pool_settings(connections)

    def test_validate_needs_url(self):
        with self.assertRaises(ConfigurationError):
            config.validate({})


if __name__ == '__main__':
    main()
