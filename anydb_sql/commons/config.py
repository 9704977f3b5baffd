#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Database configuration loading and validation."""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import copy
import json
import logging
import os

from anydb_sql.commons import constants
from anydb_sql.commons import localizations as loc
from anydb_sql.commons.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


def load(path=None) -> dict:
    """Load a database configuration.

    Lookup order: the given path, the file named by the
    ``ANYDB_SQL_CONFIG`` environment variable, ``anydb_sql.json``
    in the working directory, the default configuration.

    :param path: a JSON configuration file
    :return: a validated configuration dictionary
    """
    if path is None:
        path = os.environ.get(constants.CONFIG_ENV_VAR)
    if path is None and os.path.isfile(constants.CONFIG_LOCATION):
        path = constants.CONFIG_LOCATION

    if path is None:
        LOGGER.debug('No configuration file found, using the default one')
        return copy.deepcopy(constants.DEFAULT_CONFIG)

    try:
        with open(path) as config_file:
            config = json.load(config_file)
    except (OSError, ValueError) as error:
        raise ConfigurationError(loc.FAIL_LOAD_CONFIG % (path, error)) from error

    return validate(config)


def validate(config: dict) -> dict:
    """Check a configuration and fill in the pool defaults."""
    url = config.get(constants.URL)
    if not url:
        raise ConfigurationError(loc.MISSING_URL)
    return {
        constants.URL: url,
        constants.CONNECTIONS: pool_settings(config.get(constants.CONNECTIONS)),
    }


def pool_settings(connections=None) -> dict:
    """Merge the given pool settings with the defaults.

    :param connections: a dictionary with optional ``min``, ``max``,
      ``timeout`` and ``recycle`` keys
    :return: the complete pool settings
    """
    settings = dict(constants.DEFAULT_CONNECTIONS)
    settings.update(connections or {})

    low = settings[constants.MIN_CONNECTIONS]
    high = settings[constants.MAX_CONNECTIONS]
    if not isinstance(low, int) or not isinstance(high, int):
        raise ConfigurationError(loc.BAD_POOL_SIZE % (low, high))
    if low < 0 or high < 1 or low > high:
        raise ConfigurationError(loc.BAD_POOL_SIZE % (low, high))
    return settings
