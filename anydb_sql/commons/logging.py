#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Logging facility"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import json
import logging
import logging.config
import os

from anydb_sql.commons import localizations as loc

LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'WARN': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}
CONFIG_FILE_PATH = os.path.abspath(os.path.join('logging.json'))
DEFAULT_CONFIG = {
    'version': 1,
    'disable_existing_loggers': False,
    'loggers': {
        '': {
            'level': 'WARNING',
            'handlers': ['console', 'debug_file_handler']
        },
        'anydb_sql': {
            'level': 'INFO',
        },
        'sqlalchemy.engine': {
            'level': 'WARNING',
        },
    },
    'formatters': {
        'anydb_sql': {
            'format': '%(asctime)s [%(levelname)s] %(module)s.%(funcName)s #%(lineno)d - %(message)s'
        }
    },
    'handlers': {
        'console': {
            'formatter': 'anydb_sql',
            'class': 'logging.StreamHandler',
            'stream': 'ext://sys.stderr',
            'level': 'INFO'
        },
        'debug_file_handler': {
            'formatter': 'anydb_sql',
            'level': 'DEBUG',
            'filename': 'debug.log',
            'mode': 'w',
            'class': 'logging.FileHandler',
            'encoding': 'utf8',
            'delay': True
        }
    }
}


def setup():
    """Set up logging via a config file if available or via the default configuration."""
    if os.path.exists(CONFIG_FILE_PATH):
        with open(CONFIG_FILE_PATH) as config_file:
            logging.config.dictConfig(json.load(config_file))
    else:
        logging.config.dictConfig(DEFAULT_CONFIG)


def set_log_level(module, level):
    """Set the log level used to log messages from the given module."""
    if level in LEVELS:
        module = '' if module == 'root' else module
        logging.getLogger(module).setLevel(level)


def log_query(logger, text, params):
    """Send a debug log message with a rendered statement.

    :param logger: the logger of the calling module
    :param text: SQL text
    :param params: statement parameters
    """
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(loc.QUERY_SENT, text, json.dumps(params, default=str))
