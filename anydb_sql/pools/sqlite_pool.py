#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Connection pool tuned for sqlite.

In-memory databases live as long as their connection, so they get a single
shared one. File databases get a regular pool. Every connection enforces
foreign keys and waits on locked databases instead of failing right away.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import logging
import sqlite3  # noqa: F401, fail early when Python lacks sqlite support

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.pool import QueuePool, StaticPool

from anydb_sql.commons import constants
from anydb_sql.pools.context import Pool

LOGGER = logging.getLogger(__name__)


def is_memory(url) -> bool:
    return make_url(url).database in (None, '', constants.SQLITE_MEMORY)


def create_pool(url: str, connections: dict) -> Pool:
    """Create a pool for a ``sqlite://`` URL.

    :param url: a SQLAlchemy sqlite URL
    :param connections: pool settings, see
      :func:`anydb_sql.commons.config.pool_settings`
    :return: an open :class:`~anydb_sql.pools.context.Pool`
    """
    connect_args = {
        'check_same_thread': False,
        'timeout': constants.SQLITE_BUSY_TIMEOUT_MS / 1000,
    }
    if is_memory(url):
        LOGGER.debug('In-memory sqlite database, sharing a single connection')
        engine = create_engine(url, poolclass=StaticPool, connect_args=connect_args)
    else:
        engine = create_engine(
            url,
            poolclass=QueuePool,
            pool_size=connections[constants.MAX_CONNECTIONS],
            max_overflow=0,
            pool_timeout=connections[constants.POOL_TIMEOUT],
            pool_recycle=connections[constants.POOL_RECYCLE],
            connect_args=connect_args,
        )
    event.listen(engine, 'connect', _apply_pragmas)
    return Pool(engine, constants.SQLITE)


def _apply_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.execute('PRAGMA busy_timeout=%d' % constants.SQLITE_BUSY_TIMEOUT_MS)
    finally:
        cursor.close()
