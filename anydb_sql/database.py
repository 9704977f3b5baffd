#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Database handle: schema definition, connection pool, raw queries.

Sample usage::

    db = Database('sqlite3:///blog.db')
    users = db.define({
        'name': 'users',
        'columns': [
            {'name': 'id', 'data_type': 'integer', 'primary_key': True},
            {'name': 'name', 'data_type': 'text'},
        ],
        'has': {'posts': {'from': 'posts', 'many': True}},
    })
    users.select().where(users.id == 1).get(on_user)
    db.close()
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import logging
from typing import Callable, Optional, Union

from anydb_sql.commons import config
from anydb_sql.commons import constants
from anydb_sql.commons import localizations as loc
from anydb_sql.commons.errors import ConfigurationError, DatabaseClosedError
from anydb_sql.model import naming
from anydb_sql.model.store import ModelStore
from anydb_sql.model.table import ExtendedTable
from anydb_sql.pools.context import ConnectionContext, complete
from anydb_sql.pools.selection import extract_dialect, open_pool
from anydb_sql.sql.builder import StatementBuilder

LOGGER = logging.getLogger(__name__)


class Database(ConnectionContext):
    """Owns the models of a schema and the connection pool of a database.

    The handle is itself a connection context: queries sent to it go
    through the pool, and fail once the database is closed.

    :param url: a database URL; its scheme selects the SQL dialect
    :param connections: pool settings, see
      :func:`anydb_sql.commons.config.pool_settings`
    :raises InitializationError: when the pool cannot be opened
    """

    closed_message = loc.DATABASE_CLOSED

    def __init__(self, url: str, connections: Optional[dict] = None):
        self.url = url
        self.connections = config.pool_settings(connections)
        self.dialect = extract_dialect(url)
        self.builder = StatementBuilder(self.dialect)
        self.models = ModelStore()
        self.pool = None
        self.open()

    @classmethod
    def from_config(cls, source: Union[str, dict, None] = None) -> 'Database':
        """Open a database from a configuration dictionary or file.

        :param source: a dictionary, a JSON file path, or ``None`` to use
          :func:`anydb_sql.commons.config.load` defaults
        """
        if isinstance(source, dict):
            settings = config.validate(source)
        else:
            settings = config.load(source)
        return cls(settings[constants.URL], settings[constants.CONNECTIONS])

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        state = 'closed' if self.closed else 'open'
        return f'<Database {self.dialect} {state}>'

    # Pool lifecycle

    def open(self) -> None:
        """Open the connection pool, unless it is already open."""
        if self.pool is not None:
            LOGGER.debug(loc.POOL_ALREADY_OPEN)
            return
        self.pool = open_pool(self.url, self.connections)

    def close(self, callback: Optional[Callable] = None) -> None:
        """Close the connection pool. Later queries fail until :meth:`open`."""
        pool, self.pool = self.pool, None
        if pool is None:
            complete(callback, None)
            return
        pool.close(callback)

    @property
    def closed(self) -> bool:
        return self.pool is None or self.pool.closed

    def _execute(self, text, params):
        return self.pool._execute(text, params)

    def begin(self, callback: Optional[Callable] = None):
        """Start a transaction on a connection of the pool.

        :param callback: ``callback(error, transaction)``
        :return: a :class:`~anydb_sql.pools.context.Transaction`
        """
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        return self.pool.begin(callback)

    def connect(self, callback: Optional[Callable] = None):
        """Check out a single connection of the pool.

        :return: a :class:`~anydb_sql.pools.context.Connection`
        """
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        return self.pool.connect(callback)

    # Schema

    def define(self, table_config: dict) -> ExtendedTable:
        """Define a table and register it as a model.

        :param table_config: ``name``, ``columns``, and optional
          ``schema`` and ``has`` relations. See
          :meth:`anydb_sql.sql.builder.StatementBuilder.define` and
          :mod:`anydb_sql.model.table`
        :return: the new model
        """
        table = self.builder.define(table_config)
        try:
            model = ExtendedTable(self, table, table_config)
        except ConfigurationError:
            self.builder.metadata.remove(table)
            raise
        self.models.register(table_config['name'], model)
        LOGGER.debug(
            loc.MODEL_DEFINED,
            model.model_name,
            len(model.columns),
            sorted(model.relations),
        )
        return model

    def all_of(self, *items) -> list:
        """See :func:`anydb_sql.model.naming.all_of`."""
        return naming.all_of(*items)
