#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Connection contexts: a pool, a single connection or a transaction.

They share the ``query(text, params=None, callback=None)`` contract.
SQL text is sent to the DB-API driver as is, with positional parameters
as a sequence or named parameters as a mapping.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import logging
from collections import namedtuple
from typing import Callable, Optional

from sqlalchemy.engine import Connection as SAConnection
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from anydb_sql.commons import localizations as loc
from anydb_sql.commons.errors import DatabaseClosedError

LOGGER = logging.getLogger(__name__)


class QueryResult(namedtuple('QueryResult', ['rows', 'rowcount', 'lastrowid'])):
    """The materialized outcome of a statement.

    ``rows`` is a list of dictionaries, ``None`` for statements that
    return no rows.
    """

    __slots__ = ()

    @classmethod
    def from_cursor(cls, cursor) -> 'QueryResult':
        if cursor.returns_rows:
            rows = [dict(row) for row in cursor.mappings()]
            return cls(rows, cursor.rowcount, None)
        try:
            lastrowid = cursor.lastrowid
        except (AttributeError, SQLAlchemyError):
            # Not every driver tracks it
            lastrowid = None
        return cls(None, cursor.rowcount, lastrowid)


def _driver_params(params):
    # A list would be taken for many parameter sets
    if isinstance(params, list):
        return tuple(params)
    return params or None


def complete(callback, error, result=None):
    """Hand an outcome to a callback, or return it or raise it without one."""
    if callback is None:
        if error is not None:
            raise error
        return result
    callback(error, result)
    return result


class ConnectionContext:
    """Something that runs queries."""

    closed_message = loc.CONNECTION_CLOSED

    @property
    def closed(self) -> bool:
        raise NotImplementedError

    def _execute(self, text: str, params) -> QueryResult:
        raise NotImplementedError

    def query(self, text: str, params=None, callback: Optional[Callable] = None):
        """Run a statement.

        :param text: SQL text in the driver's parameter style
        :param params: a sequence or a mapping of parameters
        :param callback: ``callback(error, result)``, called exactly once
        :return: a :class:`QueryResult`, ``None`` on error with a callback
        :raises sqlalchemy.exc.SQLAlchemyError: on error without a callback
        """
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        try:
            result = self._execute(text, _driver_params(params))
        except SQLAlchemyError as error:
            if callback is None:
                raise
            LOGGER.debug(loc.QUERY_FAILED, error)
            return complete(callback, error)
        return complete(callback, None, result)


class Connection(ConnectionContext):
    """A single connection checked out of a pool.

    Every statement is committed on success and rolled back on failure.
    """

    def __init__(self, connection: SAConnection):
        self.connection = connection

    @property
    def closed(self) -> bool:
        return self.connection is None or self.connection.closed

    def _execute(self, text, params):
        try:
            result = QueryResult.from_cursor(
                self.connection.exec_driver_sql(text, params)
            )
        except SQLAlchemyError:
            self.connection.rollback()
            raise
        self.connection.commit()
        return result

    def begin(self, callback: Optional[Callable] = None) -> 'Transaction':
        """Start a transaction on this connection.

        The connection is released when the transaction ends.
        """
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        transaction = Transaction(self.connection)
        self.connection = None
        return complete(callback, None, transaction)

    def close(self, callback: Optional[Callable] = None) -> None:
        if self.connection is not None:
            self.connection.close()
            self.connection = None
        complete(callback, None)


class Transaction(Connection):
    """A connection running a single transaction.

    Queries are not committed until :meth:`commit`. Once committed or
    rolled back, the transaction releases its connection and rejects
    further queries.
    """

    closed_message = loc.TRANSACTION_DONE

    def __init__(self, connection: SAConnection):
        super().__init__(connection)
        self.transaction = connection.begin()

    def _execute(self, text, params):
        return QueryResult.from_cursor(self.connection.exec_driver_sql(text, params))

    def begin(self, callback: Optional[Callable] = None) -> 'Transaction':
        # Transactions do not nest
        return complete(callback, None, self)

    def commit(self, callback: Optional[Callable] = None) -> None:
        self._end(self.transaction.commit, callback)

    def rollback(self, callback: Optional[Callable] = None) -> None:
        self._end(self.transaction.rollback, callback)

    def close(self, callback: Optional[Callable] = None) -> None:
        """Roll back the transaction if still open and release the connection."""
        self._end(self.transaction.rollback, callback)

    def _end(self, finish, callback):
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        try:
            finish()
        except SQLAlchemyError as error:
            self._release()
            return complete(callback, error)
        self._release()
        return complete(callback, None)

    def _release(self):
        self.connection.close()
        self.connection = None


class Pool(ConnectionContext):
    """A pool of connections around a SQLAlchemy engine.

    Every statement runs on a connection of its own and is committed
    right away.
    """

    closed_message = loc.DATABASE_CLOSED

    def __init__(self, engine: Engine, name: str = None):
        self.engine = engine
        self.name = name or engine.dialect.name

    @property
    def closed(self) -> bool:
        return self.engine is None

    def _execute(self, text, params):
        with self.engine.begin() as connection:
            return QueryResult.from_cursor(connection.exec_driver_sql(text, params))

    def connect(self, callback: Optional[Callable] = None) -> Connection:
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        try:
            connection = Connection(self.engine.connect())
        except SQLAlchemyError as error:
            return complete(callback, error)
        return complete(callback, None, connection)

    def begin(self, callback: Optional[Callable] = None) -> Transaction:
        """Check out a connection and start a transaction on it.

        :param callback: ``callback(error, transaction)``
        :return: the :class:`Transaction`
        """
        if self.closed:
            return complete(callback, DatabaseClosedError(self.closed_message))
        try:
            transaction = Transaction(self.engine.connect())
        except SQLAlchemyError as error:
            return complete(callback, error)
        return complete(callback, None, transaction)

    def close(self, callback: Optional[Callable] = None) -> None:
        """Dispose of every pooled connection. The pool cannot be reused."""
        if self.engine is not None:
            self.engine.dispose()
            self.engine = None
            LOGGER.info(loc.POOL_CLOSED, self.name)
        complete(callback, None)
