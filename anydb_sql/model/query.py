#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Queries extended with execution and result shaping.

An :class:`ExtendedQuery` wraps an immutable SQLAlchemy statement. Every
builder method returns a new extended query, so a query can be extended,
rendered and executed any number of times.

Execution methods take an optional ``callback(error, result)``, called
exactly once. Without a callback, they return the result and raise
:class:`~anydb_sql.commons.errors.QueryError` on failure.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import logging
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from anydb_sql.commons import localizations as loc
from anydb_sql.commons import logging as query_logging
from anydb_sql.commons.constants import QUERY_METHODS
from anydb_sql.commons.errors import AnyDBError, in_query
from anydb_sql.commons.rows import normalize
from anydb_sql.model.mappers import Default, RowMapper

LOGGER = logging.getLogger(__name__)


def _accept_all(row):
    return True


def _failure(error, text=None, params=None):
    LOGGER.warning(loc.QUERY_FAILED, error)
    failure = in_query(error, text, params)
    failure.__cause__ = error
    return failure


class ExtendedQuery:
    """A statement bound to a database.

    Besides :meth:`select`, :meth:`from_` and :meth:`where`, the
    generative methods of the wrapped statement listed in
    :data:`~anydb_sql.commons.constants.QUERY_METHODS` are available and
    return extended queries too, e.g. ``order_by`` or ``limit``.

    :param db: the owning :class:`~anydb_sql.database.Database`
    :param node: a SQLAlchemy executable construct
    """

    def __init__(self, db, node):
        self._db = db
        self.node = node

    def __getattr__(self, name):
        if name in QUERY_METHODS:
            method = getattr(self.__dict__['node'], name)

            def forward(*args, **kwargs):
                return self._chain(method(*args, **kwargs))

            forward.__name__ = name
            return forward
        raise AttributeError(
            f'{type(self).__name__!r} object has no attribute {name!r}'
        )

    def __clause_element__(self):
        return self.node

    def __str__(self):
        return self.to_query().text

    def __repr__(self):
        return f'<ExtendedQuery {type(self.node).__name__}>'

    def _chain(self, node) -> 'ExtendedQuery':
        if isinstance(node, ExtendedQuery):
            return node
        return ExtendedQuery(self._db, node)

    # Builders

    def select(self, *columns) -> 'ExtendedQuery':
        """Add columns to the projection."""
        return self._chain(self.node.add_columns(*columns))

    def from_(self, *froms) -> 'ExtendedQuery':
        return self._chain(self.node.select_from(*froms))

    def where(self, *criteria) -> 'ExtendedQuery':
        return self._chain(self.node.where(*criteria))

    def select_deep(self, *models) -> 'ExtendedQuery':
        """Add every column of the given models, labelled with
        :func:`~anydb_sql.model.naming.all_of`.
        """
        return self.select(*self._db.all_of(*models))

    def to_query(self):
        """Render the statement.

        :return: a :class:`~anydb_sql.sql.builder.RenderedQuery`
        """
        return self._db.builder.render(self.node)

    # Execution

    def exec_within(self, context, callback: Optional[Callable] = None):
        """Execute the statement through a connection context.

        :param context: a pool, connection or transaction
        :param callback: ``callback(error, rows)``; ``rows`` are
          normalized dictionaries, ``None`` for statements returning no rows
        :return: the context result when no callback is given
        """
        try:
            query = self.to_query()
        except SQLAlchemyError as error:
            failure = _failure(error)
        else:
            failure = None
        if failure is not None:
            if callback is None:
                raise failure
            return callback(failure, None)

        query_logging.log_query(LOGGER, query.text, query.params)

        if callback is None:
            try:
                return context.query(query.text, query.params)
            except (SQLAlchemyError, AnyDBError) as error:
                raise _failure(error, query.text, query.params) from error

        def on_result(error, result):
            if error is not None:
                return callback(_failure(error, query.text, query.params), None)
            rows = None
            if result is not None and result.rows is not None:
                rows = [normalize(row) for row in result.rows]
            return callback(None, rows)

        return context.query(query.text, query.params, on_result)

    def exec(self, context=None, callback: Optional[Callable] = None):
        """Execute the statement, by default through the shared pool.

        The callback comes second: use :meth:`all` to pass only a
        callback. See :meth:`exec_within`.

        :raises TypeError: when ``context`` is not a connection context
        """
        if context is None:
            context = self._db
        elif not callable(getattr(context, 'query', None)):
            raise TypeError(loc.BAD_CONTEXT % (context,))
        return self.exec_within(context, callback)

    def all(self, callback: Optional[Callable] = None):
        return self.exec_within(self._db, callback)

    def get(self, callback: Callable):
        """Execute the statement and pass the first row, or ``None``, to
        ``callback(error, row)``.
        """

        def first(error, rows):
            return callback(error, rows[0] if rows else None)

        return self.all(first)

    def all_object(
        self,
        key_column: str,
        callback: Callable,
        mapper: Optional[RowMapper] = None,
        row_filter: Optional[Callable] = None,
    ):
        """Execute the statement and pass a dictionary of shaped rows,
        keyed by ``key_column``, to ``callback(error, result)``.

        With duplicate keys, the last row wins.

        :param key_column: the column holding the keys
        :param callback: called with an error only, or ``None`` and the result
        :param mapper: a :class:`~anydb_sql.model.mappers.RowMapper`,
          :class:`~anydb_sql.model.mappers.Default` if omitted
        :param row_filter: a function of the row telling whether to keep it
        """
        mapper = Default() if mapper is None else mapper
        row_filter = _accept_all if row_filter is None else row_filter

        def shape(error, rows):
            if error is not None:
                return callback(error)
            result = {}
            for row in rows or ():
                if row_filter(row):
                    result[row[key_column]] = mapper.shape(row, key_column)
            return callback(None, result)

        return self.all(shape)
