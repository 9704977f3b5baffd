#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Exceptions raised or delivered to callbacks."""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import json


class AnyDBError(Exception):
    """Base class of every error in this package."""


class InitializationError(AnyDBError):
    """The connection pool or its driver could not be loaded."""


class ConfigurationError(AnyDBError):
    """A table definition or a pool configuration is invalid."""


class ReferenceNotFound(AnyDBError):
    """A relation points to a model that was never defined."""

    def __init__(self, name, owner=None):
        self.name = name
        self.owner = owner
        if owner is None:
            message = f"No model named '{name}' is defined"
        else:
            message = (
                f"Relation '{owner}' points to '{name}', "
                'but no model with that name is defined'
            )
        super().__init__(message)


class QueryError(AnyDBError):
    """A statement failed to execute.

    When built with :func:`in_query`, the message carries the SQL text
    and its parameters.
    """

    def __init__(self, message, text=None, params=None):
        super().__init__(message)
        self.text = text
        self.params = params


class DatabaseClosedError(QueryError):
    """A query was sent to a closed pool or a finished transaction."""


def in_query(error, text, params):
    """Build a :class:`QueryError` out of ``error`` for the given statement.

    :param error: the original exception
    :param text: rendered SQL text, ``None`` when rendering failed
    :param params: rendered parameters
    :return: a new error of the same class as ``error`` if it is a
      :class:`QueryError`, a plain :class:`QueryError` otherwise
    """
    if text is None:
        message = '%s while rendering query' % _first_line(error)
    else:
        message = '%s in query `%s` with params %s' % (
            _first_line(error),
            text,
            json.dumps(params, default=str),
        )
    error_class = type(error) if isinstance(error, QueryError) else QueryError
    return error_class(message, text, params)


def _first_line(error):
    # SQLAlchemy appends the statement and a background link to its messages
    lines = str(error).strip().splitlines()
    return lines[0] if lines else error.__class__.__name__
