#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Statement builder based on
`SQLAlchemy Core <https://docs.sqlalchemy.org/en/20/core/>`_.

Turns table definitions into :class:`~sqlalchemy.Table` objects and
renders query nodes into SQL text plus parameters for a given dialect.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import inspect
import logging
import re
from collections import namedtuple
from typing import Union

from sqlalchemy import Column, MetaData, Table
from sqlalchemy.engine import URL
from sqlalchemy.exc import ArgumentError, NoSuchModuleError
from sqlalchemy.types import TypeEngine

from anydb_sql.commons import constants
from anydb_sql.commons import localizations as loc
from anydb_sql.commons.errors import ConfigurationError, InitializationError

LOGGER = logging.getLogger(__name__)

RenderedQuery = namedtuple('RenderedQuery', ['text', 'params'])

# Keyword arguments of `sqlalchemy.Column` allowed in column definitions
COLUMN_OPTIONS = (
    'primary_key',
    'nullable',
    'unique',
    'index',
    'default',
    'server_default',
    'autoincrement',
    'comment',
)


def load_dialect(name: str):
    """Build a SQLAlchemy dialect instance from a dialect name.

    The DB-API driver is loaded when available, so that features depending
    on the driver version are enabled. Drivers using ``pyformat``
    parameters render positional ``format`` ones instead.

    :param name: a dialect name, optionally with a driver, as in
      ``postgresql+psycopg2``
    :return: a :class:`~sqlalchemy.engine.Dialect` instance
    """
    name = constants.DIALECT_ALIASES.get(name, name)
    try:
        dialect_class = URL.create(name).get_dialect()
    except (ArgumentError, NoSuchModuleError) as error:
        raise InitializationError(loc.UNKNOWN_DIALECT % name) from error

    kwargs = {}
    paramstyle = constants.POSITIONAL_PARAMSTYLES.get(
        dialect_class.default_paramstyle
    )
    if paramstyle is not None:
        kwargs['paramstyle'] = paramstyle
    try:
        kwargs['dbapi'] = dialect_class.import_dbapi()
    except (ImportError, NotImplementedError):
        LOGGER.debug('No DB-API driver for %s, rendering without it', name)
    return dialect_class(**kwargs)


class StatementBuilder:
    """Define tables and render statements for one dialect."""

    def __init__(self, dialect_name: str):
        self.dialect_name = dialect_name
        self.dialect = load_dialect(dialect_name)
        self.metadata = MetaData()

    def define(self, config: dict) -> Table:
        """Create a table out of a definition.

        :param config: a dictionary with ``name``, ``columns`` and an
          optional ``schema``. See :meth:`column` for column definitions
        :return: the new table, bound to this builder's metadata
        """
        name = config.get('name')
        if not name:
            raise ConfigurationError(loc.MISSING_TABLE_NAME)
        columns = [self.column(name, spec) for spec in config.get('columns') or ()]
        if not columns:
            raise ConfigurationError(loc.MISSING_COLUMNS % name)
        return Table(name, self.metadata, *columns, schema=config.get('schema'))

    def column(self, table_name: str, spec: Union[str, dict, Column]) -> Column:
        """Create a column out of a definition.

        A definition is either a column name, a ready
        :class:`~sqlalchemy.Column`, or a dictionary with ``name``, an
        optional ``data_type`` and any of :data:`COLUMN_OPTIONS`.
        """
        if isinstance(spec, Column):
            return spec
        if isinstance(spec, str):
            return Column(spec)
        if not isinstance(spec, dict) or not spec.get('name'):
            raise ConfigurationError(loc.BAD_COLUMN % (table_name, spec))

        name = spec['name']
        data_type = self.data_type(spec.get('data_type'), table_name, name)
        options = {key: spec[key] for key in COLUMN_OPTIONS if key in spec}
        if data_type is None:
            return Column(name, **options)
        return Column(name, data_type, **options)

    @staticmethod
    def data_type(value, table_name=None, column_name=None):
        """Resolve a column data type.

        :param value: ``None``, a SQLAlchemy type class or instance,
          or a type name such as ``varchar(255)``
        :return: a SQLAlchemy type, or ``None`` for untyped columns
        """
        if value is None:
            return None
        if isinstance(value, TypeEngine):
            return value
        if inspect.isclass(value) and issubclass(value, TypeEngine):
            return value()

        match = re.match(constants.DATA_TYPE_REGEX, str(value))
        type_name = match.group(1).lower() if match else None
        if type_name not in constants.DATA_TYPES:
            raise ConfigurationError(
                loc.UNKNOWN_DATA_TYPE % (value, table_name, column_name)
            )
        type_class = constants.DATA_TYPES[type_name]
        length = match.group(2)
        if length and type_name in constants.SIZED_DATA_TYPES:
            return type_class(int(length))
        return type_class()

    def render(self, node) -> RenderedQuery:
        """Render a SQLAlchemy statement.

        Expanding parameters, as in ``column.in_([1, 2])``, are rendered
        as individual placeholders.

        :param node: any executable SQLAlchemy construct
        :return: SQL text and parameters; parameters are a list for
          positional dialects, a dictionary otherwise
        """
        compiled = node.compile(
            dialect=self.dialect, compile_kwargs={'render_postcompile': True}
        )
        params = compiled.construct_params() or {}
        if getattr(compiled, 'positional', False):
            positions = getattr(compiled, 'positiontup', None) or ()
            return RenderedQuery(str(compiled), [params[name] for name in positions])
        return RenderedQuery(str(compiled), dict(params))
