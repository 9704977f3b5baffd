#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Column labels for projections spanning several tables.

Every column is labelled ``<table>.<column>``, where ``<table>`` is the
alias or the name of the table owning it. Primary key labels end with
``##``, so that rows can be grouped by entity once unflattened.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

from typing import List

from sqlalchemy.sql import visitors
from sqlalchemy.sql.elements import ColumnClause, ColumnElement, Label
from sqlalchemy.sql.expression import Alias, TableClause

from anydb_sql.commons import localizations as loc
from anydb_sql.commons.constants import PATH_SEPARATOR, PRIMARY_KEY_MARKER
from anydb_sql.model.table import ExtendedTable


def column_name(column) -> str:
    """Return the name of a column, with ``##`` appended to primary keys."""
    name = column.name
    if getattr(column, 'primary_key', False):
        name = name + PRIMARY_KEY_MARKER
    return name


def owning_table(expression: ColumnElement):
    """Find the table of the first column an expression refers to.

    :return: a table or an alias, ``None`` if the expression has no columns
    """
    for element in visitors.iterate(expression):
        if isinstance(element, ColumnClause) and element.table is not None:
            return element.table
    return None


def all_of(*items) -> List[Label]:
    """Build a projection out of tables and single columns.

    :param items: extended tables, plain SQLAlchemy tables or aliases,
      table columns and computed columns such as
      ``func.count(users.id).label('total')``
    :return: labelled columns, in argument order then declaration order
    :raises TypeError: for arguments that are neither tables nor
      columns bound to a table
    """
    projection = []
    for item in items:
        if isinstance(item, ExtendedTable):
            projection.extend(_labelled(item.name, item.columns))
        elif isinstance(item, (TableClause, Alias)):
            projection.extend(_labelled(item.name, item.columns))
        elif isinstance(item, ColumnElement):
            table = owning_table(item)
            if table is None or getattr(item, 'name', None) is None:
                raise TypeError(loc.UNBOUND_PROJECTION % (item,))
            expression = item.element if isinstance(item, Label) else item
            label = table.name + PATH_SEPARATOR + column_name(item)
            projection.append(expression.label(label))
        else:
            raise TypeError(loc.UNSUPPORTED_PROJECTION % (item,))
    return projection


def _labelled(table_name, columns):
    return [
        column.label(table_name + PATH_SEPARATOR + column_name(column))
        for column in columns
    ]
