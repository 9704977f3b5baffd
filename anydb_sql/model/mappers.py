#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Row mappers for :meth:`anydb_sql.model.query.ExtendedQuery.all_object`.

A mapper turns a result row into the value stored under the row key.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

from typing import Callable, Iterable, Mapping


class RowMapper:
    """Interface of row mappers."""

    def shape(self, row: Mapping, key_column: str):
        raise NotImplementedError


class Default(RowMapper):
    """Use every column except the key one.

    No other column gives ``None``, a single one gives its value,
    more give a dictionary of them.
    """

    def shape(self, row, key_column):
        names = [name for name in row if name != key_column]
        if not names:
            return None
        if len(names) == 1:
            return row[names[0]]
        return {name: row[name] for name in names}


class ByColumn(RowMapper):
    """Use the value of a single column."""

    def __init__(self, column: str):
        self.column = column

    def shape(self, row, key_column):
        return row.get(self.column)

    def __repr__(self):
        return f'ByColumn({self.column!r})'


class ByColumnList(RowMapper):
    """Use a dictionary restricted to some columns.

    Columns missing from the row map to ``None``.
    """

    def __init__(self, columns: Iterable[str]):
        self.columns = tuple(columns)

    def shape(self, row, key_column):
        return {column: row.get(column) for column in self.columns}

    def __repr__(self):
        return f'ByColumnList({list(self.columns)!r})'


class ByFunction(RowMapper):
    """Use the result of a function of the row."""

    def __init__(self, function: Callable[[Mapping], object]):
        self.function = function

    def shape(self, row, key_column):
        return self.function(row)

    def __repr__(self):
        return f'ByFunction({self.function!r})'
