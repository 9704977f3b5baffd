#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""DDL statements that SQLAlchemy Core does not build:
``ALTER TABLE`` and index management bound to a table.

Each statement is immutable: builder methods return new instances.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

from sqlalchemy import Column, Index, String
from sqlalchemy.exc import CompileError
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.schema import CreateIndex, DropIndex, ExecutableDDLElement

from anydb_sql.commons import localizations as loc

ADD_COLUMN = 'add_column'
DROP_COLUMN = 'drop_column'
RENAME = 'rename'
RENAME_COLUMN = 'rename_column'


class AlterTable(ExecutableDDLElement):
    """``ALTER TABLE`` with one or more actions.

    sqlite accepts a single action per statement.
    """

    inherit_cache = False

    def __init__(self, table, actions=()):
        self.element = table
        self.actions = tuple(actions)

    def _with(self, *action):
        return AlterTable(self.element, self.actions + (action,))

    def add_column(self, column: Column):
        return self._with(ADD_COLUMN, column)

    def drop_column(self, name):
        return self._with(DROP_COLUMN, getattr(name, 'name', name))

    def rename(self, new_name: str):
        return self._with(RENAME, new_name)

    def rename_column(self, old_name, new_name: str):
        return self._with(RENAME_COLUMN, getattr(old_name, 'name', old_name), new_name)


class Indexes(ExecutableDDLElement):
    """Index operations on a table.

    Executed as is, it lists the indexes of the table.
    """

    inherit_cache = False

    def __init__(self, table):
        self.element = table

    def create(self, name: str, *columns, unique=False):
        columns = [
            self.element.c[column] if isinstance(column, str) else column
            for column in columns
        ]
        return CreateIndex(Index(name, *columns, unique=unique))

    def drop(self, name: str):
        return DropIndex(Index(name))


@compiles(AlterTable)
def _compile_alter_table(element, compiler, **kw):
    preparer = compiler.preparer
    clauses = []
    for action, *args in element.actions:
        if action == ADD_COLUMN:
            clauses.append('ADD COLUMN ' + compiler.get_column_specification(args[0]))
        elif action == DROP_COLUMN:
            clauses.append('DROP COLUMN ' + preparer.quote(args[0]))
        elif action == RENAME:
            clauses.append('RENAME TO ' + preparer.quote(args[0]))
        else:
            clauses.append(
                'RENAME COLUMN %s TO %s'
                % (preparer.quote(args[0]), preparer.quote(args[1]))
            )
    if not clauses:
        raise CompileError('ALTER TABLE needs at least one action')
    return 'ALTER TABLE %s %s' % (
        preparer.format_table(element.element),
        ', '.join(clauses),
    )


@compiles(Indexes)
def _compile_indexes(element, compiler, **kw):
    raise CompileError(loc.UNSUPPORTED_INDEX_LISTING % compiler.dialect.name)


@compiles(Indexes, 'sqlite')
def _compile_sqlite_indexes(element, compiler, **kw):
    return 'PRAGMA INDEX_LIST(%s)' % compiler.preparer.format_table(element.element)


@compiles(Indexes, 'postgresql')
def _compile_postgresql_indexes(element, compiler, **kw):
    return 'SELECT indexname, indexdef FROM pg_indexes WHERE tablename = %s' % (
        compiler.sql_compiler.render_literal_value(element.element.name, String())
    )


@compiles(Indexes, 'mysql')
def _compile_mysql_indexes(element, compiler, **kw):
    return 'SHOW INDEX FROM %s' % compiler.preparer.format_table(element.element)
