#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Tables extended with relations.

An :class:`ExtendedTable` wraps a :class:`~sqlalchemy.Table` (or an alias
of it) and turns every statement it builds into an
:class:`~anydb_sql.model.query.ExtendedQuery`.

Relations are declared by name when defining a table::

    users = db.define({
        'name': 'users',
        'columns': [{'name': 'id', 'data_type': 'integer', 'primary_key': True}],
        'has': {'posts': {'from': 'posts', 'many': True}},
    })

and show up as attributes: ``users.posts`` is the ``posts`` table aliased
as ``users.posts[]``.
"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import logging
from collections import namedtuple

import sqlalchemy as sa
from sqlalchemy.schema import CreateTable, DropTable
from sqlalchemy.sql.expression import Alias

from anydb_sql.commons import localizations as loc
from anydb_sql.commons.constants import MANY_MARKER, PATH_SEPARATOR
from anydb_sql.commons.errors import ConfigurationError
from anydb_sql.commons.events import Events
from anydb_sql.model.query import ExtendedQuery
from anydb_sql.sql.ddl import AlterTable, Indexes

LOGGER = logging.getLogger(__name__)

# `target` is a model name or a model
RelationSpec = namedtuple('RelationSpec', ['target', 'many'])

# Set in `ExtendedTable.__init__`, relations cannot take these names
INSTANCE_ATTRIBUTES = ('base', 'config', 'origin', 'relations', 'events')


def relation_spec(owner: str, name: str, spec) -> RelationSpec:
    """Build a relation out of a ``{'from': ..., 'many': ...}`` declaration."""
    if isinstance(spec, RelationSpec):
        return spec
    target = spec.get('from') if isinstance(spec, dict) else None
    if target is None:
        raise ConfigurationError(loc.BAD_RELATION % (owner, name))
    return RelationSpec(target, bool(spec.get('many', False)))


class ExtendedTable:
    """A table with relation attributes and query building shortcuts.

    Column attributes are also available, so ``users.email`` is
    ``users.c.email``. Methods and relations take precedence over
    columns of the same name.

    :param db: the owning :class:`~anydb_sql.database.Database`
    :param base: a table or an alias of it
    :param config: the table definition
    :param origin: the registered model this one is an alias of
    """

    def __init__(self, db, base, config: dict, origin=None):
        self._db = db
        self.base = base
        self.config = config
        self.origin = self if origin is None else origin
        if origin is None:
            self.relations = {
                name: relation_spec(config['name'], name, spec)
                for name, spec in (config.get('has') or {}).items()
            }
            for name in self.relations:
                if (
                    name.startswith('_')
                    or name in INSTANCE_ATTRIBUTES
                    or hasattr(type(self), name)
                ):
                    raise ConfigurationError(
                        loc.RESERVED_RELATION % (config['name'], name)
                    )
        else:
            self.relations = origin.relations
        # Available to collaborators, nothing is emitted from here
        self.events = Events()
        self._resolved = {}

    @property
    def name(self) -> str:
        """The alias if any, the table name otherwise."""
        return self.base.name

    @property
    def alias_name(self):
        return self.base.name if isinstance(self.base, Alias) else None

    @property
    def model_name(self) -> str:
        return self.config['name']

    @property
    def table(self) -> sa.Table:
        """The underlying table, even for aliases."""
        return self.origin.base

    @property
    def c(self):
        return self.base.c

    @property
    def columns(self) -> list:
        return list(self.base.columns)

    @property
    def primary_key(self) -> list:
        return list(self.base.primary_key)

    def __clause_element__(self):
        return self.base

    def __getattr__(self, name):
        if name.startswith('__'):
            raise AttributeError(name)
        relations = self.__dict__.get('relations')
        if relations and name in relations:
            return self.relation(name)
        base = self.__dict__.get('base')
        if base is not None and name in base.c:
            return base.c[name]
        raise AttributeError(
            f'{type(self).__name__!r} object has no attribute {name!r}'
        )

    def __repr__(self):
        if self.alias_name is None:
            return f'<ExtendedTable {self.model_name}>'
        return f'<ExtendedTable {self.model_name} as {self.alias_name}>'

    def as_(self, alias: str) -> 'ExtendedTable':
        """Alias this table, keeping its relations."""
        return ExtendedTable(self._db, self.table.alias(alias), self.config, self.origin)

    def relation(self, name: str) -> 'ExtendedTable':
        """Resolve a relation.

        The target is aliased as ``<this table>.<relation>``, with ``[]``
        appended to many-valued relations. The result is computed once
        per table instance.

        :raises ReferenceNotFound: when the target model is not defined
        """
        if name not in self._resolved:
            spec = self.relations[name]
            target = spec.target
            if isinstance(target, str):
                target = self._db.models.lookup(
                    target, owner=self.model_name + PATH_SEPARATOR + name
                )
            alias = self.name + PATH_SEPARATOR + name
            if spec.many:
                alias += MANY_MARKER
            self._resolved[name] = target.as_(alias)
            LOGGER.debug(loc.RELATION_RESOLVED, name, target.model_name, alias)
        return self._resolved[name]

    # Statement builders

    def _query(self, node) -> ExtendedQuery:
        return ExtendedQuery(self._db, node)

    def select(self, *columns) -> ExtendedQuery:
        """``SELECT`` the given columns, or the whole table, from this table."""
        if not columns:
            columns = (self.base,)
        return self._query(sa.select(*columns).select_from(self.base))

    def from_(self, *froms) -> ExtendedQuery:
        """Start a ``SELECT`` with no columns from the given tables or joins."""
        return self._query(sa.select().select_from(*froms))

    def where(self, *criteria) -> ExtendedQuery:
        return self._query(sa.select(self.base).where(*criteria))

    def insert(self, *args, **values) -> ExtendedQuery:
        """``INSERT`` a row, given as keywords or a dictionary, or many rows,
        given as a list of dictionaries.
        """
        statement = sa.insert(self.base)
        if args or values:
            statement = statement.values(*args, **values)
        return self._query(statement)

    def update(self, *args, **values) -> ExtendedQuery:
        statement = sa.update(self.base)
        if args or values:
            statement = statement.values(*args, **values)
        return self._query(statement)

    def delete(self, *criteria) -> ExtendedQuery:
        statement = sa.delete(self.base)
        if criteria:
            statement = statement.where(*criteria)
        return self._query(statement)

    def create(self, if_not_exists=False) -> ExtendedQuery:
        return self._query(CreateTable(self.table, if_not_exists=if_not_exists))

    def drop(self, if_exists=False) -> ExtendedQuery:
        return self._query(DropTable(self.table, if_exists=if_exists))

    def alter(self) -> ExtendedQuery:
        return self._query(AlterTable(self.table))

    def indexes(self) -> ExtendedQuery:
        return self._query(Indexes(self.table))

    # Joins, to be used with `from_`

    def join(self, other, onclause=None) -> sa.Join:
        return sa.join(self.base, other, onclause)

    def outer_join(self, other, onclause=None) -> sa.Join:
        return sa.outerjoin(self.base, other, onclause)
