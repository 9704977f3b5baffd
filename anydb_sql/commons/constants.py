#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Constants"""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import os

from sqlalchemy import (
    JSON,
    BigInteger,
    Boolean,
    CHAR,
    Date,
    DateTime,
    Float,
    Integer,
    LargeBinary,
    Numeric,
    SmallInteger,
    String,
    Text,
    Time,
)

#########
# Naming
#########
# Suffix of primary key column labels, see `naming.column_name`
PRIMARY_KEY_MARKER = '##'
# Suffix of many-valued relation aliases
MANY_MARKER = '[]'
# Separator of table and column names in labels
PATH_SEPARATOR = '.'

##########
# Dialects
##########
# URL scheme to dialect name
SCHEME_DIALECTS = {'sqlite3': 'sqlite'}
# Dialect names missing from the SQLAlchemy registry
DIALECT_ALIASES = {'postgres': 'postgresql'}
SQLITE = 'sqlite'
# Drivers taking named parameters that also accept positional ones
POSITIONAL_PARAMSTYLES = {'pyformat': 'format'}

# Generative operations of wrapped query nodes
QUERY_METHODS = (
    'where',
    'order_by',
    'group_by',
    'having',
    'limit',
    'offset',
    'distinct',
    'join',
    'outerjoin',
    'select_from',
    'add_columns',
    'with_only_columns',
    'values',
    'returning',
    'add_column',
    'drop_column',
    'rename',
    'rename_column',
    'create',
    'drop',
)

#############
# Data types
#############
DATA_TYPES = {
    'int': Integer,
    'integer': Integer,
    'bigint': BigInteger,
    'smallint': SmallInteger,
    'text': Text,
    'varchar': String,
    'string': String,
    'char': CHAR,
    'boolean': Boolean,
    'bool': Boolean,
    'date': Date,
    'time': Time,
    'timestamp': DateTime,
    'datetime': DateTime,
    'real': Float,
    'float': Float,
    'double': Float,
    'numeric': Numeric,
    'decimal': Numeric,
    'json': JSON,
    'blob': LargeBinary,
}
# Types taking a length, as in `varchar(255)`
SIZED_DATA_TYPES = ('varchar', 'string', 'char')
DATA_TYPE_REGEX = r'^\s*(\w+)\s*(?:\(\s*(\d+)\s*\))?\s*$'

###############
# Configuration
###############
CONFIG_FILENAME = 'anydb_sql.json'
CONFIG_ENV_VAR = 'ANYDB_SQL_CONFIG'
CONFIG_LOCATION = os.path.abspath(CONFIG_FILENAME)
URL = 'url'
CONNECTIONS = 'connections'
MIN_CONNECTIONS = 'min'
MAX_CONNECTIONS = 'max'
POOL_TIMEOUT = 'timeout'
POOL_RECYCLE = 'recycle'
DEFAULT_CONNECTIONS = {
    MIN_CONNECTIONS: 1,
    MAX_CONNECTIONS: 5,
    POOL_TIMEOUT: 30,
    POOL_RECYCLE: -1,
}
DEFAULT_CONFIG = {
    URL: 'sqlite3://',
    CONNECTIONS: DEFAULT_CONNECTIONS,
}

# sqlite connections wait this long on a locked database, in milliseconds
SQLITE_BUSY_TIMEOUT_MS = 5000
SQLITE_MEMORY = ':memory:'
