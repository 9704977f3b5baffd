#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Localization keys"""

# Exceptions
FAIL_LOAD_SQLITE_POOL = 'Unable to load sqlite pool: %s'
FAIL_CREATE_POOL = 'Unable to create a connection pool for %s: %s'
FAIL_LOAD_CONFIG = 'Unable to load configuration file %s: %s'
MISSING_URL = 'No database URL in configuration'
MISSING_TABLE_NAME = 'Table definitions need a name'
MISSING_COLUMNS = "Table '%s' has no columns"
UNKNOWN_DATA_TYPE = "Unknown data type '%s' for column '%s.%s'"
BAD_COLUMN = "Bad column definition in table '%s': %r"
BAD_RELATION = "Relation '%s.%s' has no target model"
RESERVED_RELATION = "Relation '%s.%s' would hide the table attribute of the same name"
BAD_CONTEXT = (
    'Expected a connection context with a query method, got %r. '
    'Use all(callback) to run on the database'
)
BAD_POOL_SIZE = 'Bad pool size: min=%s max=%s'
DATABASE_CLOSED = 'The database is closed'
TRANSACTION_DONE = 'The transaction was already committed or rolled back'
CONNECTION_CLOSED = 'The connection is closed'
UNSUPPORTED_PROJECTION = 'Cannot build a projection out of %r'
UNBOUND_PROJECTION = 'No table owns the column expression %r'
UNSUPPORTED_INDEX_LISTING = "Listing indexes is not supported by the '%s' dialect"
UNKNOWN_DIALECT = "Unknown SQL dialect '%s'"

# Log messages
POOL_OPEN = 'Opened %s connection pool'
POOL_ALREADY_OPEN = 'Connection pool already open, skipping'
POOL_CLOSED = 'Closed %s connection pool'
QUERY_SENT = 'Query `%s` with params %s'
QUERY_FAILED = 'Query failed: %s'
MODEL_DEFINED = "Defined model '%s' with %d columns and relations %s"
RELATION_RESOLVED = "Resolved relation '%s' to model '%s' as '%s'"
