#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""The command line interface entry point."""

__version__ = '1.0'
__license__ = 'GPL-3.0'

import json
import logging

import click
from sqlalchemy.exc import SQLAlchemyError

from anydb_sql.commons import constants
from anydb_sql.commons import logging as anydb_logging
from anydb_sql.commons.errors import AnyDBError
from anydb_sql.database import Database
from anydb_sql.pools.selection import extract_dialect

LOGGER = logging.getLogger(__name__)

URL_HELP = (
    'Database URL, e.g. sqlite3:///data.db. '
    f'Default: the "url" of {constants.CONFIG_FILENAME} '
    f'or of the file in ${constants.CONFIG_ENV_VAR}.'
)


def _open(url):
    if url is None:
        return Database.from_config()
    return Database(url)


@click.command()
@click.argument('url')
def dialect_cli(url):
    """Print the SQL dialect of a database URL."""
    click.echo(extract_dialect(url))


@click.command()
@click.option('-u', '--url', help=URL_HELP)
@click.argument('sql')
@click.argument('params', nargs=-1)
def query_cli(url, sql, params):
    """Run a raw SQL statement with positional PARAMS.

    Rows are printed as JSON lines, one per row.
    """
    try:
        with _open(url) as db:
            result = db.query(sql, list(params))
    except (AnyDBError, SQLAlchemyError) as error:
        LOGGER.debug('Query failed', exc_info=True)
        raise click.ClickException(str(error).splitlines()[0])

    if result.rows is None:
        click.echo(f'{result.rowcount} row(s) affected')
        return
    for row in result.rows:
        click.echo(json.dumps(row, default=str))


@click.command()
@click.option('-u', '--url', help=URL_HELP)
def check_cli(url):
    """Open and close a connection pool."""
    try:
        with _open(url) as db:
            db.query('SELECT 1')
            click.echo(f'OK: {db.dialect}')
    except (AnyDBError, SQLAlchemyError) as error:
        raise click.ClickException(str(error).splitlines()[0])


CLI_COMMANDS = {
    'dialect': dialect_cli,
    'query': query_cli,
    'check': check_cli,
}


@click.group(commands=CLI_COMMANDS)
@click.option(
    '-l',
    '--log-level',
    type=(str, click.Choice(anydb_logging.LEVELS)),
    multiple=True,
    help=(
        'Module name followed by one of '
        '[DEBUG, INFO, WARNING, ERROR, CRITICAL]. '
        'Multiple pairs allowed.'
    ),
)
@click.pass_context
def cli(ctx, log_level):
    """Query relational databases."""
    anydb_logging.setup()
    for module, level in log_level:
        anydb_logging.set_log_level(module, level)


if __name__ == '__main__':
    cli()
