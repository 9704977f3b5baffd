#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import tempfile
from unittest import TestCase, main

from anydb_sql.commons.errors import ConfigurationError, DatabaseClosedError
from anydb_sql.database import Database
from anydb_sql.pools.context import Connection, Transaction

USERS = {
    'name': 'users',
    'columns': [
        {'name': 'id', 'data_type': 'integer', 'primary_key': True},
        {'name': 'login', 'data_type': 'text'},
    ],
}


class LifecycleTest(TestCase):

    def test_dialect(self):
        with Database('sqlite3://') as db:
            self.assertEqual('sqlite', db.dialect)
            self.assertFalse(db.closed)
        self.assertTrue(db.closed)

    def test_open_is_idempotent(self):
        db = Database('sqlite3://')
        pool = db.pool
        db.open()
        self.assertIs(pool, db.pool)
        db.close()

    def test_close(self):
        db = Database('sqlite3://')
        calls = []
        db.close(lambda *args: calls.append(args))
        db.close(lambda *args: calls.append(args))
        self.assertEqual([(None, None), (None, None)], calls)
        self.assertEqual('<Database sqlite closed>', repr(db))

    def test_queries_fail_after_close(self):
        db = Database('sqlite3://')
        db.close()
        calls = []
        db.query('SELECT 1', callback=lambda *args: calls.append(args))

        self.assertEqual(1, len(calls))
        self.assertIsInstance(calls[0][0], DatabaseClosedError)
        with self.assertRaises(DatabaseClosedError):
            db.query('SELECT 1')
        with self.assertRaises(DatabaseClosedError):
            db.begin()
        with self.assertRaises(DatabaseClosedError):
            db.connect()

    def test_reopen(self):
        db = Database('sqlite3://')
        db.close()
        db.open()
        self.assertEqual([{'one': 1}], db.query('SELECT 1 AS one').rows)
        db.close()

    def test_from_config(self):
        db = Database.from_config({'url': 'sqlite3://', 'connections': {'max': 2}})
        self.assertEqual(2, db.connections['max'])
        self.assertEqual(1, db.connections['min'])
        db.close()

    def test_from_config_without_url(self):
        with self.assertRaises(ConfigurationError):
            Database.from_config({'connections': {}})

    def test_file_database(self):
        with tempfile.TemporaryDirectory() as directory:
            path = os.path.join(directory, 'test.db')
            with Database('sqlite3:///' + path, {'max': 2}) as db:
                db.query('CREATE TABLE t (x INTEGER)')
                db.query('INSERT INTO t VALUES (?)', [7])
                self.assertEqual([{'x': 7}], db.query('SELECT x FROM t').rows)
                self.assertEqual(
                    [{'foreign_keys': 1}], db.query('PRAGMA foreign_keys').rows
                )


class ContextTest(TestCase):

    def setUp(self):
        self.db = Database('sqlite3://')
        self.users = self.db.define(USERS)
        self.users.create().exec()

    def tearDown(self):
        self.db.close()

    def _logins(self):
        return [row['login'] for row in self.users.select().exec().rows]

    def test_raw_query(self):
        result = self.db.query('INSERT INTO users (id, login) VALUES (?, ?)', [1, 'a'])
        self.assertEqual(1, result.rowcount)
        self.assertEqual(1, result.lastrowid)
        self.assertIsNone(result.rows)

    def test_connection_commits_each_statement(self):
        connection = self.db.connect()
        self.assertIsInstance(connection, Connection)
        self.users.insert(id=1, login='a').exec(connection)
        connection.close()

        self.assertTrue(connection.closed)
        self.assertEqual(['a'], self._logins())
        with self.assertRaises(DatabaseClosedError):
            self.users.select().exec(connection)

    def test_transaction_commit(self):
        transaction = self.db.begin()
        self.assertIsInstance(transaction, Transaction)
        self.users.insert(id=1, login='a').exec(transaction)

        seen = []
        self.users.select().exec(transaction, lambda error, rows: seen.extend(rows))
        self.assertEqual([{'id': 1, 'login': 'a'}], seen)

        transaction.commit()
        self.assertEqual(['a'], self._logins())

    def test_transaction_rollback(self):
        transaction = self.db.begin()
        self.users.insert(id=1, login='a').exec(transaction)
        transaction.rollback()
        self.assertEqual([], self._logins())

    def test_transaction_rejects_queries_once_done(self):
        transaction = self.db.begin()
        transaction.commit()

        errors = []
        self.users.select().exec(transaction, lambda error, rows: errors.append(error))
        self.assertIsInstance(errors[0], DatabaseClosedError)
        with self.assertRaises(DatabaseClosedError):
            transaction.commit()

    def test_begin_with_callback(self):
        calls = []
        self.db.begin(lambda *args: calls.append(args))
        error, transaction = calls[0]
        self.assertIsNone(error)
        self.assertIs(transaction, transaction.begin())
        transaction.close()
        self.assertTrue(transaction.closed)

    def test_connection_to_transaction(self):
        connection = self.db.connect()
        transaction = connection.begin()
        self.assertTrue(connection.closed)
        self.users.insert(id=2, login='b').exec(transaction)
        transaction.commit()
        self.assertEqual(['b'], self._logins())


if __name__ == '__main__':
    main()
