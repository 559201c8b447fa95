"""Copy tracked and banned users from the local SQLite file to PostgreSQL.

Run once when moving a deployment from ``botdb.sqlite`` to ``DATABASE_URL``.
Rows that already exist in PostgreSQL are left untouched.
"""

import logging
import sqlite3
import sys

import psycopg2

import config

TABLES = {
    'active_users': ('user_id', 'first_seen', 'last_seen'),
    'banned_users': ('user_id', 'banned_at'),
}


def create_tables(pg_cur):
    pg_cur.execute("""
    CREATE TABLE IF NOT EXISTS active_users (
        user_id BIGINT PRIMARY KEY,
        first_seen TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        last_seen TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """)
    pg_cur.execute("""
    CREATE TABLE IF NOT EXISTS banned_users (
        user_id BIGINT PRIMARY KEY,
        banned_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """)


def copy_table(sqlite_conn, pg_conn, table: str) -> int:
    cols = TABLES[table]
    col_list = ', '.join(cols)
    rows = sqlite_conn.execute(f'SELECT {col_list} FROM {table}').fetchall()
    placeholders = ','.join(['%s'] * len(cols))
    insert_q = f'INSERT INTO {table} ({col_list}) VALUES ({placeholders}) ON CONFLICT (user_id) DO NOTHING'
    copied = 0
    pg_cur = pg_conn.cursor()
    for row in rows:
        try:
            pg_cur.execute(insert_q, row)
            pg_conn.commit()
            copied += pg_cur.rowcount
        except psycopg2.Error as e:
            pg_conn.rollback()
            logging.warning("Failed to copy %s row %s: %s", table, row, e)
    return copied


def main(sqlite_path: str = config.SQLITE_PATH, dsn: str = config.DATABASE_URL) -> int:
    if not dsn:
        logging.error("DATABASE_URL environment variable is not set!")
        return 1
    pg_conn = psycopg2.connect(dsn)
    sqlite_conn = sqlite3.connect(sqlite_path)
    try:
        pg_cur = pg_conn.cursor()
        create_tables(pg_cur)
        pg_conn.commit()
        for table in TABLES:
            copied = copy_table(sqlite_conn, pg_conn, table)
            logging.info("Copied %s rows into %s", copied, table)
    finally:
        pg_conn.close()
        sqlite_conn.close()
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    sys.exit(main())
