"""Storage for tracked and banned users.

Every function opens its own connection and runs a single parameterized
statement. The SQL is written once with ``?`` placeholders and works on
both SQLite (local runs, tests) and PostgreSQL (``DATABASE_URL``).
"""

import sqlite3

import config
import db_pg

DB_PATH = config.SQLITE_PATH


def get_db():
    if config.DATABASE_URL:
        return db_pg.get_db()
    return sqlite3.connect(DB_PATH)


def setup_db():
    conn = get_db()
    conn.execute(
        '''
        CREATE TABLE IF NOT EXISTS active_users (
            user_id BIGINT PRIMARY KEY,
            first_seen TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            last_seen TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        '''
    )
    conn.execute(
        '''
        CREATE TABLE IF NOT EXISTS banned_users (
            user_id BIGINT PRIMARY KEY,
            banned_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
        '''
    )
    conn.commit()
    conn.close()


def record_activity(user_id: int) -> None:
    conn = get_db()
    conn.execute(
        (
            'INSERT INTO active_users (user_id, first_seen, last_seen) '
            'VALUES (?, CURRENT_TIMESTAMP, CURRENT_TIMESTAMP) '
            'ON CONFLICT (user_id) '
            'DO UPDATE SET last_seen=CURRENT_TIMESTAMP'
        ),
        (user_id,),
    )
    conn.commit()
    conn.close()


def count_active_users() -> int:
    conn = get_db()
    cur = conn.execute('SELECT COUNT(*) FROM active_users')
    row = cur.fetchone()
    conn.close()
    return int(row[0]) if row else 0


def list_active_user_ids() -> list[int]:
    conn = get_db()
    cur = conn.execute('SELECT user_id FROM active_users ORDER BY first_seen, user_id')
    rows = cur.fetchall()
    conn.close()
    return [row[0] for row in rows]


def get_activity(user_id: int):
    """Return ``(first_seen, last_seen)`` for a tracked user or ``None``."""
    conn = get_db()
    cur = conn.execute(
        'SELECT first_seen, last_seen FROM active_users WHERE user_id=?',
        (user_id,),
    )
    row = cur.fetchone()
    conn.close()
    return (row[0], row[1]) if row else None


def ban(user_id: int) -> None:
    conn = get_db()
    conn.execute(
        'INSERT INTO banned_users (user_id) VALUES (?) ON CONFLICT DO NOTHING',
        (user_id,),
    )
    conn.commit()
    conn.close()


def unban(user_id: int) -> None:
    conn = get_db()
    conn.execute('DELETE FROM banned_users WHERE user_id=?', (user_id,))
    conn.commit()
    conn.close()


def is_banned(user_id: int) -> bool:
    conn = get_db()
    cur = conn.execute('SELECT 1 FROM banned_users WHERE user_id=?', (user_id,))
    row = cur.fetchone()
    conn.close()
    return row is not None


def list_banned_user_ids() -> list[int]:
    conn = get_db()
    cur = conn.execute('SELECT user_id FROM banned_users ORDER BY banned_at, user_id')
    rows = cur.fetchall()
    conn.close()
    return [row[0] for row in rows]
