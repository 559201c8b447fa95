import psycopg2

import config


class PGCursor:
    def __init__(self, cur):
        self._cur = cur
    def execute(self, query, params=None):
        if params is None:
            params = ()
        # Queries are shared with the SQLite backend and use ``?``
        # placeholders. psycopg2 expects ``%s`` and treats any other percent
        # sign as a formatting token, so escape those first.
        query = query.replace('%', '%%').replace('?', '%s')
        self._cur.execute(query, params)
    def fetchone(self):
        return self._cur.fetchone()
    def fetchall(self):
        return self._cur.fetchall()
class PGConnection:
    def __init__(self, conn):
        self._conn = conn
    def cursor(self):
        return PGCursor(self._conn.cursor())
    def execute(self, query, params=None):
        cur = self.cursor()
        cur.execute(query, params)
        return cur
    def commit(self):
        self._conn.commit()
    def close(self):
        self._conn.close()


def get_db(dsn: str | None = None) -> PGConnection:
    return PGConnection(psycopg2.connect(dsn or config.DATABASE_URL))
