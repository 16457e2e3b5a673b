from __future__ import annotations

import sqlite3
from typing import Any, Dict

from querypilot.app.connectors.base import BaseConnector, ExecuteResult, to_row


class SQLiteConnector(BaseConnector):
    KIND = "sqlite"
    DIALECT = "sqlite"

    def connect(self) -> None:
        path = self.config.get("path")
        if not path:
            raise ValueError("SQLite path is required")
        conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
        conn.execute("PRAGMA journal_mode = WAL")
        self._conn = conn

    def execute(self, sql: str) -> ExecuteResult:
        conn = self._require()
        with self._lock:
            cur = conn.execute(sql)
            try:
                if cur.description:
                    cols = [d[0] for d in cur.description]
                    return [to_row(cols, r) for r in cur.fetchall()]
                return {"changes": cur.rowcount, "lastInsertRowid": cur.lastrowid}
            finally:
                cur.close()

    def describe_schema(self) -> Dict[str, Any]:
        conn = self._require()
        with self._lock:
            names = [
                r[0]
                for r in conn.execute(
                    "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
                ).fetchall()
            ]
            tables = []
            for name in names:
                quoted = '"' + name.replace('"', '""') + '"'
                # cid, name, type, notnull, dflt_value, pk
                info = conn.execute(f"PRAGMA table_info({quoted})").fetchall()
                tables.append(
                    {
                        "name": name,
                        "columns": [
                            {
                                "name": c[1],
                                "type": c[2],
                                "nullable": c[3] == 0,
                                "primary_key": c[5] > 0,
                            }
                            for c in info
                        ],
                    }
                )
        return {"tables": tables}
