from __future__ import annotations

from typing import Any, Dict

import pymysql

from querypilot.app.connectors.base import BaseConnector, ExecuteResult, to_row


class MySQLConnector(BaseConnector):
    KIND = "mysql"
    DIALECT = "mysql"

    def connect(self) -> None:
        c = self.config
        self._conn = pymysql.connect(
            host=c.get("host", "localhost"),
            port=int(c.get("port") or 3306),
            user=c.get("user"),
            password=c.get("password") or "",
            database=c.get("database"),
            autocommit=True,
            connect_timeout=5,
        )

    def execute(self, sql: str) -> ExecuteResult:
        conn = self._require()
        with self._lock, conn.cursor() as cur:
            affected = cur.execute(sql)
            if cur.description:
                cols = [d[0] for d in cur.description]
                return [to_row(cols, r) for r in cur.fetchall()]
            return {"affectedRows": affected, "insertId": cur.lastrowid}

    def describe_schema(self) -> Dict[str, Any]:
        conn = self._require()
        with self._lock, conn.cursor() as cur:
            cur.execute(
                """
                SELECT TABLE_NAME
                FROM INFORMATION_SCHEMA.TABLES
                WHERE TABLE_SCHEMA = DATABASE() AND TABLE_TYPE = 'BASE TABLE'
                ORDER BY TABLE_NAME
            """
            )
            names = [r[0] for r in cur.fetchall()]
            tables = []
            for name in names:
                cur.execute(
                    """
                    SELECT COLUMN_NAME, COLUMN_TYPE, IS_NULLABLE, COLUMN_KEY
                    FROM INFORMATION_SCHEMA.COLUMNS
                    WHERE TABLE_SCHEMA = DATABASE() AND TABLE_NAME = %s
                    ORDER BY ORDINAL_POSITION
                """,
                    (name,),
                )
                cols = [
                    {
                        "name": r[0],
                        "type": r[1],
                        "nullable": r[2] == "YES",
                        "primary_key": r[3] == "PRI",
                    }
                    for r in cur.fetchall()
                ]
                tables.append({"name": name, "columns": cols})
        return {"tables": tables}
