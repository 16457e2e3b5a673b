from __future__ import annotations

from typing import Any, Dict

import psycopg

from querypilot.app.connectors.base import BaseConnector, ExecuteResult, to_row


class PostgresConnector(BaseConnector):
    KIND = "postgresql"
    DIALECT = "postgres"

    def connect(self) -> None:
        c = self.config
        self._conn = psycopg.connect(
            host=c.get("host", "localhost"),
            port=int(c.get("port") or 5432),
            dbname=c.get("database"),
            user=c.get("user"),
            password=c.get("password"),
            sslmode=c.get("sslmode", "prefer"),
            connect_timeout=10,
            autocommit=True,
        )

    def execute(self, sql: str) -> ExecuteResult:
        conn = self._require()
        with self._lock, conn.cursor() as cur:
            cur.execute(sql)
            if cur.description:
                cols = [d.name for d in cur.description]
                return [to_row(cols, r) for r in cur.fetchall()]
            return {"rowcount": cur.rowcount, "statusmessage": cur.statusmessage}

    def describe_schema(self) -> Dict[str, Any]:
        conn = self._require()
        with self._lock, conn.cursor() as cur:
            cur.execute(
                """
                select table_name
                from information_schema.tables
                where table_schema = 'public' and table_type = 'BASE TABLE'
                order by table_name
            """
            )
            names = [r[0] for r in cur.fetchall()]
            tables = []
            for name in names:
                cur.execute(
                    """
                    select c.column_name, c.data_type, c.is_nullable,
                      exists (
                        select 1
                        from information_schema.table_constraints tc
                        join information_schema.key_column_usage k
                          on tc.constraint_name = k.constraint_name
                         and tc.table_schema = k.table_schema
                        where tc.constraint_type = 'PRIMARY KEY'
                          and tc.table_schema = c.table_schema
                          and tc.table_name = c.table_name
                          and k.column_name = c.column_name
                      )
                    from information_schema.columns c
                    where c.table_schema = 'public' and c.table_name = %s
                    order by c.ordinal_position
                """,
                    (name,),
                )
                cols = [
                    {
                        "name": r[0],
                        "type": r[1],
                        "nullable": r[2] == "YES",
                        "primary_key": bool(r[3]),
                    }
                    for r in cur.fetchall()
                ]
                tables.append({"name": name, "columns": cols})
        return {"tables": tables}
